"""
Unit tests for dates module.
"""

from datetime import date
import pytest

from curvesens.conventions import BusinessDayConvention, Conventions, DayCount
from curvesens.dates import DateUtils, ScheduleInfo, add_months, generate_schedule_info, unadjusted_schedule


class TestDateUtils:
    """Tests for DateUtils class."""

    def test_parse_tenor(self):
        """Test parsing tenors of every unit."""
        assert DateUtils.parse_tenor("3M") == (3, 'M')
        assert DateUtils.parse_tenor("10Y") == (10, 'Y')
        assert DateUtils.parse_tenor("2W") == (2, 'W')
        assert DateUtils.parse_tenor("30D") == (30, 'D')

    def test_parse_tenor_lowercase(self):
        """Test parsing lowercase tenors."""
        assert DateUtils.parse_tenor("3m") == (3, 'M')
        assert DateUtils.parse_tenor("5y") == (5, 'Y')

    def test_parse_tenor_invalid(self):
        """Test invalid tenor raises error."""
        with pytest.raises(ValueError):
            DateUtils.parse_tenor("invalid")
        with pytest.raises(ValueError):
            DateUtils.parse_tenor("3X")

    def test_add_tenor_months(self):
        """Test adding month tenors."""
        base = date(2024, 1, 15)
        assert DateUtils.add_tenor(base, "3M") == date(2024, 4, 15)
        assert DateUtils.add_tenor(base, "6M") == date(2024, 7, 15)

    def test_add_tenor_years(self):
        """Test adding year tenors."""
        base = date(2024, 1, 15)
        assert DateUtils.add_tenor(base, "1Y") == date(2025, 1, 15)
        assert DateUtils.add_tenor(base, "5Y") == date(2029, 1, 15)

    def test_add_tenor_weeks(self):
        """Test adding week tenors."""
        base = date(2024, 1, 15)
        assert DateUtils.add_tenor(base, "1W") == date(2024, 1, 22)

    def test_add_tenor_business_days(self):
        """Day tenors skip weekends: Friday + 1D is Monday."""
        assert DateUtils.add_tenor(date(2024, 1, 19), "1D") == date(2024, 1, 22)

    def test_add_tenor_end_of_month(self):
        """Month arithmetic clips to the end of a shorter month."""
        assert DateUtils.add_tenor(date(2024, 1, 31), "1M") == date(2024, 2, 29)
        assert DateUtils.add_tenor(date(2023, 1, 31), "1M") == date(2023, 2, 28)

    def test_tenor_to_years(self):
        """Test converting tenor to years."""
        assert abs(DateUtils.tenor_to_years("1Y") - 1.0) < 1e-10
        assert abs(DateUtils.tenor_to_years("6M") - 0.5) < 1e-10
        assert abs(DateUtils.tenor_to_years("1W") - 7 / 365) < 1e-10

    def test_tenor_to_years_days(self):
        assert DateUtils.tenor_to_years("30D") == pytest.approx(30 / 365)


class TestMonthArithmetic:
    """Tests for month shifts and unadjusted schedules."""

    def test_add_months_across_year(self):
        assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 15), -6) == date(2023, 7, 15)

    def test_unadjusted_schedule(self):
        """Dates run from start to end inclusive."""
        dates = unadjusted_schedule(date(2024, 1, 15), date(2027, 1, 15), 12)
        assert dates == [date(2024, 1, 15), date(2025, 1, 15), date(2026, 1, 15), date(2027, 1, 15)]


class TestScheduleGeneration:
    """Tests for accrual schedule generation."""

    def test_semi_annual_schedule(self):
        schedule = generate_schedule_info(
            date(2024, 1, 15), date(2026, 1, 15), Conventions.usd_treasury()
        )

        assert isinstance(schedule, ScheduleInfo)
        assert len(schedule) == 4
        assert schedule.accrual_starts[0] == date(2024, 1, 15)
        assert schedule.payment_dates[-1] == date(2026, 1, 15)
        assert schedule.day_count == DayCount.ACT_ACT
        # Periods chain end to start
        assert schedule.accrual_starts[1:] == schedule.accrual_ends[:-1]

    def test_adjusted_and_unadjusted_ends(self):
        """An end date on a Saturday is adjusted, the unadjusted date is kept."""
        schedule = generate_schedule_info(
            date(2024, 2, 5), date(2024, 8, 3), Conventions.usd_treasury()
        )

        assert len(schedule) == 1
        assert schedule.unadjusted_ends[0] == date(2024, 8, 3)
        assert schedule.accrual_ends[0] == date(2024, 8, 5)

    def test_front_stub(self):
        """Dates roll back from the end, leaving a short first period."""
        conv = Conventions(DayCount.ACT_360, BusinessDayConvention.UNADJUSTED, 4)
        schedule = generate_schedule_info(date(2024, 1, 15), date(2024, 12, 15), conv)

        assert schedule.unadjusted_starts == [
            date(2024, 1, 15), date(2024, 3, 15), date(2024, 6, 15), date(2024, 9, 15)
        ]
        assert schedule.year_fractions[0] == pytest.approx(60 / 360)

    def test_end_before_start(self):
        with pytest.raises(ValueError):
            generate_schedule_info(date(2024, 1, 15), date(2024, 1, 15), Conventions.usd_swap())
