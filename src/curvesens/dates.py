"""
Tenors and accrual schedules.

Tenors are strings such as "1D", "3M" or "10Y". Schedules roll backward
from the maturity, so a broken period becomes a short first period.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple
import calendar
import re

from .conventions import Conventions, DayCount, adjust_business_day, is_business_day, year_fraction


class DateUtils:
    """Tenor parsing and date arithmetic."""

    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$')

    # Approximate length of one tenor unit in years
    UNIT_YEARS = {'D': 1 / 365.0, 'W': 7 / 365.0, 'M': 1 / 12.0, 'Y': 1.0}

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Split a tenor into its count and unit.

        Args:
            tenor: Tenor like "1D", "3m", "2Y"

        Returns:
            (amount, unit) with unit one of D/W/M/Y

        Raises:
            ValueError: If the tenor is not a count followed by a unit
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.strip().upper())
        if match is None:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
        return int(match.group(1)), match.group(2)

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date.

        Day tenors count business days; week, month and year tenors are
        calendar arithmetic with end-of-month clipping and no adjustment.
        """
        amount, unit = DateUtils.parse_tenor(tenor)
        if unit == 'W':
            return start + timedelta(weeks=amount)
        if unit == 'M':
            return add_months(start, amount)
        if unit == 'Y':
            return add_months(start, 12 * amount)

        result = start
        for _ in range(amount):
            result += timedelta(days=1)
            while not is_business_day(result, holidays):
                result += timedelta(days=1)
        return result

    @staticmethod
    def tenor_to_years(tenor: str) -> float:
        amount, unit = DateUtils.parse_tenor(tenor)
        return amount * DateUtils.UNIT_YEARS[unit]


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clipping the day to the length of the target month."""
    index = d.year * 12 + d.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


@dataclass(frozen=True)
class ScheduleInfo:
    """Accrual periods of a schedule, adjusted and unadjusted."""
    unadjusted_starts: List[date]
    unadjusted_ends: List[date]
    accrual_starts: List[date]
    accrual_ends: List[date]
    year_fractions: List[float]
    day_count: DayCount

    def __len__(self) -> int:
        return len(self.accrual_starts)

    @property
    def payment_dates(self) -> List[date]:
        """Payments are made at the adjusted end of each accrual period."""
        return list(self.accrual_ends)


def unadjusted_schedule(start: date, end: date, months_per_period: int) -> List[date]:
    """Schedule dates from start to end inclusive, rolled backward from end."""
    dates = [end]
    n = 1
    while True:
        previous = add_months(end, -n * months_per_period)
        if previous <= start:
            break
        dates.append(previous)
        n += 1
    dates.append(start)
    return dates[::-1]


def generate_schedule_info(
    start: date,
    end: date,
    conventions: Conventions,
    holidays: Optional[set] = None
) -> ScheduleInfo:
    """
    Generate the accrual periods between start and end.

    Args:
        start: Accrual start of the first period
        end: Maturity (unadjusted end of the last period)
        conventions: Frequency, business day rule and day count
        holidays: Holiday calendar

    Returns:
        ScheduleInfo with one entry per period
    """
    if end <= start:
        raise ValueError(f"Schedule end {end} must be after start {start}")

    unadjusted = unadjusted_schedule(start, end, conventions.months_per_period)
    adjusted = [adjust_business_day(d, conventions.business_day, holidays) for d in unadjusted]

    return ScheduleInfo(
        unadjusted_starts=unadjusted[:-1],
        unadjusted_ends=unadjusted[1:],
        accrual_starts=adjusted[:-1],
        accrual_ends=adjusted[1:],
        year_fractions=[
            year_fraction(s, e, conventions.day_count) for s, e in zip(adjusted[:-1], adjusted[1:])
        ],
        day_count=conventions.day_count
    )


__all__ = [
    "DateUtils",
    "ScheduleInfo",
    "add_months",
    "unadjusted_schedule",
    "generate_schedule_info",
]
