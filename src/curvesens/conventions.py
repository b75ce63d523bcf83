"""
Day counts, business day rules and schedule conventions.

Curves measure time in year fractions from the valuation date, so every
date-to-time conversion goes through `year_fraction` or its signed variant
`relative_year_fraction`. Calendars are weekend-only unless a holiday set
is supplied.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, Optional
import calendar


class DayCount(Enum):
    """Day count convention, valued by its market name."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """
        Parse a day count name.

        Separators and case are ignored, and "ACT/365F" reads as ACT/365.
        """
        key = s.upper().replace(" ", "").replace("/", "")
        if key.endswith("365F"):
            key = key[:-1]
        for member in cls:
            if member.value.replace("/", "") == key:
                return member
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Roll rule for dates falling on a non-business day."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


@dataclass(frozen=True)
class Conventions:
    """
    Schedule conventions of a leg or a bond.

    Attributes:
        day_count: Accrual day count
        business_day: Roll rule for accrual and payment dates
        payment_frequency: Periods per year, a divisor of 12
    """
    day_count: DayCount = DayCount.ACT_360
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING
    payment_frequency: int = 1

    def __post_init__(self):
        if self.payment_frequency <= 0 or 12 % self.payment_frequency != 0:
            raise ValueError(f"Unsupported payment frequency: {self.payment_frequency}")

    @property
    def months_per_period(self) -> int:
        return 12 // self.payment_frequency

    @classmethod
    def usd_treasury(cls) -> "Conventions":
        """Semi-annual ACT/ACT coupons rolled following, as for US Treasuries."""
        return cls(DayCount.ACT_ACT, BusinessDayConvention.FOLLOWING, 2)

    @classmethod
    def usd_swap(cls) -> "Conventions":
        """Semi-annual 30/360 fixed leg, modified following."""
        return cls(DayCount.THIRTY_360, BusinessDayConvention.MODIFIED_FOLLOWING, 2)


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def _act_act_isda(start: date, end: date) -> float:
    # each calendar year contributes its days over its own length
    total = 0.0
    period_start = start
    while period_start < end:
        next_year = date(period_start.year + 1, 1, 1)
        period_end = min(end, next_year)
        total += (period_end - period_start).days / _days_in_year(period_start.year)
        period_start = period_end
    return total


def _thirty_360_us(start: date, end: date) -> float:
    d1 = min(start.day, 30)
    d2 = 30 if (end.day == 31 and d1 == 30) else end.day
    days = 360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)
    return days / 360.0


_YEAR_FRACTIONS: Dict[DayCount, Callable[[date, date], float]] = {
    DayCount.ACT_360: lambda s, e: (e - s).days / 360.0,
    DayCount.ACT_365: lambda s, e: (e - s).days / 365.0,
    DayCount.ACT_ACT: _act_act_isda,
    DayCount.THIRTY_360: _thirty_360_us,
}


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Accrual year fraction between two dates.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction, 0.0 when end is not after start
    """
    if day_count not in _YEAR_FRACTIONS:
        raise ValueError(f"Unknown day count: {day_count}")
    if start >= end:
        return 0.0
    return _YEAR_FRACTIONS[day_count](start, end)


def relative_year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Signed year fraction: negative when end is before start.

    Curves measure time relative to the valuation date, so a date in the
    past maps onto a negative abscissa rather than being clipped to zero.
    """
    if start is None or end is None:
        raise ValueError("Dates must not be None")
    if end >= start:
        return year_fraction(start, end, day_count)
    return -year_fraction(end, start, day_count)


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """Weekdays not in the holiday set are business days."""
    return d.weekday() < 5 and not (holidays and d in holidays)


def _roll(d: date, step: int, holidays: Optional[set]) -> date:
    while not is_business_day(d, holidays):
        d += timedelta(days=step)
    return d


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Roll a date onto a business day.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date; business days are returned unchanged
    """
    if convention == BusinessDayConvention.UNADJUSTED:
        return d
    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    adjusted = _roll(d, 1, holidays)
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING and adjusted.month != d.month:
        return _roll(d, -1, holidays)
    return adjusted


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "Conventions",
    "year_fraction",
    "relative_year_fraction",
    "is_business_day",
    "adjust_business_day",
]
