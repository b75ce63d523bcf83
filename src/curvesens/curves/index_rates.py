"""
Ibor index forward rates.

An index curve is held as discount factors; the forward rate of an Ibor
fixing is the simple rate implied between the fixing date and its tenor
maturity:

    rate = (df(start) / df(end) - 1) / tau

with tau the accrual factor in the index day count. Fixings are assumed to
start on the fixing date, without spot lag.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..conventions import DayCount, year_fraction
from ..dates import DateUtils
from ..risk.parameter_sensitivity import CurveCurrencyParameterSensitivity
from ..risk.point_sensitivity import PointSensitivities, ZeroRateSensitivity
from .discount_factors import DiscountFactors


@dataclass(frozen=True)
class IborIndex:
    """
    An Ibor-style rate index.

    Attributes:
        name: Index name, e.g. "USD-LIBOR-3M"
        currency: Currency of the index
        tenor: Tenor of the underlying deposit
        day_count: Day count of the index accrual
    """
    name: str
    currency: str
    tenor: str = "3M"
    day_count: DayCount = DayCount.ACT_360

    def __post_init__(self):
        if not self.name:
            raise ValueError("Index name must not be empty")
        if not self.currency:
            raise ValueError("Index currency must not be empty")
        # validate the tenor eagerly
        DateUtils.parse_tenor(self.tenor)

    def maturity_date(self, fixing_date: date) -> date:
        return DateUtils.add_tenor(fixing_date, self.tenor)

    def accrual_factor(self, fixing_date: date) -> float:
        return year_fraction(fixing_date, self.maturity_date(fixing_date), self.day_count)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IborIndexRates:
    """
    Forward rates of an Ibor index read from an index curve.

    Attributes:
        index: The index
        discount_factors: Discount factors of the index curve
    """
    index: IborIndex
    discount_factors: DiscountFactors

    def __post_init__(self):
        if self.index is None:
            raise ValueError("Index must not be None")
        if self.discount_factors is None:
            raise ValueError("Discount factors must not be None")

    @property
    def valuation_date(self) -> date:
        return self.discount_factors.valuation_date

    @property
    def curve_name(self) -> str:
        return self.discount_factors.curve_name

    def _check_fixing(self, fixing_date: date) -> None:
        if fixing_date is None:
            raise ValueError("Fixing date must not be None")
        if fixing_date < self.valuation_date:
            raise ValueError(
                f"Fixing date {fixing_date} of {self.index} is before the valuation date "
                f"{self.valuation_date}; historic fixings are not available"
            )

    def rate(self, fixing_date: date) -> float:
        """
        Forward rate of the index for a fixing date.

        Args:
            fixing_date: Fixing date, on or after the valuation date

        Returns:
            Simple forward rate over the index tenor
        """
        self._check_fixing(fixing_date)
        end = self.index.maturity_date(fixing_date)
        tau = self.index.accrual_factor(fixing_date)
        df_start = self.discount_factors.discount_factor(fixing_date)
        df_end = self.discount_factors.discount_factor(end)
        return (df_start / df_end - 1.0) / tau

    def rate_point_sensitivity(
        self,
        fixing_date: date,
        sensitivity_currency: Optional[str] = None
    ) -> PointSensitivities:
        """
        Sensitivity of the forward rate to the index curve zero rates.

        Returns:
            Two zero-rate sensitivities, at the fixing date and at maturity
        """
        self._check_fixing(fixing_date)
        end = self.index.maturity_date(fixing_date)
        inv_tau = 1.0 / self.index.accrual_factor(fixing_date)
        df_start = self.discount_factors.discount_factor(fixing_date)
        df_end = self.discount_factors.discount_factor(end)
        currency = sensitivity_currency or self.index.currency

        start_sens = self.discount_factors.zero_rate_point_sensitivity(fixing_date, currency)
        end_sens = self.discount_factors.zero_rate_point_sensitivity(end, currency)
        return PointSensitivities.of(
            start_sens.multiplied_by(inv_tau / df_end),
            end_sens.multiplied_by(-inv_tau * df_start / (df_end * df_end))
        )

    def curve_parameter_sensitivity(
        self,
        point: ZeroRateSensitivity
    ) -> CurveCurrencyParameterSensitivity:
        return self.discount_factors.curve_parameter_sensitivity(point)

    def with_discount_factors(self, discount_factors: DiscountFactors) -> "IborIndexRates":
        return replace(self, discount_factors=discount_factors)


__all__ = ["IborIndex", "IborIndexRates"]
