"""
Discount factors derived from a curve.

A DiscountFactors object binds a curve to a currency and a valuation date and
turns dates into discount factors:
- ZeroRateDiscountFactors: curve values are continuously compounded zero rates
- SimpleDiscountFactors: curve values are discount factors

Time is the signed year fraction from the valuation date measured with the
day count of the curve metadata.

Sensitivity convention: zero_rate_point_sensitivity(date) carries the
derivative of the discount factor with respect to the zero rate at that
date, i.e. -t * df. Callers multiply it by cash amounts only.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional
import logging
import math

import numpy as np

from ..conventions import relative_year_fraction
from ..risk.parameter_sensitivity import CurveCurrencyParameterSensitivity
from ..risk.point_sensitivity import ZeroRateSensitivity
from .curve import InterpolatedNodalCurve, ValueType

logger = logging.getLogger(__name__)

# Year fractions below this are treated as the valuation date itself
EFFECTIVE_ZERO = 1e-10


@dataclass(frozen=True)
class DiscountFactors(ABC):
    """
    Abstract base class for discount factors on a single curve.

    Attributes:
        currency: Currency the curve discounts
        valuation_date: Date at which discount factors equal one
        curve: Underlying curve
    """
    currency: str
    valuation_date: date
    curve: InterpolatedNodalCurve

    def __post_init__(self):
        if not self.currency:
            raise ValueError("Currency must not be empty")
        if self.valuation_date is None:
            raise ValueError("Valuation date must not be None")
        if self.curve is None:
            raise ValueError("Curve must not be None")
        if self.curve.parameter_count < 1:
            raise ValueError(f"Curve {self.curve.name} has no nodes")
        metadata = self.curve.metadata
        if metadata.day_count is None:
            raise ValueError(f"Curve {metadata.name} must define a day count")
        if metadata.x_value_type != ValueType.YEAR_FRACTION:
            raise ValueError(
                f"Curve {metadata.name} x values must be year fractions, "
                f"got {metadata.x_value_type.value}"
            )
        self._check_curve()

    @property
    def curve_name(self) -> str:
        return self.curve.name

    @property
    def parameter_count(self) -> int:
        return self.curve.parameter_count

    def relative_year_fraction(self, d: date) -> float:
        """Signed year fraction from the valuation date to d."""
        if d is None:
            raise ValueError("Date must not be None")
        return relative_year_fraction(self.valuation_date, d, self.curve.metadata.day_count)

    def discount_factor(self, d: date) -> float:
        """
        Discount factor at a date.

        Returns exactly 1.0 on the valuation date.
        """
        t = self.relative_year_fraction(d)
        if t == 0.0:
            return 1.0
        return self._discount_factor_at(t)

    @abstractmethod
    def zero_rate(self, d: date) -> float:
        """Continuously compounded zero rate at a date."""
        pass

    def discount_factor_with_spread(
        self,
        d: date,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0
    ) -> float:
        """
        Discount factor with a z-spread on the zero rate.

        Continuous: exp(-(z + s) t).
        Periodic: (exp(z/m) + s/m)^(-m t), i.e. the spread is added to the
        zero rate re-expressed with m periods per year.

        Args:
            d: Date to discount from
            z_spread: Spread, in decimal
            periodic: Whether the spread is periodically compounded
            periods_per_year: Compounding periods per year, used only if periodic

        Returns:
            Discount factor, 1.0 on the valuation date
        """
        t = self.relative_year_fraction(d)
        if abs(t) < EFFECTIVE_ZERO:
            return 1.0
        z = self.zero_rate(d)
        if not periodic:
            return math.exp(-(z + z_spread) * t)
        m = self._check_periods(periods_per_year)
        return self._periodic_base(z, z_spread, m) ** (-m * t)

    def zero_rate_point_sensitivity(
        self,
        d: date,
        sensitivity_currency: Optional[str] = None
    ) -> ZeroRateSensitivity:
        """
        Sensitivity of the discount factor at d to the zero rate at d.

        The amount is d(df)/dz = -t * df, zero on the valuation date.

        Args:
            d: Date of the discount factor
            sensitivity_currency: Currency of the sensitivity, curve currency if None

        Returns:
            ZeroRateSensitivity on this curve
        """
        t = self.relative_year_fraction(d)
        amount = 0.0 if t == 0.0 else -t * self.discount_factor(d)
        return ZeroRateSensitivity(
            self.curve_name, d, sensitivity_currency or self.currency, amount
        )

    def zero_rate_point_sensitivity_with_spread(
        self,
        d: date,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0,
        sensitivity_currency: Optional[str] = None
    ) -> ZeroRateSensitivity:
        """
        Sensitivity of the spread discount factor at d to the zero rate at d.

        Same arguments as discount_factor_with_spread.
        """
        t = self.relative_year_fraction(d)
        currency = sensitivity_currency or self.currency
        if abs(t) < EFFECTIVE_ZERO:
            return ZeroRateSensitivity(self.curve_name, d, currency, 0.0)
        z = self.zero_rate(d)
        if not periodic:
            amount = -t * math.exp(-(z + z_spread) * t)
        else:
            m = self._check_periods(periods_per_year)
            df2 = math.exp(z / m)
            df3 = self._periodic_base(z, z_spread, m)
            amount = -t * df3 ** (-m * t - 1) * df2
        return ZeroRateSensitivity(self.curve_name, d, currency, amount)

    def curve_parameter_sensitivity(
        self,
        point: ZeroRateSensitivity
    ) -> CurveCurrencyParameterSensitivity:
        """
        Decompose a point sensitivity on this curve onto the curve nodes.

        Each node receives amount * d(zero rate at date)/d(node value).
        """
        if point.curve_name != self.curve_name:
            raise ValueError(
                f"Point sensitivity on curve {point.curve_name} cannot be applied to "
                f"curve {self.curve_name}"
            )
        t = self.relative_year_fraction(point.date)
        values = point.sensitivity * self._zero_rate_node_sensitivities(t)
        return CurveCurrencyParameterSensitivity(self.curve.metadata, point.currency, values)

    def with_curve(self, curve: InterpolatedNodalCurve) -> "DiscountFactors":
        """Create a new instance on a different curve."""
        return replace(self, curve=curve)

    @staticmethod
    def _check_periods(periods_per_year: int) -> int:
        if periods_per_year is None or periods_per_year <= 0:
            raise ValueError(
                f"Periods per year must be positive for periodic compounding: {periods_per_year}"
            )
        return periods_per_year

    @staticmethod
    def _periodic_base(z: float, z_spread: float, m: int) -> float:
        base = math.exp(z / m) + z_spread / m
        if base <= 0.0:
            raise ValueError(
                f"Spread {z_spread} gives a non-positive periodic discount base {base}"
            )
        return base

    def _check_curve(self) -> None:
        """Hook for implementation specific checks on the curve."""

    @abstractmethod
    def _discount_factor_at(self, t: float) -> float:
        pass

    @abstractmethod
    def _zero_rate_node_sensitivities(self, t: float) -> np.ndarray:
        """Gradient of the zero rate at time t with respect to the curve nodes."""
        pass


@dataclass(frozen=True)
class ZeroRateDiscountFactors(DiscountFactors):
    """
    Discount factors from a curve of continuously compounded zero rates.

    df(t) = exp(-z(t) t)
    """

    def _check_curve(self):
        if self.curve.metadata.y_value_type != ValueType.ZERO_RATE:
            raise ValueError(
                f"Curve {self.curve_name} y values must be zero rates, "
                f"got {self.curve.metadata.y_value_type.value}"
            )

    def zero_rate(self, d: date) -> float:
        return self.curve.value_at(self.relative_year_fraction(d))

    def _discount_factor_at(self, t):
        return math.exp(-self.curve.value_at(t) * t)

    def _zero_rate_node_sensitivities(self, t):
        return self.curve.node_sensitivities_at(t)


@dataclass(frozen=True)
class SimpleDiscountFactors(DiscountFactors):
    """
    Discount factors read directly from a curve of discount factors.

    The zero rate is z(t) = -ln(df(t)) / t, so point sensitivities reach the
    nodes through d(z)/d(y_i) = -1 / (t df) * d(df)/d(y_i).
    """

    def _check_curve(self):
        if self.curve.metadata.y_value_type != ValueType.DISCOUNT_FACTOR:
            raise ValueError(
                f"Curve {self.curve_name} y values must be discount factors, "
                f"got {self.curve.metadata.y_value_type.value}"
            )
        ys = self.curve.y_values
        if np.any(ys <= 0):
            raise ValueError(f"Curve {self.curve_name} discount factors must be positive")
        if np.any(np.diff(ys) > 0):
            logger.warning(
                "Discount factors of curve %s increase with maturity (negative forward rates)",
                self.curve_name
            )

    def zero_rate(self, d: date) -> float:
        t = self.relative_year_fraction(d)
        if abs(t) < EFFECTIVE_ZERO:
            # instantaneous rate at the valuation date
            return -self.curve.first_derivative_at(0.0) / self.curve.value_at(0.0)
        return -math.log(self._discount_factor_at(t)) / t

    def _discount_factor_at(self, t):
        return self.curve.value_at(t)

    def _zero_rate_node_sensitivities(self, t):
        if abs(t) < EFFECTIVE_ZERO:
            return np.zeros(self.parameter_count)
        df = self.curve.value_at(t)
        return -self.curve.node_sensitivities_at(t) / (t * df)


def discount_factors_of(
    currency: str,
    valuation_date: date,
    curve: InterpolatedNodalCurve
) -> DiscountFactors:
    """
    Create discount factors matching the y value type of the curve.

    Args:
        currency: Currency of the curve
        valuation_date: Valuation date
        curve: Zero rate or discount factor curve

    Returns:
        ZeroRateDiscountFactors or SimpleDiscountFactors
    """
    value_type = curve.metadata.y_value_type
    if value_type == ValueType.ZERO_RATE:
        return ZeroRateDiscountFactors(currency, valuation_date, curve)
    elif value_type == ValueType.DISCOUNT_FACTOR:
        return SimpleDiscountFactors(currency, valuation_date, curve)
    else:
        raise ValueError(
            f"Unsupported y value type for discount factors on curve {curve.name}: "
            f"{value_type.value}"
        )


__all__ = [
    "EFFECTIVE_ZERO",
    "DiscountFactors",
    "ZeroRateDiscountFactors",
    "SimpleDiscountFactors",
    "discount_factors_of",
]
