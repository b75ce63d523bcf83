"""
Swaption pricing engine.

A swaption is an option to enter into an interest rate swap.
- Payer swaption: right to pay fixed, receive floating
- Receiver swaption: right to receive fixed, pay floating

Physical settlement on a single-curve swap, so the floating leg is worth
P(start) - P(end) and:

    V_swaption = +/- Notional * Annuity * BaseModel(S, K, T, sigma)

where:
    - Annuity = sum of discounted fixed accrual fractions
    - S = (P(start) - P(end)) / Annuity, the forward swap rate
    - K = strike rate
    - T = option expiry
    - sigma = implied volatility, lognormal or normal
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

from ..conventions import Conventions
from ..currency import CurrencyAmount
from ..curves.discount_factors import DiscountFactors
from ..dates import DateUtils, generate_schedule_info
from ..risk.point_sensitivity import PointSensitivities
from .base_models import VolatilityType, option_forward_delta, option_price


@dataclass(frozen=True)
class SwapPeriod:
    """A fixed leg accrual period of the underlying swap."""
    start_date: date
    end_date: date
    year_fraction: float

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date {self.start_date} must be before end date {self.end_date}")
        if not self.year_fraction > 0:
            raise ValueError(f"Year fraction must be positive: {self.year_fraction}")


@dataclass(frozen=True)
class Swaption:
    """
    A physically-settled European swaption.

    Attributes:
        currency: Currency of the underlying swap
        expiry_date: Option expiry
        strike: Fixed rate of the underlying swap
        notional: Swap notional
        fixed_periods: Fixed leg accrual periods, payment at period end
        is_payer: True for payer (pay fixed), False for receiver
        is_long: True if the option is bought
    """
    currency: str
    expiry_date: date
    strike: float
    notional: float
    fixed_periods: Tuple[SwapPeriod, ...]
    is_payer: bool = True
    is_long: bool = True

    def __post_init__(self):
        object.__setattr__(self, "fixed_periods", tuple(self.fixed_periods))
        if not self.currency:
            raise ValueError("Currency must not be empty")
        if not self.fixed_periods:
            raise ValueError("Underlying swap must have at least one fixed period")
        if not self.notional > 0:
            raise ValueError(f"Notional must be positive: {self.notional}")
        if self.expiry_date > self.fixed_periods[0].start_date:
            raise ValueError(
                f"Expiry {self.expiry_date} must not be after the swap start "
                f"{self.fixed_periods[0].start_date}"
            )

    @property
    def start_date(self) -> date:
        return self.fixed_periods[0].start_date

    @property
    def end_date(self) -> date:
        return self.fixed_periods[-1].end_date

    @property
    def sign(self) -> float:
        return 1.0 if self.is_long else -1.0

    @classmethod
    def of_tenor(
        cls,
        currency: str,
        expiry_date: date,
        tenor: str,
        strike: float,
        notional: float,
        is_payer: bool = True,
        is_long: bool = True,
        conventions: Optional[Conventions] = None
    ) -> "Swaption":
        """
        Create a swaption on a swap starting at expiry.

        Args:
            currency: Swap currency
            expiry_date: Option expiry and swap start
            tenor: Swap tenor, e.g. "5Y"
            strike: Fixed rate
            notional: Notional
            is_payer: Payer or receiver
            is_long: Bought or sold
            conventions: Fixed leg conventions

        Returns:
            Swaption
        """
        conventions = conventions or Conventions.usd_swap()
        end = DateUtils.add_tenor(expiry_date, tenor)
        schedule = generate_schedule_info(expiry_date, end, conventions)
        periods = tuple(
            SwapPeriod(s, e, yf)
            for s, e, yf in zip(schedule.accrual_starts, schedule.accrual_ends, schedule.year_fractions)
        )
        return cls(currency, expiry_date, strike, notional, periods, is_payer, is_long)


class BlackSwaptionPhysicalProductPricer:
    """
    Swaption pricer with an implied volatility.

    Supports:
    - LOGNORMAL: Black'76 on the forward swap rate
    - NORMAL: Bachelier on the forward swap rate

    Attributes:
        vol_type: Volatility quoting convention
    """

    def __init__(self, vol_type: Union[str, VolatilityType] = VolatilityType.LOGNORMAL):
        if isinstance(vol_type, str):
            vol_type = VolatilityType.from_string(vol_type)
        self.vol_type = vol_type

    def _discount_factors(self, swaption: Swaption, provider) -> DiscountFactors:
        discount_factors = provider.discount_factors(swaption.currency)
        if swaption.expiry_date < discount_factors.valuation_date:
            raise ValueError(
                f"Swaption expired on {swaption.expiry_date}, before the valuation date "
                f"{discount_factors.valuation_date}"
            )
        return discount_factors

    def annuity(self, swaption: Swaption, provider) -> float:
        """Sum of year fraction times discount factor over the fixed periods."""
        discount_factors = self._discount_factors(swaption, provider)
        return sum(
            p.year_fraction * discount_factors.discount_factor(p.end_date)
            for p in swaption.fixed_periods
        )

    def forward_rate(self, swaption: Swaption, provider) -> float:
        """Par rate of the underlying swap."""
        discount_factors = self._discount_factors(swaption, provider)
        p_start = discount_factors.discount_factor(swaption.start_date)
        p_end = discount_factors.discount_factor(swaption.end_date)
        return (p_start - p_end) / self.annuity(swaption, provider)

    def time_to_expiry(self, swaption: Swaption, provider) -> float:
        discount_factors = self._discount_factors(swaption, provider)
        return discount_factors.relative_year_fraction(swaption.expiry_date)

    def present_value(self, swaption: Swaption, provider, volatility: float) -> CurrencyAmount:
        """
        Present value of the swaption.

        Args:
            swaption: Swaption to price
            provider: RatesProvider with a discount curve for the swap currency
            volatility: Implied volatility in the pricer's convention

        Returns:
            Present value in the swap currency
        """
        annuity = self.annuity(swaption, provider)
        forward = self.forward_rate(swaption, provider)
        expiry = self.time_to_expiry(swaption, provider)
        price = option_price(
            self.vol_type, forward, swaption.strike, expiry, volatility, swaption.is_payer
        )
        return CurrencyAmount(swaption.currency, swaption.sign * swaption.notional * annuity * price)

    def present_value_sensitivity(self, swaption: Swaption, provider, volatility: float) -> PointSensitivities:
        """
        Zero-rate sensitivity of the present value, at constant volatility.

        With V = A * B(F) and F = (P_s - P_e) / A:
            dV = (B - F * dB/dF) * dA + dB/dF * (dP_s - dP_e)
        """
        discount_factors = self._discount_factors(swaption, provider)
        annuity = self.annuity(swaption, provider)
        forward = self.forward_rate(swaption, provider)
        expiry = self.time_to_expiry(swaption, provider)
        price = option_price(
            self.vol_type, forward, swaption.strike, expiry, volatility, swaption.is_payer
        )
        delta = option_forward_delta(
            self.vol_type, forward, swaption.strike, expiry, volatility, swaption.is_payer
        )

        annuity_sens = PointSensitivities.empty()
        for p in swaption.fixed_periods:
            point = discount_factors.zero_rate_point_sensitivity(p.end_date)
            annuity_sens = annuity_sens.combined_with(point.multiplied_by(p.year_fraction))

        float_sens = PointSensitivities.of(
            discount_factors.zero_rate_point_sensitivity(swaption.start_date),
            discount_factors.zero_rate_point_sensitivity(swaption.end_date).multiplied_by(-1.0)
        )

        factor = swaption.sign * swaption.notional
        result = annuity_sens.multiplied_by((price - forward * delta) * factor)
        result = result.combined_with(float_sens.multiplied_by(delta * factor))
        return result.normalized()


__all__ = [
    "SwapPeriod",
    "Swaption",
    "BlackSwaptionPhysicalProductPricer",
]
