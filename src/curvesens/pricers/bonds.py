"""
Fixed coupon bond pricing by discounting.

Provides:
- FixedCouponBondPaymentPeriod: a single coupon accrual period
- Payment: a single known cash amount
- FixedCouponBond: coupon periods plus the nominal repayment
- Discounting pricers for periods and bonds, with present value, z-spread
  present value and zero-rate point sensitivities

Present values of periods and payments due before the valuation date are 0.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Tuple
import math

from ..conventions import Conventions, DayCount
from ..currency import CurrencyAmount
from ..curves.discount_factors import DiscountFactors
from ..dates import generate_schedule_info
from ..risk.point_sensitivity import PointSensitivities


@dataclass(frozen=True)
class FixedCouponBondPaymentPeriod:
    """
    A coupon period of a fixed coupon bond.

    Attributes:
        currency: Payment currency
        notional: Notional amount (sign gives the direction)
        start_date: Adjusted accrual start
        end_date: Adjusted accrual end
        unadjusted_start_date: Unadjusted accrual start
        unadjusted_end_date: Unadjusted accrual end
        fixed_rate: Coupon rate (decimal)
        year_fraction: Accrual factor of the period
        payment_date: Payment date, the adjusted end date if None
    """
    currency: str
    notional: float
    start_date: date
    end_date: date
    unadjusted_start_date: date
    unadjusted_end_date: date
    fixed_rate: float
    year_fraction: float
    payment_date: Optional[date] = None

    def __post_init__(self):
        if not self.currency:
            raise ValueError("Currency must not be empty")
        if not math.isfinite(self.notional):
            raise ValueError(f"Notional must be finite: {self.notional}")
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date {self.start_date} must be before end date {self.end_date}")
        if self.unadjusted_start_date >= self.unadjusted_end_date:
            raise ValueError(
                f"Unadjusted start date {self.unadjusted_start_date} must be before "
                f"unadjusted end date {self.unadjusted_end_date}"
            )
        if self.year_fraction < 0:
            raise ValueError(f"Year fraction must not be negative: {self.year_fraction}")
        if self.payment_date is None:
            object.__setattr__(self, "payment_date", self.end_date)

    @property
    def coupon_amount(self) -> float:
        """Undiscounted coupon paid at the payment date."""
        return self.notional * self.fixed_rate * self.year_fraction

    @property
    def accrual_days(self) -> int:
        return (self.end_date - self.start_date).days


@dataclass(frozen=True)
class Payment:
    """A known amount paid on a date."""
    currency: str
    amount: float
    date: date

    def __post_init__(self):
        if not self.currency:
            raise ValueError("Currency must not be empty")
        if self.date is None:
            raise ValueError("Payment date must not be None")


@dataclass(frozen=True)
class FixedCouponBond:
    """
    A fixed coupon bond: coupon periods and a nominal payment at maturity.

    Attributes:
        currency: Bond currency
        notional: Face amount
        fixed_rate: Coupon rate (decimal)
        periods: Coupon periods in date order
        nominal_payment: Repayment of the face amount
    """
    currency: str
    notional: float
    fixed_rate: float
    periods: Tuple[FixedCouponBondPaymentPeriod, ...]
    nominal_payment: Payment

    def __post_init__(self):
        object.__setattr__(self, "periods", tuple(self.periods))
        if not self.periods:
            raise ValueError("Bond must have at least one coupon period")
        for p in self.periods:
            if p.currency != self.currency:
                raise ValueError(f"Period currency {p.currency} differs from bond currency {self.currency}")
        if self.nominal_payment.currency != self.currency:
            raise ValueError(
                f"Nominal currency {self.nominal_payment.currency} differs from bond currency {self.currency}"
            )

    @property
    def maturity_date(self) -> date:
        return self.nominal_payment.date

    @classmethod
    def of_schedule(
        cls,
        currency: str,
        notional: float,
        fixed_rate: float,
        start: date,
        maturity: date,
        conventions: Optional[Conventions] = None,
        holidays: Optional[set] = None
    ) -> "FixedCouponBond":
        """
        Build a bond from its accrual schedule.

        Args:
            currency: Bond currency
            notional: Face amount
            fixed_rate: Coupon rate (decimal)
            start: Accrual start of the first period
            maturity: Unadjusted maturity
            conventions: Frequency, business day rule and day count
            holidays: Holiday calendar

        Returns:
            FixedCouponBond with one period per schedule entry
        """
        conventions = conventions or Conventions.usd_treasury()
        schedule = generate_schedule_info(start, maturity, conventions, holidays)

        periods = []
        for i in range(len(schedule)):
            periods.append(FixedCouponBondPaymentPeriod(
                currency=currency,
                notional=notional,
                start_date=schedule.accrual_starts[i],
                end_date=schedule.accrual_ends[i],
                unadjusted_start_date=schedule.unadjusted_starts[i],
                unadjusted_end_date=schedule.unadjusted_ends[i],
                fixed_rate=fixed_rate,
                year_fraction=schedule.year_fractions[i]
            ))

        nominal = Payment(currency, notional, schedule.payment_dates[-1])
        return cls(currency, notional, fixed_rate, tuple(periods), nominal)


class DiscountingFixedCouponBondPaymentPeriodPricer:
    """
    Pricer for a fixed coupon bond payment period.

    The coupon is known, so the future value is notional * rate * year
    fraction and the present value discounts it from the payment date.
    """

    def _is_paid(self, period: FixedCouponBondPaymentPeriod, discount_factors: DiscountFactors) -> bool:
        return period.payment_date < discount_factors.valuation_date

    def future_value(self, period: FixedCouponBondPaymentPeriod, discount_factors: DiscountFactors) -> float:
        """Undiscounted coupon, 0 once paid."""
        if self._is_paid(period, discount_factors):
            return 0.0
        return period.coupon_amount

    def present_value(self, period: FixedCouponBondPaymentPeriod, discount_factors: DiscountFactors) -> float:
        """
        Present value of the coupon.

        Args:
            period: Coupon period
            discount_factors: Discount factors of the period currency

        Returns:
            Discounted coupon, 0 if paid before the valuation date
        """
        if self._is_paid(period, discount_factors):
            return 0.0
        return period.coupon_amount * discount_factors.discount_factor(period.payment_date)

    def present_value_with_spread(
        self,
        period: FixedCouponBondPaymentPeriod,
        discount_factors: DiscountFactors,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0
    ) -> float:
        """Present value with a z-spread on the discount curve."""
        if self._is_paid(period, discount_factors):
            return 0.0
        df = discount_factors.discount_factor_with_spread(
            period.payment_date, z_spread, periodic, periods_per_year
        )
        return period.coupon_amount * df

    def present_value_sensitivity(
        self,
        period: FixedCouponBondPaymentPeriod,
        discount_factors: DiscountFactors
    ) -> PointSensitivities:
        """Zero-rate sensitivity of the present value."""
        if self._is_paid(period, discount_factors):
            return PointSensitivities.empty()
        point = discount_factors.zero_rate_point_sensitivity(period.payment_date)
        return point.multiplied_by(period.coupon_amount).build()

    def present_value_sensitivity_with_spread(
        self,
        period: FixedCouponBondPaymentPeriod,
        discount_factors: DiscountFactors,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0
    ) -> PointSensitivities:
        """Zero-rate sensitivity of the z-spread present value."""
        if self._is_paid(period, discount_factors):
            return PointSensitivities.empty()
        point = discount_factors.zero_rate_point_sensitivity_with_spread(
            period.payment_date, z_spread, periodic, periods_per_year
        )
        return point.multiplied_by(period.coupon_amount).build()

    def future_value_sensitivity(
        self,
        period: FixedCouponBondPaymentPeriod,
        discount_factors: DiscountFactors
    ) -> PointSensitivities:
        """The coupon is fixed, so the future value has no curve sensitivity."""
        return PointSensitivities.empty()

    def explain_present_value(
        self,
        period: FixedCouponBondPaymentPeriod,
        discount_factors: DiscountFactors
    ) -> Dict[str, object]:
        """
        Break down the present value calculation.

        Returns:
            Dict with the period dates, accrual days, discount factor,
            forecast value and present value
        """
        if self._is_paid(period, discount_factors):
            return self._explain(period, None)
        return self._explain(period, discount_factors.discount_factor(period.payment_date))

    def explain_present_value_with_spread(
        self,
        period: FixedCouponBondPaymentPeriod,
        discount_factors: DiscountFactors,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0
    ) -> Dict[str, object]:
        """
        Break down the present value calculation with a z-spread.

        The discount factor entry is the spread-adjusted one.
        """
        if self._is_paid(period, discount_factors):
            return self._explain(period, None)
        df = discount_factors.discount_factor_with_spread(
            period.payment_date, z_spread, periodic, periods_per_year
        )
        return self._explain(period, df)

    @staticmethod
    def _explain(period: FixedCouponBondPaymentPeriod, df: Optional[float]) -> Dict[str, object]:
        # df is None for a period paid before the valuation date
        currency = period.currency
        explain = {
            "entry_type": "FixedCouponBondPaymentPeriod",
            "payment_date": period.payment_date,
            "payment_currency": currency,
            "start_date": period.start_date,
            "unadjusted_start_date": period.unadjusted_start_date,
            "end_date": period.end_date,
            "unadjusted_end_date": period.unadjusted_end_date,
            "accrual_year_fraction": period.year_fraction,
            "accrual_days": period.accrual_days,
        }
        if df is None:
            explain["forecast_value"] = CurrencyAmount.zero(currency)
            explain["present_value"] = CurrencyAmount.zero(currency)
        else:
            explain["discount_factor"] = df
            explain["forecast_value"] = CurrencyAmount(currency, period.coupon_amount)
            explain["present_value"] = CurrencyAmount(currency, period.coupon_amount * df)
        return explain


class DiscountingFixedCouponBondProductPricer:
    """
    Pricer for a fixed coupon bond.

    Sums the coupon periods, priced by the period pricer, and the nominal
    payment, all discounted on the discount curve of the bond currency.
    """

    def __init__(self, period_pricer: Optional[DiscountingFixedCouponBondPaymentPeriodPricer] = None):
        self.period_pricer = period_pricer or DEFAULT_PERIOD_PRICER

    def _payment_pv(self, payment: Payment, discount_factors: DiscountFactors, df: float) -> float:
        if payment.date < discount_factors.valuation_date:
            return 0.0
        return payment.amount * df

    def present_value(self, bond: FixedCouponBond, provider) -> CurrencyAmount:
        """
        Present value of the bond.

        Args:
            bond: Bond to price
            provider: RatesProvider with a discount curve for the bond currency

        Returns:
            Present value in the bond currency
        """
        discount_factors = provider.discount_factors(bond.currency)
        total = sum(self.period_pricer.present_value(p, discount_factors) for p in bond.periods)
        nominal = bond.nominal_payment
        total += self._payment_pv(nominal, discount_factors, discount_factors.discount_factor(nominal.date))
        return CurrencyAmount(bond.currency, total)

    def present_value_with_spread(
        self,
        bond: FixedCouponBond,
        provider,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0
    ) -> CurrencyAmount:
        """Present value with a z-spread on the discount curve."""
        discount_factors = provider.discount_factors(bond.currency)
        total = sum(
            self.period_pricer.present_value_with_spread(
                p, discount_factors, z_spread, periodic, periods_per_year
            )
            for p in bond.periods
        )
        nominal = bond.nominal_payment
        df = discount_factors.discount_factor_with_spread(
            nominal.date, z_spread, periodic, periods_per_year
        )
        total += self._payment_pv(nominal, discount_factors, df)
        return CurrencyAmount(bond.currency, total)

    def present_value_sensitivity(self, bond: FixedCouponBond, provider) -> PointSensitivities:
        """Zero-rate point sensitivities of the present value."""
        discount_factors = provider.discount_factors(bond.currency)
        result = PointSensitivities.empty()
        for p in bond.periods:
            result = result.combined_with(
                self.period_pricer.present_value_sensitivity(p, discount_factors)
            )
        nominal = bond.nominal_payment
        if nominal.date >= discount_factors.valuation_date:
            point = discount_factors.zero_rate_point_sensitivity(nominal.date)
            result = result.combined_with(point.multiplied_by(nominal.amount))
        return result.normalized()

    def present_value_sensitivity_with_spread(
        self,
        bond: FixedCouponBond,
        provider,
        z_spread: float,
        periodic: bool = False,
        periods_per_year: int = 0
    ) -> PointSensitivities:
        """Zero-rate point sensitivities of the z-spread present value."""
        discount_factors = provider.discount_factors(bond.currency)
        result = PointSensitivities.empty()
        for p in bond.periods:
            result = result.combined_with(
                self.period_pricer.present_value_sensitivity_with_spread(
                    p, discount_factors, z_spread, periodic, periods_per_year
                )
            )
        nominal = bond.nominal_payment
        if nominal.date >= discount_factors.valuation_date:
            point = discount_factors.zero_rate_point_sensitivity_with_spread(
                nominal.date, z_spread, periodic, periods_per_year
            )
            result = result.combined_with(point.multiplied_by(nominal.amount))
        return result.normalized()


DEFAULT_PERIOD_PRICER = DiscountingFixedCouponBondPaymentPeriodPricer()
DEFAULT_BOND_PRICER = DiscountingFixedCouponBondProductPricer()


__all__ = [
    "FixedCouponBondPaymentPeriod",
    "Payment",
    "FixedCouponBond",
    "DiscountingFixedCouponBondPaymentPeriodPricer",
    "DiscountingFixedCouponBondProductPricer",
    "DEFAULT_PERIOD_PRICER",
    "DEFAULT_BOND_PRICER",
]
