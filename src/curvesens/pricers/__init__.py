"""
Pricers package - instrument pricing.

Provides discounting pricers for:
- Fixed coupon bond payment periods and fixed coupon bonds
- Ibor futures
"""

from .bonds import (
    FixedCouponBondPaymentPeriod,
    Payment,
    FixedCouponBond,
    DiscountingFixedCouponBondPaymentPeriodPricer,
    DiscountingFixedCouponBondProductPricer,
    DEFAULT_PERIOD_PRICER,
    DEFAULT_BOND_PRICER,
)
from .futures import (
    IborFuture,
    IborFutureTrade,
    DiscountingIborFutureProductPricer,
    DiscountingIborFutureTradePricer,
    DEFAULT_FUTURE_PRICER,
    DEFAULT_FUTURE_TRADE_PRICER,
)

__all__ = [
    "FixedCouponBondPaymentPeriod",
    "Payment",
    "FixedCouponBond",
    "DiscountingFixedCouponBondPaymentPeriodPricer",
    "DiscountingFixedCouponBondProductPricer",
    "DEFAULT_PERIOD_PRICER",
    "DEFAULT_BOND_PRICER",
    "IborFuture",
    "IborFutureTrade",
    "DiscountingIborFutureProductPricer",
    "DiscountingIborFutureTradePricer",
    "DEFAULT_FUTURE_PRICER",
    "DEFAULT_FUTURE_TRADE_PRICER",
]
