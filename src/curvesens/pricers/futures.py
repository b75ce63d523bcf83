"""
Ibor futures pricing by discounting.

Prices exchange-traded Ibor futures from the forward curve of their index.

Key assumptions:
1. Futures rate = Forward rate (no convexity adjustment)
2. Price is quoted as 1 - rate, in decimal
3. Margining gives a trade value of (price - reference price) per unit of
   notional and accrual

Convexity Adjustment Note:
    Futures rates exceed forward rates due to daily margining. This pricer
    ignores the adjustment, so price sensitivities are those of the forward
    rate with the sign reversed.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
import math

from ..currency import CurrencyAmount
from ..curves.index_rates import IborIndex
from ..dates import DateUtils
from ..risk.point_sensitivity import PointSensitivities


@dataclass(frozen=True)
class IborFuture:
    """
    Terms of an Ibor future contract.

    Attributes:
        index: Underlying Ibor index
        last_trade_date: Fixing date of the underlying rate
        notional: Notional per contract
        accrual_factor: Accrual factor of the underlying deposit
    """
    index: IborIndex
    last_trade_date: date
    notional: float = 1_000_000
    accrual_factor: float = 0.25

    def __post_init__(self):
        if self.index is None:
            raise ValueError("Index must not be None")
        if self.last_trade_date is None:
            raise ValueError("Last trade date must not be None")
        if not self.notional > 0:
            raise ValueError(f"Notional must be positive: {self.notional}")
        if not self.accrual_factor > 0:
            raise ValueError(f"Accrual factor must be positive: {self.accrual_factor}")

    @property
    def currency(self) -> str:
        return self.index.currency

    @property
    def fixing_date(self) -> date:
        return self.last_trade_date

    @classmethod
    def of_index(cls, index: IborIndex, last_trade_date: date, notional: float = 1_000_000) -> "IborFuture":
        """Create a future whose accrual factor matches the index tenor."""
        return cls(
            index=index,
            last_trade_date=last_trade_date,
            notional=notional,
            accrual_factor=DateUtils.tenor_to_years(index.tenor)
        )


@dataclass(frozen=True)
class IborFutureTrade:
    """
    A position in an Ibor future.

    Attributes:
        product: The future
        quantity: Number of contracts (positive = long)
        price: Trade price, in decimal
    """
    product: IborFuture
    quantity: float
    price: float

    def __post_init__(self):
        if self.product is None:
            raise ValueError("Product must not be None")
        if not math.isfinite(self.quantity):
            raise ValueError(f"Quantity must be finite: {self.quantity}")


class DiscountingIborFutureProductPricer:
    """Pricer for the Ibor future product."""

    def price(self, future: IborFuture, provider) -> float:
        """
        Price of the future, 1 - forward rate.

        Args:
            future: Future to price
            provider: RatesProvider with a curve for the future's index

        Returns:
            Price in decimal
        """
        rates = provider.ibor_index_rates(future.index)
        return 1.0 - rates.rate(future.fixing_date)

    def price_sensitivity(self, future: IborFuture, provider) -> PointSensitivities:
        """Zero-rate sensitivity of the price."""
        rates = provider.ibor_index_rates(future.index)
        return rates.rate_point_sensitivity(future.fixing_date).multiplied_by(-1.0)

    def margin_index(self, future: IborFuture, price: float) -> float:
        """Value of the price per contract: price * notional * accrual factor."""
        return price * future.notional * future.accrual_factor


class DiscountingIborFutureTradePricer:
    """
    Pricer for an Ibor future trade.

    The present value is the margin difference against a reference price,
    the trade price unless given.
    """

    def __init__(self, product_pricer: Optional[DiscountingIborFutureProductPricer] = None):
        self.product_pricer = product_pricer or DiscountingIborFutureProductPricer()

    def price(self, trade: IborFutureTrade, provider) -> float:
        return self.product_pricer.price(trade.product, provider)

    def present_value(
        self,
        trade: IborFutureTrade,
        provider,
        reference_price: Optional[float] = None
    ) -> CurrencyAmount:
        """
        Present value of the trade.

        Args:
            trade: Future position
            provider: RatesProvider
            reference_price: Price the margin is measured against

        Returns:
            (price - reference) * notional * accrual factor * quantity
        """
        ref = trade.price if reference_price is None else reference_price
        future = trade.product
        price = self.product_pricer.price(future, provider)
        margin = self.product_pricer.margin_index(future, price - ref)
        return CurrencyAmount(future.currency, margin * trade.quantity)

    def present_value_sensitivity(self, trade: IborFutureTrade, provider) -> PointSensitivities:
        """Zero-rate sensitivity of the present value; the reference price drops out."""
        future = trade.product
        factor = self.product_pricer.margin_index(future, 1.0) * trade.quantity
        return self.product_pricer.price_sensitivity(future, provider).multiplied_by(factor)


DEFAULT_FUTURE_PRICER = DiscountingIborFutureProductPricer()
DEFAULT_FUTURE_TRADE_PRICER = DiscountingIborFutureTradePricer()


__all__ = [
    "IborFuture",
    "IborFutureTrade",
    "DiscountingIborFutureProductPricer",
    "DiscountingIborFutureTradePricer",
    "DEFAULT_FUTURE_PRICER",
    "DEFAULT_FUTURE_TRADE_PRICER",
]
