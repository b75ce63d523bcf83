"""
Currency amounts.

Currencies are ISO-4217 codes held as upper-case strings.
"""

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class CurrencyAmount:
    """An amount of money in a single currency."""
    currency: str
    amount: float

    def __post_init__(self):
        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency!r}")
        if not math.isfinite(self.amount):
            raise ValueError(f"Amount must be finite: {self.amount}")
        object.__setattr__(self, "currency", self.currency.upper())
        object.__setattr__(self, "amount", float(self.amount))

    @classmethod
    def zero(cls, currency: str) -> "CurrencyAmount":
        return cls(currency, 0.0)

    def plus(self, other: "CurrencyAmount") -> "CurrencyAmount":
        """Add an amount in the same currency."""
        if other.currency != self.currency:
            raise ValueError(
                f"Cannot add {other.currency} amount to {self.currency} amount"
            )
        return CurrencyAmount(self.currency, self.amount + other.amount)

    def multiplied_by(self, factor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, self.amount * factor)

    def converted_to(self, currency: str, fx_rate: float) -> "CurrencyAmount":
        """Convert using the rate quoted as units of `currency` per unit of this currency."""
        if currency.upper() == self.currency:
            return self
        return CurrencyAmount(currency, self.amount * fx_rate)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:,.2f}"


__all__ = ["CurrencyAmount"]
