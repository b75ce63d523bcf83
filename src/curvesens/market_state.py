"""
Market state abstraction layer.

The RatesProvider is the market snapshot pricers and sensitivity calculators
read from:
- discount curves keyed by currency
- index (forward) curves keyed by Ibor index
- FX rates keyed by currency pair
- the valuation date

Snapshots are immutable. Replacing a curve returns a new provider, which is
how the finite difference calculator builds its bumped scenarios.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .curves.curve import InterpolatedNodalCurve
from .curves.discount_factors import DiscountFactors, discount_factors_of
from .curves.index_rates import IborIndex, IborIndexRates
from .risk.parameter_sensitivity import CurveCurrencyParameterSensitivities
from .risk.point_sensitivity import PointSensitivities
from .risk.sensitivities import curve_parameter_sensitivity


@dataclass(frozen=True)
class RatesProvider:
    """
    Immutable snapshot of rates market data.

    Attributes:
        valuation_date: Market valuation date
        discount_curves: Discount curve per currency
        index_curves: Forward curve per Ibor index
        fx_rates: Rate per (base, counter) pair, units of counter per unit of base
    """
    valuation_date: date
    discount_curves: Mapping[str, InterpolatedNodalCurve] = field(default_factory=dict)
    index_curves: Mapping[IborIndex, InterpolatedNodalCurve] = field(default_factory=dict)
    fx_rates: Mapping[Tuple[str, str], float] = field(default_factory=dict)

    def __post_init__(self):
        if self.valuation_date is None:
            raise ValueError("Valuation date must not be None")

        names = [c.name for c in self.discount_curves.values()]
        names += [c.name for c in self.index_curves.values()]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Curve names must be unique across the provider: {duplicates}")

        for pair, rate in self.fx_rates.items():
            if not rate > 0:
                raise ValueError(f"FX rate for {pair} must be positive: {rate}")

        object.__setattr__(self, "discount_curves", MappingProxyType(dict(self.discount_curves)))
        object.__setattr__(self, "index_curves", MappingProxyType(dict(self.index_curves)))
        object.__setattr__(self, "fx_rates", MappingProxyType(dict(self.fx_rates)))

    def __hash__(self) -> int:
        return hash((
            self.valuation_date,
            tuple(sorted(self.discount_curves.items(), key=lambda kv: kv[0])),
            tuple(sorted(self.index_curves.items(), key=lambda kv: kv[0].name)),
            tuple(sorted(self.fx_rates.items()))
        ))

    # Discount curves

    def discount_factors(self, currency: str) -> DiscountFactors:
        """Discount factors for a currency."""
        curve = self.discount_curves.get(currency)
        if curve is None:
            raise ValueError(f"No discount curve for currency {currency}")
        return discount_factors_of(currency, self.valuation_date, curve)

    def ibor_index_rates(self, index: IborIndex) -> IborIndexRates:
        """Forward rates for an Ibor index."""
        curve = self.index_curves.get(index)
        if curve is None:
            raise ValueError(f"No index curve for {index}")
        return IborIndexRates(
            index, discount_factors_of(index.currency, self.valuation_date, curve)
        )

    # Curve lookup by name

    def find_curve(self, name: str) -> Optional[InterpolatedNodalCurve]:
        for curve in self.discount_curves.values():
            if curve.name == name:
                return curve
        for curve in self.index_curves.values():
            if curve.name == name:
                return curve
        return None

    def curve(self, name: str) -> InterpolatedNodalCurve:
        """
        Get a curve by name, from either category.

        Raises:
            ValueError: If no curve has this name
        """
        curve = self.find_curve(name)
        if curve is None:
            raise ValueError(f"Unable to find curve {name} in rates provider")
        return curve

    def discount_factors_for_curve(self, name: str) -> DiscountFactors:
        """
        Discount factors view of a named curve.

        Index curves are read in the currency of their index.
        """
        for currency, curve in self.discount_curves.items():
            if curve.name == name:
                return discount_factors_of(currency, self.valuation_date, curve)
        for index, curve in self.index_curves.items():
            if curve.name == name:
                return discount_factors_of(index.currency, self.valuation_date, curve)
        raise ValueError(f"Unable to find curve {name} in rates provider")

    # FX

    def fx_rate(self, base: str, counter: str) -> float:
        """
        FX rate as units of counter per unit of base.

        Inverted quotes are used when only the opposite pair is available.
        """
        if base == counter:
            return 1.0
        if (base, counter) in self.fx_rates:
            return self.fx_rates[(base, counter)]
        if (counter, base) in self.fx_rates:
            return 1.0 / self.fx_rates[(counter, base)]
        raise ValueError(f"No FX rate for {base}/{counter}")

    # Scenario construction

    def with_discount_curve(self, currency: str, curve: InterpolatedNodalCurve) -> "RatesProvider":
        curves = dict(self.discount_curves)
        curves[currency] = curve
        return replace(self, discount_curves=curves)

    def with_index_curve(self, index: IborIndex, curve: InterpolatedNodalCurve) -> "RatesProvider":
        curves = dict(self.index_curves)
        curves[index] = curve
        return replace(self, index_curves=curves)

    def with_valuation_date(self, valuation_date: date) -> "RatesProvider":
        return replace(self, valuation_date=valuation_date)

    # Sensitivity

    def curve_parameter_sensitivity(
        self,
        point_sensitivities: PointSensitivities
    ) -> CurveCurrencyParameterSensitivities:
        """Decompose point sensitivities onto the nodes of the curves of this provider."""
        return curve_parameter_sensitivity(self, point_sensitivities)

    def to_dict(self) -> Dict:
        """Summary of the snapshot for reporting."""
        return {
            "valuation_date": self.valuation_date.isoformat(),
            "discount_curves": {ccy: c.name for ccy, c in self.discount_curves.items()},
            "index_curves": {idx.name: c.name for idx, c in self.index_curves.items()},
            "fx_rates": {f"{b}/{c}": r for (b, c), r in self.fx_rates.items()}
        }

    @classmethod
    def from_curves(
        cls,
        valuation_date: date,
        discount_curve: InterpolatedNodalCurve,
        currency: str = "USD",
        projection_curve: Optional[InterpolatedNodalCurve] = None,
        index: Optional[IborIndex] = None,
        fx_rates: Optional[Mapping[Tuple[str, str], float]] = None
    ) -> "RatesProvider":
        """
        Create a single-currency provider.

        Args:
            valuation_date: Valuation date
            discount_curve: Discount curve of the currency
            currency: Currency of the discount curve
            projection_curve: Forward curve of the index, if any
            index: Index of the projection curve
            fx_rates: FX rates

        Returns:
            RatesProvider
        """
        index_curves = {}
        if projection_curve is not None:
            if index is None:
                raise ValueError("An index is required with a projection curve")
            index_curves[index] = projection_curve
        return cls(
            valuation_date=valuation_date,
            discount_curves={currency: discount_curve},
            index_curves=index_curves,
            fx_rates=fx_rates or {}
        )


__all__ = ["RatesProvider"]
