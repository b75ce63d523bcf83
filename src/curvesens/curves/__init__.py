"""
Curves package - curve representation and discounting.

Provides:
- InterpolatedNodalCurve: Nodes, interpolator and extrapolators with node sensitivities
- Interpolators and extrapolators selected by name
- DiscountFactors: Discount factors and zero-rate sensitivities from a curve
- IborIndexRates: Forward rates of an Ibor index
"""

# curve must be imported before discount_factors, which pulls in the risk package
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    NaturalCubicSplineInterpolator,
    LogNaturalDiscountFactorInterpolator,
    create_interpolator,
)
from .extrapolation import (
    Extrapolator,
    FlatExtrapolator,
    LinearExtrapolator,
    InterpolatorExtrapolator,
    create_extrapolator,
)
from .curve import ValueType, CurveMetadata, InterpolatedNodalCurve, create_flat_curve
from .discount_factors import (
    EFFECTIVE_ZERO,
    DiscountFactors,
    ZeroRateDiscountFactors,
    SimpleDiscountFactors,
    discount_factors_of,
)
from .index_rates import IborIndex, IborIndexRates

__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "NaturalCubicSplineInterpolator",
    "LogNaturalDiscountFactorInterpolator",
    "create_interpolator",
    "Extrapolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "InterpolatorExtrapolator",
    "create_extrapolator",
    "ValueType",
    "CurveMetadata",
    "InterpolatedNodalCurve",
    "create_flat_curve",
    "EFFECTIVE_ZERO",
    "DiscountFactors",
    "ZeroRateDiscountFactors",
    "SimpleDiscountFactors",
    "discount_factors_of",
    "IborIndex",
    "IborIndexRates",
]
