"""
Risk package - curve sensitivities.

Provides:
- Zero-rate point sensitivities
- Curve parameter (node) sensitivities
- Analytic reduction of point sensitivities to curve nodes
- Finite difference bump-and-reprice sensitivities
"""

from .point_sensitivity import ZeroRateSensitivity, PointSensitivities
from .parameter_sensitivity import (
    CurveCurrencyParameterSensitivity,
    CurveCurrencyParameterSensitivities,
)
from .sensitivities import curve_parameter_sensitivity, group_by_curve
from .bumping import (
    DEFAULT_SHIFT,
    DEFAULT_FD_CALCULATOR,
    RatesFiniteDifferenceSensitivityCalculator,
)

__all__ = [
    "ZeroRateSensitivity",
    "PointSensitivities",
    "CurveCurrencyParameterSensitivity",
    "CurveCurrencyParameterSensitivities",
    "curve_parameter_sensitivity",
    "group_by_curve",
    "DEFAULT_SHIFT",
    "DEFAULT_FD_CALCULATOR",
    "RatesFiniteDifferenceSensitivityCalculator",
]
