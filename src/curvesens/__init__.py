"""
curvesens: Curve Discounting & Sensitivity Library

A modular library for:
- Interpolated nodal curves with node sensitivities (interpolators, extrapolators)
- Discount factors and Ibor forward rates from zero-rate or discount-factor curves
- Zero-rate point sensitivities and their reduction to curve nodes
- Finite difference (bump-and-reprice) curve sensitivities
- Discounting pricers for fixed coupon bonds, Ibor futures and swaptions

Scope: single-threaded, in-memory analytics on immutable market snapshots.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import (
    DayCount,
    BusinessDayConvention,
    Conventions,
    year_fraction,
    relative_year_fraction,
)
from .dates import DateUtils, ScheduleInfo, generate_schedule_info
from .currency import CurrencyAmount

# Curves
from .curves import (
    ValueType,
    CurveMetadata,
    InterpolatedNodalCurve,
    create_flat_curve,
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    NaturalCubicSplineInterpolator,
    LogNaturalDiscountFactorInterpolator,
    create_interpolator,
    Extrapolator,
    FlatExtrapolator,
    LinearExtrapolator,
    InterpolatorExtrapolator,
    create_extrapolator,
    DiscountFactors,
    ZeroRateDiscountFactors,
    SimpleDiscountFactors,
    discount_factors_of,
    IborIndex,
    IborIndexRates,
)

# Risk
from .risk import (
    ZeroRateSensitivity,
    PointSensitivities,
    CurveCurrencyParameterSensitivity,
    CurveCurrencyParameterSensitivities,
    curve_parameter_sensitivity,
    RatesFiniteDifferenceSensitivityCalculator,
    DEFAULT_FD_CALCULATOR,
    DEFAULT_SHIFT,
)

# Market state
from .market_state import RatesProvider

# Pricers
from .pricers import (
    FixedCouponBondPaymentPeriod,
    Payment,
    FixedCouponBond,
    DiscountingFixedCouponBondPaymentPeriodPricer,
    DiscountingFixedCouponBondProductPricer,
    IborFuture,
    IborFutureTrade,
    DiscountingIborFutureProductPricer,
    DiscountingIborFutureTradePricer,
)

# Options
from .options import (
    VolatilityType,
    SwapPeriod,
    Swaption,
    BlackSwaptionPhysicalProductPricer,
)

__all__ = [
    # Version
    "__version__",
    # Conventions
    "DayCount",
    "BusinessDayConvention",
    "Conventions",
    "year_fraction",
    "relative_year_fraction",
    # Dates
    "DateUtils",
    "ScheduleInfo",
    "generate_schedule_info",
    "CurrencyAmount",
    # Curves
    "ValueType",
    "CurveMetadata",
    "InterpolatedNodalCurve",
    "create_flat_curve",
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
    "DiscountFactors",
    "ZeroRateDiscountFactors",
    "SimpleDiscountFactors",
    "discount_factors_of",
    "IborIndex",
    "IborIndexRates",
    # Risk
    "ZeroRateSensitivity",
    "PointSensitivities",
    "CurveCurrencyParameterSensitivity",
    "CurveCurrencyParameterSensitivities",
    "curve_parameter_sensitivity",
    "RatesFiniteDifferenceSensitivityCalculator",
    "DEFAULT_FD_CALCULATOR",
    "DEFAULT_SHIFT",
    # Market state
    "RatesProvider",
    # Pricers
    "FixedCouponBondPaymentPeriod",
    "Payment",
    "FixedCouponBond",
    "DiscountingFixedCouponBondPaymentPeriodPricer",
    "DiscountingFixedCouponBondProductPricer",
    "IborFuture",
    "IborFutureTrade",
    "DiscountingIborFutureProductPricer",
    "DiscountingIborFutureTradePricer",
    # Options
    "VolatilityType",
    "SwapPeriod",
    "Swaption",
    "BlackSwaptionPhysicalProductPricer",
]
