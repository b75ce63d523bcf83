"""
Options module - Rates option pricing.

Provides:
- Swaption pricing with curve sensitivities
- Bachelier (normal) and Black'76 models
"""

from .base_models import (
    VolatilityType,
    black_price,
    black_forward_delta,
    black_vega,
    normal_price,
    normal_forward_delta,
    normal_vega,
)
from .swaption import SwapPeriod, Swaption, BlackSwaptionPhysicalProductPricer

__all__ = [
    "VolatilityType",
    "black_price",
    "black_forward_delta",
    "black_vega",
    "normal_price",
    "normal_forward_delta",
    "normal_vega",
    "SwapPeriod",
    "Swaption",
    "BlackSwaptionPhysicalProductPricer",
]
