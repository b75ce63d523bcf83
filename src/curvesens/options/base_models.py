"""
Base option pricing models.

Implements:
- Black'76 (lognormal) model
- Bachelier (normal) model

Prices are undiscounted (per unit of annuity or discount factor) and each
model provides the derivatives used by the curve sensitivity of option
pricers: the forward delta dV/dF and the vega dV/dsigma.
"""

from enum import Enum
from typing import Callable, Dict

import numpy as np
from scipy.stats import norm


# Standard normal CDF and PDF
N = norm.cdf
n = norm.pdf


class VolatilityType(Enum):
    """Quoting convention of an implied volatility."""
    LOGNORMAL = "LOGNORMAL"
    NORMAL = "NORMAL"

    @classmethod
    def from_string(cls, s: str) -> "VolatilityType":
        s = s.upper().strip()
        if s in ("LOGNORMAL", "BLACK"):
            return cls.LOGNORMAL
        if s in ("NORMAL", "BACHELIER"):
            return cls.NORMAL
        raise ValueError(f"Unknown volatility type: {s}")


def _intrinsic(F: float, K: float, is_call: bool) -> float:
    return max(F - K, 0.0) if is_call else max(K - F, 0.0)


def _intrinsic_delta(F: float, K: float, is_call: bool) -> float:
    if is_call:
        return 1.0 if F > K else 0.0
    return -1.0 if F < K else 0.0


def black_price(F: float, K: float, T: float, sigma: float, is_call: bool = True) -> float:
    """
    Black'76 option price, undiscounted.

    Assumes the forward follows geometric Brownian motion:
    dF = sigma * F * dW

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry (years)
        sigma: Black (lognormal) volatility
        is_call: True for call (payer), False for put (receiver)

    Returns:
        Option price per unit of numeraire
    """
    if F <= 0 or K <= 0:
        raise ValueError(f"Forward ({F}) and strike ({K}) must be positive for Black model")
    if T <= 0 or sigma <= 0:
        return _intrinsic(F, K, is_call)

    sqrt_t = np.sqrt(T)
    d1 = (np.log(F / K) + 0.5 * sigma ** 2 * T) / (sigma * sqrt_t)
    d2 = d1 - sigma * sqrt_t
    if is_call:
        return float(F * N(d1) - K * N(d2))
    return float(K * N(-d2) - F * N(-d1))


def black_forward_delta(F: float, K: float, T: float, sigma: float, is_call: bool = True) -> float:
    """Derivative of the undiscounted Black price with respect to the forward."""
    if F <= 0 or K <= 0:
        raise ValueError(f"Forward ({F}) and strike ({K}) must be positive for Black model")
    if T <= 0 or sigma <= 0:
        return _intrinsic_delta(F, K, is_call)

    sqrt_t = np.sqrt(T)
    d1 = (np.log(F / K) + 0.5 * sigma ** 2 * T) / (sigma * sqrt_t)
    return float(N(d1)) if is_call else float(-N(-d1))


def black_vega(F: float, K: float, T: float, sigma: float) -> float:
    """Derivative of the undiscounted Black price with respect to the volatility."""
    if T <= 0 or sigma <= 0 or F <= 0 or K <= 0:
        return 0.0
    sqrt_t = np.sqrt(T)
    d1 = (np.log(F / K) + 0.5 * sigma ** 2 * T) / (sigma * sqrt_t)
    return float(F * sqrt_t * n(d1))


def normal_price(F: float, K: float, T: float, sigma: float, is_call: bool = True) -> float:
    """
    Bachelier option price, undiscounted.

    Assumes the forward follows arithmetic Brownian motion:
    dF = sigma * dW

    Args:
        F: Forward rate
        K: Strike
        T: Time to expiry (years)
        sigma: Normal volatility
        is_call: True for call (payer), False for put (receiver)

    Returns:
        Option price per unit of numeraire
    """
    if T <= 0 or sigma <= 0:
        return _intrinsic(F, K, is_call)

    sqrt_t = np.sqrt(T)
    d = (F - K) / (sigma * sqrt_t)
    if is_call:
        return float((F - K) * N(d) + sigma * sqrt_t * n(d))
    return float((K - F) * N(-d) + sigma * sqrt_t * n(d))


def normal_forward_delta(F: float, K: float, T: float, sigma: float, is_call: bool = True) -> float:
    """Derivative of the undiscounted Bachelier price with respect to the forward."""
    if T <= 0 or sigma <= 0:
        return _intrinsic_delta(F, K, is_call)
    d = (F - K) / (sigma * np.sqrt(T))
    return float(N(d)) if is_call else float(-N(-d))


def normal_vega(F: float, K: float, T: float, sigma: float) -> float:
    """Derivative of the undiscounted Bachelier price with respect to the volatility."""
    if T <= 0 or sigma <= 0:
        return 0.0
    sqrt_t = np.sqrt(T)
    return float(sqrt_t * n((F - K) / (sigma * sqrt_t)))


_MODELS: Dict[VolatilityType, Dict[str, Callable]] = {
    VolatilityType.LOGNORMAL: {
        "price": black_price,
        "delta": black_forward_delta,
        "vega": black_vega,
    },
    VolatilityType.NORMAL: {
        "price": normal_price,
        "delta": normal_forward_delta,
        "vega": normal_vega,
    },
}


def option_price(vol_type: VolatilityType, F: float, K: float, T: float, sigma: float, is_call: bool = True) -> float:
    """Undiscounted price in the model matching the volatility type."""
    return _MODELS[vol_type]["price"](F, K, T, sigma, is_call)


def option_forward_delta(vol_type: VolatilityType, F: float, K: float, T: float, sigma: float, is_call: bool = True) -> float:
    """Undiscounted forward delta in the model matching the volatility type."""
    return _MODELS[vol_type]["delta"](F, K, T, sigma, is_call)


def option_vega(vol_type: VolatilityType, F: float, K: float, T: float, sigma: float) -> float:
    return _MODELS[vol_type]["vega"](F, K, T, sigma)


__all__ = [
    "VolatilityType",
    "black_price",
    "black_forward_delta",
    "black_vega",
    "normal_price",
    "normal_forward_delta",
    "normal_vega",
    "option_price",
    "option_forward_delta",
    "option_vega",
]
