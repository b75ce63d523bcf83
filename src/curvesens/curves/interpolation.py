"""
Interpolation methods for curves.

Provides:
- LinearInterpolator: Linear interpolation on the node values
- LogLinearInterpolator: Linear interpolation on the log of the node values
- NaturalCubicSplineInterpolator: Natural cubic spline on the node values
- LogNaturalDiscountFactorInterpolator: Natural cubic spline on log discount factors

Every interpolator evaluates a function defined by sorted (x, y) nodes and
exposes its value, first derivative and node sensitivities, the gradient of
the value with respect to each y node. Interpolators only answer inside
[x_min, x_max]; outside the range is the job of an extrapolator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple
import math

import numpy as np


def as_nodes(xs, ys) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert and validate a node set.

    Args:
        xs: Node abscissas, strictly increasing
        ys: Node values

    Returns:
        Tuple of float arrays (xs, ys)
    """
    if xs is None or ys is None:
        raise ValueError("Node arrays must not be None")
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if xs.ndim != 1 or ys.ndim != 1:
        raise ValueError("Node arrays must be one-dimensional")
    if len(xs) != len(ys):
        raise ValueError(f"x and y values must have same length: {len(xs)} != {len(ys)}")
    if len(xs) < 1:
        raise ValueError("Need at least 1 node")
    if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
        raise ValueError("Node values must be finite")
    if np.any(np.diff(xs) <= 0):
        raise ValueError("x values must be strictly increasing")
    return xs, ys


def check_x(x) -> float:
    """Reject a missing or non-finite abscissa."""
    if x is None or not math.isfinite(x):
        raise ValueError(f"x must be a finite number, got {x}")
    return x


def _bracket(xs: np.ndarray, x: float) -> int:
    """Index of the segment [xs[i], xs[i+1]] used for x, boundary segments extended."""
    i = int(np.searchsorted(xs, x, side="right")) - 1
    return min(max(i, 0), len(xs) - 2)


def _node_index(xs: np.ndarray, x: float) -> Optional[int]:
    i = int(np.searchsorted(xs, x, side="left"))
    if i < len(xs) and xs[i] == x:
        return i
    return None


class Interpolator(ABC):
    """
    Abstract base class for curve interpolation.

    Subclasses implement the strategy formula in `_value`, `_derivative` and
    `_sensitivities` for at least two nodes. The formula is defined on the
    whole real line (boundary segments extended) so that the pass-through
    extrapolator can reuse it; the public methods restrict it to the node range.
    """

    name: str = ""

    def validate_nodes(self, xs, ys) -> Tuple[np.ndarray, np.ndarray]:
        """Validate a node set for this interpolator."""
        xs, ys = as_nodes(xs, ys)
        self._check_values(ys)
        return xs, ys

    def interpolate(self, xs, ys, x: float) -> float:
        """
        Interpolate at a single point.

        Args:
            xs: Node abscissas
            ys: Node values
            x: Point inside [xs[0], xs[-1]]

        Returns:
            Interpolated value, exactly ys[i] when x == xs[i]
        """
        xs, ys = self._in_range(xs, ys, x)
        i = _node_index(xs, x)
        if i is not None:
            return float(ys[i])
        return self._evaluate(xs, ys, x)

    def first_derivative(self, xs, ys, x: float) -> float:
        """First derivative with respect to x at a single point."""
        xs, ys = self._in_range(xs, ys, x)
        return self._evaluate_derivative(xs, ys, x)

    def node_sensitivities(self, xs, ys, x: float) -> np.ndarray:
        """
        Sensitivity of the interpolated value to each node value.

        Returns:
            Array of d(interpolate(x))/d(ys[i]), one entry per node
        """
        xs, ys = self._in_range(xs, ys, x)
        i = _node_index(xs, x)
        if i is not None:
            result = np.zeros(len(xs))
            result[i] = 1.0
            return result
        return self._evaluate_sensitivities(xs, ys, x)

    def __call__(self, xs, ys, x: float) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(xs, ys, x)

    # Unchecked evaluation, also used by InterpolatorExtrapolator.
    # A single node is a constant function for every strategy.

    def _evaluate(self, xs: np.ndarray, ys: np.ndarray, x: float) -> float:
        if len(xs) == 1:
            return float(ys[0])
        return float(self._value(xs, ys, x))

    def _evaluate_derivative(self, xs: np.ndarray, ys: np.ndarray, x: float) -> float:
        if len(xs) == 1:
            return 0.0
        return float(self._derivative(xs, ys, x))

    def _evaluate_sensitivities(self, xs: np.ndarray, ys: np.ndarray, x: float) -> np.ndarray:
        if len(xs) == 1:
            return np.ones(1)
        return np.asarray(self._sensitivities(xs, ys, x), dtype=np.float64)

    def _in_range(self, xs, ys, x: float) -> Tuple[np.ndarray, np.ndarray]:
        xs, ys = self.validate_nodes(xs, ys)
        check_x(x)
        if x < xs[0] or x > xs[-1]:
            raise ValueError(
                f"Value {x} is outside the node range [{xs[0]}, {xs[-1]}]; "
                "use an extrapolator"
            )
        return xs, ys

    def _check_values(self, ys: np.ndarray) -> None:
        """Hook for strategy specific checks on the node values."""

    @abstractmethod
    def _value(self, xs: np.ndarray, ys: np.ndarray, x: float) -> float:
        pass

    @abstractmethod
    def _derivative(self, xs: np.ndarray, ys: np.ndarray, x: float) -> float:
        pass

    @abstractmethod
    def _sensitivities(self, xs: np.ndarray, ys: np.ndarray, x: float) -> np.ndarray:
        pass


@dataclass(frozen=True)
class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Simple linear interpolation between knot points.
    """

    name = "linear"

    def _value(self, xs, ys, x):
        i = _bracket(xs, x)
        w = (x - xs[i]) / (xs[i + 1] - xs[i])
        # (1 - w) * y0 + w * y1 is exact at both ends of the segment
        return (1.0 - w) * ys[i] + w * ys[i + 1]

    def _derivative(self, xs, ys, x):
        i = _bracket(xs, x)
        return (ys[i + 1] - ys[i]) / (xs[i + 1] - xs[i])

    def _sensitivities(self, xs, ys, x):
        i = _bracket(xs, x)
        w = (x - xs[i]) / (xs[i + 1] - xs[i])
        result = np.zeros(len(xs))
        result[i] = 1.0 - w
        result[i + 1] = w
        return result


@dataclass(frozen=True)
class LogLinearInterpolator(Interpolator):
    """
    Log-linear interpolation.

    Interpolates linearly in log space. On discount factors this
    corresponds to piecewise constant forward rates.
    """

    name = "log_linear"

    def _check_values(self, ys):
        if np.any(ys <= 0):
            raise ValueError("Log-linear interpolation requires positive values")

    def _value(self, xs, ys, x):
        i = _bracket(xs, x)
        w = (x - xs[i]) / (xs[i + 1] - xs[i])
        return ys[i] ** (1.0 - w) * ys[i + 1] ** w

    def _derivative(self, xs, ys, x):
        i = _bracket(xs, x)
        slope = (np.log(ys[i + 1]) - np.log(ys[i])) / (xs[i + 1] - xs[i])
        return self._value(xs, ys, x) * slope

    def _sensitivities(self, xs, ys, x):
        i = _bracket(xs, x)
        w = (x - xs[i]) / (xs[i + 1] - xs[i])
        value = self._value(xs, ys, x)
        result = np.zeros(len(xs))
        result[i] = (1.0 - w) * value / ys[i]
        result[i + 1] = w * value / ys[i + 1]
        return result


def _moment_matrix(xs: np.ndarray) -> np.ndarray:
    """
    Sensitivity of the natural spline second derivatives to the node values.

    The moments M solve T M = R y with natural boundary conditions
    M[0] = M[n-1] = 0, so M = (T^-1 R) y is linear in y.
    """
    n = len(xs)
    if n < 3:
        return np.zeros((n, n))

    h = np.diff(xs)
    T = np.zeros((n, n))
    R = np.zeros((n, n))
    T[0, 0] = 1.0
    T[n - 1, n - 1] = 1.0

    for i in range(1, n - 1):
        T[i, i - 1] = h[i - 1]
        T[i, i] = 2 * (h[i - 1] + h[i])
        T[i, i + 1] = h[i]
        R[i, i - 1] = 6 / h[i - 1]
        R[i, i] = -6 / h[i - 1] - 6 / h[i]
        R[i, i + 1] = 6 / h[i]

    return np.linalg.solve(T, R)


def _spline_weights(xs: np.ndarray, x: float) -> Tuple[int, float, float, float]:
    i = _bracket(xs, x)
    h = xs[i + 1] - xs[i]
    a = (xs[i + 1] - x) / h
    b = (x - xs[i]) / h
    return i, h, a, b


def _spline_value(xs, ys, x) -> float:
    m = _moment_matrix(xs) @ ys
    i, h, a, b = _spline_weights(xs, x)
    return (a * ys[i] + b * ys[i + 1]
            + ((a ** 3 - a) * m[i] + (b ** 3 - b) * m[i + 1]) * h * h / 6)


def _spline_derivative(xs, ys, x) -> float:
    m = _moment_matrix(xs) @ ys
    i, h, a, b = _spline_weights(xs, x)
    return ((ys[i + 1] - ys[i]) / h
            - (3 * a * a - 1) / 6 * h * m[i]
            + (3 * b * b - 1) / 6 * h * m[i + 1])


def _spline_sensitivities(xs, ys, x) -> np.ndarray:
    dm = _moment_matrix(xs)
    i, h, a, b = _spline_weights(xs, x)
    result = ((a ** 3 - a) * dm[i] + (b ** 3 - b) * dm[i + 1]) * h * h / 6
    result[i] += a
    result[i + 1] += b
    return result


@dataclass(frozen=True)
class NaturalCubicSplineInterpolator(Interpolator):
    """
    Cubic spline interpolation.

    Uses natural cubic splines (second derivative = 0 at boundaries).
    Provides smooth first and second derivatives. With two nodes the
    spline degenerates to linear interpolation.
    """

    name = "natural_cubic_spline"

    def _value(self, xs, ys, x):
        return _spline_value(xs, ys, x)

    def _derivative(self, xs, ys, x):
        return _spline_derivative(xs, ys, x)

    def _sensitivities(self, xs, ys, x):
        return _spline_sensitivities(xs, ys, x)


@dataclass(frozen=True)
class LogNaturalDiscountFactorInterpolator(Interpolator):
    """
    Natural cubic spline on the log of discount factors.

    The node values are discount factors; the spline runs through their
    logarithms and the result is exponentiated back.
    """

    name = "log_natural_discount_factor"

    def _check_values(self, ys):
        if np.any(ys <= 0):
            raise ValueError("Discount factors must be positive")

    def _value(self, xs, ys, x):
        return np.exp(_spline_value(xs, np.log(ys), x))

    def _derivative(self, xs, ys, x):
        log_ys = np.log(ys)
        return np.exp(_spline_value(xs, log_ys, x)) * _spline_derivative(xs, log_ys, x)

    def _sensitivities(self, xs, ys, x):
        log_ys = np.log(ys)
        value = np.exp(_spline_value(xs, log_ys, x))
        return value * _spline_sensitivities(xs, log_ys, x) / ys


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "log_linear", "natural_cubic_spline",
            "log_natural_discount_factor"

    Returns:
        Interpolator instance
    """
    method = method.lower().replace("-", "_").replace(" ", "_")

    if method in ("linear", "lin"):
        return LinearInterpolator()
    elif method in ("log_linear", "loglinear"):
        return LogLinearInterpolator()
    elif method in ("natural_cubic_spline", "cubic_spline", "cubic", "spline"):
        return NaturalCubicSplineInterpolator()
    elif method in ("log_natural_discount_factor", "log_natural"):
        return LogNaturalDiscountFactorInterpolator()
    else:
        raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "NaturalCubicSplineInterpolator",
    "LogNaturalDiscountFactorInterpolator",
    "as_nodes",
    "check_x",
    "create_interpolator",
]
