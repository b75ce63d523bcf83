"""
Extrapolation methods for curves.

Extrapolators answer for points strictly outside the node range and reject
points inside it. Each one works on top of the interpolator of the curve:

- InterpolatorExtrapolator: pass-through to the interpolator's own formula
- FlatExtrapolator: boundary value held constant
- LinearExtrapolator: boundary value extended with the slope of the
  interpolator just inside the range
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .interpolation import Interpolator, check_x


class Extrapolator(ABC):
    """Abstract base class for curve extrapolation."""

    name: str = ""

    def extrapolate(self, xs, ys, x: float, interpolator: Interpolator) -> float:
        """
        Extrapolate at a single point outside the node range.

        Args:
            xs: Node abscissas
            ys: Node values
            x: Point with x < xs[0] or x > xs[-1]
            interpolator: Interpolator of the curve

        Returns:
            Extrapolated value
        """
        xs, ys, left = self._out_of_range(xs, ys, x, interpolator)
        return float(self._value(xs, ys, x, interpolator, left))

    def first_derivative(self, xs, ys, x: float, interpolator: Interpolator) -> float:
        """First derivative with respect to x at a point outside the node range."""
        xs, ys, left = self._out_of_range(xs, ys, x, interpolator)
        return float(self._derivative(xs, ys, x, interpolator, left))

    def node_sensitivities(self, xs, ys, x: float, interpolator: Interpolator) -> np.ndarray:
        """Sensitivity of the extrapolated value to each node value."""
        xs, ys, left = self._out_of_range(xs, ys, x, interpolator)
        return np.asarray(self._sensitivities(xs, ys, x, interpolator, left), dtype=np.float64)

    def _out_of_range(self, xs, ys, x, interpolator) -> Tuple[np.ndarray, np.ndarray, bool]:
        if interpolator is None:
            raise ValueError("Interpolator must not be None")
        check_x(x)
        xs, ys = interpolator.validate_nodes(xs, ys)
        if x < xs[0]:
            return xs, ys, True
        if x > xs[-1]:
            return xs, ys, False
        raise ValueError(f"Value {x} was within data range [{xs[0]}, {xs[-1]}]")

    @abstractmethod
    def _value(self, xs, ys, x, interpolator, left: bool) -> float:
        pass

    @abstractmethod
    def _derivative(self, xs, ys, x, interpolator, left: bool) -> float:
        pass

    @abstractmethod
    def _sensitivities(self, xs, ys, x, interpolator, left: bool) -> np.ndarray:
        pass


@dataclass(frozen=True)
class InterpolatorExtrapolator(Extrapolator):
    """
    Extrapolator that does no extrapolation itself.

    All three operations delegate to the interpolator formula evaluated
    beyond the boundary nodes, so curves never need a null extrapolator.
    """

    name = "interpolator"

    def _value(self, xs, ys, x, interpolator, left):
        return interpolator._evaluate(xs, ys, x)

    def _derivative(self, xs, ys, x, interpolator, left):
        return interpolator._evaluate_derivative(xs, ys, x)

    def _sensitivities(self, xs, ys, x, interpolator, left):
        return interpolator._evaluate_sensitivities(xs, ys, x)


@dataclass(frozen=True)
class FlatExtrapolator(Extrapolator):
    """Flat extrapolation: the boundary node value beyond the range."""

    name = "flat"

    def _value(self, xs, ys, x, interpolator, left):
        return ys[0] if left else ys[-1]

    def _derivative(self, xs, ys, x, interpolator, left):
        return 0.0

    def _sensitivities(self, xs, ys, x, interpolator, left):
        result = np.zeros(len(xs))
        result[0 if left else -1] = 1.0
        return result


@dataclass(frozen=True)
class LinearExtrapolator(Extrapolator):
    """
    Linear extrapolation from the boundary node.

    The slope is a one-sided difference of the interpolator over a small
    offset inside the range, `eps` relative to the node span.

    Attributes:
        eps: Relative offset used for the boundary slope
    """

    eps: float = 1e-8

    name = "linear"

    def __post_init__(self):
        if not self.eps > 0:
            raise ValueError(f"eps must be positive: {self.eps}")

    def _offset(self, xs) -> float:
        return self.eps * (xs[-1] - xs[0])

    def _slope(self, xs, ys, interpolator, left) -> float:
        eps = self._offset(xs)
        if left:
            return (interpolator.interpolate(xs, ys, xs[0] + eps) - ys[0]) / eps
        return (ys[-1] - interpolator.interpolate(xs, ys, xs[-1] - eps)) / eps

    def _value(self, xs, ys, x, interpolator, left):
        if len(xs) == 1:
            return ys[0]
        x_b, y_b = (xs[0], ys[0]) if left else (xs[-1], ys[-1])
        return y_b + (x - x_b) * self._slope(xs, ys, interpolator, left)

    def _derivative(self, xs, ys, x, interpolator, left):
        if len(xs) == 1:
            return 0.0
        return self._slope(xs, ys, interpolator, left)

    def _sensitivities(self, xs, ys, x, interpolator, left):
        if len(xs) == 1:
            return np.ones(1)
        eps = self._offset(xs)
        if left:
            result = interpolator.node_sensitivities(xs, ys, xs[0] + eps)
            factor = (x - xs[0]) / eps
            result[1:] = result[1:] * factor
            result[0] = 1.0 + (result[0] - 1.0) * factor
        else:
            result = interpolator.node_sensitivities(xs, ys, xs[-1] - eps)
            factor = (x - xs[-1]) / eps
            result[:-1] = -result[:-1] * factor
            result[-1] = 1.0 + (1.0 - result[-1]) * factor
        return result


def create_extrapolator(method: str) -> Extrapolator:
    """
    Factory function to create an extrapolator by name.

    Args:
        method: One of "flat", "linear", "interpolator"

    Returns:
        Extrapolator instance
    """
    method = method.lower().replace("-", "_").replace(" ", "_")

    if method == "flat":
        return FlatExtrapolator()
    elif method in ("linear", "lin"):
        return LinearExtrapolator()
    elif method in ("interpolator", "pass_through", "none"):
        return InterpolatorExtrapolator()
    else:
        raise ValueError(f"Unknown extrapolation method: {method}")


__all__ = [
    "Extrapolator",
    "InterpolatorExtrapolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "create_extrapolator",
]
