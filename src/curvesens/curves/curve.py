"""
Curve representation.

An InterpolatedNodalCurve is an immutable function of one variable defined by
nodes, an interpolator and left/right extrapolators. The curve provides:
- value at x
- first derivative at x
- node sensitivities at x (gradient of the value with respect to each y node)
- bumped copies for finite difference risk

The metadata records how the values are meant to be read (zero rates or
discount factors against year fractions); interpolation itself does not
depend on it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from ..conventions import DayCount
from .extrapolation import Extrapolator, create_extrapolator
from .interpolation import Interpolator, check_x, create_interpolator


class ValueType(Enum):
    """Meaning of the x or y values of a curve."""
    YEAR_FRACTION = "YearFraction"
    ZERO_RATE = "ZeroRate"
    DISCOUNT_FACTOR = "DiscountFactor"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class CurveMetadata:
    """
    Descriptive information about a curve.

    Attributes:
        name: Curve name, unique within a market snapshot
        day_count: Day count converting dates to the x axis
        x_value_type: Meaning of the x values
        y_value_type: Meaning of the y values
    """
    name: str
    day_count: Optional[DayCount] = None
    x_value_type: ValueType = ValueType.YEAR_FRACTION
    y_value_type: ValueType = ValueType.UNKNOWN

    def __post_init__(self):
        if not self.name:
            raise ValueError("Curve name must not be empty")

    @classmethod
    def zero_rates(cls, name: str, day_count: DayCount = DayCount.ACT_365) -> "CurveMetadata":
        """Metadata for continuously compounded zero rates against year fractions."""
        return cls(name, day_count, ValueType.YEAR_FRACTION, ValueType.ZERO_RATE)

    @classmethod
    def discount_factors(cls, name: str, day_count: DayCount = DayCount.ACT_365) -> "CurveMetadata":
        """Metadata for discount factors against year fractions."""
        return cls(name, day_count, ValueType.YEAR_FRACTION, ValueType.DISCOUNT_FACTOR)


class InterpolatedNodalCurve:
    """
    Curve interpolated between nodes and extrapolated beyond them.

    Instances are immutable: node arrays are read-only and every "with"
    method returns a new curve.

    Attributes:
        metadata: Curve metadata
        interpolator: Interpolator used inside the node range
        left_extrapolator: Extrapolator used below the first node
        right_extrapolator: Extrapolator used above the last node
    """

    def __init__(
        self,
        metadata: CurveMetadata,
        x_values: Sequence[float],
        y_values: Sequence[float],
        interpolator: Union[str, Interpolator] = "linear",
        left_extrapolator: Union[str, Extrapolator] = "flat",
        right_extrapolator: Union[str, Extrapolator] = "flat"
    ):
        if metadata is None:
            raise ValueError("Curve metadata must not be None")
        if isinstance(interpolator, str):
            interpolator = create_interpolator(interpolator)
        if isinstance(left_extrapolator, str):
            left_extrapolator = create_extrapolator(left_extrapolator)
        if isinstance(right_extrapolator, str):
            right_extrapolator = create_extrapolator(right_extrapolator)

        xs, ys = interpolator.validate_nodes(x_values, y_values)
        xs = xs.copy()
        ys = ys.copy()
        xs.setflags(write=False)
        ys.setflags(write=False)

        self._metadata = metadata
        self._x = xs
        self._y = ys
        self._interpolator = interpolator
        self._left = left_extrapolator
        self._right = right_extrapolator

    @property
    def metadata(self) -> CurveMetadata:
        return self._metadata

    @property
    def name(self) -> str:
        return self._metadata.name

    @property
    def x_values(self) -> np.ndarray:
        """Node abscissas (read-only)."""
        return self._x

    @property
    def y_values(self) -> np.ndarray:
        """Node values (read-only)."""
        return self._y

    @property
    def parameter_count(self) -> int:
        """Number of nodes, the parameters of the curve."""
        return len(self._y)

    @property
    def interpolator(self) -> Interpolator:
        return self._interpolator

    @property
    def left_extrapolator(self) -> Extrapolator:
        return self._left

    @property
    def right_extrapolator(self) -> Extrapolator:
        return self._right

    def value_at(self, x: float) -> float:
        """
        Curve value at x.

        Inside the node range the interpolator answers; below the first node
        the left extrapolator, above the last node the right extrapolator.
        """
        check_x(x)
        if x < self._x[0]:
            return self._left.extrapolate(self._x, self._y, x, self._interpolator)
        if x > self._x[-1]:
            return self._right.extrapolate(self._x, self._y, x, self._interpolator)
        return self._interpolator.interpolate(self._x, self._y, x)

    def first_derivative_at(self, x: float) -> float:
        """First derivative of the curve with respect to x."""
        check_x(x)
        if x < self._x[0]:
            return self._left.first_derivative(self._x, self._y, x, self._interpolator)
        if x > self._x[-1]:
            return self._right.first_derivative(self._x, self._y, x, self._interpolator)
        return self._interpolator.first_derivative(self._x, self._y, x)

    def node_sensitivities_at(self, x: float) -> np.ndarray:
        """
        Sensitivity of value_at(x) to each node value.

        Returns:
            Array with one entry per node
        """
        check_x(x)
        if x < self._x[0]:
            return self._left.node_sensitivities(self._x, self._y, x, self._interpolator)
        if x > self._x[-1]:
            return self._right.node_sensitivities(self._x, self._y, x, self._interpolator)
        return self._interpolator.node_sensitivities(self._x, self._y, x)

    def with_y_values(self, y_values: Sequence[float]) -> "InterpolatedNodalCurve":
        """Create a new curve with the same nodes abscissas and new values."""
        if len(y_values) != len(self._y):
            raise ValueError(
                f"Expected {len(self._y)} y values, got {len(y_values)}"
            )
        return InterpolatedNodalCurve(
            self._metadata,
            self._x,
            y_values,
            self._interpolator,
            self._left,
            self._right
        )

    def with_bumped_node(self, node_index: int, delta: float) -> "InterpolatedNodalCurve":
        """
        Create a new curve with a single node value shifted.

        Args:
            node_index: Index of node to bump (0-based)
            delta: Amount added to the node value

        Returns:
            New bumped curve
        """
        if node_index < 0 or node_index >= len(self._y):
            raise IndexError(f"Invalid node index: {node_index}")

        bumped = np.array(self._y)
        bumped[node_index] += delta
        return self.with_y_values(bumped)

    def with_metadata(self, metadata: CurveMetadata) -> "InterpolatedNodalCurve":
        return InterpolatedNodalCurve(
            metadata,
            self._x,
            self._y,
            self._interpolator,
            self._left,
            self._right
        )

    def with_name(self, name: str) -> "InterpolatedNodalCurve":
        return self.with_metadata(replace(self._metadata, name=name))

    def __eq__(self, other) -> bool:
        if not isinstance(other, InterpolatedNodalCurve):
            return NotImplemented
        return (
            self._metadata == other._metadata
            and np.array_equal(self._x, other._x)
            and np.array_equal(self._y, other._y)
            and self._interpolator == other._interpolator
            and self._left == other._left
            and self._right == other._right
        )

    def __hash__(self) -> int:
        return hash((self._metadata, self._x.tobytes(), self._y.tobytes()))

    def __repr__(self) -> str:
        return (f"InterpolatedNodalCurve(name={self.name}, nodes={len(self._x)}, "
                f"interpolator={self._interpolator.name}, "
                f"extrapolators=({self._left.name}, {self._right.name}))")


def create_flat_curve(
    name: str,
    rate: float,
    day_count: DayCount = DayCount.ACT_365,
    tenors: Sequence[float] = (0.25, 0.5, 1, 2, 5, 10, 20, 30),
    interpolator: Union[str, Interpolator] = "linear"
) -> InterpolatedNodalCurve:
    """
    Create a flat zero-rate curve.

    Args:
        name: Curve name
        rate: Flat continuously compounded rate
        day_count: Day count of the curve time axis
        tenors: Node times in years
        interpolator: Interpolation method

    Returns:
        Flat curve
    """
    ys = [rate] * len(tenors)
    return InterpolatedNodalCurve(
        CurveMetadata.zero_rates(name, day_count),
        tenors,
        ys,
        interpolator
    )


__all__ = [
    "ValueType",
    "CurveMetadata",
    "InterpolatedNodalCurve",
    "create_flat_curve",
]
