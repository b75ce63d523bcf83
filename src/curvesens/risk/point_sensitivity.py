"""
Point sensitivities.

A point sensitivity is the derivative of a value with respect to the zero
rate of one curve at one date, before it is decomposed onto the curve nodes.
Entries keyed by the same (curve name, currency, date) add up.
"""

from collections import OrderedDict
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Iterator, List, Tuple
import math


@dataclass(frozen=True)
class ZeroRateSensitivity:
    """
    Sensitivity to the continuously compounded zero rate of a curve at a date.

    Attributes:
        curve_name: Name of the curve the rate is read from
        date: Date of the zero rate
        currency: Currency of the sensitivity amount
        sensitivity: Amount, in units of currency per unit of zero rate
    """
    curve_name: str
    date: date
    currency: str
    sensitivity: float

    def __post_init__(self):
        if not self.curve_name:
            raise ValueError("Curve name must not be empty")
        if self.date is None:
            raise ValueError("Sensitivity date must not be None")
        if not self.currency:
            raise ValueError("Currency must not be empty")
        if not math.isfinite(self.sensitivity):
            raise ValueError(f"Sensitivity must be finite: {self.sensitivity}")
        object.__setattr__(self, "sensitivity", float(self.sensitivity))

    @property
    def key(self) -> Tuple[str, str, date]:
        return (self.curve_name, self.currency, self.date)

    def multiplied_by(self, factor: float) -> "ZeroRateSensitivity":
        return replace(self, sensitivity=self.sensitivity * factor)

    def with_sensitivity(self, sensitivity: float) -> "ZeroRateSensitivity":
        return replace(self, sensitivity=sensitivity)

    def with_currency(self, currency: str) -> "ZeroRateSensitivity":
        return replace(self, currency=currency)

    def build(self) -> "PointSensitivities":
        """Wrap this single entry in a PointSensitivities collection."""
        return PointSensitivities((self,))


class PointSensitivities:
    """
    Immutable collection of zero-rate point sensitivities.

    Entries are kept in insertion order; `normalized` merges entries with the
    same key.
    """

    def __init__(self, sensitivities: Iterable[ZeroRateSensitivity] = ()):
        entries = tuple(sensitivities)
        for s in entries:
            if not isinstance(s, ZeroRateSensitivity):
                raise ValueError(f"Expected ZeroRateSensitivity, got {type(s).__name__}")
        self._sensitivities = entries

    @classmethod
    def of(cls, *sensitivities: ZeroRateSensitivity) -> "PointSensitivities":
        return cls(sensitivities)

    @classmethod
    def empty(cls) -> "PointSensitivities":
        return cls(())

    @property
    def sensitivities(self) -> Tuple[ZeroRateSensitivity, ...]:
        return self._sensitivities

    def combined_with(self, other) -> "PointSensitivities":
        """
        Concatenate with another collection or a single entry.

        No merging takes place; call `normalized` to merge equal keys.
        """
        if isinstance(other, ZeroRateSensitivity):
            return PointSensitivities(self._sensitivities + (other,))
        return PointSensitivities(self._sensitivities + tuple(other))

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(s.multiplied_by(factor) for s in self._sensitivities)

    def normalized(self) -> "PointSensitivities":
        """
        Merge entries with the same (curve name, currency, date).

        The result is sorted by curve name, currency and date.
        """
        merged = OrderedDict()
        for s in self._sensitivities:
            if s.key in merged:
                merged[s.key] = merged[s.key].with_sensitivity(
                    merged[s.key].sensitivity + s.sensitivity
                )
            else:
                merged[s.key] = s
        return PointSensitivities(sorted(merged.values(), key=lambda s: s.key))

    def total(self) -> float:
        """Sum of all amounts, regardless of curve and currency."""
        return sum(s.sensitivity for s in self._sensitivities)

    def equal_with_tolerance(self, other: "PointSensitivities", tolerance: float) -> bool:
        """
        Compare two collections after normalization.

        Keys present on one side only compare against zero.
        """
        left = {s.key: s.sensitivity for s in self.normalized()}
        right = {s.key: s.sensitivity for s in other.normalized()}
        for key in set(left) | set(right):
            if abs(left.get(key, 0.0) - right.get(key, 0.0)) > tolerance:
                return False
        return True

    def curve_names(self) -> List[str]:
        names = []
        for s in self._sensitivities:
            if s.curve_name not in names:
                names.append(s.curve_name)
        return names

    def __iter__(self) -> Iterator[ZeroRateSensitivity]:
        return iter(self._sensitivities)

    def __len__(self) -> int:
        return len(self._sensitivities)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointSensitivities):
            return NotImplemented
        return self._sensitivities == other._sensitivities

    def __hash__(self) -> int:
        return hash(self._sensitivities)

    def __repr__(self) -> str:
        return f"PointSensitivities({list(self._sensitivities)})"


__all__ = ["ZeroRateSensitivity", "PointSensitivities"]
