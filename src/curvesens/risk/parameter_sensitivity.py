"""
Curve parameter sensitivities.

The node-level form of a sensitivity: one array per (curve, currency) with one
entry per curve node. Collections combine as a disjoint union keyed by
(curve name, currency); identical keys add element-wise.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..curves.curve import CurveMetadata


@dataclass(frozen=True, eq=False)
class CurveCurrencyParameterSensitivity:
    """
    Sensitivity to each node of one curve, in one currency.

    Attributes:
        metadata: Metadata of the curve the nodes belong to
        currency: Currency of the amounts
        sensitivity: Array with one amount per node (read-only)
    """
    metadata: CurveMetadata
    currency: str
    sensitivity: np.ndarray

    def __post_init__(self):
        if self.metadata is None:
            raise ValueError("Curve metadata must not be None")
        if not self.currency:
            raise ValueError("Currency must not be empty")
        values = np.array(self.sensitivity, dtype=np.float64)
        if values.ndim != 1:
            raise ValueError("Sensitivity must be a one-dimensional array")
        values.setflags(write=False)
        object.__setattr__(self, "sensitivity", values)

    @property
    def curve_name(self) -> str:
        return self.metadata.name

    @property
    def key(self) -> Tuple[str, str]:
        return (self.metadata.name, self.currency)

    @property
    def parameter_count(self) -> int:
        return len(self.sensitivity)

    def plus(self, other: "CurveCurrencyParameterSensitivity") -> "CurveCurrencyParameterSensitivity":
        """Add another sensitivity with the same key."""
        if other.key != self.key:
            raise ValueError(f"Cannot add sensitivity {other.key} to {self.key}")
        if other.parameter_count != self.parameter_count:
            raise ValueError(
                f"Sensitivity sizes differ for {self.key}: "
                f"{self.parameter_count} != {other.parameter_count}"
            )
        return self.with_sensitivity(self.sensitivity + other.sensitivity)

    def multiplied_by(self, factor: float) -> "CurveCurrencyParameterSensitivity":
        return self.with_sensitivity(self.sensitivity * factor)

    def map_sensitivity(self, fn: Callable[[np.ndarray], np.ndarray]) -> "CurveCurrencyParameterSensitivity":
        return self.with_sensitivity(fn(self.sensitivity))

    def with_sensitivity(self, sensitivity) -> "CurveCurrencyParameterSensitivity":
        return replace(self, sensitivity=sensitivity)

    def converted_to(self, currency: str, fx_rate: float) -> "CurveCurrencyParameterSensitivity":
        """Convert using units of `currency` per unit of this currency."""
        if currency == self.currency:
            return self
        return replace(self, currency=currency, sensitivity=self.sensitivity * fx_rate)

    def total(self) -> float:
        return float(np.sum(self.sensitivity))

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurveCurrencyParameterSensitivity):
            return NotImplemented
        return (
            self.metadata == other.metadata
            and self.currency == other.currency
            and np.array_equal(self.sensitivity, other.sensitivity)
        )

    def __hash__(self) -> int:
        return hash((self.metadata, self.currency, self.sensitivity.tobytes()))


class CurveCurrencyParameterSensitivities:
    """
    Immutable collection of curve parameter sensitivities.

    At most one entry per (curve name, currency); entries are sorted by key.
    """

    def __init__(self, sensitivities: Iterable[CurveCurrencyParameterSensitivity] = ()):
        merged: Dict[Tuple[str, str], CurveCurrencyParameterSensitivity] = {}
        for s in sensitivities:
            if s.key in merged:
                merged[s.key] = merged[s.key].plus(s)
            else:
                merged[s.key] = s
        self._sensitivities = tuple(merged[k] for k in sorted(merged))

    @classmethod
    def of(cls, *sensitivities: CurveCurrencyParameterSensitivity) -> "CurveCurrencyParameterSensitivities":
        return cls(sensitivities)

    @classmethod
    def empty(cls) -> "CurveCurrencyParameterSensitivities":
        return cls(())

    @property
    def sensitivities(self) -> Tuple[CurveCurrencyParameterSensitivity, ...]:
        return self._sensitivities

    def size(self) -> int:
        return len(self._sensitivities)

    def combined_with(self, other) -> "CurveCurrencyParameterSensitivities":
        """
        Combine with another collection or a single sensitivity.

        Entries with the same (curve name, currency) are added, other entries
        are kept side by side.
        """
        if isinstance(other, CurveCurrencyParameterSensitivity):
            return CurveCurrencyParameterSensitivities(self._sensitivities + (other,))
        return CurveCurrencyParameterSensitivities(self._sensitivities + other.sensitivities)

    def find_sensitivity(self, curve_name: str, currency: str) -> Optional[CurveCurrencyParameterSensitivity]:
        for s in self._sensitivities:
            if s.key == (curve_name, currency):
                return s
        return None

    def get_sensitivity(self, curve_name: str, currency: str) -> CurveCurrencyParameterSensitivity:
        """
        Get the sensitivity for a curve and currency.

        Raises:
            ValueError: If there is no such entry
        """
        result = self.find_sensitivity(curve_name, currency)
        if result is None:
            raise ValueError(f"Unable to find sensitivity for curve {curve_name} in {currency}")
        return result

    def multiplied_by(self, factor: float) -> "CurveCurrencyParameterSensitivities":
        return CurveCurrencyParameterSensitivities(s.multiplied_by(factor) for s in self._sensitivities)

    def map_sensitivities(self, fn: Callable[[np.ndarray], np.ndarray]) -> "CurveCurrencyParameterSensitivities":
        return CurveCurrencyParameterSensitivities(s.map_sensitivity(fn) for s in self._sensitivities)

    def total(self) -> Dict[str, float]:
        """Sum of all node amounts, per currency."""
        result: Dict[str, float] = {}
        for s in self._sensitivities:
            result[s.currency] = result.get(s.currency, 0.0) + s.total()
        return result

    def converted_to(self, currency: str, fx_provider) -> "CurveCurrencyParameterSensitivities":
        """
        Convert every entry to a single currency.

        Args:
            currency: Target currency
            fx_provider: Object with fx_rate(base, counter), e.g. a RatesProvider

        Returns:
            Collection in the target currency, entries on the same curve merged
        """
        return CurveCurrencyParameterSensitivities(
            s.converted_to(currency, fx_provider.fx_rate(s.currency, currency))
            for s in self._sensitivities
        )

    def equal_with_tolerance(self, other: "CurveCurrencyParameterSensitivities", tolerance: float) -> bool:
        """
        Compare two collections element-wise within an absolute tolerance.

        An entry present on one side only is compared against zeros.
        """
        keys = {s.key for s in self._sensitivities} | {s.key for s in other.sensitivities}
        for name, currency in keys:
            mine = self.find_sensitivity(name, currency)
            theirs = other.find_sensitivity(name, currency)
            if mine is None:
                if np.any(np.abs(theirs.sensitivity) > tolerance):
                    return False
            elif theirs is None:
                if np.any(np.abs(mine.sensitivity) > tolerance):
                    return False
            elif mine.parameter_count != theirs.parameter_count:
                return False
            elif np.any(np.abs(mine.sensitivity - theirs.sensitivity) > tolerance):
                return False
        return True

    def to_frame(self) -> pd.DataFrame:
        """
        Tabulate the sensitivities, one row per curve node.

        Returns:
            DataFrame with columns curve, currency, node, sensitivity
        """
        rows: List[dict] = []
        for s in self._sensitivities:
            for i, value in enumerate(s.sensitivity):
                rows.append({
                    "curve": s.curve_name,
                    "currency": s.currency,
                    "node": i,
                    "sensitivity": float(value)
                })
        return pd.DataFrame(rows, columns=["curve", "currency", "node", "sensitivity"])

    def __iter__(self) -> Iterator[CurveCurrencyParameterSensitivity]:
        return iter(self._sensitivities)

    def __len__(self) -> int:
        return len(self._sensitivities)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CurveCurrencyParameterSensitivities):
            return NotImplemented
        return self._sensitivities == other._sensitivities

    def __hash__(self) -> int:
        return hash(self._sensitivities)

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{s.curve_name}/{s.currency}: {s.sensitivity.tolist()}" for s in self._sensitivities
        )
        return f"CurveCurrencyParameterSensitivities({entries})"


__all__ = [
    "CurveCurrencyParameterSensitivity",
    "CurveCurrencyParameterSensitivities",
]
