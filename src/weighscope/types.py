"""Common record types for weighscope.

This module defines the lightweight containers exchanged between the
sample store, the estimators and the view engine.  All of them are frozen
dataclasses: derived values are rebuilt rather than mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

KG_TO_LBS = 2.20462262185


@dataclass(frozen=True)
class Sample:
    """A single scale reading: timestamp in milliseconds and weight in kg."""

    t: float
    kg: float


@dataclass(frozen=True)
class ZoomDomain:
    """Time-axis interval ``[left, right]`` expressed in milliseconds."""

    left: float
    right: float

    @property
    def width(self) -> float:
        """Return the interval length in milliseconds."""

        return self.right - self.left

    @property
    def midpoint(self) -> float:
        return (self.left + self.right) / 2.0

    @property
    def degenerate(self) -> bool:
        return self.left == self.right

    def normalized(self) -> "ZoomDomain":
        """Return the same interval with ``left <= right``."""

        return ZoomDomain(min(self.left, self.right), max(self.left, self.right))


@dataclass(frozen=True)
class BrushRange:
    """Inclusive index range into the full sample store."""

    start_index: int = 0
    end_index: int = 0

    @property
    def width(self) -> int:
        """Return the number of samples covered by the brush."""

        return self.end_index - self.start_index + 1


@dataclass(frozen=True)
class ModeResult:
    value: float
    count: int


@dataclass(frozen=True)
class WindowEstimate:
    """Binned mode over the symmetric window ``[left, right]``.

    ``mode_kg`` is ``None`` exactly when the window holds no samples.
    """

    left: float
    right: float
    mode_kg: Optional[float]
    count: int


@dataclass(frozen=True)
class GroupRange:
    """One group of the visible-sample partition.

    ``start_index``/``end_index`` are inclusive positions inside the visible
    set, not the full store.
    """

    start_t: float
    end_t: float
    start_index: int
    end_index: int
    count: int
    mode_kg: Optional[float]

    @property
    def midpoint(self) -> float:
        return (self.start_t + self.end_t) / 2.0

    def contains(self, t: float) -> bool:
        return self.start_t <= t <= self.end_t


@dataclass(frozen=True)
class HistogramBin:
    """Weight bucket covering the half-open interval ``[start, end)``."""

    center: float
    start: float
    end: float
    count: int


@dataclass(frozen=True)
class SeriesStats:
    min: float
    max: float
    avg: float
    points: int


@dataclass(frozen=True)
class WeightEstimate:
    """Single "current weight" estimate for a whole series."""

    kg: Optional[float]
    count: int

    @property
    def lbs(self) -> Optional[float]:
        if self.kg is None:
            return None
        return self.kg * KG_TO_LBS


YDomain = Tuple[float, float]
