"""Marker overlays with a bounded point budget.

Both overlays (samples in the current mode bin and samples inside an external
analysis window) go through :func:`downsample` so their visual density stays
comparable however long the series is.
"""

from __future__ import annotations

import math
from typing import List, Sequence, TypeVar

from .mode import bin_indices
from .store import SampleStore

T = TypeVar("T")

DEFAULT_MAX_MARKERS = 250


def downsample(items: Sequence[T], budget: int = DEFAULT_MAX_MARKERS) -> List[T]:
    """Return ``items`` unchanged if they fit in ``budget``, else every k-th.

    ``k = ceil(len(items) / budget)`` and sampling starts at the first item,
    so the result never exceeds ``budget`` and keeps the input order.
    """

    if budget <= 0:
        raise ValueError("budget must be positive")
    if len(items) <= budget:
        return list(items)
    step = math.ceil(len(items) / budget)
    return list(items[::step])


def mode_match_points(
    store: SampleStore,
    lo: int,
    hi: int,
    mode_kg: float | None,
    *,
    resolution: float = 0.1,
    budget: int = DEFAULT_MAX_MARKERS,
) -> List[float]:
    """Timestamps in ``store[lo:hi]`` whose weight falls in the ``mode_kg`` bin."""

    if mode_kg is None or hi <= lo:
        return []
    target = bin_indices([mode_kg], resolution)[0]
    mask = bin_indices(store.kg[lo:hi], resolution) == target
    return downsample(store.t[lo:hi][mask].tolist(), budget)


def window_match_points(
    store: SampleStore,
    lo: int,
    hi: int,
    start_ms: float,
    end_ms: float,
    *,
    budget: int = DEFAULT_MAX_MARKERS,
) -> List[float]:
    """Timestamps in ``store[lo:hi]`` inside ``[start_ms, end_ms]``."""

    if hi <= lo:
        return []
    t = store.t[lo:hi]
    mask = (t >= start_ms) & (t <= end_ms)
    return downsample(t[mask].tolist(), budget)


def as_marker_set(points: Sequence[float]) -> frozenset:
    """Wrap marker timestamps for constant-time membership tests."""

    return frozenset(points)
