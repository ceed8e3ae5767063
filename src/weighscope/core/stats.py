"""Summary statistics and Y-axis fitting."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from ..types import SeriesStats, YDomain
from .store import SampleStore


def fit_y_domain(
    kg: Sequence[float] | np.ndarray,
    *,
    min_pad: float = 0.5,
    pad_fraction: float = 0.05,
) -> Optional[YDomain]:
    """Return ``(min - pad, max + pad)`` with ``pad = max(min_pad, span * pad_fraction)``.

    ``None`` for an empty input.
    """

    arr = np.asarray(kg, dtype=float)
    if arr.size == 0:
        return None
    lo = float(arr.min())
    hi = float(arr.max())
    pad = max(min_pad, (hi - lo) * pad_fraction)
    return (lo - pad, hi + pad)


def y_bounds(store: SampleStore) -> Optional[YDomain]:
    """Whole-kilogram axis limits with a 20% (at least 1 kg) margin."""

    if store.empty:
        return None
    lo = float(store.kg.min())
    hi = float(store.kg.max())
    margin = max(1.0, (hi - lo) * 0.2)
    return (float(math.floor(lo - margin)), float(math.ceil(hi + margin)))


def series_stats(store: SampleStore) -> Optional[SeriesStats]:
    if store.empty:
        return None
    kg = store.kg
    return SeriesStats(
        min=float(kg.min()),
        max=float(kg.max()),
        avg=float(kg.mean()),
        points=len(store),
    )
