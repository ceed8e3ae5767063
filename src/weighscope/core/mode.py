"""Binned mode estimation.

Weights are quantized to ``round(kg / resolution) * resolution`` with
half-up rounding and the most frequent bin wins.  When several bins share
the highest count the numerically larger one is reported.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..types import ModeResult, WeightEstimate
from .store import SampleStore


def bin_indices(kg: Sequence[float] | np.ndarray, resolution: float) -> np.ndarray:
    """Return the integer bin index of every weight in ``kg``."""

    scale = 1.0 / resolution
    return np.floor(np.asarray(kg, dtype=float) * scale + 0.5).astype(np.int64)


def bin_value(index: int, resolution: float) -> float:
    """Return the quantized weight represented by bin ``index``."""

    return float(index) / (1.0 / resolution)


def quantize(kg: float, resolution: float) -> float:
    return bin_value(int(bin_indices([kg], resolution)[0]), resolution)


def binned_mode(kg: Sequence[float] | np.ndarray, resolution: float = 0.1) -> Optional[ModeResult]:
    """Return the most frequent quantized weight in ``kg``.

    Parameters
    ----------
    kg:
        Weights in kilograms, in any order.
    resolution:
        Bin width used for quantization.

    Returns
    -------
    ModeResult or None
        ``None`` when ``kg`` is empty.  Ties on the count go to the larger
        quantized value.
    """

    bins = bin_indices(kg, resolution)
    if bins.size == 0:
        return None
    values, counts = np.unique(bins, return_counts=True)
    # values are ascending: the last maximum is the largest tied bin
    best = values.size - 1 - int(np.argmax(counts[::-1]))
    return ModeResult(bin_value(int(values[best]), resolution), int(counts[best]))


def estimate_weight(
    store: SampleStore,
    *,
    resolution: float = 0.1,
    min_kg: float = 9.0,
) -> WeightEstimate:
    """Estimate the stable weight of the whole series.

    Readings below ``min_kg`` (an empty or nearly empty platform) are
    ignored; if nothing remains the unfiltered series is used instead.
    """

    kg = store.kg
    result = None
    loaded = kg[kg >= min_kg]
    if loaded.size:
        result = binned_mode(loaded, resolution)
    if result is None:
        result = binned_mode(kg, resolution)
    if result is None:
        return WeightEstimate(None, 0)
    return WeightEstimate(result.value, result.count)
