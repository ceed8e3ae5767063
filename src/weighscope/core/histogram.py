"""Fixed-width weight histogram of the visible samples."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..types import HistogramBin

DEFAULT_BIN_WIDTH = 0.02


def histogram(kg: Sequence[float] | np.ndarray, width: float = DEFAULT_BIN_WIDTH) -> List[HistogramBin]:
    """Bucket ``kg`` into bins centred on multiples of ``width``.

    A weight belongs to bin ``round(kg / width)`` (half-up) and the bin is
    centred on ``index * width``.  Only non-empty bins are returned, sorted
    by centre.  Each bin reports the half-open interval
    ``[center - width/2, center + width/2)``.
    """

    arr = np.asarray(kg, dtype=float)
    if arr.size == 0:
        return []
    # divide rather than multiply by 1/width; the two disagree near bin edges
    bins = np.floor(arr / width + 0.5).astype(np.int64)
    half = width / 2.0
    out: List[HistogramBin] = []
    for index, count in zip(*np.unique(bins, return_counts=True)):
        center = int(index) * width
        out.append(HistogramBin(center, center - half, center + half, int(count)))
    return out
