"""Partition of the visible samples into local-mode groups."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from ..types import GroupRange
from .mode import binned_mode
from .store import SampleStore

DEFAULT_GROUP_COUNT = 10


def partition(
    store: SampleStore,
    lo: int,
    hi: int,
    *,
    groups: int = DEFAULT_GROUP_COUNT,
    resolution: float = 0.1,
) -> List[GroupRange]:
    """Split ``store[lo:hi]`` into at most ``groups`` contiguous groups.

    Every group holds ``ceil(n / groups)`` samples except the last, which
    takes whatever remains and stops at ``hi``.  Fewer groups are produced
    when fewer than ``groups`` samples are visible, and none for an empty
    range.  Indices in the returned ranges are relative to ``lo``.
    """

    n = hi - lo
    out: List[GroupRange] = []
    if n <= 0:
        return out
    count = max(1, min(groups, n))
    size = math.ceil(n / count)
    t = store.t
    kg = store.kg
    for g in range(count):
        start = g * size
        end = min(n - 1, (g + 1) * size - 1)
        if start > end:
            break
        mode = binned_mode(kg[lo + start : lo + end + 1], resolution)
        out.append(
            GroupRange(
                start_t=float(t[lo + start]),
                end_t=float(t[lo + end]),
                start_index=start,
                end_index=end,
                count=end - start + 1,
                mode_kg=None if mode is None else mode.value,
            )
        )
    return out


def group_for_t(groups: Sequence[GroupRange], t: float) -> Optional[GroupRange]:
    """Return the first group whose time span contains ``t``."""

    for group in groups:
        if group.contains(t):
            return group
    return None


def group_mode_series(groups: Sequence[GroupRange]) -> List[Tuple[float, Optional[float]]]:
    """One ``(midpoint_t, mode_kg)`` point per group for the overlay line."""

    return [(g.midpoint, g.mode_kg) for g in groups]
