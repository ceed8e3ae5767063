"""Memoized cursor-window estimates."""

from __future__ import annotations

import logging
import math
from typing import Dict

from ..types import WindowEstimate
from .mode import binned_mode
from .store import SampleStore

logger = logging.getLogger(__name__)

DEFAULT_HALF_WIDTH_MS = 2500
DEFAULT_MAX_ENTRIES = 1000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class WindowEstimateCache:
    """Binned mode over ``[round(c) - H, round(c) + H]`` keyed by ``round(c)``.

    Pointer positions that round to the same millisecond share one entry.
    Eviction is first-in first-out: once ``max_entries`` is exceeded the
    oldest inserted key goes, whether or not it was read recently.

    The cache belongs to exactly one :class:`SampleStore`; binding another
    store clears it in the same call.
    """

    def __init__(
        self,
        store: SampleStore,
        *,
        half_width_ms: int = DEFAULT_HALF_WIDTH_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        resolution: float = 0.1,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.half_width_ms = half_width_ms
        self.max_entries = max_entries
        self.resolution = resolution
        self._entries: Dict[int, WindowEstimate] = {}
        self._store = store

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: int) -> bool:
        return key in self._entries

    @property
    def store(self) -> SampleStore:
        return self._store

    def bind(self, store: SampleStore) -> None:
        """Attach ``store`` and drop every entry computed against the old one."""

        self._store = store
        self.clear()

    def clear(self) -> None:
        if self._entries:
            logger.debug("clearing %d cached window estimates", len(self._entries))
        self._entries.clear()

    def estimate(self, center_t: float) -> WindowEstimate:
        if not math.isfinite(center_t):
            return WindowEstimate(center_t, center_t, None, 0)
        key = round_half_up(center_t)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        left = key - self.half_width_ms
        right = key + self.half_width_ms
        lo, hi = self._store.range_indices(left, right)
        mode = binned_mode(self._store.kg[lo:hi], self.resolution)
        result = WindowEstimate(
            left=float(left),
            right=float(right),
            mode_kg=None if mode is None else mode.value,
            count=hi - lo,
        )

        self._entries[key] = result
        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        return result
