"""Sorted, immutable storage for scale readings.

A :class:`SampleStore` is built once from whatever the data source hands over
and never modified afterwards; loading a new series means building a new
store.  Every range query downstream starts from :meth:`SampleStore.index_for_t`
or :meth:`SampleStore.range_indices`.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from ..types import Sample, ZoomDomain

logger = logging.getLogger(__name__)


def _coerce(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def _split(entry: Any) -> Tuple[float, float]:
    if isinstance(entry, Sample):
        return _coerce(entry.t), _coerce(entry.kg)
    if isinstance(entry, Mapping):
        return _coerce(entry.get("t")), _coerce(entry.get("kg"))
    try:
        t, kg = entry
    except (TypeError, ValueError):
        return math.nan, math.nan
    return _coerce(t), _coerce(kg)


class SampleStore:
    """Samples held in non-decreasing ``t`` order.

    Parameters
    ----------
    samples:
        Any iterable of :class:`~weighscope.types.Sample`, ``(t, kg)`` pairs
        or mappings with ``t``/``kg`` keys.  Entries whose ``t`` or ``kg`` is
        missing, non-numeric or non-finite are dropped.  Input that is already
        sorted is kept as is; otherwise a stable sort by ``t`` is applied so
        repeated timestamps keep their arrival order.
    """

    def __init__(self, samples: Iterable[Any] = ()) -> None:
        pairs = [_split(entry) for entry in samples]
        if pairs:
            arr = np.asarray(pairs, dtype=float).reshape(-1, 2)
        else:
            arr = np.empty((0, 2), dtype=float)
        finite = np.isfinite(arr).all(axis=1)
        dropped = int(arr.shape[0] - finite.sum())
        if dropped:
            logger.debug("dropped %d malformed samples", dropped)
        arr = arr[finite]

        t = arr[:, 0]
        kg = arr[:, 1]
        if t.size > 1 and np.any(np.diff(t) < 0):
            order = np.argsort(t, kind="stable")
            t = t[order]
            kg = kg[order]

        self._t = np.ascontiguousarray(t)
        self._kg = np.ascontiguousarray(kg)
        self._t.flags.writeable = False
        self._kg.flags.writeable = False

    @classmethod
    def load(cls, samples: Iterable[Any]) -> "SampleStore":
        """Build a new store from ``samples``."""

        return cls(samples)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return int(self._t.size)

    def __iter__(self) -> Iterator[Sample]:
        for t, kg in zip(self._t.tolist(), self._kg.tolist()):
            yield Sample(t, kg)

    def __getitem__(self, index: int) -> Sample:
        return Sample(float(self._t[index]), float(self._kg[index]))

    def __repr__(self) -> str:  # pragma: no cover
        return f"SampleStore(n={len(self)})"

    @property
    def t(self) -> np.ndarray:
        return self._t

    @property
    def kg(self) -> np.ndarray:
        return self._kg

    @property
    def empty(self) -> bool:
        return self._t.size == 0

    @property
    def extent(self) -> Optional[ZoomDomain]:
        """Full time extent, or ``None`` for an empty store."""

        if self.empty:
            return None
        return ZoomDomain(float(self._t[0]), float(self._t[-1]))

    def samples(self) -> List[Sample]:
        return list(self)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def index_for_t(self, target: float) -> int:
        """Return the index of the sample closest to ``target``.

        When two neighbours are equally close the earlier index wins; an exact
        match on a repeated timestamp resolves to the first occurrence.  An
        empty store yields ``0``.
        """

        n = self._t.size
        if n == 0:
            return 0
        j = int(np.searchsorted(self._t, target, side="left"))
        if j == 0:
            return 0
        if j == n:
            return n - 1
        prev_diff = abs(target - self._t[j - 1])
        next_diff = abs(self._t[j] - target)
        return j - 1 if prev_diff <= next_diff else j

    def range_indices(self, left: float, right: float) -> Tuple[int, int]:
        """Return ``(lo, hi)`` such that ``t[lo:hi]`` lies within ``[left, right]``."""

        lo = int(np.searchsorted(self._t, left, side="left"))
        hi = int(np.searchsorted(self._t, right, side="right"))
        return lo, max(lo, hi)

    def visible_indices(self, domain: Optional[ZoomDomain]) -> Tuple[int, int]:
        """Index slice of the samples visible under ``domain``.

        ``None`` means the full extent.
        """

        if domain is None:
            return 0, len(self)
        return self.range_indices(domain.left, domain.right)
