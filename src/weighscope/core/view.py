"""View state machine for the zoomable weight chart.

Every user interaction is a pure transition ``(ViewState, ...) -> ViewState``.
:class:`ViewEngine` owns the sample store, the window-estimate cache and the
current state, applies one transition per input event and rebuilds the
derived :class:`ViewSnapshot` (visible range, groups, histogram, overlays)
before returning.

Transitions never raise for an empty store or out-of-range indices; they
leave the state at its defaults or clamp instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Optional, Tuple

from ..config import Settings
from ..ingest.results import AlgorithmResult
from ..types import (
    BrushRange,
    GroupRange,
    HistogramBin,
    SeriesStats,
    WeightEstimate,
    WindowEstimate,
    YDomain,
    ZoomDomain,
)
from .cache import WindowEstimateCache
from .groups import group_for_t, group_mode_series, partition
from .histogram import histogram
from .mode import estimate_weight
from .overlay import as_marker_set, mode_match_points, window_match_points
from .stats import fit_y_domain, series_stats, y_bounds
from .store import SampleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    zoom_domain: Optional[ZoomDomain] = None
    brush_range: BrushRange = BrushRange()
    y_domain: Optional[YDomain] = None
    y_auto: bool = True
    drag_anchor: Optional[ZoomDomain] = None
    hover_window: Optional[WindowEstimate] = None
    hover_t: Optional[float] = None


@dataclass(frozen=True)
class ViewContext:
    """Read-only inputs shared by every transition."""

    store: SampleStore
    cache: WindowEstimateCache
    settings: Settings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def full_brush(store: SampleStore) -> BrushRange:
    return BrushRange(0, max(0, len(store) - 1))


def _clamp_index(index: Any, n: int) -> Optional[int]:
    """Clamp ``index`` into ``[0, n - 1]``; ``None`` if it is not a number."""

    try:
        value = float(index)
    except OverflowError:
        # integers beyond float range
        return 0 if index < 0 else n - 1
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    if math.isinf(value):
        return 0 if value < 0 else n - 1
    return max(0, min(n - 1, int(value)))


def _valid_t(t: Any) -> Optional[float]:
    try:
        value = float(t)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _fit_visible(ctx: ViewContext, domain: Optional[ZoomDomain]) -> Optional[YDomain]:
    lo, hi = ctx.store.visible_indices(domain)
    yaxis = ctx.settings.yaxis
    return fit_y_domain(ctx.store.kg[lo:hi], min_pad=yaxis.min_pad_kg, pad_fraction=yaxis.pad_fraction)


def refit_y(state: ViewState, ctx: ViewContext) -> ViewState:
    """Re-fit the Y domain to the visible samples when auto mode is on.

    An empty visible set keeps the previous Y domain.
    """

    if not state.y_auto:
        return state
    fitted = _fit_visible(ctx, state.zoom_domain)
    if fitted is None:
        return state
    return replace(state, y_domain=fitted)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def pointer_down(state: ViewState, ctx: ViewContext, t: Any) -> ViewState:
    value = _valid_t(t)
    if value is None:
        return state
    return replace(
        state,
        drag_anchor=ZoomDomain(value, value),
        hover_window=ctx.cache.estimate(value),
        hover_t=value,
    )


def pointer_move(state: ViewState, ctx: ViewContext, t: Any) -> ViewState:
    value = _valid_t(t)
    if value is None:
        return state
    anchor = state.drag_anchor
    if anchor is not None:
        anchor = ZoomDomain(anchor.left, value)
    return replace(
        state,
        drag_anchor=anchor,
        hover_window=ctx.cache.estimate(value),
        hover_t=value,
    )


def pointer_up(state: ViewState, ctx: ViewContext) -> ViewState:
    """Commit a non-degenerate drag as the zoom domain.

    Transient drag and hover state is cleared in every case.
    """

    anchor = state.drag_anchor
    state = replace(state, drag_anchor=None, hover_window=None, hover_t=None)
    if anchor is None or anchor.degenerate or ctx.store.empty:
        return state

    domain = anchor.normalized()
    start = ctx.store.index_for_t(domain.left)
    end = ctx.store.index_for_t(domain.right)
    logger.debug("zoom committed to %s", domain)
    state = replace(
        state,
        zoom_domain=domain,
        brush_range=BrushRange(min(start, end), max(start, end)),
    )
    return refit_y(state, ctx)


def brush_change(state: ViewState, ctx: ViewContext, start_index: Any, end_index: Any) -> ViewState:
    """Pan/zoom from the brush; indices address the full store.

    Out-of-range indices are clamped.  A NaN or non-numeric index leaves the
    state unchanged.
    """

    n = len(ctx.store)
    if n == 0:
        return state
    a = _clamp_index(start_index, n)
    b = _clamp_index(end_index, n)
    if a is None or b is None:
        return state
    start, end = min(a, b), max(a, b)
    domain = ZoomDomain(float(ctx.store.t[start]), float(ctx.store.t[end]))
    center = domain.midpoint
    state = replace(
        state,
        brush_range=BrushRange(start, end),
        zoom_domain=domain,
        hover_window=ctx.cache.estimate(center),
        hover_t=center,
    )
    return refit_y(state, ctx)


def reset(state: ViewState, ctx: ViewContext) -> ViewState:
    return ViewState(
        zoom_domain=None,
        brush_range=full_brush(ctx.store),
        y_domain=_fit_visible(ctx, None),
        y_auto=True,
        drag_anchor=None,
        hover_window=None,
        hover_t=None,
    )


def fit_y_to_zoom(state: ViewState, ctx: ViewContext) -> ViewState:
    """Fit the Y domain to the current zoom once and freeze it until reset."""

    fitted = _fit_visible(ctx, state.zoom_domain)
    if fitted is None:
        return state
    return replace(state, y_domain=fitted, y_auto=False)


# ---------------------------------------------------------------------------
# Derived output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ViewSnapshot:
    """Everything a renderer needs for one frame."""

    store: SampleStore
    state: ViewState
    x_domain: Optional[Tuple[float, float]]
    visible: Tuple[int, int]
    groups: List[GroupRange] = field(default_factory=list)
    group_modes: List[Tuple[float, Optional[float]]] = field(default_factory=list)
    histogram: List[HistogramBin] = field(default_factory=list)
    estimate: WeightEstimate = WeightEstimate(None, 0)
    stats: Optional[SeriesStats] = None
    y_bounds: Optional[YDomain] = None
    mode_points: frozenset = frozenset()
    window_points: frozenset = frozenset()
    result: Optional[AlgorithmResult] = None

    @property
    def zoom_domain(self) -> Optional[ZoomDomain]:
        return self.state.zoom_domain

    @property
    def brush_range(self) -> BrushRange:
        return self.state.brush_range

    @property
    def y_domain(self) -> Optional[YDomain]:
        return self.state.y_domain

    @property
    def hover_window(self) -> Optional[WindowEstimate]:
        return self.state.hover_window

    @property
    def visible_count(self) -> int:
        return self.visible[1] - self.visible[0]


def build_snapshot(
    state: ViewState,
    ctx: ViewContext,
    *,
    estimate: WeightEstimate,
    result: Optional[AlgorithmResult] = None,
) -> ViewSnapshot:
    store = ctx.store
    cfg = ctx.settings
    lo, hi = store.visible_indices(state.zoom_domain)

    if state.zoom_domain is not None:
        x_domain: Optional[Tuple[float, float]] = (state.zoom_domain.left, state.zoom_domain.right)
    else:
        extent = store.extent
        x_domain = None if extent is None else (extent.left, extent.right)

    groups = partition(
        store, lo, hi, groups=cfg.groups.count, resolution=cfg.estimator.resolution_kg
    )
    mode_points = mode_match_points(
        store,
        lo,
        hi,
        estimate.kg,
        resolution=cfg.estimator.resolution_kg,
        budget=cfg.overlay.max_markers,
    )
    window_points: List[float] = []
    if result is not None:
        start_ms, end_ms = result.window_ms()
        window_points = window_match_points(
            store, lo, hi, start_ms, end_ms, budget=cfg.overlay.max_markers
        )

    return ViewSnapshot(
        store=store,
        state=state,
        x_domain=x_domain,
        visible=(lo, hi),
        groups=groups,
        group_modes=group_mode_series(groups),
        histogram=histogram(store.kg[lo:hi], cfg.histogram.bin_width_kg),
        estimate=estimate,
        stats=series_stats(store),
        y_bounds=y_bounds(store),
        mode_points=as_marker_set(mode_points),
        window_points=as_marker_set(window_points),
        result=result,
    )


class ViewEngine:
    """Single owner of the store, the cache and the view state.

    Each public event handler runs one transition to completion and returns
    the new :class:`ViewSnapshot`.  Loading a series swaps the store and
    clears the cache in the same call, so no cached window estimate can
    outlive the series it was computed from.
    """

    def __init__(
        self,
        samples: Iterable[Any] = (),
        *,
        settings: Optional[Settings] = None,
        result: Optional[AlgorithmResult] = None,
    ) -> None:
        self.settings = settings or Settings()
        store = samples if isinstance(samples, SampleStore) else SampleStore(samples)
        self._cache = WindowEstimateCache(
            store,
            half_width_ms=self.settings.window.half_width_ms,
            max_entries=self.settings.window.cache_size,
            resolution=self.settings.estimator.resolution_kg,
        )
        self._result = result
        self._install(store)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def store(self) -> SampleStore:
        return self._ctx.store

    @property
    def cache(self) -> WindowEstimateCache:
        return self._cache

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def snapshot(self) -> ViewSnapshot:
        return self._snapshot

    @property
    def estimate(self) -> WeightEstimate:
        return self._estimate

    # ------------------------------------------------------------------
    # Data events
    # ------------------------------------------------------------------

    def _install(self, store: SampleStore) -> None:
        self._cache.bind(store)
        self._ctx = ViewContext(store, self._cache, self.settings)
        self._estimate = estimate_weight(
            store,
            resolution=self.settings.estimator.resolution_kg,
            min_kg=self.settings.estimator.min_weight_kg,
        )
        self._state = reset(ViewState(), self._ctx)
        logger.debug("loaded %d samples, estimate=%s", len(store), self._estimate.kg)
        self._refresh()

    def load(self, samples: Iterable[Any]) -> ViewSnapshot:
        """Replace the series wholesale and reset the view."""

        store = samples if isinstance(samples, SampleStore) else SampleStore(samples)
        self._install(store)
        return self._snapshot

    def set_algorithm_result(self, result: Optional[AlgorithmResult]) -> ViewSnapshot:
        self._result = result
        return self._refresh()

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def pointer_down(self, t: float) -> ViewSnapshot:
        return self._apply(pointer_down(self._state, self._ctx, t))

    def pointer_move(self, t: float) -> ViewSnapshot:
        return self._apply(pointer_move(self._state, self._ctx, t))

    def pointer_up(self) -> ViewSnapshot:
        return self._apply(pointer_up(self._state, self._ctx))

    def brush_change(self, start_index: int, end_index: int) -> ViewSnapshot:
        return self._apply(brush_change(self._state, self._ctx, start_index, end_index))

    def reset(self) -> ViewSnapshot:
        return self._apply(reset(self._state, self._ctx))

    def fit_y_to_zoom(self) -> ViewSnapshot:
        return self._apply(fit_y_to_zoom(self._state, self._ctx))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def window_estimate(self, center_t: float) -> WindowEstimate:
        return self._cache.estimate(center_t)

    def group_for_t(self, t: float) -> Optional[GroupRange]:
        return group_for_t(self._snapshot.groups, t)

    # ------------------------------------------------------------------

    def _apply(self, state: ViewState) -> ViewSnapshot:
        self._state = state
        return self._refresh()

    def _refresh(self) -> ViewSnapshot:
        self._snapshot = build_snapshot(
            self._state, self._ctx, estimate=self._estimate, result=self._result
        )
        return self._snapshot
