import pytest

from weighscope.config import Settings
from weighscope.core.store import SampleStore
from weighscope.core.view import ViewEngine, ViewState
from weighscope.ingest import AlgorithmResult
from weighscope.types import BrushRange, ZoomDomain


def ramp(n=50, step=100):
    # weight settles on 72.3 kg after a short ramp up
    out = []
    for i in range(n):
        kg = 72.3 if i >= 10 else 7.0 * i
        out.append((i * step, kg))
    return out


def test_initial_state_shows_full_extent():
    engine = ViewEngine(ramp())
    snap = engine.snapshot
    assert snap.zoom_domain is None
    assert snap.brush_range == BrushRange(0, 49)
    assert snap.x_domain == (0.0, 4900.0)
    assert snap.visible == (0, 50)
    assert snap.state.y_auto
    assert snap.y_domain is not None
    assert snap.estimate.kg == pytest.approx(72.3)
    assert len(snap.groups) == 10


def test_empty_series_keeps_defaults():
    engine = ViewEngine([])
    snap = engine.snapshot
    assert snap.brush_range == BrushRange(0, 0)
    assert snap.x_domain is None
    assert snap.y_domain is None
    assert snap.groups == []
    assert snap.histogram == []
    assert snap.estimate.kg is None
    assert snap.mode_points == frozenset()
    engine.pointer_down(10)
    engine.pointer_move(20)
    snap = engine.pointer_up()
    assert snap.zoom_domain is None
    assert snap.brush_range == BrushRange(0, 0)
    assert engine.brush_change(3, 7).brush_range == BrushRange(0, 0)
    assert engine.reset().state == ViewState()
    assert engine.fit_y_to_zoom().y_domain is None


def test_drag_to_zoom_commits_domain_and_brush():
    engine = ViewEngine(ramp())
    snap = engine.pointer_down(1040)
    assert snap.state.drag_anchor == ZoomDomain(1040.0, 1040.0)
    assert snap.hover_window is not None
    assert snap.state.hover_t == 1040.0
    snap = engine.pointer_move(2960)
    assert snap.state.drag_anchor == ZoomDomain(1040.0, 2960.0)
    snap = engine.pointer_up()
    assert snap.zoom_domain == ZoomDomain(1040.0, 2960.0)
    assert snap.brush_range == BrushRange(10, 30)
    assert snap.state.drag_anchor is None
    assert snap.hover_window is None
    assert snap.state.hover_t is None
    assert snap.visible == (11, 30)


def test_reverse_drag_is_normalized():
    engine = ViewEngine(ramp())
    engine.pointer_down(3000)
    engine.pointer_move(1000)
    snap = engine.pointer_up()
    assert snap.zoom_domain == ZoomDomain(1000.0, 3000.0)
    assert snap.brush_range == BrushRange(10, 30)


def test_degenerate_drag_is_rejected():
    engine = ViewEngine(ramp())
    engine.pointer_down(5)
    snap = engine.pointer_up()
    assert snap.zoom_domain is None
    assert snap.brush_range == BrushRange(0, 49)

    engine.brush_change(5, 9)
    zoomed = engine.snapshot.zoom_domain
    engine.pointer_down(2000)
    engine.pointer_move(2000)
    snap = engine.pointer_up()
    assert snap.zoom_domain == zoomed


def test_pointer_up_without_anchor_only_clears_hover():
    engine = ViewEngine(ramp())
    snap = engine.pointer_move(1500)
    assert snap.state.drag_anchor is None
    assert snap.hover_window.count > 0
    snap = engine.pointer_up()
    assert snap.hover_window is None
    assert snap.zoom_domain is None


def test_hover_window_estimate():
    engine = ViewEngine(ramp())
    snap = engine.pointer_move(3000)
    est = snap.hover_window
    assert (est.left, est.right) == (500.0, 5500.0)
    assert est.mode_kg == pytest.approx(72.3)
    assert est.count == 45


def test_non_finite_pointer_is_ignored():
    engine = ViewEngine(ramp())
    before = engine.state
    engine.pointer_down(float("nan"))
    engine.pointer_move("not a number")
    assert engine.state == before


def test_brush_indices_are_normalized():
    engine = ViewEngine([(0, 1.0), (10, 2.0), (20, 3.0), (30, 4.0), (40, 5.0)])
    snap = engine.brush_change(2, 0)
    assert snap.brush_range == BrushRange(0, 2)
    assert snap.zoom_domain == ZoomDomain(0.0, 20.0)
    assert snap.state.hover_t == 10.0
    assert snap.hover_window is not None


def test_brush_indices_are_clamped():
    engine = ViewEngine([(0, 1.0), (10, 2.0), (20, 3.0), (30, 4.0), (40, 5.0)])
    snap = engine.brush_change(-5, 99)
    assert snap.brush_range == BrushRange(0, 4)
    assert snap.zoom_domain == ZoomDomain(0.0, 40.0)


def test_brush_with_equal_indices_shows_one_sample():
    engine = ViewEngine([(0, 1.0), (10, 2.0), (20, 3.0)])
    snap = engine.brush_change(1, 1)
    assert snap.zoom_domain == ZoomDomain(10.0, 10.0)
    assert snap.visible_count == 1
    assert len(snap.groups) == 1
    assert snap.histogram[0].count == 1


def test_reset_restores_initial_state():
    engine = ViewEngine(ramp())
    initial = engine.state
    engine.pointer_down(500)
    engine.pointer_move(2500)
    engine.pointer_up()
    engine.brush_change(20, 3)
    engine.fit_y_to_zoom()
    engine.pointer_move(4000)
    snap = engine.reset()
    assert snap.state == initial
    assert snap.zoom_domain is None
    assert snap.brush_range == BrushRange(0, 49)


def test_y_domain_follows_visible_samples():
    engine = ViewEngine(ramp())
    full = engine.snapshot.y_domain
    assert full[0] < 0.0
    snap = engine.brush_change(20, 40)
    assert snap.y_domain == pytest.approx((71.8, 72.8))
    assert snap.y_domain != full


def test_fit_to_zoom_freezes_y_until_reset():
    engine = ViewEngine(ramp())
    engine.brush_change(5, 12)
    snap = engine.fit_y_to_zoom()
    frozen = snap.y_domain
    assert not snap.state.y_auto
    snap = engine.brush_change(20, 40)
    assert snap.y_domain == frozen
    snap = engine.reset()
    assert snap.state.y_auto
    assert snap.y_domain != frozen


def test_zoom_into_empty_region_keeps_y_domain():
    engine = ViewEngine([(0, 70.0), (1000, 71.0), (5000, 90.0)])
    before = engine.snapshot.y_domain
    engine.pointer_down(2000)
    engine.pointer_move(3000)
    snap = engine.pointer_up()
    assert snap.visible_count == 0
    assert snap.y_domain == before
    assert snap.groups == []
    assert snap.histogram == []


def test_load_replaces_series_and_clears_cache():
    engine = ViewEngine(ramp())
    engine.pointer_move(3000)
    engine.brush_change(5, 10)
    assert len(engine.cache) > 0
    snap = engine.load([(0, 55.0), (100, 55.0)])
    assert len(engine.cache) == 0
    assert snap.zoom_domain is None
    assert snap.brush_range == BrushRange(0, 1)
    assert engine.window_estimate(3000).count == 0
    assert snap.estimate.kg == pytest.approx(55.0)


def test_load_accepts_a_store():
    engine = ViewEngine()
    store = SampleStore([(0, 10.0)])
    engine.load(store)
    assert engine.store is store
    assert engine.cache.store is store


def test_mode_points_are_visible_mode_matches():
    engine = ViewEngine(ramp())
    snap = engine.snapshot
    assert len(snap.mode_points) == 40
    assert 0.0 not in snap.mode_points
    assert 1000.0 in snap.mode_points
    snap = engine.brush_change(10, 14)
    assert snap.mode_points == frozenset([1000.0, 1100.0, 1200.0, 1300.0, 1400.0])


def test_overlays_respect_marker_budget():
    settings = Settings(overlay={"max_markers": 7})
    engine = ViewEngine(ramp(), settings=settings)
    assert len(engine.snapshot.mode_points) <= 7


def test_algorithm_window_points():
    result = AlgorithmResult(window_start_s=1.0, window_end_s=1.5)
    engine = ViewEngine(ramp(), result=result)
    snap = engine.snapshot
    assert snap.window_points == frozenset([1000.0, 1100.0, 1200.0, 1300.0, 1400.0, 1500.0])
    snap = engine.brush_change(12, 40)
    assert snap.window_points == frozenset([1200.0, 1300.0, 1400.0, 1500.0])
    assert engine.set_algorithm_result(None).window_points == frozenset()


def test_group_lookup_for_tooltips():
    engine = ViewEngine(ramp())
    group = engine.group_for_t(120)
    assert group is engine.snapshot.groups[0]
    assert group.count == 5
    assert engine.group_for_t(99999) is None


def test_settings_drive_engine():
    settings = Settings(groups={"count": 4}, window={"half_width_ms": 100})
    engine = ViewEngine(ramp(), settings=settings)
    assert len(engine.snapshot.groups) == 4
    est = engine.window_estimate(1000)
    assert (est.left, est.right, est.count) == (900.0, 1100.0, 3)


def test_brush_clamps_huge_indices():
    engine = ViewEngine([(0, 1.0), (10, 2.0), (20, 3.0)])
    assert engine.brush_change(0, 10**400).brush_range == BrushRange(0, 2)
    assert engine.brush_change(-(10**400), 1).brush_range == BrushRange(0, 1)


def test_brush_ignores_nan_and_non_numeric_indices():
    engine = ViewEngine([(0, 1.0), (10, 2.0), (20, 3.0)])
    engine.brush_change(1, 2)
    before = engine.state
    engine.brush_change(float("nan"), 1)
    engine.brush_change(0, "end")
    assert engine.state == before
