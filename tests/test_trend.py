from datetime import datetime, timezone

import pytest

from weighscope.core.trend import filter_range, last_days, trend_points, trend_stats
from weighscope.ingest import parse_results


def make_results():
    return parse_results(
        [
            {"event_id": "e1", "window_start_s": 0, "window_end_s": 1,
             "raw_stable_weight_kg": 80.0, "raw_uncertainty_kg": 0.1,
             "computed_at": "2024-01-02T00:00:00Z"},
            {"event_id": "e2", "window_start_s": 0, "window_end_s": 1,
             "raw_stable_weight_kg": 40.0, "computed_at": "2024-01-05T00:00:00Z"},
            {"event_id": "e3", "window_start_s": 0, "window_end_s": 1,
             "raw_stable_weight_kg": 75.0, "computed_at": "2024-03-01T00:00:00Z",
             "started_at": "2023-12-31T00:00:00Z"},
            {"event_id": "e4", "window_start_s": 0, "window_end_s": 1,
             "computed_at": "2024-01-06T00:00:00Z"},
        ]
    )


def test_trend_points_filter_and_order():
    points = trend_points(make_results())
    assert [p.weight for p in points] == [75.0, 80.0]
    assert points[0].when == datetime(2023, 12, 31, tzinfo=timezone.utc)
    assert points[1].uncertainty == 0.1


def test_trend_threshold_is_configurable():
    points = trend_points(make_results(), min_weight_kg=30.0)
    assert [p.weight for p in points] == [75.0, 80.0, 40.0]


def test_ranges():
    points = trend_points(make_results())
    now = datetime(2024, 1, 3, tzinfo=timezone.utc)
    assert [p.weight for p in last_days(points, 2, now=now)] == [80.0]
    assert last_days(points, None) == points
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert [p.weight for p in filter_range(points, start=start)] == [80.0]
    assert [p.weight for p in filter_range(points, end=start)] == [75.0]


def test_trend_stats():
    stats = trend_stats(trend_points(make_results()))
    assert stats.points == 2
    assert stats.min == 75.0
    assert stats.max == 80.0
    assert stats.avg == pytest.approx(77.5)
    assert trend_stats([]) is None


def test_naive_and_aware_timestamps_mix():
    results = parse_results(
        [
            {"event_id": "e1", "window_start_s": 0, "window_end_s": 1,
             "raw_stable_weight_kg": 81.0, "computed_at": "2024-01-02T00:00:00"},
            {"event_id": "e2", "window_start_s": 0, "window_end_s": 1,
             "raw_stable_weight_kg": 82.0, "computed_at": "2024-01-03T00:00:00Z"},
            {"event_id": "e3", "window_start_s": 0, "window_end_s": 1,
             "raw_stable_weight_kg": 83.0, "started_at": "2024-01-01T00:00:00"},
        ]
    )
    points = trend_points(results)
    assert [p.weight for p in points] == [83.0, 81.0, 82.0]
    assert all(p.when.tzinfo is not None for p in points)
