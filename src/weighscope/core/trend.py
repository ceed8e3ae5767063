"""Stable-weight trend across weigh events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..ingest.results import AlgorithmResult, as_utc, latest_per_event
from ..types import SeriesStats

DEFAULT_MIN_WEIGHT_KG = 50.0

_datetime = TypeAdapter(datetime)


@dataclass(frozen=True)
class TrendPoint:
    when: datetime
    weight: float
    uncertainty: Optional[float]
    quality: Optional[float]


def _event_time(result: AlgorithmResult) -> Optional[datetime]:
    # events carry their own start stamp; fall back to the computation time
    started = (result.model_extra or {}).get("started_at")
    if started is not None:
        try:
            return as_utc(_datetime.validate_python(started))
        except ValidationError:
            pass
    return result.computed_at


def trend_points(
    results: Iterable[AlgorithmResult],
    *,
    min_weight_kg: float = DEFAULT_MIN_WEIGHT_KG,
) -> List[TrendPoint]:
    """Oldest-first trend of events whose stable weight exceeds ``min_weight_kg``.

    Only the latest result of every event is considered, and results without
    a weight or a timestamp are skipped.
    """

    points: List[TrendPoint] = []
    for result in latest_per_event(results).values():
        weight = result.raw_stable_weight_kg
        if weight is None or not weight > min_weight_kg:
            continue
        when = _event_time(result)
        if when is None:
            continue
        points.append(TrendPoint(when, weight, result.raw_uncertainty_kg, result.raw_quality))
    points.sort(key=lambda p: p.when.timestamp())
    return points


def filter_range(
    points: Iterable[TrendPoint],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[TrendPoint]:
    """Points with ``start <= when <= end``; a missing bound is open."""

    out = []
    for p in points:
        ts = p.when.timestamp()
        if start is not None and ts < start.timestamp():
            continue
        if end is not None and ts > end.timestamp():
            continue
        out.append(p)
    return out


def last_days(points: Iterable[TrendPoint], days: Optional[int], *, now: Optional[datetime] = None) -> List[TrendPoint]:
    """Preset ranges: the last ``days`` days, or everything for ``None``."""

    if days is None:
        return list(points)
    end = now or datetime.now(timezone.utc)
    return filter_range(points, end - timedelta(days=days), end)


def trend_stats(points: List[TrendPoint]) -> Optional[SeriesStats]:
    if not points:
        return None
    weights = [p.weight for p in points]
    return SeriesStats(
        min=min(weights),
        max=max(weights),
        avg=sum(weights) / len(weights),
        points=len(weights),
    )
