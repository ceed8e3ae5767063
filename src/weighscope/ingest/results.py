"""Records produced by the external stable-weight analysis.

Each weigh event may carry one or more analysis results.  The engine only
needs the analysis window (``window_start_s``/``window_end_s``, in seconds) to
build its second marker overlay; the remaining fields are carried through for
display, export and the cross-event trend.
"""

from __future__ import annotations

import json
import pathlib
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .samples import SampleParseError


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC; naive timestamps are taken to be UTC already."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AlgorithmResult(BaseModel):
    """One analysis result for a weigh event.

    Unknown keys are kept so exports round-trip whatever the producer wrote.
    """

    model_config = ConfigDict(extra="allow")

    window_start_s: float
    window_end_s: float

    id: Optional[str] = None
    event_id: Optional[str] = None
    scale_id: Optional[str] = None
    computed_at: Optional[datetime] = None
    algorithm_version: Optional[str] = None
    mode: Optional[str] = None
    raw_stable_weight_kg: Optional[float] = None
    raw_uncertainty_kg: Optional[float] = None
    raw_quality: Optional[float] = None
    duration_s: Optional[float] = None
    mean_slope_kg_per_s: Optional[float] = None
    mean_std_kg: Optional[float] = None
    n_points: Optional[int] = None
    consensus_weight_kg: Optional[float] = None
    consensus_uncertainty_kg: Optional[float] = None
    consensus_band_kg: Optional[float] = None
    consensus_mode: Optional[str] = None
    consensus_window_start_s: Optional[float] = None
    consensus_window_end_s: Optional[float] = None
    consensus_duration_s: Optional[float] = None
    metadata: Optional[Any] = None

    @field_validator("computed_at")
    @classmethod
    def _computed_at_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return None if value is None else as_utc(value)

    @model_validator(mode="after")
    def _order_window(self) -> "AlgorithmResult":
        if self.window_end_s < self.window_start_s:
            self.window_start_s, self.window_end_s = self.window_end_s, self.window_start_s
        return self

    def window_ms(self) -> Tuple[float, float]:
        """Analysis window converted to milliseconds."""

        return self.window_start_s * 1000.0, self.window_end_s * 1000.0


def latest_per_event(results: Iterable[AlgorithmResult]) -> Dict[str, AlgorithmResult]:
    """Keep the most recently computed result for every ``event_id``.

    Results without an ``event_id`` are skipped; among results for the same
    event, one without ``computed_at`` never replaces one with it.
    """

    latest: Dict[str, AlgorithmResult] = {}
    for result in results:
        if result.event_id is None:
            continue
        current = latest.get(result.event_id)
        if current is None:
            latest[result.event_id] = result
            continue
        if result.computed_at is None:
            continue
        if current.computed_at is None or result.computed_at > current.computed_at:
            latest[result.event_id] = result
    return latest


def parse_results(data: Any, *, path: Union[str, pathlib.Path] = "<data>") -> List[AlgorithmResult]:
    """Validate one result object or a list of them."""

    items = data if isinstance(data, list) else [data]
    out: List[AlgorithmResult] = []
    for idx, item in enumerate(items):
        try:
            out.append(AlgorithmResult.model_validate(item))
        except ValidationError as exc:
            raise SampleParseError(f"invalid analysis result #{idx}: {exc}", path=path) from exc
    return out


def load_results(path: Union[str, pathlib.Path]) -> List[AlgorithmResult]:
    """Load analysis results from a JSON file."""

    p = pathlib.Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SampleParseError(str(exc), path=p, line=exc.lineno) from exc
    return parse_results(data, path=p)


def load_result(path: Union[str, pathlib.Path]) -> Optional[AlgorithmResult]:
    """Load the single result to overlay from ``path``.

    When the file holds several results the most recently computed one wins.
    """

    results = load_results(path)
    if not results:
        return None
    dated = [r for r in results if r.computed_at is not None]
    if dated:
        return max(dated, key=lambda r: r.computed_at)
    return results[0]
