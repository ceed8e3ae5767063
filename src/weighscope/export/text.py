from __future__ import annotations

"""Indented JSON renderings of a series and of its analysis result."""

import json
from pathlib import Path
from typing import Optional

from ..core.store import SampleStore
from ..ingest.results import AlgorithmResult


def export_samples(store: SampleStore, *, indent: int = 2) -> str:
    """Return the whole series as ``[{"t": ..., "kg": ...}, ...]``."""

    rows = [{"t": s.t, "kg": s.kg} for s in store]
    return json.dumps(rows, indent=indent)


def export_result(result: Optional[AlgorithmResult], *, indent: int = 2) -> Optional[str]:
    """Return ``result`` as JSON, extra fields included; ``None`` passes through."""

    if result is None:
        return None
    return result.model_dump_json(indent=indent)


def write_json(text: str, path: str | Path) -> Path:
    p = Path(path)
    p.write_text(text + "\n", encoding="utf8")
    return p
