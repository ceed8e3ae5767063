# src/weighscope/ingest/samples.py
"""Readers for scale sample files.

Supports:
A) CSV with a header naming a time column and a weight column
   (``t,kg`` by default; aliases are configurable):
   t,kg
   1700000000000,10.04

B) JSON: an array of objects ``[{"t": ..., "kg": ...}, ...]`` or an object
   with a ``samples`` array (the shape the dashboard stores per event).

C) NumPy ``.npy`` / ``.npz`` holding an ``(N, 2)`` array, or ``t`` and ``kg``
   arrays in an archive.

Rows with unparsable or non-finite numbers are left for
:class:`~weighscope.core.store.SampleStore` to drop; only files whose layout
cannot be understood at all raise :class:`SampleParseError`.
"""

from __future__ import annotations

import csv
import json
import pathlib
from typing import Any, Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

import numpy as np

from ..config import Settings

DEFAULT_T_ALIASES = ("t", "time", "timestamp", "ts")
DEFAULT_KG_ALIASES = ("kg", "weight", "weight_kg", "value")


class SampleParseError(ValueError):
    """Raised when a sample file cannot be parsed."""

    def __init__(self, message: str, *, path: Union[str, pathlib.Path], line: int = 0):
        self.path = str(path)
        self.line = line
        super().__init__(f"{self.path}:{self.line}: {message}")


def _clean_fieldnames(fieldnames: Sequence[str]) -> List[str]:
    return [fn.strip().lstrip("\ufeff") for fn in fieldnames]


def _pick_column(fieldnames: Sequence[str], aliases: Iterable[str]) -> Optional[str]:
    lowered = {fn.lower(): fn for fn in fieldnames}
    for alias in aliases:
        hit = lowered.get(alias.lower())
        if hit is not None:
            return hit
    return None


def _aliases(settings: Optional[Settings]) -> Tuple[Sequence[str], Sequence[str]]:
    if settings is None:
        return DEFAULT_T_ALIASES, DEFAULT_KG_ALIASES
    return settings.ingest.t_aliases, settings.ingest.kg_aliases


def _read_csv(
    fh: TextIO,
    *,
    path: Union[str, pathlib.Path],
    t_aliases: Sequence[str],
    kg_aliases: Sequence[str],
) -> Iterator[Tuple[Any, Any]]:
    reader = csv.DictReader(fh)
    if reader.fieldnames is None:
        return
    reader.fieldnames = _clean_fieldnames(reader.fieldnames)
    t_col = _pick_column(reader.fieldnames, t_aliases)
    kg_col = _pick_column(reader.fieldnames, kg_aliases)
    if t_col is None or kg_col is None:
        raise SampleParseError(
            f"CSV header {reader.fieldnames!r} has no time/weight columns",
            path=path,
            line=1,
        )
    for row in reader:
        yield row.get(t_col), row.get(kg_col)


def _from_json(
    data: Any,
    *,
    path: Union[str, pathlib.Path],
    t_aliases: Sequence[str],
    kg_aliases: Sequence[str],
) -> List[Any]:
    if isinstance(data, dict):
        data = data.get("samples")
    if not isinstance(data, list):
        raise SampleParseError("JSON must be a list of samples or an object with 'samples'", path=path)
    out: List[Any] = []
    for entry in data:
        if isinstance(entry, dict):
            t_key = _pick_column(list(entry), t_aliases)
            kg_key = _pick_column(list(entry), kg_aliases)
            entry = (entry.get(t_key) if t_key else None, entry.get(kg_key) if kg_key else None)
        out.append(entry)
    return out


def _from_numpy(arr: np.ndarray, *, path: Union[str, pathlib.Path]) -> List[Tuple[float, float]]:
    arr = np.asarray(arr, dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise SampleParseError(f"expected an (N, 2) array, got shape {arr.shape}", path=path)
    return [(float(t), float(kg)) for t, kg in arr]


def read_samples(
    path: Union[str, pathlib.Path, TextIO],
    *,
    settings: Optional[Settings] = None,
) -> List[Any]:
    """Return the raw sample entries stored at ``path``.

    The result is suitable for :class:`~weighscope.core.store.SampleStore`;
    an open text handle is read as CSV.
    """

    t_aliases, kg_aliases = _aliases(settings)
    if not isinstance(path, (str, pathlib.Path)):
        return list(_read_csv(path, path="<stream>", t_aliases=t_aliases, kg_aliases=kg_aliases))

    p = pathlib.Path(path)
    suffix = p.suffix.lower()
    if suffix == ".json":
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SampleParseError(str(exc), path=p, line=exc.lineno) from exc
        return _from_json(data, path=p, t_aliases=t_aliases, kg_aliases=kg_aliases)
    if suffix == ".npy":
        return _from_numpy(np.load(p), path=p)
    if suffix == ".npz":
        with np.load(p) as archive:
            if "t" in archive and "kg" in archive:
                t, kg = archive["t"], archive["kg"]
                if t.shape != kg.shape:
                    raise SampleParseError(
                        f"'t' and 'kg' differ in shape: {t.shape} vs {kg.shape}", path=p
                    )
                return list(zip(t.tolist(), kg.tolist()))
            if len(archive.files) == 1:
                return _from_numpy(archive[archive.files[0]], path=p)
        raise SampleParseError("archive must contain 't' and 'kg' arrays", path=p)
    if suffix in {".csv", ".txt", ""}:
        with open(p, "r", encoding="utf-8", newline="") as fh:
            return list(_read_csv(fh, path=p, t_aliases=t_aliases, kg_aliases=kg_aliases))
    raise SampleParseError(f"unsupported sample file extension {suffix!r}", path=p)
