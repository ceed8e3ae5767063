from __future__ import annotations

"""Utilities for converting a sample store into NumPy arrays."""

from pathlib import Path

import numpy as np

from ..core.store import SampleStore


def to_numpy(
    store: SampleStore,
    *,
    save_csv: str | Path | None = None,
    save_npz: str | Path | None = None,
) -> np.ndarray:
    """Return the series as an ``(N, 2)`` array of ``(t, kg)`` rows.

    Parameters
    ----------
    store:
        The series to convert.
    save_csv, save_npz:
        Optional paths.  If provided the array is persisted either as a CSV
        file with a ``t,kg`` header or an ``.npz`` archive with ``t`` and
        ``kg`` entries; both can be read back by
        :func:`weighscope.ingest.read_samples`.
    """

    arr = np.column_stack([store.t, store.kg]) if len(store) else np.empty((0, 2))

    if save_csv:
        np.savetxt(Path(save_csv), arr, delimiter=",", header="t,kg", comments="")

    if save_npz:
        np.savez(Path(save_npz), t=store.t, kg=store.kg)

    return arr
