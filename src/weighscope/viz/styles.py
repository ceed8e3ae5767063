"""Colours and rcParams for weighscope figures."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import matplotlib.pyplot as plt

CHART_STYLE = {
    "figure.figsize": (12, 6),
    "axes.grid": True,
    "grid.linestyle": "--",
    "grid.alpha": 0.4,
    "axes.titlesize": "large",
    "axes.labelsize": "medium",
    "lines.linewidth": 1.2,
    "legend.fontsize": "small",
}

SERIES_COLOR = "#3b82f6"
MODE_COLOR = "#10b981"
WINDOW_COLOR = "#f59e0b"
GROUP_COLOR = "#ef4444"

# scatter kwargs per overlay; mode markers sit under the analysis window ones
MARKERS = {
    "mode": {"color": MODE_COLOR, "s": 12, "zorder": 3, "label": "mode bin"},
    "window": {"color": WINDOW_COLOR, "s": 18, "zorder": 4, "marker": "D", "label": "analysis window"},
}


@contextmanager
def chart_style(extra: dict | None = None) -> Iterator[None]:
    """Temporarily apply :data:`CHART_STYLE`, optionally overridden by ``extra``."""

    style = dict(CHART_STYLE)
    if extra:
        style.update(extra)
    with plt.rc_context(style):
        yield
