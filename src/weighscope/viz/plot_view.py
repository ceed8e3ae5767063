"""Draw a :class:`~weighscope.core.view.ViewSnapshot` with matplotlib."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from ..core.view import ViewSnapshot
from .styles import GROUP_COLOR, MARKERS, SERIES_COLOR, chart_style


def plot_snapshot(snapshot: ViewSnapshot, *, title: str = "Weight") -> plt.Figure:
    """Return a figure with the visible series on top and its histogram below."""

    with chart_style():
        return _draw(snapshot, title)


def _draw(snapshot: ViewSnapshot, title: str) -> plt.Figure:
    fig, (ax, hist_ax) = plt.subplots(2, 1, gridspec_kw={"height_ratios": [3, 1]})

    lo, hi = snapshot.visible
    t = snapshot.store.t[lo:hi]
    kg = snapshot.store.kg[lo:hi]
    ax.plot(t, kg, color=SERIES_COLOR, label="kg")

    for points, kind in ((snapshot.mode_points, "mode"), (snapshot.window_points, "window")):
        if not points:
            continue
        mask = np.isin(t, np.fromiter(points, dtype=float))
        ax.scatter(t[mask], kg[mask], **MARKERS[kind])

    modes = [(mid, m) for mid, m in snapshot.group_modes if m is not None]
    if modes:
        ax.plot(*zip(*modes), color=GROUP_COLOR, linestyle="--", marker="o", label="group mode")

    if snapshot.x_domain is not None and snapshot.x_domain[0] != snapshot.x_domain[1]:
        ax.set_xlim(*snapshot.x_domain)
    if snapshot.y_domain is not None:
        ax.set_ylim(*snapshot.y_domain)

    estimate = snapshot.estimate
    if estimate.kg is not None:
        title = f"{title}: {estimate.kg:.1f} kg ({estimate.lbs:.1f} lbs)"
    ax.set_title(title)
    ax.set_xlabel("t (ms)")
    ax.set_ylabel("Weight (kg)")
    if len(t):
        ax.legend(loc="best")

    if snapshot.histogram:
        centers = [b.center for b in snapshot.histogram]
        counts = [b.count for b in snapshot.histogram]
        width = snapshot.histogram[0].end - snapshot.histogram[0].start
        hist_ax.bar(centers, counts, width=width * 0.9, color=SERIES_COLOR)
    hist_ax.set_xlabel("Weight (kg)")
    hist_ax.set_ylabel("Count")

    fig.tight_layout()
    return fig


def save_or_show(fig: plt.Figure, save: str | Path | None = None, show: bool = False) -> None:
    """Save ``fig`` to ``save`` and/or display it.

    With neither option set the figure is shown, to give quick feedback.
    """
    if save:
        fig.savefig(save, bbox_inches="tight")
    if show or not save:
        plt.show()
