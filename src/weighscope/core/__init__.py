"""Core estimation and view-synchronisation engine for weighscope."""

from .store import SampleStore
from .mode import binned_mode, estimate_weight, quantize
from .cache import WindowEstimateCache
from .groups import group_for_t, group_mode_series, partition
from .overlay import downsample, mode_match_points, window_match_points
from .histogram import histogram
from .stats import fit_y_domain, series_stats, y_bounds
from .view import ViewEngine, ViewSnapshot, ViewState

__all__ = [
    "SampleStore",
    "binned_mode",
    "estimate_weight",
    "quantize",
    "WindowEstimateCache",
    "partition",
    "group_for_t",
    "group_mode_series",
    "downsample",
    "mode_match_points",
    "window_match_points",
    "histogram",
    "fit_y_domain",
    "series_stats",
    "y_bounds",
    "ViewEngine",
    "ViewSnapshot",
    "ViewState",
]
