"""Windowed mode estimation and view synchronisation for scale time series."""

from .core import SampleStore, ViewEngine, ViewSnapshot, ViewState
from .types import Sample

__all__ = ["Sample", "SampleStore", "ViewEngine", "ViewSnapshot", "ViewState"]

__version__ = "0.1.0"
