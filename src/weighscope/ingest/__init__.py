"""Utility modules for ingesting weighscope datasets."""

from .samples import read_samples, SampleParseError
from .results import AlgorithmResult, latest_per_event, load_result, load_results, parse_results

__all__ = [
    "read_samples",
    "SampleParseError",
    "AlgorithmResult",
    "latest_per_event",
    "load_result",
    "load_results",
    "parse_results",
]
