"""Export helpers: JSON text for clipboards and NumPy arrays for analysis."""

from .text import export_result, export_samples, write_json
from .to_numpy import to_numpy

__all__ = ["export_result", "export_samples", "write_json", "to_numpy"]
