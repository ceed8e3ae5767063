from __future__ import annotations

"""Configuration utilities for weighscope.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the tunables of the estimation engine
(mode resolution, window half-width, cache bound, group count, marker budget,
histogram width, Y-axis padding) together with ingestion and visualisation
options.  Instances can be populated from environment variables or from
YAML/JSON files with matching nested keys.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_strings(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _require_positive(value: float, name: str) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class EstimatorSettings(SectionModel):
    """Binned mode estimation over the whole series."""

    resolution_kg: float = 0.1
    # Readings below this are ignored for the headline estimate unless
    # nothing else is left.
    min_weight_kg: float = 9.0

    @field_validator("resolution_kg")
    @classmethod
    def _positive_resolution(cls, value: float) -> float:
        return _require_positive(value, "resolution_kg")


class WindowSettings(SectionModel):
    """Cursor-centred window estimates and their cache."""

    half_width_ms: int = 2500
    cache_size: int = 1000

    @field_validator("half_width_ms")
    @classmethod
    def _non_negative_half_width(cls, value: int) -> int:
        if value < 0:
            raise ValueError("half_width_ms must not be negative")
        return value

    @field_validator("cache_size")
    @classmethod
    def _positive_cache(cls, value: int) -> int:
        return int(_require_positive(value, "cache_size"))


class GroupSettings(SectionModel):
    """Partition of the visible samples into local-mode groups."""

    count: int = 10

    @field_validator("count")
    @classmethod
    def _positive_count(cls, value: int) -> int:
        return int(_require_positive(value, "count"))


class OverlaySettings(SectionModel):
    """Bounds on rendered marker overlays."""

    max_markers: int = 250

    @field_validator("max_markers")
    @classmethod
    def _positive_budget(cls, value: int) -> int:
        return int(_require_positive(value, "max_markers"))


class HistogramSettings(SectionModel):
    """Weight distribution display."""

    bin_width_kg: float = 0.02

    @field_validator("bin_width_kg")
    @classmethod
    def _positive_width(cls, value: float) -> float:
        return _require_positive(value, "bin_width_kg")


class YAxisSettings(SectionModel):
    """Padding applied when fitting the Y domain to the visible samples."""

    min_pad_kg: float = 0.5
    pad_fraction: float = 0.05


class TrendSettings(SectionModel):
    """Cross-event weight trend."""

    min_weight_kg: float = 50.0


class IngestSettings(SectionModel):
    """Column names accepted when reading sample files."""

    t_aliases: list[str] = Field(default_factory=lambda: ["t", "time", "timestamp", "ts"])
    kg_aliases: list[str] = Field(default_factory=lambda: ["kg", "weight", "weight_kg", "value"])

    @field_validator("t_aliases", "kg_aliases", mode="before")
    @classmethod
    def _coerce_aliases(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_strings(value)
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return value


class VizSettings(SectionModel):
    """Configuration for the matplotlib renderer."""

    title: str = "Weight"
    save: str | None = None


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    estimator: EstimatorSettings = Field(default_factory=EstimatorSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)
    groups: GroupSettings = Field(default_factory=GroupSettings)
    overlay: OverlaySettings = Field(default_factory=OverlaySettings)
    histogram: HistogramSettings = Field(default_factory=HistogramSettings)
    yaxis: YAxisSettings = Field(default_factory=YAxisSettings)
    trend: TrendSettings = Field(default_factory=TrendSettings)
    ingest: IngestSettings = Field(default_factory=IngestSettings)
    viz: VizSettings = Field(default_factory=VizSettings)

    model_config = SettingsConfigDict(
        env_prefix="WEIGHSCOPE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        class LenientEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LenientEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required to load YAML files")
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
