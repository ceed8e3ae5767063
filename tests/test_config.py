import json
import pytest
from pydantic import ValidationError

from weighscope.config import Settings, load_settings


def test_defaults():
    s = Settings()
    assert s.estimator.resolution_kg == 0.1
    assert s.window.half_width_ms == 2500
    assert s.window.cache_size == 1000
    assert s.groups.count == 10
    assert s.overlay.max_markers == 250
    assert s.histogram.bin_width_kg == 0.02
    assert s.trend.min_weight_kg == 50.0


def test_from_env(monkeypatch):
    monkeypatch.setenv("WEIGHSCOPE_WINDOW__HALF_WIDTH_MS", "1000")
    s = Settings()
    assert s.window.half_width_ms == 1000


def test_alias_lists_accept_comma_strings():
    s = Settings(ingest={"t_aliases": "foo, bar", "kg_aliases": ["w"]})
    assert s.ingest.t_aliases == ["foo", "bar"]
    assert s.ingest.kg_aliases == ["w"]


def test_non_positive_values_rejected():
    with pytest.raises(ValidationError):
        Settings(estimator={"resolution_kg": 0})
    with pytest.raises(ValidationError):
        Settings(overlay={"max_markers": -1})
    with pytest.raises(ValidationError):
        Settings(window={"half_width_ms": -5})


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"estimator": {"resolution_kg": 0.5}, "groups": {"count": 3}}))
    s = load_settings(p)
    assert s.estimator.resolution_kg == 0.5
    assert s.groups.count == 3


def test_load_settings_requires_mapping(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)


try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


@pytest.mark.skipif(yaml is None, reason="PyYAML not installed")
def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("window:\n  half_width_ms: 750\nviz:\n  title: Morning\n")
    s = load_settings(p)
    assert s.window.half_width_ms == 750
    assert s.viz.title == "Morning"
