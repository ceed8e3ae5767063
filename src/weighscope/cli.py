from __future__ import annotations

"""Command line interface for weighscope using Typer."""

from pathlib import Path
from typing import Dict, List, Optional

import json
import logging

import typer
from pydantic import ValidationError

from .config import Settings, load_settings
from .core.trend import last_days, trend_points, trend_stats
from .core.view import ViewEngine, ViewSnapshot
from .export import export_result, export_samples, write_json
from .ingest import SampleParseError, load_result, load_results, read_samples
from .utils.logging import set_verbosity

app = typer.Typer(help="Explore scale time series: stable-weight estimates, groups and histograms")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys[:-1]:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)
    if not hasattr(current, keys[-1]):
        raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. window.half_width_ms=1000",
    ),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging and tracebacks on failure"),
) -> None:
    """Initialise the Typer context with validated settings."""

    set_verbosity(debug)

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        if config:
            settings = load_settings(config)
        elif isinstance(ctx.obj, Settings):
            settings = ctx.obj
        else:
            settings = Settings()
    except (FileNotFoundError, RuntimeError, TypeError, ValidationError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            value = _parse_override_value(raw_value)
            _apply_override(data, keys, value)
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    ctx.obj = settings
    ctx.meta["debug"] = debug


def _open_view(
    ctx: typer.Context,
    samples: Path,
    *,
    result: Optional[Path] = None,
    left: Optional[float] = None,
    right: Optional[float] = None,
) -> ViewEngine:
    """Load ``samples`` into an engine and zoom to ``[left, right]`` if given.

    The zoom is applied as a pointer drag so it goes through the same
    transition a user would trigger.
    """

    cfg: Settings = ctx.obj
    try:
        raw = read_samples(samples, settings=cfg)
        analysis = load_result(result) if result is not None else None
    except (OSError, SampleParseError) as exc:
        if ctx.meta.get("debug"):
            logger.exception("failed to load %s", samples)
            raise
        typer.secho(f"Failed to load input: {exc}", err=True)
        raise typer.Exit(code=1)

    engine = ViewEngine(raw, settings=cfg, result=analysis)
    if left is not None or right is not None:
        extent = engine.store.extent
        if extent is not None:
            engine.pointer_down(extent.left if left is None else left)
            engine.pointer_move(extent.right if right is None else right)
            engine.pointer_up()
    return engine


def _fmt_kg(value: Optional[float], digits: int = 1) -> str:
    return "-" if value is None else f"{value:.{digits}f} kg"


def _echo_domain(snapshot: ViewSnapshot) -> None:
    brush = snapshot.brush_range
    typer.echo(
        f"visible: {snapshot.visible_count} samples, x={snapshot.x_domain}, "
        f"brush=[{brush.start_index}, {brush.end_index}]"
    )


@app.command()
def summary(
    ctx: typer.Context,
    samples: Path = typer.Argument(..., exists=True, dir_okay=False),
    result: Optional[Path] = typer.Option(None, "--result", "-r", exists=True, dir_okay=False),
    left: Optional[float] = typer.Option(None, "--left"),
    right: Optional[float] = typer.Option(None, "--right"),
) -> None:
    """Print the estimated weight, series statistics and current view."""

    engine = _open_view(ctx, samples, result=result, left=left, right=right)
    snap = engine.snapshot
    est = snap.estimate
    if est.kg is None:
        typer.echo("estimate: no data")
    else:
        typer.echo(f"estimate: {est.kg:.1f} kg ({est.lbs:.1f} lbs), mode count {est.count}")
    if snap.stats is not None:
        s = snap.stats
        typer.echo(f"points: {s.points} min: {s.min:.2f} kg max: {s.max:.2f} kg avg: {s.avg:.2f} kg")
    if snap.result is not None and snap.result.raw_stable_weight_kg is not None:
        unc = snap.result.raw_uncertainty_kg
        extra = f" +/-{unc:.3f} kg" if unc is not None else ""
        typer.echo(f"analysis: {snap.result.raw_stable_weight_kg:.3f} kg{extra}")
    _echo_domain(snap)
    typer.echo(f"mode markers: {len(snap.mode_points)} window markers: {len(snap.window_points)}")


@app.command()
def window(
    ctx: typer.Context,
    samples: Path = typer.Argument(..., exists=True, dir_okay=False),
    t: float = typer.Argument(..., help="Window centre in milliseconds"),
) -> None:
    """Binned mode of the window centred on ``t``."""

    engine = _open_view(ctx, samples)
    est = engine.window_estimate(t)
    typer.echo(f"window [{est.left:.0f}, {est.right:.0f}]: mode {_fmt_kg(est.mode_kg)} (N={est.count})")


@app.command()
def groups(
    ctx: typer.Context,
    samples: Path = typer.Argument(..., exists=True, dir_okay=False),
    left: Optional[float] = typer.Option(None, "--left"),
    right: Optional[float] = typer.Option(None, "--right"),
) -> None:
    """List the local-mode groups of the visible range."""

    engine = _open_view(ctx, samples, left=left, right=right)
    snap = engine.snapshot
    _echo_domain(snap)
    for g in snap.groups:
        typer.echo(f"[{g.start_t:.0f} -> {g.end_t:.0f}] (N={g.count}) mode {_fmt_kg(g.mode_kg)}")


@app.command()
def histogram(
    ctx: typer.Context,
    samples: Path = typer.Argument(..., exists=True, dir_okay=False),
    left: Optional[float] = typer.Option(None, "--left"),
    right: Optional[float] = typer.Option(None, "--right"),
) -> None:
    """Weight distribution of the visible range."""

    engine = _open_view(ctx, samples, left=left, right=right)
    for b in engine.snapshot.histogram:
        typer.echo(f"{b.start:.3f} - {b.end:.3f} kg (center {b.center:.3f}): {b.count}")


@app.command()
def export(
    ctx: typer.Context,
    samples: Path = typer.Argument(..., exists=True, dir_okay=False),
    result: Optional[Path] = typer.Option(None, "--result", "-r", exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Write the cleaned series (and analysis result) as JSON."""

    engine = _open_view(ctx, samples, result=result)
    payload = export_samples(engine.store)
    result_text = export_result(engine.snapshot.result)
    if output is None:
        typer.echo(payload)
        if result_text is not None:
            typer.echo(result_text)
        return
    write_json(payload, output)
    typer.echo(f"Exported {len(engine.store)} samples to {output}")
    if result_text is not None:
        result_path = output.with_name(output.stem + ".result.json")
        write_json(result_text, result_path)
        typer.echo(f"Exported analysis result to {result_path}")


@app.command()
def trend(
    ctx: typer.Context,
    results: Path = typer.Argument(..., exists=True, dir_okay=False),
    days: Optional[int] = typer.Option(None, "--days", help="Only the last N days"),
) -> None:
    """Stable-weight trend across weigh events."""

    cfg: Settings = ctx.obj
    try:
        records = load_results(results)
    except (OSError, SampleParseError) as exc:
        typer.secho(f"Failed to load results: {exc}", err=True)
        raise typer.Exit(code=1)
    points = last_days(trend_points(records, min_weight_kg=cfg.trend.min_weight_kg), days)
    for p in points:
        typer.echo(f"{p.when.isoformat()} {p.weight:.2f} kg")
    stats = trend_stats(points)
    if stats is None:
        typer.echo("no measurements")
    else:
        typer.echo(f"measurements: {stats.points} min: {stats.min:.2f} max: {stats.max:.2f} avg: {stats.avg:.2f}")


@app.command()
def plot(
    ctx: typer.Context,
    samples: Path = typer.Argument(..., exists=True, dir_okay=False),
    result: Optional[Path] = typer.Option(None, "--result", "-r", exists=True, dir_okay=False),
    left: Optional[float] = typer.Option(None, "--left"),
    right: Optional[float] = typer.Option(None, "--right"),
    save: Optional[Path] = typer.Option(None, "--save"),
    show: bool = typer.Option(False, "--show"),
) -> None:
    """Render the current view with matplotlib."""

    from .viz.plot_view import plot_snapshot, save_or_show

    cfg: Settings = ctx.obj
    engine = _open_view(ctx, samples, result=result, left=left, right=right)
    fig = plot_snapshot(engine.snapshot, title=cfg.viz.title)
    save_or_show(fig, save or cfg.viz.save, show)
    if save or cfg.viz.save:
        typer.echo(f"saved figure to {save or cfg.viz.save}")


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
