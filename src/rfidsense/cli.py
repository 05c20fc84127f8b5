from __future__ import annotations

"""Command line interface for rfidsense using Typer."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import json
import logging

import typer
import yaml
from pydantic import ValidationError

from .config import CaptionSettings, Settings, load_settings
from .core.tables import export_tables
from .export import write_records_csv, write_records_json, write_tables
from .ingest import discover_recordings
from .pipeline import RecordingResult, build_tables, process_file, process_files
from .utils.logging import get_logger

app = typer.Typer(help="Feature extraction and structural captioning for RFID phase recordings")
logger = logging.getLogger(__name__)

# Tables written by ``run``; never picked up again as recordings.
OUTPUT_TABLES = {"features", "structure"}


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


def _override_settings(settings: Settings, overrides: Sequence[str]) -> Settings:
    """Return a copy of ``settings`` with ``section.key=value`` overrides applied."""

    data = settings.model_dump()
    for override in overrides:
        key, sep, raw_value = override.partition("=")
        section, dot, name = key.partition(".")
        if not sep or not dot:
            raise typer.BadParameter("overrides must be of the form --set section.key=value")
        model = Settings.model_fields.get(section)
        if model is None or name not in model.annotation.model_fields:
            raise typer.BadParameter(f"unknown configuration key: {key}")
        data[section][name] = _parse_override_value(raw_value)
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise typer.BadParameter(f"invalid configuration override: {exc}") from exc


def _report_skipped(results: Sequence[RecordingResult]) -> None:
    for result in results:
        if not result.ok:
            typer.secho(f"skipped {result.name}: {'; '.join(result.diagnostics)}", err=True)


def _emit(records: List[Dict[str, Any]], output: Optional[Path], columns: Optional[List[str]] = None) -> None:
    if output is None:
        typer.echo(json.dumps(records, indent=2))
        return
    if output.suffix.lower() == ".json":
        write_records_json(records, output)
    else:
        write_records_csv(records, output, columns)
    typer.echo(f"wrote {len(records)} records to {output}")


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
        help="Override configuration values using dotted paths, e.g. captions.window=2.0",
    ),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        settings = load_settings(config) if config else Settings()
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        settings = _override_settings(settings, set_overrides)
    ctx.obj = settings


@app.command()
def features(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV or JSON file to write."),
    fields: Optional[str] = typer.Option(None, "--fields", help="Comma separated feature names."),
) -> None:
    """Compute one feature vector per file and channel."""

    cfg: Settings = ctx.obj
    selected = [f.strip() for f in fields.split(",") if f.strip()] if fields else cfg.export.feature_fields

    results = process_files(paths, cfg)
    _report_skipped(results)
    table, _ = build_tables(results, cfg.channels.names)
    try:
        records = table.to_records(selected)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--fields") from exc
    _emit(records, output, ["file", "channel", *selected])


@app.command()
def captions(
    ctx: typer.Context,
    paths: List[Path] = typer.Argument(..., exists=True, dir_okay=False),
    window: Optional[float] = typer.Option(None, "--window", help="Window length in seconds."),
    hop: Optional[float] = typer.Option(None, "--hop", help="Hop length in seconds."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV or JSON file to write."),
) -> None:
    """Caption every file and merge channels into one structural table."""

    cfg: Settings = ctx.obj
    overrides = {k: v for k, v in {"window": window, "hop": hop}.items() if v is not None}
    if overrides:
        try:
            cfg.captions = CaptionSettings.model_validate({**cfg.captions.model_dump(), **overrides})
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid window/hop: {exc}") from exc

    results = process_files(paths, cfg)
    _report_skipped(results)
    _, table = build_tables(results, cfg.channels.names)
    records = table.to_records()
    columns = ["file", "window_index", "start_time", "end_time"]
    columns += [k for k in (records[0] if records else {}) if k.endswith("_label")]
    _emit(records, output, columns or None)


@app.command()
def run(
    ctx: typer.Context,
    root: Path = typer.Argument(..., exists=True, file_okay=False, dir_okay=True),
    pattern: str = typer.Option("*.csv", "--pattern", help="Glob selecting recording files."),
    workers: int = typer.Option(1, "--workers", min=1, help="Number of worker threads."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on failure"),
) -> None:
    """Extract features and captions for every recording under ``root``."""

    cfg: Settings = ctx.obj
    paths = [p for p in discover_recordings(root, pattern) if p.stem not in OUTPUT_TABLES]
    if not paths:
        typer.echo(f"No recordings matching {pattern!r} under {root}")
        return

    try:
        results = process_files(paths, cfg, workers=workers)
    except (OSError, ValueError) as exc:
        msg = f"Failed to process recordings under {root}: {exc}"
        if debug:
            logger.exception(msg)
            raise
        typer.secho(msg, err=True)
        raise typer.Exit(code=1)

    _report_skipped(results)
    feature_table, structural_table = build_tables(results, cfg.channels.names)
    tables = export_tables(feature_table, structural_table, fields=cfg.export.feature_fields)
    out_dir = output_dir if output_dir is not None else Path(cfg.export.output_dir)
    written = write_tables(tables, out_dir, fmt=cfg.export.format)
    n_ok = sum(1 for r in results if r.ok)
    typer.echo(
        f"Processed {n_ok}/{len(results)} recordings; wrote "
        + ", ".join(str(p) for p in written.values())
    )


@app.command()
def viz(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    channel: str = typer.Option(..., "--channel", "-c", help="Channel to plot."),
    save: Optional[Path] = typer.Option(None, "--save", help="Image file to write."),
) -> None:
    """Plot one channel of ``path`` with its window captions."""

    cfg: Settings = ctx.obj
    if channel not in cfg.channels.names:
        raise typer.BadParameter(f"unknown channel: {channel}", param_hint="--channel")
    result = process_file(path, cfg)
    if not result.ok:
        typer.secho(f"skipped {result.name}: {'; '.join(result.diagnostics)}", err=True)
        raise typer.Exit(code=1)

    try:
        from .viz.plot_captions import plot_captions, save_or_show
    except ImportError:
        typer.echo("matplotlib not available, printing caption summary")
        for caption in result.captions[channel]:
            typer.echo(f"{caption.window_index}\t{caption.start_time:.3f}\t{caption.end_time:.3f}\t{caption.label}")
        return

    fig = plot_captions(result.series[channel], result.captions[channel], title=f"{cfg.viz.title}: {channel}")
    target = save or (Path(cfg.viz.save) if cfg.viz.save else None)
    save_or_show(fig, target, show=target is None)
    if target is not None:
        typer.echo(f"saved plot to {target}")


def main() -> None:
    """Execute the Typer application."""

    get_logger("rfidsense", level=logging.WARNING)
    app()


if __name__ == "__main__":
    main()
