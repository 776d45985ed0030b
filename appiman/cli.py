"""Command line interface for appiman."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from loguru import logger

from .cleanup import cleanup
from .config import AppConfig, load_app_config
from .config.app import default_config_path
from .config.inspector import check_config, explain_config
from .core.errors import TargetTreeError
from .core.naming import stem_of
from .mover import MoveReport, ingest as ingest_packages
from .registrar import Processor, ProcessReport, TargetTree


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path | None = None
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            logger.debug("Loading configuration from {}", self.resolved_config_path())
            self._config = load_app_config(self.config_path)
            _configure_logging(self._config)
        return self._config

    def resolved_config_path(self) -> Path:
        return self.config_path or default_config_path()


app = typer.Typer(help="Install downloaded AppImages system-wide")
config_app = typer.Typer(help="Validate and document configuration files")
app.add_typer(config_app, name="config")

_sink_ids: list[int] = []


def _stderr_sink(message: str) -> None:
    sys.stderr.write(message)


def _configure_logging(config: AppConfig) -> None:
    """Replace loguru's default handler with sinks built from ``config.logging``."""

    try:
        logger.remove(0)
    except ValueError:
        pass
    while _sink_ids:
        logger.remove(_sink_ids.pop())

    settings = config.logging
    _sink_ids.append(logger.add(_stderr_sink, level=settings.level))
    if settings.file is None:
        return
    try:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        _sink_ids.append(
            logger.add(
                settings.file,
                rotation="5 MB",
                retention=5,
                serialize=settings.serialize,
                level=settings.level,
            )
        )
    except OSError as exc:
        logger.warning("Failed to initialise log file {}: {}", settings.file, exc)


def _normalize_format(value: str) -> str:
    return value.lower()


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):  # pragma: no cover
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


def _require_root(config: AppConfig) -> None:
    if config.require_root and os.geteuid() != 0:
        logger.error("This command must be run as root (set require_root = false to override)")
        _exit(1)


def _emit(payload: dict[str, Any], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _log_move_report(report: MoveReport) -> None:
    for item in report.moved:
        logger.info("Staged {} -> {}", item.source, item.destination)
    for path, reason in report.warnings:
        logger.warning("{}: {}", path, reason)
    for path, reason in report.errors:
        logger.error("Failed to move {}: {}", path, reason)
    logger.info(
        "Ingest finished: {} moved, {} skipped, {} errors",
        report.success_count,
        len(report.skipped),
        len(report.errors),
    )


def _run_ingest(config: AppConfig, dry_run: bool) -> MoveReport:
    report = ingest_packages(config, dry_run=dry_run)
    _log_move_report(report)
    return report


def _run_scan(config: AppConfig, dry_run: bool) -> ProcessReport:
    processor = Processor.from_config(config, dry_run=dry_run)
    try:
        return processor.process_all()
    except TargetTreeError as exc:
        logger.error("Target tree is not usable: {}", exc)
        raise typer.Exit(1) from exc


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to the TOML configuration file (defaults to $APPIMAN_CONFIG or /etc/appiman/config.toml)",
    ),
) -> None:
    """Initialise CLI state."""

    ctx.obj = CLIState(config_path=config.resolve() if config is not None else None)


@app.command(help="Create the staging and target directories")
def init(ctx: typer.Context) -> None:
    config = _get_state(ctx).ensure_config()
    _require_root(config)

    tree = TargetTree.from_config(config.directories)
    try:
        tree.ensure_ready()
        config.directories.staging.mkdir(parents=True, exist_ok=True)
    except (TargetTreeError, OSError) as exc:
        logger.error("Cannot prepare directories: {}", exc)
        _exit(1)
    logger.info("Directories ready under {}", config.directories.binaries.parent)


@app.command(help="Move AppImages found in home directories into staging")
def ingest(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would move without moving"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    config = _get_state(ctx).ensure_config()
    if not dry_run:
        _require_root(config)

    report = _run_ingest(config, dry_run)
    _emit(report.to_dict(), as_json)
    if report.has_errors:
        _exit(1)


@app.command(help="Register every staged AppImage")
def scan(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Report canonical names without installing"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    config = _get_state(ctx).ensure_config()
    if not dry_run:
        _require_root(config)

    report = _run_scan(config, dry_run)
    _emit(report.to_dict(), as_json)
    if report.failure_count:
        _exit(1)


@app.command(help="Ingest from home directories, then register staged packages")
def sync(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview both phases without changes"),
    as_json: bool = typer.Option(False, "--json", help="Print both reports as JSON"),
) -> None:
    config = _get_state(ctx).ensure_config()
    if not dry_run:
        _require_root(config)

    move_report = _run_ingest(config, dry_run)
    process_report = _run_scan(config, dry_run)
    _emit({"ingest": move_report.to_dict(), "scan": process_report.to_dict()}, as_json)
    if move_report.has_errors or process_report.failure_count:
        _exit(1)


@app.command(help="Remove artifacts left behind by older naming rules")
def clean(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="List stale artifacts without deleting"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    config = _get_state(ctx).ensure_config()
    if not dry_run:
        _require_root(config)

    tree = TargetTree.from_config(config.directories)
    report = cleanup(tree, extension=config.scanner.extension, dry_run=dry_run)
    _emit(report.to_dict(), as_json)
    if report.has_errors:
        _exit(1)


@app.command(help="Show configured directories and registration counts")
def status(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the status as JSON"),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()
    summary = _collect_status(config)
    summary["config_path"] = str(state.resolved_config_path())

    if as_json:
        _emit(summary, True)
        return

    logger.info("Configuration: {}", summary["config_path"])
    for name, path in summary["directories"].items():
        logger.info("  {}: {}", name, path)
    logger.info("Registered packages: {}", summary["registered"])
    logger.info("Staged packages: {}", summary["staged"])
    if summary["dangling_links"]:
        logger.warning("Dangling symlinks: {}", ", ".join(summary["dangling_links"]))


def _collect_status(config: AppConfig) -> dict[str, Any]:
    dirs = config.directories
    extension = config.scanner.extension
    tree = TargetTree.from_config(dirs)

    registered = [name for name in tree.binaries.list() if stem_of(name, extension)]
    staged = list(Processor.from_config(config, dry_run=True).staged_packages())
    dangling = []
    for name in tree.links.list():
        target = tree.links.target(name)
        if target is not None and target.parent == tree.binaries.root and not tree.binaries.exists(target.name):
            dangling.append(name)

    return {
        "directories": {
            "staging": str(dirs.staging),
            "binaries": str(dirs.binaries),
            "icons": str(dirs.icons),
            "entries": str(dirs.entries),
            "symlinks": str(dirs.symlinks),
            "home_roots": [str(root) for root in dirs.home_roots],
        },
        "registered": len(registered),
        "staged": len(staged),
        "dangling_links": dangling,
    }


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.resolved_config_path())

    if format == "json":
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
        _exit(exit_code)

    if result["status"] == "ok":
        logger.info("Configuration OK: {}", result["config_path"])
        for warning in result["warnings"]:
            logger.warning(warning)
    else:
        error: dict[str, Any] = result["error"]
        logger.error(
            "Configuration error ({}) for {}: {}",
            error["type"],
            result["config_path"],
            error["message"],
        )
        for detail in error.get("details", []):
            location = detail["loc"] or "<root>"
            logger.error("  - {}: {} ({})", location, detail["message"], detail["type"])

    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        print(json.dumps({"fields": fields}, indent=2, ensure_ascii=False, default=str))
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for field in fields:
        default_value = field["default"]
        if isinstance(default_value, (dict, list)):
            default_repr = json.dumps(default_value, ensure_ascii=False, default=str)
        elif default_value is None:
            default_repr = "None"
        else:
            default_repr = str(default_value)
        logger.info(
            "  - {name}: type={type}, required={required}, default={default}, description={description}",
            name=field["name"],
            type=field["type"],
            required="yes" if field["required"] else "no",
            default=default_repr,
            description=field["description"] or "(no description)",
        )


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:  # pragma: no cover - Typer translates exit codes
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
