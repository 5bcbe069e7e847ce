"""
Root Typer application for the contextspine CLI.

Commands resolve page templates and single directives against a
file-backed content store, for authoring and debugging templates.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from typer import Typer

from contextspine import __version__
from contextspine.cli.utils import (
    build_resolver,
    exit_with_error,
    parse_json_option,
    parse_param_options,
    print_json,
    print_table,
    print_text,
)
from contextspine.core.errors import ContextSpineError
from contextspine.core.logging import configure_logging
from contextspine.core.settings import ContextSpineSettings, get_settings
from contextspine.framework.context import PageContextBuilder
from contextspine.framework.generators import TimelineGenerator
from contextspine.framework.pipeline import run_pipeline
from contextspine.framework.registry import get_transform, list_transforms
from contextspine.framework.resolver import unwrap_envelope

app = Typer(
    name="contextspine",
    help="contextspine — resolve declarative page context templates.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _settings() -> ContextSpineSettings:
    try:
        return get_settings()
    except ValidationError as e:
        exit_with_error(f"Invalid settings: {e}")


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"contextspine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
    json_logs: bool | None = typer.Option(None, "--json-logs/--console-logs", help="Log format."),
) -> None:
    """contextspine CLI — resolve pages, run directives, inspect transforms."""
    settings = _settings()
    level = (log_level or settings.log_level).upper()
    if level not in _LOG_LEVELS:
        exit_with_error(f"Unknown log level: {log_level}")
    configure_logging(
        level=level,
        json_format=json_logs if json_logs is not None else settings.json_logs,
    )


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("resolve")
def resolve_page(
    page: str = typer.Argument(..., help="Page template name (pages/<page>.json)"),
    context_dir: Path | None = typer.Option(None, "--context-dir", "-c", help="Template directory"),
    store: Path | None = typer.Option(None, "--store", "-s", help="JSON/YAML content file"),
    param: list[str] | None = typer.Option(None, "--param", "-p", help="Request param key=value"),
    static_url: str | None = typer.Option(None, "--static-url"),
    base_url: str | None = typer.Option(None, "--base-url"),
    php_url: str | None = typer.Option(None, "--php-url"),
) -> None:
    """Build the render context for a page and print it as JSON."""
    settings = _settings()
    try:
        query = parse_param_options(param)
        builder = PageContextBuilder(
            build_resolver(store or settings.store_path),
            context_dir or settings.context_dir,
        )
        context = asyncio.run(
            builder.prepare(
                page,
                static_url=static_url if static_url is not None else settings.static_url,
                base_url=base_url if base_url is not None else settings.base_url,
                php_url=php_url if php_url is not None else settings.php_url,
                query=query or None,
            )
        )
    except ContextSpineError as e:
        exit_with_error(e.message)
    print_json(context)


async def _run_query(store: Path | None, directive: str, extra: dict[str, Any], process: Any) -> Any:
    resolver = build_resolver(store)
    raw = await resolver.dispatcher.execute(directive, extra or None)
    return run_pipeline(unwrap_envelope(raw), process)


@app.command("query")
def run_query(
    directive: str = typer.Argument(..., help="Directive, e.g. '{cms}/list/news?limit=5'"),
    store: Path | None = typer.Option(None, "--store", "-s", help="JSON/YAML content file"),
    param: list[str] | None = typer.Option(None, "--param", "-p", help="Caller param key=value"),
    process: str | None = typer.Option(None, "--process", help="Transform chain as JSON"),
) -> None:
    """Run one directive (and optional transform chain) and print the result."""
    settings = _settings()
    try:
        extra = parse_param_options(param)
        chain = parse_json_option(process, "--process")
        result = asyncio.run(_run_query(store or settings.store_path, directive, extra, chain))
    except ContextSpineError as e:
        exit_with_error(e.message)
    print_json(result)


@app.command("transforms")
def show_transforms(
    name: str | None = typer.Argument(None, help="Show one transform's parameters in detail"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List built-in transforms and their parameters."""
    if name:
        try:
            transform = get_transform(name)
        except ContextSpineError as e:
            exit_with_error(e.message)
        print_text(f"{transform.action.value}: {transform.description}")
        print_text(transform.spec.get_help_text() or "No parameters.")
        return

    rows = []
    for action in list_transforms():
        transform = get_transform(action)
        rows.append(
            {
                "name": action,
                "parameters": ", ".join(p.name for p in transform.spec.params) or "-",
                "description": transform.description,
            }
        )
    if json_out:
        print_json(rows)
    else:
        print_table(rows, title="Transforms")


@app.command("timeline")
def show_timeline(
    unit: str = typer.Argument(..., help="year(s) or month(s)"),
    start: str | None = typer.Option(None, "--start", help="Start date expression (default now)"),
    end: str | None = typer.Option(None, "--end", help="End date expression (default now)"),
    short_month: bool = typer.Option(False, "--short-month"),
) -> None:
    """Print timeline markers, as ``{gen}/timeline/<unit>`` would."""
    params: dict[str, Any] = {"shortMonth": short_month}
    if start:
        params["startDate"] = start
    if end:
        params["endDate"] = end
    try:
        markers = asyncio.run(TimelineGenerator().timeline(unit, params))
    except ContextSpineError as e:
        exit_with_error(e.message)
    print_json(markers)
