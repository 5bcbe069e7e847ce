"""
CLI utility helpers — output formatting, parameter parsing, store loading.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from contextspine.core.errors import ConfigError
from contextspine.framework.dispatcher import QueryDispatcher
from contextspine.framework.resolver import ContextResolver
from contextspine.framework.sources.memory import MemoryContentStore

console = Console()
err_console = Console(stderr=True)


# ── Input helpers ────────────────────────────────────────────────────────


def parse_param_options(values: list[str] | None) -> dict[str, str | None]:
    """Turn repeated ``--param key=value`` options into a dict (bare key → None)."""
    params: dict[str, str | None] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not key:
            raise ConfigError(f"Invalid --param {item!r}, expected key=value")
        params[key] = value.strip() if sep else None
    return params


def parse_json_option(text: str | None, option: str) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON for {option}: {e}") from e


def build_resolver(store_path: Path | None) -> ContextResolver:
    """Resolver over the file-backed store, or an empty store when none is set."""
    store = MemoryContentStore.from_file(store_path) if store_path else MemoryContentStore([])
    return ContextResolver(QueryDispatcher(store))


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def print_text(text: str) -> None:
    console.print(escape(text), soft_wrap=True)


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)


def exit_with_error(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(code=1)
