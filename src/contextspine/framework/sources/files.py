"""JSON/YAML document loading for stores and context templates."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from contextspine.core.errors import ConfigError, ContextSpineError

DOCUMENT_SUFFIXES = (".json", ".yaml", ".yml")


def read_document(
    path: str | Path,
    error_type: type[ContextSpineError] = ConfigError,
) -> Any:
    """Read a JSON or YAML file, chosen by suffix.

    Raises:
        error_type: if the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise error_type(f"Cannot read {path}: {e}", cause=e).with_context(path=str(path)) from e


def find_document(directory: Path, stem: str) -> Path | None:
    """First existing ``<stem>.json``, ``.yaml`` or ``.yml`` in ``directory``."""
    for suffix in DOCUMENT_SUFFIXES:
        candidate = directory / f"{stem}{suffix}"
        if candidate.is_file():
            return candidate
    return None
