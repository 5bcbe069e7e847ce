"""
Centralized settings for contextspine.

All fields can be set via ``CONTEXTSPINE_*`` environment variables (e.g.
``CONTEXTSPINE_CONTEXT_DIR=./context``) or a ``.env`` file. The CLI reads
its defaults from here; library code receives explicit arguments and never
reaches for the cached instance on its own.

Tags:
    contextspine, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContextSpineSettings(BaseSettings):
    """Context resolution settings.

    Fields
    ──────
    context_dir  : Directory holding ``global.json`` and ``pages/<page>.json``
    store_path   : JSON/YAML file backing the in-memory content store
    static_url   : Exposed to templates as ``STATIC`` (no trailing slash)
    base_url     : Exposed to templates as ``BASE`` (no trailing slash)
    php_url      : Exposed to templates as ``PHP`` (no trailing slash)
    log_level    : Structlog log level
    log_format   : ``console`` or ``json``
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTEXTSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Templates ────────────────────────────────────────────────
    context_dir: Path = Field(default=Path("context"))
    store_path: Path | None = Field(default=None)

    # ── Page URLs ────────────────────────────────────────────────
    static_url: str = Field(default="")
    base_url: str = Field(default="")
    php_url: str = Field(default="")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("static_url", "base_url", "php_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"Unsupported log level: {value}")
        return level

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        fmt = value.lower()
        if fmt not in {"console", "json"}:
            raise ValueError(f"Unsupported log format: {value}")
        return fmt

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"


_settings_cache: dict[str, ContextSpineSettings] = {}


def get_settings(*, _force_reload: bool = False) -> ContextSpineSettings:
    """Load, validate, and cache a :class:`ContextSpineSettings` instance."""
    if _force_reload or "default" not in _settings_cache:
        _settings_cache["default"] = ContextSpineSettings()
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Clear the cached settings (for testing)."""
    _settings_cache.clear()
