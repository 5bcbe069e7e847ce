"""contextspine.core -- Domain-agnostic primitives.

Architecture::

    errors.py        Structured error hierarchy (ContextSpineError, ...)
    logging.py       structlog configuration and context binding
    settings.py      pydantic-settings configuration (CONTEXTSPINE_*)
    timestamps.py    Timestamp parsing and the clock (stdlib-only)
    dates.py         Calendar decomposition, relative labels, timelines

Nothing in ``core`` imports from ``framework``.
"""

from contextspine.core.errors import (
    BackendError,
    ConfigError,
    ContextSpineError,
    DispatchError,
    ParseError,
    PipelineError,
    TemplateError,
)
from contextspine.core.logging import configure_logging, get_logger

__all__ = [
    "BackendError",
    "ConfigError",
    "ContextSpineError",
    "DispatchError",
    "ParseError",
    "PipelineError",
    "TemplateError",
    "configure_logging",
    "get_logger",
]
