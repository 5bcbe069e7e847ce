"""
Structured error types for context resolution.

Every failure that can happen while a context template is resolved is a
typed error carrying a category, a retryable flag, structured context
(query, module, action, target, transform) and an optional chained cause.

Manifesto:
    A directive that fails must never take the page down with it. The
    resolver converts every directive-level error into the node's fallback
    value, so the errors themselves exist for logging and diagnosis. That
    only works if each error says *what* failed and *where*.

    - **Typed hierarchy:** parse, dispatch, backend, pipeline, template
    - **Rich context:** the directive and transform that failed
    - **Error chaining:** adapter exceptions are wrapped, never swallowed

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                    ContextSpineError                         │
        │        (category, retryable, context, cause)                 │
        ├─────────────────────────────────────────────────────────────┤
        │  ParseError        DispatchError          BackendError       │
        │  (PARSE)           (DISPATCH)             (BACKEND)          │
        │                    UnknownModuleError     GeneratorError     │
        │                    UnknownActionError     SourceNotFoundError│
        │                    MissingTargetError                        │
        │                                                              │
        │  PipelineError     TemplateError          ConfigError        │
        │  (PIPELINE)        (TEMPLATE)             (CONFIG)           │
        │  UnknownTransform  TemplateNotFound                          │
        │  BadParamsError                                              │
        └─────────────────────────────────────────────────────────────┘

    Only TemplateError escapes ``ContextResolver.resolve``; everything else
    is contained at the directive node that raised it.

Examples:
    >>> error = MissingTargetError("list").with_context(query="{cms}/list")
    >>> error.context.query
    '{cms}/list'
    >>> error.to_dict()["category"]
    'DISPATCH'

Tags:
    error-handling, exception-hierarchy, error-context, contextspine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and log routing."""

    PARSE = "PARSE"
    DISPATCH = "DISPATCH"
    BACKEND = "BACKEND"
    PIPELINE = "PIPELINE"
    TEMPLATE = "TEMPLATE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured context attached to an error.

    Attributes:
        query: Raw directive string being resolved
        module: Parsed module name (``cms``, ``gen``)
        action: Parsed action name
        target: Effective target identifier
        transform: Transform action that failed
        path: Location of the node in the template tree
        metadata: Additional key-value pairs
    """

    query: str | None = None
    module: str | None = None
    action: str | None = None
    target: str | None = None
    transform: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["query", "module", "action", "target", "transform", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ContextSpineError(Exception):
    """
    Base exception for all context resolution errors.

    Subclasses set ``default_category`` and ``default_retryable``. Nothing in
    this package retries, but adapters raising retryable errors let callers
    above the resolver decide.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ContextSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ParseError("Cannot parse").with_context(query=text)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# PARSE ERRORS
# =============================================================================


class ParseError(ContextSpineError):
    """Malformed query directive."""

    default_category = ErrorCategory.PARSE


# =============================================================================
# DISPATCH ERRORS
# =============================================================================


class DispatchError(ContextSpineError):
    """A parsed query could not be routed to an adapter."""

    default_category = ErrorCategory.DISPATCH


class UnknownModuleError(DispatchError):
    """Query module has no registered adapter."""

    def __init__(self, module: str, **kwargs: Any):
        self.module = module
        super().__init__(f"Unknown query module: {module}", **kwargs)


class UnknownActionError(DispatchError):
    """Action is not supported by the query module."""

    def __init__(self, module: str, action: str, **kwargs: Any):
        self.module = module
        self.action = action
        super().__init__(f"Unknown query action: {module}/{action}", **kwargs)


class MissingTargetError(DispatchError):
    """Action requires a target but none was given in the path or params."""

    def __init__(self, action: str, **kwargs: Any):
        self.action = action
        super().__init__(f"Query action {action} requires a target", **kwargs)


# =============================================================================
# BACKEND ERRORS
# =============================================================================


class BackendError(ContextSpineError):
    """
    Adapter failure.

    The cause is opaque to the resolver; it is kept for logging only.
    """

    default_category = ErrorCategory.BACKEND


class SourceNotFoundError(BackendError):
    """Requested record or list does not exist in the content store."""

    pass


class GeneratorError(BackendError):
    """Synthetic generator could not produce a sequence."""

    pass


# =============================================================================
# PIPELINE ERRORS
# =============================================================================


class PipelineError(ContextSpineError):
    """Transform chain failure."""

    default_category = ErrorCategory.PIPELINE


class UnknownTransformError(PipelineError):
    """Transform action not found in registry."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.transform_name = name
        self.available = available or []
        message = f"Unknown transform: {name}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class BadParamsError(PipelineError):
    """Invalid transform or adapter parameters."""

    def __init__(
        self,
        message: str,
        *,
        missing_params: list[str] | None = None,
        invalid_params: list[str] | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.missing_params = missing_params or []
        self.invalid_params = invalid_params or []


# =============================================================================
# TEMPLATE / CONFIG ERRORS
# =============================================================================


class TemplateError(ContextSpineError):
    """Structural problem in a template tree that prevents scheduling."""

    default_category = ErrorCategory.TEMPLATE


class TemplateNotFoundError(TemplateError):
    """Context template file not found."""

    def __init__(self, name: str, search_dir: str | None = None):
        self.template_name = name
        message = f"Template not found: {name}"
        if search_dir:
            message += f" (searched {search_dir})"
        super().__init__(message)


class ConfigError(ContextSpineError):
    """Invalid settings or command-line input."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, ContextSpineError):
        return error.category
    if isinstance(error, (TypeError, ValueError, KeyError)):
        return ErrorCategory.PIPELINE
    return ErrorCategory.UNKNOWN


def error_to_dict(error: Exception) -> dict[str, Any]:
    """Serialize any exception for structured logging."""
    if isinstance(error, ContextSpineError):
        return error.to_dict()
    return {
        "error_type": error.__class__.__name__,
        "message": str(error),
        "category": categorize_error(error).value,
        "retryable": False,
    }


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ContextSpineError",
    "ParseError",
    "DispatchError",
    "UnknownModuleError",
    "UnknownActionError",
    "MissingTargetError",
    "BackendError",
    "SourceNotFoundError",
    "GeneratorError",
    "PipelineError",
    "UnknownTransformError",
    "BadParamsError",
    "TemplateError",
    "TemplateNotFoundError",
    "ConfigError",
    "categorize_error",
    "error_to_dict",
]
