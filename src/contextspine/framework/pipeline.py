"""Transform pipeline.

A directive's ``_process`` entry is one transform spec or an ordered list
of them. Each spec is either a bare transform name (``"TimeAgo"``) or a
mapping with an ``action`` key plus parameters
(``{"action": "Limit", "size": 5}``).

Tags:
    contextspine, framework, pipeline, transforms

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from contextspine.core.errors import BadParamsError, ContextSpineError, PipelineError
from contextspine.core.logging import get_logger
from contextspine.framework.registry import get_transform

logger = get_logger(__name__)


class TransformSpec(BaseModel):
    """One pipeline stage: a transform name and its raw parameters."""

    model_config = ConfigDict(frozen=True)

    action: str = Field(min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)


def parse_transform_spec(raw: Any) -> TransformSpec:
    """Normalize a bare name or an ``{"action": ...}`` mapping.

    Raises:
        BadParamsError: if ``raw`` is neither form.
    """
    if isinstance(raw, TransformSpec):
        return raw
    try:
        if isinstance(raw, str):
            return TransformSpec(action=raw)
        if isinstance(raw, Mapping):
            params = {k: v for k, v in raw.items() if k != "action"}
            return TransformSpec(action=raw.get("action"), params=params)
    except ValidationError as e:
        raise BadParamsError(f"Invalid transform spec: {raw!r}", cause=e) from e
    raise BadParamsError(f"Invalid transform spec: {raw!r}")


def parse_process(process: Any) -> list[TransformSpec]:
    """Normalize a ``_process`` entry (absent, single spec or list) to a list."""
    if process is None:
        return []
    if isinstance(process, (list, tuple)):
        return [parse_transform_spec(item) for item in process]
    return [parse_transform_spec(process)]


def run_pipeline(value: Any, process: Any) -> Any:
    """Apply each transform stage to ``value`` in declared order.

    Raises:
        PipelineError: carrying the failing transform and stage index.
            Unknown names and bad parameters keep their own subclasses;
            other exceptions are wrapped and chained as the cause.
    """
    for index, spec in enumerate(parse_process(process)):
        try:
            transform = get_transform(spec.action)
            logger.debug("pipeline.stage", index=index, transform=spec.action)
            value = transform(value, spec.params)
        except ContextSpineError as e:
            raise e.with_context(transform=spec.action, stage=index)
        except Exception as e:
            raise PipelineError(
                f"Transform {spec.action} failed: {e}", cause=e
            ).with_context(transform=spec.action, stage=index) from e
    return value


__all__ = ["TransformSpec", "parse_transform_spec", "parse_process", "run_pipeline"]
