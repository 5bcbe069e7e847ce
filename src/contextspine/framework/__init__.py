"""
contextspine framework - template resolution.

This module provides:
- Query directive parsing and dispatch
- Transform registry and pipeline
- Recursive concurrent resolver
- Content store protocol and in-memory adapter
- Page context builder
"""

from contextspine.framework.context import PageContextBuilder
from contextspine.framework.dispatcher import QueryDispatcher
from contextspine.framework.generators import TimelineGenerator
from contextspine.framework.pipeline import run_pipeline
from contextspine.framework.query import ParsedQuery, parse_query
from contextspine.framework.registry import (
    TransformAction,
    get_transform,
    list_transforms,
    register_transform,
)
from contextspine.framework.resolver import ContextResolver, unwrap_envelope

__all__ = [
    # Query
    "ParsedQuery",
    "parse_query",
    "QueryDispatcher",
    "TimelineGenerator",
    # Transforms
    "TransformAction",
    "register_transform",
    "get_transform",
    "list_transforms",
    "run_pipeline",
    # Resolution
    "ContextResolver",
    "unwrap_envelope",
    "PageContextBuilder",
]
