"""Query directive parsing.

A directive is a compact string naming a backend call::

    {module}/action[/target][?key=value&flag&...]

Manifesto:
    Templates are written by hand. The parser is strict about the shape
    (braces, segment count) so typos fail loudly at the directive, and
    lenient about parameters (whitespace, empty items) so they don't.

Tags:
    contextspine, framework, query, parser, directive

Doc-Types:
    api-reference
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from contextspine.core.errors import ParseError

_DIRECTIVE = re.compile(r"^\{(\w+)\}/(\w+)(?:/([^/?]+))?(?:\?(.*))?$", re.DOTALL)


@dataclass(frozen=True)
class ParsedQuery:
    """Structured form of a query directive.

    ``params`` keeps declaration order; a bare key maps to ``None``.
    """

    module: str
    action: str
    target: str | None = None
    params: dict[str, str | None] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "module": self.module,
            "action": self.action,
            "target": self.target,
            "params": dict(self.params),
        }


def split_params(text: str | None) -> dict[str, str | None]:
    """Split a ``k=v&flag`` string into an ordered mapping.

    Keys and values are trimmed, empty items are skipped and the value is
    everything after the first ``=``. Later duplicates win.
    """
    params: dict[str, str | None] = {}
    if not text:
        return params
    for item in text.split("&"):
        if not item.strip():
            continue
        key, sep, value = item.partition("=")
        key = key.strip()
        if not key:
            continue
        params[key] = value.strip() if sep else None
    return params


def parse_query(text: Any) -> ParsedQuery:
    """Parse a directive string.

    Raises:
        ParseError: if ``text`` is empty, not a string, or malformed.
    """
    if not isinstance(text, str) or not text.strip():
        raise ParseError("Query directive must be a non-empty string").with_context(
            query=text if isinstance(text, str) else repr(text)
        )

    match = _DIRECTIVE.match(text.strip())
    if match is None:
        raise ParseError(f"Malformed query directive: {text}").with_context(query=text)

    module, action, target, query_string = match.groups()
    return ParsedQuery(
        module=module,
        action=action,
        target=target,
        params=split_params(query_string),
    )


__all__ = ["ParsedQuery", "parse_query", "split_params"]
