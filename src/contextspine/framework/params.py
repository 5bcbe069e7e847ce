"""Parameter declaration, binding and merging.

Manifesto:
    Transforms receive their options from hand-written JSON/YAML templates
    and from query strings, where everything is a string. Declaring each
    parameter once (name, type, default, aliases) keeps coercion and error
    messages consistent across every transform.

Tags:
    contextspine, framework, params, validation, coercion

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from contextspine.core.errors import BadParamsError

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}

_MISSING = object()


@dataclass
class ParamDef:
    """Definition of a transform parameter.

    ``type`` is one of ``bool``, ``int``, ``float``, ``str``, ``list`` or
    ``object`` (accept anything). ``aliases`` are alternative spellings
    accepted on input; the bound value is always stored under ``name``.
    An explicit ``None`` falls back to ``default`` unless ``nullable``.
    """

    name: str
    type: type = object
    description: str = ""
    default: Any = None
    required: bool = False
    aliases: tuple[str, ...] = ()
    choices: tuple[Any, ...] | None = None
    nullable: bool = False

    def coerce(self, value: Any) -> Any:
        """Convert ``value`` to the declared type.

        Raises:
            ValueError: if the value cannot be converted.
        """
        if self.type is bool:
            value = self._to_bool(value)
        elif self.type is int:
            value = self._to_int(value)
        elif self.type is float:
            value = self._to_float(value)
        elif self.type is str:
            if isinstance(value, (dict, list, tuple)) or value is None:
                raise ValueError(f"Expected string, got {type(value).__name__}")
            value = str(value)
        elif self.type is list:
            if isinstance(value, (list, tuple)):
                value = list(value)
            elif isinstance(value, str):
                value = [value]
            else:
                raise ValueError(f"Expected list, got {type(value).__name__}")

        if self.choices is not None and value not in self.choices:
            allowed = ", ".join(str(c) for c in self.choices)
            raise ValueError(f"Expected one of {allowed}, got {value!r}")
        return value

    @staticmethod
    def _to_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
        raise ValueError(f"Expected boolean, got {value!r}")

    @staticmethod
    def _to_int(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Expected integer, got {value!r}")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
        raise ValueError(f"Expected integer, got {value!r}")

    @staticmethod
    def _to_float(value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError(f"Expected number, got {value!r}")
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                pass
        raise ValueError(f"Expected number, got {value!r}")

    @property
    def type_name(self) -> str:
        return "any" if self.type is object else self.type.__name__


@dataclass
class ParamSpec:
    """Ordered set of parameter definitions for one transform."""

    params: list[ParamDef] = field(default_factory=list)

    def _lookup(self, raw: Mapping[str, Any], param: ParamDef) -> Any:
        for key in (param.name, *param.aliases):
            if key in raw:
                return raw[key]
        return _MISSING

    def bind(self, raw: Mapping[str, Any] | None) -> dict[str, Any]:
        """Resolve aliases, coerce values and fill defaults.

        Keys that no parameter declares are ignored.

        Raises:
            BadParamsError: if a required parameter is missing or a value
                cannot be coerced.
        """
        raw = raw or {}
        bound: dict[str, Any] = {}
        missing: list[str] = []
        invalid: list[str] = []
        errors: list[str] = []

        for param in self.params:
            value = self._lookup(raw, param)
            if value is None and param.nullable:
                bound[param.name] = None
                continue
            if value is _MISSING or value is None:
                if param.required:
                    missing.append(param.name)
                bound[param.name] = copy.deepcopy(param.default)
                continue
            try:
                bound[param.name] = param.coerce(value)
            except ValueError as e:
                invalid.append(param.name)
                errors.append(f"Invalid parameter '{param.name}': {e}")

        if missing or invalid:
            messages = []
            if missing:
                messages.append(f"Missing required parameters: {', '.join(missing)}")
            messages.extend(errors)
            raise BadParamsError(
                ". ".join(messages),
                missing_params=missing,
                invalid_params=invalid,
            )
        return bound

    def get_help_text(self) -> str:
        """One line per parameter: ``name (type) [aliases] = default: description``."""
        lines = []
        for param in self.params:
            line = f"{param.name} ({param.type_name})"
            if param.aliases:
                line += f" [{', '.join(param.aliases)}]"
            if param.required:
                line += " required"
            elif param.default is not None:
                line += f" = {param.default!r}"
            if param.description:
                line += f": {param.description}"
            lines.append(line)
        return "\n".join(lines)


def merge_query_params(
    directive: Mapping[str, str | None],
    caller: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Combine caller-supplied params with a directive's own params.

    The directive wins on every key except ``limit``: when both sides set
    it, the smaller integer is used, so the directive acts as a ceiling the
    caller can only tighten. A non-integer limit on either side leaves the
    directive's value in place.

    >>> merge_query_params({"limit": "10"}, {"limit": "3"})["limit"]
    '3'
    """
    merged: dict[str, Any] = {**(caller or {}), **directive}
    if caller and "limit" in caller and "limit" in directive:
        try:
            merged["limit"] = str(min(int(caller["limit"]), int(directive["limit"])))
        except (TypeError, ValueError):
            merged["limit"] = directive["limit"]
    return merged


__all__ = ["ParamDef", "ParamSpec", "merge_query_params"]
