"""Dotted-path resolution of tokens against nested configuration mappings."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..core.models import Found, Missing, MissingReason, Resolution

_ABSENT = object()


def get_nested_value(config: Any, path: str) -> Any:
    """Look up a dotted path in a nested mapping.

    Args:
        config: Configuration mapping
        path: Dot-separated path, e.g. ``payment.amount``

    Returns:
        The value at the path, or ``None`` when any segment is absent or an
        intermediate value is not a mapping
    """
    value = _lookup(config, path)
    return None if value is _ABSENT else value


def _lookup(config: Any, path: str) -> Any:
    current = config
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return _ABSENT
        if part not in current:
            return _ABSENT
        current = current[part]
    return current


def resolve_token(config: Mapping[str, Any], token: str, *, allow_empty: bool = True) -> Resolution:
    """Resolve a token to ``Found(value)`` or ``Missing(reason)``."""
    value = _lookup(config, token)
    if value is _ABSENT:
        return Missing(MissingReason.NOT_FOUND)
    if value is None:
        return Missing(MissingReason.NULL_VALUE)
    if not allow_empty and value == "":
        return Missing(MissingReason.EMPTY_STRING)
    return Found(value)


def stringify(value: Any) -> str:
    """Render a resolved value the way it is written into a template."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def json_type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def get_all_config_paths(config: Mapping[str, Any], prefix: str = "") -> list[str]:
    """Flatten a configuration into dotted leaf paths.

    Lists are treated as opaque leaves and never descended into. An empty
    nested mapping contributes no paths.
    """
    paths: list[str] = []
    for key, value in config.items():
        current = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            paths.extend(get_all_config_paths(value, current))
        else:
            paths.append(current)
    return paths


def set_nested_value(target: dict[str, Any], path: str, value: Any) -> None:
    """Assign ``value`` at a dotted path, creating intermediate mappings."""
    parts = path.split(".")
    current = target
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value
