from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

_TOKEN_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")


def get_value_at_path(data: Mapping[str, Any], path: str) -> Any:
    current: Any = data
    for segment in (part for part in path.split(".") if part):
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
    return current


def resolve_template_tokens(value: str, data: Optional[Mapping[str, Any]] = None) -> str:
    """Replace ``[[dot.path]]`` tokens with values from ``data``; unknown paths stay as written."""
    if not data or "[[" not in value:
        return value

    def _replace(match: re.Match) -> str:
        path = match.group(1).strip()
        if not path:
            return match.group(0)
        resolved = get_value_at_path(data, path)
        if resolved is None:
            return match.group(0)
        return str(resolved)

    return _TOKEN_PATTERN.sub(_replace, value)


def resolve_tokens_in_value(value: Any, data: Optional[Mapping[str, Any]] = None) -> Any:
    """Apply token substitution through nested lists and dicts, reusing unchanged objects."""
    if not data:
        return value

    if isinstance(value, str):
        return resolve_template_tokens(value, data)

    if isinstance(value, list):
        items = [resolve_tokens_in_value(item, data) for item in value]
        if all(new is old for new, old in zip(items, value)):
            return value
        return items

    if isinstance(value, dict):
        resolved = {key: resolve_tokens_in_value(item, data) for key, item in value.items()}
        if all(resolved[key] is item for key, item in value.items()):
            return value
        return resolved

    return value
