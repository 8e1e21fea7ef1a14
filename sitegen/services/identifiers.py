from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, Optional
from uuid import UUID

from fastapi import HTTPException, status

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(UUID_RE.match(value))


def filter_valid_ids(values: Iterable[Any]) -> list[str]:
    """Keep well-formed ids only, preserving order. Malformed entries never reach storage."""
    return [value for value in values if is_valid_id(value)]


def coerce_uuid(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    if not is_valid_id(value):
        return None
    return UUID(value)


def require_uuid(value: Any, *, label: str = "id") -> UUID:
    parsed = coerce_uuid(value)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} must be a valid UUID.",
        )
    return parsed
