from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sitegen.db.enums import ContentSourceKindEnum, DynamicModeEnum


class ContentSourceDescriptor(BaseModel):
    """
    Per-node binding metadata stored under ``props.contentSource`` by the page editor.

    Only ``source`` and ``dynamicMode`` are validated strictly. The selection fields are
    editor cache: unusable values are normalized away instead of rejecting the descriptor.
    ``perLocationSelectedIds`` / ``perLocationSelectedId`` are never read when resolving
    a page; the junction tables own per-location selections.
    """

    model_config = ConfigDict(extra="ignore")

    source: ContentSourceKindEnum = ContentSourceKindEnum.static
    dynamicMode: Optional[str] = None
    selectedIds: list[Any] = Field(default_factory=list)
    selectedId: Optional[Any] = None
    perLocationSelectedIds: Optional[dict[str, Any]] = None
    perLocationSelectedId: Optional[dict[str, Any]] = None
    refresh: Optional[float] = None

    @field_validator("selectedIds", mode="before")
    @classmethod
    def coerce_selected_ids(cls, value: Any) -> list[Any]:
        return list(value) if isinstance(value, (list, tuple)) else []

    @field_validator("perLocationSelectedIds", "perLocationSelectedId", mode="before")
    @classmethod
    def drop_invalid_selection_map(cls, value: Any) -> Optional[dict[str, Any]]:
        return value if isinstance(value, dict) else None

    @field_validator("refresh", mode="before")
    @classmethod
    def drop_invalid_refresh(cls, value: Any) -> Optional[float]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    @property
    def is_dynamic(self) -> bool:
        return self.source == ContentSourceKindEnum.dynamic

    @property
    def mode(self) -> DynamicModeEnum:
        # Older documents store "all" (or nothing) for the shared selection.
        if self.dynamicMode == DynamicModeEnum.per_location.value:
            return DynamicModeEnum.per_location
        return DynamicModeEnum.synced
