from __future__ import annotations

from pydantic import BaseModel, Field


class LinkRequest(BaseModel):
    leftId: str
    rightId: str


class OverrideGroupPayload(BaseModel):
    locationIds: list[str] = Field(default_factory=list)
    itemIds: list[str] = Field(default_factory=list)


class SyncOverridesRequest(BaseModel):
    overrides: list[OverrideGroupPayload] = Field(default_factory=list)
