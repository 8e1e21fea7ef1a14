from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ComponentNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    props: dict[str, Any] = Field(default_factory=dict)


class PageDocument(BaseModel):
    """Serialized page-builder data: a default content list plus named zones."""

    model_config = ConfigDict(extra="allow")

    root: dict[str, Any] = Field(default_factory=lambda: {"props": {}})
    content: list[ComponentNode] = Field(default_factory=list)
    zones: dict[str, list[ComponentNode]] = Field(default_factory=dict)


class PagePublishRequest(BaseModel):
    path: str = Field(min_length=1)
    data: PageDocument


class PageDraftRequest(BaseModel):
    path: str = Field(min_length=1)
    data: PageDocument


class PageGroupDataRequest(BaseModel):
    data: PageDocument
