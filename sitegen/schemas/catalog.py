from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProductCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    image: Optional[str] = None


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    image: Optional[str] = None


class PromotionCreateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class PromotionUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class ArticleCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    category: Optional[str] = None
    datePosted: Optional[datetime] = None
    content: Optional[str] = None
    contentSummary: Optional[str] = None
    image: Optional[str] = None


class ArticleUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    datePosted: Optional[datetime] = None
    content: Optional[str] = None
    contentSummary: Optional[str] = None
    image: Optional[str] = None


class RecordsByIdsRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)
