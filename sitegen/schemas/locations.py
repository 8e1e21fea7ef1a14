from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LocationAddress(BaseModel):
    region: str = Field(min_length=1)
    city: str = Field(min_length=1)
    line1: str = Field(min_length=1)
    line2: Optional[str] = None
    postalCode: Optional[str] = None


class LocationCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    address: LocationAddress
    pageGroupSlug: Optional[str] = None


class SeedLocationsRequest(BaseModel):
    pageGroupSlug: Optional[str] = None
