from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.config import settings
from sitegen.db.deps import get_session
from sitegen.db.repositories.locations import LocationsRepository
from sitegen.schemas.locations import LocationCreateRequest, SeedLocationsRequest
from sitegen.services.identifiers import require_uuid
from sitegen.services.public_routing import normalize_route_token
from sitegen.services.records import location_record
from sitegen.services.seed import seed_sample_locations

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("")
def list_locations(
    pageGroupSlug: Optional[str] = None,
    session: Session = Depends(get_session),
):
    slug = pageGroupSlug or settings.LOCATION_PAGE_GROUP_SLUG
    return [location_record(location) for location in LocationsRepository(session).list_for_group(page_group_slug=slug)]


@router.get("/by-slugs")
def get_location_by_slugs(
    region: str,
    city: str,
    line1: str,
    session: Session = Depends(get_session),
):
    location = LocationsRepository(session).get_by_slugs(
        region_slug=normalize_route_token(region),
        city_slug=normalize_route_token(city),
        line1_slug=normalize_route_token(line1),
    )
    if not location:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return location_record(location)


@router.get("/by-city")
def list_locations_by_city(
    region: str,
    city: str,
    session: Session = Depends(get_session),
):
    locations = LocationsRepository(session).list_by_city_slugs(
        region_slug=normalize_route_token(region),
        city_slug=normalize_route_token(city),
    )
    return [location_record(location) for location in locations]


@router.get("/{location_id}")
def get_location(
    location_id: str,
    session: Session = Depends(get_session),
):
    location = LocationsRepository(session).get(location_id=require_uuid(location_id, label="location_id"))
    if not location:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return location_record(location)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationCreateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    repo = LocationsRepository(session)
    try:
        location = repo.create(
            page_group_slug=payload.pageGroupSlug or settings.LOCATION_PAGE_GROUP_SLUG,
            name=payload.name,
            address=payload.address.model_dump(exclude_none=True),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except IntegrityError as exc:
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A location with the same region, city and street slug already exists.",
        ) from exc
    return location_record(location)


@router.post("/seed")
def seed_locations(
    payload: Optional[SeedLocationsRequest] = None,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    page_group_slug = payload.pageGroupSlug if payload else None
    return seed_sample_locations(session=session, page_group_slug=page_group_slug)
