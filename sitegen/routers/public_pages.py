from __future__ import annotations

import asyncio
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from sitegen.config import settings
from sitegen.db.base import session_scope
from sitegen.db.repositories.locations import LocationsRepository
from sitegen.db.repositories.pages import PageGroupsRepository, PagesRepository
from sitegen.services.content_store import ContentStore, get_content_store
from sitegen.services.overrides import resolve_per_location_data
from sitegen.services.public_routing import city_public_path, normalize_route_token
from sitegen.services.records import location_record
from sitegen.services.template_tokens import resolve_template_tokens, resolve_tokens_in_value

router = APIRouter(prefix="/public", tags=["public"])


def _page_title(data: dict[str, Any], metadata: dict[str, Any], fallback: str) -> str:
    root = data.get("root") if isinstance(data, dict) else None
    props = root.get("props") if isinstance(root, dict) else None
    title = props.get("title") if isinstance(props, dict) else None
    if isinstance(title, str) and title.strip():
        return resolve_template_tokens(title, metadata)
    return fallback


def _load_location_page(region: str, city: str, line1: str) -> tuple[Optional[dict], Optional[dict]]:
    with session_scope() as session:
        location = LocationsRepository(session).get_by_slugs(
            region_slug=region, city_slug=city, line1_slug=line1
        )
        if not location:
            return None, None
        group = PageGroupsRepository(session).get_by_slug(slug=location.page_group_slug)
        return location_record(location), group.published_data if group else None


def _load_city_page(region: str, city: str) -> tuple[list[dict], Optional[dict]]:
    with session_scope() as session:
        locations = LocationsRepository(session).list_by_city_slugs(region_slug=region, city_slug=city)
        if not locations:
            return [], None
        group = PageGroupsRepository(session).get_by_slug(slug=settings.CITY_PAGE_GROUP_SLUG)
        return [location_record(location) for location in locations], group.published_data if group else None


def _load_page(path: str) -> Optional[dict]:
    with session_scope() as session:
        page = PagesRepository(session).get_by_path(path=path)
        return page.published_data if page else None


@router.get("/locations/{region}/{city}/{line1}")
async def get_location_page(
    region: str,
    city: str,
    line1: str,
    store: ContentStore = Depends(get_content_store),
):
    location, document = await asyncio.to_thread(
        _load_location_page,
        normalize_route_token(region),
        normalize_route_token(city),
        normalize_route_token(line1),
    )
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location page is not published")

    resolved = await resolve_per_location_data(document, location["id"], store=store)
    metadata = {"location": location}
    data = resolve_tokens_in_value(resolved, metadata)
    return {
        "data": data,
        "metadata": metadata,
        "title": _page_title(data, metadata, location["name"]),
    }


@router.get("/cities/{region}/{city}")
async def get_city_page(region: str, city: str):
    locations, document = await asyncio.to_thread(
        _load_city_page, normalize_route_token(region), normalize_route_token(city)
    )
    if not locations:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="City not found")
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="City page is not published")

    first = locations[0]
    address = first.get("address") or {}
    city_meta = {
        "name": address.get("city"),
        "region": address.get("region"),
        "path": city_public_path(region_slug=first["slug"]["region"], city_slug=first["slug"]["city"]),
    }
    metadata = {"city": city_meta, "locations": locations}
    data = resolve_tokens_in_value(document, metadata)
    return {
        "data": data,
        "metadata": metadata,
        "title": _page_title(data, metadata, str(city_meta["name"] or "")),
    }


@router.get("/pages")
async def get_public_page(path: str):
    document = await asyncio.to_thread(_load_page, path)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return {"path": path, "data": document}
