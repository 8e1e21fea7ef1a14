from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.config import settings
from sitegen.db.deps import get_session
from sitegen.db.enums import PageDataModeEnum
from sitegen.db.repositories.locations import LocationsRepository
from sitegen.db.repositories.pages import PageGroupsRepository, select_page_data
from sitegen.schemas.pages import PageGroupDataRequest
from sitegen.services.public_routing import city_paths_for_locations, location_public_path

router = APIRouter(prefix="/page-groups", tags=["page-groups"])
logger = logging.getLogger(__name__)


def _revalidate_paths(session: Session, slug: str) -> list[str]:
    """Public paths rendered from the group's document."""
    repo = LocationsRepository(session)
    if slug == settings.CITY_PAGE_GROUP_SLUG:
        locations = repo.list_for_group(page_group_slug=settings.LOCATION_PAGE_GROUP_SLUG)
        return city_paths_for_locations(locations)
    return [location_public_path(location) for location in repo.list_for_group(page_group_slug=slug)]


@router.get("/{slug}")
def get_page_group(
    slug: str,
    mode: PageDataModeEnum = PageDataModeEnum.published,
    session: Session = Depends(get_session),
):
    group = PageGroupsRepository(session).get_by_slug(slug=slug)
    data = select_page_data(group, mode)
    if group is None or data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page group not found")
    return {"slug": group.slug, "data": data, "isPublished": group.published_data is not None}


@router.put("/{slug}/draft")
def save_page_group_draft(
    slug: str,
    payload: PageGroupDataRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    group = PageGroupsRepository(session).save_draft(slug=slug, data=payload.data.model_dump(mode="json"))
    return {"slug": group.slug, "data": group.draft_data}


@router.post("/{slug}/publish")
def publish_page_group(
    slug: str,
    payload: PageGroupDataRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    group = PageGroupsRepository(session).publish(slug=slug, data=payload.data.model_dump(mode="json"))
    paths = _revalidate_paths(session, group.slug)
    logger.info("Published page group", extra={"slug": group.slug, "paths": len(paths)})
    return {"slug": group.slug, "revalidatePaths": paths}
