from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.db.deps import get_session
from sitegen.db.repositories.relationships import (
    OverrideGroup,
    RelationshipSpec,
    RelationshipsRepository,
    get_relationship_spec,
)
from sitegen.schemas.relationships import LinkRequest, SyncOverridesRequest
from sitegen.services.identifiers import require_uuid
from sitegen.services.records import serialize_record

router = APIRouter(prefix="/relationships", tags=["relationships"])


def _spec_or_404(relationship: str) -> RelationshipSpec:
    spec = get_relationship_spec(relationship)
    if spec is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Relationship not found")
    return spec


def _missing_ids(session: Session, model, ids: set) -> set:
    if not ids:
        return set()
    found = set(session.scalars(select(model.id).where(model.id.in_(list(ids)))).all())
    return ids - found


@router.post("/{relationship}/link")
def link_items(
    relationship: str,
    payload: LinkRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    spec = _spec_or_404(relationship)
    left_id = require_uuid(payload.leftId, label="leftId")
    right_id = require_uuid(payload.rightId, label="rightId")
    if session.get(spec.left_model, left_id) is None or session.get(spec.right_model, right_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Linked record not found")

    link_id = RelationshipsRepository(session, spec).link(left_id=left_id, right_id=right_id)
    return {"linkId": link_id}


@router.post("/{relationship}/unlink")
def unlink_items(
    relationship: str,
    payload: LinkRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    spec = _spec_or_404(relationship)
    removed = RelationshipsRepository(session, spec).unlink(
        left_id=require_uuid(payload.leftId, label="leftId"),
        right_id=require_uuid(payload.rightId, label="rightId"),
    )
    return {"removed": removed}


@router.post("/{relationship}/sync")
def sync_overrides(
    relationship: str,
    payload: SyncOverridesRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    spec = _spec_or_404(relationship)
    if not spec.supports_sync:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Relationship '{relationship}' does not support override sync.",
        )
    groups = [
        OverrideGroup(
            location_ids=[require_uuid(value, label="locationIds") for value in group.locationIds],
            item_ids=[require_uuid(value, label="itemIds") for value in group.itemIds],
        )
        for group in payload.overrides
    ]
    location_ids = {value for group in groups for value in group.location_ids}
    item_ids = {value for group in groups for value in group.item_ids}
    missing = _missing_ids(session, spec.left_model, location_ids) | _missing_ids(
        session, spec.right_model, item_ids
    )
    if missing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Linked record not found")
    created = RelationshipsRepository(session, spec).sync_overrides(groups)
    return {"linksCreated": created}


@router.delete("/{relationship}/links/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_link(
    relationship: str,
    link_id: int,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    spec = _spec_or_404(relationship)
    if not RelationshipsRepository(session, spec).remove_link_by_id(link_id=link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{relationship}/left/{left_id}")
def list_items_for_left(
    relationship: str,
    left_id: str,
    session: Session = Depends(get_session),
):
    spec = _spec_or_404(relationship)
    pairs = RelationshipsRepository(session, spec).items_for_left(left_id=require_uuid(left_id, label="left_id"))
    return [{**serialize_record(record), "linkId": link.id} for link, record in pairs]


@router.get("/{relationship}/right/{right_id}")
def list_items_for_right(
    relationship: str,
    right_id: str,
    session: Session = Depends(get_session),
):
    spec = _spec_or_404(relationship)
    pairs = RelationshipsRepository(session, spec).items_for_right(
        right_id=require_uuid(right_id, label="right_id")
    )
    return [{**serialize_record(record), "linkId": link.id} for link, record in pairs]
