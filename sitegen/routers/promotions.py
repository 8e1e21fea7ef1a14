from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from sitegen.auth.dependencies import EditorContext, require_editor
from sitegen.db.deps import get_session
from sitegen.db.repositories.promotions import PromotionsRepository
from sitegen.schemas.catalog import PromotionCreateRequest, PromotionUpdateRequest, RecordsByIdsRequest
from sitegen.services.identifiers import coerce_uuid, require_uuid
from sitegen.services.records import promotion_record

router = APIRouter(prefix="/promotions", tags=["promotions"])


@router.get("")
def list_promotions(session: Session = Depends(get_session)):
    return [promotion_record(promotion) for promotion in PromotionsRepository(session).list()]


@router.post("/by-ids")
def get_promotions_by_ids(
    payload: RecordsByIdsRequest,
    session: Session = Depends(get_session),
):
    ids = [uuid for uuid in (coerce_uuid(value) for value in payload.ids) if uuid is not None]
    found = {
        promotion.id: promotion
        for promotion in PromotionsRepository(session).get_many(promotion_ids=ids)
    }
    return [promotion_record(found[promotion_id]) for promotion_id in ids if promotion_id in found]


@router.get("/{promotion_id}")
def get_promotion(
    promotion_id: str,
    session: Session = Depends(get_session),
):
    promotion = PromotionsRepository(session).get(
        promotion_id=require_uuid(promotion_id, label="promotion_id")
    )
    if not promotion:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Promotion not found")
    return promotion_record(promotion)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_promotion(
    payload: PromotionCreateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    promotion = PromotionsRepository(session).create(
        name=payload.name,
        description=payload.description,
        image=payload.image,
    )
    return promotion_record(promotion)


@router.patch("/{promotion_id}")
def update_promotion(
    promotion_id: str,
    payload: PromotionUpdateRequest,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    fields = {key: getattr(payload, key) for key in payload.model_fields_set}
    updated = PromotionsRepository(session).update(
        promotion_id=require_uuid(promotion_id, label="promotion_id"), **fields
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Promotion not found")
    return promotion_record(updated)


@router.delete("/{promotion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_promotion(
    promotion_id: str,
    auth: EditorContext = Depends(require_editor),
    session: Session = Depends(get_session),
):
    deleted = PromotionsRepository(session).delete(
        promotion_id=require_uuid(promotion_id, label="promotion_id")
    )
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Promotion not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
