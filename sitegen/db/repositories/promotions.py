from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from sitegen.db.models import ArticlePromotion, LocationPromotion, ProductPromotion, Promotion

# Junction columns that reference a promotion; cleared before the promotion row goes away.
_PROMOTION_LINK_COLUMNS = (
    LocationPromotion.promotion_id,
    ArticlePromotion.promotion_id,
    ProductPromotion.promotion_id,
)


class PromotionsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> list[Promotion]:
        stmt = select(Promotion).order_by(Promotion.created_at.desc())
        return list(self.session.scalars(stmt).all())

    def get(self, *, promotion_id: UUID) -> Optional[Promotion]:
        return self.session.get(Promotion, promotion_id)

    def get_many(self, *, promotion_ids: Sequence[UUID]) -> list[Promotion]:
        if not promotion_ids:
            return []
        stmt = select(Promotion).where(Promotion.id.in_(list(promotion_ids)))
        return list(self.session.scalars(stmt).all())

    def create(self, **fields: Any) -> Promotion:
        promotion = Promotion(**fields)
        self.session.add(promotion)
        self.session.commit()
        self.session.refresh(promotion)
        return promotion

    def update(self, *, promotion_id: UUID, **fields: Any) -> Optional[Promotion]:
        promotion = self.get(promotion_id=promotion_id)
        if not promotion:
            return None
        for key, value in fields.items():
            setattr(promotion, key, value)
        self.session.commit()
        self.session.refresh(promotion)
        return promotion

    def delete(self, *, promotion_id: UUID) -> bool:
        promotion = self.get(promotion_id=promotion_id)
        if not promotion:
            return False
        for column in _PROMOTION_LINK_COLUMNS:
            self.session.execute(delete(column.class_).where(column == promotion_id))
        self.session.delete(promotion)
        self.session.commit()
        return True
