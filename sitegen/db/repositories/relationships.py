from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sitegen.db.base import Base
from sitegen.db.models import (
    Article,
    ArticleProduct,
    ArticlePromotion,
    Location,
    LocationArticle,
    LocationProduct,
    LocationPromotion,
    Product,
    ProductPromotion,
    Promotion,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationshipSpec:
    """One junction table: which columns hold each side and which tables they point at."""

    name: str
    link_model: type[Base]
    left_column: str
    right_column: str
    left_model: type[Base]
    right_model: type[Base]
    # Only location relationships are replaced wholesale by the editor.
    supports_sync: bool = False


@dataclass(frozen=True)
class OverrideGroup:
    location_ids: Sequence[UUID] = field(default_factory=tuple)
    item_ids: Sequence[UUID] = field(default_factory=tuple)


RELATIONSHIPS: dict[str, RelationshipSpec] = {
    spec.name: spec
    for spec in (
        RelationshipSpec(
            name="location-products",
            link_model=LocationProduct,
            left_column="location_id",
            right_column="product_id",
            left_model=Location,
            right_model=Product,
            supports_sync=True,
        ),
        RelationshipSpec(
            name="location-promotions",
            link_model=LocationPromotion,
            left_column="location_id",
            right_column="promotion_id",
            left_model=Location,
            right_model=Promotion,
            supports_sync=True,
        ),
        RelationshipSpec(
            name="location-articles",
            link_model=LocationArticle,
            left_column="location_id",
            right_column="article_id",
            left_model=Location,
            right_model=Article,
            supports_sync=True,
        ),
        RelationshipSpec(
            name="article-products",
            link_model=ArticleProduct,
            left_column="article_id",
            right_column="product_id",
            left_model=Article,
            right_model=Product,
        ),
        RelationshipSpec(
            name="article-promotions",
            link_model=ArticlePromotion,
            left_column="article_id",
            right_column="promotion_id",
            left_model=Article,
            right_model=Promotion,
        ),
        RelationshipSpec(
            name="product-promotions",
            link_model=ProductPromotion,
            left_column="product_id",
            right_column="promotion_id",
            left_model=Product,
            right_model=Promotion,
        ),
    )
}


def get_relationship_spec(name: str) -> Optional[RelationshipSpec]:
    return RELATIONSHIPS.get(name)


class RelationshipsRepository:
    def __init__(self, session: Session, spec: RelationshipSpec) -> None:
        self.session = session
        self.spec = spec

    @property
    def _left(self):
        return getattr(self.spec.link_model, self.spec.left_column)

    @property
    def _right(self):
        return getattr(self.spec.link_model, self.spec.right_column)

    def get_link(self, *, left_id: UUID, right_id: UUID) -> Optional[Any]:
        stmt = select(self.spec.link_model).where(self._left == left_id, self._right == right_id)
        return self.session.scalars(stmt).first()

    def link(self, *, left_id: UUID, right_id: UUID) -> int:
        """Create the link unless the pair already exists; either way return its id."""
        existing = self.get_link(left_id=left_id, right_id=right_id)
        if existing:
            return existing.id
        link = self.spec.link_model(
            **{self.spec.left_column: left_id, self.spec.right_column: right_id}
        )
        self.session.add(link)
        try:
            self.session.commit()
        except IntegrityError:
            # Another request linked the same pair between the lookup and the insert.
            self.session.rollback()
            existing = self.get_link(left_id=left_id, right_id=right_id)
            if existing is None:
                raise
            return existing.id
        self.session.refresh(link)
        return link.id

    def unlink(self, *, left_id: UUID, right_id: UUID) -> bool:
        link = self.get_link(left_id=left_id, right_id=right_id)
        if not link:
            return False
        self.session.delete(link)
        self.session.commit()
        return True

    def remove_link_by_id(self, *, link_id: int) -> bool:
        link = self.session.get(self.spec.link_model, link_id)
        if not link:
            return False
        self.session.delete(link)
        self.session.commit()
        return True

    def sync_overrides(self, overrides: Iterable[OverrideGroup]) -> int:
        """
        Replace every link of each mentioned location with the cross product of its groups.

        Callers pass the complete desired state: a location named in any group loses all
        of its existing links in this relationship before the new pairs are inserted. The
        wipe and the inserts are committed together.
        """

        if not self.spec.supports_sync:
            raise ValueError(f"Relationship '{self.spec.name}' does not support override sync.")

        groups = list(overrides)
        location_ids: list[UUID] = []
        for group in groups:
            for location_id in group.location_ids:
                if location_id not in location_ids:
                    location_ids.append(location_id)

        seen_pairs: set[tuple[UUID, UUID]] = set()
        try:
            if location_ids:
                self.session.execute(
                    delete(self.spec.link_model).where(self._left.in_(location_ids))
                )

            for group in groups:
                for location_id in group.location_ids:
                    for item_id in group.item_ids:
                        pair = (location_id, item_id)
                        if pair in seen_pairs:
                            continue
                        seen_pairs.add(pair)
                        self.session.add(
                            self.spec.link_model(
                                **{self.spec.left_column: location_id, self.spec.right_column: item_id}
                            )
                        )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(
            "Synced relationship overrides",
            extra={
                "relationship": self.spec.name,
                "locations": len(location_ids),
                "links_created": len(seen_pairs),
            },
        )
        return len(seen_pairs)

    def _linked(self, *, side: str, entity_id: UUID) -> list[tuple[Any, Any]]:
        if side == "left":
            filter_column, target_column, target_model = self._left, self._right, self.spec.right_model
        else:
            filter_column, target_column, target_model = self._right, self._left, self.spec.left_model

        stmt = (
            select(self.spec.link_model, target_model)
            .outerjoin(target_model, target_model.id == target_column)
            .where(filter_column == entity_id)
            .order_by(self.spec.link_model.id.asc())
        )
        pairs: list[tuple[Any, Any]] = []
        for link, record in self.session.execute(stmt).all():
            if record is None:
                # Dangling link to a deleted record.
                logger.debug(
                    "Skipping dangling link",
                    extra={"relationship": self.spec.name, "link_id": link.id},
                )
                continue
            pairs.append((link, record))
        return pairs

    def items_for_left(self, *, left_id: UUID) -> list[tuple[Any, Any]]:
        """Records on the right side linked to ``left_id``, in link insertion order."""
        return self._linked(side="left", entity_id=left_id)

    def items_for_right(self, *, right_id: UUID) -> list[tuple[Any, Any]]:
        """Records on the left side linked to ``right_id``, in link insertion order."""
        return self._linked(side="right", entity_id=right_id)
