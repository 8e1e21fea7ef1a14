from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from sitegen.db.models import ArticleProduct, LocationProduct, Product, ProductPromotion

# Junction columns that reference a product; cleared before the product row goes away.
_PRODUCT_LINK_COLUMNS = (
    LocationProduct.product_id,
    ArticleProduct.product_id,
    ProductPromotion.product_id,
)


class ProductsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> list[Product]:
        stmt = select(Product).order_by(Product.created_at.desc())
        return list(self.session.scalars(stmt).all())

    def list_by_category(self, *, category: str) -> list[Product]:
        stmt = select(Product).where(Product.category == category).order_by(Product.name.asc())
        return list(self.session.scalars(stmt).all())

    def get(self, *, product_id: UUID) -> Optional[Product]:
        return self.session.get(Product, product_id)

    def get_many(self, *, product_ids: Sequence[UUID]) -> list[Product]:
        if not product_ids:
            return []
        stmt = select(Product).where(Product.id.in_(list(product_ids)))
        return list(self.session.scalars(stmt).all())

    def create(self, *, name: str, **fields: Any) -> Product:
        product = Product(name=name, **fields)
        self.session.add(product)
        self.session.commit()
        self.session.refresh(product)
        return product

    def update(self, *, product_id: UUID, **fields: Any) -> Optional[Product]:
        product = self.get(product_id=product_id)
        if not product:
            return None
        for key, value in fields.items():
            setattr(product, key, value)
        self.session.commit()
        self.session.refresh(product)
        return product

    def delete(self, *, product_id: UUID) -> bool:
        product = self.get(product_id=product_id)
        if not product:
            return False
        for column in _PRODUCT_LINK_COLUMNS:
            self.session.execute(delete(column.class_).where(column == product_id))
        self.session.delete(product)
        self.session.commit()
        return True
