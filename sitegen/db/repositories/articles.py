from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from sitegen.db.models import Article, ArticleProduct, ArticlePromotion, LocationArticle

_ARTICLE_LINK_COLUMNS = (
    LocationArticle.article_id,
    ArticleProduct.article_id,
    ArticlePromotion.article_id,
)


class ArticlesRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> list[Article]:
        stmt = select(Article).order_by(Article.date_posted.desc())
        return list(self.session.scalars(stmt).all())

    def list_by_category(self, *, category: str) -> list[Article]:
        stmt = (
            select(Article)
            .where(Article.category == category)
            .order_by(Article.date_posted.desc())
        )
        return list(self.session.scalars(stmt).all())

    def get(self, *, article_id: UUID) -> Optional[Article]:
        return self.session.get(Article, article_id)

    def get_many(self, *, article_ids: Sequence[UUID]) -> list[Article]:
        if not article_ids:
            return []
        stmt = select(Article).where(Article.id.in_(list(article_ids)))
        return list(self.session.scalars(stmt).all())

    def create(self, *, title: str, **fields: Any) -> Article:
        article = Article(title=title, **fields)
        self.session.add(article)
        self.session.commit()
        self.session.refresh(article)
        return article

    def update(self, *, article_id: UUID, **fields: Any) -> Optional[Article]:
        article = self.get(article_id=article_id)
        if not article:
            return None
        for key, value in fields.items():
            setattr(article, key, value)
        self.session.commit()
        self.session.refresh(article)
        return article

    def delete(self, *, article_id: UUID) -> bool:
        article = self.get(article_id=article_id)
        if not article:
            return False
        for column in _ARTICLE_LINK_COLUMNS:
            self.session.execute(delete(column.class_).where(column == article_id))
        self.session.delete(article)
        self.session.commit()
        return True
