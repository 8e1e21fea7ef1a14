from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import Any, Optional, Protocol, TypeVar

from sqlalchemy.orm import Session

from sitegen.db.base import session_scope
from sitegen.db.repositories.articles import ArticlesRepository
from sitegen.db.repositories.products import ProductsRepository
from sitegen.db.repositories.promotions import PromotionsRepository
from sitegen.db.repositories.relationships import RELATIONSHIPS, RelationshipsRepository
from sitegen.services.identifiers import coerce_uuid
from sitegen.services.records import article_record, product_record, promotion_record

T = TypeVar("T")

Record = dict[str, Any]


class ContentStore(Protocol):
    """Read side of the catalog and the location junction tables, as plain records."""

    async def products_by_ids(self, ids: Sequence[str]) -> list[Record]: ...

    async def products_for_location(self, location_id: str) -> list[Record]: ...

    async def promotion_by_id(self, promotion_id: str) -> Optional[Record]: ...

    async def promotions_for_location(self, location_id: str) -> list[Record]: ...

    async def articles_by_ids(self, ids: Sequence[str]) -> list[Record]: ...

    async def articles_for_location(self, location_id: str) -> list[Record]: ...


class SqlContentStore:
    """
    ContentStore backed by the SQLAlchemy models.

    Every read runs on a worker thread with a session of its own, so concurrent
    resolutions never share a Session.
    """

    def __init__(
        self, session_factory: Callable[[], AbstractContextManager[Session]] = session_scope
    ) -> None:
        self._session_factory = session_factory

    async def _read(self, fn: Callable[[Session], T]) -> T:
        return await asyncio.to_thread(self._in_session, fn)

    def _in_session(self, fn: Callable[[Session], T]) -> T:
        with self._session_factory() as session:
            return fn(session)

    @staticmethod
    def _uuids(ids: Sequence[str]) -> list:
        return [uuid for uuid in (coerce_uuid(value) for value in ids) if uuid is not None]

    def _linked_records(self, session: Session, relationship: str, location_id: str, serializer) -> list[Record]:
        location_uuid = coerce_uuid(location_id)
        if location_uuid is None:
            return []
        repo = RelationshipsRepository(session, RELATIONSHIPS[relationship])
        return [
            {**serializer(record), "linkId": link.id}
            for link, record in repo.items_for_left(left_id=location_uuid)
        ]

    async def products_by_ids(self, ids: Sequence[str]) -> list[Record]:
        product_ids = self._uuids(ids)
        if not product_ids:
            return []
        return await self._read(
            lambda session: [
                product_record(product)
                for product in ProductsRepository(session).get_many(product_ids=product_ids)
            ]
        )

    async def products_for_location(self, location_id: str) -> list[Record]:
        return await self._read(
            lambda session: self._linked_records(session, "location-products", location_id, product_record)
        )

    async def promotion_by_id(self, promotion_id: str) -> Optional[Record]:
        promotion_uuid = coerce_uuid(promotion_id)
        if promotion_uuid is None:
            return None

        def _get(session: Session) -> Optional[Record]:
            promotion = PromotionsRepository(session).get(promotion_id=promotion_uuid)
            return promotion_record(promotion) if promotion else None

        return await self._read(_get)

    async def promotions_for_location(self, location_id: str) -> list[Record]:
        return await self._read(
            lambda session: self._linked_records(
                session, "location-promotions", location_id, promotion_record
            )
        )

    async def articles_by_ids(self, ids: Sequence[str]) -> list[Record]:
        article_ids = self._uuids(ids)
        if not article_ids:
            return []
        return await self._read(
            lambda session: [
                article_record(article)
                for article in ArticlesRepository(session).get_many(article_ids=article_ids)
            ]
        )

    async def articles_for_location(self, location_id: str) -> list[Record]:
        return await self._read(
            lambda session: self._linked_records(session, "location-articles", location_id, article_record)
        )


def get_content_store() -> ContentStore:
    return SqlContentStore()
