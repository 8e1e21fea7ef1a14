"""
Per-location content resolution for published page documents.

The page editor binds some sections (products, promotions, articles) to catalog
content through ``props.contentSource``. The renderer only sees plain props, so
before a location page is rendered every bound node gets its content fetched and
written into the props it renders from.

For ``perLocation`` bindings the location junction tables are the only source of
truth. Selections cached inside the descriptor are editor state and can be stale.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from copy import deepcopy
from typing import Any, Optional

from pydantic import ValidationError

from sitegen.config import settings
from sitegen.db.enums import DynamicModeEnum
from sitegen.schemas.content_source import ContentSourceDescriptor
from sitegen.services.content_store import ContentStore, Record
from sitegen.services.identifiers import filter_valid_ids, is_valid_id

logger = logging.getLogger(__name__)

Props = dict[str, Any]
PropsResolver = Callable[[Props, str, ContentStore], Awaitable[Props]]

CONTENT_SOURCE_KEY = "contentSource"


def parse_content_source(props: Mapping[str, Any]) -> Optional[ContentSourceDescriptor]:
    raw = props.get(CONTENT_SOURCE_KEY)
    if not isinstance(raw, dict):
        return None
    try:
        return ContentSourceDescriptor.model_validate(raw)
    except ValidationError:
        logger.debug("Ignoring malformed contentSource descriptor", extra={"descriptor": raw})
        return None


def order_records_by_ids(records: Sequence[Record], ids: Sequence[str]) -> list[Record]:
    """Put records in ``ids`` order; unknown ids drop out, unrequested records go last."""
    by_id = {str(record.get("id", "")).lower(): record for record in records}
    wanted = [value.lower() for value in ids]
    ordered = [by_id[value] for value in wanted if value in by_id]
    ordered.extend(record for key, record in by_id.items() if key not in wanted)
    return ordered


def format_price(price: Any, prefix: Optional[str] = None) -> Optional[str]:
    if price is None:
        return None
    if prefix is None:
        prefix = settings.PRODUCT_PRICE_CURRENCY_PREFIX
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    return f"{prefix}{price}"


def _text(*candidates: Any) -> str:
    for candidate in candidates:
        if candidate is not None:
            return str(candidate)
    return ""


def map_products(records: Sequence[Record]) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for record in records:
        item = {
            "title": _text(record.get("name"), "Product"),
            "category": _text(record.get("category")),
            "description": _text(record.get("description")),
            "imageUrl": _text(record.get("image")),
            "link": "#",
        }
        price = format_price(record.get("price"))
        if price is not None:
            item["price"] = price
        items.append(item)
    return items


def map_articles(records: Sequence[Record]) -> list[dict[str, Any]]:
    return [
        {
            "title": _text(record.get("title"), "Article"),
            "category": _text(record.get("category")),
            "date": _text(record.get("datePosted"))[:10],
            "description": _text(record.get("contentSummary")),
            "imageUrl": _text(record.get("image")),
            "link": "#",
        }
        for record in records
    ]


async def _resolve_list(
    props: Props,
    location_id: str,
    *,
    by_ids: Callable[[Sequence[str]], Awaitable[list[Record]]],
    for_location: Callable[[str], Awaitable[list[Record]]],
    mapper: Callable[[Sequence[Record]], list[dict[str, Any]]],
    target_key: str,
) -> Props:
    source = parse_content_source(props)
    if source is None or not source.is_dynamic:
        return props

    if source.mode == DynamicModeEnum.synced:
        ids = filter_valid_ids(source.selectedIds)
        if not ids:
            return props
        records = await by_ids(ids)
        if not records:
            return props
        return {**props, target_key: mapper(order_records_by_ids(records, ids))}

    # Junction table order is insertion order; there is no separate ordering step.
    records = await for_location(location_id)
    if not records:
        return props
    return {**props, target_key: mapper(records)}


async def resolve_products(props: Props, location_id: str, store: ContentStore) -> Props:
    return await _resolve_list(
        props,
        location_id,
        by_ids=store.products_by_ids,
        for_location=store.products_for_location,
        mapper=map_products,
        target_key="products",
    )


async def resolve_insights(props: Props, location_id: str, store: ContentStore) -> Props:
    return await _resolve_list(
        props,
        location_id,
        by_ids=store.articles_by_ids,
        for_location=store.articles_for_location,
        mapper=map_articles,
        target_key="insights",
    )


async def resolve_promo(props: Props, location_id: str, store: ContentStore) -> Props:
    source = parse_content_source(props)
    if source is None or not source.is_dynamic:
        return props

    promotion: Optional[Record]
    if source.mode == DynamicModeEnum.synced:
        if not is_valid_id(source.selectedId):
            return props
        promotion = await store.promotion_by_id(source.selectedId)
    else:
        promotions = await store.promotions_for_location(location_id)
        promotion = promotions[0] if promotions else None

    if not promotion:
        return props

    # Only the promotion's own fields are replaced; CTA and styling stay as authored.
    return {
        **props,
        "title": _text(promotion.get("name"), props.get("title")),
        "description": _text(promotion.get("description"), props.get("description")),
        "imageUrl": _text(promotion.get("image"), props.get("imageUrl")),
    }


RESOLVERS: dict[str, PropsResolver] = {
    "ProductsSection": resolve_products,
    "PromoSection": resolve_promo,
    "InsightsSection": resolve_insights,
}


async def resolve_component(
    node: Any,
    location_id: str,
    *,
    store: ContentStore,
    resolvers: Mapping[str, PropsResolver] = RESOLVERS,
) -> Any:
    if not isinstance(node, dict):
        return node
    resolver = resolvers.get(node.get("type"))
    if resolver is None:
        return node
    props = node.get("props")
    if not isinstance(props, dict):
        return node

    try:
        resolved = await resolver(props, location_id, store)
    except Exception:
        # One failing section keeps its authored props; the rest of the page still resolves.
        logger.warning(
            "Content resolution failed; keeping authored props",
            extra={"component_type": node.get("type"), "location_id": location_id},
            exc_info=True,
        )
        return node

    if resolved is props:
        return node
    return {**node, "props": {**props, **resolved}}


async def resolve_per_location_data(
    document: Mapping[str, Any],
    location_id: str,
    *,
    store: ContentStore,
    resolvers: Mapping[str, PropsResolver] = RESOLVERS,
) -> dict[str, Any]:
    """
    Return a copy of ``document`` with every bound node resolved for ``location_id``.

    The input document is never mutated. Nodes in the default content list and in
    every named zone are resolved concurrently; order and unbound nodes are kept.
    """

    if not isinstance(document, Mapping):
        raise TypeError("Page document must be a mapping.")

    resolved: dict[str, Any] = deepcopy(dict(document))

    node_lists: list[list[Any]] = []
    if isinstance(resolved.get("content"), list):
        node_lists.append(resolved["content"])
    zones = resolved.get("zones")
    if isinstance(zones, dict):
        node_lists.extend(nodes for nodes in zones.values() if isinstance(nodes, list))

    results = await asyncio.gather(
        *(
            resolve_component(node, location_id, store=store, resolvers=resolvers)
            for nodes in node_lists
            for node in nodes
        )
    )

    offset = 0
    for nodes in node_lists:
        count = len(nodes)
        nodes[:] = results[offset : offset + count]
        offset += count

    return resolved
