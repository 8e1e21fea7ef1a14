from __future__ import annotations

from typing import Any, Optional

from sitegen.db.models import Article, Location, Product, Promotion


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def product_record(product: Product) -> dict[str, Any]:
    return {
        "id": str(product.id),
        "name": product.name,
        "category": product.category,
        "price": product.price,
        "description": product.description,
        "image": product.image,
        "createdAt": _iso(product.created_at),
        "updatedAt": _iso(product.updated_at),
    }


def promotion_record(promotion: Promotion) -> dict[str, Any]:
    return {
        "id": str(promotion.id),
        "name": promotion.name,
        "description": promotion.description,
        "image": promotion.image,
        "createdAt": _iso(promotion.created_at),
        "updatedAt": _iso(promotion.updated_at),
    }


def article_record(article: Article) -> dict[str, Any]:
    return {
        "id": str(article.id),
        "title": article.title,
        "category": article.category,
        "datePosted": _iso(article.date_posted),
        "content": article.content,
        "contentSummary": article.content_summary,
        "image": article.image,
        "createdAt": _iso(article.created_at),
        "updatedAt": _iso(article.updated_at),
    }


def location_record(location: Location) -> dict[str, Any]:
    return {
        "id": str(location.id),
        "pageGroupSlug": location.page_group_slug,
        "name": location.name,
        "address": dict(location.address or {}),
        "slug": {
            "region": location.slug_region,
            "city": location.slug_city,
            "line1": location.slug_line1,
        },
        "createdAt": _iso(location.created_at),
        "updatedAt": _iso(location.updated_at),
    }


_RECORD_SERIALIZERS = {
    Product: product_record,
    Promotion: promotion_record,
    Article: article_record,
    Location: location_record,
}


def serialize_record(record: Any) -> dict[str, Any]:
    serializer = _RECORD_SERIALIZERS.get(type(record))
    if serializer is None:
        raise TypeError(f"No record serializer for {type(record).__name__}")
    return serializer(record)
