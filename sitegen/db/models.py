from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy import DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from sitegen.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Location(Base):
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("slug_region", "slug_city", "slug_line1", name="uq_locations_slug"),
        sa.Index("idx_locations_page_group_slug", "page_group_slug"),
        sa.Index("idx_locations_city", "slug_region", "slug_city"),
    )

    id: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    page_group_slug: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # {"region", "city", "line1", "line2"?, "postalCode"?}
    address: Mapped[dict[str, Any]] = mapped_column(sa.JSON, nullable=False, default=dict)
    slug_region: Mapped[str] = mapped_column(Text, nullable=False)
    slug_city: Mapped[str] = mapped_column(Text, nullable=False)
    slug_line1: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        sa.Index("idx_products_category", "category"),
        sa.Index("idx_products_name", "name"),
    )

    id: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class Promotion(Base):
    __tablename__ = "promotions"

    id: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class Article(Base):
    __tablename__ = "articles"
    __table_args__ = (
        sa.Index("idx_articles_category", "category"),
        sa.Index("idx_articles_date_posted", "date_posted"),
    )

    id: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date_posted: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class Page(Base):
    __tablename__ = "pages"

    id: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    path: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    draft_data: Mapped[Optional[dict[str, Any]]] = mapped_column(sa.JSON, nullable=True)
    published_data: Mapped[Optional[dict[str, Any]]] = mapped_column(sa.JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class PageGroup(Base):
    __tablename__ = "page_groups"

    id: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    draft_data: Mapped[Optional[dict[str, Any]]] = mapped_column(sa.JSON, nullable=True)
    published_data: Mapped[Optional[dict[str, Any]]] = mapped_column(sa.JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


# Junction tables. Integer ids keep insertion order, which is the order a location's
# links are returned in.


class LocationProduct(Base):
    __tablename__ = "location_products"
    __table_args__ = (
        UniqueConstraint("location_id", "product_id", name="uq_location_products_pair"),
        sa.Index("idx_location_products_location", "location_id"),
        sa.Index("idx_location_products_product", "product_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[UUID] = mapped_column(ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    product_id: Mapped[UUID] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class LocationPromotion(Base):
    __tablename__ = "location_promotions"
    __table_args__ = (
        UniqueConstraint("location_id", "promotion_id", name="uq_location_promotions_pair"),
        sa.Index("idx_location_promotions_location", "location_id"),
        sa.Index("idx_location_promotions_promotion", "promotion_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[UUID] = mapped_column(ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    promotion_id: Mapped[UUID] = mapped_column(
        ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class LocationArticle(Base):
    __tablename__ = "location_articles"
    __table_args__ = (
        UniqueConstraint("location_id", "article_id", name="uq_location_articles_pair"),
        sa.Index("idx_location_articles_location", "location_id"),
        sa.Index("idx_location_articles_article", "article_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[UUID] = mapped_column(ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    article_id: Mapped[UUID] = mapped_column(ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ArticleProduct(Base):
    __tablename__ = "article_products"
    __table_args__ = (
        UniqueConstraint("article_id", "product_id", name="uq_article_products_pair"),
        sa.Index("idx_article_products_article", "article_id"),
        sa.Index("idx_article_products_product", "product_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[UUID] = mapped_column(ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    product_id: Mapped[UUID] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ArticlePromotion(Base):
    __tablename__ = "article_promotions"
    __table_args__ = (
        UniqueConstraint("article_id", "promotion_id", name="uq_article_promotions_pair"),
        sa.Index("idx_article_promotions_article", "article_id"),
        sa.Index("idx_article_promotions_promotion", "promotion_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    article_id: Mapped[UUID] = mapped_column(ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    promotion_id: Mapped[UUID] = mapped_column(
        ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class ProductPromotion(Base):
    __tablename__ = "product_promotions"
    __table_args__ = (
        UniqueConstraint("product_id", "promotion_id", name="uq_product_promotions_pair"),
        sa.Index("idx_product_promotions_product", "product_id"),
        sa.Index("idx_product_promotions_promotion", "promotion_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[UUID] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    promotion_id: Mapped[UUID] = mapped_column(
        ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
