"""Initial schema"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_init_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _create_link_table(name: str, left: tuple[str, str], right: tuple[str, str]) -> None:
    left_column, left_table = left
    right_column, right_table = right
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(left_column, sa.Uuid(), sa.ForeignKey(f"{left_table}.id", ondelete="CASCADE"), nullable=False),
        sa.Column(right_column, sa.Uuid(), sa.ForeignKey(f"{right_table}.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint(left_column, right_column, name=f"uq_{name}_pair"),
    )
    op.create_index(f"idx_{name}_{left_column[:-3]}", name, [left_column])
    op.create_index(f"idx_{name}_{right_column[:-3]}", name, [right_column])


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("page_group_slug", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("address", sa.JSON(), nullable=False),
        sa.Column("slug_region", sa.Text(), nullable=False),
        sa.Column("slug_city", sa.Text(), nullable=False),
        sa.Column("slug_line1", sa.Text(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("slug_region", "slug_city", "slug_line1", name="uq_locations_slug"),
    )
    op.create_index("idx_locations_page_group_slug", "locations", ["page_group_slug"])
    op.create_index("idx_locations_city", "locations", ["slug_region", "slug_city"])

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_products_category", "products", ["category"])
    op.create_index("idx_products_name", "products", ["name"])

    op.create_table(
        "promotions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "articles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("date_posted", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("content_summary", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_articles_category", "articles", ["category"])
    op.create_index("idx_articles_date_posted", "articles", ["date_posted"])

    op.create_table(
        "pages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("path", sa.Text(), nullable=False, unique=True),
        sa.Column("draft_data", sa.JSON(), nullable=True),
        sa.Column("published_data", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "page_groups",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("slug", sa.Text(), nullable=False, unique=True),
        sa.Column("draft_data", sa.JSON(), nullable=True),
        sa.Column("published_data", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    _create_link_table("location_products", ("location_id", "locations"), ("product_id", "products"))
    _create_link_table("location_promotions", ("location_id", "locations"), ("promotion_id", "promotions"))
    _create_link_table("location_articles", ("location_id", "locations"), ("article_id", "articles"))
    _create_link_table("article_products", ("article_id", "articles"), ("product_id", "products"))
    _create_link_table("article_promotions", ("article_id", "articles"), ("promotion_id", "promotions"))
    _create_link_table("product_promotions", ("product_id", "products"), ("promotion_id", "promotions"))


def downgrade() -> None:
    for name in (
        "product_promotions",
        "article_promotions",
        "article_products",
        "location_articles",
        "location_promotions",
        "location_products",
    ):
        op.drop_table(name)
    op.drop_table("page_groups")
    op.drop_table("pages")
    op.drop_table("articles")
    op.drop_table("promotions")
    op.drop_table("products")
    op.drop_table("locations")
