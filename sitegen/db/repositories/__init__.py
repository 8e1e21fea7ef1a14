from sitegen.db.repositories.articles import ArticlesRepository
from sitegen.db.repositories.locations import LocationsRepository
from sitegen.db.repositories.pages import PageGroupsRepository, PagesRepository
from sitegen.db.repositories.products import ProductsRepository
from sitegen.db.repositories.promotions import PromotionsRepository
from sitegen.db.repositories.relationships import (
    RELATIONSHIPS,
    OverrideGroup,
    RelationshipSpec,
    RelationshipsRepository,
    get_relationship_spec,
)

__all__ = [
    "ArticlesRepository",
    "LocationsRepository",
    "PageGroupsRepository",
    "PagesRepository",
    "ProductsRepository",
    "PromotionsRepository",
    "RELATIONSHIPS",
    "OverrideGroup",
    "RelationshipSpec",
    "RelationshipsRepository",
    "get_relationship_spec",
]
