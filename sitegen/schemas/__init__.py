from sitegen.schemas.catalog import (
    ArticleCreateRequest,
    ArticleUpdateRequest,
    ProductCreateRequest,
    ProductUpdateRequest,
    PromotionCreateRequest,
    PromotionUpdateRequest,
    RecordsByIdsRequest,
)
from sitegen.schemas.content_source import ContentSourceDescriptor
from sitegen.schemas.locations import LocationAddress, LocationCreateRequest, SeedLocationsRequest
from sitegen.schemas.pages import (
    ComponentNode,
    PageDocument,
    PageDraftRequest,
    PageGroupDataRequest,
    PagePublishRequest,
)
from sitegen.schemas.relationships import LinkRequest, OverrideGroupPayload, SyncOverridesRequest

__all__ = [
    "ArticleCreateRequest",
    "ArticleUpdateRequest",
    "ComponentNode",
    "ContentSourceDescriptor",
    "LinkRequest",
    "LocationAddress",
    "LocationCreateRequest",
    "OverrideGroupPayload",
    "PageDocument",
    "PageDraftRequest",
    "PageGroupDataRequest",
    "PagePublishRequest",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "PromotionCreateRequest",
    "PromotionUpdateRequest",
    "RecordsByIdsRequest",
    "SeedLocationsRequest",
    "SyncOverridesRequest",
]
