from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from sitegen.config import settings
from sitegen.db.repositories.locations import LocationsRepository
from sitegen.db.repositories.pages import PageGroupsRepository

logger = logging.getLogger(__name__)

SAMPLE_LOCATIONS: list[dict] = [
    {"name": "Galaxy Grill Downtown", "address": {"region": "CA", "city": "San Francisco", "line1": "123 Market St"}},
    {"name": "Galaxy Grill Mission", "address": {"region": "CA", "city": "San Francisco", "line1": "482 Valencia St"}},
    {"name": "Galaxy Grill Oakland", "address": {"region": "CA", "city": "Oakland", "line1": "780 Broadway"}},
    {"name": "Galaxy Grill San Jose", "address": {"region": "CA", "city": "San Jose", "line1": "220 Santana Row"}},
    {"name": "Galaxy Grill Sacramento", "address": {"region": "CA", "city": "Sacramento", "line1": "15 Capitol Mall"}},
    {"name": "Galaxy Grill Seattle", "address": {"region": "WA", "city": "Seattle", "line1": "611 Pine St"}},
    {"name": "Galaxy Grill Bellevue", "address": {"region": "WA", "city": "Bellevue", "line1": "300 Lincoln Sq"}},
    {"name": "Galaxy Grill Portland", "address": {"region": "OR", "city": "Portland", "line1": "1001 NW Couch St"}},
    {"name": "Galaxy Grill Denver", "address": {"region": "CO", "city": "Denver", "line1": "1550 Wewatta St"}},
    {"name": "Galaxy Grill Austin", "address": {"region": "TX", "city": "Austin", "line1": "500 W 2nd St"}},
]


def seed_sample_locations(*, session: Session, page_group_slug: str | None = None) -> dict:
    """Insert the sample locations once per page group and make sure both page groups exist."""
    slug = page_group_slug or settings.LOCATION_PAGE_GROUP_SLUG
    locations_repo = LocationsRepository(session)
    if locations_repo.has_any_for_group(page_group_slug=slug):
        return {"inserted": 0, "skipped": True}

    groups_repo = PageGroupsRepository(session)
    groups_repo.ensure(slug=slug, commit=False)
    if settings.CITY_PAGE_GROUP_SLUG != slug:
        groups_repo.ensure(slug=settings.CITY_PAGE_GROUP_SLUG, commit=False)

    try:
        for sample in SAMPLE_LOCATIONS:
            locations_repo.create(
                page_group_slug=slug,
                name=sample["name"],
                address=sample["address"],
                commit=False,
            )
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Seeded sample locations", extra={"page_group_slug": slug, "inserted": len(SAMPLE_LOCATIONS)})
    return {"inserted": len(SAMPLE_LOCATIONS), "skipped": False}
