from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from sitegen.db.models import Location
from sitegen.services.public_routing import slugify_segment


class LocationsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_group(self, *, page_group_slug: str) -> list[Location]:
        stmt = (
            select(Location)
            .where(Location.page_group_slug == page_group_slug)
            .order_by(Location.created_at.asc(), Location.name.asc())
        )
        return list(self.session.scalars(stmt).all())

    def has_any_for_group(self, *, page_group_slug: str) -> bool:
        stmt = select(Location.id).where(Location.page_group_slug == page_group_slug).limit(1)
        return self.session.execute(stmt).first() is not None

    def get(self, *, location_id: UUID) -> Optional[Location]:
        return self.session.get(Location, location_id)

    def get_by_slugs(self, *, region_slug: str, city_slug: str, line1_slug: str) -> Optional[Location]:
        stmt = select(Location).where(
            Location.slug_region == region_slug,
            Location.slug_city == city_slug,
            Location.slug_line1 == line1_slug,
        )
        return self.session.scalars(stmt).first()

    def list_by_city_slugs(self, *, region_slug: str, city_slug: str) -> list[Location]:
        stmt = (
            select(Location)
            .where(Location.slug_region == region_slug, Location.slug_city == city_slug)
            .order_by(Location.name.asc())
        )
        return list(self.session.scalars(stmt).all())

    def create(
        self,
        *,
        page_group_slug: str,
        name: str,
        address: dict[str, Any],
        commit: bool = True,
    ) -> Location:
        slugs = {
            key: slugify_segment(str(address.get(key) or "")) for key in ("region", "city", "line1")
        }
        missing = [key for key, value in slugs.items() if not value]
        if missing:
            raise ValueError(f"Location address is missing a usable value for: {', '.join(missing)}.")
        location = Location(
            page_group_slug=page_group_slug,
            name=name,
            address=dict(address),
            slug_region=slugs["region"],
            slug_city=slugs["city"],
            slug_line1=slugs["line1"],
        )
        self.session.add(location)
        if commit:
            self.session.commit()
            self.session.refresh(location)
        return location
