from __future__ import annotations

import re

from sitegen.db.models import Location


_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify_segment(value: str) -> str:
    """Lowercase, hyphen-separated URL segment with no leading or trailing hyphen."""
    text = (value or "").strip().lower().replace("&", "and")
    text = _SLUG_PATTERN.sub("-", text)
    return text.strip("-")


def normalize_route_token(value: str) -> str:
    return slugify_segment(value)


def location_public_path(location: Location) -> str:
    return f"/{location.slug_region}/{location.slug_city}/{location.slug_line1}"


def city_public_path(*, region_slug: str, city_slug: str) -> str:
    return f"/{region_slug}/{city_slug}"


def city_paths_for_locations(locations: list[Location]) -> list[str]:
    paths: list[str] = []
    for location in locations:
        path = city_public_path(region_slug=location.slug_region, city_slug=location.slug_city)
        if path not in paths:
            paths.append(path)
    return paths
