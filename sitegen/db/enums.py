from enum import Enum


class PageDataModeEnum(str, Enum):
    draft = "draft"
    published = "published"


class ContentSourceKindEnum(str, Enum):
    static = "static"
    dynamic = "dynamic"


class DynamicModeEnum(str, Enum):
    synced = "synced"
    per_location = "perLocation"
