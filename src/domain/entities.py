from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# --- Enums / Literals ---


class LevelId(str, Enum):
    """Education level (jenjang). UMUM is the universal, no-filter level."""

    UMUM = "UMUM"
    MI = "MI"
    SMP = "SMP"
    SMA = "SMA"
    KAMPUS = "KAMPUS"


UNIVERSAL_LEVEL = LevelId.UMUM

# Older API payloads label the senior high school "MA"
LEVEL_ALIASES = {"MA": LevelId.SMA}


def parse_level(raw: Any) -> LevelId | None:
    """Convert external input (env var, hostname label, payload) to a LevelId."""
    if isinstance(raw, LevelId):
        return raw
    if not isinstance(raw, str):
        return None
    key = raw.strip().upper()
    if not key:
        return None
    if key in LEVEL_ALIASES:
        return LEVEL_ALIASES[key]
    try:
        return LevelId(key)
    except ValueError:
        return None


class ContentKind(str, Enum):
    NEWS = "news"
    PROJECTS = "projects"
    JOURNALS = "journals"
    FACILITIES = "facilities"


FacilityType = Literal["Ruang", "Ekstra"]

# --- Content ---


class WireModel(BaseModel):
    """Base for payloads exchanged with the content API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ContentItemBase(WireModel):
    id: str
    jenjang: LevelId = LevelId.UMUM
    category: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # The API sometimes serialises numeric primary keys
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("jenjang", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> LevelId:
        return parse_level(value) or UNIVERSAL_LEVEL


class NewsItem(ContentItemBase):
    title: str
    excerpt: str = ""
    content: str = ""
    date: str = ""
    views: int = 0
    image_url: str = ""
    # Achievement tier (Nasional/Internasional/Provinsi), only for "Prestasi"
    level: str | None = None
    attachments: list[str] = Field(default_factory=list)
    gallery: list[str] = Field(default_factory=list)


class ProjectItem(ContentItemBase):
    title: str
    description: str = ""
    author: str = ""
    date: str = ""
    image_url: str = ""
    file_url: str | None = None


class JournalItem(ContentItemBase):
    title: str
    abstract: str = ""
    author: str = ""
    mentor: str = ""
    score: float = 0
    date: str = ""
    is_best: bool = False
    file_url: str | None = None


class FacilityItem(ContentItemBase):
    name: str
    type: FacilityType = "Ruang"
    description: str = ""
    image_url: str = ""

    @property
    def title(self) -> str:
        return self.name


ContentItem = Union[NewsItem, ProjectItem, JournalItem, FacilityItem]

ITEM_MODELS: dict[ContentKind, type[ContentItemBase]] = {
    ContentKind.NEWS: NewsItem,
    ContentKind.PROJECTS: ProjectItem,
    ContentKind.JOURNALS: JournalItem,
    ContentKind.FACILITIES: FacilityItem,
}

# --- Levels ---


class LevelConfig(WireModel):
    display_name: str = Field(alias="name")
    theme_color: str = Field(alias="color")
    type_label: str = Field(alias="type")


LevelConfigMap = dict[LevelId, LevelConfig]

# --- Home / Marketing ---


class Slide(WireModel):
    image: str
    title: str
    subtitle: str = ""


class Stat(WireModel):
    label: str
    value: str


# Stats per level code, as served by the home endpoint
HomeStats = dict[str, list[Stat]]


class Testimonial(WireModel):
    name: str
    role: str = ""
    quote: str
    image: str = ""


class InstitutionProfile(WireModel):
    name: str
    tagline: str = ""
    vision: str = ""
    mission: list[str] = Field(default_factory=list)
    history: str = ""


class CategoryData(BaseModel):
    news_categories: list[str] = Field(default_factory=list)
    project_categories: list[str] = Field(default_factory=list)
    journal_categories: list[str] = Field(default_factory=list)
    facility_categories: list[str] = Field(default_factory=list)

    def for_kind(self, kind: ContentKind) -> list[str]:
        return {
            ContentKind.NEWS: self.news_categories,
            ContentKind.PROJECTS: self.project_categories,
            ContentKind.JOURNALS: self.journal_categories,
            ContentKind.FACILITIES: self.facility_categories,
        }[kind]


class MutationResult(BaseModel):
    message: str = ""
    data: dict[str, Any] | None = None
