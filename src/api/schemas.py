from datetime import datetime
from typing import Any

from pydantic import BaseModel

from src.domain.entities import ContentItem, FacilityType

# --- Helpers ---


def dump_item(item: ContentItem) -> dict[str, Any]:
    """Wire shape of a content item (camelCase, as the content API sends it)."""
    return item.model_dump(mode="json", by_alias=True)


def dump_items(items: Any) -> list[dict[str, Any]]:
    return [dump_item(item) for item in items]


# --- Levels ---
class LevelResponse(BaseModel):
    id: str
    name: str
    color: str
    type: str
    selectable: bool


class LevelsResponse(BaseModel):
    active: str
    is_universal: bool
    loaded: bool
    levels: list[LevelResponse]


class SelectLevelRequest(BaseModel):
    level: str


# --- Public pages ---
class ListPageResponse(BaseModel):
    kind: str
    jenjang: str
    category: str
    items: list[dict[str, Any]]
    categories: list[str]
    has_more: bool
    error: str | None = None
    trending: list[dict[str, Any]] = []


class LoadMoreRequest(BaseModel):
    category: str = "All"
    search: str | None = None
    type: FacilityType | None = None


class DetailResponse(BaseModel):
    kind: str
    id: str
    state: str
    item: dict[str, Any] | None
    related: list[dict[str, Any]]
    is_stale: bool


class StatModel(BaseModel):
    label: str
    value: str


class HomeResponse(BaseModel):
    jenjang: str
    news: list[dict[str, Any]]
    projects: list[dict[str, Any]]
    journals: list[dict[str, Any]]
    best_journals: list[dict[str, Any]]
    stats: list[StatModel]
    slides: list[dict[str, Any]]
    testimonials: list[dict[str, Any]]
    profile: dict[str, Any] | None = None


# --- Assistant ---
class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    role: str
    text: str
    success: bool


class DraftRequest(BaseModel):
    brief: str


class DraftResponse(BaseModel):
    text: str


# --- Admin ---
class AdminListResponse(BaseModel):
    kind: str
    items: list[dict[str, Any]]
    categories: list[str]
    fetched_at: datetime
    from_cache: bool


class FieldErrorModel(BaseModel):
    field: str
    code: str
    message: str


class MutationResponse(BaseModel):
    kind: str
    success: bool
    message: str
    id: str | None = None
    errors: list[FieldErrorModel] = []
