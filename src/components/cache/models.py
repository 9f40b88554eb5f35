"""
Cache component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from src.domain.entities import (
    LEVEL_ALIASES,
    ContentItem,
    ContentKind,
    HomeStats,
    InstitutionProfile,
    JournalItem,
    LevelId,
    NewsItem,
    ProjectItem,
    Slide,
    Stat,
    Testimonial,
)

# Synthetic first entry of every category filter; never stored in a bucket
ALL_CATEGORY = "All"


@dataclass
class CacheBucket:
    """
    Cached collection for one content kind.

    Only CollectionCache writes to a bucket, and only by replacing `items`
    wholesale. `items` is a tuple so callers cannot patch it in place.
    """

    kind: ContentKind
    requested_limit: int
    items: tuple[ContentItem, ...] = ()
    categories: tuple[str, ...] | None = None
    is_loaded: bool = False
    jenjang: LevelId | None = None
    # Bumped by invalidation; fetches issued under an older generation are dropped
    generation: int = 0
    applied_ticket: int = 0

    @property
    def loaded_count(self) -> int:
        return len(self.items)

    @property
    def has_more(self) -> bool:
        return not (self.is_loaded and len(self.items) < self.requested_limit)

    def replace(
        self,
        items: list[ContentItem],
        requested_limit: int,
        jenjang: LevelId,
        ticket: int,
    ) -> None:
        self.items = tuple(items)
        self.requested_limit = requested_limit
        self.jenjang = jenjang
        self.is_loaded = True
        self.applied_ticket = ticket

    def clear(self, page_size: int) -> None:
        self.items = ()
        self.categories = None
        self.is_loaded = False
        self.jenjang = None
        self.requested_limit = page_size
        self.applied_ticket = 0
        self.generation += 1


@dataclass(frozen=True)
class BucketSnapshot:
    """Read-only view of a bucket."""

    kind: ContentKind
    items: tuple[ContentItem, ...]
    categories: tuple[str, ...] | None
    is_loaded: bool
    requested_limit: int
    has_more: bool
    jenjang: LevelId | None

    @classmethod
    def of(cls, bucket: CacheBucket) -> BucketSnapshot:
        return cls(
            kind=bucket.kind,
            items=bucket.items,
            categories=bucket.categories,
            is_loaded=bucket.is_loaded,
            requested_limit=bucket.requested_limit,
            has_more=bucket.has_more,
            jenjang=bucket.jenjang,
        )


@dataclass(frozen=True)
class HomeSnapshot:
    """Home page data: latest items per kind plus static marketing content."""

    jenjang: LevelId | None = None
    news: tuple[NewsItem, ...] = ()
    projects: tuple[ProjectItem, ...] = ()
    journals: tuple[JournalItem, ...] = ()
    best_journals: tuple[JournalItem, ...] = ()
    stats: HomeStats = field(default_factory=dict)
    slides: tuple[Slide, ...] = ()
    testimonials: tuple[Testimonial, ...] = ()
    profile: InstitutionProfile | None = None

    def items_for(self, kind: ContentKind) -> tuple[ContentItem, ...]:
        if kind == ContentKind.NEWS:
            return self.news
        if kind == ContentKind.PROJECTS:
            return self.projects
        if kind == ContentKind.JOURNALS:
            return self.journals
        return ()

    def stats_for(self, level: LevelId) -> list[Stat]:
        """Stats for a level; the API may key them under a legacy alias (SMA -> MA)."""
        if level.value in self.stats:
            return self.stats[level.value]
        for alias, target in LEVEL_ALIASES.items():
            if target == level and alias in self.stats:
                return self.stats[alias]
        return []


@dataclass(frozen=True)
class AdminListing:
    """Admin list view data and where it came from."""

    kind: ContentKind
    items: tuple[ContentItem, ...]
    categories: tuple[str, ...]
    fetched_at: datetime
    from_cache: bool


# --- Component inputs/outputs ---


@dataclass(frozen=True)
class ListPageInput:
    kind: ContentKind
    jenjang: LevelId = LevelId.UMUM
    category: str = ALL_CATEGORY
    limit: int | None = None
    # Journals are fetched for every level and narrowed here
    filter_client_side: bool = False
    search: str | None = None
    facility_type: str | None = None


@dataclass(frozen=True)
class ListPageOutput:
    kind: ContentKind
    items: list[ContentItem]
    categories: list[str]
    has_more: bool
    success: bool
    error: str | None = None
    # Most-read news for the level; empty for other kinds
    trending: list[ContentItem] = field(default_factory=list)
