"""
CollectionCache - session-scoped store of fetched collections.

One bucket per content kind plus a separate home snapshot. Key behaviors:
- get_items short-circuits when the bucket already answers the request
- every successful fetch replaces the bucket wholesale
- a failed fetch leaves the bucket untouched and re-raises
- invalidation bumps the bucket generation, so a fetch issued earlier
  cannot write its (stale) result afterwards
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from itertools import count

from src.domain.entities import (
    UNIVERSAL_LEVEL,
    ContentItem,
    ContentKind,
    LevelId,
)
from src.ports.content_api import ContentApiPort
from src.rules.models import CacheRules, MarketingRules

from .models import ALL_CATEGORY, BucketSnapshot, CacheBucket, HomeSnapshot

logger = logging.getLogger(__name__)


def _matches_level(item: ContentItem, jenjang: LevelId | None) -> bool:
    return jenjang is None or jenjang == UNIVERSAL_LEVEL or item.jenjang == jenjang


def _matches_search(item: ContentItem, needle: str) -> bool:
    haystacks = (item.title, getattr(item, "excerpt", ""))
    return any(needle in text.lower() for text in haystacks)


def filter_items(
    items: Iterable[ContentItem],
    jenjang: LevelId | None = None,
    category: str | None = None,
    search: str | None = None,
    facility_type: str | None = None,
) -> list[ContentItem]:
    """
    Client-side filter. Universal level and "All" match everything.

    `search` is a case-insensitive substring match on title and excerpt;
    `facility_type` narrows facilities to one tab (Ruang/Ekstra).
    """
    needle = search.strip().lower() if search else ""
    selected = []
    for item in items:
        if not _matches_level(item, jenjang):
            continue
        if category and category != ALL_CATEGORY and item.category != category:
            continue
        if needle and not _matches_search(item, needle):
            continue
        if facility_type and getattr(item, "type", None) != facility_type:
            continue
        selected.append(item)
    return selected


def trending(
    items: Iterable[ContentItem],
    jenjang: LevelId | None = None,
    limit: int = 4,
) -> list[ContentItem]:
    """Most-read items for a level, by `views` descending."""
    candidates = [item for item in items if _matches_level(item, jenjang)]
    candidates.sort(key=lambda item: getattr(item, "views", 0), reverse=True)
    return candidates[:limit]


class CollectionCache:
    """Per-kind collection cache shared by every page of a session."""

    def __init__(
        self,
        api: ContentApiPort,
        rules: CacheRules | None = None,
        marketing: MarketingRules | None = None,
    ) -> None:
        self._api = api
        self._rules = rules or CacheRules()
        self._marketing = marketing or MarketingRules()
        self._buckets = {
            kind: CacheBucket(kind=kind, requested_limit=self._rules.page_size)
            for kind in ContentKind
        }
        self._tickets = count(1)
        self._home: HomeSnapshot | None = None
        self._home_generation = 0

    # --- Reads without I/O ---

    def snapshot(self, kind: ContentKind) -> BucketSnapshot:
        return BucketSnapshot.of(self._buckets[kind])

    def is_loaded(self, kind: ContentKind) -> bool:
        return self._buckets[kind].is_loaded

    def has_more(self, kind: ContentKind) -> bool:
        return self._buckets[kind].has_more

    def cached_items(self, kind: ContentKind) -> tuple[ContentItem, ...]:
        return self._buckets[kind].items

    @property
    def home(self) -> HomeSnapshot | None:
        return self._home

    def find_cached(self, kind: ContentKind, item_id: str) -> ContentItem | None:
        """
        Look an item up in every cache that may hold it.

        Order: the paginated bucket, the home snapshot, then specialty lists.
        """
        for source in self._search_order(kind):
            for item in source:
                if item.id == item_id:
                    return item
        return None

    def _search_order(self, kind: ContentKind) -> list[tuple[ContentItem, ...]]:
        sources = [self._buckets[kind].items]
        if self._home is not None:
            sources.append(self._home.items_for(kind))
            if kind == ContentKind.JOURNALS:
                sources.append(self._home.best_journals)
        return sources

    # --- Categories ---

    async def get_categories(self, kind: ContentKind) -> list[str]:
        """Category filter options, with the synthetic "All" first."""
        bucket = self._buckets[kind]
        if bucket.categories is not None:
            return [ALL_CATEGORY, *bucket.categories]

        generation = bucket.generation
        data = await self._api.fetch_categories()
        vocabulary = tuple(name for name in data.for_kind(kind) if name != ALL_CATEGORY)

        if bucket.generation == generation:
            bucket.categories = vocabulary
        else:
            logger.info("Discarding %s categories fetched before invalidation", kind.value)
        return [ALL_CATEGORY, *vocabulary]

    # --- Items ---

    async def get_items(
        self,
        kind: ContentKind,
        limit: int | None = None,
        jenjang: LevelId = UNIVERSAL_LEVEL,
    ) -> list[ContentItem]:
        """
        Items for a kind, fetching only on a miss.

        A loaded bucket for the same level answers without I/O when it holds
        at least `limit` items, or when its last fetch already asked for
        `limit` or more (the server had no more to give).
        """
        bucket = self._buckets[kind]
        if limit is None:
            # Page size carries over only while the level stays the same
            same_level = bucket.is_loaded and bucket.jenjang == jenjang
            limit = bucket.requested_limit if same_level else self._rules.page_size

        if bucket.is_loaded and bucket.jenjang == jenjang:
            if len(bucket.items) >= limit or limit <= bucket.requested_limit:
                logger.debug("Cache hit for %s (limit %d)", kind.value, limit)
                return list(bucket.items[:limit])

        logger.debug("Cache miss for %s (limit %d, level %s)", kind.value, limit, jenjang.value)
        return await self._fetch_and_replace(bucket, limit, jenjang)

    async def load_more(
        self,
        kind: ContentKind,
        jenjang: LevelId | None = None,
    ) -> list[ContentItem]:
        """Grow the requested limit by one page increment and refetch."""
        bucket = self._buckets[kind]
        level = jenjang or bucket.jenjang or UNIVERSAL_LEVEL
        base = bucket.requested_limit if bucket.jenjang == level else self._rules.page_size
        return await self._fetch_and_replace(bucket, base + self._rules.page_increment, level)

    async def _fetch_and_replace(
        self,
        bucket: CacheBucket,
        limit: int,
        jenjang: LevelId,
    ) -> list[ContentItem]:
        ticket = next(self._tickets)
        generation = bucket.generation

        # Errors propagate with the bucket untouched
        items = await self._api.list_items(bucket.kind, limit=limit, jenjang=jenjang)

        if bucket.generation != generation:
            logger.info("Discarding %s fetch issued before invalidation", bucket.kind.value)
            return list(items)
        if ticket < bucket.applied_ticket:
            logger.debug("Discarding out-of-order %s fetch", bucket.kind.value)
            return list(items)

        bucket.replace(list(items), limit, jenjang, ticket)
        return list(bucket.items)

    # --- Home ---

    async def get_home(self, jenjang: LevelId = UNIVERSAL_LEVEL) -> HomeSnapshot:
        """Home page data, fetched once per session and level."""
        if self._home is not None and self._home.jenjang == jenjang:
            return self._home

        generation = self._home_generation
        limits = self._rules.home_limits
        news, projects, journals, best_journals, stats = await asyncio.gather(
            self._api.list_items(ContentKind.NEWS, limit=limits.news, jenjang=jenjang),
            self._api.list_items(ContentKind.PROJECTS, limit=limits.projects, jenjang=jenjang),
            self._api.list_items(ContentKind.JOURNALS, limit=limits.journals, jenjang=jenjang),
            self._api.list_best_journals(limits.best_journals),
            self._api.fetch_home_stats(),
        )

        snapshot = HomeSnapshot(
            jenjang=jenjang,
            news=tuple(news),  # type: ignore[arg-type]
            projects=tuple(projects),  # type: ignore[arg-type]
            journals=tuple(journals),  # type: ignore[arg-type]
            best_journals=tuple(best_journals),
            stats=stats,
            slides=tuple(self._marketing.slides),
            testimonials=tuple(self._marketing.testimonials),
            profile=self._marketing.profile,
        )
        if self._home_generation == generation:
            self._home = snapshot
        else:
            logger.info("Discarding home data fetched before invalidation")
        return snapshot

    # --- Invalidation ---

    def invalidate(self, kind: ContentKind) -> None:
        self._buckets[kind].clear(self._rules.page_size)
        logger.debug("Invalidated %s bucket", kind.value)

    def invalidate_home(self) -> None:
        self._home = None
        self._home_generation += 1

    def invalidate_all(self) -> None:
        for kind in ContentKind:
            self.invalidate(kind)
        self.invalidate_home()
