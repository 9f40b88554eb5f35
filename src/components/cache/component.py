"""
Cache component - Page-level reads through the collection cache.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging

from src.domain.entities import UNIVERSAL_LEVEL, ContentItem, ContentKind, LevelId
from src.domain.errors import FetchError

from ._admin import AdminListCache
from ._impl import CollectionCache, filter_items, trending
from .models import ALL_CATEGORY, AdminListing, ListPageInput, ListPageOutput

logger = logging.getLogger(__name__)

# Size of the "trending" sidebar on the news page
TRENDING_COUNT = 4


def _page_output(
    kind: ContentKind,
    items: list[ContentItem],
    categories: list[str],
    has_more: bool,
    jenjang: LevelId | None,
    filter_client_side: bool,
    category: str,
    search: str | None,
    facility_type: str | None,
) -> ListPageOutput:
    level_filter = jenjang if filter_client_side else None
    return ListPageOutput(
        kind=kind,
        items=filter_items(items, level_filter, category, search, facility_type),
        categories=categories,
        has_more=has_more,
        success=True,
        trending=trending(items, jenjang, TRENDING_COUNT) if kind == ContentKind.NEWS else [],
    )


async def run_list_page(input_data: ListPageInput, cache: CollectionCache) -> ListPageOutput:
    """Load categories and items for a list page."""
    # Journals come from the server for every level and are narrowed here
    fetch_level = UNIVERSAL_LEVEL if input_data.filter_client_side else input_data.jenjang

    try:
        categories = await cache.get_categories(input_data.kind)
        items = await cache.get_items(input_data.kind, input_data.limit, jenjang=fetch_level)
    except FetchError as e:
        logger.warning("List page for %s failed: %s", input_data.kind.value, e)
        snapshot = cache.snapshot(input_data.kind)
        return ListPageOutput(
            kind=input_data.kind,
            items=list(snapshot.items),
            categories=[ALL_CATEGORY, *(snapshot.categories or ())],
            has_more=snapshot.has_more,
            success=False,
            error=str(e),
        )

    return _page_output(
        input_data.kind,
        items,
        categories,
        cache.has_more(input_data.kind),
        input_data.jenjang,
        input_data.filter_client_side,
        input_data.category,
        input_data.search,
        input_data.facility_type,
    )


async def run_load_more(
    kind: ContentKind,
    cache: CollectionCache,
    jenjang: LevelId | None = None,
    category: str = ALL_CATEGORY,
    filter_client_side: bool = False,
    search: str | None = None,
    facility_type: str | None = None,
) -> ListPageOutput:
    """Fetch the next page (the whole enlarged list, replacing the bucket)."""
    fetch_level = UNIVERSAL_LEVEL if filter_client_side else jenjang
    try:
        items = await cache.load_more(kind, jenjang=fetch_level)
    except FetchError as e:
        logger.warning("Load more for %s failed: %s", kind.value, e)
        snapshot = cache.snapshot(kind)
        return ListPageOutput(
            kind=kind,
            items=list(snapshot.items),
            categories=[ALL_CATEGORY, *(snapshot.categories or ())],
            has_more=snapshot.has_more,
            success=False,
            error=str(e),
        )

    snapshot = cache.snapshot(kind)
    return _page_output(
        kind,
        items,
        [ALL_CATEGORY, *(snapshot.categories or ())],
        snapshot.has_more,
        jenjang,
        filter_client_side,
        category,
        search,
        facility_type,
    )


async def run_admin_list(
    kind: ContentKind,
    cache: AdminListCache,
    force_refresh: bool = False,
) -> AdminListing:
    """Admin list view. Errors propagate to the caller."""
    if force_refresh:
        return await cache.force_refresh(kind)
    return await cache.get_list(kind)
