"""
AdminListCache - admin list views persisted in the session store.

Each kind keeps three session keys (data, categories, timestamp). A snapshot
is trusted for `ttl_seconds`; after that, or after invalidation, the next
read goes to the API. Mutations call invalidate() so the following list view
always refetches.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from pydantic import TypeAdapter, ValidationError

from src.domain.entities import ITEM_MODELS, ContentItem, ContentKind
from src.ports.clock import ClockPort
from src.ports.content_api import ContentApiPort
from src.ports.session_store import SessionStorePort

from .models import AdminListing

logger = logging.getLogger(__name__)

_CATEGORIES_ADAPTER = TypeAdapter(list[str])
_ITEMS_ADAPTERS: dict[ContentKind, TypeAdapter[list[ContentItem]]] = {
    kind: TypeAdapter(list[model])  # type: ignore[valid-type]
    for kind, model in ITEM_MODELS.items()
}


def admin_keys(kind: ContentKind) -> tuple[str, str, str]:
    """Session keys for (data, categories, timestamp)."""
    prefix = f"admin_{kind.value}"
    return f"{prefix}_data", f"{prefix}_cats", f"{prefix}_timestamp"


class AdminListCache:
    def __init__(
        self,
        api: ContentApiPort,
        store: SessionStorePort,
        clock: ClockPort,
        ttl_seconds: int = 300,
    ) -> None:
        self._api = api
        self._store = store
        self._clock = clock
        self._ttl_seconds = ttl_seconds
        self._generations = {kind: 0 for kind in ContentKind}

    async def get_list(self, kind: ContentKind) -> AdminListing:
        cached = self._read_snapshot(kind)
        if cached is not None:
            return cached
        return await self._fetch(kind)

    async def force_refresh(self, kind: ContentKind) -> AdminListing:
        """Drop the snapshot and timestamp, then refetch."""
        self.invalidate(kind)
        return await self._fetch(kind)

    def invalidate(self, kind: ContentKind) -> None:
        for key in admin_keys(kind):
            self._store.remove(key)
        self._generations[kind] += 1
        logger.debug("Invalidated admin %s snapshot", kind.value)

    def _read_snapshot(self, kind: ContentKind) -> AdminListing | None:
        data_key, cats_key, ts_key = admin_keys(kind)
        raw_ts = self._store.get(ts_key)
        raw_data = self._store.get(data_key)
        if raw_ts is None or raw_data is None:
            return None

        try:
            fetched_at = datetime.fromisoformat(raw_ts)
        except ValueError:
            logger.warning("Corrupt admin %s timestamp %r; refetching", kind.value, raw_ts)
            self.invalidate(kind)
            return None

        if fetched_at.tzinfo is None:
            logger.warning("Admin %s timestamp %r has no timezone; refetching", kind.value, raw_ts)
            self.invalidate(kind)
            return None

        age = (self._clock.now_utc() - fetched_at).total_seconds()
        if age < 0 or age >= self._ttl_seconds:
            logger.debug("Admin %s snapshot is stale (%.0fs old)", kind.value, age)
            return None

        try:
            items = _ITEMS_ADAPTERS[kind].validate_json(raw_data)
            categories = _CATEGORIES_ADAPTER.validate_json(self._store.get(cats_key) or "[]")
        except ValidationError as e:
            logger.warning(
                "Corrupt admin %s snapshot (%d errors); refetching", kind.value, e.error_count()
            )
            self.invalidate(kind)
            return None

        return AdminListing(
            kind=kind,
            items=tuple(items),
            categories=tuple(categories),
            fetched_at=fetched_at,
            from_cache=True,
        )

    async def _fetch(self, kind: ContentKind) -> AdminListing:
        generation = self._generations[kind]
        items, category_data = await asyncio.gather(
            self._api.list_items(kind),
            self._api.fetch_categories(),
        )
        fetched_at = self._clock.now_utc()
        listing = AdminListing(
            kind=kind,
            items=tuple(items),
            categories=tuple(category_data.for_kind(kind)),
            fetched_at=fetched_at,
            from_cache=False,
        )

        if self._generations[kind] != generation:
            logger.info("Not persisting admin %s list fetched before invalidation", kind.value)
            return listing

        data_key, cats_key, ts_key = admin_keys(kind)
        self._store.set(
            data_key,
            _ITEMS_ADAPTERS[kind].dump_json(list(items), by_alias=True).decode(),
        )
        self._store.set(cats_key, _CATEGORIES_ADAPTER.dump_json(list(listing.categories)).decode())
        self._store.set(ts_key, fetched_at.isoformat())
        return listing
