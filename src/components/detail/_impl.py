"""
Detail resolution - render from cache first, then confirm.

DetailResolver.resolve():
1. Finds a cached summary (paginated bucket, home snapshot, best journals).
2. Starts the authoritative fetch in the background.
3. Picks related items from the cached list for the kind, or fetches the full
   collection in the background when that bucket is empty.

DetailView drives one page through
INIT -> (HAS_CACHE | NO_CACHE) -> LOADING (no cache only) -> RESOLVED | NOT_FOUND.
A failed authoritative fetch after a cache hit keeps the cached record.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from src.components.cache import CollectionCache
from src.domain.entities import ContentItem, ContentKind
from src.domain.errors import FetchError, NotFoundError
from src.ports.content_api import ContentApiPort

from .models import DetailResolution, DetailState

logger = logging.getLogger(__name__)


def pick_related(
    items: Iterable[ContentItem],
    exclude_id: str,
    limit: int = 3,
) -> list[ContentItem]:
    related = []
    for item in items:
        if item.id == exclude_id:
            continue
        related.append(item)
        if len(related) >= limit:
            break
    return related


class DetailResolver:
    def __init__(
        self,
        api: ContentApiPort,
        cache: CollectionCache,
        related_count: int = 3,
    ) -> None:
        self._api = api
        self._cache = cache
        self._related_count = related_count

    def resolve(self, kind: ContentKind, item_id: str) -> DetailResolution:
        """Must be called from a running event loop; returns without awaiting."""
        loop = asyncio.get_running_loop()

        immediate = self._cache.find_cached(kind, item_id)
        confirmed = loop.create_task(self._api.get_item(kind, item_id))

        paginated = self._cache.cached_items(kind)
        related_update = None
        if paginated:
            related = pick_related(paginated, item_id, self._related_count)
        else:
            home = self._cache.home
            seed = home.items_for(kind) if home is not None else ()
            related = pick_related(seed, item_id, self._related_count)
            related_update = loop.create_task(self._fetch_related(kind, item_id))

        logger.debug(
            "Resolving %s %s (cache %s)", kind.value, item_id, "hit" if immediate else "miss"
        )
        return DetailResolution(
            kind=kind,
            item_id=item_id,
            immediate=immediate,
            confirmed=confirmed,
            related=related,
            related_update=related_update,
        )

    async def _fetch_related(self, kind: ContentKind, item_id: str) -> list[ContentItem]:
        items = await self._api.list_items(kind)
        return pick_related(items, item_id, self._related_count)


class DetailView:
    """State of one detail page, from open to unmount."""

    def __init__(self, resolver: DetailResolver, kind: ContentKind, item_id: str) -> None:
        self._resolver = resolver
        self.kind = kind
        self.item_id = item_id
        self.state = DetailState.INIT
        self.transitions: list[DetailState] = [DetailState.INIT]
        self.item: ContentItem | None = None
        self.related: list[ContentItem] = []
        self.is_stale = False
        self.error: NotFoundError | None = None
        self._alive = True
        self._resolution: DetailResolution | None = None

    @property
    def is_alive(self) -> bool:
        return self._alive

    def _move(self, state: DetailState) -> None:
        self.state = state
        self.transitions.append(state)

    def open(self) -> DetailResolution:
        resolution = self._resolver.resolve(self.kind, self.item_id)
        self._resolution = resolution
        self.related = list(resolution.related)

        if resolution.immediate is not None:
            self.item = resolution.immediate
            self._move(DetailState.HAS_CACHE)
        else:
            self._move(DetailState.NO_CACHE)
            self._move(DetailState.LOADING)
        return resolution

    async def settle(self) -> DetailState:
        """Wait for the background fetches and apply them if still mounted."""
        if self._resolution is None:
            raise RuntimeError("DetailView.settle() called before open()")
        resolution = self._resolution

        try:
            detail = await resolution.confirmed
        except asyncio.CancelledError:
            if self._alive:
                raise
            return self.state
        except FetchError as e:
            if self._alive:
                self._apply_failure(e)
        else:
            if self._alive:
                self.item = detail
                self.is_stale = False
                self._move(DetailState.RESOLVED)

        if resolution.related_update is not None:
            try:
                related = await resolution.related_update
            except asyncio.CancelledError:
                if self._alive:
                    raise
                return self.state
            except FetchError as e:
                logger.warning(
                    "Related %s for %s unavailable: %s", self.kind.value, self.item_id, e
                )
            else:
                if self._alive:
                    self.related = related

        return self.state

    def _apply_failure(self, cause: FetchError) -> None:
        if self.item is not None:
            logger.warning(
                "Showing cached %s %s; detail fetch failed: %s",
                self.kind.value,
                self.item_id,
                cause,
            )
            self.is_stale = True
            self._move(DetailState.RESOLVED)
            return

        error = NotFoundError(self.kind, self.item_id)
        error.__cause__ = cause
        self.error = error
        self._move(DetailState.NOT_FOUND)

    async def load(self) -> DetailState:
        self.open()
        return await self.settle()

    def close(self) -> None:
        """Unmount: late results are ignored from here on."""
        self._alive = False
        if self._resolution is not None:
            self._resolution.cancel()

    def require(self) -> ContentItem:
        """The rendered item, or NotFoundError."""
        if self.item is None:
            raise self.error or NotFoundError(self.kind, self.item_id)
        return self.item
