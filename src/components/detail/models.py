"""
Detail component - Data models.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from src.domain.entities import ContentItem, ContentKind


class DetailState(str, Enum):
    INIT = "init"
    HAS_CACHE = "has_cache"
    NO_CACHE = "no_cache"
    LOADING = "loading"
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"


@dataclass
class DetailResolution:
    """
    What a detail page gets when it opens.

    `immediate` and `related` are available synchronously; `confirmed` and
    `related_update` are background tasks.
    """

    kind: ContentKind
    item_id: str
    immediate: ContentItem | None
    confirmed: asyncio.Task[ContentItem]
    related: list[ContentItem] = field(default_factory=list)
    related_update: asyncio.Task[list[ContentItem]] | None = None

    def cancel(self) -> None:
        self.confirmed.cancel()
        if self.related_update is not None:
            self.related_update.cancel()


@dataclass(frozen=True)
class DetailInput:
    kind: ContentKind
    item_id: str


@dataclass(frozen=True)
class DetailOutput:
    kind: ContentKind
    item_id: str
    state: DetailState
    item: ContentItem | None
    related: list[ContentItem]
    is_stale: bool
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.state == DetailState.RESOLVED
