"""
Content API port.

The remote REST service that owns news, projects, journals and facilities.
Every read returns validated domain models; failures surface as FetchError
or DecodeError.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from src.domain.entities import (
    CategoryData,
    ContentItem,
    ContentKind,
    HomeStats,
    JournalItem,
    LevelConfigMap,
    LevelId,
    MutationResult,
)

UploadFile = tuple[str, bytes, str]  # (filename, content, mime type)


class ContentApiPort(Protocol):
    async def list_items(
        self,
        kind: ContentKind,
        limit: int | None = None,
        jenjang: LevelId | None = None,
    ) -> list[ContentItem]:
        """List items of a kind, newest first, optionally limited and level-scoped."""
        ...

    async def get_item(self, kind: ContentKind, item_id: str) -> ContentItem:
        """Fetch the full detail record for one item."""
        ...

    async def list_best_journals(self, limit: int) -> list[JournalItem]:
        """Journals flagged as best."""
        ...

    async def fetch_categories(self) -> CategoryData:
        """Category vocabularies for every kind."""
        ...

    async def fetch_level_config(self) -> LevelConfigMap:
        """Display metadata for every level."""
        ...

    async def fetch_home_stats(self) -> HomeStats:
        """Per-level statistics shown on the home page."""
        ...

    async def create_item(
        self,
        kind: ContentKind,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult: ...

    async def update_item(
        self,
        kind: ContentKind,
        item_id: str,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult: ...

    async def delete_item(self, kind: ContentKind, item_id: str) -> MutationResult: ...
