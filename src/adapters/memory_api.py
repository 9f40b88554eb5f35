"""
In-memory content API adapter (dev/test).

Implements ContentApiPort over plain lists so caches and views can run
without the remote service. Supports:
- call recording (`calls`, `call_count`)
- failure injection per operation (`fail`, `recover`)
- holding an operation until released (`hold`, `release`), for exercising
  interleavings such as invalidation racing an in-flight fetch
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from itertools import count
from typing import Any

from src.domain.entities import (
    ITEM_MODELS,
    UNIVERSAL_LEVEL,
    CategoryData,
    ContentItem,
    ContentKind,
    HomeStats,
    JournalItem,
    LevelConfigMap,
    LevelId,
    MutationResult,
)
from src.domain.errors import FetchError, MutationError
from src.ports.content_api import UploadFile

logger = logging.getLogger(__name__)


class InMemoryContentApi:
    """ContentApiPort served from memory."""

    def __init__(
        self,
        items: Mapping[ContentKind, Sequence[ContentItem]] | None = None,
        categories: CategoryData | None = None,
        level_config: LevelConfigMap | None = None,
        stats: HomeStats | None = None,
    ) -> None:
        self.items: dict[ContentKind, list[ContentItem]] = {kind: [] for kind in ContentKind}
        for kind, entries in (items or {}).items():
            self.items[kind] = list(entries)
        # Full records served by get_item when they differ from list summaries
        self.details: dict[tuple[ContentKind, str], ContentItem] = {}
        self.categories = categories or CategoryData()
        self.level_config: LevelConfigMap = dict(level_config or {})
        self.stats = stats or {}

        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._failures: dict[str, Exception] = {}
        self._gates: dict[str, asyncio.Event] = {}
        self._ids = count(1000)

    # --- Test controls ---

    def fail(self, operation: str, error: Exception) -> None:
        self._failures[operation] = error

    def recover(self, operation: str) -> None:
        self._failures.pop(operation, None)

    def hold(self, operation: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[operation] = gate
        return gate

    def release(self, operation: str) -> None:
        gate = self._gates.pop(operation, None)
        if gate is not None:
            gate.set()

    def call_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def _enter(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        gate = self._gates.get(operation)
        if gate is not None:
            await gate.wait()
        error = self._failures.get(operation)
        if error is not None:
            raise error

    # --- Reads ---

    async def list_items(
        self,
        kind: ContentKind,
        limit: int | None = None,
        jenjang: LevelId | None = None,
    ) -> list[ContentItem]:
        await self._enter("list_items", kind, limit, jenjang)
        entries = self.items[kind]
        if jenjang is not None and jenjang != UNIVERSAL_LEVEL:
            entries = [item for item in entries if item.jenjang == jenjang]
        if limit is not None:
            entries = entries[:limit]
        return list(entries)

    async def get_item(self, kind: ContentKind, item_id: str) -> ContentItem:
        await self._enter("get_item", kind, item_id)
        detail = self.details.get((kind, item_id))
        if detail is not None:
            return detail
        for item in self.items[kind]:
            if item.id == item_id:
                return item
        raise FetchError(f"{kind.value} '{item_id}' not found", kind=kind, status_code=404)

    async def list_best_journals(self, limit: int) -> list[JournalItem]:
        await self._enter("list_best_journals", limit)
        journals = self.items[ContentKind.JOURNALS]
        best = [item for item in journals if getattr(item, "is_best", False)]
        return best[:limit]  # type: ignore[return-value]

    async def fetch_categories(self) -> CategoryData:
        await self._enter("fetch_categories")
        return self.categories

    async def fetch_level_config(self) -> LevelConfigMap:
        await self._enter("fetch_level_config")
        return dict(self.level_config)

    async def fetch_home_stats(self) -> HomeStats:
        await self._enter("fetch_home_stats")
        return dict(self.stats)

    # --- Mutations ---

    async def create_item(
        self,
        kind: ContentKind,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult:
        await self._enter("create_item", kind, dict(fields))
        item_id = str(next(self._ids))
        item = ITEM_MODELS[kind].model_validate({**fields, "id": item_id})
        self.items[kind].insert(0, item)  # type: ignore[arg-type]
        logger.debug("Created %s %s", kind.value, item_id)
        return MutationResult(message=f"{kind.value} created", data={"id": item_id})

    async def update_item(
        self,
        kind: ContentKind,
        item_id: str,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult:
        await self._enter("update_item", kind, item_id, dict(fields))
        entries = self.items[kind]
        for index, item in enumerate(entries):
            if item.id == item_id:
                merged = {**item.model_dump(), **fields, "id": item_id}
                updated = ITEM_MODELS[kind].model_validate(merged)
                entries[index] = updated  # type: ignore[assignment]
                self.details.pop((kind, item_id), None)
                return MutationResult(message=f"{kind.value} updated", data={"id": item_id})
        raise MutationError(f"{kind.value} '{item_id}' not found", kind=kind, status_code=404)

    async def delete_item(self, kind: ContentKind, item_id: str) -> MutationResult:
        await self._enter("delete_item", kind, item_id)
        entries = self.items[kind]
        remaining = [item for item in entries if item.id != item_id]
        if len(remaining) == len(entries):
            raise MutationError(f"{kind.value} '{item_id}' not found", kind=kind, status_code=404)
        self.items[kind] = remaining
        self.details.pop((kind, item_id), None)
        return MutationResult(message=f"{kind.value} deleted")
