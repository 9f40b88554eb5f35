"""
AdminContentService - create/update/delete with cache invalidation.

Every successful mutation drops the admin list snapshot and the public bucket
for that kind plus the home snapshot, so the next read goes to the API.
Other sessions are told through `on_change`.
Authentication is not handled here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import date
from typing import Any

from src.components.cache import AdminListCache, CollectionCache
from src.domain.entities import ContentKind, LevelId, MutationResult, parse_level
from src.ports.content_api import ContentApiPort, UploadFile

from .models import SubmissionError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: dict[ContentKind, tuple[str, ...]] = {
    ContentKind.NEWS: ("title", "excerpt", "content"),
    ContentKind.PROJECTS: ("title", "description", "author"),
    ContentKind.JOURNALS: ("title", "abstract", "author", "mentor"),
    ContentKind.FACILITIES: ("name", "description"),
}

# Achievement tier only applies to this news category
ACHIEVEMENT_CATEGORY = "Prestasi"


def validate_submission(kind: ContentKind, fields: Mapping[str, Any]) -> list[SubmissionError]:
    """Check required fields and value ranges before calling the API."""
    errors: list[SubmissionError] = []

    for name in REQUIRED_FIELDS[kind]:
        value = fields.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(
                SubmissionError(
                    field=name,
                    code="required",
                    message=f"Field '{name}' is required",
                )
            )

    raw_level = fields.get("jenjang")
    if raw_level is not None and parse_level(raw_level) is None:
        errors.append(
            SubmissionError(
                field="jenjang",
                code="invalid_value",
                message="Field 'jenjang' must be one of: "
                + ", ".join(level.value for level in LevelId),
            )
        )

    if kind == ContentKind.JOURNALS and fields.get("score") is not None:
        try:
            score = float(fields["score"])
        except (TypeError, ValueError):
            score = -1
        if not 0 <= score <= 100:
            errors.append(
                SubmissionError(
                    field="score",
                    code="out_of_range",
                    message="Field 'score' must be a number between 0 and 100",
                )
            )

    return errors


def prepare_fields(kind: ContentKind, fields: Mapping[str, Any], today: date) -> dict[str, Any]:
    """Normalise a submission the way the API expects it."""
    prepared = dict(fields)
    prepared.setdefault("date", today.isoformat())

    level = parse_level(prepared.get("jenjang"))
    if level is not None:
        prepared["jenjang"] = level

    if kind == ContentKind.NEWS and prepared.get("category") != ACHIEVEMENT_CATEGORY:
        prepared.pop("level", None)
    return prepared


class AdminContentService:
    def __init__(
        self,
        api: ContentApiPort,
        admin_cache: AdminListCache,
        collection_cache: CollectionCache,
        on_change: Callable[[ContentKind], None] | None = None,
    ) -> None:
        self._api = api
        self._admin_cache = admin_cache
        self._collection_cache = collection_cache
        # Lets other sessions drop their copies of the changed kind
        self._on_change = on_change

    async def create(
        self,
        kind: ContentKind,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult:
        result = await self._api.create_item(kind, fields, files)
        self._invalidate(kind)
        logger.info("Created %s", kind.value)
        return result

    async def update(
        self,
        kind: ContentKind,
        item_id: str,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult:
        result = await self._api.update_item(kind, item_id, fields, files)
        self._invalidate(kind)
        logger.info("Updated %s %s", kind.value, item_id)
        return result

    async def delete(self, kind: ContentKind, item_id: str) -> MutationResult:
        result = await self._api.delete_item(kind, item_id)
        self._invalidate(kind)
        logger.info("Deleted %s %s", kind.value, item_id)
        return result

    def _invalidate(self, kind: ContentKind) -> None:
        self._admin_cache.invalidate(kind)
        self._collection_cache.invalidate(kind)
        self._collection_cache.invalidate_home()
        if self._on_change is not None:
            self._on_change(kind)
