"""
HTTP adapter for the remote content API.

Implements ContentApiPort on top of httpx.AsyncClient.

Wire contract:
- Reads answer `{"data": ...}` envelopes. /categories, /jenjang and /home may
  also answer a bare body.
- Mutations send multipart form data and answer `{"message": ..., "data": ...}`.
- Non-2xx -> FetchError (server `message` when present), non-JSON or schema
  mismatch -> DecodeError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from src.domain.entities import (
    ITEM_MODELS,
    UNIVERSAL_LEVEL,
    CategoryData,
    ContentItem,
    ContentKind,
    HomeStats,
    JournalItem,
    LevelConfig,
    LevelConfigMap,
    LevelId,
    MutationResult,
    parse_level,
)
from src.domain.errors import DecodeError, FetchError, MutationError
from src.ports.content_api import UploadFile
from src.rules.models import ApiRules

logger = logging.getLogger(__name__)

_STATS_ADAPTER = TypeAdapter(HomeStats)

_MISSING = object()


class HttpContentApi:
    """ContentApiPort backed by httpx."""

    def __init__(
        self,
        rules: ApiRules,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rules = rules
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=(base_url or rules.base_url).rstrip("/"),
            timeout=rules.timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # --- Reads ---

    async def list_items(
        self,
        kind: ContentKind,
        limit: int | None = None,
        jenjang: LevelId | None = None,
    ) -> list[ContentItem]:
        url = self._rules.path_for(kind)
        if limit is not None:
            url = f"{url}/limit/{limit}"
            if jenjang is not None and jenjang != UNIVERSAL_LEVEL:
                url = f"{url}/{jenjang.value.lower()}"

        data = await self._get_data(url, kind=kind)
        return self._decode_items(kind, data)

    async def get_item(self, kind: ContentKind, item_id: str) -> ContentItem:
        url = f"{self._rules.path_for(kind)}/{item_id}"
        data = await self._get_data(url, kind=kind)
        if isinstance(data, list):
            # Some endpoints wrap the single record in a one-element list
            if len(data) != 1:
                raise DecodeError(f"Expected one {kind.value} record, got {len(data)}", kind=kind)
            data = data[0]
        return self._decode_item(kind, data)

    async def list_best_journals(self, limit: int) -> list[JournalItem]:
        url = f"{self._rules.best_journals_path}/limit/{limit}"
        data = await self._get_data(url, kind=ContentKind.JOURNALS)
        return self._decode_items(ContentKind.JOURNALS, data)  # type: ignore[return-value]

    async def fetch_categories(self) -> CategoryData:
        data = await self._get_data(self._rules.categories_path, allow_bare=True)
        try:
            return CategoryData.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"Malformed categories payload: {e}") from e

    async def fetch_level_config(self) -> LevelConfigMap:
        data = await self._get_data(self._rules.levels_path, allow_bare=True)
        if not isinstance(data, dict):
            raise DecodeError("Level configuration must be a mapping")

        config: LevelConfigMap = {}
        for raw_key, raw_value in data.items():
            level = parse_level(raw_key)
            if level is None:
                logger.warning("Ignoring unknown level %r in level configuration", raw_key)
                continue
            try:
                config[level] = LevelConfig.model_validate(raw_value)
            except ValidationError as e:
                raise DecodeError(f"Malformed configuration for level {raw_key}: {e}") from e
        return config

    async def fetch_home_stats(self) -> HomeStats:
        data = await self._get_data(self._rules.home_path, allow_bare=True)
        stats = data.get("stats", {}) if isinstance(data, dict) else _MISSING
        if stats is _MISSING:
            raise DecodeError("Home payload must be a mapping")
        try:
            return _STATS_ADAPTER.validate_python(stats)
        except ValidationError as e:
            raise DecodeError(f"Malformed home stats: {e}") from e

    # --- Mutations ---

    async def create_item(
        self,
        kind: ContentKind,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult:
        return await self._mutate("POST", self._rules.path_for(kind), kind, fields, files)

    async def update_item(
        self,
        kind: ContentKind,
        item_id: str,
        fields: Mapping[str, Any],
        files: Mapping[str, Sequence[UploadFile]] | None = None,
    ) -> MutationResult:
        url = f"{self._rules.path_for(kind)}/{item_id}"
        return await self._mutate("PUT", url, kind, fields, files)

    async def delete_item(self, kind: ContentKind, item_id: str) -> MutationResult:
        url = f"{self._rules.path_for(kind)}/{item_id}"
        return await self._mutate("DELETE", url, kind, None, None)

    # --- Helpers ---

    async def _get_data(
        self,
        url: str,
        *,
        kind: ContentKind | None = None,
        allow_bare: bool = False,
    ) -> Any:
        label = kind.value if kind else url
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {label}: {e}", kind=kind) from e

        payload = self._parse_json(response, kind, label)
        if response.is_error:
            raise FetchError(
                _server_message(payload)
                or f"Failed to fetch {label} (HTTP {response.status_code})",
                kind=kind,
                status_code=response.status_code,
            )

        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        if allow_bare:
            return payload
        raise DecodeError(f"Response for {label} is missing the data envelope", kind=kind)

    async def _mutate(
        self,
        method: str,
        url: str,
        kind: ContentKind,
        fields: Mapping[str, Any] | None,
        files: Mapping[str, Sequence[UploadFile]] | None,
    ) -> MutationResult:
        request_kwargs: dict[str, Any] = {}
        if fields is not None:
            request_kwargs["data"] = _form_fields(fields)
        if files:
            request_kwargs["files"] = [
                (field_name, upload) for field_name, uploads in files.items() for upload in uploads
            ]

        try:
            response = await self._client.request(method, url, **request_kwargs)
        except httpx.HTTPError as e:
            raise MutationError(f"Failed to save {kind.value}: {e}", kind=kind) from e

        payload = self._parse_json(response, kind, kind.value) if response.content else {}
        if response.is_error:
            raise MutationError(
                _server_message(payload)
                or f"Failed to save {kind.value} (HTTP {response.status_code})",
                kind=kind,
                status_code=response.status_code,
            )

        try:
            return MutationResult.model_validate(payload if isinstance(payload, dict) else {})
        except ValidationError as e:
            raise DecodeError(
                f"Malformed mutation response for {kind.value}: {e}", kind=kind
            ) from e

    @staticmethod
    def _parse_json(response: httpx.Response, kind: ContentKind | None, label: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            if response.is_error:
                # Plain-text error pages still report as transport failures
                raise FetchError(
                    f"Failed to fetch {label} (HTTP {response.status_code})",
                    kind=kind,
                    status_code=response.status_code,
                ) from e
            raise DecodeError(f"Response for {label} is not JSON", kind=kind) from e

    @staticmethod
    def _decode_item(kind: ContentKind, data: Any) -> ContentItem:
        try:
            return ITEM_MODELS[kind].model_validate(data)  # type: ignore[return-value]
        except ValidationError as e:
            raise DecodeError(f"Malformed {kind.value} record: {e}", kind=kind) from e

    @classmethod
    def _decode_items(cls, kind: ContentKind, data: Any) -> list[ContentItem]:
        if not isinstance(data, list):
            raise DecodeError(f"Expected a list of {kind.value}", kind=kind)
        return [cls._decode_item(kind, entry) for entry in data]


def _server_message(payload: Any) -> str | None:
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("detail")
        if isinstance(message, str) and message:
            return message
    return None


def _form_fields(fields: Mapping[str, Any]) -> dict[str, str]:
    """Flatten submission fields into multipart-friendly strings."""
    form: dict[str, str] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, LevelId):
            form[key] = value.value.lower()
        elif isinstance(value, bool):
            form[key] = "true" if value else "false"
        else:
            form[key] = str(value)
    return form
