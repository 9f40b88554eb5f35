"""
Error taxonomy shared by adapters, components and the presentation layer.

Read paths raise FetchError (or DecodeError) and leave cached state untouched;
the caller decides how to report it. Nothing here retries.
"""

from __future__ import annotations

from src.domain.entities import ContentKind


class SiteError(Exception):
    """Base class for all site errors."""


class FetchError(SiteError):
    """Transport failure or non-2xx response from the content API."""

    def __init__(
        self,
        message: str,
        *,
        kind: ContentKind | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class DecodeError(FetchError):
    """Response body was not JSON or did not match the expected envelope/schema."""


class MutationError(FetchError):
    """Create/update/delete call rejected by the content API."""


class ConfigFetchError(SiteError):
    """Level configuration could not be fetched or decoded."""


class EmptyConfigError(ConfigFetchError):
    """Level configuration endpoint answered with an empty mapping."""


class NotFoundError(SiteError):
    """Detail lookup found neither a cached nor an authoritative record."""

    def __init__(self, kind: ContentKind, item_id: str) -> None:
        super().__init__(f"{kind.value} item '{item_id}' not found")
        self.kind = kind
        self.item_id = item_id


class AssistantError(SiteError):
    """Text generation service failed."""
