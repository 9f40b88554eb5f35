"""
Level resolution and level configuration.

- resolve_default_level: pick the initial active level from the configured
  override, then the hostname's first label, then the universal level.
- LevelConfigStore: holds display metadata per level. Until the authoritative
  mapping arrives, readers get DEFAULT_LEVEL_CONFIG. A fetched mapping
  replaces the default wholesale; the two are never merged.
- ActiveLevel: the mutable active level, changed only by explicit selection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from urllib.parse import urlsplit

from src.domain.entities import (
    UNIVERSAL_LEVEL,
    LevelConfig,
    LevelConfigMap,
    LevelId,
    parse_level,
)
from src.domain.errors import ConfigFetchError, EmptyConfigError, FetchError
from src.ports.content_api import ContentApiPort

from .models import LevelSource

logger = logging.getLogger(__name__)


DEFAULT_LEVEL_CONFIG: Mapping[LevelId, LevelConfig] = MappingProxyType(
    {
        LevelId.UMUM: LevelConfig(
            display_name="LPI Al Hidayah", theme_color="slate", type_label="Yayasan"
        ),
        LevelId.MI: LevelConfig(
            display_name="MI Al Hidayah", theme_color="emerald", type_label="Madrasah Ibtidaiyah"
        ),
        LevelId.SMP: LevelConfig(
            display_name="SMP Al Hidayah", theme_color="sky", type_label="Sekolah Menengah Pertama"
        ),
        LevelId.SMA: LevelConfig(
            display_name="SMA Al Hidayah", theme_color="indigo", type_label="Sekolah Menengah Atas"
        ),
        LevelId.KAMPUS: LevelConfig(
            display_name="Kampus Al Hidayah", theme_color="amber", type_label="Perguruan Tinggi"
        ),
    }
)


# --- Default level resolution ---


def _first_host_label(hostname: str | None) -> str | None:
    if not hostname or not isinstance(hostname, str):
        return None
    try:
        host = urlsplit(hostname).hostname if "//" in hostname else hostname.split(":", 1)[0]
    except ValueError:
        return None
    if not host:
        return None
    label = host.strip().split(".", 1)[0]
    return label or None


def resolve_level_with_source(
    configured_default: str | None,
    hostname: str | None,
    known: Iterable[LevelId] = tuple(LevelId),
) -> tuple[LevelId, LevelSource]:
    known_levels = frozenset(known)

    if configured_default and configured_default.strip():
        level = parse_level(configured_default)
        if level is not None and level in known_levels:
            return level, "configured"
        logger.warning("Ignoring unknown configured default level %r", configured_default)

    label = _first_host_label(hostname)
    if label is not None:
        level = parse_level(label)
        if level is not None and level in known_levels:
            return level, "hostname"

    return UNIVERSAL_LEVEL, "fallback"


def resolve_default_level(
    configured_default: str | None,
    hostname: str | None,
    known: Iterable[LevelId] = tuple(LevelId),
) -> LevelId:
    """Deterministic; never raises for malformed host information."""
    level, _ = resolve_level_with_source(configured_default, hostname, known)
    return level


# --- Level configuration ---


class LevelConfigStore:
    """Level display metadata with a baked-in fallback."""

    def __init__(
        self,
        api: ContentApiPort,
        default: Mapping[LevelId, LevelConfig] = DEFAULT_LEVEL_CONFIG,
    ) -> None:
        self._api = api
        self._default = MappingProxyType(dict(default))
        self._loaded: Mapping[LevelId, LevelConfig] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded is not None

    @property
    def current(self) -> Mapping[LevelId, LevelConfig]:
        """Authoritative mapping if loaded, otherwise the default."""
        return self._loaded if self._loaded is not None else self._default

    async def refresh(self) -> Mapping[LevelId, LevelConfig]:
        """
        Fetch the authoritative mapping and swap it in.

        Raises ConfigFetchError (or EmptyConfigError) and keeps whatever
        mapping was active before.
        """
        try:
            fetched: LevelConfigMap = await self._api.fetch_level_config()
        except FetchError as e:
            raise ConfigFetchError(f"Level configuration unavailable: {e}") from e

        if not fetched:
            raise EmptyConfigError("Level configuration is empty")
        if UNIVERSAL_LEVEL not in fetched:
            raise ConfigFetchError(
                f"Level configuration has no entry for the universal level {UNIVERSAL_LEVEL.value}"
            )

        self._loaded = MappingProxyType(dict(fetched))
        logger.info("Level configuration loaded for %d levels", len(fetched))
        return self._loaded

    def theme_for(self, level: LevelId) -> LevelConfig:
        config = self.current
        return config.get(level) or config[UNIVERSAL_LEVEL]

    def known_levels(self) -> tuple[LevelId, ...]:
        return tuple(self.current)

    def selectable_levels(self) -> tuple[LevelId, ...]:
        """Every level except the universal one."""
        return tuple(level for level in self.current if level != UNIVERSAL_LEVEL)


# --- Active level ---


class ActiveLevel:
    """Active level state, owned by the composition root."""

    def __init__(self, initial: LevelId, store: LevelConfigStore) -> None:
        self._current = initial
        self._store = store

    @property
    def current(self) -> LevelId:
        return self._current

    @property
    def is_universal(self) -> bool:
        return self._current == UNIVERSAL_LEVEL

    def select(self, level: LevelId | str) -> LevelId:
        parsed = parse_level(level)
        if parsed is None or parsed not in self._store.known_levels():
            raise ValueError(f"Unknown level: {level!r}")
        if parsed != self._current:
            logger.info("Active level changed %s -> %s", self._current.value, parsed.value)
        self._current = parsed
        return parsed
