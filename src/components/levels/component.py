"""
Levels component - Active level and level configuration.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.domain.entities import LevelId
from src.domain.errors import ConfigFetchError

from ._impl import LevelConfigStore, resolve_level_with_source
from .models import FetchLevelConfigOutput, ResolveLevelInput, ResolveLevelOutput

logger = logging.getLogger(__name__)


def run_resolve(
    input_data: ResolveLevelInput,
    known: Iterable[LevelId] = tuple(LevelId),
) -> ResolveLevelOutput:
    """Resolve the initial active level."""
    level, source = resolve_level_with_source(
        input_data.configured_default,
        input_data.hostname,
        known,
    )
    return ResolveLevelOutput(level=level, source=source)


async def run_fetch_config(store: LevelConfigStore) -> FetchLevelConfigOutput:
    """Refresh level configuration; readers keep the fallback on failure."""
    try:
        config = await store.refresh()
    except ConfigFetchError as e:
        logger.warning("Using default level configuration: %s", e)
        return FetchLevelConfigOutput(
            config=dict(store.current),
            loaded=store.is_loaded,
            error=str(e),
        )

    return FetchLevelConfigOutput(config=dict(config), loaded=True)
