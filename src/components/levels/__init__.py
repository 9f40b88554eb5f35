"""
Levels component - education level resolution and configuration.
"""

from ._impl import (
    DEFAULT_LEVEL_CONFIG,
    ActiveLevel,
    LevelConfigStore,
    resolve_default_level,
    resolve_level_with_source,
)
from .component import run_fetch_config, run_resolve
from .models import FetchLevelConfigOutput, LevelSource, ResolveLevelInput, ResolveLevelOutput

__all__ = [
    # Component entry points
    "run_resolve",
    "run_fetch_config",
    # Models
    "ResolveLevelInput",
    "ResolveLevelOutput",
    "FetchLevelConfigOutput",
    "LevelSource",
    # Implementation
    "ActiveLevel",
    "LevelConfigStore",
    "resolve_default_level",
    "resolve_level_with_source",
    # Constants
    "DEFAULT_LEVEL_CONFIG",
]
