"""
Levels component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from src.domain.entities import LevelConfigMap, LevelId

LevelSource = Literal["configured", "hostname", "fallback"]


@dataclass(frozen=True)
class ResolveLevelInput:
    """Inputs read once at application start."""

    configured_default: str | None = None
    hostname: str | None = None


@dataclass(frozen=True)
class ResolveLevelOutput:
    level: LevelId
    source: LevelSource


@dataclass(frozen=True)
class FetchLevelConfigOutput:
    """Result of a level configuration refresh."""

    config: LevelConfigMap
    loaded: bool
    error: str | None = None
