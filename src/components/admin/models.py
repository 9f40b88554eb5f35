"""
Admin component - Data models.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import ContentKind
from src.ports.content_api import UploadFile

# --- Validation Errors ---


@dataclass(frozen=True)
class SubmissionError:
    """Validation error with actionable message."""

    field: str
    code: str
    message: str


# --- Input Models ---


@dataclass(frozen=True)
class CreateContentInput:
    kind: ContentKind
    fields: Mapping[str, Any]
    files: Mapping[str, Sequence[UploadFile]] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateContentInput:
    kind: ContentKind
    item_id: str
    fields: Mapping[str, Any]
    files: Mapping[str, Sequence[UploadFile]] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteContentInput:
    kind: ContentKind
    item_id: str


# --- Output Models ---


@dataclass(frozen=True)
class MutationOutput:
    kind: ContentKind
    success: bool
    message: str = ""
    item_id: str | None = None
    errors: tuple[SubmissionError, ...] = ()
