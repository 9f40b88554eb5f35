"""
Assistant component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ChatRole = Literal["user", "bot"]


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    text: str


@dataclass(frozen=True)
class ChatInput:
    message: str


@dataclass(frozen=True)
class ChatOutput:
    reply: ChatMessage
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class DraftInput:
    brief: str


@dataclass(frozen=True)
class DraftOutput:
    text: str
    success: bool
    error: str | None = None
