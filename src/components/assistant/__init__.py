"""
Assistant component - AI text generation for visitors and editors.
"""

from ._impl import AssistantService
from .component import run_chat, run_draft
from .models import ChatInput, ChatMessage, ChatOutput, ChatRole, DraftInput, DraftOutput

__all__ = [
    "run_chat",
    "run_draft",
    "ChatInput",
    "ChatMessage",
    "ChatOutput",
    "ChatRole",
    "DraftInput",
    "DraftOutput",
    "AssistantService",
]
