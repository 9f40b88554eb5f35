"""
Assistant component - Chat and drafting entry points.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging

from src.domain.errors import AssistantError

from ._impl import AssistantService
from .models import ChatInput, ChatMessage, ChatOutput, DraftInput, DraftOutput

logger = logging.getLogger(__name__)


async def run_chat(input_data: ChatInput, service: AssistantService) -> ChatOutput:
    """Answer a chat message; generator failures become a polite reply."""
    if not input_data.message.strip():
        return ChatOutput(
            reply=ChatMessage(role="bot", text=""),
            success=False,
            error="empty message",
        )

    try:
        text = await service.chat(input_data.message)
    except AssistantError as e:
        logger.warning("Assistant chat failed: %s", e)
        return ChatOutput(
            reply=ChatMessage(role="bot", text=service.error_reply),
            success=False,
            error=str(e),
        )

    return ChatOutput(reply=ChatMessage(role="bot", text=text), success=True)


async def run_draft(input_data: DraftInput, service: AssistantService) -> DraftOutput:
    """Draft a news article for the admin editor."""
    if not input_data.brief.strip():
        return DraftOutput(text="", success=False, error="brief is required")

    try:
        text = await service.draft_news_article(input_data.brief)
    except AssistantError as e:
        logger.warning("News draft failed: %s", e)
        return DraftOutput(text="", success=False, error=str(e))

    return DraftOutput(text=text, success=True)
