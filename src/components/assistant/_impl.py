"""
AssistantService - school chat assistant and news drafting.

Thin wrapper over a TextGenerationPort: no retries, no streaming. Without a
generator every call answers with the configured "unavailable" text.
"""

from __future__ import annotations

import logging

from src.ports.text_generation import TextGenerationPort
from src.rules.models import AssistantRules

logger = logging.getLogger(__name__)


class AssistantService:
    def __init__(self, rules: AssistantRules, generator: TextGenerationPort | None = None) -> None:
        self._rules = rules
        self._generator = generator

    @property
    def error_reply(self) -> str:
        return self._rules.error_reply

    @property
    def is_available(self) -> bool:
        return self._generator is not None

    async def chat(self, message: str) -> str:
        """Answer a visitor question. Raises AssistantError on generator failure."""
        if self._generator is None:
            return self._rules.unavailable_reply

        text = await self._generator.generate(
            message,
            model=self._rules.chat_model,
            temperature=self._rules.chat_temperature,
            system_instruction=self._rules.system_instruction,
        )
        return text.strip() or self._rules.empty_reply

    async def draft_news_article(self, brief: str) -> str:
        """Draft a full news article from a short activity description."""
        if self._generator is None:
            return self._rules.draft_unavailable_reply

        prompt = self._rules.draft_prompt_template.format(brief=brief.strip())
        text = await self._generator.generate(
            prompt,
            model=self._rules.draft_model,
            temperature=self._rules.draft_temperature,
        )
        return text.strip() or self._rules.draft_empty_reply
