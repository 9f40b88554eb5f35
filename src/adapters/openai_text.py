"""
OpenAI-compatible text generation adapter.

Implements TextGenerationPort with openai.AsyncOpenAI. Point `base_url` at
any OpenAI-compatible endpoint (Gemini exposes one) to swap providers.
"""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from src.domain.errors import AssistantError

logger = logging.getLogger(__name__)


class OpenAITextGenerator:
    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float,
        system_instruction: str | None = None,
    ) -> str:
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,  # type: ignore[arg-type]
                temperature=temperature,
            )
        except openai.OpenAIError as e:
            raise AssistantError(f"Text generation failed: {e}") from e

        if not response.choices:
            logger.warning("Text generation returned no choices (model %s)", model)
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self._client.close()
