"""
OpenAITextGenerator tests with a stand-in chat completions client.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import openai
import pytest

from src.adapters.openai_text import OpenAITextGenerator
from src.domain.errors import AssistantError


class FakeCompletions:
    def __init__(self, content: str | None = "Wa'alaikumsalam") -> None:
        self.content = content
        self.error: Exception | None = None
        self.requests: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.content is None:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def completions() -> FakeCompletions:
    return FakeCompletions()


@pytest.fixture
def generator(completions: FakeCompletions) -> OpenAITextGenerator:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAITextGenerator("test-key", client=client)  # type: ignore[arg-type]


def test_system_instruction_goes_first(
    generator: OpenAITextGenerator, completions: FakeCompletions
) -> None:
    text = asyncio.run(
        generator.generate(
            "Assalamualaikum",
            model="gemini-3-flash-preview",
            temperature=0.7,
            system_instruction="Anda asisten sekolah.",
        )
    )

    assert text == "Wa'alaikumsalam"
    request = completions.requests[0]
    assert request["model"] == "gemini-3-flash-preview"
    assert request["temperature"] == 0.7
    assert request["messages"] == [
        {"role": "system", "content": "Anda asisten sekolah."},
        {"role": "user", "content": "Assalamualaikum"},
    ]


def test_without_system_instruction(
    generator: OpenAITextGenerator, completions: FakeCompletions
) -> None:
    asyncio.run(generator.generate("Tulis berita", model="m", temperature=0.8))
    assert [m["role"] for m in completions.requests[0]["messages"]] == ["user"]


def test_no_choices_returns_empty(
    generator: OpenAITextGenerator, completions: FakeCompletions
) -> None:
    completions.content = None
    assert asyncio.run(generator.generate("Halo", model="m", temperature=0.7)) == ""


def test_client_error_becomes_assistant_error(
    generator: OpenAITextGenerator, completions: FakeCompletions
) -> None:
    completions.error = openai.OpenAIError("quota exceeded")

    with pytest.raises(AssistantError, match="quota exceeded"):
        asyncio.run(generator.generate("Halo", model="m", temperature=0.7))
