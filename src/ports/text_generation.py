from typing import Protocol


class TextGenerationPort(Protocol):
    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float,
        system_instruction: str | None = None,
    ) -> str:
        """Return the generated text (may be empty). Raise AssistantError on failure."""
        ...
