from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

import yaml
from pydantic import TypeAdapter, ValidationError

from src.rules.models import Rules

T = TypeVar("T")


def load_rules(path: Path) -> Rules:
    """
    Load and validate the site rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path, encoding="utf-8") as f:
        content = f.read()

    # Strip a markdown ```yaml fence if the file carries one
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break

        if in_block:
            yaml_lines.append(line)

    clean_content = "\n".join(yaml_lines) if found_block else content

    try:
        data = yaml.safe_load(clean_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


# --- Configuration blobs ---


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Outcome of decoding a JSON configuration blob."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def decode_blob(raw: str | None, target: type[T] | object) -> DecodeResult[T]:
    """
    Decode a JSON blob (e.g. an env var holding slides) into a typed value.

    `target` is anything pydantic's TypeAdapter accepts (a model, list[Model]).
    Failures come back as a DecodeResult carrying the reason.
    """
    if raw is None or not raw.strip():
        return DecodeResult(error="empty blob")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return DecodeResult(error=f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")

    try:
        return DecodeResult(value=TypeAdapter(target).validate_python(data))
    except ValidationError as e:
        first = e.errors()[0]["msg"]
        return DecodeResult(error=f"schema mismatch: {e.error_count()} error(s): {first}")
