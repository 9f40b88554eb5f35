"""
Runtime configuration: environment settings and startup validation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from src.domain.entities import InstitutionProfile, Slide, Testimonial
from src.rules.loader import decode_blob
from src.rules.models import Rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Environment-provided settings (SITE_* variables)."""

    rules_path: Path = Path("rules.yaml")
    api_base_url: str | None = None
    default_level: str | None = None
    hostname: str | None = None
    ai_api_key: str | None = None
    ai_base_url: str | None = None
    slides_json: str | None = None
    testimonials_json: str | None = None
    profile_json: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        def value(name: str) -> str | None:
            raw = env.get(name)
            return raw if raw else None

        return cls(
            rules_path=Path(env.get("SITE_RULES_PATH", "rules.yaml")),
            api_base_url=value("SITE_API_BASE_URL"),
            default_level=value("SITE_DEFAULT_LEVEL"),
            hostname=value("SITE_HOSTNAME"),
            ai_api_key=value("SITE_AI_API_KEY"),
            ai_base_url=value("SITE_AI_BASE_URL"),
            slides_json=value("SITE_SLIDES_JSON"),
            testimonials_json=value("SITE_TESTIMONIALS_JSON"),
            profile_json=value("SITE_PROFILE_JSON"),
        )


def apply_marketing_overrides(rules: Rules, settings: Settings) -> tuple[Rules, list[str]]:
    """
    Replace marketing content with env-provided JSON blobs.

    Returns the effective rules plus one problem per blob that failed to
    decode; a failed blob keeps the rules.yaml value.
    """
    updates: dict[str, object] = {}
    problems: list[str] = []

    blobs: list[tuple[str, str, str | None, object]] = [
        ("slides", "SITE_SLIDES_JSON", settings.slides_json, list[Slide]),
        ("testimonials", "SITE_TESTIMONIALS_JSON", settings.testimonials_json, list[Testimonial]),
        ("profile", "SITE_PROFILE_JSON", settings.profile_json, InstitutionProfile),
    ]
    for field_name, env_name, raw, target in blobs:
        if raw is None:
            continue
        result = decode_blob(raw, target)
        if result.ok:
            updates[field_name] = result.value
        else:
            problems.append(f"{env_name}: {result.error}")

    if not updates:
        return rules, problems

    marketing = rules.marketing.model_copy(update=updates)
    return rules.model_copy(update={"marketing": marketing}), problems


def validate_ops_rules(rules: Rules, environ: Mapping[str, str] | None = None) -> list[str]:
    """
    Validate operational requirements before startup.
    Returns a list of problems; empty means ready.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in rules.ops.required_env if not env.get(name)]
    problems = []
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    if not rules.api.base_url and not env.get("SITE_API_BASE_URL"):
        problems.append("No content API base URL configured")

    return problems
