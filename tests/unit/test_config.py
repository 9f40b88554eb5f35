"""
Environment settings, marketing overrides and startup validation.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from src.app_shell.config import Settings, apply_marketing_overrides, validate_ops_rules
from src.app_shell.context import ConfigurationError, build_context
from src.domain.entities import LevelId
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestSettings:
    def test_from_env(self) -> None:
        settings = Settings.from_env(
            {
                "SITE_RULES_PATH": "/etc/site/rules.yaml",
                "SITE_API_BASE_URL": "https://api.alhidayah.sch.id",
                "SITE_DEFAULT_LEVEL": "smp",
                "SITE_AI_API_KEY": "",
            }
        )

        assert settings.rules_path == Path("/etc/site/rules.yaml")
        assert settings.api_base_url == "https://api.alhidayah.sch.id"
        assert settings.default_level == "smp"
        # Empty values count as unset
        assert settings.ai_api_key is None
        assert settings.hostname is None

    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings.rules_path == Path("rules.yaml")
        assert settings.slides_json is None


class TestMarketingOverrides:
    def test_no_blobs_keeps_rules(self, rules: Rules) -> None:
        effective, problems = apply_marketing_overrides(rules, Settings())

        assert effective is rules
        assert problems == []

    def test_valid_blobs_replace_rules_values(self, rules: Rules) -> None:
        settings = Settings(
            slides_json='[{"image": "banner.jpg", "title": "PPDB 2025"}]',
            profile_json='{"name": "Yayasan Al Hidayah", "tagline": "Berilmu"}',
        )

        effective, problems = apply_marketing_overrides(rules, settings)

        assert problems == []
        assert [s.title for s in effective.marketing.slides] == ["PPDB 2025"]
        assert effective.marketing.profile is not None
        assert effective.marketing.profile.name == "Yayasan Al Hidayah"
        # Untouched blob keeps the rules.yaml value
        assert effective.marketing.testimonials == rules.marketing.testimonials

    def test_bad_blob_is_reported_and_ignored(self, rules: Rules) -> None:
        settings = Settings(testimonials_json="not json")

        effective, problems = apply_marketing_overrides(rules, settings)

        assert effective.marketing.testimonials == rules.marketing.testimonials
        assert len(problems) == 1
        assert problems[0].startswith("SITE_TESTIMONIALS_JSON: invalid JSON")


class TestValidateOpsRules:
    def test_ready(self, rules: Rules) -> None:
        assert validate_ops_rules(rules, {}) == []

    def test_missing_required_env(self, rules: Rules) -> None:
        strict = rules.model_copy(
            update={"ops": rules.ops.model_copy(update={"required_env": ["SITE_AI_API_KEY"]})}
        )

        problems = validate_ops_rules(strict, {})

        assert problems == ["Missing required environment variables: SITE_AI_API_KEY"]

    def test_missing_base_url(self, rules: Rules) -> None:
        no_url = rules.model_copy(update={"api": rules.api.model_copy(update={"base_url": ""})})

        assert validate_ops_rules(no_url, {}) == ["No content API base URL configured"]
        assert validate_ops_rules(no_url, {"SITE_API_BASE_URL": "http://api"}) == []


class TestBuildContext:
    def test_missing_rules_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            build_context(Settings(rules_path=tmp_path / "absent.yaml"))

    def test_invalid_rules_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("project: {}\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            build_context(Settings(rules_path=path))

    def test_builds_context_with_configured_level(self) -> None:
        context = build_context(
            Settings(
                rules_path=PROJECT_ROOT / "rules.yaml",
                default_level="MA",
                api_base_url="http://127.0.0.1:9",
            )
        )
        try:
            assert context.initial_level == LevelId.SMA
            assert not context.assistant.is_available
        finally:
            asyncio.run(context.aclose())

    def test_level_from_hostname(self) -> None:
        context = build_context(
            Settings(rules_path=PROJECT_ROOT / "rules.yaml", hostname="mi.alhidayah.sch.id")
        )
        try:
            assert context.initial_level == LevelId.MI
            assert context.sessions.open().active_level.current == LevelId.MI
        finally:
            asyncio.run(context.aclose())
