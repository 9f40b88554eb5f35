"""
Levels component unit tests.

Tests for default level resolution, the level configuration store and the
active level.
"""

from __future__ import annotations

import asyncio

import pytest

from src.adapters.memory_api import InMemoryContentApi
from src.components.levels import (
    DEFAULT_LEVEL_CONFIG,
    ActiveLevel,
    LevelConfigStore,
    ResolveLevelInput,
    resolve_default_level,
    resolve_level_with_source,
    run_fetch_config,
    run_resolve,
)
from src.domain.entities import LevelConfig, LevelId
from src.domain.errors import ConfigFetchError, EmptyConfigError, FetchError


def _config(name: str, color: str, type_label: str = "Sekolah") -> LevelConfig:
    return LevelConfig(display_name=name, theme_color=color, type_label=type_label)


@pytest.fixture
def remote_config() -> dict[LevelId, LevelConfig]:
    return {
        LevelId.UMUM: _config("Yayasan Al Hidayah", "slate", "Yayasan"),
        LevelId.MI: _config("MI Al Hidayah", "green"),
        LevelId.SMP: _config("SMP Al Hidayah", "blue"),
    }


# --- Default level resolution ---


class TestResolveDefaultLevel:
    def test_configured_default_wins(self) -> None:
        assert resolve_default_level("smp", "mi.alhidayah.sch.id") == LevelId.SMP

    def test_configured_alias_is_normalised(self) -> None:
        assert resolve_default_level("MA", None) == LevelId.SMA

    def test_hostname_first_label(self) -> None:
        level, source = resolve_level_with_source(None, "kampus.alhidayah.ac.id")
        assert level == LevelId.KAMPUS
        assert source == "hostname"

    def test_hostname_with_port_and_scheme(self) -> None:
        assert resolve_default_level(None, "mi.example.org:8080") == LevelId.MI
        assert resolve_default_level(None, "https://sma.example.org/news") == LevelId.SMA

    def test_unknown_hostname_falls_back_to_universal(self) -> None:
        level, source = resolve_level_with_source(None, "www.alhidayah.sch.id")
        assert level == LevelId.UMUM
        assert source == "fallback"

    def test_invalid_configured_default_falls_through_to_hostname(self) -> None:
        level, source = resolve_level_with_source("TK", "smp.alhidayah.sch.id")
        assert level == LevelId.SMP
        assert source == "hostname"

    @pytest.mark.parametrize("hostname", [None, "", ".", "://", "http://", ":8080", "[::1"])
    def test_malformed_hostname_never_raises(self, hostname: str | None) -> None:
        assert resolve_default_level(None, hostname) == LevelId.UMUM

    def test_level_outside_known_set_is_ignored(self) -> None:
        known = (LevelId.UMUM, LevelId.MI)
        assert resolve_default_level("SMP", "smp.example.org", known) == LevelId.UMUM

    def test_repeated_calls_are_stable(self) -> None:
        results = {resolve_default_level(" smp ", "mi.example.org") for _ in range(10)}
        assert results == {LevelId.SMP}

    def test_run_resolve_reports_source(self) -> None:
        out = run_resolve(ResolveLevelInput(configured_default="MI"))
        assert out.level == LevelId.MI
        assert out.source == "configured"


# --- Level configuration ---


class TestLevelConfigStore:
    def test_default_before_load(self) -> None:
        store = LevelConfigStore(InMemoryContentApi())

        assert not store.is_loaded
        theme = store.theme_for(LevelId.UMUM)
        assert theme.theme_color == "slate"
        assert theme.display_name

    def test_default_visible_while_fetch_is_pending(
        self, remote_config: dict[LevelId, LevelConfig]
    ) -> None:
        async def scenario() -> None:
            api = InMemoryContentApi(level_config=remote_config)
            store = LevelConfigStore(api)
            api.hold("fetch_level_config")

            task = asyncio.create_task(store.refresh())
            await asyncio.sleep(0)
            assert store.current == DEFAULT_LEVEL_CONFIG
            assert store.theme_for(LevelId.UMUM).display_name == "LPI Al Hidayah"

            api.release("fetch_level_config")
            await task
            assert store.theme_for(LevelId.UMUM).display_name == "Yayasan Al Hidayah"

        asyncio.run(scenario())

    def test_refresh_replaces_wholesale(self, remote_config: dict[LevelId, LevelConfig]) -> None:
        store = LevelConfigStore(InMemoryContentApi(level_config=remote_config))

        asyncio.run(store.refresh())

        assert store.is_loaded
        assert set(store.current) == {LevelId.UMUM, LevelId.MI, LevelId.SMP}
        # Levels only present in the default are not merged back in
        assert LevelId.KAMPUS not in store.current
        assert store.theme_for(LevelId.KAMPUS).display_name == "Yayasan Al Hidayah"

    def test_failed_refresh_keeps_previous_mapping(
        self, remote_config: dict[LevelId, LevelConfig]
    ) -> None:
        api = InMemoryContentApi(level_config=remote_config)
        store = LevelConfigStore(api)
        asyncio.run(store.refresh())

        api.fail("fetch_level_config", FetchError("down", status_code=503))
        with pytest.raises(ConfigFetchError):
            asyncio.run(store.refresh())

        assert store.is_loaded
        assert store.theme_for(LevelId.MI).theme_color == "green"

    def test_empty_mapping_is_an_error(self) -> None:
        store = LevelConfigStore(InMemoryContentApi(level_config={}))

        with pytest.raises(EmptyConfigError):
            asyncio.run(store.refresh())
        assert not store.is_loaded
        assert store.current == DEFAULT_LEVEL_CONFIG

    def test_mapping_without_universal_level_is_rejected(self) -> None:
        store = LevelConfigStore(
            InMemoryContentApi(level_config={LevelId.MI: _config("MI", "green")})
        )

        with pytest.raises(ConfigFetchError):
            asyncio.run(store.refresh())
        assert not store.is_loaded

    def test_selectable_levels_exclude_universal(self) -> None:
        store = LevelConfigStore(InMemoryContentApi())
        assert LevelId.UMUM not in store.selectable_levels()
        assert LevelId.MI in store.selectable_levels()

    def test_run_fetch_config_reports_fallback(self) -> None:
        api = InMemoryContentApi()
        api.fail("fetch_level_config", FetchError("timeout"))
        store = LevelConfigStore(api)

        out = asyncio.run(run_fetch_config(store))

        assert out.loaded is False
        assert out.error is not None
        assert out.config[LevelId.UMUM].theme_color == "slate"


# --- Active level ---


class TestActiveLevel:
    def test_select_known_level(self) -> None:
        active = ActiveLevel(LevelId.UMUM, LevelConfigStore(InMemoryContentApi()))

        assert active.is_universal
        assert active.select("smp") == LevelId.SMP
        assert active.current == LevelId.SMP
        assert not active.is_universal

    def test_select_unknown_level_raises(self) -> None:
        active = ActiveLevel(LevelId.MI, LevelConfigStore(InMemoryContentApi()))

        with pytest.raises(ValueError):
            active.select("TK")
        assert active.current == LevelId.MI

    def test_select_respects_loaded_mapping(
        self, remote_config: dict[LevelId, LevelConfig]
    ) -> None:
        store = LevelConfigStore(InMemoryContentApi(level_config=remote_config))
        asyncio.run(store.refresh())
        active = ActiveLevel(LevelId.UMUM, store)

        with pytest.raises(ValueError):
            active.select(LevelId.KAMPUS)
        assert active.select(LevelId.MI) == LevelId.MI
