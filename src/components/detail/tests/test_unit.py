"""
Detail component unit tests.

Tests for cache-then-confirm resolution, stale-on-error tolerance, related
items and unmount handling.
"""

from __future__ import annotations

import asyncio

import pytest

from src.adapters.memory_api import InMemoryContentApi
from src.components.cache import CollectionCache
from src.components.detail import (
    DetailInput,
    DetailResolver,
    DetailState,
    DetailView,
    pick_related,
    run_detail,
)
from src.domain.entities import ContentKind, JournalItem, LevelId, NewsItem
from src.domain.errors import FetchError, NotFoundError


def _journals() -> list[JournalItem]:
    return [
        JournalItem(id="j1", title="Zakat Digital", abstract="ringkas", jenjang=LevelId.KAMPUS),
        JournalItem(id="j2", title="Bio-Gas", jenjang=LevelId.SMA),
        JournalItem(id="j3", title="Hidroponik", jenjang=LevelId.SMP),
        JournalItem(id="j4", title="Literasi Digital", jenjang=LevelId.MI),
        JournalItem(id="j5", title="Energi Surya", jenjang=LevelId.SMA),
    ]


@pytest.fixture
def api() -> InMemoryContentApi:
    api = InMemoryContentApi(items={ContentKind.JOURNALS: _journals()})
    # The detail endpoint carries more than the list summary
    api.details[(ContentKind.JOURNALS, "j1")] = JournalItem(
        id="j1",
        title="Zakat Digital",
        abstract="Studi efisiensi pengelolaan zakat via aplikasi.",
        jenjang=LevelId.KAMPUS,
        score=98,
    )
    return api


@pytest.fixture
def cache(api: InMemoryContentApi) -> CollectionCache:
    return CollectionCache(api)


@pytest.fixture
def resolver(api: InMemoryContentApi, cache: CollectionCache) -> DetailResolver:
    return DetailResolver(api, cache, related_count=3)


class TestPickRelated:
    def test_excludes_current_and_limits(self) -> None:
        related = pick_related(_journals(), "j2", limit=3)
        assert [r.id for r in related] == ["j1", "j3", "j4"]

    def test_short_list(self) -> None:
        assert pick_related(_journals()[:1], "j1") == []


class TestResolve:
    def test_cache_hit_is_immediate_then_confirmed(
        self, cache: CollectionCache, resolver: DetailResolver
    ) -> None:
        async def scenario() -> None:
            await cache.get_items(ContentKind.JOURNALS)
            resolution = resolver.resolve(ContentKind.JOURNALS, "j1")

            # Available without awaiting anything
            assert resolution.immediate is not None
            assert resolution.immediate.id == "j1"
            assert not resolution.confirmed.done()

            confirmed = await resolution.confirmed
            assert confirmed.id == "j1"
            assert confirmed.score == 98

        asyncio.run(scenario())

    def test_cache_miss_has_no_immediate(self, resolver: DetailResolver) -> None:
        async def scenario() -> None:
            resolution = resolver.resolve(ContentKind.JOURNALS, "j1")
            assert resolution.immediate is None
            await resolution.confirmed
            await resolution.related_update

        asyncio.run(scenario())

    def test_related_from_paginated_bucket(
        self, api: InMemoryContentApi, cache: CollectionCache, resolver: DetailResolver
    ) -> None:
        async def scenario() -> None:
            await cache.get_items(ContentKind.JOURNALS)
            resolution = resolver.resolve(ContentKind.JOURNALS, "j1")
            assert [r.id for r in resolution.related] == ["j2", "j3", "j4"]
            assert resolution.related_update is None
            await resolution.confirmed

        asyncio.run(scenario())
        assert api.call_count("list_items") == 1

    def test_related_seeded_from_home_then_fetched(
        self, api: InMemoryContentApi, cache: CollectionCache, resolver: DetailResolver
    ) -> None:
        async def scenario() -> None:
            await cache.get_home()
            resolution = resolver.resolve(ContentKind.JOURNALS, "j1")

            # Home journals give an immediate hit and a related seed
            assert resolution.immediate is not None
            assert [r.id for r in resolution.related] == ["j2", "j3", "j4"]
            assert resolution.related_update is not None

            related = await resolution.related_update
            assert [r.id for r in related] == ["j2", "j3", "j4"]
            await resolution.confirmed

        asyncio.run(scenario())


class TestDetailView:
    def test_transitions_with_cache(
        self, cache: CollectionCache, resolver: DetailResolver
    ) -> None:
        async def scenario() -> DetailView:
            await cache.get_items(ContentKind.JOURNALS)
            view = DetailView(resolver, ContentKind.JOURNALS, "j1")
            await view.load()
            return view

        view = asyncio.run(scenario())

        assert view.transitions == [DetailState.INIT, DetailState.HAS_CACHE, DetailState.RESOLVED]
        assert view.item is not None
        assert view.item.score == 98
        assert view.is_stale is False

    def test_transitions_without_cache(self, resolver: DetailResolver) -> None:
        async def scenario() -> DetailView:
            view = DetailView(resolver, ContentKind.JOURNALS, "j3")
            await view.load()
            return view

        view = asyncio.run(scenario())

        assert view.transitions == [
            DetailState.INIT,
            DetailState.NO_CACHE,
            DetailState.LOADING,
            DetailState.RESOLVED,
        ]
        assert [r.id for r in view.related] == ["j1", "j2", "j4"]

    def test_failed_confirmation_keeps_cached_summary(
        self, api: InMemoryContentApi, cache: CollectionCache, resolver: DetailResolver
    ) -> None:
        async def scenario() -> DetailView:
            await cache.get_items(ContentKind.JOURNALS)
            api.fail("get_item", FetchError("HTTP 500", status_code=500))
            view = DetailView(resolver, ContentKind.JOURNALS, "j2")
            await view.load()
            return view

        view = asyncio.run(scenario())

        assert view.state == DetailState.RESOLVED
        assert view.item == cache.find_cached(ContentKind.JOURNALS, "j2")
        assert view.is_stale is True
        assert view.error is None

    def test_no_cache_and_missing_is_not_found(self, resolver: DetailResolver) -> None:
        async def scenario() -> DetailView:
            view = DetailView(resolver, ContentKind.JOURNALS, "missing")
            await view.load()
            return view

        view = asyncio.run(scenario())

        assert view.state == DetailState.NOT_FOUND
        assert isinstance(view.error, NotFoundError)
        with pytest.raises(NotFoundError):
            view.require()

    def test_late_result_ignored_after_close(
        self, api: InMemoryContentApi, resolver: DetailResolver
    ) -> None:
        async def scenario() -> DetailView:
            api.hold("get_item")
            view = DetailView(resolver, ContentKind.JOURNALS, "j1")
            view.open()
            await asyncio.sleep(0)

            view.close()
            api.release("get_item")
            await view.settle()
            return view

        view = asyncio.run(scenario())

        assert view.state == DetailState.LOADING
        assert view.item is None
        assert not view.is_alive


class TestRunDetail:
    def test_resolved_output(self, resolver: DetailResolver) -> None:
        detail_input = DetailInput(kind=ContentKind.JOURNALS, item_id="j1")
        out = asyncio.run(run_detail(detail_input, resolver))

        assert out.success
        assert out.item is not None
        assert out.item.id == "j1"

    def test_not_found_output(self) -> None:
        api = InMemoryContentApi(
            items={ContentKind.NEWS: [NewsItem(id="n1", title="Wisuda")]}
        )
        resolver = DetailResolver(api, CollectionCache(api))

        out = asyncio.run(run_detail(DetailInput(kind=ContentKind.NEWS, item_id="n9"), resolver))

        assert out.state == DetailState.NOT_FOUND
        assert out.success is False
        assert out.error is not None
