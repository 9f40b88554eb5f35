from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from src.adapters.clock import SystemClock
from src.adapters.http_api import HttpContentApi
from src.adapters.openai_text import OpenAITextGenerator
from src.adapters.session_store import InMemorySessionStore
from src.app_shell.config import Settings, apply_marketing_overrides, validate_ops_rules
from src.app_shell.sessions import SessionRegistry, VisitorSession
from src.components.admin import AdminContentService
from src.components.assistant import AssistantService
from src.components.cache import AdminListCache, CollectionCache
from src.components.detail import DetailResolver
from src.components.levels import (
    ActiveLevel,
    LevelConfigStore,
    ResolveLevelInput,
    run_resolve,
)
from src.domain.entities import LevelId
from src.ports.clock import ClockPort
from src.ports.content_api import ContentApiPort
from src.ports.session_store import SessionStorePort
from src.ports.text_generation import TextGenerationPort
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Startup configuration is unusable."""


@dataclass
class SiteContext:
    """
    Composition root: one per process.

    Owns what every visitor shares (rules, content API, level configuration,
    assistant). Per-visitor state (active level, caches) lives in the
    session registry; pages receive what they need from a session instead
    of reading ambient state.
    """

    rules: Rules
    api: ContentApiPort
    levels: LevelConfigStore
    assistant: AssistantService
    clock: ClockPort
    initial_level: LevelId
    session_store_factory: Callable[[], SessionStorePort] = InMemorySessionStore
    sessions: SessionRegistry = field(init=False, repr=False)
    _closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.sessions = SessionRegistry(self._build_session, self.rules.sessions.max_sessions)

    def _build_session(self, session_id: str) -> VisitorSession:
        store = self.session_store_factory()
        cache = CollectionCache(self.api, self.rules.cache, self.rules.marketing)
        admin_cache = AdminListCache(
            self.api, store, self.clock, self.rules.cache.admin_ttl_seconds
        )
        return VisitorSession(
            id=session_id,
            active_level=ActiveLevel(self.initial_level, self.levels),
            cache=cache,
            admin_cache=admin_cache,
            detail_resolver=DetailResolver(self.api, cache, self.rules.cache.related_count),
            admin_service=AdminContentService(
                self.api, admin_cache, cache, on_change=self.sessions.invalidate
            ),
            store=store,
        )

    @classmethod
    def create(
        cls,
        rules: Rules,
        settings: Settings | None = None,
        *,
        api: ContentApiPort | None = None,
        generator: TextGenerationPort | None = None,
        session_store_factory: Callable[[], SessionStorePort] | None = None,
        clock: ClockPort | None = None,
    ) -> SiteContext:
        settings = settings or Settings()
        closers: list[Callable[[], Awaitable[None]]] = []

        # Adapters
        if api is None:
            http_api = HttpContentApi(rules.api, base_url=settings.api_base_url)
            closers.append(http_api.aclose)
            api = http_api

        if generator is None and settings.ai_api_key:
            openai_generator = OpenAITextGenerator(
                settings.ai_api_key, base_url=settings.ai_base_url
            )
            closers.append(openai_generator.aclose)
            generator = openai_generator

        # Levels
        resolved = run_resolve(
            ResolveLevelInput(
                configured_default=settings.default_level,
                hostname=settings.hostname,
            ),
            known=rules.levels.known,
        )
        logger.info("Initial level %s (%s)", resolved.level.value, resolved.source)

        return cls(
            rules=rules,
            api=api,
            levels=LevelConfigStore(api),
            assistant=AssistantService(rules.assistant, generator),
            clock=clock or SystemClock(),
            initial_level=resolved.level,
            session_store_factory=session_store_factory or InMemorySessionStore,
            _closers=closers,
        )

    async def aclose(self) -> None:
        for close in self._closers:
            await close()
        self._closers.clear()


def build_context(settings: Settings | None = None) -> SiteContext:
    """Load rules, apply env overrides, validate, and wire the context."""
    settings = settings or Settings.from_env()

    try:
        rules = load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(str(e)) from e

    rules, blob_problems = apply_marketing_overrides(rules, settings)
    for problem in blob_problems:
        logger.error("Ignoring marketing override %s", problem)

    problems = validate_ops_rules(rules)
    if problems:
        raise ConfigurationError("; ".join(problems))

    return SiteContext.create(rules, settings)
