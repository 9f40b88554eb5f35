"""
Visitor sessions.

Each browser session gets its own active level, collection cache and admin
snapshot store; level configuration, the content API and the assistant are
shared by every session. Sessions are kept in memory, least recently used
first out once the registry is full.
"""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from src.components.admin import AdminContentService
from src.components.cache import AdminListCache, CollectionCache
from src.components.detail import DetailResolver
from src.components.levels import ActiveLevel
from src.domain.entities import ContentKind
from src.ports.session_store import SessionStorePort

logger = logging.getLogger(__name__)


@dataclass
class VisitorSession:
    id: str
    active_level: ActiveLevel
    cache: CollectionCache
    admin_cache: AdminListCache
    detail_resolver: DetailResolver
    admin_service: AdminContentService
    store: SessionStorePort


class SessionRegistry:
    """In-memory visitor sessions - suitable for single-process deployments."""

    def __init__(
        self,
        factory: Callable[[str], VisitorSession],
        max_sessions: int = 1000,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, VisitorSession] = OrderedDict()

    def get(self, session_id: str | None) -> VisitorSession | None:
        """Existing session by id; marks it as recently used."""
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def open(self) -> VisitorSession:
        """Start a new session, evicting the least recently used past the limit."""
        session = self._factory(secrets.token_urlsafe(16))
        self._sessions[session.id] = session
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug("Evicted visitor session %s", evicted)
        return session

    def invalidate(self, kind: ContentKind) -> None:
        """Drop cached data for a kind in every session (after a mutation)."""
        for session in self._sessions.values():
            session.cache.invalidate(kind)
            session.cache.invalidate_home()
            session.admin_cache.invalidate(kind)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
