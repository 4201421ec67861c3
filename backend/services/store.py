"""Session store for pending continue purchases. Keyed by a 64-hex-character token."""

from __future__ import annotations

import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Protocol

from models.session import PurchaseSession

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


class SessionStore(Protocol):
    def create(self, level: int) -> str: ...

    def get(self, token: str) -> PurchaseSession | None: ...

    def set(self, token: str, session: PurchaseSession) -> None: ...

    def evict_expired(self) -> int: ...


class InMemorySessionStore:
    """
    Process-local session table with optional expiry.

    Sessions older than ``ttl_seconds`` are treated as absent by ``get`` and
    dropped by ``evict_expired``. A ttl of 0 keeps sessions for the process
    lifetime. Everything is lost on restart.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[str, PurchaseSession] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.ttl_seconds = ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _expired(self, session: PurchaseSession, now: float) -> bool:
        return self.ttl_seconds > 0 and now - session.created_at >= self.ttl_seconds

    def create(self, level: int) -> str:
        session = PurchaseSession(level=level, created_at=self._clock())
        with self._lock:
            token = secrets.token_hex(TOKEN_BYTES)
            while token in self._sessions:
                token = secrets.token_hex(TOKEN_BYTES)
            self._sessions[token] = session
        return token

    def get(self, token: str) -> PurchaseSession | None:
        with self._lock:
            session = self._sessions.get(token)
            if session is None or self._expired(session, self._clock()):
                return None
            # Copy so callers cannot flip flags without going through set().
            return replace(session)

    def set(self, token: str, session: PurchaseSession) -> None:
        with self._lock:
            current = self._sessions.get(token)
            if current is not None and current.purchased and not session.purchased:
                raise ValueError("purchased flag cannot revert to False")
            self._sessions[token] = replace(session)

    def evict_expired(self) -> int:
        if self.ttl_seconds <= 0:
            return 0
        now = self._clock()
        with self._lock:
            stale = [t for t, s in self._sessions.items() if self._expired(s, now)]
            for token in stale:
                del self._sessions[token]
        if stale:
            logger.info("[store] Evicted %d expired session(s); %d remaining.", len(stale), len(self))
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


sessions = InMemorySessionStore()


def get_session_store() -> SessionStore:
    return sessions


def short_token(token: str | None) -> str:
    """Truncated token for log lines."""
    if not token:
        return "<none>"
    return f"{token[:8]}…"
