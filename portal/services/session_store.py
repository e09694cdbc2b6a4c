"""In-memory stores for candidate handoff entries and live sessions."""
from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable

from portal.config import HANDOFF_TTL_SECONDS, SESSION_IDLE_TTL_SECONDS
from portal.services.assessment_session import AssessmentSession

log = logging.getLogger(__name__)


@dataclass
class Handoff:
    """Identity captured on the entry screen, waiting for the test screen."""

    test_code: str
    candidate_name: str
    candidate_email: str
    expires_at: float


class HandoffStore:
    """Short-lived key/value storage holding only candidate name and email."""

    def __init__(
        self,
        ttl_seconds: int = HANDOFF_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, Handoff] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]

    def put(self, test_code: str, name: str, email: str) -> str:
        handoff_id = uuid.uuid4().hex
        with self._lock:
            now = self.clock()
            self._purge(now)
            self._entries[handoff_id] = Handoff(
                test_code=test_code,
                candidate_name=name,
                candidate_email=email,
                expires_at=now + self.ttl_seconds,
            )
        return handoff_id

    def get(self, handoff_id: str, test_code: str) -> Handoff | None:
        """Get a live entry; entries are bound to the test they were made for."""
        with self._lock:
            self._purge(self.clock())
            entry = self._entries.get(handoff_id)
        if entry is None or entry.test_code != test_code:
            return None
        return entry

    def clear(self, handoff_id: str) -> None:
        with self._lock:
            self._entries.pop(handoff_id, None)


@dataclass
class _SessionEntry:
    session: AssessmentSession
    handoff_id: str
    last_seen: float


class SessionStore:
    """Live assessment sessions keyed by an opaque session id.

    Idle sessions are dropped after ``idle_ttl_seconds``; a session with a
    submission running is never dropped.
    """

    def __init__(
        self,
        idle_ttl_seconds: int = SESSION_IDLE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_ttl_seconds = idle_ttl_seconds
        self.clock = clock
        self._entries: dict[str, _SessionEntry] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.last_seen > self.idle_ttl_seconds
            and not entry.session.submitting
        ]
        for key in expired:
            log.info("Discarding idle session %s", key)
            del self._entries[key]

    def add(self, session: AssessmentSession, handoff_id: str) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            now = self.clock()
            self._purge(now)
            self._entries[session_id] = _SessionEntry(session, handoff_id, now)
        return session_id

    def get(self, session_id: str) -> AssessmentSession | None:
        with self._lock:
            now = self.clock()
            self._purge(now)
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            entry.last_seen = now
            return entry.session

    def handoff_for(self, session_id: str) -> str | None:
        with self._lock:
            entry = self._entries.get(session_id)
        return entry.handoff_id if entry else None

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)


handoff_store = HandoffStore()
session_store = SessionStore()
