"""Admin identity passed explicitly to whatever needs it."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from portal.config import AUTH_IDLE_TTL_SECONDS, CREATOR_ROLE

log = logging.getLogger(__name__)


def role_from_user(user: dict[str, object] | None) -> str | None:
    """Read ``user.role.role_name`` from a backend user object."""
    if not isinstance(user, dict):
        return None
    role = user.get("role")
    if isinstance(role, dict):
        name = role.get("role_name")
        return name if isinstance(name, str) else None
    return None


@dataclass
class AuthContext:
    """Token, user and role for one signed-in admin.

    Set at login; cleared at logout or when the backend answers 401.
    """

    token: str | None = None
    user: dict[str, object] = field(default_factory=dict)
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_creator(self) -> bool:
        return self.role == CREATOR_ROLE

    def clear(self) -> None:
        self.token = None
        self.user = {}
        self.role = None


@dataclass
class _RegistryEntry:
    context: AuthContext
    last_seen: float


class AuthRegistry:
    """Process-wide map from bearer token to its AuthContext.

    Entries unused for ``idle_ttl_seconds`` are dropped, as are contexts
    cleared by a 401.
    """

    def __init__(
        self,
        idle_ttl_seconds: int = AUTH_IDLE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_ttl_seconds = idle_ttl_seconds
        self.clock = clock
        self._entries: dict[str, _RegistryEntry] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        expired = [
            token
            for token, entry in self._entries.items()
            if now - entry.last_seen > self.idle_ttl_seconds
            or not entry.context.is_authenticated
        ]
        for token in expired:
            self._entries.pop(token).context.clear()

    def sign_in(self, token: str, user: dict[str, object] | None) -> AuthContext:
        context = AuthContext(token=token, user=dict(user or {}), role=role_from_user(user))
        with self._lock:
            now = self.clock()
            self._purge(now)
            self._entries[token] = _RegistryEntry(context, now)
        log.info("Signed in %s (role=%s)", context.user.get("email", "<unknown>"), context.role)
        return context

    def get(self, token: str) -> AuthContext | None:
        with self._lock:
            now = self.clock()
            self._purge(now)
            entry = self._entries.get(token)
            if entry is None:
                return None
            entry.last_seen = now
            return entry.context

    def sign_out(self, token: str) -> None:
        with self._lock:
            entry = self._entries.pop(token, None)
        if entry is not None:
            entry.context.clear()


auth_registry = AuthRegistry()
