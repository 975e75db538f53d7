"""
Session store
Server-side login sessions keyed by an opaque session id
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24


class SessionStore(ABC):
    """Session store interface"""

    @abstractmethod
    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        """Return the session data, or None when missing or expired"""

    @abstractmethod
    async def set(self, sid: str, data: Dict[str, Any]) -> None:
        """Create or replace a session, restarting its TTL"""

    @abstractmethod
    async def destroy(self, sid: str) -> None:
        """Remove a session; missing ids are ignored"""

    @abstractmethod
    async def prune(self) -> int:
        """Drop expired sessions, returning how many were removed"""


class MemorySessionStore(SessionStore):
    """In-process session store with per-entry expiry"""

    def __init__(self, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        entry = self._sessions.get(sid)
        if entry is None:
            return None
        expires_at, data = entry
        if expires_at <= self._clock():
            self._sessions.pop(sid, None)
            return None
        return dict(data)

    async def set(self, sid: str, data: Dict[str, Any]) -> None:
        self._sessions[sid] = (self._clock() + self.ttl_seconds, dict(data))

    async def destroy(self, sid: str) -> None:
        self._sessions.pop(sid, None)

    async def prune(self) -> int:
        now = self._clock()
        expired = [sid for sid, (expires_at, _) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
