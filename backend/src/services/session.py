from __future__ import annotations

import time
from typing import Dict

from services.enrichment import EpochGuard


class SessionManager:
    """In-memory map of client session to its enrichment epoch guard."""

    def __init__(self, ttl_sec: int = 3600) -> None:
        self._guards: Dict[str, EpochGuard] = {}
        self._last_access: Dict[str, float] = {}
        self.ttl_sec = ttl_sec

    def guard_for(self, session_id: str) -> EpochGuard:
        self._cleanup()
        self._last_access[session_id] = time.time()
        guard = self._guards.get(session_id)
        if guard is None:
            guard = EpochGuard()
            self._guards[session_id] = guard
        return guard

    def reset(self, session_id: str) -> None:
        if not session_id:
            return
        self._guards.pop(session_id, None)
        self._last_access.pop(session_id, None)

    def _cleanup(self) -> None:
        """Remove expired sessions."""
        now = time.time()
        expired = [
            sid for sid, last in self._last_access.items()
            if now - last > self.ttl_sec
        ]
        for sid in expired:
            self._guards.pop(sid, None)
            del self._last_access[sid]

# Global singleton
session_manager = SessionManager()
