from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from xiangqi_rules.board import Layout
from xiangqi_rules.game import Game

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SESSION_TTL      = 2 * 60 * 60   # 2 hours of inactivity
CLEANUP_INTERVAL = 10 * 60       # run cleanup every 10 minutes


# ---------------------------------------------------------------------------
# Session dataclass
# ---------------------------------------------------------------------------

@dataclass
class Session:
    game: Game
    # Route handlers run in a thread pool; every board read or write for
    # this session happens while holding the lock.
    lock: threading.Lock    = field(default_factory=threading.Lock)
    created_at: float       = field(default_factory=time.time)
    last_accessed: float    = field(default_factory=time.time)


# ---------------------------------------------------------------------------
# SessionManager
# ---------------------------------------------------------------------------

class SessionManager:
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, layout: Optional[Layout] = None) -> tuple[str, Session]:
        session_id = str(uuid.uuid4())
        session = Session(game=Game(layout))
        with self._lock:
            self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return session_id, session

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is not None:
            session.last_accessed = time.time()
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Deleted session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # TTL cleanup
    # ------------------------------------------------------------------

    def cleanup_stale(self, now: Optional[float] = None) -> int:
        cutoff = (time.time() if now is None else now) - SESSION_TTL
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if s.last_accessed < cutoff]
            for sid in stale:
                del self._sessions[sid]
        return len(stale)

    async def cleanup_loop(self) -> None:
        """Background coroutine: purge stale sessions every CLEANUP_INTERVAL seconds."""
        while True:
            await asyncio.sleep(CLEANUP_INTERVAL)
            removed = self.cleanup_stale()
            if removed:
                logger.info("Removed %d stale session(s).", removed)


# ---------------------------------------------------------------------------
# Module-level singleton (imported by routes)
# ---------------------------------------------------------------------------

session_manager = SessionManager()
