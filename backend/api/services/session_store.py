"""In-memory story sessions.

Each session owns one StoryOrchestrator. Nothing is persisted: deleting a
session, or restarting the process, discards its story.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from backend.core.programs.story_orchestrator import StoryOrchestrator

from ..config import MAX_SESSIONS

logger = logging.getLogger(__name__)


class SessionStore:
    """Registry of story sessions keyed by UUID."""

    def __init__(
        self,
        orchestrator_factory: Callable[[str], StoryOrchestrator],
        max_sessions: int = MAX_SESSIONS,
    ):
        """
        Args:
            orchestrator_factory: Builds the orchestrator for a new session id
            max_sessions: Upper bound; beyond it an idle session is evicted,
                storyless sessions first, then the least recently used
        """
        self.orchestrator_factory = orchestrator_factory
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, StoryOrchestrator] = OrderedDict()
        self._lock = threading.Lock()

    def create(self) -> tuple[str, StoryOrchestrator]:
        """Create a session. The factory runs first so configuration errors surface before registration."""
        session_id = str(uuid.uuid4())
        orchestrator = self.orchestrator_factory(session_id)

        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                self._evict_idle()
            self._sessions[session_id] = orchestrator

        logger.info(f"Created story session {session_id}")
        return session_id, orchestrator

    def get(self, session_id: str) -> Optional[StoryOrchestrator]:
        with self._lock:
            orchestrator = self._sessions.get(session_id)
            if orchestrator is not None:
                self._sessions.move_to_end(session_id)
            return orchestrator

    def delete(self, session_id: str) -> bool:
        with self._lock:
            orchestrator = self._sessions.pop(session_id, None)
        if orchestrator is None:
            return False
        logger.info(f"Discarded story session {session_id}")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _evict_idle(self) -> None:
        # Ordered from least to most recently used
        idle = [sid for sid, orchestrator in self._sessions.items() if not orchestrator.is_busy]
        if not idle:
            logger.warning("Session limit reached but every session is busy")
            return
        storyless = [sid for sid in idle if self._sessions[sid].story is None]
        session_id = (storyless or idle)[0]
        del self._sessions[session_id]
        logger.warning(f"Session limit reached, evicted {session_id}")
