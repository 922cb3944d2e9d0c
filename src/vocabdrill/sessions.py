import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .models import QuizSession
from .storage import utc_now

logger = logging.getLogger(__name__)


class SessionStore:
    """In-flight quiz sessions, keyed by the id kept in the session cookie.

    ``lock`` is held by callers for the whole of a quiz transition so that
    the answer, the completion check and the result save happen together.
    """

    def __init__(self, timeout_minutes: int, clock: Callable[[], datetime] = utc_now):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.clock = clock
        self.lock = threading.RLock()
        self._sessions: Dict[str, QuizSession] = {}

    def add(self, session: QuizSession) -> QuizSession:
        with self.lock:
            self.purge_expired()
            self._sessions[session.id] = session
        return session

    def get(self, session_id: Optional[str]) -> Optional[QuizSession]:
        with self.lock:
            self.purge_expired()
            if not session_id:
                return None
            return self._sessions.get(session_id)

    def discard(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self.lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        now = self.clock()
        with self.lock:
            expired = [
                sid for sid, s in self._sessions.items() if now - s.started_at > self.timeout
            ]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"Expired {len(expired)} quiz session(s)")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
