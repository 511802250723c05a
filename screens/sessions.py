import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from screens.navigator import Navigator
from screens.notifications import Clipboard, Notifier
from screens.reader import ReaderContext, ReaderScreen
from services.errors import NotFound, PermissionDenied

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TTL_SECONDS = 30 * 60
DEFAULT_MAX_SESSIONS_PER_USER = 5


@dataclass
class ReaderSession:
    id: str
    user_id: str
    navigator: Navigator
    notifier: Notifier
    clipboard: Clipboard
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_access: float = 0.0

    @property
    def top(self):
        return self.navigator.top


class ReaderSessions:
    """In-process registry of open reader sessions, one per client.

    Sessions idle for longer than ``idle_ttl`` seconds are evicted whenever a
    new one is opened, and a user keeps at most ``max_per_user`` sessions
    (oldest access evicted first).
    """

    def __init__(self, bible_service, bookmark_store, premium_service,
                 idle_ttl=DEFAULT_IDLE_TTL_SECONDS, max_per_user=DEFAULT_MAX_SESSIONS_PER_USER,
                 clock=time.monotonic):
        self.bible_service = bible_service
        self.bookmark_store = bookmark_store
        self.premium_service = premium_service
        self.idle_ttl = idle_ttl
        self.max_per_user = max_per_user
        self._clock = clock
        self._sessions = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def open(self, user_id, book_id, chapter_number):
        """Start a session with a reader at the given chapter."""
        self.evict_idle()
        position = self.bible_service.open_chapter(book_id, chapter_number)
        session = ReaderSession(
            id=uuid.uuid4().hex,
            user_id=user_id,
            navigator=Navigator(),
            notifier=Notifier(),
            clipboard=Clipboard(),
            last_access=self._clock(),
        )
        context = ReaderContext(
            bible_service=self.bible_service,
            bookmark_store=self.bookmark_store,
            premium_service=self.premium_service,
            user_id=user_id,
            navigator=session.navigator,
            notifier=session.notifier,
            clipboard=session.clipboard,
        )
        reader = session.navigator.push(ReaderScreen(context, position))
        reader.load()

        with self._lock:
            self._sessions[session.id] = session
            evicted = self._over_limit(user_id)
            for stale in evicted:
                del self._sessions[stale.id]
        self._dispose(evicted, "per-user limit")
        logger.info(f"Opened reader session {session.id} at {position.reference} for {user_id}")
        return session

    def get(self, session_id, user_id):
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and session.user_id == user_id:
                session.last_access = self._clock()
        if session is None:
            raise NotFound(f"Reader session not found: {session_id}")
        if session.user_id != user_id:
            raise PermissionDenied("Reader session belongs to another user")
        return session

    def close(self, session_id, user_id):
        session = self.get(session_id, user_id)
        with self._lock:
            self._sessions.pop(session_id, None)
        # Unmount everything so in-flight handlers stop touching their screens
        session.navigator.clear()
        logger.info(f"Closed reader session {session_id}")
        return session

    def evict_idle(self):
        """Drop sessions not accessed within ``idle_ttl``. Returns how many went."""
        if not self.idle_ttl or self.idle_ttl <= 0:
            return 0
        cutoff = self._clock() - self.idle_ttl
        with self._lock:
            evicted = [s for s in self._sessions.values() if s.last_access < cutoff]
            for session in evicted:
                del self._sessions[session.id]
        self._dispose(evicted, "idle")
        return len(evicted)

    def _over_limit(self, user_id):
        if not self.max_per_user or self.max_per_user <= 0:
            return []
        owned = sorted(
            (s for s in self._sessions.values() if s.user_id == user_id),
            key=lambda s: s.last_access,
        )
        return owned[:max(0, len(owned) - self.max_per_user)]

    def _dispose(self, sessions, reason):
        for session in sessions:
            session.navigator.clear()
            logger.info(f"Evicted reader session {session.id} ({reason})")
