import logging
import threading

logger = logging.getLogger(__name__)


class Screen:
    """A unit of UI state owned by one Navigator.

    ``mounted`` is True only while the screen sits on a navigator stack.
    Handlers must re-check it after every collaborator call and leave the
    screen alone once it has been unmounted.
    """
    route_name = 'screen'

    def __init__(self):
        self.mounted = False
        self.is_loading = False
        self._busy_lock = threading.Lock()

    def did_mount(self):
        self.mounted = True

    def dispose(self):
        self.mounted = False

    def begin_loading(self):
        """Atomically claim the loading flag; False if an action is already in flight."""
        with self._busy_lock:
            if self.is_loading:
                return False
            self.is_loading = True
            return True

    def end_loading(self):
        with self._busy_lock:
            self.is_loading = False

    def render(self):
        raise NotImplementedError


class Navigator:
    """Stack of screens for one client session."""

    def __init__(self):
        self._stack = []
        self._lock = threading.RLock()

    @property
    def top(self):
        with self._lock:
            return self._stack[-1] if self._stack else None

    @property
    def depth(self):
        with self._lock:
            return len(self._stack)

    def routes(self):
        with self._lock:
            return [screen.route_name for screen in self._stack]

    def push(self, screen):
        with self._lock:
            self._stack.append(screen)
            screen.did_mount()
        logger.debug(f"Pushed {screen.route_name} (depth {self.depth})")
        return screen

    def replace(self, screen):
        """Swap the top screen for ``screen``; back from it goes to what was below."""
        with self._lock:
            if self._stack:
                self._stack.pop().dispose()
            self._stack.append(screen)
            screen.did_mount()
        logger.debug(f"Replaced top with {screen.route_name} (depth {self.depth})")
        return screen

    def pop(self):
        with self._lock:
            if not self._stack:
                return None
            screen = self._stack.pop()
            screen.dispose()
        return screen

    def clear(self):
        with self._lock:
            while self._stack:
                self._stack.pop().dispose()
