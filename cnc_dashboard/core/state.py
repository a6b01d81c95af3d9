"""Process-wide application state."""
import logging
import threading

logger = logging.getLogger(__name__)


class AppState:
    """Holds the fallback-mode flag.

    The flag is raised at most once, during startup, and never cleared; the
    process has to be restarted to go back to the database.
    """

    def __init__(self, fallback_mode=False, fallback_reason=None):
        self._lock = threading.Lock()
        self._fallback_mode = fallback_mode
        self.fallback_reason = fallback_reason

    @property
    def fallback_mode(self):
        return self._fallback_mode

    def enable_fallback(self, reason=None):
        with self._lock:
            if self._fallback_mode:
                return False
            self._fallback_mode = True
            self.fallback_reason = str(reason) if reason is not None else None
        logger.warning('Switching to FALLBACK MODE - using sample data (%s)', self.fallback_reason)
        return True

    @property
    def mode(self):
        return 'fallback' if self._fallback_mode else 'database'
