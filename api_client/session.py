"""Session teardown after an unrecoverable authentication failure"""

import logging
from typing import Callable, Optional

from settings import LOGIN_PATH
from utils.storage import TokenStore

logger = logging.getLogger(__name__)

SessionExpiredCallback = Callable[[], None]
Navigator = Callable[[str], None]

# Process-wide hook so the application layer can react to expiry
_session_expired_callback: Optional[SessionExpiredCallback] = None


def register_session_expired_callback(callback: SessionExpiredCallback) -> None:
    """Register the session-expired callback, replacing any previous one"""
    global _session_expired_callback
    _session_expired_callback = callback


def clear_session_expired_callback() -> None:
    global _session_expired_callback
    _session_expired_callback = None


def get_session_expired_callback() -> Optional[SessionExpiredCallback]:
    return _session_expired_callback


def log_redirect(login_path: str) -> None:
    """Default navigator: nothing to redirect outside a browser, so just log"""
    logger.warning(f"Session ended, redirecting to {login_path}")


class SessionTerminator:
    """Clears the local session, notifies the application and sends the user to login

    terminate() runs once per terminal failure; later calls do nothing until
    reset() is called for a new session.
    """

    def __init__(
        self,
        store: TokenStore,
        navigate: Optional[Navigator] = None,
        login_path: str = LOGIN_PATH,
        on_session_expired: Optional[SessionExpiredCallback] = None,
    ):
        self._store = store
        self._navigate = navigate or log_redirect
        self._on_session_expired = on_session_expired
        self.login_path = login_path
        self._terminated = False
        # Bumped whenever a session ends or a new one starts
        self.generation = 0

    @property
    def terminated(self) -> bool:
        return self._terminated

    def terminate(self, reason: str = "session expired", notify: bool = True) -> bool:
        """End the session

        Args:
            reason: Human-readable cause, logged only
            notify: Whether to invoke the session-expired callback

        Returns:
            True if this call ended the session, False if it had already ended
        """
        if self._terminated:
            logger.debug(f"Session already terminated, ignoring: {reason}")
            return False
        self._terminated = True
        self.generation += 1

        logger.warning(f"Terminating session: {reason}")
        self._store.clear()

        if notify:
            callback = self._on_session_expired or get_session_expired_callback()
            if callback is not None:
                try:
                    callback()
                except Exception:
                    logger.exception("Session-expired callback raised")

        try:
            self._navigate(self.login_path)
        except Exception:
            logger.exception(f"Navigation to {self.login_path} failed")
        return True

    def reset(self) -> None:
        """Allow a new session after a fresh login"""
        self._terminated = False
        self.generation += 1
