"""Single-flight token refresh"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from settings import REFRESH_TIMEOUT
from .errors import AuthExpiredError, RefreshTimeoutError, SessionEndedError
from .models import RefreshState, Waiter, WaiterQueue
from .session import SessionTerminator

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    """Runs at most one token refresh at a time and fans its outcome out to every waiter

    The state check and the IDLE -> REFRESHING transition in wait_for_token()
    happen without an await in between, which is what keeps the refresh
    single-flight on one event loop. A multi-threaded port would need a
    compare-and-swap there.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[str]],
        terminator: SessionTerminator,
        timeout: Optional[float] = REFRESH_TIMEOUT,
    ):
        """
        Args:
            refresh: Coroutine function that performs the refresh, persists the
                new pair and returns the new access token
            terminator: Session terminator invoked when the refresh fails
            timeout: Seconds before an in-flight refresh counts as failed; None disables it
        """
        self._refresh = refresh
        self._terminator = terminator
        self.timeout = timeout
        self.state = RefreshState.IDLE
        self._waiters = WaiterQueue()
        self._task: Optional[asyncio.Task] = None
        self.refresh_count = 0

    @property
    def is_refreshing(self) -> bool:
        return self.state is RefreshState.REFRESHING

    @property
    def pending(self) -> int:
        return len(self._waiters)

    def wait_for_token(self, label: str = "") -> asyncio.Future:
        """Queue a waiter for the next access token, starting a refresh if none is running

        Returns:
            Future resolved with the new access token, or failed with AuthExpiredError
        """
        loop = asyncio.get_running_loop()
        waiter = Waiter(loop.create_future(), label)
        self._waiters.enqueue(waiter)

        if self.state is RefreshState.IDLE:
            self.state = RefreshState.REFRESHING
            self.refresh_count += 1
            logger.info(f"Access token rejected by {label or 'request'}, starting refresh")
            self._task = loop.create_task(self._run_refresh())
        else:
            logger.debug(f"Refresh in flight, queued {label or 'request'} ({len(self._waiters)} waiting)")

        return waiter.future

    async def _run_refresh(self) -> None:
        try:
            access_token = await asyncio.wait_for(self._refresh(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Token refresh timed out after {self.timeout}s")
            self._fail(RefreshTimeoutError(f"Token refresh did not complete within {self.timeout}s"))
        except asyncio.CancelledError:
            self._fail(AuthExpiredError("Token refresh was cancelled"), terminate=False)
            raise
        except SessionEndedError as e:
            # The session is already gone or belongs to a newer login
            self._fail(e, terminate=False)
        except AuthExpiredError as e:
            self._fail(e)
        except Exception as e:
            # Anything else would otherwise leave every waiter suspended forever
            logger.error(f"Token refresh failed with exception: {e}")
            self._fail(AuthExpiredError(f"Token refresh failed: {e}"))
        else:
            self._succeed(access_token)
        finally:
            self._task = None

    def _succeed(self, access_token: str) -> None:
        self.state = RefreshState.IDLE
        waiters = self._waiters.drain()
        logger.info(f"Token refreshed, replaying {len(waiters)} request(s)")
        for waiter in waiters:
            waiter.on_renewed(access_token)

    def _fail(self, error: AuthExpiredError, terminate: bool = True) -> None:
        self.state = RefreshState.IDLE
        waiters = self._waiters.drain()
        logger.warning(f"Token refresh failed, rejecting {len(waiters)} request(s): {error}")
        for waiter in waiters:
            waiter.on_failed(error)
        if terminate:
            self._terminator.terminate(f"token refresh failed: {error}")

    async def aclose(self) -> None:
        """Cancel an in-flight refresh; its waiters are rejected without ending the session"""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._task = None
        # A task cancelled before its first step never reached its own cleanup
        if self.is_refreshing or self._waiters:
            self._fail(AuthExpiredError("Token refresh was cancelled"), terminate=False)
