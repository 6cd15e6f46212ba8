"""Authentication failure handling for API responses"""

import logging
from typing import Awaitable, Callable, Iterable, Optional

import httpx

from settings import AUTH_FAILURE_STATUSES
from utils.storage import TokenStore
from .coordinator import RefreshCoordinator
from .errors import AuthExpiredError
from .models import RequestAttempt
from .session import SessionTerminator

logger = logging.getLogger(__name__)

Resend = Callable[[RequestAttempt, Optional[str]], Awaitable[httpx.Response]]


class AuthGate:
    """Turns an authentication failure into refresh-and-replay, or a terminal error"""

    def __init__(
        self,
        coordinator: RefreshCoordinator,
        store: TokenStore,
        terminator: SessionTerminator,
        auth_failure_statuses: Iterable[int] = AUTH_FAILURE_STATUSES,
    ):
        self._coordinator = coordinator
        self._store = store
        self._terminator = terminator
        self.auth_failure_statuses = frozenset(auth_failure_statuses)

    def is_auth_failure(self, response: httpx.Response) -> bool:
        return response.status_code in self.auth_failure_statuses

    async def handle(
        self,
        attempt: RequestAttempt,
        response: httpx.Response,
        resend: Resend,
    ) -> httpx.Response:
        """Inspect a response and recover from an authentication failure

        Args:
            attempt: The attempt that produced the response, as sent
            response: The response received for it
            resend: Submits an attempt with the given access token and returns
                the gated response

        Returns:
            The response itself, or the outcome of the single replay

        Raises:
            AuthExpiredError: If the replay was rejected too, the refresh
                failed, or the session has already ended
        """
        if not self.is_auth_failure(response):
            return response

        # Nothing to refresh for anonymous calls; the caller sees an HttpError
        if attempt.bearer_token is None:
            return response

        if attempt.retried:
            logger.warning(f"{attempt.describe()} rejected again after token refresh ({response.status_code})")
            self._terminator.terminate(f"{attempt.describe()} rejected after token refresh")
            raise AuthExpiredError(f"{attempt.describe()} was rejected with a renewed token")

        if self._terminator.terminated:
            raise AuthExpiredError("Session has ended, log in again")

        if not self._coordinator.is_refreshing:
            current = self._store.get().access_token
            if current and current != attempt.bearer_token:
                # The token was renewed while this request was on the wire
                logger.debug(f"{attempt.describe()} used a superseded token, replaying")
                return await resend(attempt.next_attempt(), current)

        access_token = await self._coordinator.wait_for_token(attempt.describe())
        return await resend(attempt.next_attempt(), access_token)
