"""Authenticated HTTP client for the Sublite API"""

import logging
from typing import Any, Iterable, Mapping, Optional

import httpx

from settings import (
    API_BASE_URL,
    API_PREFIX,
    AUTH_FAILURE_STATUSES,
    CONNECT_TIMEOUT,
    LOGIN_PATH,
    REFRESH_TIMEOUT,
    REQUEST_TIMEOUT,
)
from utils.logging_utils import redact_headers
from utils.storage import TokenPair, TokenStore
from .coordinator import RefreshCoordinator
from .errors import AuthExpiredError, HttpError, NetworkError, SessionEndedError
from .gate import AuthGate
from .interceptor import RequestInterceptor
from .jwt_utils import get_claim
from .models import LoginResponse, RequestAttempt
from .session import Navigator, SessionExpiredCallback, SessionTerminator
from .token_exchange import exchange_credentials
from .token_refresh import refresh_tokens, response_body, revoke_refresh_token

logger = logging.getLogger(__name__)


class HttpClient:
    """The one object application code talks to

    Every verb method attaches the stored access token, sends the request,
    and on a 401/403 transparently refreshes the token once and replays the
    request. Failures surface as NetworkError, HttpError or AuthExpiredError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        store: Optional[TokenStore] = None,
        *,
        api_prefix: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
        refresh_timeout: Optional[float] = REFRESH_TIMEOUT,
        navigate: Optional[Navigator] = None,
        login_path: str = LOGIN_PATH,
        on_session_expired: Optional[SessionExpiredCallback] = None,
        auth_failure_statuses: Iterable[int] = AUTH_FAILURE_STATUSES,
    ):
        self.base_url = base_url or API_BASE_URL
        self.api_prefix = API_PREFIX if api_prefix is None else api_prefix.rstrip("/")
        self.store = store or TokenStore()

        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
            transport=transport,
        )

        self.interceptor = RequestInterceptor()
        self.terminator = SessionTerminator(
            self.store,
            navigate=navigate,
            login_path=login_path,
            on_session_expired=on_session_expired,
        )
        self.coordinator = RefreshCoordinator(
            self._refresh_access_token,
            self.terminator,
            timeout=refresh_timeout,
        )
        self.gate = AuthGate(self.coordinator, self.store, self.terminator, auth_failure_statuses)

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.coordinator.aclose()
        await self._http.aclose()

    def _api_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.api_prefix}{path}"

    # Request pipeline

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        """Send an API request

        Args:
            method: HTTP method
            path: Path under the API prefix, or an absolute URL
            json: Optional JSON body
            params: Optional query parameters
            headers: Optional extra headers
            content: Optional raw body

        Returns:
            The successful (2xx) response

        Raises:
            NetworkError: If no response was received
            HttpError: For any other non-2xx response
            AuthExpiredError: If the session could not be recovered
        """
        if self.terminator.terminated:
            raise AuthExpiredError("Session has ended, log in again")

        attempt = RequestAttempt(
            method=method.upper(),
            url=self._api_url(path),
            headers=dict(headers or {}),
            params=params,
            json_body=json,
            content=content,
        )
        response = await self._send(attempt, self.store.get().access_token)
        return self._categorize(attempt, response)

    async def _send(self, attempt: RequestAttempt, access_token: Optional[str]) -> httpx.Response:
        attempt = self.interceptor.attach(attempt, access_token)
        logger.debug(
            f"{attempt.describe()} attempt={attempt.attempt} headers={redact_headers(attempt.headers)}"
        )

        try:
            response = await self._http.send(attempt.build(self._http))
        except httpx.RequestError as e:
            logger.error(f"{attempt.describe()} failed: {e}")
            raise NetworkError(f"{attempt.describe()} failed: {e}", e) from e

        return await self.gate.handle(attempt, response, self._send)

    def _categorize(self, attempt: RequestAttempt, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        logger.debug(f"{attempt.describe()} returned {response.status_code}")
        raise HttpError(response.status_code, response_body(response))

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    # Session lifecycle

    async def _refresh_access_token(self) -> str:
        generation = self.terminator.generation
        pair = await refresh_tokens(self._http, self.store.get().refresh_token, self.api_prefix)
        # Logout, termination or a new login happened while the refresh was on the wire
        if self.terminator.terminated or self.terminator.generation != generation:
            logger.warning("Session ended during token refresh, discarding refreshed tokens")
            raise SessionEndedError("Session ended during token refresh")
        if not self.store.set(pair):
            raise AuthExpiredError("Failed to save refreshed tokens")
        return pair.access_token

    def start_session(
        self,
        pair: TokenPair,
        user_id: Optional[str] = None,
        user_name: Optional[str] = None,
    ) -> None:
        """Store a freshly issued pair and accept requests again"""
        self.store.set(pair)
        self.store.set_user(user_id, user_name)
        self.terminator.reset()

    async def login(self, email: str, password: str) -> LoginResponse:
        """Log in with credentials and start a new session"""
        login_data = await exchange_credentials(self._http, email, password, self.api_prefix)

        user = login_data.user
        user_id = (user.id if user else None) or get_claim(login_data.access_token, "userId", "id")
        user_name = (user.name if user else None) or get_claim(login_data.access_token, "name", "username")

        self.start_session(
            TokenPair(access_token=login_data.access_token, refresh_token=login_data.refresh_token),
            user_id=user_id,
            user_name=user_name,
        )
        return login_data

    async def logout(self) -> None:
        """Revoke the refresh token (best effort), clear the session and go to login"""
        refresh_token = self.store.get().refresh_token
        if refresh_token:
            await revoke_refresh_token(self._http, refresh_token, self.api_prefix)

        # A session that already ended was cleared at that point
        if not self.terminator.terminate("logout", notify=False):
            self.store.clear()

    def is_authenticated(self) -> bool:
        return not self.terminator.terminated and self.store.is_authenticated()
