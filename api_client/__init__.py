"""Authenticated API client with single-flight token refresh

The HttpClient attaches the stored bearer token to every call. When the API
rejects it, one refresh runs no matter how many requests failed, and every
affected request is replayed once with the new token.
"""

from utils.storage import TokenPair, TokenStore
from .client import HttpClient
from .coordinator import RefreshCoordinator
from .errors import (
    ApiClientError,
    AuthExpiredError,
    HttpError,
    NetworkError,
    RefreshTimeoutError,
    SessionEndedError,
)
from .gate import AuthGate
from .interceptor import RequestInterceptor
from .models import RefreshState, RequestAttempt, Waiter, WaiterQueue
from .session import (
    SessionTerminator,
    clear_session_expired_callback,
    register_session_expired_callback,
)

__all__ = [
    "HttpClient",
    "TokenPair",
    "TokenStore",
    "RefreshCoordinator",
    "AuthGate",
    "RequestInterceptor",
    "SessionTerminator",
    "RefreshState",
    "RequestAttempt",
    "Waiter",
    "WaiterQueue",
    "ApiClientError",
    "AuthExpiredError",
    "HttpError",
    "NetworkError",
    "RefreshTimeoutError",
    "SessionEndedError",
    "register_session_expired_callback",
    "clear_session_expired_callback",
]
