"""Error taxonomy for the API client"""

from typing import Any, Optional


class ApiClientError(Exception):
    """Base class for every error raised to callers of HttpClient"""


class NetworkError(ApiClientError):
    """No response was received"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class HttpError(ApiClientError):
    """Non-2xx response that is not recovered by a token refresh"""

    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}")

    def __str__(self):
        if self.body:
            return f"HTTP {self.status_code}: {self.body}"
        return f"HTTP {self.status_code}"


class AuthExpiredError(ApiClientError):
    """The session can no longer be authenticated; the user must log in again"""


class RefreshTimeoutError(AuthExpiredError):
    """The token refresh call did not finish within the refresh timeout"""


class SessionEndedError(AuthExpiredError):
    """The session ended or was replaced while a token refresh was in flight"""
