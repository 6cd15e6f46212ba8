"""Outgoing request decoration"""

from typing import Dict, Mapping, Optional

from .models import RequestAttempt

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
}


class RequestInterceptor:
    """Attaches default headers and the bearer credential to outgoing requests"""

    def __init__(self, default_headers: Optional[Mapping[str, str]] = None):
        self.default_headers = dict(DEFAULT_HEADERS)
        if default_headers:
            self.default_headers.update(default_headers)

    def attach(self, attempt: RequestAttempt, access_token: Optional[str]) -> RequestAttempt:
        """Return the attempt with defaults filled in and, if a token exists, an Authorization header

        Raw content bodies keep whatever headers the caller gave them.
        """
        if attempt.content is None:
            present = {name.lower() for name in attempt.headers}
            missing = {
                name: value for name, value in self.default_headers.items()
                if name.lower() not in present
            }
            if missing:
                attempt = attempt.with_headers(missing)

        if not access_token:
            return attempt
        return attempt.with_headers({"Authorization": f"Bearer {access_token}"})
