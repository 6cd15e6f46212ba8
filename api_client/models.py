"""Data models for the authenticated API client"""

import asyncio
import enum
import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Deque, Dict, List, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class RefreshState(enum.Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass(frozen=True)
class RequestAttempt:
    """One submission of an API call

    Instances are never mutated: a replay is a new object with a higher
    attempt count, built by next_attempt().

    Attributes:
        method: HTTP method
        url: Path relative to the client base URL, or an absolute URL
        headers: Request headers
        params: Optional query parameters
        json_body: Optional JSON-serializable body
        content: Optional raw body
        attempt: 0 for the first submission, 1 for the replay after a refresh
    """
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Optional[Mapping[str, Any]] = None
    json_body: Any = None
    content: Optional[bytes] = None
    attempt: int = 0

    @property
    def retried(self) -> bool:
        return self.attempt > 0

    @property
    def bearer_token(self) -> Optional[str]:
        """Token carried in the Authorization header, if any"""
        for name, value in self.headers.items():
            if name.lower() == "authorization" and value.startswith("Bearer "):
                return value[len("Bearer "):]
        return None

    def with_headers(self, extra: Mapping[str, str]) -> "RequestAttempt":
        headers: Dict[str, str] = {
            name: value for name, value in self.headers.items()
            if name.lower() not in {key.lower() for key in extra}
        }
        headers.update(extra)
        return replace(self, headers=headers)

    def next_attempt(self) -> "RequestAttempt":
        return replace(self, attempt=self.attempt + 1)

    def build(self, client: httpx.AsyncClient) -> httpx.Request:
        return client.build_request(
            self.method,
            self.url,
            headers=dict(self.headers),
            params=self.params,
            json=self.json_body,
            content=self.content,
        )

    def describe(self) -> str:
        return f"{self.method} {self.url}"


@dataclass
class Waiter:
    """A caller suspended until the in-flight refresh settles"""
    future: asyncio.Future
    label: str = ""

    def on_renewed(self, access_token: str) -> None:
        # A cancelled caller simply never sees the result
        if not self.future.done():
            self.future.set_result(access_token)

    def on_failed(self, error: BaseException) -> None:
        if self.future.done():
            return
        logger.debug(f"Rejecting {self.label or 'request'}: {error}")
        self.future.set_exception(error)


class WaiterQueue:
    """FIFO of waiters; drain() hands back every waiter once and empties the queue"""

    def __init__(self):
        self._waiters: Deque[Waiter] = deque()

    def enqueue(self, waiter: Waiter) -> None:
        self._waiters.append(waiter)

    def drain(self) -> List[Waiter]:
        waiters = list(self._waiters)
        self._waiters.clear()
        return waiters

    def __len__(self) -> int:
        return len(self._waiters)


class RefreshResponse(BaseModel):
    """Body of a successful POST /auth/refresh"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class LoginUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    is_provider: bool = Field(default=False, alias="isProvider")
    is_admin: bool = Field(default=False, alias="isAdmin")


class LoginResponse(BaseModel):
    """Body of a successful POST /auth/login"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")
    user: Optional[LoginUser] = None
