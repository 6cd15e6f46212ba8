"""Fake API server and request helpers shared by the test modules"""

import base64
import inspect
import json
from typing import Callable, Dict, List, Tuple

import httpx

BASE_URL = "https://api.test"

Handler = Callable[[httpx.Request], object]


class FakeApi:
    """Routes requests by (method, path) and records every request it sees"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Handler] = {}

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        result = handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def bearer(request: httpx.Request):
    return request.headers.get("Authorization")


def accepts(token: str) -> Handler:
    """Protected endpoint that only accepts the given access token"""
    def handler(request: httpx.Request) -> httpx.Response:
        if bearer(request) == f"Bearer {token}":
            return httpx.Response(200, json={"path": request.url.path})
        return httpx.Response(401, json={"error": "Token expired"})
    return handler


def refreshes_to(access_token: str, refresh_token: str) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"accessToken": access_token, "refreshToken": refresh_token})
    return handler


def make_jwt(claims: dict) -> str:
    def encode(part: dict) -> str:
        return base64.urlsafe_b64encode(json.dumps(part).encode()).decode().rstrip("=")
    return f"{encode({'alg': 'HS256', 'typ': 'JWT'})}.{encode(claims)}.signature"
