from typing import List

import pytest
import pytest_asyncio

from api_client import HttpClient, TokenPair, TokenStore, clear_session_expired_callback
from tests.helpers import BASE_URL, FakeApi


@pytest.fixture(autouse=True)
def reset_session_callback():
    yield
    clear_session_expired_callback()


@pytest.fixture
def store(tmp_path) -> TokenStore:
    return TokenStore(str(tmp_path / "session" / "session.json"))


@pytest.fixture
def logged_in_store(store) -> TokenStore:
    store.set(TokenPair(access_token="old-access", refresh_token="refresh-1"))
    return store


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


class SessionEvents:
    def __init__(self):
        self.expired = 0
        self.navigations: List[str] = []

    def on_session_expired(self):
        self.expired += 1

    def navigate(self, path: str):
        self.navigations.append(path)


@pytest.fixture
def events() -> SessionEvents:
    return SessionEvents()


@pytest_asyncio.fixture
async def client(api, logged_in_store, events):
    http_client = HttpClient(
        base_url=BASE_URL,
        store=logged_in_store,
        api_prefix="/api",
        transport=api.transport,
        refresh_timeout=2.0,
        navigate=events.navigate,
        login_path="/login",
        on_session_expired=events.on_session_expired,
    )
    yield http_client
    await http_client.aclose()
