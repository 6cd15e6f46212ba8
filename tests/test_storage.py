import os
import platform

import pytest

from api_client import TokenPair, TokenStore


def test_empty_store(store):
    assert store.get() == TokenPair(None, None)
    assert not store.is_authenticated()


def test_set_overwrites_pair(store):
    store.set(TokenPair("access-1", "refresh-1"))
    store.set(TokenPair("access-2", "refresh-2"))

    assert store.get() == TokenPair("access-2", "refresh-2")
    assert store.is_authenticated()


def test_clear_is_idempotent(store):
    store.set(TokenPair("access-1", "refresh-1"))
    store.set_user("u-1", "Ada")

    assert store.clear()
    assert store.clear()

    assert store.get() == TokenPair(None, None)
    assert store.get_user() == {"user_id": None, "user_name": None}


def test_set_keeps_display_fields(store):
    store.set_user("u-1", "Ada")
    store.set(TokenPair("access-1", "refresh-1"))

    assert store.get_user() == {"user_id": "u-1", "user_name": "Ada"}


def test_refresh_token_alone_counts_as_authenticated(store):
    store.set(TokenPair(None, "refresh-1"))
    assert store.is_authenticated()


def test_corrupt_file_reads_as_empty(store):
    store.token_file.write_text("{not json")
    assert store.get() == TokenPair(None, None)


def test_write_leaves_no_temp_files(store):
    store.set(TokenPair("access-1", "refresh-1"))
    store.set_user("u-1", "Ada")

    assert sorted(p.name for p in store.token_file.parent.iterdir()) == ["session.json"]


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions only")
def test_session_file_is_owner_only(store):
    store.set(TokenPair("access-1", "refresh-1"))
    assert os.stat(store.token_file).st_mode & 0o777 == 0o600


def test_status_hides_token_values(store):
    store.set(TokenPair("access-1", "refresh-1"))
    store.set_user("u-1", "Ada")

    status = store.get_status()

    assert status == {
        "has_access_token": True,
        "has_refresh_token": True,
        "user_id": "u-1",
        "user_name": "Ada",
    }
    assert "access-1" not in str(status)


def test_two_stores_share_one_file(tmp_path):
    path = str(tmp_path / "session.json")
    writer = TokenStore(path)
    reader = TokenStore(path)

    writer.set(TokenPair("access-1", "refresh-1"))
    assert reader.get() == TokenPair("access-1", "refresh-1")

    reader.clear()
    assert writer.get() == TokenPair(None, None)
