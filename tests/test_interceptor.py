import asyncio

from api_client import RequestAttempt, RequestInterceptor, Waiter, WaiterQueue


def test_attaches_bearer_token():
    attempt = RequestAttempt("GET", "/api/services")

    attached = RequestInterceptor().attach(attempt, "access-1")

    assert attached.headers["Authorization"] == "Bearer access-1"
    assert attached.bearer_token == "access-1"
    assert attempt.bearer_token is None


def test_no_token_leaves_authorization_out():
    attached = RequestInterceptor().attach(RequestAttempt("GET", "/api/services"), None)

    assert "Authorization" not in attached.headers
    assert attached.headers["Content-Type"] == "application/json"


def test_caller_headers_win_over_defaults():
    attempt = RequestAttempt("POST", "/api/upload", headers={"content-type": "multipart/form-data"})

    attached = RequestInterceptor().attach(attempt, "access-1")

    assert attached.headers["content-type"] == "multipart/form-data"
    assert "Content-Type" not in attached.headers


def test_new_token_replaces_old_authorization():
    attempt = RequestInterceptor().attach(RequestAttempt("GET", "/api/a"), "old-access")

    replay = RequestInterceptor().attach(attempt.next_attempt(), "new-access")

    assert replay.bearer_token == "new-access"
    assert [name for name in replay.headers if name.lower() == "authorization"] == ["Authorization"]


def test_next_attempt_does_not_mutate_original():
    attempt = RequestAttempt("PUT", "/api/services/1", json_body={"price": 5})

    replay = attempt.next_attempt()

    assert not attempt.retried
    assert replay.retried
    assert replay.attempt == 1
    assert replay.json_body == {"price": 5}


def test_waiter_queue_drains_once_in_order():
    class FakeFuture:
        def done(self):
            return False

    queue = WaiterQueue()
    waiters = [Waiter(FakeFuture(), label) for label in ("a", "b", "c")]
    for waiter in waiters:
        queue.enqueue(waiter)

    assert [w.label for w in queue.drain()] == ["a", "b", "c"]
    assert queue.drain() == []
    assert len(queue) == 0


def test_raw_content_gets_no_default_content_type():
    attempt = RequestAttempt("PUT", "/api/avatar", content=b"\x89PNG", headers={"X-Upload": "1"})

    attached = RequestInterceptor().attach(attempt, "access-1")

    assert {name.lower() for name in attached.headers} == {"x-upload", "authorization"}
    assert attached.bearer_token == "access-1"


def test_waiter_rejection_skips_finished_future():
    loop = asyncio.new_event_loop()
    try:
        future = loop.create_future()
        future.set_result("new-access")

        Waiter(future, "GET /api/a").on_failed(RuntimeError("late"))

        assert future.result() == "new-access"
    finally:
        loop.close()
