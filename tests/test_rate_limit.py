from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from app.core.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def request_from(host: str):
    return SimpleNamespace(client=SimpleNamespace(host=host))


def test_limit_per_host():
    limiter = RateLimiter(limit=2, window_seconds=60, clock=FakeClock())
    limiter(request_from("a"))
    limiter(request_from("a"))
    limiter(request_from("b"))
    with pytest.raises(HTTPException) as exc:
        limiter(request_from("a"))
    assert exc.value.status_code == 429


def test_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter(request_from("a"))
    clock.now += 61
    limiter(request_from("a"))


def test_idle_hosts_are_dropped():
    clock = FakeClock()
    limiter = RateLimiter(limit=5, window_seconds=60, clock=clock)
    for host in ("a", "b", "c"):
        limiter(request_from(host))
    assert set(limiter.requests) == {"a", "b", "c"}

    clock.now += 30
    limiter(request_from("b"))
    clock.now += 45
    limiter(request_from("d"))
    assert set(limiter.requests) == {"b", "d"}


def test_missing_client_uses_shared_key():
    limiter = RateLimiter(limit=1, window_seconds=60, clock=FakeClock())
    limiter(SimpleNamespace(client=None))
    assert set(limiter.requests) == {"unknown"}
