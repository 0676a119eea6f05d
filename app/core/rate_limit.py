from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from fastapi import HTTPException, Request, status


class RateLimiter:
    """Sliding-window limit per client address, usable as a route dependency.

    Hosts whose window has emptied are dropped, at most once per window.
    """

    def __init__(self, limit: int = 10, window_seconds: int = 60, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.requests: defaultdict[str, deque[float]] = defaultdict(deque)
        self._clock = clock
        self._last_sweep = clock()

    def __call__(self, request: Request) -> None:
        key = request.client.host if request.client else "unknown"
        now = self._clock()
        if now - self._last_sweep > self.window_seconds:
            self._sweep(now)
        window = self.requests[key]
        while window and now - window[0] > self.window_seconds:
            window.popleft()
        if len(window) >= self.limit:
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Rate limit exceeded")
        window.append(now)

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self.requests.items() if not window or now - window[-1] > self.window_seconds]
        for key in expired:
            del self.requests[key]
        self._last_sweep = now

    def reset(self) -> None:
        self.requests.clear()
        self._last_sweep = self._clock()


refresh_limiter = RateLimiter(limit=5, window_seconds=60)
