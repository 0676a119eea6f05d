from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

USER_AGENT = "pcb-quote-pricing/1.0"


@dataclass
class CircuitBreaker:
    max_failures: int = 3
    reset_seconds: int = 30
    failures: int = 0
    opened_at: float | None = None

    def allow(self) -> bool:
        if self.opened_at is None:
            return True
        if time.monotonic() - self.opened_at > self.reset_seconds:
            # half-open: let one attempt through, a failure re-opens immediately
            self.failures = self.max_failures - 1
            self.opened_at = None
            return True
        return False

    def record_failure(self) -> None:
        self.failures += 1
        if self.failures >= self.max_failures:
            self.opened_at = time.monotonic()

    def record_success(self) -> None:
        self.failures = 0
        self.opened_at = None


async def get_json(
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout: float = 10,
    attempts: int = 3,
) -> Any:
    """GET ``url`` and decode the JSON body.

    Transport errors and non-2xx responses are retried with exponential
    backoff; the last error is re-raised once ``attempts`` are exhausted.
    """
    request_headers = {"User-Agent": USER_AGENT, **(headers or {})}
    async with httpx.AsyncClient(timeout=timeout) as client:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.HTTPError),
            reraise=True,
        ):
            with attempt:
                response = await client.get(url, headers=request_headers, params=params)
                response.raise_for_status()
                return response.json()
