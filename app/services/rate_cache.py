from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache, partial

from app.core.config import get_settings
from app.core.logging import get_logger
from app.services.providers.fx_exchangerate import FxProvider
from app.services.providers.types import FxFailure, FxRateResult

logger = get_logger("rate_cache")

RateFetcher = Callable[[], Awaitable[FxRateResult]]


@dataclass(frozen=True)
class ExchangeRate:
    rate: Decimal
    base: str
    quote: str
    source: str = "fallback"
    rate_date: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.rate, Decimal) or not self.rate.is_finite() or self.rate <= 0:
            raise ValueError(f"exchange rate must be a positive finite Decimal, got {self.rate!r}")


@dataclass(frozen=True)
class RateCacheState:
    value: ExchangeRate
    loading: bool = False
    error: str | None = None
    # monotonic timestamps: last successful fetch, last completed attempt
    fetched_at: float | None = None
    checked_at: float | None = None


class RateCache:
    """Process-wide holder for the last known exchange rate.

    The cache starts out holding ``fallback`` so reads never see an empty
    value. ``refresh`` runs at most one fetch at a time: callers arriving
    while a fetch is in flight await that same fetch instead of starting a
    new one. A failed fetch keeps the previous value and records ``error``.
    State is swapped as a whole frozen snapshot, so readers see either the
    old state or the new one.

    With ``max_age_seconds`` set, a value older than that is stale, and
    ``refresh_if_stale`` starts a background fetch at most once per window.
    """

    def __init__(
        self,
        fetcher: RateFetcher,
        fallback: ExchangeRate,
        max_age_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._state = RateCacheState(value=fallback)
        self._inflight: asyncio.Future[RateCacheState] | None = None
        self.max_age_seconds = max_age_seconds
        self._clock = clock

    @property
    def state(self) -> RateCacheState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def is_stale(self) -> bool:
        if self.max_age_seconds is None:
            return False
        fetched_at = self._state.fetched_at
        return fetched_at is None or self._clock() - fetched_at > self.max_age_seconds

    def get(self) -> ExchangeRate:
        return self._state.value

    async def refresh(self) -> RateCacheState:
        # shield so a cancelled waiter does not cancel the shared fetch
        return await asyncio.shield(self._start())

    def refresh_if_stale(self) -> bool:
        """Start a background refresh when the value is stale.

        A failed attempt also waits out ``max_age_seconds`` before the next
        one, so a broken source is not hit on every call. Must be called from
        inside a running event loop.
        """
        if self.max_age_seconds is None or self._inflight is not None or not self.is_stale:
            return False
        checked_at = self._state.checked_at
        if checked_at is not None and self._clock() - checked_at <= self.max_age_seconds:
            return False
        self._start()
        return True

    def _start(self) -> asyncio.Future[RateCacheState]:
        if self._inflight is None:
            self._state = RateCacheState(
                value=self._state.value,
                loading=True,
                error=None,
                fetched_at=self._state.fetched_at,
                checked_at=self._state.checked_at,
            )
            self._inflight = asyncio.ensure_future(self._fetch())
        return self._inflight

    async def _fetch(self) -> RateCacheState:
        previous = self._state
        current = previous.value
        logger.info("fx_refresh_started", base=current.base, quote=current.quote)
        try:
            try:
                result = await self._fetcher()
            except Exception as exc:
                result = FxRateResult.failed("fetcher", FxFailure.NETWORK, str(exc) or exc.__class__.__name__)

            try:
                value = self._to_value(result, current)
            except Exception as exc:
                source = getattr(result, "source", "fetcher")
                result = FxRateResult.failed(source, FxFailure.MALFORMED, f"unusable rate result: {exc}")
                value = None

            now = self._clock()
            if value is not None:
                self._state = RateCacheState(value=value, fetched_at=now, checked_at=now)
                logger.info(
                    "fx_refresh_succeeded", base=value.base, quote=value.quote, rate=str(value.rate), source=value.source
                )
            else:
                error = result.detail or "Failed to fetch rate"
                self._state = RateCacheState(value=current, error=error, fetched_at=previous.fetched_at, checked_at=now)
                logger.warning(
                    "fx_refresh_failed",
                    base=current.base,
                    quote=current.quote,
                    source=result.source,
                    failure=result.failure.value if result.failure else None,
                    error=error,
                    using_rate=str(current.rate),
                )
            return self._state
        finally:
            if self._state.loading:
                self._state = RateCacheState(
                    value=current,
                    error="Rate refresh did not complete",
                    fetched_at=previous.fetched_at,
                    checked_at=self._clock(),
                )
            self._inflight = None

    @staticmethod
    def _to_value(result: FxRateResult, current: ExchangeRate) -> ExchangeRate | None:
        if not isinstance(result, FxRateResult):
            raise TypeError(f"fetcher returned {type(result).__name__}, expected FxRateResult")
        if not result.ok:
            if result.failure is None:
                raise ValueError(f"rate {result.rate!r} is not a positive finite number")
            return None
        return ExchangeRate(
            rate=result.rate,
            base=current.base,
            quote=current.quote,
            source=result.source,
            rate_date=result.rate_date,
        )


def fallback_rate_from_settings() -> ExchangeRate:
    settings = get_settings()
    return ExchangeRate(
        rate=settings.fx_fallback_rate,
        base=settings.fx_base_currency.upper(),
        quote=settings.fx_quote_currency.upper(),
        source="fallback",
    )


@lru_cache(maxsize=1)
def get_rate_cache() -> RateCache:
    settings = get_settings()
    fallback = fallback_rate_from_settings()
    provider = FxProvider(settings)
    return RateCache(
        partial(provider.get_rate, fallback.base, fallback.quote),
        fallback,
        max_age_seconds=settings.fx_max_age_seconds,
    )
