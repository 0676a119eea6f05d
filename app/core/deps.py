from __future__ import annotations

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.pricing import PricingService
from app.services.rate_cache import RateCache, get_rate_cache


def get_cache() -> RateCache:
    return get_rate_cache()


async def get_fresh_cache(rate_cache: RateCache = Depends(get_cache)) -> RateCache:
    # async so it runs on the event loop; the refresh itself is not awaited
    rate_cache.refresh_if_stale()
    return rate_cache


def get_pricing_service(
    rate_cache: RateCache = Depends(get_fresh_cache),
    settings: Settings = Depends(get_settings),
) -> PricingService:
    return PricingService(
        rate_cache,
        reporting_currency=settings.reporting_currency,
        agent_fee=settings.customs_agent_fee,
    )
