from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.deps import get_cache, get_fresh_cache
from app.core.rate_limit import refresh_limiter
from app.schemas.rates import FallbackRateResponse, RateCacheResponse
from app.services.fallback_rates import get_fallback_rate
from app.services.rate_cache import RateCache, RateCacheState

router = APIRouter(prefix="/rates", tags=["rates"])


def cache_response(rate_cache: RateCache, state: RateCacheState) -> RateCacheResponse:
    response = RateCacheResponse.model_validate(state)
    response.stale = rate_cache.is_stale
    return response


@router.get("/fx", response_model=RateCacheResponse)
async def fx_rate(rate_cache: RateCache = Depends(get_fresh_cache)):
    return cache_response(rate_cache, rate_cache.state)


@router.post("/fx/refresh", response_model=RateCacheResponse, dependencies=[Depends(refresh_limiter)])
async def refresh_fx_rate(rate_cache: RateCache = Depends(get_cache)):
    state = await rate_cache.refresh()
    return cache_response(rate_cache, state)


@router.get("/fallback", response_model=FallbackRateResponse)
async def fallback_rate(base: str = Query(min_length=3, max_length=3), quote: str = Query(min_length=3, max_length=3)):
    base = base.upper()
    quote = quote.upper()
    rate = get_fallback_rate(base, quote)
    if rate is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No fallback rate for {base}->{quote}")
    source = "same_currency" if base == quote else "fallback_fixed"
    return FallbackRateResponse(base=base, quote=quote, rate=rate, source=source)
