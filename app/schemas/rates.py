from __future__ import annotations

from decimal import Decimal
from pydantic import BaseModel

from app.schemas.common import BaseSchema


class ExchangeRateRead(BaseSchema):
    base: str
    quote: str
    rate: Decimal
    source: str
    rate_date: str | None = None


class RateCacheResponse(BaseSchema):
    value: ExchangeRateRead
    loading: bool
    error: str | None = None
    stale: bool = False


class FallbackRateResponse(BaseModel):
    base: str
    quote: str
    rate: Decimal
    source: str = "fallback_fixed"
