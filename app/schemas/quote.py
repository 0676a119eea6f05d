from __future__ import annotations

from decimal import Decimal
from typing import Any
from pydantic import BaseModel, Field

from app.schemas.common import BaseSchema, CurrencyCode
from app.schemas.customs import CustomsFeeRequest, CustomsFeeResponse
from app.schemas.rates import ExchangeRateRead


class BackendPayload(BaseModel):
    record: dict[str, Any]


class QuoteEstimateRequest(BaseModel):
    subtotal: Decimal = Field(ge=0, description="Board price in the rate base currency")
    shipping: Decimal = Field(default=Decimal("0"), ge=0)
    currency: CurrencyCode | None = None
    customs: CustomsFeeRequest


class QuoteEstimateResponse(BaseSchema):
    currency: str
    rate: ExchangeRateRead
    rate_loading: bool
    rate_error: str | None = None
    subtotal: Decimal
    shipping: Decimal
    customs: CustomsFeeResponse
    customs_total: Decimal
    total: Decimal
    warnings: list[str] = Field(default_factory=list)
