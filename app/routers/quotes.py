from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.core.deps import get_pricing_service
from app.schemas.quote import BackendPayload, QuoteEstimateRequest, QuoteEstimateResponse
from app.services.field_map import translate_quote_form
from app.services.pricing import PricingService, UnsupportedCurrencyPair

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/backend-payload", response_model=BackendPayload)
async def backend_payload(form: dict[str, Any] = Body(...)):
    return BackendPayload(record=translate_quote_form(form))


@router.post("/estimate", response_model=QuoteEstimateResponse)
async def estimate(payload: QuoteEstimateRequest, service: PricingService = Depends(get_pricing_service)):
    try:
        result = service.estimate(
            payload.subtotal,
            payload.shipping,
            payload.customs.to_params(),
            currency=payload.currency,
        )
    except UnsupportedCurrencyPair as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return QuoteEstimateResponse.model_validate(result)
