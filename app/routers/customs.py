from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.config import Settings, get_settings
from app.schemas.customs import CustomsFeeRequest, CustomsFeeResponse
from app.services.customs_fee import compute_customs_fee

router = APIRouter(prefix="/customs", tags=["customs"])


@router.post("/fee", response_model=CustomsFeeResponse)
async def customs_fee(payload: CustomsFeeRequest, settings: Settings = Depends(get_settings)):
    result = compute_customs_fee(payload.to_params(), agent_fee=settings.customs_agent_fee)
    return CustomsFeeResponse.model_validate(result)
