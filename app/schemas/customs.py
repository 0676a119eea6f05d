from __future__ import annotations

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import BaseSchema, CountryCode
from app.services.customs_fee import CustomsFeeParams


class CustomsFeeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    country: CountryCode
    declaration_method: str = Field(default="", alias="declarationMethod")
    courier: str = ""
    declared_value: Decimal = Field(ge=0, alias="declaredValue", allow_inf_nan=False)
    pcb_type: str | None = Field(default=None, alias="pcbType")

    def to_params(self) -> CustomsFeeParams:
        return CustomsFeeParams(
            country=self.country,
            declaration_method=self.declaration_method,
            courier=self.courier,
            declared_value=self.declared_value,
            pcb_type=self.pcb_type,
        )


class CustomsFeeResponse(BaseSchema):
    duty: Decimal
    vat: Decimal
    agent_fee: Decimal
    total: Decimal
    included_in_courier: bool
    explain: str
