from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class FxFailure(str, Enum):
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    MALFORMED = "malformed"
    NON_POSITIVE = "non_positive"
    CIRCUIT_OPEN = "circuit_open"


@dataclass
class FxRateResult:
    """Outcome of a single exchange-rate lookup.

    Either ``rate`` holds a positive value and ``failure`` is None, or
    ``failure`` tags what went wrong and ``detail`` carries a readable reason.
    """

    rate: Decimal | None
    source: str
    rate_date: str | None = None
    failure: FxFailure | None = None
    detail: str | None = None
    raw_payload: dict | None = None

    @property
    def ok(self) -> bool:
        if self.failure is not None or not isinstance(self.rate, Decimal):
            return False
        return self.rate.is_finite() and self.rate > 0

    @classmethod
    def failed(cls, source: str, failure: FxFailure, detail: str, raw_payload: dict | None = None) -> FxRateResult:
        return cls(rate=None, source=source, failure=failure, detail=detail, raw_payload=raw_payload)
