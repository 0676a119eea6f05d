from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import httpx

from app.core.config import Settings, get_settings
from app.models.enums import FxSource
from app.services.providers.http_client import CircuitBreaker, get_json
from app.services.providers.types import FxFailure, FxRateResult

_cb = CircuitBreaker()


class FxProvider:
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.source = FxSource(self.settings.fx_source)
        if self.source == FxSource.PROXY and not self.settings.fx_proxy_url:
            raise ValueError("FX_PROXY_URL must be set when FX_SOURCE=proxy")
        if self.source == FxSource.CURRENCYLAYER and not self.settings.currencylayer_api_key:
            raise ValueError("CURRENCYLAYER_API_KEY must be set when FX_SOURCE=currencylayer")

    async def get_rate(self, base: str, quote: str) -> FxRateResult:
        base = base.upper()
        quote = quote.upper()
        if base == quote:
            return FxRateResult(rate=Decimal("1"), source="identity", rate_date=str(date.today()))

        source = self.source.value
        if not _cb.allow():
            return FxRateResult.failed(source, FxFailure.CIRCUIT_OPEN, f"{source} temporarily disabled after repeated failures")

        url, params = self._build_request(base, quote)
        try:
            payload = await get_json(url, params=params, timeout=self.settings.fx_timeout_seconds)
        except httpx.HTTPStatusError as exc:
            _cb.record_failure()
            return FxRateResult.failed(source, FxFailure.HTTP_STATUS, f"{source} responded with HTTP {exc.response.status_code}")
        except httpx.HTTPError as exc:
            _cb.record_failure()
            return FxRateResult.failed(source, FxFailure.NETWORK, f"{source} request failed: {exc.__class__.__name__}")
        except ValueError:
            _cb.record_failure()
            return FxRateResult.failed(source, FxFailure.MALFORMED, f"{source} returned a body that is not JSON")

        if not isinstance(payload, dict):
            _cb.record_failure()
            return FxRateResult.failed(source, FxFailure.MALFORMED, f"{source} returned an unexpected payload")

        value, rate_date = self._extract_rate(payload, base, quote)
        rate = _to_decimal(value)
        if rate is None:
            _cb.record_failure()
            return FxRateResult.failed(
                source, FxFailure.MALFORMED, f"{source} payload has no numeric {base}->{quote} rate", raw_payload=payload
            )
        if rate <= 0:
            _cb.record_failure()
            return FxRateResult.failed(
                source, FxFailure.NON_POSITIVE, f"{source} returned non-positive rate {rate}", raw_payload=payload
            )

        _cb.record_success()
        return FxRateResult(rate=rate, source=source, rate_date=rate_date, raw_payload=payload)

    def _build_request(self, base: str, quote: str) -> tuple[str, dict[str, str] | None]:
        if self.source == FxSource.PROXY:
            return self.settings.fx_proxy_url, {"base_currency": base, "target_currency": quote}
        if self.source == FxSource.CURRENCYLAYER:
            return self.settings.currencylayer_api_base, {
                "access_key": self.settings.currencylayer_api_key,
                "source": base,
                "currencies": quote,
            }
        return f"{self.settings.fx_api_base.rstrip('/')}/{base}", None

    def _extract_rate(self, payload: dict, base: str, quote: str) -> tuple[Any, str | None]:
        if self.source == FxSource.PROXY:
            return payload.get("rate"), payload.get("last_updated")

        if self.source == FxSource.CURRENCYLAYER:
            if not payload.get("success"):
                return None, None
            quotes = payload.get("quotes") or {}
            rate_date = None
            if isinstance(payload.get("timestamp"), int):
                rate_date = datetime.fromtimestamp(payload["timestamp"], tz=timezone.utc).date().isoformat()
            return quotes.get(f"{base}{quote}") if isinstance(quotes, dict) else None, rate_date

        rates = payload.get("rates") or {}
        if not isinstance(rates, dict):
            return None, None
        return rates.get(quote), payload.get("date")


def _to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return Decimal(str(value))
