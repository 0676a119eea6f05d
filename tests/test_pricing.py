from decimal import Decimal

import pytest

from app.services.customs_fee import CustomsFeeParams
from app.services.pricing import PricingService, UnsupportedCurrencyPair
from app.services.rate_cache import ExchangeRate, RateCacheState


class FakeRateCache:
    def __init__(self, state: RateCacheState, is_stale: bool = False):
        self.state = state
        self.is_stale = is_stale

    def get(self) -> ExchangeRate:
        return self.state.value


def cache_with(rate: str, source: str = "test", error=None, loading=False, is_stale=False) -> FakeRateCache:
    value = ExchangeRate(rate=Decimal(rate), base="CNY", quote="USD", source=source)
    return FakeRateCache(RateCacheState(value=value, loading=loading, error=error), is_stale=is_stale)


def de_ddp(value: str = "100") -> CustomsFeeParams:
    return CustomsFeeParams(country="DE", declaration_method="ddp", courier="dhl", declared_value=Decimal(value))


def test_estimate_in_reporting_currency():
    service = PricingService(cache_with("0.14"))
    estimate = service.estimate(Decimal("1000"), Decimal("200"), de_ddp())
    assert estimate.currency == "USD"
    assert estimate.subtotal == Decimal("140.00")
    assert estimate.shipping == Decimal("28.00")
    assert estimate.customs.total == 47
    assert estimate.customs_total == Decimal("47.00")
    assert estimate.total == Decimal("215.00")
    assert estimate.warnings == []


def test_estimate_in_base_currency_inverts_cached_rate():
    service = PricingService(cache_with("0.125"))
    estimate = service.estimate(Decimal("100"), Decimal("0"), de_ddp(), currency="cny")
    assert estimate.currency == "CNY"
    assert estimate.subtotal == Decimal("100.00")
    assert estimate.customs_total == Decimal("376.00")


def test_other_pairs_use_fallback_table():
    service = PricingService(cache_with("0.14"))
    assert service.rate_for("USD", "EUR") == Decimal("0.85")
    estimate = service.estimate(Decimal("0"), Decimal("0"), de_ddp(), currency="EUR")
    assert estimate.subtotal == 0
    assert estimate.customs_total == Decimal("39.95")


def test_unknown_pair_raises():
    service = PricingService(cache_with("0.14"))
    with pytest.raises(UnsupportedCurrencyPair):
        service.convert(Decimal("1"), "CNY", "XYZ")


def test_fallback_and_error_are_reported_not_raised():
    service = PricingService(cache_with("0.14", source="fallback", error="HTTP 503"))
    estimate = service.estimate(Decimal("100"), Decimal("0"), de_ddp("0"))
    assert estimate.rate_error == "HTTP 503"
    assert estimate.total == Decimal("14.00")
    assert any("HTTP 503" in w for w in estimate.warnings)


def test_loading_cache_still_estimates():
    service = PricingService(cache_with("0.14", source="fallback", loading=True))
    estimate = service.estimate(Decimal("10"), Decimal("0"), de_ddp("0"))
    assert estimate.rate_loading is True
    assert estimate.total == Decimal("1.40")
    assert len(estimate.warnings) == 2


def test_custom_agent_fee():
    service = PricingService(cache_with("0.14"), agent_fee=Decimal("5"))
    estimate = service.estimate(Decimal("0"), Decimal("0"), de_ddp())
    assert estimate.customs.agent_fee == 5
    assert estimate.total == Decimal("32.00")


def test_stale_live_rate_is_flagged():
    service = PricingService(cache_with("0.14", is_stale=True))
    estimate = service.estimate(Decimal("100"), Decimal("0"), de_ddp("0"))
    assert estimate.total == Decimal("14.00")
    assert any("freshness window" in w for w in estimate.warnings)


def test_fresh_live_rate_has_no_warning():
    service = PricingService(cache_with("0.14", is_stale=False))
    estimate = service.estimate(Decimal("100"), Decimal("0"), de_ddp("0"))
    assert estimate.warnings == []
