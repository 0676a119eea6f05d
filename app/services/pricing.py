from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from app.services.customs_fee import (
    AGENT_FEE,
    COUNTRY_RATES,
    CountryRates,
    CustomsFeeParams,
    CustomsFeeResult,
    compute_customs_fee,
)
from app.services.fallback_rates import get_fallback_rate
from app.services.rate_cache import ExchangeRate, RateCache

CENT = Decimal("0.01")


class UnsupportedCurrencyPair(ValueError):
    def __init__(self, base: str, quote: str) -> None:
        super().__init__(f"No exchange rate available for {base}->{quote}")
        self.base = base
        self.quote = quote


@dataclass
class PriceEstimate:
    currency: str
    rate: ExchangeRate
    rate_loading: bool
    rate_error: str | None
    subtotal: Decimal
    shipping: Decimal
    customs: CustomsFeeResult
    customs_total: Decimal
    total: Decimal
    warnings: list[str] = field(default_factory=list)


def _money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class PricingService:
    """Combines the cached exchange rate with the customs estimate.

    Board and shipping prices come in the rate cache's base currency; the
    customs estimate is computed in ``reporting_currency``. Everything is
    converted to the requested currency and summed.
    """

    def __init__(
        self,
        rate_cache: RateCache,
        reporting_currency: str = "USD",
        agent_fee: Decimal = AGENT_FEE,
        country_rates: dict[str, CountryRates] = COUNTRY_RATES,
    ) -> None:
        self.rate_cache = rate_cache
        self.reporting_currency = reporting_currency.upper()
        self.agent_fee = agent_fee
        self.country_rates = country_rates

    def rate_for(self, base: str, quote: str) -> Decimal:
        base = base.upper()
        quote = quote.upper()
        if base == quote:
            return Decimal("1")
        cached = self.rate_cache.get()
        if (base, quote) == (cached.base, cached.quote):
            return cached.rate
        if (base, quote) == (cached.quote, cached.base):
            return Decimal("1") / cached.rate
        rate = get_fallback_rate(base, quote)
        if rate is None:
            raise UnsupportedCurrencyPair(base, quote)
        return rate

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        return Decimal(str(amount)) * self.rate_for(from_currency, to_currency)

    def estimate(
        self,
        subtotal: Decimal,
        shipping: Decimal,
        customs_params: CustomsFeeParams,
        currency: str | None = None,
    ) -> PriceEstimate:
        target = (currency or self.reporting_currency).upper()
        state = self.rate_cache.state
        base = state.value.base
        warnings: list[str] = []

        if state.loading:
            warnings.append("Exchange rate refresh in progress; using the last known rate.")
        if state.error:
            warnings.append(f"Exchange rate unavailable ({state.error}); using rate {state.value.rate}.")
        elif state.value.source == "fallback":
            warnings.append(f"Using fallback exchange rate {state.value.rate} {base}->{state.value.quote}.")
        elif self.rate_cache.is_stale:
            warnings.append(f"Exchange rate {state.value.rate} {base}->{state.value.quote} is past its freshness window.")

        customs = compute_customs_fee(customs_params, self.country_rates, self.agent_fee)

        subtotal_converted = _money(self.convert(subtotal, base, target))
        shipping_converted = _money(self.convert(shipping, base, target))
        customs_total = _money(self.convert(customs.total, self.reporting_currency, target))

        return PriceEstimate(
            currency=target,
            rate=state.value,
            rate_loading=state.loading,
            rate_error=state.error,
            subtotal=subtotal_converted,
            shipping=shipping_converted,
            customs=customs,
            customs_total=customs_total,
            total=subtotal_converted + shipping_converted + customs_total,
            warnings=warnings,
        )
