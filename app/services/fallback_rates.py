from __future__ import annotations

from decimal import Decimal

# fixed rates used when no live rate is available for a pair
FALLBACK_EXCHANGE_RATES: dict[str, dict[str, Decimal]] = {
    "USD": {
        "CNY": Decimal("7.2"),
        "EUR": Decimal("0.85"),
        "GBP": Decimal("0.75"),
        "JPY": Decimal("110"),
        "HKD": Decimal("7.8"),
    },
    "CNY": {
        "USD": Decimal("0.139"),
        "EUR": Decimal("0.118"),
        "GBP": Decimal("0.104"),
        "JPY": Decimal("15.28"),
        "HKD": Decimal("1.08"),
    },
    "EUR": {
        "USD": Decimal("1.18"),
        "CNY": Decimal("8.47"),
        "GBP": Decimal("0.88"),
        "JPY": Decimal("129"),
        "HKD": Decimal("9.18"),
    },
}


def get_fallback_rate(base: str, quote: str) -> Decimal | None:
    base = base.upper()
    quote = quote.upper()
    if base == quote:
        return Decimal("1")
    return FALLBACK_EXCHANGE_RATES.get(base, {}).get(quote)
