from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.models.enums import DeclarationMethod

DEFAULT_DUTY_RATE = Decimal("0.10")
DEFAULT_VAT_RATE = Decimal("0.20")
AGENT_FEE = Decimal("20")

BUNDLED_METHODS = frozenset({DeclarationMethod.DDP.value, DeclarationMethod.AGENT.value})

EXPLAIN_INCLUDED = "All customs fees are included in the courier fee."
EXPLAIN_ON_DELIVERY = "Duties and taxes will be collected by customs or courier upon delivery."


@dataclass(frozen=True)
class CountryRates:
    duty_rate: Decimal
    vat_rate: Decimal


# exact match on ISO country code; anything else uses the defaults
COUNTRY_RATES: dict[str, CountryRates] = {
    "US": CountryRates(duty_rate=Decimal("0.05"), vat_rate=Decimal("0")),
    "DE": CountryRates(duty_rate=Decimal("0.08"), vat_rate=Decimal("0.19")),
}

DEFAULT_RATES = CountryRates(duty_rate=DEFAULT_DUTY_RATE, vat_rate=DEFAULT_VAT_RATE)


@dataclass(frozen=True)
class CustomsFeeParams:
    country: str
    declaration_method: str
    courier: str
    declared_value: Decimal
    pcb_type: str | None = None


@dataclass(frozen=True)
class CustomsFeeResult:
    duty: Decimal
    vat: Decimal
    agent_fee: Decimal
    total: Decimal
    included_in_courier: bool
    explain: str


def rates_for_country(country: str, country_rates: dict[str, CountryRates] = COUNTRY_RATES) -> CountryRates:
    return country_rates.get(country, DEFAULT_RATES)


def is_included_in_courier(declaration_method: str) -> bool:
    method = declaration_method.value if isinstance(declaration_method, DeclarationMethod) else declaration_method
    return method in BUNDLED_METHODS


def compute_customs_fee(
    params: CustomsFeeParams,
    country_rates: dict[str, CountryRates] = COUNTRY_RATES,
    agent_fee: Decimal = AGENT_FEE,
) -> CustomsFeeResult:
    """Estimate duty, VAT and broker fee for a shipment.

    The declared value is not validated: a negative value yields negative
    duty and VAT, plus the broker fee for ddp/agent. The broker fee is
    skipped only when nothing is declared, so a zero value gives a zero total.
    """
    declared_value = Decimal(str(params.declared_value))
    rates = rates_for_country(params.country, country_rates)
    included = is_included_in_courier(params.declaration_method)

    duty = declared_value * rates.duty_rate
    vat = declared_value * rates.vat_rate
    fee = agent_fee if included and declared_value != 0 else Decimal("0")

    return CustomsFeeResult(
        duty=duty,
        vat=vat,
        agent_fee=fee,
        total=duty + vat + fee,
        included_in_courier=included,
        explain=EXPLAIN_INCLUDED if included else EXPLAIN_ON_DELIVERY,
    )
