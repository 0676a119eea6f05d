from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "PCB Quote Pricing Engine"
    environment: str = "local"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS")

    fx_source: str = Field(default="exchangerate_api", alias="FX_SOURCE")
    fx_api_base: str = Field(
        default="https://api.exchangerate-api.com/v4/latest",
        alias="FX_API_BASE",
    )
    fx_proxy_url: str | None = Field(default=None, alias="FX_PROXY_URL")
    currencylayer_api_base: str = Field(
        default="https://api.currencylayer.com/live",
        alias="CURRENCYLAYER_API_BASE",
    )
    currencylayer_api_key: str | None = Field(default=None, alias="CURRENCYLAYER_API_KEY")
    fx_timeout_seconds: float = Field(default=10, alias="FX_TIMEOUT_SECONDS")

    fx_base_currency: str = Field(default="CNY", alias="FX_BASE_CURRENCY")
    fx_quote_currency: str = Field(default="USD", alias="FX_QUOTE_CURRENCY")
    fx_fallback_rate: Decimal = Field(default=Decimal("0.14"), gt=0, alias="FX_FALLBACK_RATE")
    fx_max_age_seconds: float | None = Field(default=300, gt=0, alias="FX_MAX_AGE_SECONDS")

    customs_agent_fee: Decimal = Field(default=Decimal("20"), ge=0, alias="CUSTOMS_AGENT_FEE")
    reporting_currency: str = Field(default="USD", alias="REPORTING_CURRENCY")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
