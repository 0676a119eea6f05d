from __future__ import annotations

from enum import Enum


class DeclarationMethod(str, Enum):
    SELF_DECLARE = "self-declare"
    DDP = "ddp"
    AGENT = "agent"


class FxSource(str, Enum):
    EXCHANGERATE_API = "exchangerate_api"
    PROXY = "proxy"
    CURRENCYLAYER = "currencylayer"
