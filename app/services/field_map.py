from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

V = TypeVar("V")

# quote form field -> persisted column name
FIELD_MAP: dict[str, str] = {
    "pcbType": "pcbtype",
    "layers": "layers",
    "thickness": "thickness",
    "surfaceFinish": "surfacefinish",
    "copperWeight": "copperweight",
    "minTrace": "mintrace",
    "minHole": "minhole",
    "solderMask": "soldermask",
    "silkscreen": "silkscreen",
    "goldFingers": "goldfingers",
    "castellated": "castellated",
    "impedance": "impedance",
    "flyingProbe": "flyingprobe",
    "quantity": "quantity",
    "delivery": "delivery",
    "gerber": "gerber",
    "hdi": "hdi",
    "tg": "tg",
    "panelCount": "panelcount",
    "shipmentType": "shipmenttype",
    "singleLength": "singlelength",
    "singleWidth": "singlewidth",
    "singleCount": "singlecount",
    "border": "border",
    "maskCover": "maskcover",
    "edgePlating": "edgeplating",
    "halfHole": "halfhole",
    "edgeCover": "edgecover",
    "testMethod": "testmethod",
    "prodCap": "prodcap",
    "productReport": "productreport",
    "yyPin": "yyPin",
    "customerCode": "customercode",
    "payMethod": "paymethod",
    "qualityAttach": "qualityattach",
    "smt": "smt",
}


def translate(form: Mapping[str, V], field_map: Mapping[str, str] = FIELD_MAP) -> dict[str, V]:
    """Rename the keys of ``form`` to backend column names.

    Keys missing from ``field_map`` are kept as they are. When two form keys
    map to the same backend key, the one appearing later in ``form`` wins.
    """
    return {field_map.get(key, key): value for key, value in form.items()}


def translate_quote_form(form: Mapping[str, Any]) -> dict[str, Any]:
    return translate(form, FIELD_MAP)
