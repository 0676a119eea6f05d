from app.services.field_map import FIELD_MAP, translate, translate_quote_form


def test_unknown_keys_pass_through():
    assert translate({"pcbType": "rigid", "foo": "bar"}, FIELD_MAP) == {"pcbtype": "rigid", "foo": "bar"}


def test_irregular_entries_kept_as_shipped():
    assert FIELD_MAP["yyPin"] == "yyPin"
    assert translate_quote_form({"yyPin": True, "surfaceFinish": "enig"}) == {"yyPin": True, "surfacefinish": "enig"}


def test_translate_is_pure_and_repeatable():
    form = {"panelCount": 2, "minTrace": "6/6", "note": None}
    snapshot = dict(form)
    first = translate(form)
    second = translate(form)
    assert first == second
    assert first is not second
    assert form == snapshot


def test_collision_last_key_wins():
    field_map = {"a": "x", "b": "x"}
    assert translate({"a": 1, "b": 2}, field_map) == {"x": 2}
    assert translate({"b": 2, "a": 1}, field_map) == {"x": 1}


def test_empty_form():
    assert translate({}) == {}


def test_every_mapped_key_is_lowercase_or_identity():
    for frontend, backend in FIELD_MAP.items():
        assert backend in (frontend.lower(), frontend)
