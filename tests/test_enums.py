from formforge.enums import CHOICE_KINDS, NUMERIC_KINDS, FieldKind, SchemaType


def test_field_kind_values():
    assert len(FieldKind) == 17
    assert FieldKind.DATETIME_LOCAL.value == "datetime-local"
    assert FieldKind("url") is FieldKind.URL


def test_field_kind_is_string_enum():
    assert isinstance(FieldKind.TEXT, str)
    assert FieldKind.TEXT == "text"


def test_kind_groups():
    assert CHOICE_KINDS == {FieldKind.SELECT, FieldKind.RADIO}
    assert NUMERIC_KINDS == {FieldKind.NUMBER, FieldKind.RANGE}
    assert {t.value for t in SchemaType} == {"string", "number", "boolean"}
