"""Schema synthesis unit tests"""

import pytest

from formforge.builder.fields import FieldDescriptor
from formforge.builder.schema import (
    add_or_update_field,
    build_property,
    empty_schema,
    remove_field,
    schema_type_for,
)
from formforge.enums import FieldKind, SchemaType


@pytest.mark.parametrize(
    "kind,expected",
    [
        (FieldKind.NUMBER, SchemaType.NUMBER),
        (FieldKind.RANGE, SchemaType.NUMBER),
        (FieldKind.CHECKBOX, SchemaType.BOOLEAN),
        (FieldKind.EMAIL, SchemaType.STRING),
        (FieldKind.URL, SchemaType.STRING),
        (FieldKind.SELECT, SchemaType.STRING),
        (FieldKind.WEEK, SchemaType.STRING),
        (FieldKind.DATE, SchemaType.STRING),
    ],
)
def test_schema_type_for(kind, expected):
    assert schema_type_for(kind) is expected


def test_schema_type_is_total():
    for kind in FieldKind:
        assert schema_type_for(kind) in set(SchemaType)


def test_build_property_uses_label_as_title():
    prop = build_property(FieldDescriptor(name="color", label="Colour"))
    assert prop == {"type": "string", "title": "Colour"}


def test_build_property_falls_back_to_name():
    assert build_property(FieldDescriptor(name="color"))["title"] == "color"


def test_build_property_enum_for_select():
    prop = build_property(
        FieldDescriptor(name="color", kind=FieldKind.SELECT, options="Red, Green,,Red")
    )
    assert prop["enum"] == ["Red", "Green", "Red"]


def test_build_property_no_enum_for_text_with_options():
    prop = build_property(FieldDescriptor(name="color", options="Red,Green"))
    assert "enum" not in prop


def test_build_property_copies_constraints():
    prop = build_property(
        FieldDescriptor(
            name="qty", kind=FieldKind.NUMBER, min=1, max=10, max_length=3, pattern="\\d+"
        )
    )
    assert prop["minimum"] == 1
    assert prop["maximum"] == 10
    assert prop["maxLength"] == 3
    assert prop["pattern"] == "\\d+"


def test_build_property_omits_absent_constraints():
    prop = build_property(FieldDescriptor(name="qty", kind=FieldKind.NUMBER))
    for key in ("minimum", "maximum", "maxLength", "pattern", "enum"):
        assert key not in prop


def test_add_field_does_not_mutate_input():
    schema = empty_schema()
    add_or_update_field(schema, FieldDescriptor(name="a", required=True))
    assert schema == {"type": "object", "properties": {}}


def test_add_required_field():
    schema = add_or_update_field(None, FieldDescriptor(name="a", required=True))
    assert schema["type"] == "object"
    assert schema["properties"]["a"] == {"type": "string", "title": "a"}
    assert schema["required"] == ["a"]


def test_optional_field_leaves_no_required_key():
    schema = add_or_update_field(empty_schema(), FieldDescriptor(name="a"))
    assert "required" not in schema


def test_removing_last_required_drops_key():
    schema = add_or_update_field(None, FieldDescriptor(name="a", required=True))
    schema = add_or_update_field(schema, FieldDescriptor(name="a", required=False))
    assert "required" not in schema


def test_synthesis_is_idempotent():
    descriptor = FieldDescriptor(
        name="size", kind=FieldKind.RADIO, options="S,M,L", required=True
    )
    once = add_or_update_field(empty_schema(), descriptor)
    twice = add_or_update_field(once, descriptor)
    assert once == twice


def test_rename_moves_property_and_required():
    schema = add_or_update_field(None, FieldDescriptor(name="a", required=True))
    schema = add_or_update_field(schema, FieldDescriptor(name="keep", required=True))
    schema = add_or_update_field(
        schema, FieldDescriptor(name="b", required=True), previous_name="a"
    )
    assert "a" not in schema["properties"]
    assert "b" in schema["properties"]
    assert set(schema["required"]) == {"keep", "b"}


def test_rename_to_optional_drops_required():
    schema = add_or_update_field(None, FieldDescriptor(name="a", required=True))
    schema = add_or_update_field(schema, FieldDescriptor(name="b"), previous_name="a")
    assert schema["properties"] == {"b": {"type": "string", "title": "b"}}
    assert "required" not in schema


def test_preserves_other_top_level_keys():
    schema = {"type": "object", "title": "Checkout", "properties": {}}
    updated = add_or_update_field(schema, FieldDescriptor(name="a"))
    assert updated["title"] == "Checkout"


def test_remove_field():
    schema = add_or_update_field(None, FieldDescriptor(name="a", required=True))
    schema = add_or_update_field(schema, FieldDescriptor(name="b"))
    updated = remove_field(schema, "a")
    assert list(updated["properties"]) == ["b"]
    assert "required" not in updated
