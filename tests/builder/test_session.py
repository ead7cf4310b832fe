"""Editing session unit tests"""

from types import SimpleNamespace

import pytest

from formforge.builder.fields import FieldDescriptor
from formforge.builder.session import EditingSession
from formforge.enums import FieldKind
from formforge.errors import FieldValidationError


def test_new_session_is_clean():
    session = EditingSession("checkout")
    assert session.dirty is False
    assert session.fields() == []


def test_field_operations_mark_dirty():
    session = EditingSession("checkout")
    session.add_field(FieldDescriptor(name="qty", kind=FieldKind.NUMBER))
    assert session.dirty is True
    assert session.aggregate.form_data == {"qty": 0}

    session.mark_saved(2)
    assert session.dirty is False
    assert session.version == 2

    session.edit_field("qty", FieldDescriptor(name="quantity", kind=FieldKind.RANGE))
    assert session.field("quantity").kind is FieldKind.RANGE
    session.delete_field("quantity")
    assert session.aggregate.field_names == []


def test_rejected_edit_keeps_state():
    session = EditingSession("checkout")
    session.add_field(FieldDescriptor(name="a"))
    session.mark_saved(2)
    snapshot = session.aggregate

    with pytest.raises(FieldValidationError):
        session.add_field(FieldDescriptor(name=""))

    assert session.aggregate is snapshot
    assert session.dirty is False


def test_set_value():
    session = EditingSession("checkout")
    session.add_field(FieldDescriptor(name="a"))
    session.set_value("a", "hello")
    assert session.aggregate.form_data == {"a": "hello"}


def test_preview_loads_version_without_dirtying():
    version = SimpleNamespace(
        version=3,
        schema={"type": "object", "properties": {"x": {"type": "boolean", "title": "x"}}},
        ui_schema={},
        form_data={"x": True},
    )
    session = EditingSession("checkout")
    session.add_field(FieldDescriptor(name="a"))

    session.preview(version)

    assert session.version == 3
    assert session.dirty is False
    assert session.field("x").kind is FieldKind.CHECKBOX


def test_from_version_and_export():
    version = SimpleNamespace(version=1, schema=None, ui_schema=None, form_data=None)
    session = EditingSession.from_version("checkout", version)
    assert session.version == 1
    assert session.export() == session.export()
    assert '"name": "checkout"' in session.export()
