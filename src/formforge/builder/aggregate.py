"""The combined schema, UI hints and form data of one configuration."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import FieldNotFoundError, FieldValidationError, ValidationException
from .fields import FieldDescriptor, validate_descriptor
from .hints import infer_kind_from_fragment, resolve_hint
from .reconcile import reconcile_form_data
from .schema import (
    _is_number,
    add_or_update_field,
    empty_schema,
    field_names,
    is_required,
    remove_field,
)

# Property keys read back into a descriptor, with the type each must have.
CONSTRAINTS = {
    "title": (lambda v: isinstance(v, str), "a string"),
    "minimum": (_is_number, "a number"),
    "maximum": (_is_number, "a number"),
    "maxLength": (
        lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 0,
        "a non-negative integer",
    ),
    "pattern": (lambda v: isinstance(v, str), "a string"),
    "enum": (lambda v: isinstance(v, list), "a list"),
}


@dataclass(frozen=True)
class Aggregate:
    """Immutable editing state; every change produces a new instance."""

    schema: dict[str, Any] = field(default_factory=empty_schema)
    ui_schema: dict[str, Any] = field(default_factory=dict)
    form_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_snapshot(
        cls,
        schema: Optional[dict[str, Any]],
        ui_schema: Optional[dict[str, Any]],
        form_data: Optional[dict[str, Any]],
    ) -> "Aggregate":
        base = empty_schema()
        base.update(copy.deepcopy(schema or {}))
        if not base.get("required"):
            base.pop("required", None)
        return cls(
            schema=base,
            ui_schema=copy.deepcopy(ui_schema or {}),
            form_data=copy.deepcopy(form_data or {}),
        )

    @property
    def field_names(self) -> list[str]:
        return field_names(self.schema)

    def has_field(self, name: str) -> bool:
        return name in (self.schema.get("properties") or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema": copy.deepcopy(self.schema),
            "uiSchema": copy.deepcopy(self.ui_schema),
            "formData": copy.deepcopy(self.form_data),
        }


def apply_field(
    aggregate: Aggregate,
    descriptor: FieldDescriptor,
    previous_name: Optional[str] = None,
) -> Aggregate:
    """Add a field, or edit the field currently named ``previous_name``.

    Schema, hints and form data change together: either a complete new
    aggregate is returned or an exception is raised and nothing changes.

    Raises:
        FieldValidationError: The descriptor is rejected
        FieldNotFoundError: ``previous_name`` is not a field of the aggregate
    """
    if previous_name is not None and not aggregate.has_field(previous_name):
        raise FieldNotFoundError(f'Field "{previous_name}" not found', field=previous_name)

    validate_descriptor(descriptor, aggregate.field_names, previous_name)

    name = descriptor.name
    schema = add_or_update_field(aggregate.schema, descriptor, previous_name)

    ui_schema = copy.deepcopy(aggregate.ui_schema)
    if previous_name and previous_name != name:
        ui_schema.pop(previous_name, None)
    hint = resolve_hint(descriptor.kind)
    if hint:
        ui_schema[name] = hint
    else:
        ui_schema.pop(name, None)

    form_data = reconcile_form_data(aggregate.form_data, descriptor, previous_name)

    return Aggregate(schema=schema, ui_schema=ui_schema, form_data=form_data)


def drop_field(aggregate: Aggregate, name: str) -> Aggregate:
    """Remove a field from schema, hints and form data.

    Raises:
        FieldNotFoundError: The field does not exist
    """
    if not aggregate.has_field(name):
        raise FieldNotFoundError(f'Field "{name}" not found', field=name)

    ui_schema = copy.deepcopy(aggregate.ui_schema)
    ui_schema.pop(name, None)
    form_data = dict(aggregate.form_data)
    form_data.pop(name, None)
    return Aggregate(
        schema=remove_field(aggregate.schema, name),
        ui_schema=ui_schema,
        form_data=form_data,
    )


def _constraint(prop: dict[str, Any], key: str) -> Any:
    value = prop.get(key)
    check, _ = CONSTRAINTS[key]
    return value if value is not None and check(value) else None


def validate_snapshot(
    schema: Optional[dict[str, Any]],
    ui_schema: Optional[dict[str, Any]],
    form_data: Optional[dict[str, Any]],
) -> None:
    """Reject a snapshot whose fields could not be loaded back for editing.

    Raises:
        ValidationException: The schema, hint map or form data has the wrong shape
        FieldValidationError: A property is not an object or carries a
            constraint of the wrong type
    """
    for label, part in (("schema", schema), ("uiSchema", ui_schema), ("formData", form_data)):
        if part is not None and not isinstance(part, dict):
            raise ValidationException(f'"{label}" must be an object')

    schema = schema or {}
    properties = schema.get("properties")
    if properties is not None and not isinstance(properties, dict):
        raise ValidationException('Schema "properties" must be an object')

    required = schema.get("required")
    if required is not None and not (
        isinstance(required, list) and all(isinstance(r, str) for r in required)
    ):
        raise ValidationException('Schema "required" must be a list of field names')

    for name, prop in (properties or {}).items():
        if not isinstance(prop, dict):
            raise FieldValidationError(f'Field "{name}" must be an object', field=name)
        for key, (check, expected) in CONSTRAINTS.items():
            value = prop.get(key)
            if value is not None and not check(value):
                raise FieldValidationError(
                    f'Field "{name}": "{key}" must be {expected}', field=name
                )

    for name, hint in (ui_schema or {}).items():
        # Root level "ui:*" keys are renderer settings, not field hints.
        if not name.startswith("ui:") and not isinstance(hint, dict):
            raise FieldValidationError(f'UI hint for "{name}" must be an object', field=name)


def descriptor_for(aggregate: Aggregate, name: str) -> FieldDescriptor:
    """Load a stored field back into an editable descriptor.

    Constraints of the wrong type are dropped, as ``build_property`` would.
    """
    properties = aggregate.schema.get("properties")
    if not isinstance(properties, dict) or name not in properties:
        raise FieldNotFoundError(f'Field "{name}" not found', field=name)

    prop = properties[name] if isinstance(properties[name], dict) else {}
    hint = aggregate.ui_schema.get(name)
    if not isinstance(hint, dict):
        hint = {}
    enum = _constraint(prop, "enum")

    return FieldDescriptor(
        name=name,
        kind=infer_kind_from_fragment(prop, hint),
        label=_constraint(prop, "title") or None,
        options=", ".join(str(o) for o in enum) if enum is not None else None,
        required=is_required(aggregate.schema, name),
        min=_constraint(prop, "minimum"),
        max=_constraint(prop, "maximum"),
        max_length=_constraint(prop, "maxLength"),
        pattern=_constraint(prop, "pattern"),
    )


def descriptors(aggregate: Aggregate) -> list[FieldDescriptor]:
    return [descriptor_for(aggregate, name) for name in aggregate.field_names]


def export_document(name: str, aggregate: Aggregate) -> dict[str, Any]:
    """Project the aggregate into a self-contained document."""
    return {"name": name, **aggregate.to_dict()}


def export_json(name: str, aggregate: Aggregate, indent: int = 2) -> str:
    return json.dumps(
        export_document(name, aggregate),
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
    )
