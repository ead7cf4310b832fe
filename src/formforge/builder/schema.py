"""Schema synthesis: field descriptors to JSON-Schema property nodes."""

from __future__ import annotations

import copy
from typing import Any, Optional

from ..enums import FieldKind, SchemaType
from .fields import FieldDescriptor

EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


def empty_schema() -> dict[str, Any]:
    return copy.deepcopy(EMPTY_SCHEMA)


def schema_type_for(kind: FieldKind) -> SchemaType:
    """Map an input kind to its schema type.

    The mapping is coarse on purpose: every string-like kind becomes
    ``string`` and the hint map carries the distinction.
    """
    match kind:
        case FieldKind.NUMBER | FieldKind.RANGE:
            return SchemaType.NUMBER
        case FieldKind.CHECKBOX:
            return SchemaType.BOOLEAN
        case (
            FieldKind.TEXT
            | FieldKind.PASSWORD
            | FieldKind.SELECT
            | FieldKind.RADIO
            | FieldKind.TEXTAREA
            | FieldKind.EMAIL
            | FieldKind.URL
            | FieldKind.TEL
            | FieldKind.SEARCH
            | FieldKind.TIME
            | FieldKind.DATETIME_LOCAL
            | FieldKind.MONTH
            | FieldKind.WEEK
            | FieldKind.DATE
        ):
            return SchemaType.STRING
    raise ValueError(f"Unknown field kind: {kind!r}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def build_property(descriptor: FieldDescriptor) -> dict[str, Any]:
    """Build the schema node for one field."""
    prop: dict[str, Any] = {
        "type": schema_type_for(descriptor.kind).value,
        "title": descriptor.label or descriptor.name,
    }

    if descriptor.is_choice:
        options = descriptor.option_list
        if options:
            prop["enum"] = options

    if _is_number(descriptor.min):
        prop["minimum"] = descriptor.min
    if _is_number(descriptor.max):
        prop["maximum"] = descriptor.max
    if _is_number(descriptor.max_length):
        prop["maxLength"] = descriptor.max_length
    if isinstance(descriptor.pattern, str) and descriptor.pattern:
        prop["pattern"] = descriptor.pattern

    return prop


def _required_list(schema: dict[str, Any]) -> list[str]:
    required = schema.get("required")
    if not isinstance(required, list):
        return []
    seen: list[str] = []
    for name in required:
        if name not in seen:
            seen.append(name)
    return seen


def _set_required(schema: dict[str, Any], required: list[str]) -> None:
    # An empty list and a missing key are different wire states; only the
    # missing key is canonical.
    if required:
        schema["required"] = required
    else:
        schema.pop("required", None)


def add_or_update_field(
    schema: Optional[dict[str, Any]],
    descriptor: FieldDescriptor,
    previous_name: Optional[str] = None,
) -> dict[str, Any]:
    """Merge a field into the aggregate object schema.

    Args:
        schema: Current aggregate schema (not modified)
        descriptor: Validated field descriptor
        previous_name: Name the field had before, when editing

    Returns:
        A new aggregate schema
    """
    updated = empty_schema()
    updated.update(copy.deepcopy(schema or {}))
    properties = dict(updated.get("properties") or {})
    required = _required_list(updated)

    name = descriptor.name
    if previous_name and previous_name != name:
        properties.pop(previous_name, None)
        required = [r for r in required if r != previous_name]

    properties[name] = build_property(descriptor)

    if descriptor.required:
        if name not in required:
            required.append(name)
    else:
        required = [r for r in required if r != name]

    updated["properties"] = properties
    _set_required(updated, required)
    return updated


def remove_field(schema: Optional[dict[str, Any]], name: str) -> dict[str, Any]:
    """Drop a field from the aggregate schema."""
    updated = empty_schema()
    updated.update(copy.deepcopy(schema or {}))
    properties = dict(updated.get("properties") or {})
    properties.pop(name, None)
    updated["properties"] = properties
    _set_required(updated, [r for r in _required_list(updated) if r != name])
    return updated


def field_names(schema: Optional[dict[str, Any]]) -> list[str]:
    return list(((schema or {}).get("properties") or {}).keys())


def is_required(schema: Optional[dict[str, Any]], name: str) -> bool:
    return name in _required_list(schema or {})
