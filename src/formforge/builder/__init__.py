"""Schema synthesis and form data engine for the config builder."""

from .aggregate import (
    Aggregate,
    apply_field,
    descriptor_for,
    descriptors,
    drop_field,
    export_document,
    export_json,
    validate_snapshot,
)
from .fields import FieldDescriptor, parse_options, validate_descriptor
from .hints import infer_kind_from_fragment, resolve_hint
from .reconcile import default_value_for, reconcile_form_data, should_reset_value
from .schema import add_or_update_field, build_property, remove_field, schema_type_for
from .session import EditingSession, version_aggregate

__all__ = [
    "Aggregate",
    "EditingSession",
    "FieldDescriptor",
    "add_or_update_field",
    "apply_field",
    "build_property",
    "default_value_for",
    "descriptor_for",
    "descriptors",
    "drop_field",
    "export_document",
    "export_json",
    "infer_kind_from_fragment",
    "parse_options",
    "reconcile_form_data",
    "remove_field",
    "resolve_hint",
    "schema_type_for",
    "should_reset_value",
    "validate_descriptor",
    "validate_snapshot",
    "version_aggregate",
]
