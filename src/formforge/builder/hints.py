"""UI hint resolution.

The rendering vocabulary is smaller than the kind enum. Kinds with a native
widget get ``ui:widget``; kinds without one are rendered as a text widget and
carry their real kind in ``ui:options.inputType``.
"""

from __future__ import annotations

from typing import Any, Optional

from ..enums import FieldKind

WIDGET = "ui:widget"
OPTIONS = "ui:options"
INPUT_TYPE = "inputType"

INPUT_TYPE_KINDS = frozenset(
    {
        FieldKind.TEL,
        FieldKind.SEARCH,
        FieldKind.TIME,
        FieldKind.DATETIME_LOCAL,
        FieldKind.MONTH,
        FieldKind.WEEK,
    }
)

WIDGET_KINDS = {
    "textarea": FieldKind.TEXTAREA,
    "password": FieldKind.PASSWORD,
    "email": FieldKind.EMAIL,
    "uri": FieldKind.URL,
    "radio": FieldKind.RADIO,
    "range": FieldKind.RANGE,
    "date": FieldKind.DATE,
}

FORMAT_KINDS = {
    "email": FieldKind.EMAIL,
    "uri": FieldKind.URL,
}


def widget_for(kind: FieldKind) -> Optional[str]:
    """Return the native widget name, or None for the default renderer."""
    match kind:
        case FieldKind.TEXTAREA:
            return "textarea"
        case FieldKind.PASSWORD:
            return "password"
        case FieldKind.EMAIL:
            return "email"
        case FieldKind.URL:
            return "uri"
        case FieldKind.RADIO:
            return "radio"
        case FieldKind.RANGE:
            return "range"
        case FieldKind.DATE:
            return "date"
        case FieldKind.TEXT | FieldKind.SELECT | FieldKind.CHECKBOX | FieldKind.NUMBER:
            return None
        case (
            FieldKind.TEL
            | FieldKind.SEARCH
            | FieldKind.TIME
            | FieldKind.DATETIME_LOCAL
            | FieldKind.MONTH
            | FieldKind.WEEK
        ):
            return None
    raise ValueError(f"Unknown field kind: {kind!r}")


def resolve_hint(kind: FieldKind) -> dict[str, Any]:
    """Build the UI hint fragment for a kind.

    An empty dict means "use the default renderer" and is never stored in
    the hint map.
    """
    if kind in INPUT_TYPE_KINDS:
        return {WIDGET: "text", OPTIONS: {INPUT_TYPE: kind.value}}

    widget = widget_for(kind)
    if widget:
        return {WIDGET: widget}
    return {}


def _input_type_kind(hint: dict[str, Any]) -> Optional[FieldKind]:
    options = hint.get(OPTIONS)
    if not isinstance(options, dict):
        return None
    try:
        kind = FieldKind(options.get(INPUT_TYPE))
    except ValueError:
        return None
    return kind if kind in INPUT_TYPE_KINDS else None


def infer_kind_from_fragment(
    prop: Optional[dict[str, Any]], hint: Optional[dict[str, Any]] = None
) -> FieldKind:
    """Recover the input kind of a stored field.

    Several kinds produce overlapping fragments, so the checks run in a
    fixed order: schema type, enum, side-channel input type, widget, then
    schema format.
    """
    prop = prop or {}
    hint = hint or {}
    widget = hint.get(WIDGET)

    if prop.get("type") == "boolean":
        return FieldKind.CHECKBOX

    if prop.get("type") == "number":
        return FieldKind.RANGE if widget == "range" else FieldKind.NUMBER

    if isinstance(prop.get("enum"), list):
        return FieldKind.RADIO if widget == "radio" else FieldKind.SELECT

    input_type = _input_type_kind(hint)
    if input_type is not None:
        return input_type

    if widget in WIDGET_KINDS:
        return WIDGET_KINDS[widget]

    if prop.get("format") in FORMAT_KINDS:
        return FORMAT_KINDS[prop["format"]]

    return FieldKind.TEXT
