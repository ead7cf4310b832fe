"""Form data reconciliation.

Decides the value a field holds after it is added, edited or renamed so
that stored data always type-checks against the field's schema node.
"""

from __future__ import annotations

from typing import Any, Optional

from ..enums import FieldKind
from .fields import FieldDescriptor, parse_options

_MISSING = object()


def default_value_for(kind: FieldKind, options: Optional[str] = None) -> Any:
    match kind:
        case FieldKind.CHECKBOX:
            return False
        case FieldKind.NUMBER | FieldKind.RANGE:
            return 0
        case FieldKind.SELECT | FieldKind.RADIO:
            parsed = parse_options(options)
            return parsed[0] if parsed else ""
        case _:
            return ""


def should_reset_value(
    kind: FieldKind, options: Optional[str] = None, previous: Any = _MISSING
) -> bool:
    """Tell whether a stored value no longer fits the field's kind.

    A missing previous value (``None`` or omitted) always resets.
    """
    if previous is _MISSING or previous is None:
        return True

    match kind:
        case FieldKind.CHECKBOX:
            return not isinstance(previous, bool)
        case FieldKind.NUMBER | FieldKind.RANGE:
            return isinstance(previous, bool) or not isinstance(previous, (int, float))
        case FieldKind.SELECT | FieldKind.RADIO:
            if not isinstance(previous, str):
                return True
            return previous not in parse_options(options)
        case _:
            return not isinstance(previous, str)


def reconcile_form_data(
    form_data: Optional[dict[str, Any]],
    descriptor: FieldDescriptor,
    previous_name: Optional[str] = None,
) -> dict[str, Any]:
    """Return new form data after a field is added or edited.

    When ``previous_name`` is given the field is being edited: the stored
    value moves to the new key first and is then kept or reset. Otherwise
    the field is being added and the default is only written when the key
    is not already present.
    """
    updated = dict(form_data or {})
    name = descriptor.name

    if previous_name is None:
        if name not in updated:
            updated[name] = default_value_for(descriptor.kind, descriptor.options)
        return updated

    previous = updated.pop(previous_name, _MISSING)
    if should_reset_value(descriptor.kind, descriptor.options, previous):
        updated[name] = default_value_for(descriptor.kind, descriptor.options)
    else:
        updated[name] = previous
    return updated
