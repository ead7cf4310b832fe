"""Field descriptor model.

A descriptor is the user's informal description of one form field. It is
what the builder panel submits and what the inverse mapping produces when a
stored field is loaded back for editing.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums import CHOICE_KINDS, FieldKind
from ..errors import FieldValidationError

Number = Union[int, float]


def parse_options(options: Optional[str]) -> list[str]:
    """Split a comma separated choice list.

    Entries are trimmed and empty ones dropped. Duplicates and order are
    kept since the first entry decides the default value.
    """
    if not options:
        return []
    return [o.strip() for o in options.split(",") if o.strip()]


class FieldDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=False)

    name: str
    kind: FieldKind = Field(default=FieldKind.TEXT, alias="type")
    label: Optional[str] = None
    options: Optional[str] = None
    required: bool = False
    min: Optional[Number] = None
    max: Optional[Number] = None
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    pattern: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("label", "pattern", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def option_list(self) -> list[str]:
        return parse_options(self.options)

    @property
    def is_choice(self) -> bool:
        return self.kind in CHOICE_KINDS


def validate_descriptor(
    descriptor: FieldDescriptor,
    siblings: Iterable[str] = (),
    previous_name: Optional[str] = None,
) -> None:
    """Reject a descriptor before any aggregate is touched.

    Args:
        descriptor: Field to validate
        siblings: Names of the fields already present in the configuration
        previous_name: Name the field had before this edit, if editing

    Raises:
        FieldValidationError: On an empty name, a choice field without
            options, or a name taken by another field
    """
    if not descriptor.name:
        raise FieldValidationError("Please enter a field name")

    if descriptor.is_choice and not descriptor.option_list:
        raise FieldValidationError(
            f'Field "{descriptor.name}" of type {descriptor.kind.value} needs at least one option',
            field=descriptor.name,
        )

    if descriptor.name != previous_name and descriptor.name in set(siblings):
        raise FieldValidationError(
            f'Field "{descriptor.name}" already exists', field=descriptor.name
        )
