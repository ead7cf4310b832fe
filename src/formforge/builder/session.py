"""Editing session: one current aggregate and a dirty flag."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .aggregate import Aggregate, apply_field, descriptor_for, descriptors, drop_field, export_json
from .fields import FieldDescriptor

logger = logging.getLogger(__name__)


class EditingSession:
    """Holds the aggregate being edited for one configuration.

    Field operations replace the aggregate as a whole. A rejected operation
    raises and leaves both the aggregate and the dirty flag as they were.
    """

    def __init__(
        self,
        name: str,
        aggregate: Optional[Aggregate] = None,
        version: Optional[int] = None,
    ):
        self.name = name
        self.aggregate = aggregate or Aggregate()
        self.version = version
        self.dirty = False

    @classmethod
    def from_version(cls, name: str, version) -> "EditingSession":
        """Start a session from a stored version snapshot."""
        return cls(name, version_aggregate(version), version=version.version)

    def add_field(self, descriptor: FieldDescriptor) -> Aggregate:
        self.aggregate = apply_field(self.aggregate, descriptor)
        self.dirty = True
        logger.debug(f'Field "{descriptor.name}" added to {self.name}')
        return self.aggregate

    def edit_field(self, name: str, descriptor: FieldDescriptor) -> Aggregate:
        self.aggregate = apply_field(self.aggregate, descriptor, previous_name=name)
        self.dirty = True
        logger.debug(f'Field "{name}" updated in {self.name}')
        return self.aggregate

    def delete_field(self, name: str) -> Aggregate:
        self.aggregate = drop_field(self.aggregate, name)
        self.dirty = True
        logger.debug(f'Field "{name}" removed from {self.name}')
        return self.aggregate

    def set_value(self, name: str, value: Any) -> Aggregate:
        form_data = dict(self.aggregate.form_data)
        form_data[name] = value
        self.aggregate = Aggregate(
            schema=self.aggregate.schema,
            ui_schema=self.aggregate.ui_schema,
            form_data=form_data,
        )
        self.dirty = True
        return self.aggregate

    def field(self, name: str) -> FieldDescriptor:
        return descriptor_for(self.aggregate, name)

    def fields(self) -> list[FieldDescriptor]:
        return descriptors(self.aggregate)

    def preview(self, version) -> Aggregate:
        """Load a stored version into the editor without persisting anything."""
        self.aggregate = version_aggregate(version)
        self.version = version.version
        self.dirty = False
        return self.aggregate

    def mark_saved(self, version: int) -> None:
        self.version = version
        self.dirty = False

    def export(self, indent: int = 2) -> str:
        return export_json(self.name, self.aggregate, indent=indent)


def version_aggregate(version) -> Aggregate:
    return Aggregate.from_snapshot(version.schema, version.ui_schema, version.form_data)
