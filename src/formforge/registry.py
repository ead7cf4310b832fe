"""Brands and configuration definitions, keyed by name per brand."""

import logging
from datetime import datetime

from peewee import IntegrityError

from .builder import Aggregate, FieldDescriptor, descriptors, version_aggregate
from .consts import FIRST_VERSION
from .errors import (
    BrandNotFoundError,
    ConflictError,
    DefinitionNotFoundError,
    ValidationException,
)
from .models import UTC, Brand, ConfigDefinition, ConfigVersion

logger = logging.getLogger(__name__)


def _get_database():
    """Get database instance (lazy import)."""
    from . import db

    return db.database


def _clean_name(name: str, what: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationException(f"{what} name cannot be empty")
    return cleaned


class DefinitionRegistry:
    """Lookup and lifecycle of brands and their configuration definitions."""

    def create_brand(self, name: str, description: str | None = None) -> Brand:
        name = _clean_name(name, "Brand")
        try:
            with _get_database().atomic():
                brand = Brand.create(name=name, description=description)
        except IntegrityError as e:
            raise ConflictError(f'Brand with name "{name}" already exists') from e
        logger.info(f"Brand created: {brand.name} ({brand.id})")
        return brand

    def get_brand(self, brand_id: int) -> Brand:
        brand = Brand.get_or_none(Brand.id == brand_id)
        if brand is None:
            raise BrandNotFoundError(f'Brand with ID "{brand_id}" not found')
        return brand

    def get_brand_by_name(self, name: str) -> Brand:
        brand = Brand.get_or_none(Brand.name == name)
        if brand is None:
            raise BrandNotFoundError(f'Brand with name "{name}" not found')
        return brand

    def list_brands(self) -> list[Brand]:
        return list(Brand.select().order_by(Brand.name))

    def create_definition(
        self, brand_id: int, name: str, description: str | None = None
    ) -> ConfigDefinition:
        """Create a definition holding version 1 with an empty aggregate.

        Version 1 is also the initial active version.
        """
        brand = self.get_brand(brand_id)
        name = _clean_name(name, "Config")
        empty = Aggregate()

        try:
            with _get_database().atomic():
                definition = ConfigDefinition.create(
                    brand=brand,
                    name=name,
                    description=description,
                    current_version=FIRST_VERSION,
                    active_version=FIRST_VERSION,
                )
                ConfigVersion.create(
                    definition=definition,
                    version=FIRST_VERSION,
                    schema=empty.schema,
                    ui_schema=empty.ui_schema,
                    form_data=empty.form_data,
                )
        except IntegrityError as e:
            raise ConflictError(f'Config with name "{name}" already exists') from e

        logger.info(f"Config definition created: {brand.name}/{name} ({definition.id})")
        return definition

    def get_definition(self, brand_id: int, definition_id: int) -> ConfigDefinition:
        definition = ConfigDefinition.get_or_none(
            (ConfigDefinition.id == definition_id)
            & (ConfigDefinition.brand == brand_id)
        )
        if definition is None:
            raise DefinitionNotFoundError(
                f'Config definition with ID "{definition_id}" not found'
            )
        return definition

    def find_definition(self, brand_name: str, config_name: str) -> ConfigDefinition:
        brand = self.get_brand_by_name(brand_name)
        definition = ConfigDefinition.get_or_none(
            (ConfigDefinition.brand == brand.id) & (ConfigDefinition.name == config_name)
        )
        if definition is None:
            raise DefinitionNotFoundError(
                f'Config with name "{config_name}" not found for brand "{brand_name}"'
            )
        return definition

    def list_definitions(self, brand_id: int) -> list[ConfigDefinition]:
        brand = self.get_brand(brand_id)
        return list(
            ConfigDefinition.select()
            .where(ConfigDefinition.brand == brand.id)
            .order_by(ConfigDefinition.name)
        )

    def rename_definition(
        self, brand_id: int, definition_id: int, new_name: str
    ) -> ConfigDefinition:
        """Rename a definition. No version is created."""
        definition = self.get_definition(brand_id, definition_id)
        new_name = _clean_name(new_name, "Config")
        if new_name == definition.name:
            return definition

        conflicting = ConfigDefinition.get_or_none(
            (ConfigDefinition.brand == brand_id)
            & (ConfigDefinition.name == new_name)
            & (ConfigDefinition.id != definition.id)
        )
        if conflicting is not None:
            raise ConflictError(f'Config with name "{new_name}" already exists')

        # Only the name column is written; pointers may move concurrently.
        old_name = definition.name
        try:
            ConfigDefinition.update(name=new_name, updated_at=datetime.now(UTC)).where(
                ConfigDefinition.id == definition.id
            ).execute()
        except IntegrityError as e:
            raise ConflictError(f'Config with name "{new_name}" already exists') from e

        definition = self.get_definition(brand_id, definition_id)
        logger.info(f"Config definition renamed: {old_name} -> {new_name}")
        return definition

    def delete_definition(self, brand_id: int, definition_id: int) -> None:
        """Delete a definition together with all of its versions."""
        definition = self.get_definition(brand_id, definition_id)
        with _get_database().atomic():
            ConfigVersion.delete().where(ConfigVersion.definition == definition.id).execute()
            definition.delete_instance()
        logger.info(f"Config definition deleted: {definition.name} ({definition_id})")

    def field_descriptors(self, brand_id: int, definition_id: int) -> list[FieldDescriptor]:
        """Fields reflected by the definition's most recent version."""
        definition = self.get_definition(brand_id, definition_id)
        latest = (
            ConfigVersion.select()
            .where(ConfigVersion.definition == definition.id)
            .order_by(ConfigVersion.version.desc())
            .first()
        )
        if latest is None:
            return []
        return descriptors(version_aggregate(latest))
