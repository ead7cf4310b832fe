"""Versioned configuration store.

Every save appends an immutable version. Version numbers are allocated
under a per-definition lock inside an IMMEDIATE transaction, and the unique
index on (definition, version) catches writers from other processes; a
lost race is retried from a fresh read.
"""

import logging
import threading
import weakref
from datetime import datetime
from typing import Any, Callable, Optional

from peewee import IntegrityError

from .builder import (
    Aggregate,
    FieldDescriptor,
    apply_field,
    drop_field,
    validate_snapshot,
    version_aggregate,
)
from .consts import VERSION_MAX_RETRIES, VERSION_RETRY_DELAY
from .errors import FieldNotFoundError, VersionConflictError, VersionNotFoundError
from .models import UTC, ConfigDefinition, ConfigVersion
from .registry import DefinitionRegistry
from .utils import retry

logger = logging.getLogger(__name__)

Mutation = Callable[[Aggregate], Aggregate]


def _get_database():
    """Get database instance (lazy import)."""
    from . import db

    return db.database


class ConfigVersionStore:
    """Ordered snapshot history of configuration definitions."""

    # Entries live only while some writer holds the lock object.
    _locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
    _locks_guard = threading.Lock()

    def __init__(
        self,
        registry: Optional[DefinitionRegistry] = None,
        max_retries: int = VERSION_MAX_RETRIES,
        retry_delay: float = VERSION_RETRY_DELAY,
    ):
        self.registry = registry or DefinitionRegistry()
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @classmethod
    def from_config(cls, config, registry: Optional[DefinitionRegistry] = None):
        return cls(
            registry,
            max_retries=config.store.max_version_retries,
            retry_delay=config.store.retry_delay,
        )

    def _lock_for(self, definition_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(definition_id)
            if lock is None:
                lock = self._locks[definition_id] = threading.Lock()
            return lock

    # ==================== Reads ====================

    def list_versions(self, brand_id: int, definition_id: int) -> list[ConfigVersion]:
        """All versions of a definition, most recent first."""
        definition = self.registry.get_definition(brand_id, definition_id)
        return list(
            ConfigVersion.select()
            .where(ConfigVersion.definition == definition.id)
            .order_by(ConfigVersion.version.desc())
        )

    def get_version(
        self, brand_id: int, definition_id: int, version: int
    ) -> ConfigVersion:
        definition = self.registry.get_definition(brand_id, definition_id)
        return self._get_version(definition, version)

    def latest(self, brand_id: int, definition_id: int) -> ConfigVersion:
        definition = self.registry.get_definition(brand_id, definition_id)
        return self._latest(definition)

    def active(self, brand_id: int, definition_id: int) -> ConfigVersion:
        """The active version, falling back to the latest when none is set."""
        definition = self.registry.get_definition(brand_id, definition_id)
        return self._active(definition)

    def active_by_name(self, brand_name: str, config_name: str) -> ConfigVersion:
        definition = self.registry.find_definition(brand_name, config_name)
        return self._active(definition)

    def get_value(self, brand_name: str, config_name: str, key: str) -> Any:
        """Read one value from the active version's form data."""
        version = self.active_by_name(brand_name, config_name)
        form_data = version.form_data or {}
        if key not in form_data:
            raise FieldNotFoundError(
                f'Field "{key}" not found in config "{config_name}"', field=key
            )
        return form_data[key]

    def _get_version(self, definition: ConfigDefinition, version: int) -> ConfigVersion:
        found = ConfigVersion.get_or_none(
            (ConfigVersion.definition == definition.id) & (ConfigVersion.version == version)
        )
        if found is None:
            available = ", ".join(
                str(v.version)
                for v in ConfigVersion.select(ConfigVersion.version)
                .where(ConfigVersion.definition == definition.id)
                .order_by(ConfigVersion.version.desc())
            )
            raise VersionNotFoundError(
                f'Config "{definition.name}" version "{version}" not found. '
                f"Available versions: {available or 'none'}",
                version=version,
            )
        return found

    def _latest(self, definition: ConfigDefinition) -> ConfigVersion:
        latest = (
            ConfigVersion.select()
            .where(ConfigVersion.definition == definition.id)
            .order_by(ConfigVersion.version.desc())
            .first()
        )
        if latest is None:
            raise VersionNotFoundError(f'Config "{definition.name}" has no versions')
        return latest

    def _active(self, definition: ConfigDefinition) -> ConfigVersion:
        if definition.active_version is None:
            return self._latest(definition)
        return self._get_version(definition, definition.active_version)

    # ==================== Writes ====================

    def save(
        self,
        brand_id: int,
        definition_id: int,
        schema: Optional[dict[str, Any]],
        ui_schema: Optional[dict[str, Any]],
        form_data: Optional[dict[str, Any]],
    ) -> ConfigVersion:
        """Append the given aggregate as a new version.

        The active version is left unchanged.

        Raises:
            ValidationException: The snapshot has the wrong shape
        """
        validate_snapshot(schema, ui_schema, form_data)
        aggregate = Aggregate.from_snapshot(schema, ui_schema, form_data)
        return self._commit(brand_id, definition_id, lambda _current: aggregate)

    def add_field(
        self, brand_id: int, definition_id: int, descriptor: FieldDescriptor
    ) -> ConfigVersion:
        return self._commit(
            brand_id, definition_id, lambda current: apply_field(current, descriptor)
        )

    def update_field(
        self,
        brand_id: int,
        definition_id: int,
        field_name: str,
        descriptor: FieldDescriptor,
    ) -> ConfigVersion:
        """Edit one field and persist the result as a new version."""
        return self._commit(
            brand_id,
            definition_id,
            lambda current: apply_field(current, descriptor, previous_name=field_name),
        )

    def delete_field(
        self, brand_id: int, definition_id: int, field_name: str
    ) -> ConfigVersion:
        """Remove one field and persist the result as a new version."""
        return self._commit(
            brand_id, definition_id, lambda current: drop_field(current, field_name)
        )

    def set_active_version(
        self, brand_id: int, definition_id: int, version: int
    ) -> ConfigDefinition:
        """Point consumers at an existing version. Version content is untouched."""
        with _get_database().atomic():
            definition = self.registry.get_definition(brand_id, definition_id)
            self._get_version(definition, version)
            ConfigDefinition.update(
                active_version=version, updated_at=datetime.now(UTC)
            ).where(ConfigDefinition.id == definition.id).execute()
            definition = self.registry.get_definition(brand_id, definition_id)

        logger.info(f"Active version of {definition.name} set to {version}")
        return definition

    def _commit(
        self, brand_id: int, definition_id: int, mutate: Mutation
    ) -> ConfigVersion:
        # Scope check before taking the lock so lookups fail fast.
        definition = self.registry.get_definition(brand_id, definition_id)

        attempt = retry(
            times=self.max_retries,
            initial_delay=self.retry_delay,
            exceptions=(IntegrityError,),
        )(self._append)

        with self._lock_for(definition.id):
            try:
                return attempt(brand_id, definition.id, mutate)
            except IntegrityError as e:
                raise VersionConflictError(
                    f'Could not allocate a new version for config "{definition.name}"'
                ) from e

    def _append(
        self, brand_id: int, definition_id: int, mutate: Mutation
    ) -> ConfigVersion:
        """Read, mutate, allocate and persist as one transaction."""
        with _get_database().atomic("IMMEDIATE"):
            definition = self.registry.get_definition(brand_id, definition_id)
            latest = (
                ConfigVersion.select()
                .where(ConfigVersion.definition == definition.id)
                .order_by(ConfigVersion.version.desc())
                .first()
            )
            current = version_aggregate(latest) if latest else Aggregate()
            aggregate = mutate(current)

            next_version = max(
                definition.current_version or 0, latest.version if latest else 0
            ) + 1

            created = ConfigVersion.create(
                definition=definition,
                version=next_version,
                schema=aggregate.schema,
                ui_schema=aggregate.ui_schema,
                form_data=aggregate.form_data,
            )
            ConfigDefinition.update(
                current_version=next_version, updated_at=datetime.now(UTC)
            ).where(ConfigDefinition.id == definition.id).execute()

        logger.info(f"Config {definition.name} saved as version {next_version}")
        return created
