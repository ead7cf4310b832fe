"""Peewee ORM model definitions"""

from datetime import datetime
from zoneinfo import ZoneInfo

from peewee import (
    CharField,
    DatabaseProxy,
    DateTimeField,
    ForeignKeyField,
    IntegerField,
    Model,
    TextField,
)
from playhouse.shortcuts import ThreadSafeDatabaseMetadata
from playhouse.sqlite_ext import JSONField

UTC = ZoneInfo("UTC")

# Use DatabaseProxy for deferred database binding
database_proxy = DatabaseProxy()


class BaseModel(Model):
    """Base model class - supports thread-safe metadata"""

    class Meta:
        database = database_proxy
        model_metadata_class = ThreadSafeDatabaseMetadata


class Brand(BaseModel):
    """Brand that owns configurations"""

    name = CharField(unique=True)
    description = TextField(null=True)
    created_at = DateTimeField(default=lambda: datetime.now(UTC))

    class Meta:
        table_name = "brands"


class ConfigDefinition(BaseModel):
    """Named configuration within a brand.

    ``current_version`` is the highest allocated version number;
    ``active_version`` is the version exposed to consumers.
    """

    brand = ForeignKeyField(Brand, backref="definitions", on_delete="CASCADE")
    name = CharField()
    description = TextField(null=True)
    current_version = IntegerField(default=0)
    active_version = IntegerField(null=True)
    created_at = DateTimeField(default=lambda: datetime.now(UTC))
    updated_at = DateTimeField(default=lambda: datetime.now(UTC))

    class Meta:
        table_name = "config_definitions"
        indexes = ((("brand", "name"), True),)

    def save(self, *args, **kwargs):
        """Override save method to auto-update updated_at"""
        if self._pk is not None:
            self.updated_at = datetime.now(UTC)
        return super().save(*args, **kwargs)


class ConfigVersion(BaseModel):
    """Immutable snapshot of a definition's schema, UI hints and data"""

    definition = ForeignKeyField(
        ConfigDefinition, backref="versions", on_delete="CASCADE"
    )
    version = IntegerField()
    schema = JSONField(default=dict)
    ui_schema = JSONField(default=dict)
    form_data = JSONField(default=dict)
    created_at = DateTimeField(default=lambda: datetime.now(UTC))

    class Meta:
        table_name = "config_versions"
        indexes = ((("definition", "version"), True),)
