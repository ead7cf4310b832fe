"""Read-only discovery surface for configuration consumers.

Everything here resolves the active version of a configuration.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...builder import version_aggregate
from ...models import ConfigDefinition
from ...registry import DefinitionRegistry
from ...store import ConfigVersionStore
from .deps import get_registry, get_store

router = APIRouter(prefix="/sdk", tags=["sdk"])


class BrandSummary(BaseModel):
    name: str
    description: str | None = None
    config_count: int


class ConfigSummary(BaseModel):
    name: str
    description: str | None = None
    keys: list[str]
    key_count: int
    version: int


class ConfigDetail(BaseModel):
    name: str
    version: int
    keys: list[str]
    form_data: dict[str, Any]


class FieldValidation(BaseModel):
    min: float | None = None
    max: float | None = None
    max_length: int | None = None
    pattern: str | None = None
    enum: list[Any] | None = None


class FieldSchema(BaseModel):
    type: str
    description: str | None = None
    default_value: Any = None
    required: bool = False
    validation: FieldValidation | None = None


class ConfigSchemaResponse(BaseModel):
    config_name: str
    version: int
    fields: dict[str, FieldSchema]


class ValueResponse(BaseModel):
    value: Any


def _summary(store: ConfigVersionStore, definition: ConfigDefinition) -> ConfigSummary:
    version = store.active(definition.brand_id, definition.id)
    keys = list((version.form_data or {}).keys())
    return ConfigSummary(
        name=definition.name,
        description=definition.description,
        keys=keys,
        key_count=len(keys),
        version=version.version,
    )


@router.get("/brands", response_model=list[BrandSummary])
def list_brands(registry: DefinitionRegistry = Depends(get_registry)):
    return [
        BrandSummary(
            name=brand.name,
            description=brand.description,
            config_count=brand.definitions.count(),
        )
        for brand in registry.list_brands()
    ]


@router.get("/brands/{brand_name}/configs", response_model=list[ConfigSummary])
def list_configs(brand_name: str, store: ConfigVersionStore = Depends(get_store)):
    brand = store.registry.get_brand_by_name(brand_name)
    return [_summary(store, d) for d in store.registry.list_definitions(brand.id)]


@router.get("/brands/{brand_name}/configs/{config_name}", response_model=ConfigDetail)
def get_config(
    brand_name: str, config_name: str, store: ConfigVersionStore = Depends(get_store)
):
    version = store.active_by_name(brand_name, config_name)
    form_data = version.form_data or {}
    return ConfigDetail(
        name=config_name,
        version=version.version,
        keys=list(form_data.keys()),
        form_data=form_data,
    )


@router.get(
    "/brands/{brand_name}/configs/{config_name}/schema",
    response_model=ConfigSchemaResponse,
)
def get_config_schema(
    brand_name: str, config_name: str, store: ConfigVersionStore = Depends(get_store)
):
    version = store.active_by_name(brand_name, config_name)
    aggregate = version_aggregate(version)
    properties = aggregate.schema.get("properties") or {}
    required = set(aggregate.schema.get("required") or [])

    fields = {}
    for name, prop in properties.items():
        validation = FieldValidation(
            min=prop.get("minimum"),
            max=prop.get("maximum"),
            max_length=prop.get("maxLength"),
            pattern=prop.get("pattern"),
            enum=prop.get("enum"),
        )
        fields[name] = FieldSchema(
            type=prop.get("type", "string"),
            description=prop.get("title"),
            default_value=aggregate.form_data.get(name),
            required=name in required,
            validation=validation if validation.model_dump(exclude_none=True) else None,
        )

    return ConfigSchemaResponse(config_name=config_name, version=version.version, fields=fields)


@router.get(
    "/brands/{brand_name}/configs/{config_name}/values/{key}",
    response_model=ValueResponse,
)
def get_value(
    brand_name: str,
    config_name: str,
    key: str,
    store: ConfigVersionStore = Depends(get_store),
):
    return ValueResponse(value=store.get_value(brand_name, config_name, key))
