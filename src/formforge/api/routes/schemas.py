"""Response and request models shared by the routes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...builder import FieldDescriptor
from ...models import Brand, ConfigDefinition, ConfigVersion
from ...utils import format_datetime


class BrandCreateRequest(BaseModel):
    name: str
    description: str | None = None


class BrandResponse(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: str

    @classmethod
    def from_model(cls, brand: Brand) -> "BrandResponse":
        return cls(
            id=brand.id,
            name=brand.name,
            description=brand.description,
            created_at=format_datetime(brand.created_at),
        )


class DefinitionCreateRequest(BaseModel):
    name: str
    description: str | None = None


class RenameRequest(BaseModel):
    name: str


class ActiveVersionRequest(BaseModel):
    version: int


class DefinitionResponse(BaseModel):
    id: int
    brand_id: int
    name: str
    description: str | None
    current_version: int
    active_version: int | None
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, definition: ConfigDefinition) -> "DefinitionResponse":
        return cls(
            id=definition.id,
            brand_id=definition.brand_id,
            name=definition.name,
            description=definition.description,
            current_version=definition.current_version,
            active_version=definition.active_version,
            created_at=format_datetime(definition.created_at),
            updated_at=format_datetime(definition.updated_at),
        )


class AggregatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    json_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    ui_schema: dict[str, Any] | None = Field(default=None, alias="uiSchema")
    form_data: dict[str, Any] | None = Field(default=None, alias="formData")


class VersionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    definition_id: int
    version: int
    active: bool
    json_schema: dict[str, Any] = Field(alias="schema")
    ui_schema: dict[str, Any] = Field(alias="uiSchema")
    form_data: dict[str, Any] = Field(alias="formData")
    created_at: str

    @classmethod
    def from_model(
        cls, version: ConfigVersion, active_version: int | None = None
    ) -> "VersionResponse":
        return cls(
            definition_id=version.definition_id,
            version=version.version,
            active=version.version == active_version,
            json_schema=version.schema or {},
            ui_schema=version.ui_schema or {},
            form_data=version.form_data or {},
            created_at=format_datetime(version.created_at),
        )


class DefinitionDetailResponse(BaseModel):
    definition: DefinitionResponse
    version: VersionResponse
    fields: list[FieldDescriptor]


class MutationResponse(BaseModel):
    success: bool = True
    definition: DefinitionResponse
    version: VersionResponse
    versions: list[int]


class VersionListResponse(BaseModel):
    versions: list[VersionResponse]
    active_version: int | None
    total: int
