from fastapi import APIRouter, Depends, Request, Response

from ...builder import FieldDescriptor, export_json, version_aggregate
from ...models import ConfigVersion
from ...registry import DefinitionRegistry
from ...store import ConfigVersionStore
from .deps import get_registry, get_store
from .schemas import (
    ActiveVersionRequest,
    AggregatePayload,
    DefinitionCreateRequest,
    DefinitionDetailResponse,
    DefinitionResponse,
    MutationResponse,
    RenameRequest,
    VersionListResponse,
    VersionResponse,
)

router = APIRouter(prefix="/brands/{brand_id}/configs", tags=["configs"])


def _mutation_response(
    store: ConfigVersionStore, brand_id: int, definition_id: int, version: ConfigVersion
) -> MutationResponse:
    definition = store.registry.get_definition(brand_id, definition_id)
    versions = store.list_versions(brand_id, definition_id)
    return MutationResponse(
        definition=DefinitionResponse.from_model(definition),
        version=VersionResponse.from_model(version, definition.active_version),
        versions=[v.version for v in versions],
    )


@router.post("", response_model=DefinitionResponse, status_code=201)
def create_definition(
    brand_id: int,
    payload: DefinitionCreateRequest,
    registry: DefinitionRegistry = Depends(get_registry),
):
    definition = registry.create_definition(brand_id, payload.name, payload.description)
    return DefinitionResponse.from_model(definition)


@router.get("", response_model=list[DefinitionResponse])
def list_definitions(brand_id: int, registry: DefinitionRegistry = Depends(get_registry)):
    return [DefinitionResponse.from_model(d) for d in registry.list_definitions(brand_id)]


@router.get("/{definition_id}", response_model=DefinitionDetailResponse)
def get_definition(
    brand_id: int, definition_id: int, store: ConfigVersionStore = Depends(get_store)
):
    definition = store.registry.get_definition(brand_id, definition_id)
    active = store.active(brand_id, definition_id)
    return DefinitionDetailResponse(
        definition=DefinitionResponse.from_model(definition),
        version=VersionResponse.from_model(active, definition.active_version),
        fields=store.registry.field_descriptors(brand_id, definition_id),
    )


@router.patch("/{definition_id}/name", response_model=DefinitionResponse)
def rename_definition(
    brand_id: int,
    definition_id: int,
    payload: RenameRequest,
    registry: DefinitionRegistry = Depends(get_registry),
):
    return DefinitionResponse.from_model(
        registry.rename_definition(brand_id, definition_id, payload.name)
    )


@router.delete("/{definition_id}", status_code=204)
def delete_definition(
    brand_id: int, definition_id: int, registry: DefinitionRegistry = Depends(get_registry)
):
    registry.delete_definition(brand_id, definition_id)
    return Response(status_code=204)


@router.post("/{definition_id}/versions", response_model=MutationResponse, status_code=201)
def save_version(
    brand_id: int,
    definition_id: int,
    payload: AggregatePayload,
    store: ConfigVersionStore = Depends(get_store),
):
    version = store.save(
        brand_id, definition_id, payload.json_schema, payload.ui_schema, payload.form_data
    )
    return _mutation_response(store, brand_id, definition_id, version)


@router.get("/{definition_id}/versions", response_model=VersionListResponse)
def list_versions(
    brand_id: int, definition_id: int, store: ConfigVersionStore = Depends(get_store)
):
    definition = store.registry.get_definition(brand_id, definition_id)
    versions = store.list_versions(brand_id, definition_id)
    return VersionListResponse(
        versions=[VersionResponse.from_model(v, definition.active_version) for v in versions],
        active_version=definition.active_version,
        total=len(versions),
    )


@router.get("/{definition_id}/versions/{version}", response_model=VersionResponse)
def get_version(
    brand_id: int,
    definition_id: int,
    version: int,
    store: ConfigVersionStore = Depends(get_store),
):
    definition = store.registry.get_definition(brand_id, definition_id)
    found = store.get_version(brand_id, definition_id, version)
    return VersionResponse.from_model(found, definition.active_version)


@router.put("/{definition_id}/active-version", response_model=DefinitionResponse)
def set_active_version(
    brand_id: int,
    definition_id: int,
    payload: ActiveVersionRequest,
    store: ConfigVersionStore = Depends(get_store),
):
    return DefinitionResponse.from_model(
        store.set_active_version(brand_id, definition_id, payload.version)
    )


@router.post("/{definition_id}/fields", response_model=MutationResponse, status_code=201)
def add_field(
    brand_id: int,
    definition_id: int,
    descriptor: FieldDescriptor,
    store: ConfigVersionStore = Depends(get_store),
):
    version = store.add_field(brand_id, definition_id, descriptor)
    return _mutation_response(store, brand_id, definition_id, version)


@router.put("/{definition_id}/fields/{field_name}", response_model=MutationResponse)
def update_field(
    brand_id: int,
    definition_id: int,
    field_name: str,
    descriptor: FieldDescriptor,
    store: ConfigVersionStore = Depends(get_store),
):
    version = store.update_field(brand_id, definition_id, field_name, descriptor)
    return _mutation_response(store, brand_id, definition_id, version)


@router.delete("/{definition_id}/fields/{field_name}", response_model=MutationResponse)
def delete_field(
    brand_id: int,
    definition_id: int,
    field_name: str,
    store: ConfigVersionStore = Depends(get_store),
):
    version = store.delete_field(brand_id, definition_id, field_name)
    return _mutation_response(store, brand_id, definition_id, version)


@router.get("/{definition_id}/export")
def export_definition(
    request: Request,
    brand_id: int,
    definition_id: int,
    version: int | None = None,
    store: ConfigVersionStore = Depends(get_store),
):
    definition = store.registry.get_definition(brand_id, definition_id)
    if version is None:
        snapshot = store.active(brand_id, definition_id)
    else:
        snapshot = store.get_version(brand_id, definition_id, version)

    indent = request.app.state.config.export.indent
    body = export_json(definition.name, version_aggregate(snapshot), indent=indent)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{definition.name}.json"'},
    )
