from fastapi import APIRouter, Depends

from ...registry import DefinitionRegistry
from .deps import get_registry
from .schemas import BrandCreateRequest, BrandResponse

router = APIRouter(prefix="/brands", tags=["brands"])


@router.post("", response_model=BrandResponse, status_code=201)
def create_brand(
    payload: BrandCreateRequest, registry: DefinitionRegistry = Depends(get_registry)
):
    return BrandResponse.from_model(registry.create_brand(payload.name, payload.description))


@router.get("", response_model=list[BrandResponse])
def list_brands(registry: DefinitionRegistry = Depends(get_registry)):
    return [BrandResponse.from_model(b) for b in registry.list_brands()]


@router.get("/{brand_id}", response_model=BrandResponse)
def get_brand(brand_id: int, registry: DefinitionRegistry = Depends(get_registry)):
    return BrandResponse.from_model(registry.get_brand(brand_id))
