from fastapi import Request

from ...registry import DefinitionRegistry
from ...store import ConfigVersionStore


def get_registry(request: Request) -> DefinitionRegistry:
    return request.app.state.registry


def get_store(request: Request) -> ConfigVersionStore:
    return request.app.state.store
