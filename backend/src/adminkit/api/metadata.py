"""Metadata endpoints: descriptors, navigation and UI config."""

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, HTTPException

from adminkit.registry import EntityRegistry


def create_metadata_router(get_registry: Callable[[], EntityRegistry | None]) -> APIRouter:
    """Create the /api/metadata router with an injected registry."""
    router = APIRouter(prefix="/api/metadata", tags=["metadata"])

    def _registry() -> EntityRegistry:
        registry = get_registry()
        if registry is None:
            raise HTTPException(500, "Registry not initialized")
        return registry

    @router.get("")
    async def list_entities() -> dict[str, Any]:
        """Admin route descriptors for every entity."""
        return {"entities": _registry().generate_admin_routes()}

    @router.get("/endpoints")
    async def list_endpoints() -> dict[str, Any]:
        return {"endpoints": _registry().generate_api_endpoints()}

    @router.get("/navigation")
    async def get_navigation() -> dict[str, Any]:
        return {"sections": _registry().generate_navigation()}

    @router.get("/stats")
    async def get_stats() -> dict[str, Any]:
        return _registry().get_entity_stats()

    @router.get("/{entity}")
    async def get_entity_metadata(entity: str) -> dict[str, Any]:
        route = _registry().generate_admin_route(entity)
        if route is None:
            raise HTTPException(404, f"Entity '{entity}' not found")
        return route

    @router.get("/{entity}/form")
    async def get_form_config(entity: str) -> dict[str, Any]:
        form = _registry().generate_form_config(entity)
        if form is None:
            raise HTTPException(404, f"Entity '{entity}' not found")
        return form.to_dict()

    @router.get("/{entity}/table")
    async def get_table_columns(entity: str) -> dict[str, Any]:
        registry = _registry()
        if entity not in registry:
            raise HTTPException(404, f"Entity '{entity}' not found")
        return {"columns": [c.to_dict() for c in registry.generate_table_columns(entity)]}

    return router
