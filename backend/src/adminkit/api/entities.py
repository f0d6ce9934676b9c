"""CRUD endpoints for one registered entity."""

from collections.abc import Callable, Iterable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from adminkit.api.tenant import resolve_tenant
from adminkit.metadata.types import EntityAction
from adminkit.services.errors import EntityNotFoundError
from adminkit.services.service import EntityService

DELETE_VETOED = "DELETE_VETOED"


class CreateRequest(BaseModel):
    data: dict[str, Any]


class UpdateRequest(BaseModel):
    data: dict[str, Any]


class BulkRequest(BaseModel):
    ids: list[str]
    action: str


def create_entity_router(
    entity_name: str,
    get_service: Callable[[], EntityService | None],
    actions: Iterable[EntityAction] = (),
) -> APIRouter:
    """Create the /api/{entity_name} router with an injected service.

    Entity-specific actions are mounted after the fixed paths and before
    /{id}, so a path such as /tree is never read as a record id.
    """
    router = APIRouter(prefix=f"/api/{entity_name}", tags=[entity_name])

    def _service() -> EntityService:
        service = get_service()
        if service is None or not service.is_bound:
            raise HTTPException(500, "Service not initialized")
        return service

    @router.post("", status_code=201)
    async def create_record(
        request: CreateRequest, tenant_id: str | None = Depends(resolve_tenant)
    ) -> dict[str, Any]:
        record = await _service().create(request.data, tenant_id)
        return {"data": record}

    @router.get("")
    async def list_records(
        http_request: Request, tenant_id: str | None = Depends(resolve_tenant)
    ) -> dict[str, Any]:
        params = {k: v for k, v in http_request.query_params.items() if k != "tenantId"}
        result = await _service().list(params, tenant_id)
        return {
            "data": result["items"],
            "pagination": {
                "total": result["total"],
                "page": result["page"],
                "limit": result["limit"],
                "totalPages": result["totalPages"],
            },
        }

    # Registered before /{id} so "stats" is not taken for a record id
    @router.get("/stats")
    async def record_stats(tenant_id: str | None = Depends(resolve_tenant)) -> dict[str, Any]:
        return {"data": await _service().get_stats(tenant_id)}

    @router.post("/bulk")
    async def bulk_records(
        request: BulkRequest, tenant_id: str | None = Depends(resolve_tenant)
    ) -> dict[str, Any]:
        result = await _service().bulk_operation(request.ids, request.action, tenant_id)
        return {"data": result}

    for action in actions:
        router.add_api_route(
            action.path,
            _action_endpoint(action, _service),
            methods=[action.method],
            name=f"{entity_name}_{action.name}",
            summary=action.description,
        )

    @router.get("/{id}")
    async def get_record(
        id: str, tenant_id: str | None = Depends(resolve_tenant)
    ) -> dict[str, Any]:
        record = await _service().find_by_id(id, tenant_id)
        if record is None:
            raise EntityNotFoundError(entity_name, id)
        return {"data": record}

    @router.put("/{id}")
    async def update_record(
        id: str, request: UpdateRequest, tenant_id: str | None = Depends(resolve_tenant)
    ) -> dict[str, Any]:
        record = await _service().update(id, request.data, tenant_id)
        return {"data": record}

    @router.delete("/{id}")
    async def delete_record(id: str, tenant_id: str | None = Depends(resolve_tenant)):
        if not await _service().delete(id, tenant_id):
            return JSONResponse(
                status_code=409,
                content={
                    "code": DELETE_VETOED,
                    "message": f"{entity_name} '{id}' cannot be deleted right now",
                },
            )
        return {"success": True}

    return router


def _action_endpoint(action: EntityAction, service: Callable[[], EntityService]):
    async def endpoint(
        http_request: Request, tenant_id: str | None = Depends(resolve_tenant)
    ) -> dict[str, Any]:
        params = {k: v for k, v in http_request.query_params.items() if k != "tenantId"}
        params.update(http_request.path_params)
        return {"data": await action.handler(service(), params, tenant_id)}

    return endpoint
