"""Translate service errors into HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adminkit.api.tenant import TENANT_REQUIRED
from adminkit.services.errors import (
    BUSINESS_LOGIC_ERROR,
    NOT_FOUND,
    TENANT_ERROR,
    VALIDATION_ERROR,
    EntityValidationError,
    ServiceError,
)

STATUS_BY_CODE = {
    VALIDATION_ERROR: 422,
    TENANT_ERROR: 403,
    BUSINESS_LOGIC_ERROR: 409,
    NOT_FOUND: 404,
    TENANT_REQUIRED: 400,
}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    content = exc.to_dict()
    if isinstance(exc, EntityValidationError):
        content = {"valid": False, **content}
    return JSONResponse(status_code=STATUS_BY_CODE.get(exc.code, 400), content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
