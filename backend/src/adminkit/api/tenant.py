"""Per-request tenant resolution."""

from fastapi import Request

from adminkit.config import AppConfig
from adminkit.services.errors import ServiceError

TENANT_REQUIRED = "TENANT_REQUIRED"


class TenantRequiredError(ServiceError):
    code = TENANT_REQUIRED


def resolve_tenant(request: Request) -> str | None:
    """FastAPI dependency returning the tenant a request acts for.

    Checked in order: X-Tenant-ID header, Tenant-ID header, tenantId
    query parameter, configured default.

    Raises:
        TenantRequiredError: If the app requires a tenant and none resolves
    """
    config: AppConfig = request.app.state.config
    tenant_id = (
        request.headers.get("x-tenant-id")
        or request.headers.get("tenant-id")
        or request.query_params.get("tenantId")
        or config.default_tenant_id
    )
    if tenant_id is None and config.require_tenant:
        raise TenantRequiredError("A tenant is required for this request")
    return tenant_id
