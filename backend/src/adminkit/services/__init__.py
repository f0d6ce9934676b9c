"""Generated CRUD services and the errors they raise."""

from adminkit.services.errors import (
    BusinessLogicError,
    EntityNotFoundError,
    EntityValidationError,
    FieldViolation,
    ServiceError,
    StorageNotBoundError,
    TenantError,
)
from adminkit.services.service import EntityService

__all__ = [
    "BusinessLogicError",
    "EntityNotFoundError",
    "EntityService",
    "EntityValidationError",
    "FieldViolation",
    "ServiceError",
    "StorageNotBoundError",
    "TenantError",
]
