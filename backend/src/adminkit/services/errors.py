"""Typed failures surfaced by generated services.

Every error carries a machine-readable code so callers (the HTTP layer,
the admin UI) can translate it without inspecting messages:
- VALIDATION_ERROR: bad input shape or constraint, with per-field violations
- TENANT_ERROR: tenant-scope mismatch, carries the offending field
- BUSINESS_LOGIC_ERROR: a hook rejected the operation
- NOT_FOUND: the target record does not exist

Errors raised by the storage client are not reclassified.
"""

from dataclasses import dataclass
from typing import Any

VALIDATION_ERROR = "VALIDATION_ERROR"
TENANT_ERROR = "TENANT_ERROR"
BUSINESS_LOGIC_ERROR = "BUSINESS_LOGIC_ERROR"
NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class FieldViolation:
    """A single field-level problem.

    Attributes:
        message: Human-readable message
        code: Machine-readable code (e.g., "REQUIRED", "UNIQUE", "MAX_LENGTH")
        field: Dotted field path, or None for payload-level problems
    """

    message: str
    code: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.code, "field": self.field}


class ServiceError(Exception):
    """Base class for recoverable service failures."""

    code = "SERVICE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class EntityValidationError(ServiceError):
    code = VALIDATION_ERROR

    def __init__(self, message: str, violations: list[FieldViolation] | None = None):
        super().__init__(message)
        self.violations = violations or []

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations if v.field]

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["errors"] = [v.to_dict() for v in self.violations]
        return result


class TenantError(ServiceError):
    code = TENANT_ERROR

    def __init__(self, message: str, field: str | None = "tenantId"):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        return result


class BusinessLogicError(ServiceError):
    code = BUSINESS_LOGIC_ERROR


class EntityNotFoundError(ServiceError):
    code = NOT_FOUND

    def __init__(self, entity_name: str, record_id: str):
        super().__init__(f"{entity_name} '{record_id}' not found")
        self.entity_name = entity_name
        self.record_id = record_id


class StorageNotBoundError(RuntimeError):
    """A data operation was attempted before bind() supplied a storage client."""
