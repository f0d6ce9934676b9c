"""Apply an entity's tenant rules to an incoming payload.

Runs before lifecycle hooks, so only values actually present are
checked. Required-field enforcement is left to the schema, which runs
after hooks have had a chance to derive missing values.
"""

import re
from typing import Any

from adminkit.metadata.types import TenantRules, ValidationRules
from adminkit.services.errors import EntityValidationError, FieldViolation


def apply_tenant_rules(rules: TenantRules | None, data: dict[str, Any]) -> None:
    """Check data against tenant rules.

    Raises:
        EntityValidationError: Listing every violated rule
    """
    if rules is None:
        return

    violations: list[FieldViolation] = []

    for field_name, validator in rules.custom_validators.items():
        value = data.get(field_name)
        if value is not None and not validator(value):
            violations.append(
                FieldViolation(
                    f"Custom validation failed for field: {field_name}",
                    "CUSTOM_VALIDATION",
                    field_name,
                )
            )

    name = data.get("name")
    if rules.max_name_length and isinstance(name, str) and len(name) > rules.max_name_length:
        violations.append(
            FieldViolation(
                f"Name exceeds maximum length of {rules.max_name_length}",
                "MAX_LENGTH",
                "name",
            )
        )

    description = data.get("description")
    if (
        rules.max_description_length
        and isinstance(description, str)
        and len(description) > rules.max_description_length
    ):
        violations.append(
            FieldViolation(
                f"Description exceeds maximum length of {rules.max_description_length}",
                "MAX_LENGTH",
                "description",
            )
        )

    entity_type = data.get("type")
    if rules.allowed_types and entity_type is not None and entity_type not in rules.allowed_types:
        violations.append(
            FieldViolation(
                f"Type must be one of: {', '.join(rules.allowed_types)}",
                "INVALID_TYPE",
                "type",
            )
        )

    for field_name, constraint in rules.validation_rules.items():
        value = data.get(field_name)
        if value is not None:
            violations.extend(_check_constraint(field_name, value, constraint))

    if violations:
        raise EntityValidationError("Tenant validation failed", violations)


def _check_constraint(
    field_name: str, value: Any, constraint: ValidationRules
) -> list[FieldViolation]:
    errors: list[FieldViolation] = []

    if isinstance(value, str):
        if constraint.min_length is not None and len(value) < constraint.min_length:
            errors.append(
                FieldViolation(
                    f"{field_name} must be at least {constraint.min_length} characters",
                    "MIN_LENGTH",
                    field_name,
                )
            )
        if constraint.max_length is not None and len(value) > constraint.max_length:
            errors.append(
                FieldViolation(
                    f"{field_name} must be at most {constraint.max_length} characters",
                    "MAX_LENGTH",
                    field_name,
                )
            )
        if constraint.pattern and not re.match(constraint.pattern, value):
            errors.append(
                FieldViolation(
                    f"{field_name} has an invalid format",
                    "PATTERN_MISMATCH",
                    field_name,
                )
            )

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if constraint.min is not None and value < constraint.min:
            errors.append(
                FieldViolation(
                    f"{field_name} must be at least {constraint.min}",
                    "MIN_VALUE",
                    field_name,
                )
            )
        if constraint.max is not None and value > constraint.max:
            errors.append(
                FieldViolation(
                    f"{field_name} must be at most {constraint.max}",
                    "MAX_VALUE",
                    field_name,
                )
            )

    return errors
