"""Compile FieldDefinition lists into pydantic models.

The compiled models are server-side validators only. They are cached on
the SchemaBuilder and never serialized into descriptors.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, create_model

from adminkit.metadata.types import FieldDefinition, to_display_name
from adminkit.services.errors import EntityValidationError, FieldViolation

_SCALAR_TYPES: dict[str, Any] = {
    "text": str,
    "boolean": bool,
}

# pydantic error types reported under the same codes tenant rules use
ERROR_CODES = {
    "string_too_short": "MIN_LENGTH",
    "string_too_long": "MAX_LENGTH",
    "string_pattern_mismatch": "PATTERN_MISMATCH",
    "greater_than_equal": "MIN_VALUE",
    "less_than_equal": "MAX_VALUE",
    "literal_error": "INVALID_OPTION",
}


def _as_utc(value: datetime) -> datetime:
    """Timestamps without an offset are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class _Payload(BaseModel):
    # Unknown keys are stripped rather than rejected
    model_config = ConfigDict(extra="ignore")


def compile_model(model_name: str, fields: list[FieldDefinition]) -> type[BaseModel]:
    """Build a pydantic model from field descriptors.

    Optional fields may be omitted but only accept null when declared
    nullable. Defaults are not validated.

    Args:
        model_name: Class name for the generated model
        fields: Field descriptors to include

    Returns:
        A pydantic model class
    """
    definitions: dict[str, Any] = {}
    for fd in fields:
        annotation = _annotation_for(fd, model_name)
        if fd.nullable:
            annotation = Optional[annotation]
        default: Any = ... if fd.required else fd.default
        definitions[fd.name] = (
            annotation,
            Field(default, description=fd.description),
        )
    return create_model(model_name, __base__=_Payload, **definitions)


def _annotation_for(fd: FieldDefinition, owner: str) -> Any:
    if fd.kind == "enum":
        return Literal[tuple(fd.options or [])]
    if fd.kind == "object":
        if fd.fields:
            return compile_model(f"{owner}{fd.name[:1].upper()}{fd.name[1:]}", fd.fields)
        return dict[str, Any]
    if fd.kind == "array":
        item = FieldDefinition(name=fd.name, kind=fd.item_kind, options=fd.options)
        return list[_annotation_for(item, owner)]
    if fd.kind == "number":
        base: Any = int if fd.integer else float
        return Annotated[
            base,
            Field(ge=fd.validation.min, le=fd.validation.max),
        ]
    if fd.kind == "text":
        return Annotated[
            str,
            Field(
                min_length=fd.validation.min_length,
                max_length=fd.validation.max_length,
                pattern=fd.validation.pattern,
            ),
        ]
    if fd.kind == "timestamp":
        return UTCDateTime
    return _SCALAR_TYPES[fd.kind]


def parse_payload(
    model: type[BaseModel],
    fields: list[FieldDefinition],
    data: dict[str, Any],
    *,
    apply_defaults: bool,
) -> dict[str, Any]:
    """Validate data against a compiled model.

    Only keys the caller supplied are returned, plus declared defaults
    when apply_defaults is set.

    Raises:
        EntityValidationError: With one FieldViolation per pydantic error
    """
    try:
        instance = model.model_validate(data)
    except ValidationError as exc:
        labels = {fd.name: fd.label for fd in fields}
        violations = [_to_violation(err, labels) for err in exc.errors()]
        raise EntityValidationError(
            f"Validation failed for {len(violations)} field(s)", violations
        ) from exc

    result = instance.model_dump(exclude_unset=True)
    if apply_defaults:
        for fd in fields:
            if fd.name not in result and fd.default is not None:
                result[fd.name] = getattr(instance, fd.name)
    return result


def _to_violation(err: dict[str, Any], labels: dict[str, str]) -> FieldViolation:
    loc = [str(part) for part in err.get("loc", ())]
    path = ".".join(loc) or None
    if err["type"] == "missing":
        if len(loc) == 1:
            label = labels.get(loc[0], loc[0])
        else:
            label = to_display_name(loc[-1]) if loc else "Value"
        return FieldViolation(f"{label} is required", "REQUIRED", path)
    code = ERROR_CODES.get(err["type"], err["type"].upper())
    return FieldViolation(err["msg"], code, path)
