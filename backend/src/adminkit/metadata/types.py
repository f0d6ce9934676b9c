"""Declarative entity definition types.

An entity is authored once as a list of FieldDefinition descriptors plus
tenant rules, lifecycle hooks and presentation metadata. Every derived
artifact (pydantic models, route descriptors, form/table config) reads
from these descriptors.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from adminkit.core.types import FIELD_KINDS
from adminkit.hooks.types import EntityHooks

# Fields owned by the storage layer or the service, never accepted as input
SYSTEM_FIELD_NAMES = frozenset(
    {"id", "createdAt", "updatedAt", "createdBy", "updatedBy", "tenantId", "isActive"}
)

# Fields every registered entity must declare
MANDATORY_SYSTEM_FIELDS = ("id", "createdAt", "updatedAt", "tenantId", "isActive")


@dataclass
class ValidationRules:
    min: float | None = None
    max: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ValidationRules":
        data = data or {}
        return cls(
            min=data.get("min"),
            max=data.get("max"),
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            pattern=data.get("pattern"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.min is not None:
            result["min"] = self.min
        if self.max is not None:
            result["max"] = self.max
        if self.min_length is not None:
            result["minLength"] = self.min_length
        if self.max_length is not None:
            result["maxLength"] = self.max_length
        if self.pattern is not None:
            result["pattern"] = self.pattern
        return result


@dataclass
class FieldDefinition:
    """One field of an entity.

    Attributes:
        name: Field name as stored and transported (camelCase)
        kind: One of core.types.FIELD_KINDS
        required: Must be present on create
        nullable: Accepts an explicit null
        default: Value applied on create when the field is omitted
        label: Human-readable label (derived from name if empty)
        options: Allowed values for enum fields
        fields: Nested descriptors for object fields
        item_kind: Element kind for array fields
        integer: Number fields only accept whole numbers
        searchable: Included in free-text list search
        filterable: Exposed as a list filter
        sortable: Accepted as list sortBy
        multiline: Rendered as a textarea
        system: Managed by the service or storage layer
    """

    name: str
    kind: str = "text"
    required: bool = False
    nullable: bool = False
    default: Any = None
    label: str = ""
    description: str | None = None
    placeholder: str | None = None
    options: list[str] | None = None
    fields: list["FieldDefinition"] | None = None
    item_kind: str = "text"
    integer: bool = False
    validation: ValidationRules = field(default_factory=ValidationRules)
    searchable: bool = False
    filterable: bool = False
    sortable: bool = False
    multiline: bool = False
    system: bool = False

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Field '{self.name}' has unknown kind '{self.kind}'")
        if self.kind == "enum" and not self.options:
            raise ValueError(f"Enum field '{self.name}' requires options")
        if not self.label:
            self.label = to_display_name(self.name)


@dataclass
class TenantRules:
    """Per-entity constraints applied before hooks run.

    validation_rules maps a field name to a ValidationRules instance.
    custom_validators maps a field name to a predicate returning False
    when the value is rejected.
    """

    required_fields: list[str] = field(default_factory=list)
    optional_fields: list[str] = field(default_factory=list)
    unique_constraints: list[str] = field(default_factory=list)
    validation_rules: dict[str, ValidationRules] = field(default_factory=dict)
    max_name_length: int | None = None
    max_description_length: int | None = None
    allowed_types: list[str] | None = None
    custom_validators: dict[str, Callable[[Any], bool]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "TenantRules":
        data = data or {}
        return cls(
            required_fields=list(data.get("requiredFields", [])),
            optional_fields=list(data.get("optionalFields", [])),
            unique_constraints=list(data.get("uniqueConstraints", [])),
            validation_rules={
                name: ValidationRules.from_dict(rules)
                for name, rules in (data.get("validationRules") or {}).items()
            },
            max_name_length=data.get("maxNameLength"),
            max_description_length=data.get("maxDescriptionLength"),
            allowed_types=data.get("allowedTypes"),
        )


@dataclass
class FormSectionSpec:
    title: str
    fields: list[str]
    collapsible: bool = False
    default_expanded: bool = True


@dataclass
class EntityAction:
    """An entity-specific operation served next to the CRUD routes.

    The handler is awaited as handler(service, params, tenant_id), where
    params holds the request's path and query parameters.

    Attributes:
        name: Key in the endpoint descriptor's routes
        method: HTTP method
        path: Path below /api/{entity}, e.g. "/tree" or "/{id}/hours"
        handler: Coroutine function producing the response data
    """

    name: str
    method: str
    path: str
    handler: Callable[..., Awaitable[Any]]
    description: str | None = None


@dataclass
class EntityDefinition:
    """The unit of registration in the EntityRegistry."""

    name: str
    fields: list[FieldDefinition]
    tenant_rules: TenantRules | None = field(default_factory=TenantRules)
    hooks: EntityHooks = field(default_factory=EntityHooks)
    display_name: str = ""
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    nav_section: str = "Catalog"
    form_layout: str = "single"
    form_sections: list[FormSectionSpec] = field(default_factory=list)
    table_columns: list[str] | None = None
    actions: list[EntityAction] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Entity name must be non-empty")
        if not self.display_name:
            self.display_name = to_display_name(self.name)

    def get_field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


def system_fields() -> list[FieldDefinition]:
    """Fields shared by every entity, managed outside of user input."""
    return [
        FieldDefinition("id", "text", required=True, system=True, label="ID"),
        FieldDefinition("createdAt", "timestamp", required=True, system=True, sortable=True),
        FieldDefinition("updatedAt", "timestamp", required=True, system=True, sortable=True),
        FieldDefinition("createdBy", "text", nullable=True, system=True),
        FieldDefinition("updatedBy", "text", nullable=True, system=True),
        FieldDefinition("tenantId", "text", nullable=True, system=True, label="Tenant"),
        FieldDefinition(
            "isActive",
            "boolean",
            default=True,
            system=True,
            filterable=True,
            label="Active",
        ),
    ]


def to_display_name(name: str) -> str:
    """Convert camelCase to Title Case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append(" ")
        result.append(char)
    return "".join(result).title()
