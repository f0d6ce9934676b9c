"""Derive create, update and query schemas from one entity definition."""

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from adminkit.core.types import RANGE_KINDS
from adminkit.metadata.types import (
    SYSTEM_FIELD_NAMES,
    EntityDefinition,
    FieldDefinition,
    ValidationRules,
)
from adminkit.schema.compiler import compile_model, parse_payload
from adminkit.services.errors import EntityValidationError, FieldViolation

if TYPE_CHECKING:
    from adminkit.services.service import EntityService


FILTER_KINDS = ("text", "enum", "boolean", "number", "timestamp")

# List query parameters, independent of the entity's own fields
QUERY_FIELDS: list[FieldDefinition] = [
    FieldDefinition(
        "page", "number", integer=True, default=1, validation=ValidationRules(min=1)
    ),
    FieldDefinition(
        "limit",
        "number",
        integer=True,
        default=20,
        validation=ValidationRules(min=1, max=100),
    ),
    FieldDefinition("search", "text"),
    FieldDefinition("sortBy", "text", default="createdAt"),
    FieldDefinition("sortOrder", "enum", options=["asc", "desc"], default="desc"),
]


class SchemaBuilder:
    """Derives the schema variants of one entity.

    The base field list is captured at construction time. Compiled
    pydantic models are built lazily and cached on the instance.
    """

    def __init__(self, definition: EntityDefinition):
        self.definition = definition
        self._models: dict[str, type[BaseModel]] = {}

    @property
    def entity_name(self) -> str:
        return self.definition.name

    @property
    def base_fields(self) -> list[FieldDefinition]:
        return self.definition.fields

    # ---- Field-list variants ----

    def create_fields(self) -> list[FieldDefinition]:
        """Base fields minus system-managed fields."""
        return [f for f in self.base_fields if f.name not in SYSTEM_FIELD_NAMES]

    def update_fields(self) -> list[FieldDefinition]:
        """Create fields, all optional, with id required."""
        id_field = self.definition.get_field("id") or FieldDefinition("id", "text")
        return [replace(id_field, required=True, nullable=False)] + [
            replace(f, required=False) for f in self.create_fields()
        ]

    def query_fields(self) -> list[FieldDefinition]:
        return list(QUERY_FIELDS)

    def filter_fields(self) -> list[FieldDefinition]:
        """List filters: equality per filterable field, plus Min/Max bounds
        for number and timestamp fields."""
        result: list[FieldDefinition] = []
        for f in self.base_fields:
            if not f.filterable or f.kind not in FILTER_KINDS:
                continue
            result.append(replace(f, required=False, nullable=False, default=None))
            if f.kind in RANGE_KINDS:
                for suffix in ("Min", "Max"):
                    result.append(
                        replace(
                            f,
                            name=f"{f.name}{suffix}",
                            label="",
                            required=False,
                            nullable=False,
                            default=None,
                            validation=ValidationRules(),
                        )
                    )
        return result

    def sortable_fields(self) -> list[str]:
        return [f.name for f in self.base_fields if f.sortable]

    def searchable_fields(self) -> list[str]:
        return [f.name for f in self.base_fields if f.searchable]

    # ---- Compiled models ----

    def create_schema(self) -> type[BaseModel]:
        return self._model("Create", self.create_fields)

    def update_schema(self) -> type[BaseModel]:
        return self._model("Update", self.update_fields)

    def query_schema(self) -> type[BaseModel]:
        return self._model("Query", self.query_fields)

    def filter_schema(self) -> type[BaseModel]:
        return self._model("Filters", self.filter_fields)

    def _model(self, variant: str, fields_fn) -> type[BaseModel]:
        if variant not in self._models:
            name = self.entity_name[:1].upper() + self.entity_name[1:]
            self._models[variant] = compile_model(f"{name}{variant}", fields_fn())
        return self._models[variant]

    # ---- Parsing ----

    def parse_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Validate a create payload, applying declared defaults."""
        return parse_payload(
            self.create_schema(), self.create_fields(), data, apply_defaults=True
        )

    def parse_update(self, data: dict[str, Any]) -> dict[str, Any]:
        """Validate a partial update payload (must include id)."""
        return parse_payload(
            self.update_schema(), self.update_fields(), data, apply_defaults=False
        )

    def parse_query(self, data: dict[str, Any]) -> dict[str, Any]:
        """Validate list parameters; out-of-range page/limit fail rather than clamp."""
        query = parse_payload(
            self.query_schema(), self.query_fields(), data, apply_defaults=True
        )
        sort_by = query["sortBy"]
        if sort_by not in self.sortable_fields():
            raise EntityValidationError(
                f"Cannot sort {self.entity_name} by '{sort_by}'",
                [
                    FieldViolation(
                        f"sortBy must be one of: {', '.join(self.sortable_fields())}",
                        "INVALID_SORT",
                        "sortBy",
                    )
                ],
            )
        return query

    def parse_filters(self, data: dict[str, Any]) -> dict[str, Any]:
        fields = self.filter_fields()
        if not fields:
            return {}
        return parse_payload(self.filter_schema(), fields, data, apply_defaults=False)

    def generate_service(self) -> "EntityService":
        """A new, unbound service for this entity."""
        from adminkit.services.service import EntityService

        return EntityService(self)
