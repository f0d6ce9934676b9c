"""Item attribute entity: typed, per-organization product attributes."""

from typing import Any

from adminkit.entities.common import description_field, reference_field
from adminkit.hooks.types import EntityHooks, HookContext
from adminkit.metadata.types import (
    EntityDefinition,
    FieldDefinition,
    FormSectionSpec,
    TenantRules,
    ValidationRules,
    system_fields,
)
from adminkit.services.errors import BusinessLogicError

ATTRIBUTE_TYPES = ["string", "number", "boolean", "enum", "json"]
ATTRIBUTE_NAME_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_]*$"


class ItemAttributeHooks(EntityHooks):
    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        _check_enum_options(data)
        return data

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        if "attributeType" in data or "options" in data:
            current = await ctx.client.delegate("itemAttribute").find_first({"id": id}) or {}
            _check_enum_options({**current, **data})
        return data


def _check_enum_options(data: dict[str, Any]) -> None:
    if data.get("attributeType") == "enum" and not data.get("options"):
        raise BusinessLogicError("Enum attributes require at least one option")


def definition() -> EntityDefinition:
    return EntityDefinition(
        name="itemAttribute",
        display_name="Item Attributes",
        description="Manage item attributes and their configurations",
        icon="tag",
        color="pink",
        fields=system_fields()
        + [
            FieldDefinition(
                "name",
                "text",
                required=True,
                searchable=True,
                sortable=True,
                description="Machine name, e.g. color or screenSize",
                validation=ValidationRules(
                    min_length=1, max_length=255, pattern=ATTRIBUTE_NAME_PATTERN
                ),
            ),
            FieldDefinition(
                "displayName",
                "text",
                required=True,
                searchable=True,
                sortable=True,
                validation=ValidationRules(min_length=1, max_length=255),
            ),
            description_field(),
            FieldDefinition(
                "attributeType",
                "enum",
                required=True,
                options=ATTRIBUTE_TYPES,
                filterable=True,
                label="Attribute Type",
            ),
            FieldDefinition(
                "dataType",
                "text",
                required=True,
                label="Data Type",
                validation=ValidationRules(max_length=100),
            ),
            FieldDefinition("options", "array", item_kind="text", nullable=True),
            FieldDefinition(
                "isRequired", "boolean", default=False, filterable=True, label="Required"
            ),
            FieldDefinition("defaultValue", "text", nullable=True),
            FieldDefinition("validationRules", "object", nullable=True),
            FieldDefinition(
                "sortOrder",
                "number",
                integer=True,
                default=0,
                sortable=True,
                validation=ValidationRules(min=0),
            ),
            reference_field("organizationId", "Organization", required=True),
        ],
        tenant_rules=TenantRules(
            required_fields=["name", "displayName", "attributeType", "dataType", "organizationId"],
            optional_fields=[
                "description", "options", "isRequired", "defaultValue", "validationRules",
                "sortOrder",
            ],
            unique_constraints=["name"],
            max_description_length=1000,
        ),
        hooks=ItemAttributeHooks(),
        form_sections=[
            FormSectionSpec("Basic Information", ["name", "displayName", "description"]),
            FormSectionSpec(
                "Type",
                ["attributeType", "dataType", "options", "defaultValue", "isRequired"],
            ),
            FormSectionSpec(
                "Advanced",
                ["validationRules", "sortOrder", "organizationId"],
                collapsible=True,
                default_expanded=False,
            ),
        ],
        table_columns=[
            "name", "displayName", "attributeType", "isRequired", "isActive", "sortOrder",
        ],
    )
