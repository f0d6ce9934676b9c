"""Item entity: products and SKUs sold by a store."""

import secrets
import time
from typing import Any

from adminkit.entities.common import description_field, name_field, reference_field
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

SKU_PATTERN = r"^[A-Z0-9-]+$"


def generate_sku() -> str:
    return f"SKU-{int(time.time() * 1000)}-{secrets.token_hex(4).upper()}"


class ItemHooks(EntityHooks):
    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        sku = data.get("sku")
        data["sku"] = sku.upper() if isinstance(sku, str) and sku else generate_sku()
        data.setdefault("quantity", 0)
        data.setdefault("minQuantity", 0)
        _clamp_non_negative(data, "price", "quantity")
        _check_quantity_bounds(data)
        return data

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        if isinstance(data.get("sku"), str):
            data["sku"] = data["sku"].upper()
        _clamp_non_negative(data, "price", "quantity")
        _check_quantity_bounds(data)
        return data


def _clamp_non_negative(data: dict[str, Any], *names: str) -> None:
    for name in names:
        value = data.get(name)
        if isinstance(value, (int, float)) and value < 0:
            data[name] = 0


def _check_quantity_bounds(data: dict[str, Any]) -> None:
    low, high = data.get("minQuantity"), data.get("maxQuantity")
    if low is not None and high is not None and high < low:
        raise BusinessLogicError("Maximum quantity cannot be lower than minimum quantity")


def definition() -> EntityDefinition:
    return EntityDefinition(
        name="item",
        display_name="Items",
        description="Product items and SKUs",
        icon="package",
        color="green",
        fields=system_fields()
        + [
            name_field(placeholder="Enter item name"),
            description_field(),
            FieldDefinition(
                "sku",
                "text",
                required=True,
                searchable=True,
                sortable=True,
                label="SKU",
                description="Generated when omitted",
                validation=ValidationRules(min_length=1, max_length=255, pattern=SKU_PATTERN),
            ),
            reference_field("categoryId", "Category"),
            reference_field("storeId", "Store", required=True),
            FieldDefinition(
                "price",
                "number",
                required=True,
                filterable=True,
                sortable=True,
                validation=ValidationRules(min=0),
            ),
            FieldDefinition("cost", "number", nullable=True, validation=ValidationRules(min=0)),
            FieldDefinition(
                "quantity",
                "number",
                integer=True,
                required=True,
                filterable=True,
                sortable=True,
                validation=ValidationRules(min=0),
            ),
            FieldDefinition(
                "minQuantity", "number", integer=True, nullable=True,
                validation=ValidationRules(min=0),
            ),
            FieldDefinition(
                "maxQuantity", "number", integer=True, nullable=True,
                validation=ValidationRules(min=0),
            ),
            FieldDefinition("weight", "number", nullable=True, validation=ValidationRules(min=0)),
            FieldDefinition(
                "status",
                "enum",
                options=["DRAFT", "ACTIVE", "ARCHIVED"],
                default="DRAFT",
                filterable=True,
                sortable=True,
            ),
            FieldDefinition(
                "dimensions",
                "object",
                nullable=True,
                fields=[
                    FieldDefinition("length", "number", validation=ValidationRules(min=0)),
                    FieldDefinition("width", "number", validation=ValidationRules(min=0)),
                    FieldDefinition("height", "number", validation=ValidationRules(min=0)),
                    FieldDefinition("unit", "enum", options=["cm", "in"], default="cm"),
                ],
            ),
            FieldDefinition("images", "array", item_kind="text", nullable=True),
            FieldDefinition("tags", "array", item_kind="text", default=[]),
            FieldDefinition("metadata", "object", nullable=True),
        ],
        tenant_rules=TenantRules(
            required_fields=["name", "sku", "storeId", "price", "quantity"],
            optional_fields=[
                "description", "categoryId", "cost", "minQuantity", "maxQuantity",
                "weight", "dimensions", "images", "tags", "metadata",
            ],
            unique_constraints=["sku"],
            validation_rules={"name": ValidationRules(min_length=1, max_length=255)},
        ),
        hooks=ItemHooks(),
        form_layout="two-column",
        form_sections=[
            FormSectionSpec("Basic Information", ["name", "sku", "description", "status"]),
            FormSectionSpec("Pricing", ["price", "cost"]),
            FormSectionSpec(
                "Inventory", ["quantity", "minQuantity", "maxQuantity", "storeId", "categoryId"]
            ),
            FormSectionSpec(
                "Details",
                ["weight", "dimensions", "images", "tags", "metadata"],
                collapsible=True,
                default_expanded=False,
            ),
        ],
        table_columns=["name", "sku", "price", "quantity", "status", "isActive", "createdAt"],
    )
