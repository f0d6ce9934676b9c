"""Organization entity: the top-level owner of stores, categories and attributes."""

from typing import Any

from adminkit.entities.common import (
    EMAIL_PATTERN,
    URL_PATTERN,
    address_field,
    description_field,
    fill_slug,
    name_field,
    slug_field,
    slugify,
)
from adminkit.hooks.types import EntityHooks, HookContext
from adminkit.metadata.types import (
    EntityAction,
    EntityDefinition,
    FieldDefinition,
    FormSectionSpec,
    TenantRules,
    ValidationRules,
    system_fields,
)
from adminkit.services.errors import EntityNotFoundError


class OrganizationHooks(EntityHooks):
    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        fill_slug(data)
        return data

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        if isinstance(data.get("slug"), str):
            data["slug"] = slugify(data["slug"])
        return data

    async def before_delete(self, ctx: HookContext, id: str, tenant_id: str | None) -> bool:
        where = {"organizationId": id, "tenantId": tenant_id, "isActive": True}
        for child in ("store", "user"):
            if await ctx.client.delegate(child).count(where):
                return False
        return True


async def organization_by_slug(
    service, params: dict[str, Any], tenant_id: str | None
) -> dict[str, Any]:
    """Look an organization up by slug, with counts of its active stores and users."""
    slug = slugify(params["slug"])
    org = await service.find_first({"slug": slug}, tenant_id)
    if org is None:
        raise EntityNotFoundError("organization", slug)

    where = {"organizationId": org["id"], "tenantId": tenant_id, "isActive": True}
    return {
        **org,
        "storeCount": await service.client.delegate("store").count(where),
        "userCount": await service.client.delegate("user").count(where),
    }


def definition() -> EntityDefinition:
    return EntityDefinition(
        name="organization",
        display_name="Organizations",
        description="Companies that own stores and catalogs",
        icon="building",
        color="purple",
        nav_section="Organization",
        fields=system_fields()
        + [
            name_field(placeholder="Enter organization name"),
            slug_field(),
            description_field(),
            FieldDefinition(
                "logoUrl",
                "text",
                nullable=True,
                label="Logo URL",
                validation=ValidationRules(pattern=URL_PATTERN),
            ),
            FieldDefinition(
                "website", "text", nullable=True, validation=ValidationRules(pattern=URL_PATTERN)
            ),
            FieldDefinition(
                "email",
                "text",
                nullable=True,
                searchable=True,
                validation=ValidationRules(pattern=EMAIL_PATTERN),
            ),
            FieldDefinition(
                "phone", "text", nullable=True, validation=ValidationRules(max_length=20)
            ),
            address_field(),
            FieldDefinition("settings", "object", default={}),
            FieldDefinition(
                "isPublic", "boolean", default=False, filterable=True, sortable=True,
                label="Public",
            ),
        ],
        tenant_rules=TenantRules(
            required_fields=["name", "slug"],
            optional_fields=[
                "description", "logoUrl", "website", "email", "phone", "address",
                "settings", "isPublic",
            ],
            unique_constraints=["slug"],
            validation_rules={"name": ValidationRules(min_length=1, max_length=255)},
            max_description_length=1000,
        ),
        hooks=OrganizationHooks(),
        actions=[
            EntityAction("bySlug", "GET", "/by-slug/{slug}", organization_by_slug),
        ],
        form_layout="two-column",
        form_sections=[
            FormSectionSpec("Basic Information", ["name", "slug", "description", "isPublic"]),
            FormSectionSpec("Contact", ["email", "phone", "website", "logoUrl"]),
            FormSectionSpec("Address", ["address"], collapsible=True),
        ],
        table_columns=["name", "slug", "isActive", "isPublic", "email", "phone", "createdAt"],
    )
