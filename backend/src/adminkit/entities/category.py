"""Category entity: hierarchical product categories within a store."""

from typing import Any

from adminkit.entities.common import (
    URL_PATTERN,
    description_field,
    fill_slug,
    name_field,
    reference_field,
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
from adminkit.services.errors import (
    BusinessLogicError,
    EntityValidationError,
    FieldViolation,
    TenantError,
)


class CategoryHooks(EntityHooks):
    """Slug normalization, store-scoped slug uniqueness and parent checks."""

    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        fill_slug(data)

        if data.get("slug") and data.get("storeId"):
            await self._check_slug(ctx, data["slug"], data["storeId"], tenant_id)
        if data.get("parentId"):
            await self._check_parent(ctx, data["parentId"], data.get("storeId"), tenant_id)
        return data

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        if data.get("parentId") == id:
            raise BusinessLogicError("A category cannot be its own parent")

        categories = ctx.client.delegate("category")
        current = await categories.find_first({"id": id}) or {}
        store_id = data.get("storeId") or current.get("storeId")

        if isinstance(data.get("slug"), str):
            data["slug"] = slugify(data["slug"])
            if data["slug"] != current.get("slug") and store_id:
                await self._check_slug(ctx, data["slug"], store_id, tenant_id, exclude_id=id)
        if data.get("parentId") and data["parentId"] != current.get("parentId"):
            await self._check_parent(ctx, data["parentId"], store_id, tenant_id)
        return data

    async def before_delete(self, ctx: HookContext, id: str, tenant_id: str | None) -> bool:
        children = await ctx.client.delegate("category").count(
            {"parentId": id, "tenantId": tenant_id, "isActive": True}
        )
        return children == 0

    async def after_delete(self, ctx: HookContext, id: str, tenant_id: str | None) -> None:
        # A deleted category leaves the storefront too
        await ctx.client.delegate("category").update(id, {"isPublished": False})

    async def _check_slug(
        self,
        ctx: HookContext,
        slug: str,
        store_id: str,
        tenant_id: str | None,
        exclude_id: str | None = None,
    ) -> None:
        where: dict[str, Any] = {"slug": slug, "storeId": store_id, "tenantId": tenant_id}
        if exclude_id:
            where["id"] = {"not": exclude_id}
        if await ctx.client.delegate("category").find_first(where):
            raise EntityValidationError(
                "Category slug must be unique within its store",
                [
                    FieldViolation(
                        f'Category with slug "{slug}" already exists in this store',
                        "UNIQUE",
                        "slug",
                    )
                ],
            )

    async def _check_parent(
        self,
        ctx: HookContext,
        parent_id: str,
        store_id: str | None,
        tenant_id: str | None,
    ) -> None:
        parent = await ctx.client.delegate("category").find_first({"id": parent_id})
        if parent is None:
            raise BusinessLogicError("Parent category not found")
        if parent.get("tenantId") != tenant_id:
            raise TenantError("Parent category belongs to a different tenant", field="parentId")
        if store_id and parent.get("storeId") != store_id:
            raise BusinessLogicError("Parent category does not belong to the same store")


TREE_KEYS = ("id", "name", "slug", "description", "imageUrl", "isPublished", "sortOrder")


def build_tree(categories: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Nest flat category records under their parents.

    Siblings are ordered by sortOrder, then name. A category whose parent
    is not in the input becomes a root. Each node carries its depth
    (level, 0 for roots), the slug path from its root and its children.
    """
    by_parent: dict[str | None, list[dict[str, Any]]] = {}
    ids = {c["id"] for c in categories}
    for category in categories:
        parent = category.get("parentId")
        by_parent.setdefault(parent if parent in ids else None, []).append(category)

    def nodes(parent_id: str | None, level: int, path: list[str]) -> list[dict[str, Any]]:
        siblings = sorted(
            by_parent.get(parent_id, []),
            key=lambda c: (c.get("sortOrder") or 0, c.get("name") or ""),
        )
        result = []
        for category in siblings:
            node = {key: category.get(key) for key in TREE_KEYS}
            node["level"] = level
            node["path"] = path + [category.get("slug")]
            node["children"] = nodes(category["id"], level + 1, node["path"])
            result.append(node)
        return result

    return nodes(None, 0, [])


async def category_tree(
    service, params: dict[str, Any], tenant_id: str | None
) -> list[dict[str, Any]]:
    store_id = params.get("storeId")
    if not store_id:
        raise EntityValidationError(
            "storeId is required", [FieldViolation("storeId is required", "REQUIRED", "storeId")]
        )
    categories = await service.find_many({"storeId": store_id, "isActive": True}, tenant_id)
    return build_tree(categories)


def definition() -> EntityDefinition:
    return EntityDefinition(
        name="category",
        display_name="Categories",
        description="Manage product categories and their hierarchies",
        icon="folder",
        color="blue",
        fields=system_fields()
        + [
            name_field(placeholder="Enter category name"),
            slug_field(),
            description_field(),
            FieldDefinition(
                "imageUrl",
                "text",
                nullable=True,
                label="Image URL",
                validation=ValidationRules(pattern=URL_PATTERN),
            ),
            FieldDefinition(
                "isPublished", "boolean", default=False, filterable=True, sortable=True,
                label="Published",
            ),
            reference_field("parentId", "Parent Category"),
            FieldDefinition(
                "sortOrder",
                "number",
                integer=True,
                default=0,
                sortable=True,
                validation=ValidationRules(min=0),
            ),
            reference_field("organizationId", "Organization", required=True),
            reference_field("storeId", "Store", required=True),
        ],
        tenant_rules=TenantRules(
            required_fields=["name", "slug", "organizationId", "storeId"],
            optional_fields=["description", "imageUrl", "isPublished", "parentId", "sortOrder"],
            validation_rules={"name": ValidationRules(min_length=1, max_length=255)},
            max_description_length=1000,
        ),
        hooks=CategoryHooks(),
        actions=[
            EntityAction(
                "tree", "GET", "/tree", category_tree,
                description="Active categories of a store, nested by parent",
            ),
        ],
        form_layout="two-column",
        form_sections=[
            FormSectionSpec("Basic Information", ["name", "slug", "description", "imageUrl"]),
            FormSectionSpec("Settings", ["isPublished", "sortOrder", "parentId"]),
            FormSectionSpec("Organization", ["organizationId", "storeId"]),
        ],
        table_columns=[
            "name", "slug", "isActive", "isPublished", "sortOrder", "parentId", "createdAt",
        ],
    )
