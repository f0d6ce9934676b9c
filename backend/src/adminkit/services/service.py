"""Generated per-entity CRUD service."""

import logging
from typing import TYPE_CHECKING, Any

from adminkit.hooks.types import HookContext, Operation
from adminkit.persistence.adapter import EntityDelegate, StorageClient
from adminkit.services.errors import (
    EntityNotFoundError,
    EntityValidationError,
    FieldViolation,
    StorageNotBoundError,
    TenantError,
)
from adminkit.services.query import build_list_where, tenant_scope, total_pages
from adminkit.services.tenant_rules import apply_tenant_rules

if TYPE_CHECKING:
    from adminkit.schema.builder import SchemaBuilder

logger = logging.getLogger(__name__)

BULK_ACTIONS = ("activate", "deactivate", "delete")


class EntityService:
    """CRUD facade bound to one entity.

    Construction and storage binding are separate steps: a service built
    by SchemaBuilder.generate_service() is valid but every data operation
    raises StorageNotBoundError until bind() supplies a client.

    Create lifecycle:
    1. Apply tenant rules to the raw payload
    2. before_create hook (may reshape or abort)
    3. Validate against the create schema, applying defaults
    4. Advisory uniqueness pre-check
    5. Persist with tenantId and isActive injected
    6. after_create hook

    Update mirrors create with partial-field semantics. Delete is soft
    (isActive=False) and may be vetoed by before_delete.
    """

    def __init__(self, builder: "SchemaBuilder"):
        self.builder = builder
        self.definition = builder.definition
        self.hooks = builder.definition.hooks
        self._client: StorageClient | None = None

    @property
    def entity_name(self) -> str:
        return self.definition.name

    @property
    def is_bound(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> StorageClient:
        """The bound storage client, for handlers that read related entities."""
        if self._client is None:
            raise StorageNotBoundError(
                f"Service for '{self.entity_name}' has no storage client; call bind() first"
            )
        return self._client

    def bind(self, client: StorageClient) -> "EntityService":
        """Attach the storage client used by every data operation."""
        self._client = client
        return self

    # ---- Operations ----

    async def create(
        self, data: dict[str, Any], tenant_id: str | None = None
    ) -> dict[str, Any]:
        storage = self._storage()
        ctx = self._context(Operation.CREATE)

        payload = dict(data)
        apply_tenant_rules(self.definition.tenant_rules, payload)
        payload = await self.hooks.before_create(ctx, payload, tenant_id)
        payload = self.builder.parse_create(payload)
        await self._check_unique(storage, payload, tenant_id)

        payload["tenantId"] = tenant_id
        payload["isActive"] = True
        record = await storage.create(payload)
        logger.debug(
            "Created %s %s (tenant=%s)", self.entity_name, record.get("id"), tenant_id
        )

        await self.hooks.after_create(ctx, record, tenant_id)
        return record

    async def find_by_id(
        self, id: str, tenant_id: str | None = None
    ) -> dict[str, Any] | None:
        storage = self._storage()
        return await storage.find_first({"id": id, **tenant_scope(tenant_id)})

    async def find_first(
        self, where: dict[str, Any], tenant_id: str | None = None
    ) -> dict[str, Any] | None:
        """First record matching a where clause within the tenant."""
        return await self._storage().find_first({**where, **tenant_scope(tenant_id)})

    async def find_many(
        self,
        where: dict[str, Any],
        tenant_id: str | None = None,
        order_by: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Every record matching a where clause within the tenant, unpaginated."""
        return await self._storage().find_many(
            {**where, **tenant_scope(tenant_id)}, order_by=order_by
        )

    async def list(
        self, query: dict[str, Any] | None = None, tenant_id: str | None = None
    ) -> dict[str, Any]:
        """Paginated, sorted, searched and filtered listing.

        Args:
            query: page, limit, search, sortBy, sortOrder plus any declared
                filter fields (raw values, e.g. straight from a query string)
            tenant_id: Tenant scope

        Returns:
            Dict with items, total, page, limit and totalPages

        Raises:
            EntityValidationError: If page/limit are out of range or sortBy
                is not a sortable field
        """
        storage = self._storage()
        params = dict(query or {})
        parsed = self.builder.parse_query(params)
        filters = self.builder.parse_filters(params)

        page, limit = parsed["page"], parsed["limit"]
        where = build_list_where(self.builder, tenant_id, parsed.get("search"), filters)
        items = await storage.find_many(
            where,
            order_by={parsed["sortBy"]: parsed["sortOrder"]},
            skip=(page - 1) * limit,
            take=limit,
        )
        total = await storage.count(where)

        return {
            "items": items,
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": total_pages(total, limit),
        }

    async def update(
        self, id: str, data: dict[str, Any], tenant_id: str | None = None
    ) -> dict[str, Any]:
        storage = self._storage()
        ctx = self._context(Operation.UPDATE)
        await self._require_owned(storage, id, tenant_id)

        payload = {k: v for k, v in data.items() if k != "id"}
        apply_tenant_rules(self.definition.tenant_rules, payload)
        payload = await self.hooks.before_update(ctx, id, payload, tenant_id)
        payload = self.builder.parse_update({**payload, "id": id})
        payload.pop("id")
        await self._check_unique(storage, payload, tenant_id, exclude_id=id)

        record = await storage.update(id, payload)
        logger.debug("Updated %s %s (tenant=%s)", self.entity_name, id, tenant_id)

        await self.hooks.after_update(ctx, record, tenant_id)
        return record

    async def delete(self, id: str, tenant_id: str | None = None) -> bool:
        """Soft-delete a record.

        Returns:
            True once the record is inactive (also when it already was),
            False if before_delete vetoed the operation
        """
        storage = self._storage()
        ctx = self._context(Operation.DELETE)
        await self._require_owned(storage, id, tenant_id)

        return await self._soft_delete(storage, ctx, id, tenant_id)

    async def bulk_operation(
        self, ids: "list[str]", action: str, tenant_id: str | None = None
    ) -> dict[str, Any]:
        """Activate, deactivate or delete several records at once.

        Every id is checked for existence and tenant ownership before any
        record changes. Deletes run through before_delete one record at a
        time; vetoed records stay active and are reported.

        Returns:
            Dict with action, updated ids and vetoed ids

        Raises:
            EntityValidationError: For an unknown action or an empty id list
            EntityNotFoundError: If any id is unknown
            TenantError: If any record belongs to another tenant
        """
        if action not in BULK_ACTIONS:
            raise EntityValidationError(
                f"Unknown bulk action '{action}'",
                [
                    FieldViolation(
                        f"action must be one of: {', '.join(BULK_ACTIONS)}",
                        "INVALID_ACTION",
                        "action",
                    )
                ],
            )
        if not ids:
            raise EntityValidationError(
                "No records selected", [FieldViolation("ids must not be empty", "REQUIRED", "ids")]
            )

        storage = self._storage()
        ids = list(dict.fromkeys(ids))
        for id in ids:
            await self._require_owned(storage, id, tenant_id)

        updated: list[str] = []
        vetoed: list[str] = []
        if action == "delete":
            ctx = self._context(Operation.DELETE)
            for id in ids:
                if await self._soft_delete(storage, ctx, id, tenant_id):
                    updated.append(id)
                else:
                    vetoed.append(id)
        else:
            for id in ids:
                await storage.update(id, {"isActive": action == "activate"})
                updated.append(id)

        logger.info(
            "Bulk %s on %s: %d updated, %d vetoed",
            action,
            self.entity_name,
            len(updated),
            len(vetoed),
        )
        return {"action": action, "updated": updated, "vetoed": vetoed}

    async def get_stats(self, tenant_id: str | None = None) -> dict[str, int]:
        storage = self._storage()
        scope = tenant_scope(tenant_id)
        total = await storage.count(scope)
        active = await storage.count({**scope, "isActive": True})
        return {"total": total, "active": active, "inactive": total - active}

    # ---- Internal helpers ----

    def _storage(self) -> EntityDelegate:
        return self.client.delegate(self.entity_name.lower())

    def _context(self, operation: Operation) -> HookContext:
        return HookContext(
            entity_name=self.entity_name, operation=operation, client=self._client
        )

    async def _soft_delete(
        self, storage: EntityDelegate, ctx: HookContext, id: str, tenant_id: str | None
    ) -> bool:
        if not await self.hooks.before_delete(ctx, id, tenant_id):
            logger.info("Delete of %s %s vetoed by hook", self.entity_name, id)
            return False

        await storage.update(id, {"isActive": False})
        logger.debug("Deactivated %s %s (tenant=%s)", self.entity_name, id, tenant_id)

        await self.hooks.after_delete(ctx, id, tenant_id)
        return True

    async def _require_owned(
        self, storage: EntityDelegate, id: str, tenant_id: str | None
    ) -> dict[str, Any]:
        record = await storage.find_first({"id": id})
        if record is None:
            raise EntityNotFoundError(self.entity_name, id)
        if record.get("tenantId") != tenant_id:
            raise TenantError(
                f"{self.definition.display_name} '{id}' belongs to a different tenant",
                field="tenantId",
            )
        return record

    async def _check_unique(
        self,
        storage: EntityDelegate,
        payload: dict[str, Any],
        tenant_id: str | None,
        exclude_id: str | None = None,
    ) -> None:
        """Reject values already used by another record of the same tenant.

        Advisory only: concurrent writers can both pass this check. The SQL
        backend's unique indexes are the authoritative guard.
        """
        rules = self.definition.tenant_rules
        if rules is None:
            return

        violations: list[FieldViolation] = []
        for name in rules.unique_constraints:
            value = payload.get(name)
            if value is None:
                continue
            where: dict[str, Any] = {name: value, **tenant_scope(tenant_id)}
            if exclude_id is not None:
                where["id"] = {"not": exclude_id}
            if await storage.find_first(where) is not None:
                fd = self.definition.get_field(name)
                label = fd.label if fd else name
                violations.append(
                    FieldViolation(f"{label} '{value}' is already in use", "UNIQUE", name)
                )

        if violations:
            raise EntityValidationError(
                f"{self.definition.display_name} violates a uniqueness constraint",
                violations,
            )
