"""Lifecycle hook types for AdminKit.

Defines the data passed to hooks and the EntityHooks capability:
- Operation: the CRUD operation a hook runs for
- HookContext: runtime state handed to every hook method
- EntityHooks: base class with a no-op default for every lifecycle event
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from adminkit.persistence.adapter import StorageClient


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


HOOK_POINTS = (
    "before_create",
    "after_create",
    "before_update",
    "after_update",
    "before_delete",
    "after_delete",
)


@dataclass
class HookContext:
    """Runtime context passed to every hook method.

    Attributes:
        entity_name: Name of the entity being operated on
        operation: The current operation
        client: Storage client bound to the calling service, for hooks
            that need to look at other records
    """

    entity_name: str
    operation: Operation
    client: "StorageClient"


class EntityHooks:
    """Lifecycle callbacks for one entity.

    Subclasses override only the events they care about. Before-hooks
    may return a modified payload, or raise BusinessLogicError /
    TenantError to abort. before_delete vetoes the delete by returning
    False. After-hooks are side-effect only.
    """

    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        return data

    async def after_create(
        self, ctx: HookContext, record: dict[str, Any], tenant_id: str | None
    ) -> None:
        return None

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        return data

    async def after_update(
        self, ctx: HookContext, record: dict[str, Any], tenant_id: str | None
    ) -> None:
        return None

    async def before_delete(self, ctx: HookContext, id: str, tenant_id: str | None) -> bool:
        return True

    async def after_delete(self, ctx: HookContext, id: str, tenant_id: str | None) -> None:
        return None

    @classmethod
    def implemented_hooks(cls) -> list[str]:
        """Names of the hook points this class overrides."""
        return [
            name
            for name in HOOK_POINTS
            if getattr(cls, name) is not getattr(EntityHooks, name)
        ]

    @classmethod
    def has_business_logic(cls) -> bool:
        return bool(cls.implemented_hooks())
