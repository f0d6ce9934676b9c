"""AdminKit entity lifecycle hooks.

Provides extension points for logic that runs around each CRUD
operation of a generated service:
- before_create / before_update: may reshape the payload or abort
- after_create / after_update: side effects on the persisted record
- before_delete: may veto a soft delete by returning False
- after_delete: side effects after the record is deactivated

Usage:
    from adminkit.hooks import EntityHooks, entity_hooks

    @entity_hooks("supplierHooks")
    class SupplierHooks(EntityHooks):
        async def before_create(self, ctx, data, tenant_id):
            data.setdefault("code", data["name"].upper())
            return data
"""

from adminkit.hooks.registry import HookRegistry, entity_hooks
from adminkit.hooks.types import HOOK_POINTS, EntityHooks, HookContext, Operation

__all__ = [
    "HOOK_POINTS",
    "EntityHooks",
    "HookContext",
    "HookRegistry",
    "Operation",
    "entity_hooks",
]
