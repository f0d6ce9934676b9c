"""Tests for the entity lifecycle hook system."""

import pytest

from adminkit.entities import BUILTIN_HOOKS, register_builtin_hooks
from adminkit.entities.category import CategoryHooks
from adminkit.entities.user import UserHooks
from adminkit.hooks import (
    HOOK_POINTS,
    EntityHooks,
    HookContext,
    HookRegistry,
    Operation,
    entity_hooks,
)
from adminkit.persistence.memory import InMemoryStorageClient


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_hook_registry():
    """Clear hook registry before and after each test."""
    HookRegistry.clear()
    yield
    HookRegistry.clear()


@pytest.fixture
def ctx():
    return HookContext(
        entity_name="widget",
        operation=Operation.CREATE,
        client=InMemoryStorageClient(),
    )


class SupplierHooks(EntityHooks):
    async def before_create(self, ctx, data, tenant_id):
        data["code"] = data["name"].upper()
        return data


# =============================================================================
# EntityHooks defaults
# =============================================================================


class TestEntityHooksDefaults:
    @pytest.mark.asyncio
    async def test_before_hooks_pass_data_through(self, ctx):
        hooks = EntityHooks()
        data = {"name": "a"}
        assert await hooks.before_create(ctx, data, "t1") is data
        assert await hooks.before_update(ctx, "w1", data, "t1") is data

    @pytest.mark.asyncio
    async def test_before_delete_allows_by_default(self, ctx):
        assert await EntityHooks().before_delete(ctx, "w1", "t1") is True

    @pytest.mark.asyncio
    async def test_after_hooks_return_none(self, ctx):
        hooks = EntityHooks()
        assert await hooks.after_create(ctx, {}, "t1") is None
        assert await hooks.after_update(ctx, {}, "t1") is None
        assert await hooks.after_delete(ctx, "w1", "t1") is None

    def test_base_class_has_no_business_logic(self):
        assert EntityHooks.implemented_hooks() == []
        assert EntityHooks().has_business_logic() is False


class TestImplementedHooks:
    def test_reports_overridden_points(self):
        assert SupplierHooks.implemented_hooks() == ["before_create"]
        assert SupplierHooks().has_business_logic() is True

    def test_points_are_reported_in_lifecycle_order(self):
        class Both(EntityHooks):
            async def before_delete(self, ctx, id, tenant_id):
                return True

            async def before_create(self, ctx, data, tenant_id):
                return data

        assert Both.implemented_hooks() == ["before_create", "before_delete"]

    def test_inherited_overrides_count(self):
        class Child(SupplierHooks):
            pass

        assert Child.implemented_hooks() == ["before_create"]

    def test_builtin_hooks(self):
        assert CategoryHooks.implemented_hooks() == [
            "before_create",
            "before_update",
            "before_delete",
            "after_delete",
        ]
        assert UserHooks.implemented_hooks() == ["before_create", "before_update"]

    def test_hook_points(self):
        assert HOOK_POINTS == (
            "before_create",
            "after_create",
            "before_update",
            "after_update",
            "before_delete",
            "after_delete",
        )


# =============================================================================
# HookRegistry
# =============================================================================


class TestHookRegistry:
    def test_register_and_get(self):
        HookRegistry.register("supplierHooks", SupplierHooks)
        assert HookRegistry.is_registered("supplierHooks")
        assert HookRegistry.get("supplierHooks") is SupplierHooks

    def test_get_unregistered_raises(self):
        with pytest.raises(ValueError, match="not registered"):
            HookRegistry.get("missing")

    def test_register_is_idempotent(self):
        class Other(EntityHooks):
            pass

        HookRegistry.register("supplierHooks", SupplierHooks)
        HookRegistry.register("supplierHooks", Other)
        assert HookRegistry.get("supplierHooks") is SupplierHooks

    def test_register_rejects_non_hooks(self):
        with pytest.raises(TypeError):
            HookRegistry.register("bad", dict)

    def test_list_registered_is_sorted(self):
        HookRegistry.register("zeta", SupplierHooks)
        HookRegistry.register("alpha", SupplierHooks)
        assert HookRegistry.list_registered() == ["alpha", "zeta"]

    def test_clear(self):
        HookRegistry.register("supplierHooks", SupplierHooks)
        HookRegistry.clear()
        assert HookRegistry.list_registered() == []

    def test_decorator(self):
        @entity_hooks("decorated")
        class Decorated(EntityHooks):
            pass

        assert HookRegistry.get("decorated") is Decorated

    def test_register_builtin_hooks(self):
        register_builtin_hooks()
        assert HookRegistry.list_registered() == sorted(BUILTIN_HOOKS)
        assert HookRegistry.get("categoryHooks") is CategoryHooks


class TestHookContext:
    @pytest.mark.asyncio
    async def test_hook_can_reshape_payload(self, ctx):
        data = await SupplierHooks().before_create(ctx, {"name": "acme"}, "t1")
        assert data == {"name": "acme", "code": "ACME"}

    def test_operation_values(self):
        assert Operation.CREATE.value == "create"
        assert Operation("delete") is Operation.DELETE
