"""Hook registry for AdminKit.

Maps a hook-set name to an EntityHooks subclass so entities defined in
YAML metadata can reference business logic written in Python.
"""

import logging
from collections.abc import Callable

from adminkit.hooks.types import EntityHooks

logger = logging.getLogger(__name__)

HooksClass = type[EntityHooks]


class HookRegistry:
    """Registry for named hook sets.

    Hook sets must be explicitly registered before they can be referenced
    from entity metadata. Registration is typically done at import time
    via the @entity_hooks decorator.

    Example:
        @entity_hooks("supplierHooks")
        class SupplierHooks(EntityHooks):
            async def before_create(self, ctx, data, tenant_id):
                ...
    """

    _hooks: dict[str, HooksClass] = {}

    @classmethod
    def register(cls, name: str, hooks_cls: HooksClass) -> None:
        """Register a hook set by name.

        Idempotent: re-registering the same name is a no-op.

        Args:
            name: Unique identifier for the hook set
            hooks_cls: EntityHooks subclass implementing it
        """
        if name in cls._hooks:
            return
        if not (isinstance(hooks_cls, type) and issubclass(hooks_cls, EntityHooks)):
            raise TypeError(f"Hook set '{name}' must be an EntityHooks subclass")
        cls._hooks[name] = hooks_cls
        logger.debug("Registered hook set %s -> %s", name, hooks_cls.__name__)

    @classmethod
    def get(cls, name: str) -> HooksClass:
        """Get a registered hook set by name.

        Raises:
            ValueError: If the hook set is not registered
        """
        if name not in cls._hooks:
            raise ValueError(
                f"Hook set '{name}' is not registered. "
                "Hook sets must be explicitly registered at application startup."
            )
        return cls._hooks[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a hook set is registered."""
        return name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered hook set names."""
        return sorted(cls._hooks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._hooks.clear()


def entity_hooks(name: str) -> Callable[[HooksClass], HooksClass]:
    """Class decorator to register an EntityHooks subclass by name."""

    def decorator(hooks_cls: HooksClass) -> HooksClass:
        HookRegistry.register(name, hooks_cls)
        return hooks_cls

    return decorator
