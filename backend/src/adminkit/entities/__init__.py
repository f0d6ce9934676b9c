"""Built-in entity modules.

Each module exposes a definition() factory returning a fresh
EntityDefinition, so every registry gets its own hook instances.
"""

from adminkit.entities import category, item, item_attribute, organization, store, user
from adminkit.hooks.registry import HookRegistry

# Registration order is also navigation order
BUILTIN_ENTITIES = (organization, store, category, item, item_attribute, user)

BUILTIN_HOOKS = {
    "organizationHooks": organization.OrganizationHooks,
    "storeHooks": store.StoreHooks,
    "categoryHooks": category.CategoryHooks,
    "itemHooks": item.ItemHooks,
    "itemAttributeHooks": item_attribute.ItemAttributeHooks,
    "userHooks": user.UserHooks,
}


def register_builtin_hooks() -> None:
    """Make the built-in hook sets referenceable from YAML metadata."""
    for name, hooks_cls in BUILTIN_HOOKS.items():
        HookRegistry.register(name, hooks_cls)


def register_builtin_entities(registry) -> None:
    for module in BUILTIN_ENTITIES:
        registry.register_entity(module.definition())
