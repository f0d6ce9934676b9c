"""Assemble the entity registry used by the API and the CLI."""

import logging
from pathlib import Path

from adminkit.entities import register_builtin_entities, register_builtin_hooks
from adminkit.metadata.loader import MetadataLoader
from adminkit.registry import EntityRegistry

logger = logging.getLogger(__name__)


def build_registry(metadata_path: Path | None = None) -> EntityRegistry:
    """Register the built-in entities, then any YAML entities.

    A YAML entity with the same name as a built-in one replaces it.

    Args:
        metadata_path: Directory containing entities/*.yaml, or None

    Returns:
        A populated EntityRegistry
    """
    register_builtin_hooks()
    registry = EntityRegistry()
    register_builtin_entities(registry)

    if metadata_path is not None:
        loader = MetadataLoader(metadata_path)
        loader.load_all()
        for name in loader.list_entities():
            registry.register_entity(loader.get_entity(name))

    logger.debug("Registry ready with %d entities", len(registry))
    return registry
