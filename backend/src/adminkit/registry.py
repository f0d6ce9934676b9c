"""Entity registry: the catalog every derived artifact is produced from.

A registry is an explicit object built once at startup (see
adminkit.bootstrap.build_registry) and handed to the HTTP app, the CLI
and tests. Registration is expected to happen before request handling
starts; reads afterwards need no locking.
"""

import logging
from typing import Any

from adminkit.metadata.types import MANDATORY_SYSTEM_FIELDS, EntityDefinition
from adminkit.projection.descriptors import api_routes, serialize_field, serialize_fields
from adminkit.projection.forms import (
    FormConfig,
    TableColumn,
    build_form_config,
    build_navigation,
    build_table_columns,
)
from adminkit.schema.builder import SchemaBuilder
from adminkit.services.service import EntityService

logger = logging.getLogger(__name__)


class EntityRegistry:
    """Maps entity name to its definition and cached SchemaBuilder.

    Lookups on unknown names return None (or an empty result) rather
    than raising; callers check existence themselves.
    """

    def __init__(self) -> None:
        self._entities: dict[str, EntityDefinition] = {}
        self._builders: dict[str, SchemaBuilder] = {}

    # ---- Registration and lookup ----

    def register_entity(self, definition: EntityDefinition, *, validate: bool = True) -> None:
        """Insert or replace an entity and build its SchemaBuilder.

        Args:
            definition: The entity to register
            validate: Reject definitions that lack a mandatory system field

        Raises:
            ValueError: If validate is set and a system field is missing
        """
        if validate:
            missing = _missing_system_fields(definition)
            if missing:
                raise ValueError(
                    f"Entity '{definition.name}' is missing system field(s): "
                    f"{', '.join(missing)}"
                )
        if definition.name in self._entities:
            logger.info("Re-registering entity %s", definition.name)
        self._entities[definition.name] = definition
        self._builders[definition.name] = SchemaBuilder(definition)
        logger.debug("Registered entity %s", definition.name)

    def get_entity(self, name: str) -> EntityDefinition | None:
        return self._entities.get(name)

    def get_builder(self, name: str) -> SchemaBuilder | None:
        return self._builders.get(name)

    def generate_service(self, name: str) -> EntityService | None:
        """A fresh, unbound service for the named entity."""
        builder = self._builders.get(name)
        return builder.generate_service() if builder else None

    def get_all_entities(self) -> list[EntityDefinition]:
        return list(self._entities.values())

    def get_entity_names(self) -> list[str]:
        return list(self._entities.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    # ---- Derived artifacts ----

    def generate_admin_routes(self) -> list[dict[str, Any]]:
        """Serialized admin descriptors, one per entity. Plain data only."""
        return [self.generate_admin_route(name) for name in self._entities]

    def generate_admin_route(self, name: str) -> dict[str, Any] | None:
        entity = self._entities.get(name)
        if entity is None:
            return None
        builder = self._builders[name]
        route: dict[str, Any] = {
            "name": name,
            "displayName": entity.display_name,
            "schema": serialize_fields(builder.create_fields()),
            "updateSchema": serialize_fields(builder.update_fields()),
            "querySchema": serialize_fields(builder.query_fields()),
            "filters": [serialize_field(f) for f in builder.filter_fields()],
            "hasBusinessLogic": entity.hooks.has_business_logic(),
            "hooks": entity.hooks.implemented_hooks(),
        }
        for key, value in (
            ("description", entity.description),
            ("icon", entity.icon),
            ("color", entity.color),
        ):
            if value:
                route[key] = value
        return route

    def generate_api_endpoints(self) -> list[dict[str, Any]]:
        endpoints = []
        for name in self._entities:
            builder = self._builders[name]
            endpoints.append(
                {
                    "entity": name,
                    "routes": api_routes(name, self._entities[name].actions),
                    "schemas": {
                        "create": serialize_fields(builder.create_fields()),
                        "update": serialize_fields(builder.update_fields()),
                        "query": serialize_fields(builder.query_fields()),
                    },
                }
            )
        return endpoints

    def generate_navigation(self) -> list[dict[str, Any]]:
        return build_navigation(self.get_all_entities())

    def generate_form_config(self, name: str) -> FormConfig | None:
        entity = self._entities.get(name)
        return build_form_config(entity) if entity else None

    def generate_table_columns(self, name: str) -> list[TableColumn]:
        entity = self._entities.get(name)
        return build_table_columns(entity) if entity else []

    # ---- Validation and stats ----

    def validate_entity(self, name: str) -> list[str]:
        """Human-readable problems with a registered entity. Never raises."""
        entity = self._entities.get(name)
        if entity is None:
            return [f"Entity '{name}' is not registered"]

        errors: list[str] = []
        if not entity.fields:
            errors.append(f"Entity '{name}' has no schema")
        if entity.tenant_rules is None:
            errors.append(f"Entity '{name}' has no tenant rules")

        for field_name in _missing_system_fields(entity):
            errors.append(f"Entity '{name}' is missing system field '{field_name}'")

        declared = set(entity.field_names)
        if entity.tenant_rules is not None:
            rules = entity.tenant_rules
            referenced = (
                rules.required_fields
                + rules.optional_fields
                + rules.unique_constraints
                + list(rules.validation_rules)
            )
            for field_name in dict.fromkeys(referenced):
                if field_name not in declared:
                    errors.append(
                        f"Tenant rule for '{name}' references unknown field '{field_name}'"
                    )
        return errors

    def validate_all(self) -> dict[str, list[str]]:
        """validate_entity for every entity, keeping only those with problems."""
        results = {name: self.validate_entity(name) for name in self._entities}
        return {name: errors for name, errors in results.items() if errors}

    def get_entity_stats(self) -> dict[str, Any]:
        return {
            "total": len(self._entities),
            "entities": [
                {
                    "name": name,
                    "displayName": entity.display_name,
                    "hasBusinessLogic": entity.hooks.has_business_logic(),
                    "requiredFields": list(entity.tenant_rules.required_fields)
                    if entity.tenant_rules
                    else [],
                    "optionalFields": list(entity.tenant_rules.optional_fields)
                    if entity.tenant_rules
                    else [],
                }
                for name, entity in self._entities.items()
            ],
        }


def _missing_system_fields(entity: EntityDefinition) -> list[str]:
    declared = set(entity.field_names)
    return [name for name in MANDATORY_SYSTEM_FIELDS if name not in declared]
