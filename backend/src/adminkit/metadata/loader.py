"""Load entity definitions from YAML files.

Entities that need no custom Python beyond a named hook set can be
declared in metadata/entities/*.yaml:

    entity: supplier
    displayName: Suppliers
    navSection: Catalog
    fields:
      - name: name
        type: text
        required: true
        searchable: true
        validation:
          maxLength: 255
    tenantRules:
      requiredFields: [name]
      uniqueConstraints: [name]
    hooks: supplierHooks
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from adminkit.hooks.registry import HookRegistry
from adminkit.hooks.types import EntityHooks
from adminkit.metadata.types import (
    EntityDefinition,
    FieldDefinition,
    FormSectionSpec,
    TenantRules,
    ValidationRules,
    system_fields,
)

logger = logging.getLogger(__name__)


class MetadataLoader:
    """Loads entity definitions from YAML files."""

    def __init__(self, metadata_path: Path):
        self.metadata_path = metadata_path
        self.entities: dict[str, EntityDefinition] = {}

    def load_all(self) -> None:
        """Load every entities/*.yaml file, in file name order."""
        entities_path = self.metadata_path / "entities"
        if not entities_path.exists():
            logger.debug("No entity metadata at %s", entities_path)
            return

        for yaml_file in sorted(entities_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if data and "entity" in data:
                entity = self._resolve_entity(data)
                self.entities[entity.name] = entity
                logger.debug("Loaded entity %s from %s", entity.name, yaml_file.name)

    def _resolve_entity(self, data: dict) -> EntityDefinition:
        name = data["entity"]
        fields = [self._resolve_field(f) for f in data.get("fields", [])]
        if data.get("systemFields", True):
            declared = {f.name for f in fields}
            fields = [f for f in system_fields() if f.name not in declared] + fields

        return EntityDefinition(
            name=name,
            fields=fields,
            tenant_rules=TenantRules.from_dict(data.get("tenantRules")),
            hooks=self._resolve_hooks(name, data.get("hooks")),
            display_name=data.get("displayName", ""),
            description=data.get("description"),
            icon=data.get("icon"),
            color=data.get("color"),
            nav_section=data.get("navSection", "Catalog"),
            form_layout=data.get("formLayout", "single"),
            form_sections=[
                FormSectionSpec(
                    title=s["title"],
                    fields=list(s.get("fields", [])),
                    collapsible=s.get("collapsible", False),
                    default_expanded=s.get("defaultExpanded", True),
                )
                for s in data.get("formSections", [])
            ],
            table_columns=data.get("tableColumns"),
        )

    def _resolve_field(self, data: dict) -> FieldDefinition:
        """Convert field dict to FieldDefinition."""
        nested = data.get("fields")
        return FieldDefinition(
            name=data["name"],
            kind=data.get("type", "text"),
            required=data.get("required", False),
            nullable=data.get("nullable", False),
            default=data.get("default"),
            label=data.get("label", ""),
            description=data.get("description"),
            placeholder=data.get("placeholder"),
            options=data.get("options"),
            fields=[self._resolve_field(f) for f in nested] if nested else None,
            item_kind=data.get("items", "text"),
            integer=data.get("integer", False),
            validation=ValidationRules.from_dict(data.get("validation")),
            searchable=data.get("searchable", False),
            filterable=data.get("filterable", False),
            sortable=data.get("sortable", False),
            multiline=data.get("multiline", False),
        )

    def _resolve_hooks(self, entity_name: str, hooks_name: Any) -> EntityHooks:
        if not hooks_name:
            return EntityHooks()
        if not HookRegistry.is_registered(hooks_name):
            logger.warning(
                "Entity %s references unregistered hook set '%s'; using no-op hooks",
                entity_name,
                hooks_name,
            )
            return EntityHooks()
        return HookRegistry.get(hooks_name)()

    def get_entity(self, name: str) -> EntityDefinition | None:
        """Get a loaded entity by name."""
        return self.entities.get(name)

    def list_entities(self) -> list[str]:
        """List all entity names."""
        return list(self.entities.keys())
