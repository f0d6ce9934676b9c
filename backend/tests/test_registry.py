"""Tests for EntityRegistry registration, descriptors and validation."""

import json

import pytest

from adminkit.bootstrap import build_registry
from adminkit.hooks.types import EntityHooks
from adminkit.metadata.types import (
    EntityDefinition,
    FieldDefinition,
    TenantRules,
    system_fields,
)
from adminkit.registry import EntityRegistry
from adminkit.schema.builder import SchemaBuilder
from adminkit.services.service import EntityService


class VetoHooks(EntityHooks):
    async def before_delete(self, ctx, id, tenant_id):
        return False


def widget_definition(**overrides) -> EntityDefinition:
    options = {
        "name": "widget",
        "fields": system_fields()
        + [
            FieldDefinition("name", "text", required=True, searchable=True, sortable=True),
            FieldDefinition("color", "enum", options=["red", "blue"], filterable=True),
        ],
        "tenant_rules": TenantRules(required_fields=["name"], optional_fields=["color"]),
        "description": "Test widgets",
        "icon": "box",
    }
    options.update(overrides)
    return EntityDefinition(**options)


@pytest.fixture
def registry():
    registry = EntityRegistry()
    registry.register_entity(widget_definition())
    return registry


# =============================================================================
# Registration and lookup
# =============================================================================


class TestRegistration:
    def test_lookup(self, registry):
        assert "widget" in registry
        assert len(registry) == 1
        assert registry.get_entity("widget").display_name == "Widget"
        assert registry.get_entity_names() == ["widget"]
        assert [e.name for e in registry.get_all_entities()] == ["widget"]

    def test_builder_is_cached(self, registry):
        builder = registry.get_builder("widget")
        assert isinstance(builder, SchemaBuilder)
        assert registry.get_builder("widget") is builder

    def test_unknown_names_return_none(self, registry):
        assert registry.get_entity("gadget") is None
        assert registry.get_builder("gadget") is None
        assert registry.generate_service("gadget") is None
        assert registry.generate_form_config("gadget") is None
        assert registry.generate_table_columns("gadget") == []

    def test_generate_service(self, registry):
        service = registry.generate_service("widget")
        assert isinstance(service, EntityService)
        assert not service.is_bound

    def test_re_registration_replaces_entry(self, registry):
        registry.register_entity(widget_definition(display_name="Gizmos"))
        assert len(registry) == 1
        assert registry.get_entity("widget").display_name == "Gizmos"

    def test_rejects_missing_system_fields(self):
        registry = EntityRegistry()
        bare = EntityDefinition(name="bare", fields=[FieldDefinition("name")])
        with pytest.raises(ValueError, match="missing system field"):
            registry.register_entity(bare)
        assert "bare" not in registry

    def test_unvalidated_registration(self):
        registry = EntityRegistry()
        bare = EntityDefinition(name="bare", fields=[FieldDefinition("name")])
        registry.register_entity(bare, validate=False)
        assert "bare" in registry

    def test_empty_registry(self):
        registry = EntityRegistry()
        assert len(registry) == 0
        assert registry.generate_admin_routes() == []
        assert registry.generate_navigation() == []


# =============================================================================
# Descriptors
# =============================================================================


class TestAdminRoutes:
    def test_descriptor_shape(self, registry):
        [route] = registry.generate_admin_routes()
        assert route["name"] == "widget"
        assert route["displayName"] == "Widget"
        assert route["description"] == "Test widgets"
        assert route["icon"] == "box"
        assert "color" not in route
        assert route["schema"]["required"] == ["name"]
        assert route["schema"]["optional"] == ["color"]
        assert route["updateSchema"]["required"] == ["id"]
        assert [f["name"] for f in route["filters"]] == ["isActive", "color"]

    def test_business_logic_flags(self, registry):
        [route] = registry.generate_admin_routes()
        assert route["hasBusinessLogic"] is False
        assert route["hooks"] == []

        registry.register_entity(widget_definition(hooks=VetoHooks()))
        route = registry.generate_admin_route("widget")
        assert route["hasBusinessLogic"] is True
        assert route["hooks"] == ["before_delete"]

    def test_enum_options_are_listed(self, registry):
        route = registry.generate_admin_route("widget")
        color = next(f for f in route["schema"]["fields"] if f["name"] == "color")
        assert color == {
            "name": "color",
            "type": "enum",
            "required": False,
            "options": ["red", "blue"],
        }

    def test_descriptors_are_plain_data(self):
        registry = build_registry()
        payload = {
            "routes": registry.generate_admin_routes(),
            "endpoints": registry.generate_api_endpoints(),
            "navigation": registry.generate_navigation(),
        }
        assert json.loads(json.dumps(payload)) == payload

    def test_api_endpoints(self, registry):
        [endpoint] = registry.generate_api_endpoints()
        assert endpoint["entity"] == "widget"
        assert endpoint["routes"] == {
            "create": "POST /api/widget",
            "list": "GET /api/widget",
            "get": "GET /api/widget/:id",
            "update": "PUT /api/widget/:id",
            "delete": "DELETE /api/widget/:id",
            "stats": "GET /api/widget/stats",
            "bulk": "POST /api/widget/bulk",
        }
        assert set(endpoint["schemas"]) == {"create", "update", "query"}


# =============================================================================
# Validation and stats
# =============================================================================


class TestValidation:
    def test_valid_entity(self, registry):
        assert registry.validate_entity("widget") == []
        assert registry.validate_all() == {}

    def test_unregistered_entity(self, registry):
        assert registry.validate_entity("gadget") == ["Entity 'gadget' is not registered"]

    def test_missing_system_field(self):
        registry = EntityRegistry()
        fields = [f for f in system_fields() if f.name != "tenantId"]
        registry.register_entity(
            EntityDefinition(name="thing", fields=fields + [FieldDefinition("name")]),
            validate=False,
        )
        assert registry.validate_entity("thing") == [
            "Entity 'thing' is missing system field 'tenantId'"
        ]

    def test_tenant_rule_on_unknown_field(self):
        registry = EntityRegistry()
        registry.register_entity(
            widget_definition(tenant_rules=TenantRules(required_fields=["name", "ghost"]))
        )
        errors = registry.validate_entity("widget")
        assert errors == ["Tenant rule for 'widget' references unknown field 'ghost'"]
        assert registry.validate_all() == {"widget": errors}

    def test_missing_tenant_rules(self):
        registry = EntityRegistry()
        registry.register_entity(widget_definition(tenant_rules=None))
        assert registry.validate_entity("widget") == ["Entity 'widget' has no tenant rules"]

    def test_entity_stats(self, registry):
        stats = registry.get_entity_stats()
        assert stats["total"] == 1
        assert stats["entities"] == [
            {
                "name": "widget",
                "displayName": "Widget",
                "hasBusinessLogic": False,
                "requiredFields": ["name"],
                "optionalFields": ["color"],
            }
        ]


class TestBuiltinRegistry:
    def test_builtin_entities_in_order(self):
        registry = build_registry()
        assert registry.get_entity_names() == [
            "organization",
            "store",
            "category",
            "item",
            "itemAttribute",
            "user",
        ]

    def test_builtin_entities_are_valid(self):
        assert build_registry().validate_all() == {}

    def test_each_build_is_independent(self):
        first, second = build_registry(), build_registry()
        assert first is not second
        assert first.get_entity("item").hooks is not second.get_entity("item").hooks
