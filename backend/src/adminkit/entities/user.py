"""User entity: admin panel users."""

import copy
import re
from typing import Any

from adminkit.entities.common import EMAIL_PATTERN, reference_field
from adminkit.hooks.types import EntityHooks, HookContext
from adminkit.metadata.types import (
    EntityDefinition,
    FieldDefinition,
    FormSectionSpec,
    TenantRules,
    ValidationRules,
    system_fields,
)

USERNAME_PATTERN = r"^[a-zA-Z0-9._-]+$"

DEFAULT_PREFERENCES: dict[str, Any] = {
    "theme": "light",
    "language": "en",
    "notifications": {
        "email": True,
        "push": False,
    },
}


def derive_username(first_name: str, last_name: str) -> str:
    """Build a first.last username ("Ada", "Lovelace King" -> "ada.lovelaceking")."""
    parts = [re.sub(r"[^a-z0-9_-]", "", p.lower()) for p in (first_name, last_name)]
    return ".".join(p for p in parts if p)


class UserHooks(EntityHooks):
    async def before_create(
        self, ctx: HookContext, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        first, last = data.get("firstName"), data.get("lastName")
        if not data.get("username") and isinstance(first, str) and isinstance(last, str):
            data["username"] = derive_username(first, last) or None
        if not data.get("preferences"):
            data["preferences"] = copy.deepcopy(DEFAULT_PREFERENCES)
        _lowercase_email(data)
        return data

    async def before_update(
        self, ctx: HookContext, id: str, data: dict[str, Any], tenant_id: str | None
    ) -> dict[str, Any]:
        _lowercase_email(data)
        return data


def _lowercase_email(data: dict[str, Any]) -> None:
    if isinstance(data.get("email"), str):
        data["email"] = data["email"].strip().lower()


def definition() -> EntityDefinition:
    return EntityDefinition(
        name="user",
        display_name="Users",
        description="System users",
        icon="user",
        color="teal",
        nav_section="Administration",
        fields=system_fields()
        + [
            FieldDefinition(
                "email",
                "text",
                required=True,
                searchable=True,
                sortable=True,
                placeholder="name@example.com",
                validation=ValidationRules(max_length=255, pattern=EMAIL_PATTERN),
            ),
            FieldDefinition(
                "firstName",
                "text",
                required=True,
                searchable=True,
                sortable=True,
                validation=ValidationRules(min_length=1, max_length=255),
            ),
            FieldDefinition(
                "lastName",
                "text",
                required=True,
                searchable=True,
                sortable=True,
                validation=ValidationRules(min_length=1, max_length=255),
            ),
            FieldDefinition(
                "username",
                "text",
                nullable=True,
                searchable=True,
                sortable=True,
                description="Derived as first.last when omitted",
                validation=ValidationRules(
                    min_length=3, max_length=50, pattern=USERNAME_PATTERN
                ),
            ),
            FieldDefinition(
                "phone", "text", nullable=True, validation=ValidationRules(max_length=20)
            ),
            FieldDefinition("avatar", "text", nullable=True, label="Avatar URL"),
            FieldDefinition(
                "role",
                "enum",
                options=["admin", "manager", "user"],
                default="user",
                filterable=True,
                sortable=True,
            ),
            reference_field("organizationId", "Organization"),
            reference_field("storeId", "Store"),
            FieldDefinition("preferences", "object", nullable=True),
            FieldDefinition("metadata", "object", nullable=True),
        ],
        tenant_rules=TenantRules(
            required_fields=["email", "firstName", "lastName"],
            optional_fields=[
                "username", "phone", "avatar", "role", "organizationId", "storeId",
                "preferences", "metadata",
            ],
            unique_constraints=["email", "username"],
            validation_rules={
                "firstName": ValidationRules(min_length=1, max_length=255),
                "lastName": ValidationRules(min_length=1, max_length=255),
            },
        ),
        hooks=UserHooks(),
        form_layout="two-column",
        form_sections=[
            FormSectionSpec("Profile", ["firstName", "lastName", "email", "username"]),
            FormSectionSpec("Contact", ["phone", "avatar"]),
            FormSectionSpec("Access", ["role", "organizationId", "storeId"]),
            FormSectionSpec(
                "Preferences", ["preferences", "metadata"], collapsible=True,
                default_expanded=False,
            ),
        ],
        table_columns=["email", "firstName", "lastName", "role", "isActive", "createdAt"],
    )
