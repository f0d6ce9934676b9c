"""Helpers shared by the built-in entity modules."""

import re
from typing import Any

from adminkit.metadata.types import FieldDefinition, ValidationRules

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
URL_PATTERN = r"^https?://\S+$"
SLUG_PATTERN = r"^[a-z0-9-]+$"


def slugify(value: str) -> str:
    """Lower-case, hyphen-separated form of a name ("Summer Sale!" -> "summer-sale")."""
    slug = re.sub(r"\s+", "-", value.strip().lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return re.sub(r"-{2,}", "-", slug).strip("-")


def name_field(**overrides: Any) -> FieldDefinition:
    options: dict[str, Any] = {
        "required": True,
        "searchable": True,
        "sortable": True,
        "validation": ValidationRules(min_length=1, max_length=255),
    }
    options.update(overrides)
    return FieldDefinition("name", "text", **options)


def description_field() -> FieldDefinition:
    return FieldDefinition(
        "description",
        "text",
        nullable=True,
        searchable=True,
        multiline=True,
        validation=ValidationRules(max_length=1000),
    )


def slug_field() -> FieldDefinition:
    return FieldDefinition(
        "slug",
        "text",
        required=True,
        searchable=True,
        sortable=True,
        description="URL-friendly identifier, derived from the name when omitted",
        validation=ValidationRules(min_length=1, max_length=255, pattern=SLUG_PATTERN),
    )


def reference_field(name: str, label: str, *, required: bool = False) -> FieldDefinition:
    """Id of a record in another entity."""
    return FieldDefinition(
        name,
        "text",
        required=required,
        nullable=not required,
        filterable=True,
        label=label,
    )


def address_field() -> FieldDefinition:
    return FieldDefinition(
        "address",
        "object",
        nullable=True,
        fields=[
            FieldDefinition("street", "text", validation=ValidationRules(max_length=255)),
            FieldDefinition("city", "text", validation=ValidationRules(max_length=100)),
            FieldDefinition("state", "text", validation=ValidationRules(max_length=100)),
            FieldDefinition("postalCode", "text", validation=ValidationRules(max_length=20)),
            FieldDefinition("country", "text", validation=ValidationRules(max_length=100)),
        ],
    )


def fill_slug(data: dict[str, Any]) -> None:
    """Normalize data["slug"], deriving it from data["name"] when missing."""
    slug = data.get("slug")
    if isinstance(slug, str) and slug:
        data["slug"] = slugify(slug)
    elif isinstance(data.get("name"), str):
        data["slug"] = slugify(data["name"])
