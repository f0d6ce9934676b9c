"""Field kind registry with storage and UI defaults."""

from dataclasses import dataclass


@dataclass
class UIDefaults:
    input_type: str
    table_component: str
    alignment: str = "left"
    format: str | None = None


@dataclass
class FieldKind:
    name: str
    storage_type: str
    ui: UIDefaults


# Built-in field kinds
FIELD_KINDS: dict[str, FieldKind] = {
    "text": FieldKind(
        name="text",
        storage_type="TEXT",
        ui=UIDefaults(input_type="text", table_component="Text"),
    ),
    "number": FieldKind(
        name="number",
        storage_type="NUMERIC",
        ui=UIDefaults(
            input_type="number",
            table_component="Number",
            alignment="right",
        ),
    ),
    "boolean": FieldKind(
        name="boolean",
        storage_type="BOOLEAN",
        ui=UIDefaults(
            input_type="checkbox",
            table_component="Badge",
            alignment="center",
        ),
    ),
    "timestamp": FieldKind(
        name="timestamp",
        storage_type="TIMESTAMP",
        ui=UIDefaults(
            input_type="datetime",
            table_component="DateTime",
            format="datetime",
        ),
    ),
    "enum": FieldKind(
        name="enum",
        storage_type="TEXT",
        ui=UIDefaults(input_type="select", table_component="Badge"),
    ),
    "object": FieldKind(
        name="object",
        storage_type="JSON",
        ui=UIDefaults(input_type="json", table_component="Json"),
    ),
    "array": FieldKind(
        name="array",
        storage_type="JSON",
        ui=UIDefaults(input_type="tags", table_component="Tags"),
    ),
}


def get_field_kind(kind_name: str) -> FieldKind:
    """Get a field kind by name, raising KeyError for unknown kinds."""
    if kind_name not in FIELD_KINDS:
        raise KeyError(f"Unknown field kind: {kind_name}")
    return FIELD_KINDS[kind_name]


# Kinds that support Min/Max range filters in list queries
RANGE_KINDS = ("number", "timestamp")
