"""Form, table and navigation configuration for the admin UI."""

from dataclasses import dataclass, field
from typing import Any

from adminkit.core.types import get_field_kind
from adminkit.metadata.types import SYSTEM_FIELD_NAMES, EntityDefinition, FieldDefinition

DEFAULT_TABLE_FIELDS = ("name", "isActive", "createdAt")


@dataclass
class FormField:
    """One input in a generated form."""

    name: str
    label: str
    type: str  # text | textarea | number | checkbox | datetime | select | json | tags
    required: bool = False
    placeholder: str | None = None
    description: str | None = None
    options: list[dict[str, str]] | None = None
    default_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "label": self.label,
            "type": self.type,
            "required": self.required,
        }
        if self.placeholder:
            result["placeholder"] = self.placeholder
        if self.description:
            result["description"] = self.description
        if self.options:
            result["options"] = self.options
        if self.default_value is not None:
            result["defaultValue"] = self.default_value
        return result


@dataclass
class FormSection:
    title: str
    fields: list[str]
    collapsible: bool = False
    default_expanded: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "fields": self.fields,
            "collapsible": self.collapsible,
            "defaultExpanded": self.default_expanded,
        }


@dataclass
class FormConfig:
    title: str
    description: str
    layout: str
    sections: list[FormSection] = field(default_factory=list)
    fields: list[FormField] = field(default_factory=list)
    submit_label: str = "Save"
    cancel_label: str = "Cancel"

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "layout": self.layout,
            "submitLabel": self.submit_label,
            "cancelLabel": self.cancel_label,
            "sections": [s.to_dict() for s in self.sections],
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class TableColumn:
    key: str
    label: str
    component: str
    sortable: bool = False
    align: str = "left"
    format: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "key": self.key,
            "label": self.label,
            "component": self.component,
            "sortable": self.sortable,
            "align": self.align,
        }
        if self.format:
            result["format"] = self.format
        return result


def input_type_for(fd: FieldDefinition) -> str:
    if fd.kind == "text" and fd.multiline:
        return "textarea"
    return get_field_kind(fd.kind).ui.input_type


def build_form_field(fd: FieldDefinition) -> FormField:
    options = None
    if fd.options:
        options = [{"value": value, "label": _option_label(value)} for value in fd.options]
    return FormField(
        name=fd.name,
        label=fd.label,
        type=input_type_for(fd),
        required=fd.required,
        placeholder=fd.placeholder,
        description=fd.description,
        options=options,
        default_value=fd.default,
    )


def build_form_config(entity: EntityDefinition) -> FormConfig:
    """Form for creating or editing one entity.

    Fields come from the create variant of the schema. Declared sections
    are kept in order; any input field not covered by a section is
    collected into a trailing "Other" section.
    """
    form_fields = [
        build_form_field(fd) for fd in entity.fields if fd.name not in SYSTEM_FIELD_NAMES
    ]
    known = {f.name for f in form_fields}

    sections: list[FormSection] = []
    covered: set[str] = set()
    for spec in entity.form_sections:
        names = [n for n in spec.fields if n in known]
        covered.update(names)
        sections.append(
            FormSection(
                title=spec.title,
                fields=names,
                collapsible=spec.collapsible,
                default_expanded=spec.default_expanded,
            )
        )

    remaining = [f.name for f in form_fields if f.name not in covered]
    if remaining:
        title = "Other" if sections else "Details"
        sections.append(FormSection(title=title, fields=remaining))

    return FormConfig(
        title=entity.display_name,
        description=entity.description or f"Manage {entity.display_name.lower()}",
        layout=entity.form_layout,
        sections=sections,
        fields=form_fields,
    )


def build_table_columns(entity: EntityDefinition) -> list[TableColumn]:
    """List-view columns, from the entity's declared column list or a default set."""
    names = entity.table_columns or [
        n for n in DEFAULT_TABLE_FIELDS if entity.get_field(n) is not None
    ]
    columns = []
    for name in names:
        fd = entity.get_field(name)
        if fd is None:
            continue
        ui = get_field_kind(fd.kind).ui
        columns.append(
            TableColumn(
                key=fd.name,
                label=fd.label,
                component=ui.table_component,
                sortable=fd.sortable,
                align=ui.alignment,
                format=ui.format,
            )
        )
    return columns


def build_navigation(entities: list[EntityDefinition]) -> list[dict[str, Any]]:
    """Group entities into navigation sections, keeping registration order."""
    sections: dict[str, list[EntityDefinition]] = {}
    for entity in entities:
        sections.setdefault(entity.nav_section, []).append(entity)

    return [
        {
            "name": section_name,
            "items": [
                {
                    "name": e.name,
                    "label": e.display_name,
                    "path": f"/admin/{e.name}",
                    "icon": e.icon,
                    "color": e.color,
                }
                for e in section_entities
            ],
        }
        for section_name, section_entities in sections.items()
    ]


def _option_label(value: str) -> str:
    return value.replace("_", " ").capitalize()
