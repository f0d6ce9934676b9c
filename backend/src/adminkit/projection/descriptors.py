"""Serialize field descriptors into transport-safe data.

Everything returned here is plain dicts, lists and scalars. Compiled
pydantic models never appear in a descriptor.
"""

import re
from collections.abc import Iterable
from typing import Any

from adminkit.metadata.types import EntityAction, FieldDefinition

_PATH_PARAM = re.compile(r"\{(\w+)\}")


def serialize_field(fd: FieldDefinition) -> dict[str, Any]:
    result: dict[str, Any] = {
        "name": fd.name,
        "type": fd.kind,
        "required": fd.required,
    }
    if fd.description:
        result["description"] = fd.description
    if fd.options:
        result["options"] = list(fd.options)
    if fd.kind == "object" and fd.fields:
        result["fields"] = [serialize_field(child) for child in fd.fields]
    if fd.kind == "array":
        result["items"] = fd.item_kind
    return result


def serialize_fields(fields: list[FieldDefinition]) -> dict[str, Any]:
    """Describe a schema variant as {fields, required, optional}."""
    return {
        "fields": [serialize_field(fd) for fd in fields],
        "required": [fd.name for fd in fields if fd.required],
        "optional": [fd.name for fd in fields if not fd.required],
    }


def api_routes(name: str, actions: Iterable[EntityAction] = ()) -> dict[str, str]:
    """REST path templates for one entity, including its custom actions."""
    base = f"/api/{name}"
    routes = {
        "create": f"POST {base}",
        "list": f"GET {base}",
        "get": f"GET {base}/:id",
        "update": f"PUT {base}/:id",
        "delete": f"DELETE {base}/:id",
        "stats": f"GET {base}/stats",
        "bulk": f"POST {base}/bulk",
    }
    for action in actions:
        path = _PATH_PARAM.sub(r":\1", action.path)
        routes[action.name] = f"{action.method} {base}{path}"
    return routes
