"""List query helpers: where-clause assembly and pagination math."""

import math
from typing import TYPE_CHECKING, Any

from adminkit.core.types import RANGE_KINDS

if TYPE_CHECKING:
    from adminkit.schema.builder import SchemaBuilder


def tenant_scope(tenant_id: str | None) -> dict[str, Any]:
    """Where clause restricting records to one tenant (None = unscoped records)."""
    return {"tenantId": tenant_id}


def build_list_where(
    builder: "SchemaBuilder",
    tenant_id: str | None,
    search: str | None,
    filters: dict[str, Any],
) -> dict[str, Any]:
    """Combine tenant scoping, free-text search and declared filters.

    Search is a case-insensitive contains, OR-ed across the entity's
    searchable fields. Filters named <field>Min / <field>Max become
    gte / lte bounds on <field>; any other filter is an equality.
    """
    where: dict[str, Any] = tenant_scope(tenant_id)

    searchable = builder.searchable_fields()
    if search and searchable:
        where["OR"] = [
            {name: {"contains": search, "mode": "insensitive"}} for name in searchable
        ]

    range_fields = {
        f.name for f in builder.base_fields if f.filterable and f.kind in RANGE_KINDS
    }
    for key, value in filters.items():
        if value is None:
            continue
        field_name, op = _split_range(key, range_fields)
        if field_name in range_fields:
            where.setdefault(field_name, {})[op] = value
        else:
            where[key] = value
    return where


def _split_range(key: str, range_fields: set[str]) -> tuple[str, str]:
    for suffix, op in (("Min", "gte"), ("Max", "lte")):
        if key.endswith(suffix) and key[: -len(suffix)] in range_fields:
            return key[: -len(suffix)], op
    return key, "equals"


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
