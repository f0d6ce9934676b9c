"""In-process storage client.

Keeps records in dicts keyed by entity name. Used by tests and by the
`memory://` database URL. Records are deep-copied on the way in and out
so callers never share state with the store.
"""

import copy
import uuid
from datetime import UTC, datetime
from typing import Any

from adminkit.persistence.adapter import OrderBy, RecordNotFoundError, Where


OPERATORS = frozenset(
    {"equals", "not", "in", "notIn", "contains", "startsWith", "mode", "gt", "gte", "lt", "lte"}
)


class InMemoryDelegate:
    def __init__(self, entity_name: str, table: dict[str, dict[str, Any]]):
        self.entity_name = entity_name
        self._table = table

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(UTC)
        record = copy.deepcopy(data)
        record["id"] = record.get("id") or str(uuid.uuid4())
        record["createdAt"] = now
        record["updatedAt"] = now
        self._table[record["id"]] = record
        return copy.deepcopy(record)

    async def find_first(self, where: Where) -> dict[str, Any] | None:
        for record in self._table.values():
            if matches(record, where):
                return copy.deepcopy(record)
        return None

    async def find_many(
        self,
        where: Where,
        order_by: OrderBy | None = None,
        skip: int = 0,
        take: int | None = None,
    ) -> list[dict[str, Any]]:
        records = [r for r in self._table.values() if matches(r, where)]
        for field_name, direction in reversed(list((order_by or {}).items())):
            records = _sorted(records, field_name, descending=direction == "desc")
        end = None if take is None else skip + take
        return [copy.deepcopy(r) for r in records[skip:end]]

    async def update(self, id: str, data: dict[str, Any]) -> dict[str, Any]:
        record = self._table.get(id)
        if record is None:
            raise RecordNotFoundError(self.entity_name, id)
        record.update(copy.deepcopy(data))
        record["updatedAt"] = datetime.now(UTC)
        return copy.deepcopy(record)

    async def count(self, where: Where) -> int:
        return sum(1 for r in self._table.values() if matches(r, where))


class InMemoryStorageClient:
    """Dict-backed StorageClient."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}

    def delegate(self, entity_name: str) -> InMemoryDelegate:
        key = entity_name.lower()
        return InMemoryDelegate(key, self._tables.setdefault(key, {}))

    def close(self) -> None:
        self._tables.clear()


# ---- where matching ----


def matches(record: dict[str, Any], where: Where) -> bool:
    """Evaluate a where clause against one record."""
    for key, condition in where.items():
        if key == "OR":
            if not any(matches(record, sub) for sub in condition):
                return False
        elif key == "AND":
            if not all(matches(record, sub) for sub in condition):
                return False
        elif key == "NOT":
            if matches(record, condition):
                return False
        elif not _match_value(record.get(key), condition):
            return False
    return True


def _match_value(value: Any, condition: Any) -> bool:
    if not (isinstance(condition, dict) and condition and set(condition) <= OPERATORS):
        return value == condition

    insensitive = condition.get("mode") == "insensitive"
    for op, operand in condition.items():
        if op == "mode":
            continue
        if op == "equals" and value != operand:
            return False
        if op == "not" and value == operand:
            return False
        if op == "in" and value not in operand:
            return False
        if op == "notIn" and value in operand:
            return False
        if op in ("contains", "startsWith"):
            if not isinstance(value, str):
                return False
            haystack, needle = (value.lower(), operand.lower()) if insensitive else (value, operand)
            found = needle in haystack if op == "contains" else haystack.startswith(needle)
            if not found:
                return False
        if op in ("gt", "gte", "lt", "lte"):
            if value is None or not _compare(value, op, operand):
                return False
    return True


def _compare(value: Any, op: str, operand: Any) -> bool:
    if op == "gt":
        return value > operand
    if op == "gte":
        return value >= operand
    if op == "lt":
        return value < operand
    return value <= operand


def _sorted(records: list[dict[str, Any]], field_name: str, descending: bool) -> list[dict]:
    present = [r for r in records if r.get(field_name) is not None]
    missing = [r for r in records if r.get(field_name) is None]
    present.sort(key=lambda r: r[field_name], reverse=descending)
    return present + missing
