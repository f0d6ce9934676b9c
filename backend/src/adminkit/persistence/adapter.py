"""StorageClient Protocol: the CRUD capability consumed by generated services.

Records are plain dicts. Queries use a nested-object `where` convention:

    {"tenantId": "t1"}                                   equality (None matches null)
    {"OR": [{...}, {...}]}                               any sub-condition
    {"AND": [{...}, {...}]}                              all sub-conditions
    {"name": {"contains": "lamp", "mode": "insensitive"}}
    {"status": {"in": ["DRAFT", "ACTIVE"]}}
    {"id": {"not": "abc"}}
    {"price": {"gte": 10, "lte": 20}}                    also gt / lt / equals
"""

from typing import Any, Protocol, runtime_checkable

Where = dict[str, Any]
OrderBy = dict[str, str]


class RecordNotFoundError(LookupError):
    """update() was called with an id the store does not hold."""

    def __init__(self, entity_name: str, record_id: str):
        super().__init__(f"No {entity_name} record with id '{record_id}'")
        self.entity_name = entity_name
        self.record_id = record_id


@runtime_checkable
class EntityDelegate(Protocol):
    """Per-entity accessor returned by StorageClient.delegate()."""

    async def create(self, data: dict[str, Any]) -> dict[str, Any]: ...

    async def find_first(self, where: Where) -> dict[str, Any] | None: ...

    async def find_many(
        self,
        where: Where,
        order_by: OrderBy | None = None,
        skip: int = 0,
        take: int | None = None,
    ) -> list[dict[str, Any]]: ...

    async def update(self, id: str, data: dict[str, Any]) -> dict[str, Any]: ...

    async def count(self, where: Where) -> int: ...


@runtime_checkable
class StorageClient(Protocol):
    """Interface all storage backends must implement.

    Entity names are looked up lower-cased. The storage layer assigns
    id, createdAt and updatedAt.
    """

    def delegate(self, entity_name: str) -> EntityDelegate: ...

    def close(self) -> None: ...
