"""Persistence layer - storage clients consumed by generated services."""

from adminkit.persistence.adapter import (
    EntityDelegate,
    RecordNotFoundError,
    StorageClient,
)
from adminkit.persistence.config import DatabaseConfig, create_client
from adminkit.persistence.memory import InMemoryStorageClient

__all__ = [
    "DatabaseConfig",
    "EntityDelegate",
    "InMemoryStorageClient",
    "RecordNotFoundError",
    "StorageClient",
    "create_client",
]
