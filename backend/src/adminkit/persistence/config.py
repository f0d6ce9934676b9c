"""Resolve the storage URL from the environment and open the matching client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adminkit.metadata.types import EntityDefinition
    from adminkit.persistence.adapter import StorageClient


@dataclass
class DatabaseConfig:
    """Where records live, as a single URL.

    memory:// keeps everything in process; sqlite and postgresql URLs go
    through SQLAlchemy.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Pick the storage URL, first match wins:

        - DATABASE_URL, used verbatim
        - ADMINKIT_DB_PATH, a SQLite file path
        - data/adminkit.db under base_path, when one is given
        - adminkit.db in the working directory
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("ADMINKIT_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")

        if base_path:
            return cls(url=f"sqlite:///{base_path / 'data' / 'adminkit.db'}")

        return cls(url="sqlite:///adminkit.db")

    @property
    def is_memory(self) -> bool:
        return self.url.startswith("memory://")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.url.startswith("postgresql")

    @property
    def sqlalchemy_url(self) -> str:
        """The URL handed to create_engine; bare postgresql:// selects psycopg 3."""
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        return self.url


def create_client(
    config: DatabaseConfig, entities: list[EntityDefinition]
) -> StorageClient:
    """Open the storage backend named by the URL scheme.

    SQL backends get one table per entity definition, created on open.
    A SQLite file path has its parent directory created first.

    Raises:
        ValueError: If the scheme is not memory, sqlite or postgresql
    """
    if config.is_memory:
        from adminkit.persistence.memory import InMemoryStorageClient

        return InMemoryStorageClient()

    if config.is_sqlite or config.is_postgresql:
        from adminkit.persistence.sql import SQLAlchemyStorageClient

        if config.is_sqlite:
            db_path = config.url.replace("sqlite:///", "", 1)
            if db_path and db_path != ":memory:" and db_path != config.url:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return SQLAlchemyStorageClient(config.sqlalchemy_url, entities)

    raise ValueError(f"Unsupported database URL scheme: {config.url}")
