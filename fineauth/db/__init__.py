"""
Database module - Storage contract and backends.

Backends are chosen by explicit configuration through create_storage().
Drivers for optional backends are imported only when selected.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from fineauth.core.errors import ConfigurationError
from fineauth.db.base import StorageAdapter
from fineauth.db.memory import MemoryStorage


class StorageType(Enum):
    """Supported storage backends."""
    MEMORY = "memory"
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MONGODB = "mongodb"


def create_storage(kind: StorageType | str, client: Optional[Any] = None) -> StorageAdapter:
    """
    Build a storage backend.

    Args:
        kind: Backend type (StorageType or its string value)
        client: Backend handle: database path (SQLITE), psycopg2
            connection (POSTGRESQL) or pymongo Database (MONGODB)

    Returns:
        Unprepared StorageAdapter; call prepare() before use

    Raises:
        ConfigurationError: Unknown kind or missing client
    """
    try:
        kind = StorageType(kind)
    except ValueError as e:
        raise ConfigurationError(f"Unknown storage type: {kind!r}") from e

    if kind is StorageType.MEMORY:
        return MemoryStorage()

    if client is None:
        raise ConfigurationError(f"Storage type {kind.value!r} requires a client")

    if kind is StorageType.SQLITE:
        from fineauth.db.sqlite import SQLiteStorage
        return SQLiteStorage(Path(client))

    if kind is StorageType.POSTGRESQL:
        from fineauth.db.postgresql import PostgreSQLStorage
        return PostgreSQLStorage(client)

    from fineauth.db.mongodb import MongoStorage
    return MongoStorage(client)


__all__ = [
    "StorageAdapter",
    "StorageType",
    "MemoryStorage",
    "create_storage",
]
