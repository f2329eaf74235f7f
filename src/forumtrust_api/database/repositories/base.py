"""Base repository class for the forum trust layer."""

from abc import ABC
from abc import abstractmethod
from typing import Any

from asyncpg import Connection
from asyncpg import Record

from forumtrust_api.database.connection import Database


class BaseRepository[T](ABC):
    """Base repository class with common database operations.

    Write methods take an optional ``connection`` so callers can group them
    into a single transaction.
    """

    def __init__(self, db: Database, table_name: str, key_column: str = "pk"):
        self.db = db
        self.table_name = table_name
        self.key_column = key_column

    @abstractmethod
    def _record_to_model(self, record: Record) -> T:
        """Convert database record to model instance."""

    async def get(self, key: Any, connection: Connection | None = None) -> T | None:
        """Get a record by its key column."""
        query = f"SELECT * FROM {self.table_name} WHERE {self.key_column} = $1"  # nosec B608

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(query, key)
            return self._record_to_model(record) if record else None

    async def create_from_dict(
        self, data: dict[str, Any], connection: Connection | None = None
    ) -> T:
        """Create a new record."""
        columns = list(data.keys())
        placeholders = [f"${i + 1}" for i in range(len(columns))]
        values = list(data.values())

        query = f"""
            INSERT INTO {self.table_name} ({", ".join(columns)})
            VALUES ({", ".join(placeholders)})
            RETURNING *
        """  # nosec B608

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(query, *values)
            if record is None:
                raise ValueError(f"Failed to create record in {self.table_name}")
            return self._record_to_model(record)
