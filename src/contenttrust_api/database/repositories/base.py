"""Base repository class for the Content Trust API."""

from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Generic
from typing import TypeVar
from uuid import UUID

from asyncpg import Record

from contenttrust_api.database.connection import get_db_connection

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Base repository class with common database operations."""

    def __init__(self, table_name: str):
        self.table_name = table_name

    @abstractmethod
    def _record_to_model(self, record: Record) -> T:
        """Convert database record to model instance."""

    async def get_by_pk(self, pk: UUID) -> T | None:
        """Get a record by primary key."""
        query = f"SELECT * FROM {self.table_name} WHERE pk = $1"  # nosec B608

        async with get_db_connection() as connection:
            record = await connection.fetchrow(query, pk)
            return self._record_to_model(record) if record else None

    async def exists(self, pk: UUID) -> bool:
        """Check if a record exists by primary key."""
        query = f"SELECT EXISTS(SELECT 1 FROM {self.table_name} WHERE pk = $1)"  # nosec B608

        async with get_db_connection() as connection:
            result = await connection.fetchval(query, pk)
            return bool(result)

    async def create_from_dict(self, data: dict[str, Any]) -> T:
        """Create a new record."""
        columns = list(data.keys())
        placeholders = [f"${i + 1}" for i in range(len(columns))]
        values = list(data.values())

        query = f"""
            INSERT INTO {self.table_name} ({", ".join(columns)})
            VALUES ({", ".join(placeholders)})
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as connection:
            record = await connection.fetchrow(query, *values)
            if record is None:
                raise ValueError(f"Failed to create record in {self.table_name}")
            return self._record_to_model(record)

    async def update_from_dict(self, pk: UUID, data: dict[str, Any]) -> T | None:
        """Update a record by primary key."""
        if not data:
            return await self.get_by_pk(pk)

        set_clauses = ["updated_at = NOW()"]
        values = []
        param_count = 1

        for column, value in data.items():
            set_clauses.append(f"{column} = ${param_count}")
            values.append(value)
            param_count += 1

        values.append(pk)

        query = f"""
            UPDATE {self.table_name}
            SET {", ".join(set_clauses)}
            WHERE pk = ${param_count}
            RETURNING *
        """  # nosec B608

        async with get_db_connection() as connection:
            record = await connection.fetchrow(query, *values)
            return self._record_to_model(record) if record else None

    async def find_by(self, **kwargs) -> list[T]:
        """Find records by field values."""
        conditions = []
        values = []

        for param_count, (field, value) in enumerate(kwargs.items(), start=1):
            conditions.append(f"{field} = ${param_count}")
            values.append(value)

        query = f"SELECT * FROM {self.table_name}"  # nosec B608
        if conditions:
            query += f" WHERE {' AND '.join(conditions)}"
        query += " ORDER BY created_at DESC"

        async with get_db_connection() as connection:
            records = await connection.fetch(query, *values)
            return [self._record_to_model(record) for record in records]
