"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import Any, Optional, TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - Row lookup helpers shared by every table

    Subclasses set `table_name`, implement `_map_row` and add
    domain-specific data access methods.

    Example:
        class CardRepository(BaseRepository[Card]):
            table_name = "cards"

            def _map_row(self, data: dict[str, Any]) -> Card:
                return Card(**data)
    """

    table_name: str = ""

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _table(self):
        return self._db.table(self.table_name)

    def _map_row(self, data: dict[str, Any]) -> T:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[T]:
        """
        Get a single record by primary key.

        Returns:
            Mapped model, or None if not found.
        """
        result = self._table().select("*").eq("id", record_id).execute()
        if not result.data:
            return None
        return self._map_row(result.data[0])

    def find_one(self, column: str, value: Any) -> Optional[T]:
        """Get the first record where `column` equals `value`."""
        result = self._table().select("*").eq(column, value).limit(1).execute()
        if not result.data:
            return None
        return self._map_row(result.data[0])

    def insert(self, data: dict[str, Any]) -> T:
        """Insert a row and return the mapped result."""
        result = self._table().insert(data).execute()
        return self._map_row(result.data[0])

    def update(self, record_id: str, data: dict[str, Any]) -> Optional[T]:
        """Update a row by ID and return the mapped result."""
        result = self._table().update(data).eq("id", record_id).execute()
        if not result.data:
            return None
        return self._map_row(result.data[0])

    def delete(self, record_id: str) -> bool:
        """
        Delete a row by ID.

        Returns:
            True if deletion was executed.
        """
        self._table().delete().eq("id", record_id).execute()
        return True
