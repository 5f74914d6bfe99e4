"""
Abstract base class for storage backends.

Provides a unified interface for the users, websites and ai_traffic tables
so a hosted database can be swapped in for the local SQLite file.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage implementations must implement this interface to ensure
    consistent behavior across backends.
    """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Return the backend type identifier (e.g., 'sqlite')."""
        pass

    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the storage backend.

        Creates tables and indexes if they don't exist.
        Should be idempotent - safe to call multiple times.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close connections and release resources."""
        pass

    # =========================================================================
    # Users and websites
    # =========================================================================

    @abstractmethod
    def upsert_user(self, user_id: str, email: str) -> None:
        """
        Insert a user, or refresh the email of an existing one.

        Raises:
            StorageError: If the write fails.
        """
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[dict]:
        """Return the users row for `user_id`, or None."""
        pass

    @abstractmethod
    def insert_website(self, record: dict) -> dict:
        """
        Insert a websites row.

        Args:
            record: Row with id, user_id, domain, name and created_at

        Returns:
            The stored row.

        Raises:
            StorageError: If insertion fails.
        """
        pass

    @abstractmethod
    def get_website(self, website_id: str) -> Optional[dict]:
        """Return the websites row for `website_id`, or None."""
        pass

    @abstractmethod
    def list_websites(self, user_id: str) -> list[dict]:
        """Return all websites rows owned by `user_id` in creation order."""
        pass

    @abstractmethod
    def update_website_name(self, website_id: str, name: Optional[str]) -> int:
        """
        Change the display name of a website.

        Returns:
            Number of rows updated (0 when the website does not exist).
        """
        pass

    # =========================================================================
    # Visit events
    # =========================================================================

    @abstractmethod
    def insert_visit_event(self, record: dict) -> int:
        """
        Append one visit event to the ai_traffic table.

        Args:
            record: Row produced by `VisitEvent.to_record()`

        Returns:
            The id of the new row.

        Raises:
            StorageError: If insertion fails.
        """
        pass

    @abstractmethod
    def fetch_visit_events(
        self,
        website_id: str,
        start: datetime,
        end: Optional[datetime] = None,
    ) -> list[dict]:
        """
        Fetch the visit events of one website observed at or after `start`.

        Args:
            website_id: Website to read
            start: Inclusive lower bound on the event timestamp
            end: Optional exclusive upper bound

        Returns:
            Rows ordered by timestamp ascending (ties by id).

        Raises:
            StorageError: If the query fails.
        """
        pass

    # =========================================================================
    # Generic access
    # =========================================================================

    @abstractmethod
    def query(
        self,
        sql: str,
        params: Optional[dict] = None,
    ) -> list[dict]:
        """
        Execute a query and return results as a list of dictionaries.

        Raises:
            StorageError: If query execution fails.
        """
        pass

    @abstractmethod
    def execute(
        self,
        sql: str,
        params: Optional[dict] = None,
    ) -> int:
        """
        Execute a statement (INSERT, UPDATE, DELETE, DDL).

        Returns:
            Number of affected rows (0 for DDL statements).

        Raises:
            StorageError: If execution fails.
        """
        pass

    @abstractmethod
    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists in the storage backend."""
        pass

    @abstractmethod
    def get_table_row_count(self, table_name: str) -> int:
        """
        Get the total row count for a table.

        Raises:
            StorageError: If table doesn't exist or query fails.
        """
        pass

    def health_check(self) -> dict:
        """
        Perform a health check on the storage backend.

        Returns:
            Dictionary with health status information:
            {
                "healthy": bool,
                "backend_type": str,
                "message": str,
                "details": dict
            }
        """
        try:
            self.query("SELECT 1 as test")
            return {
                "healthy": True,
                "backend_type": self.backend_type,
                "message": "Backend is operational",
                "details": {},
            }
        except StorageError as e:
            return {
                "healthy": False,
                "backend_type": self.backend_type,
                "message": f"Health check failed: {e}",
                "details": {"error": str(e)},
            }

    def __enter__(self) -> "StorageBackend":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - ensures resources are released."""
        self.close()


class StorageError(Exception):
    """Base exception for storage backend errors."""

    pass


class StorageConnectionError(StorageError):
    """Raised when connection to storage backend fails."""

    pass


class QueryError(StorageError):
    """Raised when a query fails to execute."""

    pass


class SchemaError(StorageError):
    """Raised when there's a schema-related error."""

    pass
