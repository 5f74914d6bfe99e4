"""
SQLite storage backend implementation.

Local file (or in-memory) storage for users, websites and AI traffic
events, used for development, tests and single-host deployments.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..config.constants import (
    DEFAULT_SQLITE_DB_PATH,
    TABLE_AI_TRAFFIC,
    TABLE_USERS,
    TABLE_WEBSITES,
)
from ..schemas.events import (
    AI_TRAFFIC_INDEXES,
    get_create_ai_traffic_sql,
    to_utc_timestamp,
)
from ..schemas.sites import (
    WEBSITES_INDEXES,
    get_create_users_sql,
    get_create_websites_sql,
)
from .base import QueryError, SchemaError, StorageBackend, StorageConnectionError

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"

# Valid table names in our schema
VALID_TABLES = frozenset([TABLE_USERS, TABLE_WEBSITES, TABLE_AI_TRAFFIC])

INSERT_VISIT_EVENT_SQL = f"""
    INSERT INTO {TABLE_AI_TRAFFIC} (
        website_id, source, visit_type, page_path, referrer, user_agent,
        language, screen_width, screen_height, timestamp, _ingested_at
    ) VALUES (
        :website_id, :source, :visit_type, :page_path, :referrer, :user_agent,
        :language, :screen_width, :screen_height, :timestamp, :_ingested_at
    )
"""


def _validate_identifier(value: str, valid_set: frozenset, name: str) -> str:
    """
    Validate an identifier against a whitelist to prevent SQL injection.

    Raises:
        SchemaError: If identifier is not in the valid set
    """
    if value not in valid_set:
        raise SchemaError(
            f"Invalid {name}: '{value}'. Must be one of: {sorted(valid_set)}"
        )
    return value


class SQLiteBackend(StorageBackend):
    """
    SQLite storage backend.

    The connection is opened lazily and shared, with check_same_thread off so
    the API worker threads can use one backend instance. A re-entrant lock
    serializes every transaction on it.
    """

    def __init__(
        self,
        db_path: Path | str = DEFAULT_SQLITE_DB_PATH,
        *,
        check_same_thread: bool = False,
        timeout: float = 30.0,
    ):
        """
        Initialize SQLite backend.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
            check_same_thread: SQLite check_same_thread parameter
            timeout: Connection timeout in seconds
        """
        self._in_memory = str(db_path) == IN_MEMORY
        self.db_path = Path(db_path)
        self._check_same_thread = check_same_thread
        self._timeout = timeout
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

        if not self._in_memory:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def backend_type(self) -> str:
        """Return backend type identifier."""
        return "sqlite"

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection. Caller holds the lock."""
        if self._connection is None:
            target = IN_MEMORY if self._in_memory else str(self.db_path)
            try:
                self._connection = sqlite3.connect(
                    target,
                    check_same_thread=self._check_same_thread,
                    timeout=self._timeout,
                )
                self._connection.row_factory = sqlite3.Row
                self._connection.execute("PRAGMA foreign_keys = ON")
                logger.debug(f"Connected to SQLite database: {target}")
            except sqlite3.Error as e:
                raise StorageConnectionError(
                    f"Failed to connect to SQLite database: {e}"
                ) from e
        return self._connection

    @contextmanager
    def _cursor(self):
        """Context manager for database cursor with automatic commit/rollback."""
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise QueryError(f"SQLite query failed: {e}") from e
            finally:
                cursor.close()

    def initialize(self) -> None:
        """
        Initialize database with all required tables and indexes.

        Safe to call multiple times - uses IF NOT EXISTS.
        """
        logger.info(f"Initializing SQLite database: {self.db_path}")

        with self._cursor() as cursor:
            cursor.execute(get_create_users_sql())
            cursor.execute(get_create_websites_sql())
            cursor.execute(get_create_ai_traffic_sql())

            for index_sql in WEBSITES_INDEXES + AI_TRAFFIC_INDEXES:
                cursor.execute(index_sql)

        logger.info("SQLite database initialized successfully")

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                logger.debug("SQLite connection closed")

    # =========================================================================
    # Users and websites
    # =========================================================================

    def upsert_user(self, user_id: str, email: str) -> None:
        """Insert a user or update its email."""
        sql = f"""
            INSERT INTO {TABLE_USERS} (id, email, created_at)
            VALUES (:id, :email, :created_at)
            ON CONFLICT(id) DO UPDATE SET email = excluded.email
        """
        self.execute(
            sql,
            {
                "id": user_id,
                "email": email,
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
        )

    def get_user(self, user_id: str) -> Optional[dict]:
        """Return a users row or None."""
        rows = self.query(
            f"SELECT id, email, created_at FROM {TABLE_USERS} WHERE id = :id",
            {"id": user_id},
        )
        return rows[0] if rows else None

    def insert_website(self, record: dict) -> dict:
        """Insert a websites row and return it as stored."""
        sql = f"""
            INSERT INTO {TABLE_WEBSITES} (id, user_id, domain, name, created_at)
            VALUES (:id, :user_id, :domain, :name, :created_at)
        """
        self.execute(sql, record)
        stored = self.get_website(record["id"])
        if stored is None:
            raise QueryError(f"Website '{record['id']}' missing after insert")
        return stored

    def get_website(self, website_id: str) -> Optional[dict]:
        """Return a websites row or None."""
        rows = self.query(
            f"""
            SELECT id, user_id, domain, name, created_at
            FROM {TABLE_WEBSITES}
            WHERE id = :id
            """,
            {"id": website_id},
        )
        return rows[0] if rows else None

    def list_websites(self, user_id: str) -> list[dict]:
        """Return the websites owned by a user, oldest first."""
        return self.query(
            f"""
            SELECT id, user_id, domain, name, created_at
            FROM {TABLE_WEBSITES}
            WHERE user_id = :user_id
            ORDER BY created_at ASC, rowid ASC
            """,
            {"user_id": user_id},
        )

    def update_website_name(self, website_id: str, name: Optional[str]) -> int:
        """Rename a website; returns the number of rows touched."""
        return self.execute(
            f"UPDATE {TABLE_WEBSITES} SET name = :name WHERE id = :id",
            {"id": website_id, "name": name},
        )

    # =========================================================================
    # Visit events
    # =========================================================================

    def insert_visit_event(self, record: dict) -> int:
        """Append one ai_traffic row and return its id."""
        row = dict(record)
        row.setdefault("_ingested_at", to_utc_timestamp(datetime.now(timezone.utc)))

        with self._cursor() as cursor:
            cursor.execute(INSERT_VISIT_EVENT_SQL, row)
            return cursor.lastrowid

    def insert_visit_events(self, records: list[dict]) -> int:
        """
        Bulk insert ai_traffic rows.

        Returns:
            Number of records inserted
        """
        if not records:
            return 0

        now = to_utc_timestamp(datetime.now(timezone.utc))
        rows = [{"_ingested_at": now, **record} for record in records]

        with self._cursor() as cursor:
            cursor.executemany(INSERT_VISIT_EVENT_SQL, rows)
            # executemany may not set rowcount correctly; use len instead
            return len(rows)

    def fetch_visit_events(
        self,
        website_id: str,
        start: datetime,
        end: Optional[datetime] = None,
    ) -> list[dict]:
        """Fetch a website's events in [start, end), oldest first."""
        sql = f"""
            SELECT id, website_id, source, visit_type, page_path, referrer,
                   user_agent, language, screen_width, screen_height, timestamp
            FROM {TABLE_AI_TRAFFIC}
            WHERE website_id = :website_id
              AND timestamp >= :start
        """
        params = {"website_id": website_id, "start": to_utc_timestamp(start)}

        if end is not None:
            sql += "  AND timestamp < :end\n"
            params["end"] = to_utc_timestamp(end)

        sql += "ORDER BY timestamp ASC, id ASC"
        return self.query(sql, params)

    # =========================================================================
    # Generic access
    # =========================================================================

    def query(
        self,
        sql: str,
        params: Optional[dict] = None,
    ) -> list[dict]:
        """
        Execute query and return results as list of dictionaries.

        Args:
            sql: SQL query (use :param_name for parameters)
            params: Optional parameter dictionary
        """
        with self._cursor() as cursor:
            cursor.execute(sql, params or {})
            columns = [desc[0] for desc in cursor.description or []]
            rows = cursor.fetchall()
            return [dict(zip(columns, row)) for row in rows]

    def execute(
        self,
        sql: str,
        params: Optional[dict] = None,
    ) -> int:
        """Execute statement (INSERT, UPDATE, DELETE, DDL)."""
        with self._cursor() as cursor:
            cursor.execute(sql, params or {})
            return cursor.rowcount

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists."""
        sql = """
            SELECT name FROM sqlite_master
            WHERE type='table' AND name=:table_name
        """
        result = self.query(sql, {"table_name": table_name})
        return len(result) > 0

    def get_table_row_count(self, table_name: str) -> int:
        """Get total row count for a table."""
        _validate_identifier(table_name, VALID_TABLES, "table name")
        if not self.table_exists(table_name):
            raise SchemaError(f"Table '{table_name}' does not exist")

        result = self.query(f"SELECT COUNT(*) as count FROM {table_name}")
        return result[0]["count"] if result else 0

    def health_check(self) -> dict:
        """Extended health check with SQLite-specific info."""
        base_check = super().health_check()

        if base_check["healthy"]:
            db_size = (
                self.db_path.stat().st_size
                if not self._in_memory and self.db_path.exists()
                else 0
            )
            tables = self.query(
                "SELECT COUNT(*) as count FROM sqlite_master WHERE type='table'"
            )
            base_check["details"] = {
                "db_path": IN_MEMORY if self._in_memory else str(self.db_path),
                "db_size_bytes": db_size,
                "table_count": tables[0]["count"] if tables else 0,
            }

        return base_check
