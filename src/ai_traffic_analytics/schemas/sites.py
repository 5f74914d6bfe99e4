"""
User and website schemas.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..config.constants import TABLE_USERS, TABLE_WEBSITES

USERS_COLUMNS = {
    "id": "TEXT PRIMARY KEY",
    "email": "TEXT NOT NULL",
    "created_at": "TEXT NOT NULL",
}

WEBSITES_COLUMNS = {
    "id": "TEXT PRIMARY KEY",
    "user_id": "TEXT NOT NULL REFERENCES users(id)",
    "domain": "TEXT NOT NULL",
    "name": "TEXT",
    "created_at": "TEXT NOT NULL",
}

WEBSITES_INDEXES = [
    f"CREATE INDEX IF NOT EXISTS idx_websites_user ON {TABLE_WEBSITES}(user_id)",
]


def _create_table_sql(table: str, columns: dict[str, str]) -> str:
    body = ",\n    ".join(f"{name} {dtype}" for name, dtype in columns.items())
    return f"CREATE TABLE IF NOT EXISTS {table} (\n    {body}\n)"


def get_create_users_sql() -> str:
    """Get SQL to create the users table."""
    return _create_table_sql(TABLE_USERS, USERS_COLUMNS)


def get_create_websites_sql() -> str:
    """Get SQL to create the websites table."""
    return _create_table_sql(TABLE_WEBSITES, WEBSITES_COLUMNS)


@dataclass(frozen=True)
class Site:
    """A registered website owned by one user."""

    id: str
    owner_id: str
    domain: str
    created_at: datetime
    name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Wire/row representation."""
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "domain": self.domain,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Site":
        """Create from a websites row."""
        return cls(
            id=row["id"],
            owner_id=row["user_id"],
            domain=row["domain"],
            name=row.get("name"),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


@dataclass(frozen=True)
class User:
    """Owner of tracked sites, mirrored from the identity provider."""

    id: str
    email: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        """Create from a users row."""
        return cls(
            id=row["id"],
            email=row["email"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
