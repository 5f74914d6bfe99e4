"""
Storage abstraction layer for AI traffic analytics.

Usage:
    from ai_traffic_analytics.storage import get_backend

    with get_backend('sqlite', db_path='data/ai-traffic.db') as backend:
        backend.initialize()
        rows = backend.fetch_visit_events(site_id, start)
"""

from .base import (
    QueryError,
    SchemaError,
    StorageBackend,
    StorageConnectionError,
    StorageError,
)
from .factory import (
    get_backend,
    is_backend_available,
    list_available_backends,
    register_backend,
)
from .sqlite_backend import SQLiteBackend

__all__ = [
    # Base classes and exceptions
    "StorageBackend",
    "StorageError",
    "StorageConnectionError",
    "QueryError",
    "SchemaError",
    # Implementations
    "SQLiteBackend",
    # Factory functions
    "get_backend",
    "register_backend",
    "list_available_backends",
    "is_backend_available",
]
