"""
Storage backend factory.

Backends register under a type name and are loaded lazily, so a hosted
database backend can be added without touching callers.
"""

import logging
from pathlib import Path
from typing import Optional

from .base import StorageBackend, StorageError

logger = logging.getLogger(__name__)

# Registry of available backends
_BACKEND_REGISTRY: dict[str, type[StorageBackend]] = {}

_KNOWN_BACKENDS = ["sqlite"]


def register_backend(backend_type: str, backend_class: type[StorageBackend]) -> None:
    """
    Register a storage backend class.

    Args:
        backend_type: Backend identifier (e.g., 'sqlite')
        backend_class: Class implementing StorageBackend interface
    """
    _BACKEND_REGISTRY[backend_type.lower()] = backend_class
    logger.debug(f"Registered storage backend: {backend_type}")


def get_backend(
    backend_type: Optional[str] = None,
    **kwargs,
) -> StorageBackend:
    """
    Get a storage backend instance based on configuration.

    Args:
        backend_type: Backend type ('sqlite'). If None, loads from settings.
        **kwargs: Arguments passed to the backend constructor.
                  For SQLite: db_path

    Returns:
        StorageBackend instance (call initialize() before first use).

    Raises:
        StorageError: If backend type is not supported or construction fails.

    Examples:
        backend = get_backend()
        backend = get_backend('sqlite', db_path='data/ai-traffic.db')
    """
    if backend_type is None:
        from ..config.settings import get_settings

        backend_type = get_settings().storage_backend

    backend_type = backend_type.lower()

    if backend_type not in _BACKEND_REGISTRY:
        _load_backend(backend_type)

    if backend_type not in _BACKEND_REGISTRY:
        available = list(_BACKEND_REGISTRY.keys()) if _BACKEND_REGISTRY else ["none"]
        raise StorageError(
            f"Unknown storage backend: '{backend_type}'. "
            f"Available backends: {', '.join(available)}"
        )

    backend_class = _BACKEND_REGISTRY[backend_type]

    if not kwargs:
        kwargs = _get_default_kwargs(backend_type)

    try:
        backend = backend_class(**kwargs)
    except (OSError, TypeError, ValueError) as e:
        raise StorageError(f"Failed to create {backend_type} backend: {e}") from e

    logger.info(f"Created {backend_type} storage backend")
    return backend


def _load_backend(backend_type: str) -> None:
    """Lazy-load a backend implementation."""
    if backend_type == "sqlite":
        from .sqlite_backend import SQLiteBackend

        register_backend("sqlite", SQLiteBackend)


def _get_default_kwargs(backend_type: str) -> dict:
    """Get default constructor arguments from settings."""
    from ..config.settings import get_settings

    settings = get_settings()

    if backend_type == "sqlite":
        return {"db_path": Path(settings.sqlite_db_path)}
    return {}


def list_available_backends() -> list[str]:
    """List all registered backend types."""
    for backend_type in _KNOWN_BACKENDS:
        if backend_type not in _BACKEND_REGISTRY:
            _load_backend(backend_type)

    return list(_BACKEND_REGISTRY.keys())


def is_backend_available(backend_type: str) -> bool:
    """Check if a specific backend can be loaded."""
    backend_type = backend_type.lower()

    if backend_type not in _BACKEND_REGISTRY:
        _load_backend(backend_type)

    return backend_type in _BACKEND_REGISTRY
