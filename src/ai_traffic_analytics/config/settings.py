"""
Application settings and configuration management.

Supports loading from:
1. SOPS-encrypted YAML files (config.enc.yaml)
2. Environment variables (fallback)
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from .constants import (
    DEFAULT_INGEST_SOURCE,
    DEFAULT_INGEST_VISIT_TYPE,
    DEFAULT_SQLITE_DB_PATH,
    VISIT_TYPES,
)

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings for the tracking API and its SQLite backend."""

    # Storage Backend Settings
    storage_backend: str = "sqlite"
    sqlite_db_path: str = DEFAULT_SQLITE_DB_PATH

    # Ingestion defaults for fields the tracking payload may omit
    default_source: str = DEFAULT_INGEST_SOURCE
    default_visit_type: str = DEFAULT_INGEST_VISIT_TYPE

    # The tracking script runs on third-party domains
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])

    # Event emitter
    tracking_endpoint: str = "http://localhost:8000/api/track"
    emitter_timeout_seconds: float = 2.0

    # Optional YAML file replacing the built-in classification rules
    rules_path: Optional[str] = None

    log_level: str = "INFO"

    def validate(self) -> list[str]:
        """Validate settings values. Returns list of errors."""
        errors = []

        if self.storage_backend != "sqlite":
            errors.append("Only SQLite backend is supported in this version")

        if not self.sqlite_db_path:
            errors.append("storage.sqlite_db_path is required")

        if not self.default_source:
            errors.append("ingestion.default_source must not be empty")

        if self.default_visit_type not in VISIT_TYPES:
            errors.append(
                f"ingestion.default_visit_type must be one of "
                f"{sorted(VISIT_TYPES)}, got {self.default_visit_type!r}"
            )

        if self.emitter_timeout_seconds <= 0:
            errors.append(
                f"emitter.timeout_seconds must be > 0, "
                f"got {self.emitter_timeout_seconds}"
            )

        if self.rules_path and not Path(self.rules_path).exists():
            errors.append(f"classifier.rules_path not found: {self.rules_path}")

        return errors

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "Settings":
        """Create Settings from configuration dictionary (e.g., from SOPS)."""
        storage = config.get("storage", {})
        ingestion = config.get("ingestion", {})
        api = config.get("api", {})
        emitter = config.get("emitter", {})
        classifier = config.get("classifier", {})

        return cls(
            storage_backend=storage.get("backend", "sqlite"),
            sqlite_db_path=storage.get("sqlite_db_path", DEFAULT_SQLITE_DB_PATH),
            default_source=ingestion.get("default_source", DEFAULT_INGEST_SOURCE),
            default_visit_type=ingestion.get(
                "default_visit_type", DEFAULT_INGEST_VISIT_TYPE
            ),
            cors_allow_origins=api.get("cors_allow_origins", ["*"]),
            tracking_endpoint=emitter.get(
                "endpoint", "http://localhost:8000/api/track"
            ),
            emitter_timeout_seconds=float(emitter.get("timeout_seconds", 2.0)),
            rules_path=classifier.get("rules_path"),
            log_level=config.get("log_level", "INFO"),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""

        def safe_float(key: str, default: float) -> float:
            """Safely parse float from env var, using default on error."""
            try:
                return float(os.environ.get(key, str(default)))
            except ValueError:
                return default

        origins = os.environ.get("AI_TRAFFIC_CORS_ORIGINS", "*")

        return cls(
            storage_backend="sqlite",
            sqlite_db_path=os.environ.get("SQLITE_DB_PATH", DEFAULT_SQLITE_DB_PATH),
            default_source=os.environ.get(
                "AI_TRAFFIC_DEFAULT_SOURCE", DEFAULT_INGEST_SOURCE
            ),
            default_visit_type=os.environ.get(
                "AI_TRAFFIC_DEFAULT_VISIT_TYPE", DEFAULT_INGEST_VISIT_TYPE
            ),
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
            tracking_endpoint=os.environ.get(
                "AI_TRAFFIC_TRACKING_ENDPOINT", "http://localhost:8000/api/track"
            ),
            emitter_timeout_seconds=safe_float("AI_TRAFFIC_EMITTER_TIMEOUT", 2.0),
            rules_path=os.environ.get("AI_TRAFFIC_RULES_PATH") or None,
            log_level=os.environ.get("AI_TRAFFIC_LOG_LEVEL", "INFO"),
        )


# Default config file path
DEFAULT_CONFIG_PATH = Path("config.enc.yaml")


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Loads from SOPS-encrypted config file if available, otherwise from env vars.

    Args:
        config_path: Optional path to SOPS-encrypted config file

    Returns:
        Settings instance
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if path.exists():
        try:
            from .sops_loader import decrypt_sops_file

            config = decrypt_sops_file(path)
            return Settings.from_dict(config)
        except (RuntimeError, FileNotFoundError) as e:
            logger.warning(f"Failed to load SOPS config from {path}: {e}")
            logger.warning("Falling back to environment variables")

    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear the cached settings (useful for testing)."""
    get_settings.cache_clear()
