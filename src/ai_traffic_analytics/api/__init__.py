"""HTTP API for tracking ingestion, website management and dashboards."""

from .app import create_app

__all__ = ["create_app"]
