"""
FastAPI dependencies.

The storage backend and settings are created once by `create_app` and
live on `app.state`; services are built per request around them.
"""

from fastapi import Depends, Request

from ..config.settings import Settings
from ..ingestion.service import TrackingIngestionService
from ..registry.sites import SiteRegistry
from ..reporting.dashboard import TrafficDashboard
from ..storage.base import StorageBackend


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.backend


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ingestion_service(
    backend: StorageBackend = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> TrackingIngestionService:
    return TrackingIngestionService(backend, settings)


def get_registry(backend: StorageBackend = Depends(get_storage)) -> SiteRegistry:
    return SiteRegistry(backend)


def get_dashboard(backend: StorageBackend = Depends(get_storage)) -> TrafficDashboard:
    return TrafficDashboard(backend)
