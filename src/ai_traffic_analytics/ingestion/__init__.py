"""
Tracking event ingestion.

Usage:
    from ai_traffic_analytics.ingestion import TrackingIngestionService

    service = TrackingIngestionService(backend)
    event = service.ingest({"websiteId": site_id, "pagePath": "/pricing"})
"""

from .exceptions import IngestionError, NotFoundError, ValidationError
from .schema import TrackEventPayload, parse_timestamp, parse_track_payload
from .service import TrackingIngestionService

__all__ = [
    # Exceptions
    "IngestionError",
    "ValidationError",
    "NotFoundError",
    # Wire format
    "TrackEventPayload",
    "parse_track_payload",
    "parse_timestamp",
    # Service
    "TrackingIngestionService",
]
