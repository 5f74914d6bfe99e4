"""
Tracking ingestion service.

Validates a raw event, checks the website is registered and appends one row
to the ai_traffic table. Storage errors propagate unchanged; no retries.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from ..config.settings import Settings, get_settings
from ..schemas.events import VisitEvent
from ..storage.base import StorageBackend
from .exceptions import NotFoundError
from .schema import parse_track_payload

logger = logging.getLogger(__name__)


class TrackingIngestionService:
    """Persists tracking events sent by the snippet or the Python emitter."""

    def __init__(
        self,
        backend: StorageBackend,
        settings: Optional[Settings] = None,
    ):
        self.backend = backend
        self.settings = settings or get_settings()

    def ingest(self, raw: Any, now: Optional[datetime] = None) -> VisitEvent:
        """
        Validate and store one tracking event.

        Args:
            raw: Decoded JSON body
            now: Server time used when the event carries no timestamp

        Returns:
            The stored VisitEvent, including its row id

        Raises:
            ValidationError: Payload is malformed (nothing stored)
            NotFoundError: websiteId is not a registered website (nothing stored)
            StorageError: The lookup or insert failed
        """
        payload = parse_track_payload(raw)

        if self.backend.get_website(payload.website_id) is None:
            logger.warning(f"Rejected event for unknown website: {payload.website_id}")
            raise NotFoundError("Website", payload.website_id)

        event = payload.to_visit_event(
            default_source=self.settings.default_source,
            default_visit_type=self.settings.default_visit_type,
            now=now,
        )
        row_id = self.backend.insert_visit_event(event.to_record())

        logger.debug(
            f"Recorded {event.visit_type} visit from {event.source} "
            f"on {event.page_path}",
            extra={
                "site_id": event.site_id,
                "source": event.source,
                "visit_type": event.visit_type,
            },
        )
        return replace(event, id=row_id)
