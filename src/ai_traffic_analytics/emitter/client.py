"""
Tracking event emitter.

Python counterpart of the browser snippet: classifies a page load, builds
the tracking payload and posts it once to the ingestion endpoint. Delivery
failures are logged and swallowed so tracking never breaks the host page.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

import httpx

from ..classifier.engine import TrafficClassification, classify_visit
from ..classifier.rules import RuleSet, load_rule_set
from ..config.constants import VISIT_TYPE_DIRECT, VISIT_TYPE_STANDARD
from ..config.settings import Settings, get_settings
from ..utils.url_utils import page_path_from_url, parse_query_string

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 2.0

# Visit types dropped when the emitter only reports AI traffic
NON_AI_VISIT_TYPES = frozenset([VISIT_TYPE_DIRECT, VISIT_TYPE_STANDARD])


class EmitterConfigError(ValueError):
    """Raised when the emitter is constructed without a website id."""

    pass


class DeliveryError(Exception):
    """
    Raised internally when an event could not be delivered.

    Attributes:
        status_code: HTTP status of the rejected request, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class PageContext:
    """Browsing context of one page load."""

    page_url: Optional[str] = None
    page_path: Optional[str] = None
    referrer: str = ""
    user_agent: str = ""
    language: Optional[str] = None
    screen_width: Optional[int] = None
    screen_height: Optional[int] = None
    query_params: Optional[Mapping[str, str]] = None

    def resolved_page_path(self) -> str:
        if self.page_path:
            return self.page_path
        if self.page_url:
            return page_path_from_url(self.page_url)
        return "/"

    def resolved_query_params(self) -> dict[str, str]:
        if self.query_params is not None:
            return dict(self.query_params)
        if self.page_url:
            return parse_query_string(urlsplit(self.page_url).query)
        return {}


def build_payload(
    website_id: str,
    context: PageContext,
    classification: TrafficClassification,
    timestamp: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Wire payload for POST /api/track.

    Optional fields that are absent are left out rather than sent as null.
    """
    payload: dict[str, Any] = {
        "websiteId": website_id,
        "source": classification.source,
        "type": classification.visit_type,
        "pagePath": context.resolved_page_path(),
        "referrer": context.referrer or "",
        "userAgent": context.user_agent or "",
    }

    optional = {
        "language": context.language,
        "screenWidth": context.screen_width,
        "screenHeight": context.screen_height,
        "timestamp": timestamp.isoformat() if timestamp else None,
    }
    payload.update({key: value for key, value in optional.items() if value is not None})
    return payload


class TrackingEmitter:
    """
    Sends visit events for one website.

    Usage:
        with TrackingEmitter("site-id", "https://example.com/api/track") as emitter:
            emitter.track_page_load(PageContext(page_url=url, referrer=ref, user_agent=ua))
            emitter.notify_navigation("/pricing")
    """

    def __init__(
        self,
        website_id: Optional[str],
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        ai_only: bool = False,
        client: Optional[httpx.Client] = None,
        rules: Optional[RuleSet] = None,
    ):
        """
        Args:
            website_id: Registered website id (required)
            endpoint: URL of the tracking endpoint
            timeout: Per-request timeout in seconds
            ai_only: Skip events classified as direct or standard traffic
            client: Shared httpx client; one is created when omitted
            rules: Classification rules (defaults to the built-in tables)

        Raises:
            EmitterConfigError: website_id is missing or blank
        """
        if not website_id or not website_id.strip():
            raise EmitterConfigError("AI Traffic Analytics: No website ID provided")

        self.website_id = website_id.strip()
        self.endpoint = endpoint
        self.timeout = timeout
        self.ai_only = ai_only
        self.rules = rules

        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = httpx.Client(timeout=timeout)
            self._owns_client = True

        self._last_context: Optional[PageContext] = None
        self._last_classification: Optional[TrafficClassification] = None

    @classmethod
    def from_settings(
        cls,
        website_id: Optional[str],
        settings: Optional[Settings] = None,
        **kwargs,
    ) -> "TrackingEmitter":
        """Build an emitter from the configured endpoint, timeout and rules."""
        settings = settings or get_settings()
        return cls(
            website_id,
            settings.tracking_endpoint,
            timeout=settings.emitter_timeout_seconds,
            rules=load_rule_set(settings.rules_path),
            **kwargs,
        )

    def close(self) -> None:
        """Close the HTTP client if this emitter created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TrackingEmitter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def classify(self, context: PageContext) -> TrafficClassification:
        return classify_visit(
            context.referrer,
            context.user_agent,
            context.resolved_query_params(),
            rules=self.rules,
        )

    def track_page_load(self, context: PageContext) -> bool:
        """
        Classify a page load and send one event.

        Returns:
            True if the endpoint accepted the event
        """
        classification = self.classify(context)
        self._last_context = context
        self._last_classification = classification
        return self._send(context, classification)

    def notify_navigation(self, page_path: str) -> bool:
        """
        Report a client-side route change.

        The referrer, user agent and classification of the last page load are
        kept; only the page path changes.
        """
        base = self._last_context or PageContext()
        context = replace(base, page_path=page_path, page_url=None)
        classification = self._last_classification or self.classify(context)

        self._last_context = context
        self._last_classification = classification
        return self._send(context, classification)

    def _send(self, context: PageContext, classification: TrafficClassification) -> bool:
        if self.ai_only and classification.visit_type in NON_AI_VISIT_TYPES:
            logger.debug(f"Skipping non-AI visit ({classification.source})")
            return False

        payload = build_payload(
            self.website_id,
            context,
            classification,
            timestamp=datetime.now(timezone.utc),
        )

        try:
            self._deliver(payload)
        except DeliveryError as e:
            logger.warning(
                f"AI Traffic Analytics: Error sending tracking data: {e}",
                extra={"site_id": self.website_id, "source": classification.source},
            )
            return False

        logger.debug(
            f"Sent {classification.visit_type} event from {classification.source} "
            f"for {payload['pagePath']}"
        )
        return True

    def _deliver(self, payload: dict[str, Any]) -> None:
        """Post once; no retries."""
        try:
            response = self._client.post(self.endpoint, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise DeliveryError(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                f"Endpoint returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"Request failed: {e}") from e
