"""
Wire format of the tracking endpoint.

`parse_track_payload` is the single validation step between the raw JSON
body and a `VisitEvent`. Field names on the wire are camelCase, as sent by
the browser snippet and `TrackingEmitter`.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import pydantic
from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.constants import VISIT_TYPES
from ..schemas.events import VisitEvent
from .exceptions import ValidationError

# Messages returned to the client
MISSING_FIELDS_MESSAGE = "Missing required fields"
NOT_AN_OBJECT_MESSAGE = "Request body must be a JSON object"

REQUIRED_FIELDS = ("websiteId", "pagePath")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken as UTC.

    Raises:
        ValueError: If the value is not ISO-8601 or falls outside the
            representable UTC range
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        # Fallback for forms fromisoformat rejects on older interpreters
        dt = date_parser.isoparse(text)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"out of range: {value}") from e


class TrackEventPayload(BaseModel):
    """Validated body of POST /api/track."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    website_id: str = Field(..., alias="websiteId")
    page_path: str = Field(..., alias="pagePath")
    source: Optional[str] = None
    visit_type: Optional[str] = Field(None, alias="type")
    referrer: Optional[str] = None
    user_agent: Optional[str] = Field(None, alias="userAgent")
    language: Optional[str] = None
    screen_width: Optional[int] = Field(None, alias="screenWidth", ge=0)
    screen_height: Optional[int] = Field(None, alias="screenHeight", ge=0)
    timestamp: Optional[datetime] = None

    @field_validator("website_id", "page_path")
    @classmethod
    def require_non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("source")
    @classmethod
    def blank_source_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("visit_type")
    @classmethod
    def validate_visit_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if v not in VISIT_TYPES:
            raise ValueError(f"must be one of {sorted(VISIT_TYPES)}")
        return v

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_iso_timestamp(cls, v: Any) -> Optional[datetime]:
        if v is None:
            return None
        if isinstance(v, datetime):
            return v if v.tzinfo else v.replace(tzinfo=timezone.utc)
        if not isinstance(v, str):
            raise ValueError("must be an ISO-8601 string")
        return parse_timestamp(v)

    def to_visit_event(
        self,
        default_source: str,
        default_visit_type: str,
        now: Optional[datetime] = None,
    ) -> VisitEvent:
        """Fill in server-side defaults and build the event to persist."""
        observed_at = self.timestamp or now or datetime.now(timezone.utc)
        return VisitEvent(
            site_id=self.website_id,
            source=self.source or default_source,
            visit_type=self.visit_type or default_visit_type,
            page_path=self.page_path,
            observed_at=observed_at,
            referrer=self.referrer or "",
            user_agent=self.user_agent or "",
            language=self.language or "",
            screen_width=self.screen_width,
            screen_height=self.screen_height,
        )


def parse_track_payload(raw: Any) -> TrackEventPayload:
    """
    Validate a decoded JSON body.

    Raises:
        ValidationError: On any structural or field error. A missing or blank
            websiteId/pagePath reports "Missing required fields".
    """
    if not isinstance(raw, dict):
        raise ValidationError(NOT_AN_OBJECT_MESSAGE, value=type(raw).__name__)

    try:
        return TrackEventPayload.model_validate(raw)
    except pydantic.ValidationError as e:
        raise _to_validation_error(e, raw) from e


def _to_validation_error(
    error: pydantic.ValidationError, raw: dict[str, Any]
) -> ValidationError:
    first = error.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else None

    if field in REQUIRED_FIELDS and (
        first["type"] in ("missing", "value_error") or raw.get(field) is None
    ):
        return ValidationError(MISSING_FIELDS_MESSAGE, field=field)

    message = first["msg"].removeprefix("Value error, ")
    return ValidationError(f"Invalid {field}: {message}", field=field, value=raw.get(field))
