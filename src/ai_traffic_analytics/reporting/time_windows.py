"""
Dashboard time windows and trend bucketing.
"""

from datetime import datetime, timezone
from typing import Optional

from ..config.constants import (
    EPOCH_FLOOR,
    GRANULARITY_DAY,
    GRANULARITY_HOUR,
    GRANULARITY_MONTH,
    TIME_WINDOWS,
    WINDOW_GRANULARITY,
)

_BUCKET_FORMATS = {
    GRANULARITY_HOUR: "%Y-%m-%dT%H:00",
    GRANULARITY_DAY: "%Y-%m-%d",
    GRANULARITY_MONTH: "%Y-%m",
}


def validate_window(window: str) -> str:
    """
    Check a window name.

    Raises:
        ValueError: If the window is not one of 24h, 7d, 30d, 90d, all
    """
    if window not in TIME_WINDOWS:
        raise ValueError(
            f"Unknown time window: '{window}'. "
            f"Must be one of: {', '.join(TIME_WINDOWS)}"
        )
    return window


def resolve_window_start(window: str, now: Optional[datetime] = None) -> datetime:
    """
    Inclusive lower bound of a window ending at `now`.

    Examples:
        >>> now = datetime(2025, 6, 8, tzinfo=timezone.utc)
        >>> resolve_window_start("7d", now).isoformat()
        '2025-06-01T00:00:00+00:00'
        >>> resolve_window_start("all", now) == EPOCH_FLOOR
        True
    """
    duration = TIME_WINDOWS[validate_window(window)]
    if duration is None:
        return EPOCH_FLOOR

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - duration


def granularity_for(window: str) -> str:
    """Trend bucket size used for a window (hour, day or month)."""
    return WINDOW_GRANULARITY[validate_window(window)]


def bucket_label(observed_at: datetime, granularity: str) -> str:
    """Label of the UTC bucket containing `observed_at`."""
    try:
        fmt = _BUCKET_FORMATS[granularity]
    except KeyError:
        raise ValueError(f"Unknown granularity: '{granularity}'") from None

    if observed_at.tzinfo is not None:
        observed_at = observed_at.astimezone(timezone.utc)
    return observed_at.strftime(fmt)
