"""Tracking event emitter."""

from .client import (
    DEFAULT_TIMEOUT_SECONDS,
    DeliveryError,
    EmitterConfigError,
    PageContext,
    TrackingEmitter,
    build_payload,
)

__all__ = [
    "TrackingEmitter",
    "PageContext",
    "build_payload",
    "EmitterConfigError",
    "DeliveryError",
    "DEFAULT_TIMEOUT_SECONDS",
]
