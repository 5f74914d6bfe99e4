"""API routers."""

from . import analytics, track, websites

__all__ = ["analytics", "track", "websites"]
