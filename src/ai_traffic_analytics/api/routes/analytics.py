"""
Dashboard analytics routes.

Each request recomputes its views from the raw events of one site and
window.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from ...config.constants import DEFAULT_TIME_WINDOW
from ...ingestion.exceptions import NotFoundError
from ...registry.sites import SiteRegistry
from ...reporting.dashboard import TrafficDashboard
from ...reporting.time_windows import validate_window
from ...storage.base import StorageError
from ..deps import get_dashboard, get_registry
from ..errors import (
    MSG_TRAFFIC_FAILED,
    MSG_TRENDS_FAILED,
    MSG_WEBSITE_NOT_FOUND,
    error_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/websites/{site_id}/traffic", response_model=None)
def get_traffic(
    site_id: str,
    window: str = Query(DEFAULT_TIME_WINDOW, alias="range"),
    registry: SiteRegistry = Depends(get_registry),
    dashboard: TrafficDashboard = Depends(get_dashboard),
) -> Any:
    """Summary, source breakdown, top pages, trend and recent visits."""
    try:
        validate_window(window)
    except ValueError as e:
        return error_response(400, str(e))

    try:
        registry.get_site(site_id)
        report = dashboard.get_dashboard(site_id, window)
    except NotFoundError:
        return error_response(404, MSG_WEBSITE_NOT_FOUND)
    except StorageError as e:
        logger.error(f"Error fetching traffic data for {site_id}: {e}")
        return error_response(500, MSG_TRAFFIC_FAILED)

    return report.to_dict()


@router.get("/websites/{site_id}/trends", response_model=None)
def get_trends(
    site_id: str,
    window: str = Query(DEFAULT_TIME_WINDOW, alias="range"),
    source: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    registry: SiteRegistry = Depends(get_registry),
    dashboard: TrafficDashboard = Depends(get_dashboard),
) -> Any:
    """Trend series with growth rate, peak bucket and average per bucket."""
    try:
        validate_window(window)
    except ValueError as e:
        return error_response(400, str(e))

    try:
        registry.get_site(site_id)
        report = dashboard.get_trend(
            site_id,
            window,
            source=source or None,
            page_path=page or None,
        )
    except NotFoundError:
        return error_response(404, MSG_WEBSITE_NOT_FOUND)
    except StorageError as e:
        logger.error(f"Error fetching trend data for {site_id}: {e}")
        return error_response(500, MSG_TRENDS_FAILED)

    return report.to_dict()
