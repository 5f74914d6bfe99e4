"""
Tracking ingestion route.

Public endpoint hit by the browser snippet and `TrackingEmitter` from any
origin. Every response carries its own CORS headers, independent of the
app-wide CORS settings that guard the dashboard routes.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ...ingestion.exceptions import NotFoundError, ValidationError
from ...ingestion.service import TrackingIngestionService
from ...storage.base import StorageError
from ..deps import get_ingestion_service
from ..errors import (
    MSG_INTERNAL,
    MSG_INVALID_JSON,
    MSG_RECORD_FAILED,
    MSG_WEBSITE_NOT_FOUND,
    error_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()

TRACK_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}


@router.options("/track", status_code=204)
def track_preflight() -> Response:
    """CORS preflight for the tracking endpoint."""
    return Response(status_code=204, headers=TRACK_CORS_HEADERS)


@router.post("/track", response_model=None)
async def track_visit(
    request: Request,
    service: TrackingIngestionService = Depends(get_ingestion_service),
) -> Any:
    """
    Record one visit event.

    400 on a malformed payload, 404 when websiteId is not registered,
    500 when the insert fails. Nothing is stored on error.
    """
    try:
        raw = await request.json()
    except ValueError:
        return error_response(400, MSG_INVALID_JSON, TRACK_CORS_HEADERS)

    try:
        await run_in_threadpool(service.ingest, raw)
    except ValidationError as e:
        logger.info(f"Rejected tracking event: {e}")
        return error_response(400, e.message, TRACK_CORS_HEADERS)
    except NotFoundError:
        return error_response(404, MSG_WEBSITE_NOT_FOUND, TRACK_CORS_HEADERS)
    except StorageError as e:
        logger.error(f"Error inserting traffic data: {e}")
        return error_response(500, MSG_RECORD_FAILED, TRACK_CORS_HEADERS)
    except Exception:
        logger.exception("Unexpected error in tracking endpoint")
        return error_response(500, MSG_INTERNAL, TRACK_CORS_HEADERS)

    return JSONResponse(content={"success": True}, headers=TRACK_CORS_HEADERS)
