"""Error responses of the HTTP API: always `{"error": message}`."""

from typing import Optional

from fastapi.responses import JSONResponse

# Client-facing messages
MSG_MISSING_FIELDS = "Missing required fields"
MSG_INVALID_JSON = "Request body must be valid JSON"
MSG_WEBSITE_NOT_FOUND = "Website not found"
MSG_RECORD_FAILED = "Failed to record traffic data"
MSG_INTERNAL = "Internal server error"
MSG_USER_ID_REQUIRED = "User ID is required"
MSG_FETCH_WEBSITES_FAILED = "Failed to fetch websites"
MSG_CREATE_WEBSITE_FAILED = "Failed to create website"
MSG_UPDATE_WEBSITE_FAILED = "Failed to update website"
MSG_TRAFFIC_FAILED = "Failed to load traffic data"
MSG_TRENDS_FAILED = "Failed to load trend data"


def error_response(
    status_code: int,
    message: str,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)
