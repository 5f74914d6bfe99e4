"""
Website registry routes.

Caller identity comes from the hosted identity provider; the user id is
passed explicitly and trusted here.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from ...ingestion.exceptions import NotFoundError, ValidationError
from ...registry.sites import SiteRegistry
from ...storage.base import StorageError
from ..deps import get_registry
from ..errors import (
    MSG_CREATE_WEBSITE_FAILED,
    MSG_FETCH_WEBSITES_FAILED,
    MSG_UPDATE_WEBSITE_FAILED,
    MSG_USER_ID_REQUIRED,
    MSG_WEBSITE_NOT_FOUND,
    error_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateWebsiteRequest(BaseModel):
    """Body of POST /api/websites."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    domain: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None


class RenameWebsiteRequest(BaseModel):
    """Body of PATCH /api/websites/{site_id}."""

    name: Optional[str] = None


@router.get("/websites", response_model=None)
def list_websites(
    user_id: Optional[str] = Query(None, alias="userId"),
    registry: SiteRegistry = Depends(get_registry),
) -> Any:
    """Websites owned by a user, oldest first."""
    if not user_id or not user_id.strip():
        return error_response(400, MSG_USER_ID_REQUIRED)

    try:
        sites = registry.list_sites(user_id)
    except StorageError as e:
        logger.error(f"Error fetching websites: {e}")
        return error_response(500, MSG_FETCH_WEBSITES_FAILED)

    return {"data": [site.to_dict() for site in sites]}


@router.post("/websites", response_model=None)
def create_website(
    body: CreateWebsiteRequest,
    registry: SiteRegistry = Depends(get_registry),
) -> Any:
    """Register a website; the owning user is created on first use."""
    try:
        site = registry.create_site(
            user_id=body.user_id or "",
            domain=body.domain or "",
            name=body.name,
            email=body.email,
        )
    except ValidationError as e:
        return error_response(400, e.message)
    except StorageError as e:
        logger.error(f"Error creating website: {e}")
        return error_response(500, MSG_CREATE_WEBSITE_FAILED)

    return {"success": True, "website": site.to_dict()}


@router.get("/websites/{site_id}", response_model=None)
def get_website(
    site_id: str,
    registry: SiteRegistry = Depends(get_registry),
) -> Any:
    try:
        site = registry.get_site(site_id)
    except NotFoundError:
        return error_response(404, MSG_WEBSITE_NOT_FOUND)
    except StorageError as e:
        logger.error(f"Error fetching website {site_id}: {e}")
        return error_response(500, MSG_FETCH_WEBSITES_FAILED)

    return {"data": site.to_dict()}


@router.patch("/websites/{site_id}", response_model=None)
def rename_website(
    site_id: str,
    body: RenameWebsiteRequest,
    registry: SiteRegistry = Depends(get_registry),
) -> Any:
    """Change a website's display name."""
    try:
        site = registry.rename_site(site_id, body.name)
    except NotFoundError:
        return error_response(404, MSG_WEBSITE_NOT_FOUND)
    except StorageError as e:
        logger.error(f"Error renaming website {site_id}: {e}")
        return error_response(500, MSG_UPDATE_WEBSITE_FAILED)

    return {"success": True, "website": site.to_dict()}
