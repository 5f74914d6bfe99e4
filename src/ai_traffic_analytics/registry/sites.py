"""
Site registry.

Creates and looks up the websites a user tracks. The owning user row is
upserted before its first site is inserted, mirroring the identity
provider's user id.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from ..ingestion.exceptions import NotFoundError, ValidationError
from ..schemas.sites import Site, User
from ..storage.base import StorageBackend
from ..utils.url_utils import normalize_domain

logger = logging.getLogger(__name__)


def placeholder_email(user_id: str) -> str:
    """Email stored for a user when the identity provider supplies none."""
    return f"user-{user_id}@example.com"


class SiteRegistry:
    """CRUD over tracked websites owned by a user."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> User:
        """
        Idempotently create the user row.

        An existing user's email is only replaced when a real one is given.
        """
        if not user_id or not user_id.strip():
            raise ValidationError("User ID is required", field="userId")
        user_id = user_id.strip()

        existing = self.backend.get_user(user_id)
        if existing is None or email:
            self.backend.upsert_user(user_id, email or placeholder_email(user_id))
            existing = self.backend.get_user(user_id)
        return User.from_row(existing)

    def create_site(
        self,
        user_id: str,
        domain: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Site:
        """
        Register a new website for a user.

        Args:
            user_id: Owner id from the identity provider
            domain: Site domain, normalized before storage
            name: Optional display name
            email: Owner email, when known

        Raises:
            ValidationError: user_id missing, or domain empty after normalization
            StorageError: The write failed
        """
        if not user_id or not user_id.strip():
            raise ValidationError("User ID and domain are required", field="userId")

        normalized = normalize_domain(domain)
        if not normalized:
            raise ValidationError(
                "User ID and domain are required", field="domain", value=domain
            )

        user = self.ensure_user(user_id, email)

        name = name.strip() if name and name.strip() else None
        row = self.backend.insert_website(
            {
                "id": str(uuid.uuid4()),
                "user_id": user.id,
                "domain": normalized,
                "name": name,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        site = Site.from_row(row)
        logger.info(f"Registered website {site.domain} ({site.id}) for user {user.id}")
        return site

    def list_sites(self, owner_id: str) -> list[Site]:
        """All sites of an owner in creation order."""
        if not owner_id or not owner_id.strip():
            raise ValidationError("User ID is required", field="userId")
        return [Site.from_row(row) for row in self.backend.list_websites(owner_id.strip())]

    def get_site(self, site_id: str) -> Site:
        """
        Fetch one site.

        Raises:
            NotFoundError: No website with that id
        """
        row = self.backend.get_website(site_id)
        if row is None:
            raise NotFoundError("Website", site_id)
        return Site.from_row(row)

    def site_exists(self, site_id: str) -> bool:
        return self.backend.get_website(site_id) is not None

    def rename_site(self, site_id: str, name: Optional[str]) -> Site:
        """Change a site's display name, the only mutable field."""
        name = name.strip() if name and name.strip() else None
        if self.backend.update_website_name(site_id, name) == 0:
            raise NotFoundError("Website", site_id)
        return self.get_site(site_id)
