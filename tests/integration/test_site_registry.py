"""
Integration tests for the site registry.
"""

import uuid

import pytest

from ai_traffic_analytics.ingestion import NotFoundError, ValidationError
from ai_traffic_analytics.registry import placeholder_email


class TestCreateSite:
    """Tests for SiteRegistry.create_site."""

    def test_domain_normalized(self, site):
        """Scheme, www. and trailing slash are stripped."""
        assert site.domain == "example.com"
        assert site.name == "Example"
        assert site.owner_id == "user-1"

    def test_id_is_uuid(self, site):
        assert str(uuid.UUID(site.id)) == site.id

    def test_owner_created_with_placeholder_email(self, sqlite_backend, site):
        user = sqlite_backend.get_user("user-1")
        assert user["email"] == placeholder_email("user-1")

    def test_real_email_replaces_placeholder(self, registry, site, sqlite_backend):
        registry.create_site("user-1", "second.example.com", email="owner@example.com")
        assert sqlite_backend.get_user("user-1")["email"] == "owner@example.com"

    def test_email_kept_when_not_given(self, registry, sqlite_backend):
        registry.ensure_user("user-9", "real@example.com")
        registry.create_site("user-9", "example.org")

        assert sqlite_backend.get_user("user-9")["email"] == "real@example.com"

    def test_duplicate_domains_allowed(self, registry, site):
        again = registry.create_site("user-1", "example.com")
        assert again.id != site.id

    @pytest.mark.parametrize("user_id,domain", [("", "example.com"), ("u1", ""), ("u1", "https://")])
    def test_missing_fields(self, registry, user_id, domain):
        with pytest.raises(ValidationError) as exc_info:
            registry.create_site(user_id, domain)

        assert exc_info.value.message == "User ID and domain are required"

    def test_blank_name_stored_as_none(self, registry):
        assert registry.create_site("u1", "example.com", name="   ").name is None

    def test_to_dict(self, site):
        data = site.to_dict()

        assert data["id"] == site.id
        assert data["user_id"] == "user-1"
        assert data["domain"] == "example.com"


class TestLookup:
    """Tests for listing and fetching sites."""

    def test_list_sites(self, registry, site):
        second = registry.create_site("user-1", "blog.example.com")
        registry.create_site("user-2", "someone-else.com")

        assert [s.id for s in registry.list_sites("user-1")] == [site.id, second.id]

    def test_list_sites_unknown_owner(self, registry):
        assert registry.list_sites("nobody") == []

    def test_list_sites_requires_owner(self, registry):
        with pytest.raises(ValidationError, match="User ID is required"):
            registry.list_sites("  ")

    def test_get_site(self, registry, site):
        assert registry.get_site(site.id) == site

    def test_get_missing_site(self, registry):
        with pytest.raises(NotFoundError) as exc_info:
            registry.get_site("missing")

        assert exc_info.value.message == "Website not found"

    def test_site_exists(self, registry, site):
        assert registry.site_exists(site.id)
        assert not registry.site_exists("missing")


class TestRenameSite:
    """Tests for SiteRegistry.rename_site."""

    def test_rename(self, registry, site):
        renamed = registry.rename_site(site.id, "  New name ")

        assert renamed.name == "New name"
        assert renamed.domain == site.domain

    def test_clear_name(self, registry, site):
        assert registry.rename_site(site.id, None).name is None

    def test_rename_missing(self, registry):
        with pytest.raises(NotFoundError):
            registry.rename_site("missing", "x")
