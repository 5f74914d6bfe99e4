"""Website registry."""

from .sites import SiteRegistry, placeholder_email

__all__ = ["SiteRegistry", "placeholder_email"]
