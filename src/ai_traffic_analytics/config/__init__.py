"""Configuration module."""

from .constants import (
    AI_CRAWLER_RULES,
    AI_PLATFORM_NAMES,
    AI_REFERRER_RULES,
    DEFAULT_TIME_WINDOW,
    RULES_VERSION,
    SEARCH_AI_OVERVIEW_MARKERS,
    TIME_WINDOWS,
    VISIT_TYPES,
)
from .settings import Settings, clear_settings_cache, get_settings
from .sops_loader import (
    check_sops_installed,
    decrypt_sops_file,
    load_yaml_file,
)

__all__ = [
    # Classification rule tables
    "RULES_VERSION",
    "AI_REFERRER_RULES",
    "SEARCH_AI_OVERVIEW_MARKERS",
    "AI_CRAWLER_RULES",
    "AI_PLATFORM_NAMES",
    "VISIT_TYPES",
    # Time windows
    "TIME_WINDOWS",
    "DEFAULT_TIME_WINDOW",
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Config loading
    "load_yaml_file",
    "decrypt_sops_file",
    "check_sops_installed",
]
