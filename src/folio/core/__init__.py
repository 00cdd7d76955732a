"""Core utilities for folio."""

from folio.core.config import (
    SitePaths,
    SiteSettings,
    find_site_root,
    get_paths,
    get_site_root,
    load_site_settings,
)

__all__ = [
    "SitePaths",
    "SiteSettings",
    "find_site_root",
    "get_paths",
    "get_site_root",
    "load_site_settings",
]
