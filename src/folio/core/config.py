"""
Configuration and path management.

Provides site root detection, standard paths and per-site settings for the
Hugo site. Uses the .folio/ directory for folio-specific settings.

Resolution order for site root:
  1. FOLIO_SITE_ROOT environment variable (highest priority)
  2. Walk up from cwd looking for .folio/ or a Hugo config file
  3. Global config file (~/.config/folio/config.yaml) site_root key
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Files or directories that mark the root of a Hugo site
HUGO_CONFIG_MARKERS = (
    "hugo.toml",
    "hugo.yaml",
    "hugo.json",
    "config.toml",
    "config.yaml",
    "config/_default",
)

DEFAULT_SECTIONS: dict[str, str] = {
    "authors": "content/authors",
    "post": "content/post",
    "project": "content/project",
    "publication": "content/publication",
    "talk": "content/talk",
    "page": "content",
}

DEFAULT_REQUIRED_FIELDS: dict[str, list[str]] = {
    "default": ["title"],
    "post": ["title", "date"],
    "publication": ["title", "date"],
    "talk": ["title", "date"],
}

DEFAULT_STATIC_PREFIXES = ("/img/", "/images/", "/media/", "/files/", "/uploads/", "/css/", "/js/")


@dataclass(frozen=True)
class SitePaths:
    """Standard paths for the Hugo site and folio data."""

    root: Path
    folio_dir: Path

    # Settings (in .folio/)
    config_file: Path


@dataclass
class SiteSettings:
    """Per-site settings loaded from .folio/config.yaml."""

    sections: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SECTIONS))
    required_fields: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_REQUIRED_FIELDS.items()}
    )
    disabled_checks: list[str] = field(default_factory=list)
    static_prefixes: tuple[str, ...] = DEFAULT_STATIC_PREFIXES

    def required_for(self, kind: str) -> list[str]:
        """Required front matter fields for a content kind."""
        return self.required_fields.get(kind, self.required_fields.get("default", ["title"]))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SiteSettings:
        """Build settings from a parsed config mapping, ignoring bad values."""
        settings = cls()

        sections = data.get("sections")
        if isinstance(sections, dict):
            settings.sections.update(
                {str(k): str(v) for k, v in sections.items() if v}
            )

        required = data.get("required_fields")
        if isinstance(required, dict):
            for kind, fields in required.items():
                if isinstance(fields, list):
                    settings.required_fields[str(kind)] = [str(f) for f in fields]

        disabled = data.get("disabled_checks")
        if isinstance(disabled, list):
            settings.disabled_checks = [str(name) for name in disabled]

        prefixes = data.get("static_prefixes")
        if isinstance(prefixes, list):
            settings.static_prefixes = tuple(str(p) for p in prefixes)

        return settings


def get_global_config_path() -> Path:
    """Return the path to the global folio config file.

    Respects XDG_CONFIG_HOME if set, otherwise defaults to ~/.config/folio/config.yaml.

    Returns:
        Path to global config file (may not exist).
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "folio" / "config.yaml"


def _load_yaml_mapping(path: Path) -> dict:
    """Load a YAML file that should hold a mapping.

    Returns:
        Mapping, or empty dict if the file is missing or invalid.
    """
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_global_config() -> dict:
    """Load the global folio configuration.

    Returns:
        Configuration dict, or empty dict if file is missing or invalid.
    """
    return _load_yaml_mapping(get_global_config_path())


def is_site_root(path: Path) -> bool:
    """Check whether a directory looks like a Hugo site root."""
    if (path / ".folio").is_dir():
        return True
    return any((path / marker).exists() for marker in HUGO_CONFIG_MARKERS)


def _walk_up_for_site(start_path: Path) -> Path | None:
    """Walk up directory tree looking for a site root.

    Args:
        start_path: Starting path for search.

    Returns:
        Path to the site root, or None if not found.
    """
    current = start_path.resolve()
    while True:
        if is_site_root(current):
            return current
        if current == current.parent:
            return None
        current = current.parent


def find_site_root(start_path: Path | None = None) -> Path:
    """Find the site root using 3-tier resolution.

    Resolution order:
      1. FOLIO_SITE_ROOT environment variable (highest priority)
      2. Walk up from start_path (or cwd) looking for .folio/ or Hugo config
      3. Global config file site_root key

    Args:
        start_path: Starting path for the walk (defaults to cwd)

    Returns:
        Path to site root

    Raises:
        FileNotFoundError: If no site root is found by any method
    """
    env_root = os.environ.get("FOLIO_SITE_ROOT")
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if env_path.is_dir():
            return env_path
        raise FileNotFoundError(f"FOLIO_SITE_ROOT={env_root} is not a directory.")

    if start_path is None:
        start_path = Path.cwd()
    result = _walk_up_for_site(Path(start_path))
    if result is not None:
        return result

    site_root_str = load_global_config().get("site_root")
    if site_root_str:
        global_path = Path(site_root_str).expanduser().resolve()
        if global_path.is_dir():
            return global_path
        raise FileNotFoundError(
            f"Global config site_root={site_root_str} is not a directory."
        )

    raise FileNotFoundError(
        f"Could not find a Hugo site starting from {start_path}. "
        f"Run 'folio init' in the site root, set FOLIO_SITE_ROOT, or configure "
        f"site_root in {get_global_config_path()}."
    )


@lru_cache(maxsize=1)
def get_site_root() -> Path:
    """Get the cached site root path."""
    return find_site_root()


def get_paths(site_root: Path | None = None) -> SitePaths:
    """Get all standard paths for the site.

    Args:
        site_root: Site root path (uses cached default if not provided)

    Returns:
        SitePaths dataclass with all paths
    """
    if site_root is None:
        site_root = get_site_root()

    site_root = Path(site_root)
    folio_dir = site_root / ".folio"

    return SitePaths(
        root=site_root,
        folio_dir=folio_dir,
        config_file=folio_dir / "config.yaml",
    )


def load_site_settings(site_root: Path | None = None) -> SiteSettings:
    """Load per-site settings from .folio/config.yaml.

    Args:
        site_root: Site root path (uses cached default if not provided)

    Returns:
        SiteSettings, with defaults for anything not configured
    """
    paths = get_paths(site_root)
    return SiteSettings.from_dict(_load_yaml_mapping(paths.config_file))
