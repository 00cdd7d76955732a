"""Tests for folio.core.config module.

Covers:
  - get_global_config_path() with default and XDG_CONFIG_HOME
  - load_global_config() with missing, valid, and invalid files
  - find_site_root() 3-tier resolution (env var > local walk > global config)
  - get_paths() and load_site_settings()
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from folio.core.config import (
    DEFAULT_SECTIONS,
    SiteSettings,
    find_site_root,
    get_global_config_path,
    get_paths,
    is_site_root,
    load_global_config,
    load_site_settings,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's own config and env out of the tests."""
    monkeypatch.delenv("FOLIO_SITE_ROOT", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def _write_global(tmp_path: Path, data) -> None:
    config_dir = tmp_path / "xdg" / "folio"
    config_dir.mkdir(parents=True, exist_ok=True)
    text = data if isinstance(data, str) else yaml.dump(data)
    (config_dir / "config.yaml").write_text(text, encoding="utf-8")


# ---------------------------------------------------------------------------
# get_global_config_path / load_global_config
# ---------------------------------------------------------------------------

class TestGlobalConfig:

    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_global_config_path() == Path.home() / ".config" / "folio" / "config.yaml"

    def test_xdg_config_home(self, tmp_path):
        assert get_global_config_path() == tmp_path / "xdg" / "folio" / "config.yaml"

    def test_missing_file_returns_empty(self):
        assert load_global_config() == {}

    def test_valid_config(self, tmp_path):
        _write_global(tmp_path, {"site_root": "/some/path"})
        assert load_global_config() == {"site_root": "/some/path"}

    def test_invalid_yaml_returns_empty(self, tmp_path, caplog):
        _write_global(tmp_path, "{{{{invalid yaml:::::")
        assert load_global_config() == {}
        assert "Ignoring unreadable config" in caplog.text

    def test_non_dict_yaml_returns_empty(self, tmp_path):
        _write_global(tmp_path, "- item1\n- item2\n")
        assert load_global_config() == {}


# ---------------------------------------------------------------------------
# find_site_root
# ---------------------------------------------------------------------------

class TestFindSiteRoot:

    @pytest.mark.parametrize("marker", ["hugo.toml", "config.yaml"])
    def test_hugo_config_marks_root(self, tmp_path, marker):
        site = tmp_path / "site"
        site.mkdir()
        (site / marker).write_text("", encoding="utf-8")
        assert is_site_root(site)
        assert find_site_root(site) == site.resolve()

    def test_config_default_dir_marks_root(self, tmp_path):
        site = tmp_path / "site"
        (site / "config" / "_default").mkdir(parents=True)
        assert is_site_root(site)

    def test_walks_up_from_content_dir(self, tmp_path):
        site = tmp_path / "site"
        (site / ".folio").mkdir(parents=True)
        nested = site / "content" / "post" / "a"
        nested.mkdir(parents=True)
        assert find_site_root(nested) == site.resolve()

    def test_uses_cwd_by_default(self, tmp_path, monkeypatch):
        site = tmp_path / "site"
        (site / ".folio").mkdir(parents=True)
        monkeypatch.chdir(site)
        assert find_site_root() == site.resolve()

    def test_env_var_wins(self, tmp_path, monkeypatch):
        local = tmp_path / "local"
        (local / ".folio").mkdir(parents=True)
        other = tmp_path / "other"
        other.mkdir()
        monkeypatch.setenv("FOLIO_SITE_ROOT", str(other))
        assert find_site_root(local) == other.resolve()

    def test_env_var_not_a_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FOLIO_SITE_ROOT", str(tmp_path / "missing"))
        with pytest.raises(FileNotFoundError, match="FOLIO_SITE_ROOT"):
            find_site_root(tmp_path)

    def test_global_config_fallback(self, tmp_path, monkeypatch):
        site = tmp_path / "configured"
        site.mkdir()
        _write_global(tmp_path, {"site_root": str(site)})
        monkeypatch.setattr("folio.core.config._walk_up_for_site", lambda start: None)
        assert find_site_root(tmp_path) == site.resolve()

    def test_global_config_bad_directory(self, tmp_path, monkeypatch):
        _write_global(tmp_path, {"site_root": str(tmp_path / "gone")})
        monkeypatch.setattr("folio.core.config._walk_up_for_site", lambda start: None)
        with pytest.raises(FileNotFoundError, match="site_root"):
            find_site_root(tmp_path)

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.setattr("folio.core.config._walk_up_for_site", lambda start: None)
        with pytest.raises(FileNotFoundError, match="folio init"):
            find_site_root(tmp_path)


# ---------------------------------------------------------------------------
# get_paths / settings
# ---------------------------------------------------------------------------

def test_get_paths(tmp_path):
    paths = get_paths(tmp_path)
    assert paths.root == tmp_path
    assert paths.folio_dir == tmp_path / ".folio"
    assert paths.config_file == tmp_path / ".folio" / "config.yaml"


def test_get_paths_uses_cached_root(mock_site_root):
    assert get_paths().root == mock_site_root


class TestSiteSettings:

    def test_defaults(self, tmp_path):
        settings = load_site_settings(tmp_path)
        assert settings.sections == DEFAULT_SECTIONS
        assert settings.required_for("post") == ["title", "date"]
        assert settings.required_for("project") == ["title"]
        assert settings.disabled_checks == []
        assert "/img/" in settings.static_prefixes

    def test_defaults_are_not_shared(self):
        a = SiteSettings()
        a.sections["event"] = "content/event"
        a.required_fields["post"].append("summary")
        b = SiteSettings()
        assert "event" not in b.sections
        assert b.required_for("post") == ["title", "date"]

    def test_loaded_from_site(self, tmp_path):
        (tmp_path / ".folio").mkdir()
        (tmp_path / ".folio" / "config.yaml").write_text(
            yaml.safe_dump(
                {
                    "sections": {"event": "content/event"},
                    "required_fields": {"project": ["title", "summary"]},
                    "disabled_checks": ["orphaned_content"],
                    "static_prefixes": ["/pdf/"],
                }
            ),
            encoding="utf-8",
        )
        settings = load_site_settings(tmp_path)
        assert settings.sections["event"] == "content/event"
        assert settings.sections["post"] == "content/post"
        assert settings.required_for("project") == ["title", "summary"]
        assert settings.disabled_checks == ["orphaned_content"]
        assert settings.static_prefixes == ("/pdf/",)

    def test_bad_values_ignored(self):
        settings = SiteSettings.from_dict(
            {"sections": ["post"], "required_fields": {"post": "title"}, "disabled_checks": "x"}
        )
        assert settings == SiteSettings()
