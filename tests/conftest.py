"""Shared test fixtures for folio package."""

from pathlib import Path

import pytest
import yaml


@pytest.fixture
def mock_site_root(tmp_path, monkeypatch):
    """Create a mock Hugo site with a .folio/ directory."""
    (tmp_path / ".folio").mkdir()
    (tmp_path / "hugo.toml").write_text('title = "Test Site"\n')

    for section in ("authors", "post", "project", "publication", "talk"):
        (tmp_path / "content" / section).mkdir(parents=True)
    (tmp_path / "static").mkdir()

    # Mock get_site_root to return our tmp_path
    from folio.core import config
    config.get_site_root.cache_clear()
    monkeypatch.setattr(config, "get_site_root", lambda: tmp_path)

    return tmp_path


def write_document(path: Path, front_matter: dict | None, body: str = "Body text.") -> Path:
    """Write a content file with YAML front matter."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if front_matter is None:
        path.write_text(f"{body}\n", encoding="utf-8")
    else:
        fm_str = yaml.safe_dump(front_matter, default_flow_style=False, sort_keys=False)
        path.write_text(f"---\n{fm_str}---\n\n{body}\n", encoding="utf-8")
    return path


@pytest.fixture
def create_content_file(mock_site_root):
    """Factory fixture for creating content bundles with front matter."""
    def _create(
        content_type: str = "post",
        slug: str = "test-post",
        title: str = "Test Post",
        body: str = "Test content.",
        extra_fm: dict | None = None,
        draft: bool = False,
        filename: str = "index.md",
    ) -> Path:
        fm = {"title": title, "date": "2024-01-01", "authors": ["admin"], "draft": draft}
        if extra_fm:
            fm.update(extra_fm)
        path = mock_site_root / "content" / content_type / slug / filename
        return write_document(path, fm, body)

    return _create


@pytest.fixture
def create_raw_file(mock_site_root):
    """Factory fixture for writing a content file verbatim."""
    def _create(rel_path: str, text: str) -> Path:
        path = mock_site_root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _create


@pytest.fixture
def create_author(mock_site_root):
    """Factory fixture for creating author profiles."""
    def _create(
        author_id: str = "admin",
        name: str = "Ada Statistician",
        extra_fm: dict | None = None,
        bio: str = "Ada works on Bayesian methods.",
    ) -> Path:
        fm = {
            "title": name,
            "role": "Professor of Statistics",
            "email": "ada@example.org",
            "superuser": author_id == "admin",
            "highlight_name": True,
            "organizations": [{"name": "University of Somewhere", "url": "https://example.org"}],
            "social": [
                {"icon": "envelope", "icon_pack": "fas", "link": "#contact"},
                {"icon": "github", "icon_pack": "fab", "link": "https://github.com/ada"},
            ],
            "education": {
                "courses": [
                    {"course": "PhD in Statistics", "institution": "Some University", "year": 2012},
                ]
            },
        }
        if extra_fm:
            fm.update(extra_fm)
        path = mock_site_root / "content" / "authors" / author_id / "_index.md"
        return write_document(path, fm, bio)

    return _create


@pytest.fixture
def academic_site(mock_site_root, create_author, create_content_file, create_raw_file):
    """A small, valid academic site: profile, posts, a project and a job ad."""
    create_author()
    create_content_file(
        slug="bayesian-workflow",
        title="A Bayesian Workflow",
        extra_fm={
            "summary": "Notes on model checking.",
            "tags": ["bayesian", "workflow"],
            "categories": ["statistics"],
        },
        body="See [the project](/project/mixed-models/) for code.",
    )
    create_content_file(
        content_type="project",
        slug="mixed-models",
        title="Mixed Models",
        extra_fm={
            "summary": "An R package.",
            "tags": ["R"],
            "image": {"caption": "Photo by someone", "focal_point": "Smart", "preview_only": False},
        },
    )
    create_raw_file(
        "content/phd-position.md",
        "---\ntitle: PhD position in statistics\ndate: 2021-03-01\n"
        "type: page\nshare: false\nprofile: false\n---\n\nWe are hiring.\n",
    )
    return mock_site_root
