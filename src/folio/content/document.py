"""
Content document model.

A content document is one Hugo content file: front matter plus body.
Typed views (organizations, social links, courses, images) are built
leniently; malformed entries are left to the audit checks to report.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date as date_type
from datetime import datetime
from pathlib import Path
from typing import Any

from folio.content.frontmatter import DuplicateKey

# Accepted string forms for dates, in addition to YAML timestamps
DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S%z",
]

# Source formats in order of preference when one slug has several files
SOURCE_FORMATS = ("Rmd", "Rmarkdown", "md", "markdown", "html")


def parse_date(value: Any) -> datetime | None:
    """Parse a front matter date value.

    Args:
        value: A datetime/date (as produced by YAML) or a string

    Returns:
        datetime, or None if the value is not a valid timestamp
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date_type):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str):
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


@dataclass
class Organization:
    name: str
    url: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Organization | None:
        if not isinstance(data, dict) or not data.get("name"):
            return None
        url = data.get("url")
        return cls(name=str(data["name"]), url=str(url) if url else None)


@dataclass
class SocialLink:
    icon: str
    link: str
    icon_pack: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SocialLink | None:
        if not isinstance(data, dict) or not data.get("icon") or not data.get("link"):
            return None
        pack = data.get("icon_pack")
        return cls(
            icon=str(data["icon"]),
            link=str(data["link"]),
            icon_pack=str(pack) if pack else None,
        )


@dataclass
class Course:
    course: str
    institution: str
    year: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Course | None:
        if not isinstance(data, dict):
            return None
        if not data.get("course") or not data.get("institution"):
            return None
        year = data.get("year")
        try:
            year = int(year) if year is not None else None
        except (TypeError, ValueError):
            year = None
        return cls(course=str(data["course"]), institution=str(data["institution"]), year=year)


@dataclass
class ImageSpec:
    """Featured image settings of a page."""

    caption: str | None = None
    focal_point: str | None = None
    preview_only: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> ImageSpec | None:
        if not isinstance(data, dict):
            return None
        caption = data.get("caption")
        focal = data.get("focal_point")
        return cls(
            caption=str(caption) if caption else None,
            focal_point=str(focal) if focal else None,
            preview_only=data.get("preview_only") is True,
        )


@dataclass
class ContentDocument:
    """A single Hugo content file."""

    path: Path
    slug: str
    kind: str  # authors, post, project, publication, talk, page
    front_matter: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    source_format: str = "md"
    duplicate_keys: list[DuplicateKey] = field(default_factory=list)
    error: str | None = None
    # Other on-disk formats of the same document (e.g. pre-rendered html)
    variants: list[ContentDocument] = field(default_factory=list)

    @property
    def title(self) -> str:
        return str(self.front_matter.get("title") or self.slug)

    @property
    def summary(self) -> str | None:
        val = self.front_matter.get("summary")
        return str(val) if val else None

    @property
    def date(self) -> datetime | None:
        return parse_date(self.front_matter.get("date"))

    @property
    def authors(self) -> list[str]:
        return [str(a) for a in _as_list(self.front_matter.get("authors"))]

    @property
    def tags(self) -> list[str]:
        return [str(t) for t in _as_list(self.front_matter.get("tags"))]

    @property
    def categories(self) -> list[str]:
        return [str(c) for c in _as_list(self.front_matter.get("categories"))]

    @property
    def bibliography(self) -> list[str]:
        return [str(b) for b in _as_list(self.front_matter.get("bibliography")) if b]

    @property
    def page_type(self) -> str | None:
        val = self.front_matter.get("type")
        return str(val) if val else None

    @property
    def image(self) -> ImageSpec | None:
        return ImageSpec.from_dict(self.front_matter.get("image"))

    @property
    def is_draft(self) -> bool:
        return self.front_matter.get("draft") is True

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def hugo_path(self) -> str:
        """Get the Hugo URL path for this content."""
        if self.kind == "page":
            return f"/{self.slug}/"
        return f"/{self.kind}/{self.slug}/"

    def extract_internal_links(self) -> list[str]:
        """Extract internal links like [text](/path/) from the body."""
        return sorted(set(re.findall(r"\]\((/[^)\s]+)\)", self.body)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        date = self.date
        result: dict[str, Any] = {
            "path": str(self.path),
            "slug": self.slug,
            "kind": self.kind,
            "format": self.source_format,
            "title": self.title,
            "date": date.isoformat() if date else None,
            "authors": self.authors,
            "tags": self.tags,
            "categories": self.categories,
            "draft": self.is_draft,
            "hugo_path": self.hugo_path,
        }
        if self.summary:
            result["summary"] = self.summary
        if self.variants:
            result["variants"] = [str(v.path) for v in self.variants]
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class AuthorProfile:
    """An author profile document (content/authors/<id>/_index.md)."""

    identifier: str
    name: str
    path: Path
    role: str | None = None
    bio: str | None = None
    email: str | None = None
    superuser: bool = False
    highlight_name: bool = False
    interests: list[str] = field(default_factory=list)
    organizations: list[Organization] = field(default_factory=list)
    social: list[SocialLink] = field(default_factory=list)
    courses: list[Course] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: ContentDocument) -> AuthorProfile:
        fm = doc.front_matter

        def text(key: str) -> str | None:
            val = fm.get(key)
            return str(val) if val else None

        education = fm.get("education")
        courses_raw = education.get("courses") if isinstance(education, dict) else None

        return cls(
            identifier=doc.slug,
            name=doc.title,
            path=doc.path,
            role=text("role"),
            bio=text("bio"),
            email=text("email"),
            superuser=fm.get("superuser") is True,
            highlight_name=fm.get("highlight_name") is True,
            interests=[str(i) for i in _as_list(fm.get("interests"))],
            organizations=[
                o for o in map(Organization.from_dict, _as_list(fm.get("organizations"))) if o
            ],
            social=[s for s in map(SocialLink.from_dict, _as_list(fm.get("social"))) if s],
            courses=[c for c in map(Course.from_dict, _as_list(courses_raw)) if c],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.identifier,
            "name": self.name,
            "path": str(self.path),
            "role": self.role,
            "email": self.email,
            "superuser": self.superuser,
            "highlight_name": self.highlight_name,
            "interests": self.interests,
            "organizations": [{"name": o.name, "url": o.url} for o in self.organizations],
            "social": [
                {"icon": s.icon, "icon_pack": s.icon_pack, "link": s.link} for s in self.social
            ],
            "courses": [
                {"course": c.course, "institution": c.institution, "year": c.year}
                for c in self.courses
            ],
        }
