"""
Pluggable audit checks for content validation.

Provides a base class for audit checks and implementations for:
- front_matter: Front matter missing, malformed, or not a mapping
- duplicate_keys: Same key declared twice in one mapping
- required_fields: Missing title/date
- date_format: Invalid date, lastmod or publishDate
- author_refs: authors entries that match no author profile
- field_types: Wrong value types for common fields
- duplicate_terms: Repeated authors/tags/categories entries
- profile_fields: Malformed organizations/social/courses on author profiles
- image_fields: Malformed featured image settings
- bibliography: Bibliography files that do not exist
- render_drift: Pre-rendered output out of date with its source
- orphaned_content: Posts with no tags or categories
- internal_links: Broken markdown links in body
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from folio.content.document import ContentDocument, parse_date
from folio.core.config import DEFAULT_STATIC_PREFIXES, SiteSettings
from folio.taxonomy.terms import group_terms

if TYPE_CHECKING:
    from folio.authors.registry import AuthorRegistry


@dataclass
class CheckContext:
    """Context passed to audit checks.

    Provides access to site-wide data needed for validation.
    """

    site_root: Path
    authors: AuthorRegistry
    all_content_paths: set[str]  # Hugo paths like /post/slug/
    settings: SiteSettings = dataclass_field(default_factory=SiteSettings)

    @property
    def static_prefixes(self) -> tuple[str, ...]:
        return self.settings.static_prefixes or DEFAULT_STATIC_PREFIXES


@dataclass
class CheckIssue:
    """A single issue found by an audit check."""

    check_name: str
    message: str
    severity: str  # "error", "warning", "info"
    field: str | None = None
    extra: dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result: dict[str, Any] = {
            "check": self.check_name,
            "message": self.message,
            "severity": self.severity,
        }
        if self.field:
            result["field"] = self.field
        if self.extra:
            result["extra"] = self.extra
        return result


class AuditCheck(ABC):
    """Base class for pluggable audit checks."""

    name: str = "base"
    description: str = "Base audit check"
    default_severity: str = "warning"
    # Most checks only make sense on front matter that parsed
    needs_front_matter: bool = True

    @abstractmethod
    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        """Run the check on a content document.

        Args:
            doc: Content document to check
            ctx: Check context with site-wide data

        Returns:
            List of issues found (empty if none)
        """

    def issue(self, message: str, field: str | None = None, **extra: Any) -> CheckIssue:
        return CheckIssue(
            check_name=self.name,
            message=message,
            severity=self.default_severity,
            field=field,
            extra=extra,
        )

    def check_with_variants(
        self,
        doc: ContentDocument,
        check_one: Callable[[ContentDocument], list[CheckIssue]],
    ) -> list[CheckIssue]:
        """Run check_one on a document and on each of its parsed rendered variants.

        Issues found in a variant name the variant file in their message and
        carry its path under extra["variant"].
        """
        issues = check_one(doc)
        for variant in doc.variants:
            if not variant.is_valid:
                continue  # reported by front_matter
            for found in check_one(variant):
                found.message = f"{variant.path.name}: {found.message}"
                found.extra["variant"] = str(variant.path)
                issues.append(found)
        return issues


class FrontMatterCheck(AuditCheck):
    """Check that front matter exists and parses as key-value metadata."""

    name = "front_matter"
    description = "Check that front matter parses as a key-value mapping"
    default_severity = "error"
    needs_front_matter = False

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues = []
        if doc.error:
            issues.append(self.issue(doc.error))
        for variant in doc.variants:
            if variant.error:
                issues.append(
                    self.issue(f"{variant.path.name}: {variant.error}", variant=str(variant.path))
                )
        return issues


class DuplicateKeysCheck(AuditCheck):
    """Check for keys declared more than once in the same mapping."""

    name = "duplicate_keys"
    description = "Check for duplicate keys in front matter"
    default_severity = "error"

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        return self.check_with_variants(doc, self._check_keys)

    def _check_keys(self, doc: ContentDocument) -> list[CheckIssue]:
        return [
            self.issue(
                f"Duplicate key '{dup.key}' on line {dup.line} "
                f"(first defined on line {dup.first_line})",
                field=dup.key,
                **dup.to_dict(),
            )
            for dup in doc.duplicate_keys
        ]


class RequiredFieldsCheck(AuditCheck):
    """Check for missing required fields (title, date)."""

    name = "required_fields"
    description = "Check for missing title or date fields"
    default_severity = "error"

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        for field_name in ctx.settings.required_for(doc.kind):
            value = doc.front_matter.get(field_name)
            if value is None or value == "" or value == []:
                issues.append(
                    self.issue(f"Missing required field: {field_name}", field=field_name)
                )
        return issues


class DateFormatCheck(AuditCheck):
    """Check that date fields hold valid timestamps."""

    name = "date_format"
    description = "Check for invalid date, lastmod or publishDate"
    default_severity = "error"

    DATE_FIELDS = ("date", "lastmod", "publishDate", "expiryDate")

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        return self.check_with_variants(doc, self._check_dates)

    def _check_dates(self, doc: ContentDocument) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        for field_name in self.DATE_FIELDS:
            value = doc.front_matter.get(field_name)
            # RequiredFieldsCheck handles missing dates
            if value is None or value == "":
                continue
            if parse_date(value) is None:
                issues.append(
                    self.issue(
                        f"Invalid {field_name}: '{value}' (expected YYYY-MM-DD or RFC 3339)",
                        field=field_name,
                    )
                )
        return issues


class AuthorRefsCheck(AuditCheck):
    """Check that every authors entry resolves to an author profile."""

    name = "author_refs"
    description = "Check that authors entries resolve to author profiles"
    default_severity = "error"

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        raw = doc.front_matter.get("authors")
        if raw is None:
            return issues

        entries = raw if isinstance(raw, list) else [raw]
        for entry in entries:
            if not isinstance(entry, str) or not entry.strip():
                issues.append(
                    self.issue(f"Invalid author reference: {entry!r}", field="authors")
                )
                continue
            if ctx.authors.resolve(entry) is None:
                issues.append(
                    self.issue(
                        f"Author '{entry}' has no profile in content/authors/",
                        field="authors",
                        reference=entry,
                    )
                )
        return issues


class FieldTypesCheck(AuditCheck):
    """Check value types of common front matter fields."""

    name = "field_types"
    description = "Check that common fields have the expected value types"
    default_severity = "warning"

    STRING_FIELDS = ("title", "subtitle", "summary", "type", "email", "role")
    LIST_FIELDS = ("authors", "tags", "categories", "projects")
    BOOL_FIELDS = ("draft", "featured", "share", "profile", "superuser", "highlight_name")

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        fm = doc.front_matter

        for name in self.STRING_FIELDS:
            if name in fm and fm[name] is not None and not isinstance(fm[name], str):
                issues.append(
                    self.issue(
                        f"Field '{name}' should be a string, got {type(fm[name]).__name__}",
                        field=name,
                    )
                )

        for name in self.LIST_FIELDS:
            if name not in fm or fm[name] is None:
                continue
            value = fm[name]
            if not isinstance(value, list):
                issues.append(
                    self.issue(
                        f"Field '{name}' should be a list, got {type(value).__name__}",
                        field=name,
                    )
                )
            elif not all(isinstance(v, str) for v in value):
                issues.append(self.issue(f"Field '{name}' should only hold strings", field=name))

        for name in self.BOOL_FIELDS:
            if name in fm and fm[name] is not None and not isinstance(fm[name], bool):
                issues.append(
                    self.issue(f"Field '{name}' should be true or false, got {fm[name]!r}", field=name)
                )

        bib = fm.get("bibliography")
        if bib is not None and not isinstance(bib, (str, list)):
            issues.append(
                self.issue("Field 'bibliography' should be a file path or list of paths", field="bibliography")
            )

        return issues


class DuplicateTermsCheck(AuditCheck):
    """Check for repeated entries in set-valued fields.

    Entries that differ only in case or separators ("Mixed Models",
    "mixed-models") count as the same entry.
    """

    name = "duplicate_terms"
    description = "Check for repeated authors, tags or categories"
    default_severity = "warning"

    SET_FIELDS = ("authors", "tags", "categories")

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        for name in self.SET_FIELDS:
            value = doc.front_matter.get(name)
            if not isinstance(value, list):
                continue
            groups = group_terms(v for v in value if isinstance(v, str))
            for key, entries in sorted(groups.items()):
                if len(entries) < 2:
                    continue
                spellings = list(dict.fromkeys(entries))
                if len(spellings) == 1:
                    message = f"'{spellings[0]}' listed {len(entries)} times in {name}"
                else:
                    quoted = ", ".join(f"'{s}'" for s in spellings)
                    message = f"Near-duplicate entries in {name}: {quoted}"
                issues.append(self.issue(message, field=name, term=key, spellings=spellings))
        return issues


class ProfileFieldsCheck(AuditCheck):
    """Check the structured fields of author profiles."""

    name = "profile_fields"
    description = "Check organizations, social, education and email on author profiles"
    default_severity = "warning"

    ICON_PACKS = {"fab", "fas", "far", "fal", "ai", "emoji", "custom"}
    EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        if doc.kind != "authors":
            return []

        fm = doc.front_matter
        issues: list[CheckIssue] = []
        issues.extend(self._check_organizations(fm.get("organizations")))
        issues.extend(self._check_social(fm.get("social")))

        education = fm.get("education")
        if education is not None:
            if not isinstance(education, dict):
                issues.append(self.issue("education should be a mapping", field="education"))
            else:
                issues.extend(self._check_courses(education.get("courses")))

        email = fm.get("email")
        if isinstance(email, str) and email and not self.EMAIL_RE.match(email):
            issues.append(self.issue(f"Invalid email address: '{email}'", field="email"))

        if fm.get("superuser") is True:
            owners = [p.identifier for p in ctx.authors.superusers()]
            if len(owners) > 1:
                issues.append(
                    self.issue(
                        f"Multiple authors marked superuser: {', '.join(owners)}",
                        field="superuser",
                        superusers=owners,
                    )
                )
        return issues

    def _entries(self, value: Any, field_name: str) -> tuple[list[Any], list[CheckIssue]]:
        if value is None:
            return [], []
        if not isinstance(value, list):
            return [], [self.issue(f"{field_name} should be a list", field=field_name)]
        return value, []

    def _check_organizations(self, value: Any) -> list[CheckIssue]:
        entries, issues = self._entries(value, "organizations")
        for i, org in enumerate(entries):
            if not isinstance(org, dict) or not org.get("name"):
                issues.append(
                    self.issue(f"organizations[{i}] is missing a name", field="organizations")
                )
                continue
            url = org.get("url")
            if url and not str(url).startswith(("http://", "https://")):
                issues.append(
                    self.issue(f"organizations[{i}] url is not absolute: '{url}'", field="organizations")
                )
        return issues

    def _check_social(self, value: Any) -> list[CheckIssue]:
        entries, issues = self._entries(value, "social")
        for i, link in enumerate(entries):
            if not isinstance(link, dict):
                issues.append(self.issue(f"social[{i}] should be a mapping", field="social"))
                continue
            for key in ("icon", "link"):
                if not link.get(key):
                    issues.append(self.issue(f"social[{i}] is missing {key}", field="social"))
            pack = link.get("icon_pack")
            if pack and pack not in self.ICON_PACKS:
                issues.append(
                    self.issue(f"social[{i}] has unknown icon_pack '{pack}'", field="social")
                )
        return issues

    def _check_courses(self, value: Any) -> list[CheckIssue]:
        entries, issues = self._entries(value, "education.courses")
        for i, course in enumerate(entries):
            if not isinstance(course, dict):
                issues.append(
                    self.issue(f"education.courses[{i}] should be a mapping", field="education.courses")
                )
                continue
            for key in ("course", "institution", "year"):
                if not course.get(key):
                    issues.append(
                        self.issue(f"education.courses[{i}] is missing {key}", field="education.courses")
                    )
            year = course.get("year")
            if year and not re.fullmatch(r"\d{4}", str(year)):
                issues.append(
                    self.issue(f"education.courses[{i}] year is not a year: '{year}'", field="education.courses")
                )
        return issues


class ImageFieldsCheck(AuditCheck):
    """Check featured image settings."""

    name = "image_fields"
    description = "Check image caption, focal_point and preview_only"
    default_severity = "warning"

    FOCAL_POINTS = {
        "Smart", "Center", "TopLeft", "Top", "TopRight",
        "Left", "Right", "BottomLeft", "Bottom", "BottomRight",
    }

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        image = doc.front_matter.get("image")
        if image is None:
            return []
        if not isinstance(image, dict):
            return [self.issue("image should be a mapping", field="image")]

        issues: list[CheckIssue] = []
        focal = image.get("focal_point")
        if focal and focal not in self.FOCAL_POINTS:
            issues.append(
                self.issue(
                    f"Unknown image focal_point '{focal}' "
                    f"(expected one of {', '.join(sorted(self.FOCAL_POINTS))})",
                    field="image.focal_point",
                )
            )
        preview_only = image.get("preview_only")
        if preview_only is not None and not isinstance(preview_only, bool):
            issues.append(
                self.issue("image.preview_only should be true or false", field="image.preview_only")
            )
        caption = image.get("caption")
        if caption is not None and not isinstance(caption, str):
            issues.append(self.issue("image.caption should be a string", field="image.caption"))
        return issues


class BibliographyCheck(AuditCheck):
    """Check that referenced bibliography files exist."""

    name = "bibliography"
    description = "Check that bibliography files exist"
    default_severity = "warning"

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        for ref in doc.bibliography:
            candidates = [doc.path.parent / ref, ctx.site_root / ref.lstrip("/")]
            if not any(c.is_file() for c in candidates):
                issues.append(
                    self.issue(f"Bibliography file not found: '{ref}'", field="bibliography", reference=ref)
                )
        return issues


class RenderDriftCheck(AuditCheck):
    """Check that pre-rendered outputs match the front matter of their source."""

    name = "render_drift"
    description = "Check that rendered output matches its source front matter"
    default_severity = "warning"

    COMPARED_FIELDS = ("title", "date", "authors", "summary")

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        issues: list[CheckIssue] = []
        for variant in doc.variants:
            if not variant.is_valid:
                continue  # reported by front_matter
            for name in self.COMPARED_FIELDS:
                if not self._same(name, doc.front_matter.get(name), variant.front_matter.get(name)):
                    issues.append(
                        self.issue(
                            f"{variant.path.name} is out of date with {doc.path.name}: {name} differs",
                            field=name,
                            variant=str(variant.path),
                        )
                    )
        return issues

    @staticmethod
    def _same(name: str, source: Any, rendered: Any) -> bool:
        if name == "date":
            source_date, rendered_date = parse_date(source), parse_date(rendered)
            if source_date and rendered_date:
                return source_date.replace(tzinfo=None) == rendered_date.replace(tzinfo=None)
        return source == rendered


class OrphanedContentCheck(AuditCheck):
    """Check for posts with no tags or categories."""

    name = "orphaned_content"
    description = "Check for posts without tags or categories"
    default_severity = "info"

    KINDS = ("post",)

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        if doc.kind not in self.KINDS:
            return []
        if doc.tags or doc.categories:
            return []
        return [self.issue("Content has no tags or categories")]


class InternalLinksCheck(AuditCheck):
    """Check for broken internal markdown links in body."""

    name = "internal_links"
    description = "Check for broken internal markdown links"
    default_severity = "warning"

    TAXONOMIES = ("tags", "categories")

    def check(self, doc: ContentDocument, ctx: CheckContext) -> list[CheckIssue]:
        return [
            self.issue(f"Broken internal link: '{link}'", link=link)
            for link in doc.extract_internal_links()
            if not self._is_valid_link(link, ctx)
        ]

    def _is_valid_link(self, link: str, ctx: CheckContext) -> bool:
        """Check if an internal link is valid."""
        if any(link.startswith(prefix) for prefix in ctx.static_prefixes):
            return True

        # Strip anchors and query strings
        path = re.split(r"[#?]", link, maxsplit=1)[0]
        if not path or path == "/":
            return True

        path = path.rstrip("/")
        if not path.startswith("/"):
            path = "/" + path
        path = path + "/"

        if path in ctx.all_content_paths:
            return True

        # List pages generated by Hugo: sections, taxonomy terms, author pages
        parts = path.strip("/").split("/")
        if len(parts) == 1:
            return parts[0] in ctx.settings.sections or parts[0] in self.TAXONOMIES
        if len(parts) == 2 and parts[0] in self.TAXONOMIES:
            return True
        return len(parts) == 2 and parts[0] == "authors" and parts[1] in ctx.authors


# Registry of all available checks
AVAILABLE_CHECKS: dict[str, type[AuditCheck]] = {
    "front_matter": FrontMatterCheck,
    "duplicate_keys": DuplicateKeysCheck,
    "required_fields": RequiredFieldsCheck,
    "date_format": DateFormatCheck,
    "author_refs": AuthorRefsCheck,
    "field_types": FieldTypesCheck,
    "duplicate_terms": DuplicateTermsCheck,
    "profile_fields": ProfileFieldsCheck,
    "image_fields": ImageFieldsCheck,
    "bibliography": BibliographyCheck,
    "render_drift": RenderDriftCheck,
    "orphaned_content": OrphanedContentCheck,
    "internal_links": InternalLinksCheck,
}


def get_check(name: str) -> AuditCheck | None:
    """Get an audit check instance by name."""
    check_class = AVAILABLE_CHECKS.get(name)
    if check_class:
        return check_class()
    return None


def get_all_checks() -> list[AuditCheck]:
    """Get instances of all available checks."""
    return [cls() for cls in AVAILABLE_CHECKS.values()]


def list_checks() -> list[dict[str, str]]:
    """List all available checks with metadata."""
    return [
        {
            "name": name,
            "description": cls.description,
            "severity": cls.default_severity,
        }
        for name, cls in AVAILABLE_CHECKS.items()
    ]
