"""
Content auditor.

Runs the pluggable audit checks over every content document of the site
and aggregates the issues they report.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from folio.content.audit_checks import AuditCheck, CheckContext, get_all_checks, get_check
from folio.content.scanner import ContentScanner
from folio.core.config import SiteSettings, get_paths, load_site_settings

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}


@dataclass
class AuditIssue:
    """An issue found in one content document."""

    path: Path
    title: str
    kind: str
    check_name: str
    message: str
    severity: str
    field_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result: dict[str, Any] = {
            "path": str(self.path),
            "title": self.title,
            "kind": self.kind,
            "check": self.check_name,
            "message": self.message,
            "severity": self.severity,
        }
        if self.field_name:
            result["field"] = self.field_name
        if self.extra:
            result["extra"] = self.extra
        return result


@dataclass
class AuditResult:
    """Result of an audit run."""

    content_checked: int = 0
    content_with_issues: int = 0
    checks_run: list[str] = field(default_factory=list)
    issues: list[AuditIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "content_checked": self.content_checked,
            "content_with_issues": self.content_with_issues,
            "checks_run": self.checks_run,
            "issues": [i.to_dict() for i in self.issues],
            "by_check": self.group_by_check(),
            "by_severity": self.group_by_severity(),
        }

    def group_by_check(self) -> dict[str, int]:
        """Count issues per check name."""
        counts: dict[str, int] = {}
        for issue in self.issues:
            counts[issue.check_name] = counts.get(issue.check_name, 0) + 1
        return counts

    def group_by_severity(self) -> dict[str, int]:
        """Count issues per severity."""
        counts: dict[str, int] = {}
        for issue in self.issues:
            counts[issue.severity] = counts.get(issue.severity, 0) + 1
        return counts

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def errors(self) -> list[AuditIssue]:
        return [i for i in self.issues if i.severity == "error"]

    def warnings(self) -> list[AuditIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def infos(self) -> list[AuditIssue]:
        return [i for i in self.issues if i.severity == "info"]

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)


class ContentAuditor:
    """Audits Hugo content documents."""

    def __init__(self, site_root: Path | None = None, settings: SiteSettings | None = None):
        """Initialize auditor.

        Args:
            site_root: Hugo site root directory (auto-detected if not provided)
            settings: Site settings (read from .folio/config.yaml if not provided)
        """
        if site_root is None:
            site_root = get_paths().root
        self.site_root = Path(site_root)
        self.settings = settings if settings is not None else load_site_settings(self.site_root)
        self.scanner = ContentScanner(self.site_root, sections=self.settings.sections)

    @property
    def content_types(self) -> list[str]:
        return list(self.settings.sections)

    def build_check_context(self) -> CheckContext:
        """Build the site-wide context shared by all checks.

        Drafts are included so that links and author references to them
        still resolve.
        """
        from folio.authors.registry import AuthorRegistry

        all_docs = self.scanner.scan_all(include_drafts=True)
        return CheckContext(
            site_root=self.site_root,
            authors=AuthorRegistry.from_documents(all_docs),
            all_content_paths={doc.hugo_path for doc in all_docs},
            settings=self.settings,
        )

    def select_checks(self, check_names: list[str] | None = None) -> list[AuditCheck]:
        """Resolve check names to instances, skipping disabled and unknown ones."""
        if not check_names:
            checks = get_all_checks()
        else:
            checks = []
            for name in check_names:
                check = get_check(name.strip())
                if check is None:
                    logger.warning("Unknown audit check: %s", name)
                    continue
                checks.append(check)
        return [c for c in checks if c.name not in self.settings.disabled_checks]

    def run_checks(
        self,
        content_types: tuple[str, ...] | list[str] | None = None,
        include_drafts: bool = False,
        check_names: list[str] | None = None,
        min_severity: str | None = None,
    ) -> AuditResult:
        """Run audit checks on content.

        Args:
            content_types: Content kinds to audit (None = all sections)
            include_drafts: Include drafts in audit
            check_names: Specific checks to run (None = all)
            min_severity: Minimum severity to report ("error", "warning", "info")

        Returns:
            AuditResult with all issues found
        """
        if not content_types:
            content_types = self.content_types

        checks = self.select_checks(check_names)
        ctx = self.build_check_context()
        min_rank = SEVERITY_ORDER.get(min_severity or "info", 2)

        result = AuditResult(checks_run=[c.name for c in checks])

        for kind in content_types:
            for doc in self.scanner.scan_type(kind, include_drafts=include_drafts):
                result.content_checked += 1
                doc_issues: list[AuditIssue] = []

                for check in checks:
                    if check.needs_front_matter and not doc.is_valid:
                        continue
                    for ci in check.check(doc, ctx):
                        if SEVERITY_ORDER.get(ci.severity, 2) > min_rank:
                            continue
                        doc_issues.append(
                            AuditIssue(
                                path=doc.path,
                                title=doc.title,
                                kind=doc.kind,
                                check_name=ci.check_name,
                                message=ci.message,
                                severity=ci.severity,
                                field_name=ci.field,
                                extra=ci.extra,
                            )
                        )

                result.issues.extend(doc_issues)
                if doc_issues:
                    result.content_with_issues += 1

        logger.debug(
            "Audited %d documents with %d checks: %d issues",
            result.content_checked,
            len(checks),
            len(result.issues),
        )
        return result
