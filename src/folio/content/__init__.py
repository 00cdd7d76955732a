"""
Content model for the Hugo site.

Provides tools for:
- Parsing front matter strictly (duplicate keys, non-mapping blocks)
- Scanning content sections into ContentDocument records
- Auditing documents with pluggable checks
"""

from folio.content.document import AuthorProfile, ContentDocument, parse_date
from folio.content.frontmatter import FrontMatterError, parse_front_matter
from folio.content.scanner import ContentScanner
from folio.content.auditor import AuditIssue, AuditResult, ContentAuditor

__all__ = [
    "AuthorProfile",
    "ContentDocument",
    "parse_date",
    "FrontMatterError",
    "parse_front_matter",
    "ContentScanner",
    "ContentAuditor",
    "AuditResult",
    "AuditIssue",
]
