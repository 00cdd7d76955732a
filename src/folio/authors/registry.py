"""
Author profile registry.

Author profiles live in content/authors/<id>/_index.md. Content refers to
them through its `authors` list, either by identifier ("admin") or by a
display name that urlizes to the identifier ("Jane Doe" -> "jane-doe").
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from folio.content.document import AuthorProfile, ContentDocument
from folio.content.scanner import ContentScanner

AUTHORS_KIND = "authors"


def urlize(name: str) -> str:
    """Convert an author name to the identifier Hugo would look up."""
    slug = re.sub(r"\s+", "-", name.strip().lower())
    return re.sub(r"[^\w-]", "", slug)


class AuthorRegistry:
    """Known author profiles, keyed by identifier."""

    def __init__(self, profiles: Iterable[AuthorProfile] = ()):
        self._profiles: dict[str, AuthorProfile] = {p.identifier: p for p in profiles}

    @classmethod
    def from_documents(cls, docs: Iterable[ContentDocument]) -> AuthorRegistry:
        """Build a registry from author profile documents.

        Documents that are not author profiles or failed to parse are ignored.
        """
        return cls(
            AuthorProfile.from_document(doc)
            for doc in docs
            if doc.kind == AUTHORS_KIND and doc.is_valid
        )

    @classmethod
    def from_site(
        cls, site_root: Path | None = None, scanner: ContentScanner | None = None
    ) -> AuthorRegistry:
        """Scan the site's authors section and build a registry."""
        if scanner is None:
            scanner = ContentScanner(site_root)
        return cls.from_documents(scanner.scan_type(AUTHORS_KIND, include_drafts=True))

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._profiles

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._profiles))

    def __len__(self) -> int:
        return len(self._profiles)

    def get(self, identifier: str) -> AuthorProfile | None:
        return self._profiles.get(identifier)

    def profiles(self) -> list[AuthorProfile]:
        return [self._profiles[i] for i in self]

    def resolve(self, ref: str) -> AuthorProfile | None:
        """Resolve an author reference to a profile.

        Args:
            ref: Identifier or display name as written in front matter

        Returns:
            The matching AuthorProfile, or None if it does not resolve
        """
        ref = str(ref)
        if ref in self._profiles:
            return self._profiles[ref]
        return self._profiles.get(urlize(ref))

    def superusers(self) -> list[AuthorProfile]:
        """Profiles marked as site owner."""
        return [p for p in self.profiles() if p.superuser]

    def references(
        self, docs: Iterable[ContentDocument]
    ) -> dict[str, list[ContentDocument]]:
        """Map each author identifier to the documents that reference it.

        Every known author gets an entry, even with no documents.
        """
        refs: dict[str, list[ContentDocument]] = {i: [] for i in self}
        for doc in docs:
            if doc.kind == AUTHORS_KIND:
                continue
            seen: set[str] = set()
            for ref in doc.authors:
                profile = self.resolve(ref)
                if profile and profile.identifier not in seen:
                    seen.add(profile.identifier)
                    refs[profile.identifier].append(doc)
        return refs
