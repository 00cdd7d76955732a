"""
Hugo content scanner.

Scans Hugo content sections and parses front matter and body of every
content document, grouping source files with their pre-rendered outputs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from folio.content.document import SOURCE_FORMATS, ContentDocument
from folio.content.frontmatter import FrontMatterError, has_front_matter, parse_front_matter
from folio.core.config import get_paths, load_site_settings

logger = logging.getLogger(__name__)

# File suffix (lowercased) -> source format name
EXTENSIONS = {
    ".md": "md",
    ".markdown": "markdown",
    ".rmd": "Rmd",
    ".rmarkdown": "Rmarkdown",
    ".html": "html",
}

BUNDLE_INDEX_STEMS = ("index", "_index")


def _format_rank(doc: ContentDocument) -> int:
    return SOURCE_FORMATS.index(doc.source_format)


class ContentScanner:
    """Scans Hugo content sections."""

    def __init__(
        self,
        site_root: Path | None = None,
        sections: dict[str, str] | None = None,
    ):
        """Initialize scanner.

        Args:
            site_root: Hugo site root directory (auto-detected if not provided)
            sections: Content kind -> directory relative to the site root
                (read from site settings if not provided)
        """
        if site_root is None:
            site_root = get_paths().root
        self.site_root = Path(site_root)
        if sections is None:
            sections = load_site_settings(self.site_root).sections
        self.sections = dict(sections)
        self._cache: dict[str, ContentDocument] = {}

    def scan_all(self, include_drafts: bool = False) -> list[ContentDocument]:
        """Scan all content sections."""
        docs = []
        for kind in self.sections:
            docs.extend(self.scan_type(kind, include_drafts=include_drafts))
        return docs

    def scan_type(self, kind: str, include_drafts: bool = False) -> list[ContentDocument]:
        """Scan a single content section.

        Args:
            kind: Section like 'post', 'project', 'authors'
            include_drafts: Include draft content

        Returns:
            Primary documents of the section, sorted by path
        """
        if kind not in self.sections:
            logger.warning("Unknown content type: %s", kind)
            return []

        directory = self.site_root / self.sections[kind]
        if not directory.is_dir():
            return []

        docs = []
        for doc in self._scan_directory(directory, kind):
            if include_drafts or not doc.is_draft:
                docs.append(doc)
                self._cache[str(doc.path)] = doc
                for variant in doc.variants:
                    self._cache[str(variant.path)] = variant
        return docs

    def _candidate_files(self, directory: Path, kind: str) -> list[Path]:
        """List content files of a section, skipping bundle resources."""
        # Top-level pages live directly in content/, next to the sections
        pattern = directory.glob("*") if kind == "page" else directory.rglob("*")

        files = []
        for path in pattern:
            if path.is_symlink() or not path.is_file():
                continue
            if path.name.startswith("."):
                continue
            if path.suffix.lower() not in EXTENSIONS:
                continue
            # The section's own list page is not a document
            if path.parent == directory and path.stem == "_index":
                continue
            files.append(path)

        # Leaf bundles: any other file under a directory holding index.* is a resource
        leaf_dirs = {p.parent for p in files if p.stem == "index"}
        kept = []
        for path in files:
            if path.stem == "index":
                kept.append(path)
                continue
            if any(parent in leaf_dirs for parent in path.parents):
                logger.debug("Skipping bundle resource %s", path)
                continue
            kept.append(path)
        return sorted(kept)

    def _scan_directory(self, directory: Path, kind: str) -> Iterator[ContentDocument]:
        """Scan a section directory for content documents.

        Handles leaf bundles (slug/index.*), branch bundles (slug/_index.*)
        and single files (slug.*). Files sharing a slug in one directory are
        formats of the same document.
        """
        groups: dict[tuple[Path, str], list[ContentDocument]] = {}

        for path in self._candidate_files(directory, kind):
            fmt = EXTENSIONS[path.suffix.lower()]
            slug = path.parent.name if path.stem in BUNDLE_INDEX_STEMS else path.stem

            doc = self._parse_file(path, slug, kind, fmt)
            if doc is None:
                continue
            groups.setdefault((path.parent, slug), []).append(doc)

        for docs in groups.values():
            docs.sort(key=_format_rank)
            primary, *variants = docs
            primary.variants = variants
            yield primary

    def _parse_file(
        self, path: Path, slug: str, kind: str, fmt: str
    ) -> ContentDocument | None:
        """Parse a single content file.

        Returns:
            ContentDocument (with error set if parsing failed), or None for
            html files without front matter
        """
        doc = ContentDocument(path=path, slug=slug, kind=kind, source_format=fmt)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read %s: %s", path, e)
            doc.error = f"Could not read file: {e}"
            return doc

        # Plain html files are static includes, not documents
        if fmt == "html" and not has_front_matter(text):
            logger.debug("Skipping html without front matter %s", path)
            return None

        try:
            parsed = parse_front_matter(text, path=path)
        except FrontMatterError as e:
            logger.debug("Failed to parse %s: %s", path, e.message)
            doc.error = e.message
            doc.body = text
            return doc

        doc.front_matter = parsed.metadata
        doc.body = parsed.body
        doc.duplicate_keys = parsed.duplicates
        return doc

    def get_by_path(self, path: str | Path) -> ContentDocument | None:
        """Get a document by its file path."""
        path = Path(path)
        if not path.is_absolute():
            path = self.site_root / path
        path_str = str(path)
        if path_str in self._cache:
            return self._cache[path_str]

        if not path.exists():
            return None

        # Scan the section the file belongs to, then look it up again
        for kind, rel_path in self.sections.items():
            section_dir = self.site_root / rel_path
            if kind == "page":
                if path.parent != section_dir:
                    continue
            elif not path.is_relative_to(section_dir):
                continue
            self.scan_type(kind, include_drafts=True)
            if path_str in self._cache:
                return self._cache[path_str]
        return None

    def find(self, ref: str) -> ContentDocument | None:
        """Find a document by path, Hugo path (/post/slug/), kind/slug or slug."""
        doc = self.get_by_path(ref)
        if doc is not None:
            return doc

        wanted = ref.strip("/")
        for doc in self.scan_all(include_drafts=True):
            if wanted in (doc.slug, doc.hugo_path.strip("/")):
                return doc
        return None

    def stats(self) -> dict[str, Any]:
        """Get content statistics."""
        docs = self.scan_all(include_drafts=True)

        by_kind: dict[str, int] = {}
        drafts = 0
        failed = 0
        variants = 0

        for doc in docs:
            by_kind[doc.kind] = by_kind.get(doc.kind, 0) + 1
            if doc.is_draft:
                drafts += 1
            if not doc.is_valid:
                failed += 1
            variants += len(doc.variants)

        return {
            "total": len(docs),
            "by_kind": by_kind,
            "drafts": drafts,
            "published": len(docs) - drafts,
            "parse_failures": failed,
            "rendered_variants": variants,
        }
