"""Taxonomy usage across the site's content documents.

Terms are tracked per taxonomy with the documents that use them, so every
report can point at the pages (by Hugo path) rather than bare slugs, which
repeat across sections.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from pathlib import Path
from typing import Any

from folio.content.document import ContentDocument
from folio.content.scanner import ContentScanner
from folio.taxonomy.terms import near_duplicate_pairs

TAXONOMIES = ("tags", "categories")

# Author profiles carry interests, not taxonomy terms
EXCLUDED_KINDS = ("authors",)


def _terms(doc: ContentDocument, taxonomy: str) -> list[str]:
    """Distinct terms of one document, in front matter order."""
    values = doc.tags if taxonomy == "tags" else doc.categories
    return list(dict.fromkeys(values))


@dataclass
class TaxonomyData:
    """Documents using each term, per taxonomy."""

    documents: list[ContentDocument] = field(default_factory=list)
    usage: dict[str, dict[str, list[ContentDocument]]] = field(
        default_factory=lambda: {t: {} for t in TAXONOMIES}
    )

    def add(self, doc: ContentDocument) -> None:
        self.documents.append(doc)
        for taxonomy in TAXONOMIES:
            for term in _terms(doc, taxonomy):
                self.usage[taxonomy].setdefault(term, []).append(doc)

    def counts(self, taxonomy: str) -> dict[str, int]:
        return {term: len(docs) for term, docs in self.usage[taxonomy].items()}

    def paths(self, taxonomy: str, term: str) -> list[str]:
        """Hugo paths of the documents using a term."""
        return [doc.hugo_path for doc in self.usage[taxonomy].get(term, [])]


class TaxonomyAnalyzer:
    """Analyzes tag and category usage."""

    def __init__(self, site_root: Path | None = None, scanner: ContentScanner | None = None):
        self.scanner = scanner or ContentScanner(site_root)

    def collect(
        self,
        content_types: list[str] | None = None,
        include_drafts: bool = False,
    ) -> TaxonomyData:
        """Scan content and index its terms.

        Args:
            content_types: Kinds to scan (default: every section but authors)
            include_drafts: Include draft content

        Returns:
            TaxonomyData. A term repeated within one document counts once.
        """
        if content_types is None:
            content_types = [k for k in self.scanner.sections if k not in EXCLUDED_KINDS]

        data = TaxonomyData()
        for kind in content_types:
            for doc in self.scanner.scan_type(kind, include_drafts=include_drafts):
                if doc.is_valid:
                    data.add(doc)
        return data

    def find_duplicates(self, data: TaxonomyData, taxonomy: str = "tags") -> list[dict[str, Any]]:
        """Find near-duplicate terms within one taxonomy.

        Returns:
            One dict per pair: taxonomy, terms, reason, counts and the Hugo
            paths of the documents using each term.
        """
        counts = data.counts(taxonomy)
        return [
            {
                "taxonomy": taxonomy,
                "terms": [a, b],
                "reason": reason,
                "counts": {a: counts[a], b: counts[b]},
                "documents": {a: data.paths(taxonomy, a), b: data.paths(taxonomy, b)},
            }
            for a, b, reason in near_duplicate_pairs(counts)
        ]

    def find_orphans(self, data: TaxonomyData, min_count: int = 2) -> dict[str, list[dict[str, Any]]]:
        """Find terms used by fewer than min_count documents.

        Returns:
            Per taxonomy, a list of {term, count, documents} sorted by term.
        """
        orphans: dict[str, list[dict[str, Any]]] = {}
        for taxonomy in TAXONOMIES:
            counts = data.counts(taxonomy)
            orphans[taxonomy] = [
                {"term": term, "count": count, "documents": data.paths(taxonomy, term)}
                for term, count in sorted(counts.items())
                if count < min_count
            ]
        return orphans

    def get_stats(self, data: TaxonomyData, limit: int = 0) -> dict[str, Any]:
        """Term frequencies, tag co-occurrence and totals.

        Args:
            data: Collected taxonomy data
            limit: Max terms per taxonomy (0 = all)
        """
        stats: dict[str, Any] = {}
        for taxonomy in TAXONOMIES:
            ranked = Counter(data.counts(taxonomy))
            ordered = sorted(ranked.items(), key=lambda item: (-item[1], item[0]))
            stats[taxonomy] = ordered[:limit] if limit else ordered

        pairs: Counter[tuple[str, str]] = Counter()
        for doc in data.documents:
            pairs.update(combinations(sorted(_terms(doc, "tags")), 2))
        stats["co_occurrences"] = sorted(pairs.items(), key=lambda item: (-item[1], item[0]))

        tag_counts = data.counts("tags")
        stats["totals"] = {
            "total_tags": len(tag_counts),
            "total_categories": len(data.usage["categories"]),
            "total_tag_usages": sum(tag_counts.values()),
        }
        return stats
