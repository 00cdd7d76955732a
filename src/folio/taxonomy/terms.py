"""Normalisation of set-valued front matter entries (tags, categories, authors).

Two entries are near-duplicates when they share a term key, or when one
key is the other with an English plural suffix.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_SEPARATORS = re.compile(r"[\s_-]+")
PLURAL_SUFFIXES = ("s", "es")


def term_key(term: str) -> str:
    """Case-folded form with runs of spaces, hyphens and underscores as one hyphen."""
    return _SEPARATORS.sub("-", term.strip().casefold()).strip("-")


def near_duplicate_reason(a: str, b: str) -> str | None:
    """Why two distinct terms look like the same term, or None."""
    if a == b:
        return None

    key_a, key_b = term_key(a), term_key(b)
    if key_a == key_b:
        if a.casefold() == b.casefold():
            return "case_mismatch"
        if a.casefold().replace("_", "-") == b.casefold().replace("_", "-"):
            return "underscore_hyphen"
        return "hyphen_space"

    shorter, longer = sorted((key_a, key_b), key=len)
    if any(shorter + suffix == longer for suffix in PLURAL_SUFFIXES):
        return "plural"
    return None


def group_terms(terms: Iterable[str]) -> dict[str, list[str]]:
    """Group terms by term key, keeping first-seen order within a group."""
    groups: dict[str, list[str]] = {}
    for term in terms:
        groups.setdefault(term_key(term), []).append(term)
    return groups


def near_duplicate_pairs(terms: Iterable[str]) -> list[tuple[str, str, str]]:
    """All (a, b, reason) near-duplicate pairs among distinct terms, a < b."""
    groups = group_terms(sorted(set(terms)))
    candidates: list[tuple[str, str]] = []

    for members in groups.values():
        candidates.extend(
            (a, b) for i, a in enumerate(members) for b in members[i + 1:]
        )
    for key, members in groups.items():
        for suffix in PLURAL_SUFFIXES:
            for other in groups.get(key + suffix, []):
                candidates.extend((min(t, other), max(t, other)) for t in members)

    pairs = []
    for a, b in sorted(set(candidates)):
        reason = near_duplicate_reason(a, b)
        if reason:
            pairs.append((a, b, reason))
    return pairs
