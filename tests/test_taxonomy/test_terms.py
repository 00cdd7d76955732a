"""Tests for term normalisation."""

from __future__ import annotations

import pytest

from folio.taxonomy.terms import group_terms, near_duplicate_pairs, near_duplicate_reason, term_key


@pytest.mark.parametrize(
    "term, key",
    [
        ("Bayesian", "bayesian"),
        ("Mixed Models", "mixed-models"),
        ("mixed_models", "mixed-models"),
        ("  mixed -- models ", "mixed-models"),
        ("-R-", "r"),
    ],
)
def test_term_key(term, key):
    assert term_key(term) == key


@pytest.mark.parametrize(
    "a, b, reason",
    [
        ("Bayesian", "bayesian", "case_mismatch"),
        ("mixed-models", "mixed models", "hyphen_space"),
        ("mixed_models", "mixed-models", "underscore_hyphen"),
        ("model", "models", "plural"),
        ("Class", "classes", "plural"),
        ("R", "R", None),
        ("R", "rust", None),
        ("stan", "stats", None),
    ],
)
def test_near_duplicate_reason(a, b, reason):
    assert near_duplicate_reason(a, b) == reason
    assert near_duplicate_reason(b, a) == reason


def test_group_terms_keeps_first_seen_order():
    assert group_terms(["R", "stats", "r", "R"]) == {"r": ["R", "r", "R"], "stats": ["stats"]}


def test_near_duplicate_pairs():
    pairs = near_duplicate_pairs(["Model", "model", "models", "stan", "model"])
    assert pairs == [
        ("Model", "model", "case_mismatch"),
        ("Model", "models", "plural"),
        ("model", "models", "plural"),
    ]


def test_near_duplicate_pairs_empty():
    assert near_duplicate_pairs([]) == []
