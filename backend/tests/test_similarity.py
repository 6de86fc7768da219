"""Tests for guess normalization and edit-distance similarity."""

import pytest
from crowdguess.similarity import (
    calculate_similarity,
    levenshtein_distance,
    normalize_guess,
)


# ── normalize_guess ───────────────────────────────────────────────────────

class TestNormalizeGuess:
    def test_lowercases(self):
        assert normalize_guess("JellyFish") == "jellyfish"

    def test_trims_outer_whitespace(self):
        assert normalize_guess("  house \t\n") == "house"

    def test_keeps_inner_whitespace_and_punctuation(self):
        assert normalize_guess(" Jelly  Fish! ") == "jelly  fish!"

    def test_keeps_accents(self):
        assert normalize_guess("Crème Brûlée") == "crème brûlée"

    def test_empty_string(self):
        assert normalize_guess("") == ""
        assert normalize_guess("   ") == ""

    @pytest.mark.parametrize("raw", ["House", "  a B c ", "", "ÉTÉ", "x\ty"])
    def test_idempotent(self, raw):
        once = normalize_guess(raw)
        assert normalize_guess(once) == once


# ── levenshtein_distance ──────────────────────────────────────────────────

class TestLevenshteinDistance:
    @pytest.mark.parametrize("a,b,expected", [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("house", "hous", 1),
        ("tree", "three", 1),
        ("flaw", "lawn", 2),
    ])
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_returns_plain_int(self):
        assert type(levenshtein_distance("cat", "cut")) is int


# ── calculate_similarity ──────────────────────────────────────────────────

class TestCalculateSimilarity:
    def test_one_deletion(self):
        assert calculate_similarity("house", "hous") == pytest.approx(80)

    def test_one_insertion(self):
        assert calculate_similarity("tree", "three") == pytest.approx(80)

    def test_both_empty_is_identical(self):
        assert calculate_similarity("", "") == 100

    def test_one_empty(self):
        assert calculate_similarity("house", "") == 0
        assert calculate_similarity("", "house") == 0

    def test_whitespace_only_counts_as_empty(self):
        assert calculate_similarity("   ", "house") == 0

    def test_case_and_padding_ignored(self):
        assert calculate_similarity("  HOUSE ", "house") == 100

    def test_no_common_characters(self):
        assert calculate_similarity("abc", "xyz") == 0

    @pytest.mark.parametrize("s", ["", "a", "jellyfish", "jelly fish", "ÉTÉ"])
    def test_identity(self, s):
        assert calculate_similarity(s, s) == 100

    @pytest.mark.parametrize("a,b", [
        ("jellyfish", "jely fish"),
        ("squid", "octopus"),
        ("house", ""),
        ("tree", "three"),
        ("a", "ab"),
    ])
    def test_symmetric_and_in_range(self, a, b):
        forward = calculate_similarity(a, b)
        assert forward == calculate_similarity(b, a)
        assert 0 <= forward <= 100

    def test_long_guesses(self):
        a = "a" * 90 + "bcdefghijk"
        b = "a" * 90 + "bcdefghijx"
        assert calculate_similarity(a, b) == pytest.approx(99)
