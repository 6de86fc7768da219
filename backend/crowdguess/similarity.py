"""Guess normalization and edit-distance similarity.

Guesses are compared on a lowercased, trimmed key. Internal whitespace,
punctuation and accents are kept as typed, so "jelly  fish" and "jelly fish"
are distinct keys; near-duplicates are caught by ``calculate_similarity``
instead.
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def normalize_guess(guess: str) -> str:
    """Lowercase and strip surrounding whitespace."""
    return guess.lower().strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Single-character insertions, deletions and substitutions turning *a* into *b*."""
    return int(Levenshtein.distance(a, b))


def calculate_similarity(a: str, b: str) -> float:
    """Return a 0–100 similarity percentage between two guesses.

    Both sides are normalized first. Equal keys (including two empty
    strings) score 100; a single empty side scores 0.
    """
    s1 = normalize_guess(a)
    s2 = normalize_guess(b)

    if s1 == s2:
        return 100.0
    if not s1 or not s2:
        return 0.0

    distance = levenshtein_distance(s1, s2)
    max_len = max(len(s1), len(s2))
    return (max_len - distance) / max_len * 100
