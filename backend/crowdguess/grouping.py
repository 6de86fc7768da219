"""Fuzzy grouping of near-duplicate guess spellings."""

from __future__ import annotations

from dataclasses import dataclass, field

from . import config
from .similarity import calculate_similarity


@dataclass
class GuessVariant:
    guess: str
    count: int


@dataclass
class GroupedGuess:
    primary_guess: str
    combined_count: int
    variants: list[GuessVariant] = field(default_factory=list)  # primary first


def group_similar_guesses(
    guesses: dict[str, int],
    threshold: float = config.SIMILARITY_THRESHOLD,
) -> list[GroupedGuess]:
    """Partition a guess → count mapping into groups of similar spellings.

    Guesses are visited by count, highest first, so the most common spelling
    anchors its group. Each unassigned guess is compared to the anchor only
    (single pass): a guess close to a later member but not to the anchor
    stays out and may anchor its own group.

    The returned groups are in anchor order, not sorted by combined count.
    """
    # sorted() is stable: equal counts keep mapping order
    ordered = sorted(guesses.items(), key=lambda item: item[1], reverse=True)

    grouped: list[GroupedGuess] = []
    assigned: set[str] = set()

    for anchor, anchor_count in ordered:
        if anchor in assigned:
            continue
        assigned.add(anchor)
        group = GroupedGuess(
            primary_guess=anchor,
            combined_count=anchor_count,
            variants=[GuessVariant(anchor, anchor_count)],
        )

        for other, other_count in ordered:
            if other in assigned:
                continue
            if calculate_similarity(anchor, other) >= threshold:
                group.variants.append(GuessVariant(other, other_count))
                group.combined_count += other_count
                assigned.add(other)

        grouped.append(group)

    return grouped
