"""Scoring: consensus points for agreeing with the crowd, and answer checks
for preset prompts."""

from __future__ import annotations

from . import config
from .models import AnswerCheck, ConsensusScore, RankedEntry
from .similarity import calculate_similarity, normalize_guess

CLOSE_MATCH_POINTS = 5
EXACT_ANSWER_POINTS = 10

# (minimum percentage, tier, points), checked top-down
TIERS: list[tuple[float, str, int]] = [
    (50, "majority", 100),
    (20, "common", 50),
    (5, "uncommon", 25),
    (1, "rare", 10),
]


def unique_score() -> ConsensusScore:
    return ConsensusScore(points_earned=0, match_percentage=0, tier="unique")


def tier_from_percentage(percentage: float) -> ConsensusScore:
    """Map the share of players who gave an answer to its tier and points."""
    for minimum, tier, points in TIERS:
        if percentage >= minimum:
            return ConsensusScore(
                points_earned=points, match_percentage=percentage, tier=tier
            )
    return unique_score()


def calculate_consensus_tier(
    player_guess: str,
    aggregation: list[RankedEntry],
    close_match_threshold: float = config.CLOSE_MATCH_THRESHOLD,
) -> ConsensusScore:
    """Score *player_guess* against the displayed aggregation.

    An exact (normalized) match scores by the entry's percentage. Otherwise
    the first entry within *close_match_threshold* similarity earns a flat
    close-match bonus. Anything else is unique.
    """
    normalized = normalize_guess(player_guess)

    for entry in aggregation:
        if normalize_guess(entry.guess) == normalized:
            return tier_from_percentage(entry.percentage)

    for entry in aggregation:
        if calculate_similarity(normalized, entry.guess) >= close_match_threshold:
            return ConsensusScore(
                points_earned=CLOSE_MATCH_POINTS,
                match_percentage=entry.percentage,
                tier="rare",
            )

    return unique_score()


def check_answer(
    guess: str,
    answer: str,
    alternatives: list[str] | tuple[str, ...] = (),
    close_match_threshold: float = config.CLOSE_MATCH_THRESHOLD,
) -> AnswerCheck:
    """Check a guess against a prompt's answer and its accepted alternatives.

    Exact (normalized) matches earn ``EXACT_ANSWER_POINTS``; otherwise any
    accepted answer within *close_match_threshold* similarity earns
    ``CLOSE_MATCH_POINTS``.
    """
    normalized = normalize_guess(guess)
    accepted = [normalize_guess(a) for a in (answer, *alternatives)]

    if normalized in accepted:
        return AnswerCheck(is_correct=True, is_close=False, points_earned=EXACT_ANSWER_POINTS)
    if any(calculate_similarity(normalized, a) >= close_match_threshold for a in accepted):
        return AnswerCheck(is_correct=False, is_close=True, points_earned=CLOSE_MATCH_POINTS)
    return AnswerCheck(is_correct=False, is_close=False, points_earned=0)
