"""Assemble ranked results from a guess → count multiset.

Used for both live sessions (with a requesting player) and frozen
snapshots of closed sessions.
"""

from __future__ import annotations

import math

from . import config
from .grouping import GroupedGuess, group_similar_guesses
from .models import (
    ConsensusResults,
    FinalSnapshot,
    HistoricalResults,
    RankedEntry,
)
from .scoring import calculate_consensus_tier, unique_score
from .similarity import normalize_guess


def round1(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def percentage_of(count: int, total_players: int) -> float:
    if total_players <= 0:
        return 0
    return round1(count / total_players * 100)


def _to_entry(
    group: GroupedGuess,
    total_players: int,
    creator_key: str,
    player_key: str | None,
) -> RankedEntry:
    keys = [normalize_guess(v.guess) for v in group.variants]
    return RankedEntry(
        guess=group.primary_guess,
        count=group.combined_count,
        percentage=percentage_of(group.combined_count, total_players),
        is_player_guess=player_key is not None and player_key in keys,
        is_creator_answer=creator_key in keys,
        variants=[v.guess for v in group.variants[1:]] or None,
    )


def rank_guesses(
    guesses: dict[str, int],
    total_players: int,
    creator_answer: str,
    player_guess: str | None = None,
    threshold: float = config.SIMILARITY_THRESHOLD,
) -> list[RankedEntry]:
    """Group, score percentages and rank every guess (no truncation)."""
    creator_key = normalize_guess(creator_answer)
    player_key = normalize_guess(player_guess) if player_guess else None

    entries = [
        _to_entry(group, total_players, creator_key, player_key)
        for group in group_similar_guesses(guesses, threshold)
    ]
    entries.sort(key=lambda e: e.count, reverse=True)
    for position, entry in enumerate(entries, start=1):
        entry.rank = position
    return entries


def _creator_outside_top(
    ranked: list[RankedEntry], top: list[RankedEntry]
) -> RankedEntry | None:
    if any(e.is_creator_answer for e in top):
        return None
    return next((e for e in ranked if e.is_creator_answer), None)


def assemble_results(
    guesses: dict[str, int],
    creator_answer: str,
    total_players: int,
    player_guess: str | None = None,
    threshold: float = config.SIMILARITY_THRESHOLD,
    top_n: int = config.TOP_N_RESULTS,
) -> ConsensusResults:
    """Build the live leaderboard and the requesting player's score.

    The player is scored against the displayed top *top_n* only. When the
    creator's answer misses the top, it is returned separately as
    ``creator_answer_data`` carrying its true rank.
    """
    if total_players == 0 and not guesses:
        return ConsensusResults(
            aggregation=[],
            player_guess=None,
            creator_answer=creator_answer,
            total_players=0,
            total_guesses=0,
            player_score=unique_score(),
        )

    ranked = rank_guesses(
        guesses, total_players, creator_answer, player_guess, threshold
    )
    top = ranked[:top_n]

    player_score = (
        calculate_consensus_tier(player_guess, top) if player_guess else unique_score()
    )

    return ConsensusResults(
        aggregation=top,
        player_guess=player_guess or None,
        creator_answer=creator_answer,
        total_players=total_players,
        total_guesses=sum(guesses.values()),
        player_score=player_score,
        creator_answer_data=_creator_outside_top(ranked, top),
    )


def assemble_historical_results(
    snapshot: FinalSnapshot,
    creator_answer: str,
    prompt_text: str,
    threshold: float = config.SIMILARITY_THRESHOLD,
    top_n: int = config.TOP_N_RESULTS,
) -> HistoricalResults:
    """Rank a frozen snapshot the same way live results are ranked."""
    ranked = rank_guesses(
        snapshot.guesses, snapshot.total_players, creator_answer, None, threshold
    )
    return HistoricalResults(
        aggregation=ranked[:top_n],
        creator_answer=creator_answer,
        total_players=snapshot.total_players,
        total_guesses=snapshot.total_guesses,
        prompt_text=prompt_text,
    )
