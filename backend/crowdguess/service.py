"""Game flow: submit guesses, read results, close and replay sessions, and
play preset prompts.

Store calls are retried here, at the boundary; the grouping and scoring
modules only ever see plain data.
"""

from __future__ import annotations

import logging

from . import aggregation, config, game, prompts, sessions
from .catalogue import get_preset_prompt
from .errors import (
    AlreadyGuessed,
    InvalidGuess,
    PresetPromptNotFound,
    PromptNotFound,
    PromptsExhausted,
    StoreUnavailable,
)
from .models import (
    ConsensusResults,
    CustomPrompt,
    FinalSnapshot,
    GuessResultResponse,
    HistoricalResults,
    PresetPrompt,
)
from .results import assemble_historical_results, assemble_results
from .retry import StoreOutcome, retry_operation, run_with_partial_success
from .scoring import check_answer
from .similarity import normalize_guess
from .store import KeyValueStore

logger = logging.getLogger(__name__)


def create_prompt(
    store: KeyValueStore,
    post_id: str,
    description: str,
    answer: str,
    created_by: str,
) -> CustomPrompt:
    return retry_operation(
        lambda: prompts.store_custom_prompt(store, post_id, description, answer, created_by),
        "store_custom_prompt",
    )


def require_prompt(store: KeyValueStore, post_id: str) -> CustomPrompt:
    prompt = retry_operation(
        lambda: prompts.get_custom_prompt(store, post_id), "get_custom_prompt"
    )
    if prompt is None:
        raise PromptNotFound(post_id)
    return prompt


def validate_guess(guess: str) -> str:
    """Return the normalized guess or raise ``InvalidGuess``."""
    normalized = normalize_guess(guess)
    if len(normalized) < max(1, config.MIN_GUESS_LENGTH):
        raise InvalidGuess("Guess must not be empty")
    if len(normalized) > config.MAX_GUESS_LENGTH:
        raise InvalidGuess(f"Guess must be at most {config.MAX_GUESS_LENGTH} characters")
    return normalized


def submit_guess(
    store: KeyValueStore, post_id: str, username: str, guess: str
) -> StoreOutcome:
    """Record one player's guess on a post.

    The player's guessed flag is claimed atomically before anything is
    written, so concurrent submissions by the same player count once. The
    three session writes are then attempted independently. Raises
    ``StoreUnavailable`` only when all of them fail, releasing the claim so
    the player can retry; a partial outcome is returned (and logged)
    otherwise.
    """
    normalized = validate_guess(guess)
    require_prompt(store, post_id)
    holds_claim = _claim_guess(store, post_id, username)

    try:
        session_id = retry_operation(
            lambda: sessions.get_or_create_prompt_session(store, post_id),
            "get_or_create_prompt_session",
        )
        outcome = run_with_partial_success([
            ("store_guess", lambda: aggregation.store_guess(store, session_id, normalized)),
            ("add_player", lambda: aggregation.add_player(store, session_id, username)),
            ("store_player_guess",
             lambda: aggregation.store_player_guess(store, session_id, username, normalized)),
        ])
        if outcome.status == "failure":
            logger.error(
                "[service] All writes failed for post %s, user %s", post_id, username
            )
            raise StoreUnavailable("submit guess", "all store writes failed")
    except StoreUnavailable:
        if holds_claim:
            _release_claim(store, post_id, username)
        raise

    if not outcome.all_succeeded:
        logger.warning(
            "[service] Partial success for post %s, user %s. Errors: %s",
            post_id, username, ", ".join(outcome.errors),
        )
    return outcome


def _claim_guess(store: KeyValueStore, post_id: str, username: str) -> bool:
    """Claim the player's single guess; False if the store could not record it.

    A store outage lets the guess through unclaimed.
    """
    try:
        claimed = prompts.claim_guess(store, post_id, username)
    except StoreUnavailable as exc:
        logger.warning(
            "[service] Could not claim guess for %s on post %s, allowing it: %s",
            username, post_id, exc,
        )
        return False
    if not claimed:
        raise AlreadyGuessed(post_id, username)
    return True


def _release_claim(store: KeyValueStore, post_id: str, username: str) -> None:
    try:
        prompts.release_guess_claim(store, post_id, username)
    except StoreUnavailable as exc:
        logger.warning(
            "[service] Could not release guess claim for %s on post %s: %s",
            username, post_id, exc,
        )


def get_results(
    store: KeyValueStore, post_id: str, username: str | None = None
) -> ConsensusResults:
    """Leaderboard for the post's active session, or its last closed one.

    Each read degrades independently: a failed read contributes empty data
    and the response is flagged ``partial``.
    """
    prompt = require_prompt(store, post_id)
    session_id = _results_session(store, post_id)
    if session_id is None:
        return assemble_results({}, prompt.answer, 0)

    reads = [
        ("get_aggregated_guesses",
         lambda: aggregation.get_aggregated_guesses(store, session_id)),
        ("get_total_players",
         lambda: aggregation.get_total_players(store, session_id)),
    ]
    if username:
        reads.append((
            "get_player_guess",
            lambda: aggregation.get_player_guess(store, session_id, username),
        ))
    fetched = run_with_partial_success(reads)

    results = assemble_results(
        fetched.results.get("get_aggregated_guesses", {}),
        prompt.answer,
        fetched.results.get("get_total_players", 0),
        fetched.results.get("get_player_guess"),
    )
    if not fetched.all_succeeded:
        logger.warning(
            "[service] Returning partial results for post %s: %s",
            post_id, ", ".join(fetched.errors),
        )
        results.partial = True
    return results


def _results_session(store: KeyValueStore, post_id: str) -> str | None:
    """Resolve the session to read without ever starting one."""
    session_id = retry_operation(
        lambda: sessions.get_active_session(store, post_id), "get_active_session"
    )
    if session_id:
        return session_id
    return retry_operation(
        lambda: sessions.get_last_session(store, post_id), "get_last_session"
    )


def close_prompt(store: KeyValueStore, post_id: str) -> FinalSnapshot | None:
    """Freeze the active session's counts and end it.

    Returns the frozen snapshot, or None when no session was active.
    """
    session_id = retry_operation(
        lambda: sessions.get_active_session(store, post_id), "get_active_session"
    )
    if not session_id:
        return None

    snapshot = retry_operation(
        lambda: aggregation.snapshot_session(store, session_id), "snapshot_session"
    )
    retry_operation(
        lambda: aggregation.preserve_final_results(store, session_id, snapshot),
        "preserve_final_results",
    )
    retry_operation(
        lambda: sessions.end_prompt_session(store, post_id), "end_prompt_session"
    )
    return snapshot


def get_historical_results(
    store: KeyValueStore, post_id: str
) -> HistoricalResults | None:
    """Results of the post's last closed session, if still preserved."""
    prompt = require_prompt(store, post_id)
    session_id = retry_operation(
        lambda: sessions.get_last_session(store, post_id), "get_last_session"
    )
    if not session_id:
        return None

    snapshot = retry_operation(
        lambda: aggregation.get_final_results(store, session_id), "get_final_results"
    )
    if snapshot is None:
        return None
    return assemble_historical_results(snapshot, prompt.answer, prompt.description)


# ---------------------------------------------------------------------------
# Preset-prompt game
# ---------------------------------------------------------------------------


def start_game(store: KeyValueStore, post_id: str, username: str) -> str:
    return retry_operation(
        lambda: game.start_game_session(store, post_id, username), "start_game_session"
    )


def next_prompt(store: KeyValueStore, session_id: str) -> PresetPrompt:
    retry_operation(
        lambda: game.require_game_session(store, session_id), "require_game_session"
    )
    prompt = retry_operation(
        lambda: game.select_next_prompt(store, session_id), "select_next_prompt"
    )
    if prompt is None:
        raise PromptsExhausted(session_id)
    return prompt


def answer_prompt(
    store: KeyValueStore, session_id: str, prompt_id: int, guess: str
) -> GuessResultResponse:
    """Score a guess on a preset prompt and add it to the session's total."""
    normalized = validate_guess(guess)
    prompt = get_preset_prompt(prompt_id)
    if prompt is None:
        raise PresetPromptNotFound(prompt_id)
    retry_operation(
        lambda: game.require_game_session(store, session_id), "require_game_session"
    )

    check = check_answer(normalized, prompt.answer, prompt.alternative_answers)
    # Single attempt: the score increment is not idempotent.
    total, rounds = game.record_round(store, session_id, check.points_earned)

    logger.info(
        "[game] %s answered prompt %d for %d points (total %d)",
        session_id, prompt_id, check.points_earned, total,
    )
    return GuessResultResponse(
        is_correct=check.is_correct,
        is_close=check.is_close,
        correct_answer=prompt.answer,
        points_earned=check.points_earned,
        total_score=total,
        rounds_completed=rounds,
    )
