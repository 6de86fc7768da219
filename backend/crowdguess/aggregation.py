"""Per-session guess aggregation on the key-value store.

Key layout (all expire after ``SESSION_TTL_SECONDS``)::

    {session}:guesses                  hash   normalized guess → count
    {session}:players                  zset   username → first-seen ms
    {session}:player:{username}:guess  string normalized guess
    {session}:final                    string FinalSnapshot JSON

Every function takes the prompt session id explicitly and raises
``StoreUnavailable`` when the store call fails.
"""

from __future__ import annotations

import logging
import time

from . import config
from .models import FinalSnapshot
from .similarity import normalize_guess
from .store import KeyValueStore, store_errors

logger = logging.getLogger(__name__)


def guesses_key(session_id: str) -> str:
    return f"{session_id}:guesses"


def players_key(session_id: str) -> str:
    return f"{session_id}:players"


def player_guess_key(session_id: str, username: str) -> str:
    return f"{session_id}:player:{username}:guess"


def final_key(session_id: str) -> str:
    return f"{session_id}:final"


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def store_guess(store: KeyValueStore, session_id: str, guess: str) -> int:
    """Atomically increment the count for *guess*; returns the new count."""
    key = guesses_key(session_id)
    with store_errors("store guess"):
        count = store.hincrby(key, normalize_guess(guess), 1)
        store.expire(key, config.SESSION_TTL_SECONDS)
    return int(count)


def add_player(store: KeyValueStore, session_id: str, username: str) -> int:
    """Register *username* in the session; returns the distinct player count.

    Re-adding a player only refreshes its timestamp.
    """
    key = players_key(session_id)
    with store_errors("add player"):
        store.zadd(key, {username: time.time() * 1000})
        store.expire(key, config.SESSION_TTL_SECONDS)
        size = store.zcard(key)
    return int(size)


def store_player_guess(
    store: KeyValueStore, session_id: str, username: str, guess: str
) -> None:
    with store_errors("store player guess"):
        store.set(
            player_guess_key(session_id, username),
            normalize_guess(guess),
            ex=config.SESSION_TTL_SECONDS,
        )


def preserve_final_results(
    store: KeyValueStore, session_id: str, snapshot: FinalSnapshot
) -> None:
    """Freeze the session's multiset for historical display."""
    with store_errors("preserve final results"):
        store.set(
            final_key(session_id),
            snapshot.model_dump_json(by_alias=True),
            ex=config.SESSION_TTL_SECONDS,
        )
    logger.info(
        "[aggregation] Froze %s: %d players, %d guesses",
        session_id, snapshot.total_players, snapshot.total_guesses,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_aggregated_guesses(store: KeyValueStore, session_id: str) -> dict[str, int]:
    with store_errors("get aggregated guesses"):
        raw = store.hgetall(guesses_key(session_id))
    return {guess: int(count) for guess, count in raw.items()}


def get_total_players(store: KeyValueStore, session_id: str) -> int:
    with store_errors("get total players"):
        return int(store.zcard(players_key(session_id)))


def get_player_guess(
    store: KeyValueStore, session_id: str, username: str
) -> str | None:
    with store_errors("get player guess"):
        return store.get(player_guess_key(session_id, username))


def get_final_results(store: KeyValueStore, session_id: str) -> FinalSnapshot | None:
    """Return the frozen snapshot, or None if never frozen or expired."""
    with store_errors("get final results"):
        data = store.get(final_key(session_id))
        if not data:
            return None
        return FinalSnapshot.model_validate_json(data)


def snapshot_session(store: KeyValueStore, session_id: str) -> FinalSnapshot:
    """Read the live counts of a session into a snapshot."""
    guesses = get_aggregated_guesses(store, session_id)
    return FinalSnapshot(
        guesses=guesses,
        total_players=get_total_players(store, session_id),
        total_guesses=sum(guesses.values()),
    )
