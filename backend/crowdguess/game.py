"""Preset-prompt game sessions.

A game session belongs to one player. It serves prompts from the built-in
catalogue in random order, never repeating one, and keeps a running score.
Any activity pushes the session's expiry back.
"""

from __future__ import annotations

import logging
import random
import time

from . import config
from .catalogue import PRESET_PROMPTS
from .errors import GameSessionNotFound
from .models import PresetPrompt
from .sessions import new_session_id
from .store import KeyValueStore, store_errors

logger = logging.getLogger(__name__)


def score_key(session_id: str) -> str:
    return f"session:{session_id}:score"


def meta_key(session_id: str) -> str:
    return f"session:{session_id}:meta"


def used_key(session_id: str) -> str:
    return f"session:{session_id}:used"


def generate_game_session_id(post_id: str, username: str) -> str:
    return new_session_id("game_session", post_id, username)


def _refresh(store: KeyValueStore, session_id: str) -> None:
    ttl = config.GAME_SESSION_TTL_SECONDS
    for key in (score_key(session_id), meta_key(session_id), used_key(session_id)):
        store.expire(key, ttl)


def start_game_session(store: KeyValueStore, post_id: str, username: str) -> str:
    session_id = generate_game_session_id(post_id, username)
    with store_errors("start game session"):
        store.set(score_key(session_id), "0", ex=config.GAME_SESSION_TTL_SECONDS)
        store.hset(
            meta_key(session_id),
            mapping={
                "username": username,
                "post_id": post_id,
                "start_time": str(int(time.time() * 1000)),
                "rounds_completed": "0",
            },
        )
        store.expire(meta_key(session_id), config.GAME_SESSION_TTL_SECONDS)

    logger.info("[game] Started %s for %s", session_id, username)
    return session_id


def require_game_session(store: KeyValueStore, session_id: str) -> dict[str, str]:
    """Return the session's metadata or raise ``GameSessionNotFound``."""
    with store_errors("get game session"):
        meta = store.hgetall(meta_key(session_id))
    if not meta:
        raise GameSessionNotFound(session_id)
    return meta


def select_next_prompt(
    store: KeyValueStore,
    session_id: str,
    catalogue: tuple[PresetPrompt, ...] = PRESET_PROMPTS,
    rng: random.Random | None = None,
) -> PresetPrompt | None:
    """Pick a random prompt not yet served in this session and mark it used.

    Returns None once every prompt in *catalogue* has been served.
    """
    choose = (rng or random).choice
    with store_errors("select next prompt"):
        used = set(store.zrange(used_key(session_id), 0, -1))
        available = [p for p in catalogue if str(p.id) not in used]
        if not available:
            logger.info("[game] %s has used all %d prompts", session_id, len(catalogue))
            return None

        prompt = choose(available)
        store.zadd(used_key(session_id), {str(prompt.id): time.time() * 1000})
        _refresh(store, session_id)
    return prompt


def record_round(store: KeyValueStore, session_id: str, points: int) -> tuple[int, int]:
    """Add *points* to the running score and count the round.

    Returns ``(total_score, rounds_completed)``.
    """
    with store_errors("record game round"):
        total = store.incrby(score_key(session_id), points)
        rounds = store.hincrby(meta_key(session_id), "rounds_completed", 1)
        _refresh(store, session_id)
    return total, rounds
