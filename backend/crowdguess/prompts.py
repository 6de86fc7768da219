"""Custom prompt storage and per-post guess tracking."""

from __future__ import annotations

import logging
import time

from . import config
from .errors import StoreUnavailable
from .models import CustomPrompt
from .store import KeyValueStore, store_errors

logger = logging.getLogger(__name__)


def _prompt_key(post_id: str, part: str) -> str:
    return f"post:{post_id}:prompt:{part}"


def _guessed_key(post_id: str, username: str) -> str:
    return f"post:{post_id}:player:{username}:guessed"


def store_custom_prompt(
    store: KeyValueStore,
    post_id: str,
    description: str,
    answer: str,
    created_by: str,
) -> CustomPrompt:
    prompt = CustomPrompt(
        post_id=post_id,
        description=description,
        answer=answer,
        created_by=created_by,
        created_at=int(time.time() * 1000),
    )
    ttl = config.PROMPT_TTL_SECONDS
    with store_errors("store custom prompt"):
        store.set(_prompt_key(post_id, "description"), description, ex=ttl)
        store.set(_prompt_key(post_id, "answer"), answer, ex=ttl)
        store.hset(
            _prompt_key(post_id, "meta"),
            mapping={
                "created_by": created_by,
                "created_at": str(prompt.created_at),
                "post_id": post_id,
            },
        )
        store.expire(_prompt_key(post_id, "meta"), ttl)

    logger.info("[prompt] Stored custom prompt for post %s", post_id)
    return prompt


def get_custom_prompt(store: KeyValueStore, post_id: str) -> CustomPrompt | None:
    """Return the post's prompt, or None if its description or answer is gone."""
    with store_errors("retrieve custom prompt"):
        description = store.get(_prompt_key(post_id, "description"))
        answer = store.get(_prompt_key(post_id, "answer"))
        if not description or not answer:
            logger.info("[prompt] No custom prompt found for post %s", post_id)
            return None
        meta = store.hgetall(_prompt_key(post_id, "meta"))

    created_at = meta.get("created_at")
    return CustomPrompt(
        post_id=post_id,
        description=description,
        answer=answer,
        created_by=meta.get("created_by") or "unknown",
        created_at=int(created_at) if created_at else int(time.time() * 1000),
    )


# ---------------------------------------------------------------------------
# Guess tracking
# ---------------------------------------------------------------------------


def claim_guess(store: KeyValueStore, post_id: str, username: str) -> bool:
    """Atomically mark the player as having guessed.

    Returns False when the flag was already set, i.e. another submission by
    the same player got there first.
    """
    with store_errors("mark user as guessed"):
        claimed = store.set(
            _guessed_key(post_id, username), "1", ex=config.PROMPT_TTL_SECONDS, nx=True
        )
    if claimed:
        logger.info("[tracking] Marked %s as guessed on post %s", username, post_id)
    return bool(claimed)


def release_guess_claim(store: KeyValueStore, post_id: str, username: str) -> None:
    with store_errors("release guess claim"):
        store.delete(_guessed_key(post_id, username))


def has_user_guessed(store: KeyValueStore, post_id: str, username: str) -> bool:
    """True if the player already guessed; False when the store can't tell."""
    try:
        with store_errors("check guess tracking"):
            return store.get(_guessed_key(post_id, username)) is not None
    except StoreUnavailable as exc:
        logger.warning(
            "[tracking] Could not check %s on post %s, allowing guess: %s",
            username, post_id, exc,
        )
        return False
