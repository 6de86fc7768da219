"""Prompt session lifecycle.

A prompt session is one live round of a post's prompt. The store keeps a
pointer to the active session per post; callers resolve it once and pass the
session id explicitly to the aggregation functions.
"""

from __future__ import annotations

import logging
import secrets
import string
import time

from . import config
from .errors import StoreUnavailable
from .store import KeyValueStore, store_errors

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def active_session_key(post_id: str) -> str:
    return f"post:{post_id}:active_session"


def last_session_key(post_id: str) -> str:
    return f"post:{post_id}:last_session"


def meta_key(session_id: str) -> str:
    return f"{session_id}:meta"


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_session_id(kind: str, *parts: str) -> str:
    """``kind:part...:epoch_ms:suffix`` with a random 7-character suffix."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return ":".join([kind, *parts, str(_now_ms()), suffix])


def generate_prompt_session_id(post_id: str) -> str:
    return new_session_id("prompt_session", post_id)


def get_or_create_prompt_session(store: KeyValueStore, post_id: str) -> str:
    """Return the post's active session id, starting a new session if none."""
    with store_errors("get or create prompt session"):
        existing = store.get(active_session_key(post_id))
        if existing:
            return existing

        session_id = generate_prompt_session_id(post_id)
        store.set(active_session_key(post_id), session_id, ex=config.SESSION_TTL_SECONDS)
        store.hset(
            meta_key(session_id),
            mapping={
                "post_id": post_id,
                "created_at": str(_now_ms()),
                "status": "active",
            },
        )
        store.expire(meta_key(session_id), config.SESSION_TTL_SECONDS)

    logger.info("[session] Started %s", session_id)
    return session_id


def get_active_session(store: KeyValueStore, post_id: str) -> str | None:
    with store_errors("get active session"):
        return store.get(active_session_key(post_id))


def get_session_meta(store: KeyValueStore, session_id: str) -> dict[str, str]:
    with store_errors("get session meta"):
        return store.hgetall(meta_key(session_id))


def is_prompt_session_active(store: KeyValueStore, post_id: str) -> bool:
    try:
        with store_errors("check prompt session"):
            return store.get(active_session_key(post_id)) is not None
    except StoreUnavailable as exc:
        logger.warning("[session] Could not check session for post %s: %s", post_id, exc)
        return False


def end_prompt_session(store: KeyValueStore, post_id: str) -> str | None:
    """Mark the active session ended and clear the pointer.

    Session data stays readable until its keys expire; the ended id is kept
    as the post's last session. Returns None when nothing was active.
    """
    with store_errors("end prompt session"):
        session_id = store.get(active_session_key(post_id))
        if not session_id:
            return None

        store.hset(
            meta_key(session_id),
            mapping={"status": "ended", "ended_at": str(_now_ms())},
        )
        store.set(last_session_key(post_id), session_id, ex=config.SESSION_TTL_SECONDS)
        store.delete(active_session_key(post_id))

    logger.info("[session] Ended %s", session_id)
    return session_id


def get_last_session(store: KeyValueStore, post_id: str) -> str | None:
    with store_errors("get last session"):
        return store.get(last_session_key(post_id))
