"""Key-value store used for guesses, players, sessions and prompts.

``KeyValueStore`` is the subset of the redis-py client API the service
relies on. A ``redis.Redis`` created with ``decode_responses=True`` satisfies
it as-is; ``MemoryStore`` is the in-process implementation used when no
``REDIS_URL`` is configured and in tests.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Protocol

from . import config
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str, ex: int | None = None,
            nx: bool = False) -> bool | None: ...

    def incrby(self, name: str, amount: int = 1) -> int: ...

    def delete(self, *names: str) -> int: ...

    def expire(self, name: str, time: int) -> bool: ...

    def hincrby(self, name: str, key: str, amount: int = 1) -> int: ...

    def hset(self, name: str, key: str | None = None, value: str | None = None,
             mapping: dict | None = None) -> int: ...

    def hgetall(self, name: str) -> dict[str, str]: ...

    def zadd(self, name: str, mapping: dict[str, float]) -> int: ...

    def zcard(self, name: str) -> int: ...

    def zrange(self, name: str, start: int, end: int) -> list[str]: ...


class MemoryStore:
    """Thread-safe in-memory store with per-key expiry.

    Every operation holds a single lock, so ``hincrby`` never loses an
    increment under concurrent callers. Values are kept as strings to match
    a decoding Redis client.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._data: dict[str, object] = {}
        self._expires: dict[str, float] = {}

    # -- internals (lock held) ------------------------------------------------

    def _purge(self, name: str) -> None:
        deadline = self._expires.get(name)
        if deadline is not None and self._clock() >= deadline:
            self._data.pop(name, None)
            self._expires.pop(name, None)

    def _lookup(self, name: str, kind: type):
        self._purge(name)
        value = self._data.get(name)
        if value is not None and type(value) is not kind:
            raise TypeError(
                f"WRONGTYPE key {name!r} holds {type(value).__name__}, not {kind.__name__}"
            )
        return value

    # -- strings ---------------------------------------------------------------

    def get(self, name: str) -> str | None:
        with self._lock:
            return self._lookup(name, str)

    def set(self, name: str, value: str, ex: int | None = None,
            nx: bool = False) -> bool | None:
        """Store *value*; with *nx*, only if *name* is absent (None otherwise)."""
        with self._lock:
            if nx:
                self._purge(name)
                if name in self._data:
                    return None
            self._data[name] = str(value)
            if ex is not None:
                self._expires[name] = self._clock() + ex
            else:
                self._expires.pop(name, None)
            return True

    def incrby(self, name: str, amount: int = 1) -> int:
        with self._lock:
            current = self._lookup(name, str)
            value = int(current or "0") + amount
            self._data[name] = str(value)
            return value

    def delete(self, *names: str) -> int:
        removed = 0
        with self._lock:
            for name in names:
                self._purge(name)
                if self._data.pop(name, None) is not None:
                    removed += 1
                self._expires.pop(name, None)
        return removed

    def expire(self, name: str, time: int) -> bool:
        with self._lock:
            self._purge(name)
            if name not in self._data:
                return False
            self._expires[name] = self._clock() + time
            return True

    # -- hashes ----------------------------------------------------------------

    def hincrby(self, name: str, key: str, amount: int = 1) -> int:
        with self._lock:
            table = self._lookup(name, dict)
            if table is None:
                table = self._data[name] = {}
            value = int(table.get(key, "0")) + amount
            table[key] = str(value)
            return value

    def hset(self, name: str, key: str | None = None, value: str | None = None,
             mapping: dict | None = None) -> int:
        items = dict(mapping or {})
        if key is not None:
            items[key] = value
        if not items:
            raise ValueError("hset needs at least one field")
        for field, v in items.items():
            if v is None:
                raise ValueError(f"Invalid input of type NoneType for field {field!r}")
        with self._lock:
            table = self._lookup(name, dict)
            if table is None:
                table = self._data[name] = {}
            added = sum(1 for k in items if k not in table)
            table.update({k: str(v) for k, v in items.items()})
            return added

    def hgetall(self, name: str) -> dict[str, str]:
        with self._lock:
            return dict(self._lookup(name, dict) or {})

    # -- sorted sets -------------------------------------------------------------

    def zadd(self, name: str, mapping: dict[str, float]) -> int:
        with self._lock:
            members = self._lookup(name, _SortedSet)
            if members is None:
                members = self._data[name] = _SortedSet()
            added = sum(1 for m in mapping if m not in members)
            members.update({m: float(s) for m, s in mapping.items()})
            return added

    def zcard(self, name: str) -> int:
        with self._lock:
            return len(self._lookup(name, _SortedSet) or ())

    def zrange(self, name: str, start: int, end: int) -> list[str]:
        """Members ordered by score, *start* and *end* inclusive (negative from the end)."""
        with self._lock:
            members = self._lookup(name, _SortedSet) or _SortedSet()
            ordered = sorted(members, key=lambda m: (members[m], m))
        size = len(ordered)
        if start < 0:
            start = max(0, size + start)
        if end < 0:
            end = size + end
        return ordered[start:end + 1]


class _SortedSet(dict):
    """member → score"""


def create_store(redis_url: str = config.REDIS_URL) -> KeyValueStore:
    """Redis client when *redis_url* is set, otherwise a ``MemoryStore``."""
    if not redis_url:
        logger.info("[store] No REDIS_URL configured, using in-memory store.")
        return MemoryStore()

    import redis  # noqa: PLC0415

    logger.info("[store] Connecting to Redis at %s", redis_url)
    return redis.Redis.from_url(redis_url, decode_responses=True)


@contextmanager
def store_errors(operation: str):
    """Re-raise any failure inside the block as ``StoreUnavailable``."""
    try:
        yield
    except StoreUnavailable:
        raise
    except Exception as exc:
        logger.error("[store] Failed to %s: %s", operation, exc)
        raise StoreUnavailable(operation, str(exc)) from exc
