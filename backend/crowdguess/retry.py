"""Retry and partial-success handling for store calls.

Only ``StoreUnavailable`` is retried; anything else is a bug and propagates
immediately.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Literal, TypeVar

from . import config
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_operation(
    operation: Callable[[], T],
    operation_name: str = "operation",
    max_retries: int | None = None,
    delay_ms: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run *operation*, retrying with exponential backoff on store failures."""
    if max_retries is None:
        max_retries = config.STORE_MAX_RETRIES
    if delay_ms is None:
        delay_ms = config.STORE_RETRY_DELAY_MS

    attempts = max(1, max_retries + 1)
    for attempt in range(attempts):
        try:
            return operation()
        except StoreUnavailable as exc:
            if attempt == attempts - 1:
                logger.error(
                    "[retry] %s failed after %d attempts: %s",
                    operation_name, attempts, exc,
                )
                raise
            delay = delay_ms * 2 ** attempt
            logger.warning(
                "[retry] %s failed (attempt %d/%d), retrying in %dms: %s",
                operation_name, attempt + 1, attempts, delay, exc,
            )
            sleep(delay / 1000)


@dataclass
class StoreOutcome:
    """Results of a batch of store operations, by name."""

    results: dict[str, object] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def status(self) -> Literal["success", "partial", "failure"]:
        if not self.errors:
            return "success"
        if not self.results:
            return "failure"
        return "partial"

    @property
    def all_succeeded(self) -> bool:
        return not self.errors


def run_with_partial_success(
    operations: list[tuple[str, Callable[[], object]]],
    **retry_kwargs,
) -> StoreOutcome:
    """Run each named operation with retries; failures are collected, not raised."""
    outcome = StoreOutcome()
    for name, fn in operations:
        try:
            outcome.results[name] = retry_operation(fn, name, **retry_kwargs)
        except StoreUnavailable as exc:
            logger.error("[retry] %s gave up: %s", name, exc)
            outcome.errors.append(name)
    return outcome
