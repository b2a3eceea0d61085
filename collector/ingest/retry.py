"""Bounded retry with a pluggable backoff schedule, shared by all fetchers."""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from collector.ingest.errors import RetryExhaustedError, describe_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

DelaySchedule = Callable[[int], float]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0  # seconds


def linear_backoff(base_delay: float = DEFAULT_BASE_DELAY) -> DelaySchedule:
    """Delay after failed attempt ``n`` is ``n * base_delay`` seconds."""

    def schedule(attempt: int) -> float:
        return attempt * base_delay

    return schedule


def retry_call(
    operation: Callable[[], T],
    identifier: str,
    *,
    what: str = "data",
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_schedule: DelaySchedule | None = None,
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` are used up.

    Any exception counts as a failed attempt. Intermediate failures are
    logged, never raised. Between attempts the call sleeps
    ``delay_schedule(attempt)`` seconds, where ``attempt`` is the number of
    the attempt that just failed; nothing is slept after the last one.

    Raises RetryExhaustedError naming ``identifier``, the attempt count and
    the last underlying error.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    schedule = delay_schedule or linear_backoff()

    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except Exception as e:
            last_error = e
            logger.warning(
                "Attempt %d/%d failed for %s %s: %s",
                attempt, max_attempts, what, identifier, describe_error(e),
            )
            if attempt < max_attempts:
                time.sleep(schedule(attempt))

    assert last_error is not None
    raise RetryExhaustedError(
        identifier, max_attempts, last_error, what=what
    ) from last_error
