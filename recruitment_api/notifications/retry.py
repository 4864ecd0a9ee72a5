"""
Retry with exponential backoff for outbound calls (SMTP delivery).

The first call is always made; ``max_retries`` further calls follow a
failure, waiting ``initial_delay * backoff_multiplier ** (n - 1)`` seconds
(capped at ``max_delay``) before retry ``n``.
"""

from __future__ import annotations

import asyncio
import errno
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRNOS = frozenset(
    {
        errno.ECONNRESET,
        errno.ECONNREFUSED,
        errno.ETIMEDOUT,
        errno.ENETUNREACH,
        errno.EHOSTUNREACH,
        errno.ECONNABORTED,
    }
)
TRANSIENT_MARKERS = ("timeout", "timed out", "connection", "socket", "network")


@dataclass(frozen=True)
class RetryOptions:
    """Backoff settings; delays are in seconds."""

    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0
    retry_on_all_errors: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be zero or greater")
        if self.initial_delay <= 0 or self.backoff_multiplier <= 0 or self.max_delay <= 0:
            raise ValueError("Retry delays and multiplier must be positive")

    def delay_for(self, retry: int) -> float:
        """Seconds to wait before retry number ``retry`` (1-indexed)."""
        return min(self.initial_delay * self.backoff_multiplier ** (retry - 1), self.max_delay)


class RetryExhaustedError(Exception):
    """Raised when an operation failed on its last permitted attempt."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Gave up after {attempts} attempt(s). "
            f"Last error: {type(last_error).__name__}: {last_error}"
        )


# PUBLIC_INTERFACE
def is_transient_error(error: BaseException) -> bool:
    """
    True for failures worth retrying: network errno codes, timeouts, 5xx and
    429 status codes, and connection, socket or network failures named in
    the message.
    """
    if isinstance(error, (TimeoutError, asyncio.TimeoutError, ConnectionError)):
        return True
    if isinstance(error, OSError) and error.errno in TRANSIENT_ERRNOS:
        return True
    status = getattr(error, "status_code", None) or getattr(error, "code", None)
    if isinstance(status, int) and (500 <= status < 600 or status == 429):
        return True
    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


# PUBLIC_INTERFACE
async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
) -> T:
    """
    Await ``operation()`` until it succeeds or the retries run out.

    Raises:
        RetryExhaustedError: after the last failed attempt, or at once for a
            non-transient error when ``retry_on_all_errors`` is off.
    """
    options = options or RetryOptions()
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as exc:
            retryable = options.retry_on_all_errors or is_transient_error(exc)
            if not retryable or attempt > options.max_retries:
                raise RetryExhaustedError(attempt, exc) from exc
            delay = options.delay_for(attempt)
            logger.warning(
                "Attempt %d/%d failed (%s: %s); retrying in %.1fs",
                attempt,
                options.max_retries + 1,
                type(exc).__name__,
                exc,
                delay,
            )
            await asyncio.sleep(delay)
