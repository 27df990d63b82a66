"""Utility functions for Interaction Stats."""

import asyncio
from typing import Awaitable, Callable, TypeVar

import structlog

from interaction_stats.exceptions import TransientFetchError

logger = structlog.get_logger()

T = TypeVar("T")

TRANSIENT_HTTP_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient_error(exc: BaseException) -> bool:
    """Return True for failures worth retrying (rate limits, 5xx, network errors)."""
    from googleapiclient.errors import HttpError

    if isinstance(exc, HttpError):
        status = getattr(exc, "status_code", None) or getattr(exc.resp, "status", None)
        try:
            return int(status) in TRANSIENT_HTTP_STATUSES
        except (TypeError, ValueError):
            return False
    return isinstance(exc, OSError)


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    is_retryable: Callable[[BaseException], bool] = is_transient_error,
    operation: str | None = None,
) -> T:
    """Await ``func()`` and retry it with exponential backoff on transient failures.

    Args:
        func: Zero-argument callable returning a fresh awaitable per attempt.
        max_retries: Maximum number of retry attempts.
        delay: Initial delay between retries in seconds.
        backoff: Multiplier for delay after each retry.
        is_retryable: Predicate deciding whether an exception is transient.
        operation: Name used in log events.

    Returns:
        The result of the first successful attempt.

    Raises:
        TransientFetchError: If every attempt failed with a transient error.
        Exception: Non-transient errors are re-raised unchanged.
    """
    name = operation or getattr(func, "__name__", "operation")
    current_delay = delay
    last_exception: BaseException | None = None

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except Exception as e:
            if not is_retryable(e):
                raise
            last_exception = e
            if attempt < max_retries:
                logger.warning(
                    "function_retry",
                    function=name,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    delay=current_delay,
                    error=str(e),
                )
                await asyncio.sleep(current_delay)
                current_delay *= backoff
            else:
                logger.error(
                    "function_retry_exhausted",
                    function=name,
                    attempts=max_retries + 1,
                    error=str(e),
                )

    raise TransientFetchError(
        f"{name} failed after {max_retries + 1} attempts: {last_exception}"
    ) from last_exception

