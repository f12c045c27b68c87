"""Retry logic with exponential backoff for Gemini calls.

Only transport and quota failures are retried here. A reply that ignores the
answer template is never a reason to call the model again; that case is
repaired locally by ``response_template``.
"""

import asyncio
import functools
import inspect
import logging
import random
import time
from typing import Any, Callable, Set, Type, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Transient: quota, server and gateway errors
RETRYABLE_STATUS_CODES: Set[int] = {
    429,  # Rate limit / quota
    500,  # Server error
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
}

# Permanent for this model; the caller falls back instead
NON_RETRYABLE_STATUS_CODES: Set[int] = {
    400,  # Bad request
    401,  # Unauthorized
    403,  # Forbidden
    404,  # Model not found
    422,  # Unprocessable entity
}

NETWORK_ERROR_MARKERS = (
    "timeout",
    "timed out",
    "connection",
    "network",
    "temporarily unavailable",
)

# Two retries keep a failing model under ~4s before fallback
MAX_RETRIES = 2
BASE_DELAY = 1.0  # seconds
MAX_JITTER = 0.5  # seconds


def retry_with_backoff(
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
    max_jitter: float = MAX_JITTER,
    retryable_exceptions: tuple[Type[Exception], ...] = (),
) -> Callable[[F], F]:
    """Decorator that retries a sync or async function with exponential backoff.

    Retries on 429/500/502/503/504, on network-looking errors, and on any
    exception type listed in ``retryable_exceptions``. 4xx client errors
    are raised immediately so the caller can move on to a fallback model.

    Args:
        max_retries: Retry attempts after the first call
        base_delay: Base delay in seconds, doubled per attempt
        max_jitter: Maximum random jitter added to each delay
        retryable_exceptions: Extra exception types that are always retried

    Returns:
        Decorated function with retry logic
    """

    def delay_for(attempt: int) -> float:
        return (base_delay * (2**attempt)) + (random.random() * max_jitter)

    def give_up(func: Callable[..., Any], attempt: int, error: Exception) -> bool:
        if not _should_retry_exception(error, retryable_exceptions):
            return True
        if attempt >= max_retries:
            logger.error("%s failed after %d retries: %s", func.__name__, max_retries, error)
            return True
        return False

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if give_up(func, attempt, e):
                        raise
                    delay = delay_for(attempt)
                    logger.warning(
                        "%s attempt %d/%d failed: %s. Retrying in %.2fs...",
                        func.__name__, attempt + 1, max_retries, e, delay,
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if give_up(func, attempt, e):
                        raise
                    delay = delay_for(attempt)
                    logger.warning(
                        "%s attempt %d/%d failed: %s. Retrying in %.2fs...",
                        func.__name__, attempt + 1, max_retries, e, delay,
                    )
                    time.sleep(delay)
                    attempt += 1

        if inspect.iscoroutinefunction(func):
            return cast(F, async_wrapper)
        return cast(F, sync_wrapper)

    return decorator


def _should_retry_exception(
    exception: Exception, retryable_exceptions: tuple[Type[Exception], ...]
) -> bool:
    """Determine if an exception should trigger a retry."""
    status_code = _extract_status_code(exception)

    if status_code is not None:
        if status_code in NON_RETRYABLE_STATUS_CODES:
            return False
        if status_code in RETRYABLE_STATUS_CODES:
            return True

    message = str(exception).lower()
    if any(marker in message for marker in NETWORK_ERROR_MARKERS):
        return True

    return bool(retryable_exceptions) and isinstance(exception, retryable_exceptions)


def _extract_status_code(exception: Exception) -> int | None:
    """Extract an HTTP status code from an SDK or HTTP client exception.

    ``google.genai.errors.APIError`` exposes ``code``; httpx/requests errors
    expose ``status_code`` or ``response.status_code``.
    """
    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    code = getattr(exception, "code", None)
    if isinstance(code, int):
        return code

    response = getattr(exception, "response", None)
    if response is not None:
        response_status = getattr(response, "status_code", None)
        if isinstance(response_status, int):
            return response_status

    return None
