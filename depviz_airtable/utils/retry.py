"""Retry decorator for handling Airtable API rate limits and transient errors.

This module provides a decorator that implements retry logic for Airtable API calls,
including respect for the Retry-After header and exponential backoff.
"""

import asyncio
import functools
import inspect
from typing import Any, Callable, TypeVar

import httpx
import structlog

from depviz_airtable.utils.constants import RATE_LIMIT_COOLDOWN

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

RETRYABLE_STATUS_CODES = (429, 502, 503, 504)

RATE_LIMIT_STATUS_CODES = (429,)
"""Statuses for which the request is known not to have been processed."""


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = RATE_LIMIT_COOLDOWN,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
    retryable_status_codes: tuple[int, ...] = RETRYABLE_STATUS_CODES,
) -> Callable[[F], F]:
    """Decorator for retrying async functions when they encounter Airtable rate limits.

    This decorator handles:
    - Airtable rate limit errors (429)
    - Transient gateway errors (502/503/504)
    - Respects the retry-after header
    - Implements exponential backoff otherwise

    Once the retries are exhausted the last error is raised to the caller.

    Args:
        max_retries: Maximum number of retry attempts (default: 5)
        initial_delay: Initial delay in seconds between retries (default: 30.0)
        max_delay: Maximum delay in seconds between retries (default: 300.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)
        retryable_status_codes: HTTP statuses that are retried. Non-idempotent requests
            must only retry statuses for which the request was not processed.

    Returns:
        Decorated function with retry logic

    Example:
        @retry_on_rate_limit()
        async def list_records(table_name: str):
            return await client.get(table_name)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if status_code not in retryable_status_codes:
                        raise

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for Airtable API error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=status_code,
                            error=str(e),
                        )
                        raise

                    wait_time = delay
                    retry_after = e.response.headers.get("retry-after")
                    if retry_after:
                        try:
                            wait_time = float(retry_after)
                            logger.info("Using retry-after header value", retry_after=wait_time, function=func.__name__)
                        except ValueError:
                            logger.warning("Invalid retry-after header value", retry_after=retry_after, function=func.__name__)

                    wait_time = min(wait_time, max_delay)

                    logger.warning(
                        f"Airtable API error, retrying in {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=status_code,
                    )

                    await asyncio.sleep(wait_time)

                    # Exponential backoff for next attempt
                    delay = min(delay * exponential_base, max_delay)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            """Sync version of the retry wrapper - raises error since we only support async."""
            raise RuntimeError(
                f"Function {func.__name__} decorated with @retry_on_rate_limit must be async. This decorator only supports async functions."
            )

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator
