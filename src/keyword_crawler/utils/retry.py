"""Retry decorators and utilities."""
import functools
from typing import Callable, Any, Optional
import logging
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log
)

from ..core.logging import logger


def retry_async(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 60.0,
    backoff_multiplier: float = 2.0,
    retry_exceptions: Optional[tuple] = None,
    should_retry: Optional[Callable[[BaseException], bool]] = None
):
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts, the first call included
        min_wait: Minimum wait time between retries (seconds)
        max_wait: Maximum wait time between retries (seconds)
        backoff_multiplier: Exponential backoff multiplier
        retry_exceptions: Tuple of exception types to retry on (default: all exceptions)
        should_retry: Extra predicate an exception must satisfy to be retried
    """
    if retry_exceptions is None:
        retry_exceptions = (Exception,)

    def predicate(exc: BaseException) -> bool:
        if not isinstance(exc, retry_exceptions):
            return False
        return should_retry(exc) if should_retry else True

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            retrying = AsyncRetrying(
                stop=stop_after_attempt(max(1, max_attempts)),
                wait=wait_exponential(
                    multiplier=backoff_multiplier,
                    min=min_wait,
                    max=max_wait
                ),
                retry=retry_if_exception(predicate),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True
            )
            return await retrying(func, *args, **kwargs)

        return wrapper
    return decorator
