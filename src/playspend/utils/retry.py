"""Retry decorator with exponential backoff."""
import time
import functools
from typing import Callable, Optional, Type, Tuple
from googleapiclient.errors import HttpError
from .exceptions import RetryableError
from .logger import get_logger
from playspend.config.settings import get_settings

logger = get_logger()


def retry_with_backoff(
    max_retries: Optional[int] = None,
    backoff_factor: Optional[float] = None,
    retryable_exceptions: Tuple[Type[Exception], ...] = (RetryableError,)
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of attempts, from settings at call time if omitted
        backoff_factor: Multiplier for wait time between retries, from settings if omitted
        retryable_exceptions: Tuple of exception types that trigger retry
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            settings = get_settings()
            retries = settings.retry_max_retries if max_retries is None else max_retries
            factor = settings.retry_backoff_factor if backoff_factor is None else backoff_factor

            for attempt in range(retries):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    # Client errors other than rate limiting will not succeed on retry
                    if isinstance(e, HttpError) and e.resp.status < 500 and e.resp.status != 429:
                        raise

                    if attempt == retries - 1:
                        logger.error(f"Max retries ({retries}) exceeded for {func.__name__}: {e}")
                        raise

                    wait_time = factor ** attempt
                    logger.warning(
                        f"Retry {attempt + 1}/{retries} for {func.__name__} "
                        f"after {wait_time:.1f}s: {e}"
                    )
                    time.sleep(wait_time)

        return wrapper
    return decorator
