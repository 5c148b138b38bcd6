"""Retry utilities for async HTTP operations.

Retries transport-level failures only; provider answers with a non-zero
status are application errors and are never retried here.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import (
    ClientConnectorError,
    ClientError,
    ServerDisconnectedError,
)
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    ClientConnectorError,
    ServerDisconnectedError,
    ClientError,
    asyncio.TimeoutError,
)


def retry_async(
    max_retries: int = 3,
    retry_delay: float = 1.0,
    backoff_factor: float = 2.0,
    retry_exceptions: tuple = TRANSPORT_ERRORS,
):
    """Factory that returns a tenacity retry decorator.

    Args:
        max_retries: Retry attempts in addition to the first attempt.
        retry_delay: Multiplier for the exponential wait between attempts.
        backoff_factor: Exponential base for the wait.
        retry_exceptions: Exception types that trigger a retry.

    Example:
        @retry_async(max_retries=2, retry_delay=1.0)
        async def post_action():
            async with session.post(url) as response:
                return await response.text()
    """
    return retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=retry_delay, exp_base=backoff_factor),
        retry=retry_if_exception_type(retry_exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
