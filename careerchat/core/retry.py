from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)


def is_transient_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


async def with_retry(
    fn: Callable[[], Awaitable[httpx.Response]],
    *,
    attempts: int = 2,
    delay: float = 0.6,
    retryable: Callable[[int], bool] = is_transient_status,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """Call ``fn`` until it returns a non-retryable status or attempts run out.

    The last response is returned whatever its status. Exceptions raised by
    ``fn`` are not retried.
    """
    if attempts < 1:
        raise ValueError("attempts must be positive")

    response = await fn()
    for attempt in range(2, attempts + 1):
        if not retryable(response.status_code):
            break
        logger.warning(
            "Transient status %s; retrying in %.2fs (attempt %d/%d)",
            response.status_code,
            delay,
            attempt,
            attempts,
        )
        await sleep(delay)
        response = await fn()
    return response
