"""Bounded HTTP health polling of a loopback endpoint."""

import asyncio
import logging
from enum import Enum

import httpx

logger = logging.getLogger(__name__)

DEFAULT_EXPECTED = "Evolution API"
DEFAULT_ATTEMPTS = 5
DEFAULT_INTERVAL = 3.0
DEFAULT_TIMEOUT = 8.0


class HealthStatus(Enum):
    HEALTHY = "healthy"
    UNREACHABLE = "unreachable"


async def probe(
    url,
    expected=DEFAULT_EXPECTED,
    max_attempts=DEFAULT_ATTEMPTS,
    interval=DEFAULT_INTERVAL,
    timeout=DEFAULT_TIMEOUT,
    transport=None,
) -> HealthStatus:
    """Poll url until a response body contains expected (case-insensitive).

    Attempts run sequentially, ``interval`` seconds apart. Connection errors
    and non-2xx responses count as failed attempts.

    Returns:
        HealthStatus.HEALTHY on the first match, HealthStatus.UNREACHABLE
        once max_attempts are exhausted.
    """
    needle = expected.lower()
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        for attempt in range(1, max_attempts + 1):
            try:
                resp = await client.get(url)
                if resp.is_success and needle in resp.text.lower():
                    logger.debug(f"Health check passed on attempt {attempt}")
                    return HealthStatus.HEALTHY
                logger.debug(f"Attempt {attempt}/{max_attempts}: HTTP {resp.status_code}, no match")
            except httpx.HTTPError as e:
                logger.debug(f"Attempt {attempt}/{max_attempts}: {e!r}")
            if attempt < max_attempts:
                await asyncio.sleep(interval)
    return HealthStatus.UNREACHABLE
