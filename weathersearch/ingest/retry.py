"""Async GET with retry and rate limit handling, shared by the Open-Meteo clients."""

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 503)


async def get_with_retry(
    url: str,
    params: dict[str, Any],
    *,
    timeout: float,
    max_retries: int,
    retry_base_delay: float,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """GET a URL, retrying 429/503 and transport errors with exponential backoff.

    The last response is returned as-is once retries are exhausted, so callers
    decide how to treat its status. Transport errors on the final attempt are
    re-raised.
    """
    async with httpx.AsyncClient(timeout=timeout, headers=headers) as client:
        for attempt in range(max_retries + 1):
            try:
                logger.debug("GET %s params=%s (attempt %d)", url, params, attempt + 1)
                resp = await client.get(url, params=params)
            except httpx.RequestError as e:
                if attempt < max_retries:
                    delay = retry_base_delay * (2**attempt)
                    logger.warning(
                        "Request error for %s, retrying in %.1fs: %s", url, delay, e
                    )
                    await asyncio.sleep(delay)
                    continue
                raise
            if resp.status_code in RETRY_STATUSES and attempt < max_retries:
                delay = retry_base_delay * (2**attempt)
                logger.warning(
                    "%s returned %d, retrying in %.1fs (attempt %d/%d)",
                    url, resp.status_code, delay, attempt + 1, max_retries,
                )
                await asyncio.sleep(delay)
                continue
            return resp

    raise AssertionError("unreachable")
