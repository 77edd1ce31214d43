from __future__ import annotations

import asyncio
from typing import Optional
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging

logger = logging.getLogger(__name__)


async def fetch_text(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 15.0,
    user_agent: Optional[str] = None,
    retries: int = 2,
) -> Optional[str]:
    """
    Fetch a URL and return body text. Returns None on failure after retries.
    """
    headers = {"Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8"}
    if user_agent:
        headers["User-Agent"] = user_agent

    last_exc: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
                resp.raise_for_status()
                # A mislabelled charset must not kill the item; bad bytes become U+FFFD.
                return await resp.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            last_exc = exc
            logger.debug("fetch_text attempt %s failed for %s: %r", attempt + 1, url, exc)
            if attempt < retries:
                await asyncio.sleep(min(2 ** attempt, 5))
    logger.warning("fetch_text failed for %s after %s attempts: %r", url, retries + 1, last_exc)
    return None


def create_session() -> ClientSession:
    """
    Create the aiohttp ClientSession shared by a SimpleEngine.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    # One request at a time per engine, so a small pool is plenty.
    connector = aiohttp.TCPConnector(limit=4)
    return aiohttp.ClientSession(connector=connector)
