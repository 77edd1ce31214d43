from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from aiohttp import ClientSession

from .base import ExtractionEngine
from ..documents.static import StaticDocument
from ..errors import NavigationError
from ..utils.http import create_session, fetch_text

logger = logging.getLogger(__name__)


class SimpleEngine(ExtractionEngine):
    """
    Plain HTTP fetch + BeautifulSoup.
    No script execution, so it only works where the disclosure table is server-rendered.
    """
    _session: Optional[ClientSession] = None

    def _client(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = create_session()
        return self._session

    @asynccontextmanager
    async def open_document(
        self, url: str, *, wait_selector: Optional[str] = None, timeout: Optional[float] = None
    ) -> AsyncIterator[StaticDocument]:
        html = await fetch_text(
            self._client(),
            url,
            timeout=timeout or self.config.request_timeout,
            user_agent=self.config.user_agent,
            retries=self.config.retries,
        )
        if html is None:
            raise NavigationError(f"Could not load {url}", url=url)
        doc = StaticDocument(html, url=url)
        if wait_selector and not await doc.wait_for(wait_selector, 0):
            logger.debug("%s not present in %s", wait_selector, url)
        yield doc

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
