from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import AsyncContextManager, Iterable, List, Optional

from ..adapters.base import SiteAdapter
from ..adapters.registry import AdapterRegistry
from ..config import CrawlConfig
from ..documents.base import RawDocument
from ..errors import CrawlerError
from ..extraction.pipeline import Extractor
from ..models import BatchFailure, BatchReport, ExtractedProduct, SearchHit

logger = logging.getLogger(__name__)


class ExtractionEngine(ABC):
    """
    Abstract engine interface. Implementations own the rendering session;
    the extraction pipeline only sees the documents they hand out.

    One engine serves one document at a time. Callers must not overlap calls.
    """
    def __init__(
        self,
        config: CrawlConfig,
        registry: AdapterRegistry | None = None,
        adapter: SiteAdapter | None = None,
    ) -> None:
        self.config = config
        self.registry = registry or AdapterRegistry()
        self.adapter = adapter or self.registry.get(config.site)
        self.extractor = Extractor.from_config(config, self.adapter)

    @abstractmethod
    def open_document(
        self, url: str, *, wait_selector: Optional[str] = None, timeout: Optional[float] = None
    ) -> AsyncContextManager[RawDocument]:  # pragma: no cover - interface
        """
        Load url and yield a ready document. Raises NavigationError if it cannot be loaded.
        """
        ...

    @abstractmethod
    async def close(self) -> None:  # pragma: no cover - interface
        ...

    async def prepare(self, doc: RawDocument) -> None:
        """Hook run before extraction, e.g. to trigger lazy loading."""

    async def extract(self, external_id: str) -> ExtractedProduct:
        url = self.adapter.product_url(external_id)
        logger.info("Extracting %s", external_id)
        async with self.open_document(url, timeout=self.config.navigation_timeout) as doc:
            await self.prepare(doc)
            return await self.extractor.extract(doc, external_id=external_id, source_url=url)

    async def search(self, query: str) -> List[SearchHit]:
        url = self.adapter.search_url(query)
        async with self.open_document(
            url, wait_selector=self.adapter.search_selector, timeout=self.config.search_timeout
        ) as doc:
            html = await doc.html()
        hits = self.adapter.parse_search(html, url)
        logger.info("Search %r: %s results", query, len(hits))
        return hits

    async def extract_many(self, external_ids: Iterable[str]) -> BatchReport:
        """
        Extract items one after another. A failed item is recorded and skipped;
        it never aborts the rest of the batch.
        """
        report = BatchReport()
        for external_id in external_ids:
            try:
                product = await self.extract(external_id)
            except CrawlerError as exc:
                logger.warning("Extraction failed for %s: %s", external_id, exc)
                report.failed.append(BatchFailure(external_id=external_id, error=str(exc)))
                continue
            report.success.append(product)
            if self.config.batch_delay > 0:
                await asyncio.sleep(self.config.batch_delay)
        return report

    async def __aenter__(self) -> "ExtractionEngine":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
