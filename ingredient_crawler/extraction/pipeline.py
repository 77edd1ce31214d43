"""
Single-document extraction: reveal -> wait for table -> locate -> parse -> fields.

Steps run strictly in order because revealing mutates what the later steps see.
Nothing in here raises for missing data; only failures of the document handle
itself (navigation, dead session) propagate to the caller.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..adapters.base import SiteAdapter
from ..adapters.oliveyoung import OliveYoungAdapter
from ..config import CrawlConfig
from ..documents.base import RawDocument
from ..models import ExtractedProduct
from .fields import BRAND, IMAGE, NAME, extract_field
from .ingredients import parse_ingredients
from .locator import IngredientCandidate, LocatorStrategy, locate_ingredient_block
from .reveal import RevealResult, reveal

logger = logging.getLogger(__name__)

DEFAULT_TABLE_TIMEOUT = 10.0
DEFAULT_POST_REVEAL_DELAY = 2.0


@dataclass(frozen=True)
class ExtractionDiagnostics:
    """Which heuristics fired. Useful for spotting layout drift; never persisted."""

    reveal: RevealResult
    table_ready: bool
    method: Optional[str] = None
    raw_length: int = 0


class Extractor:
    def __init__(
        self,
        adapter: SiteAdapter,
        *,
        strategies: Optional[Sequence[LocatorStrategy]] = None,
        table_timeout: float = DEFAULT_TABLE_TIMEOUT,
        post_reveal_delay: float = DEFAULT_POST_REVEAL_DELAY,
    ) -> None:
        self.adapter = adapter
        self.strategies: List[LocatorStrategy] = list(
            strategies if strategies is not None else adapter.strategies()
        )
        self.table_timeout = table_timeout
        self.post_reveal_delay = post_reveal_delay

    @classmethod
    def from_config(cls, config: CrawlConfig, adapter: SiteAdapter) -> "Extractor":
        return cls(
            adapter,
            strategies=adapter.strategies(
                labelled_min_length=config.labelled_min_length,
                shape_min_length=config.shape_min_length,
                shape_min_commas=config.shape_min_commas,
            ),
            table_timeout=config.table_timeout,
            post_reveal_delay=config.post_reveal_delay,
        )

    async def reveal_ingredients(self, doc: RawDocument) -> Tuple[RevealResult, bool]:
        result = await reveal(doc, self.adapter.reveal_labels)
        table_ready = await doc.wait_for(self.adapter.table_selector, self.table_timeout)
        if table_ready:
            logger.debug("Disclosure table present")
        else:
            logger.info("Timed out waiting for disclosure table; continuing")
        if self.post_reveal_delay > 0:
            await asyncio.sleep(self.post_reveal_delay)
        return result, table_ready

    def parse(self, candidate: Optional[IngredientCandidate]) -> List[str]:
        if candidate is None:
            return []
        return parse_ingredients(
            candidate.raw_text,
            disclosure_markers=self.adapter.disclosure_markers,
            must_list_markers=self.adapter.must_list_markers,
            not_applicable_markers=self.adapter.not_applicable_markers,
        )

    async def extract_with_diagnostics(
        self,
        doc: RawDocument,
        *,
        external_id: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> Tuple[ExtractedProduct, ExtractionDiagnostics]:
        source_url = source_url or doc.url
        if external_id is None:
            external_id = self.adapter.external_id(source_url) or ""

        revealed, table_ready = await self.reveal_ingredients(doc)
        candidate = await locate_ingredient_block(doc, self.strategies)
        ingredients = self.parse(candidate)
        logger.info("Parsed %s ingredients for %s", len(ingredients), external_id or source_url)

        rules = self.adapter.field_rules
        brand = await extract_field(doc, BRAND, rules)
        name = await extract_field(doc, NAME, rules)
        image_url = await extract_field(doc, IMAGE, rules)
        logger.info("Product: %s - %s", brand or "(no brand)", name or "(no name)")

        product = ExtractedProduct(
            external_id=external_id,
            source_url=source_url,
            brand=brand,
            name=name,
            image_url=image_url,
            ingredients=tuple(ingredients),
        )
        diagnostics = ExtractionDiagnostics(
            reveal=revealed,
            table_ready=table_ready,
            method=candidate.method if candidate else None,
            raw_length=candidate.length if candidate else 0,
        )
        return product, diagnostics

    async def extract(self, doc: RawDocument, **kwargs) -> ExtractedProduct:
        product, _ = await self.extract_with_diagnostics(doc, **kwargs)
        return product


async def extract_with_diagnostics(
    doc: RawDocument, extractor: Optional[Extractor] = None, **kwargs
) -> Tuple[ExtractedProduct, ExtractionDiagnostics]:
    extractor = extractor or Extractor(OliveYoungAdapter())
    return await extractor.extract_with_diagnostics(doc, **kwargs)


async def extract(doc: RawDocument, extractor: Optional[Extractor] = None, **kwargs) -> ExtractedProduct:
    """Extract a product record from a ready document using the default site adapter."""
    product, _ = await extract_with_diagnostics(doc, extractor, **kwargs)
    return product
