"""
Ingredient table lookup.

Product pages put the ingredient list in a disclosure table, but the markup
drifts. Strategies are tried from most to least specific and the first hit wins;
the winning strategy's tag is reported so layout changes show up in logs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..documents.base import Element, RawDocument

logger = logging.getLogger(__name__)

EXACT_SCOPE = "th-scope-row"
RELAXED_LABEL = "th-td-pair"
CONTENT_SHAPE = "td-pattern"

#: A labelled cell must hold more than this many characters.
LABELLED_MIN_LENGTH = 20
#: Unlabelled cells are only considered past this length...
SHAPE_MIN_LENGTH = 100
#: ...and with more commas than this.
SHAPE_MIN_COMMAS = 5


@dataclass(frozen=True)
class IngredientCandidate:
    method: str
    raw_text: str

    @property
    def length(self) -> int:
        return len(self.raw_text)


class LocatorStrategy(Protocol):
    method: str

    async def locate(self, doc: RawDocument) -> Optional[IngredientCandidate]:
        ...


async def _sibling_cell_text(header: Element) -> str:
    row = await header.closest("tr")
    if row is None:
        return ""
    cell = await row.query("td")
    if cell is None:
        return ""
    return (await cell.text()).strip()


class _LabelledRowStrategy:
    method = ""
    header_selector = ""

    def __init__(
        self,
        labels: Sequence[str],
        *,
        exact_labels: Sequence[str] = (),
        min_length: int = LABELLED_MIN_LENGTH,
    ) -> None:
        self.labels = tuple(labels)
        self.exact_labels = tuple(exact_labels)
        self.min_length = min_length

    def label_matches(self, text: str) -> bool:
        return any(label in text for label in self.labels) or text in self.exact_labels

    async def locate(self, doc: RawDocument) -> Optional[IngredientCandidate]:
        for header in await doc.query_all(self.header_selector):
            if not self.label_matches((await header.text()).strip()):
                continue
            text = await _sibling_cell_text(header)
            if len(text) > self.min_length:
                return IngredientCandidate(method=self.method, raw_text=text)
        return None


class ExactScopeStrategy(_LabelledRowStrategy):
    """Row headers explicitly marked scope="row" whose label names the disclosure."""

    method = EXACT_SCOPE
    header_selector = 'th[scope="row"]'


class RelaxedLabelStrategy(_LabelledRowStrategy):
    """Any th, also accepting a bare label such as "전성분" by exact match."""

    method = RELAXED_LABEL
    header_selector = "th"


class ContentShapeStrategy:
    """Any td that looks like a long comma list mentioning a common ingredient."""

    method = CONTENT_SHAPE

    def __init__(
        self,
        markers: Sequence[str],
        *,
        min_length: int = SHAPE_MIN_LENGTH,
        min_commas: int = SHAPE_MIN_COMMAS,
    ) -> None:
        self.markers = tuple(markers)
        self.min_length = min_length
        self.min_commas = min_commas

    def looks_like_ingredients(self, text: str) -> bool:
        return (
            len(text) > self.min_length
            and any(marker in text for marker in self.markers)
            and text.count(",") > self.min_commas
        )

    async def locate(self, doc: RawDocument) -> Optional[IngredientCandidate]:
        for cell in await doc.query_all("td"):
            text = (await cell.text()).strip()
            if self.looks_like_ingredients(text):
                return IngredientCandidate(method=self.method, raw_text=text)
        return None


async def locate_ingredient_block(
    doc: RawDocument, strategies: Sequence[LocatorStrategy]
) -> Optional[IngredientCandidate]:
    for strategy in strategies:
        candidate = await strategy.locate(doc)
        if candidate is not None:
            logger.info("Ingredient block found via %s (%s chars)", candidate.method, candidate.length)
            return candidate
    logger.info("Ingredient block not found")
    return None
