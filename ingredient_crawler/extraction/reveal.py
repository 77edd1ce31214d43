from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..documents.base import Element, RawDocument

logger = logging.getLogger(__name__)

# Explicit accordion toggles first, then anything carrying an expanded state.
REVEAL_SELECTORS: Tuple[Tuple[str, str], ...] = (
    ("accordion", 'button[type="button"]'),
    ("aria-expanded", "[aria-expanded]"),
)


@dataclass(frozen=True)
class RevealResult:
    matched: bool
    label: str = ""
    source: Optional[str] = None
    # Whether a click was issued; False when the section was already open.
    triggered: bool = False


async def _is_expanded(element: Element) -> bool:
    return (await element.attr("aria-expanded")) == "true"


async def reveal(doc: RawDocument, labels: Sequence[str]) -> RevealResult:
    """
    Expand the collapsed section whose toggle text contains one of `labels`.

    Only the first matching toggle is considered. Finding nothing is normal:
    some layouts render the section eagerly and some lack it altogether.
    """
    for source, selector in REVEAL_SELECTORS:
        for element in await doc.query_all(selector):
            text = (await element.text()).strip()
            if not any(label in text for label in labels):
                continue
            triggered = False
            if not await _is_expanded(element):
                await element.click()
                triggered = True
            result = RevealResult(matched=True, label=text[:30], source=source, triggered=triggered)
            logger.info("Reveal via %s: %r (clicked=%s)", source, result.label, triggered)
            return result
    logger.info("Reveal: no collapsible section found")
    return RevealResult(matched=False)
