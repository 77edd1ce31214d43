"""
Brand, display name and primary image lookup.

Each field has an ordered table of locators, most specific markup first. The
first element whose text passes the field's check wins; a field with no match
is returned as an empty string.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence
from urllib.parse import urljoin

from ..documents.base import RawDocument

logger = logging.getLogger(__name__)

BRAND = "brand"
NAME = "name"
IMAGE = "image"
FIELD_KINDS = (BRAND, NAME, IMAGE)


@dataclass(frozen=True)
class FieldLocator:
    selector: str
    accept: Callable[[str], bool] = lambda text: bool(text)


def first_line(text: str) -> str:
    return text.strip().split("\n")[0].strip()


def brand_check(blacklist: Sequence[str] = ()) -> Callable[[str], bool]:
    def accept(text: str) -> bool:
        return 0 < len(text) < 50 and not any(token in text for token in blacklist)
    return accept


def name_check(text: str) -> bool:
    return 5 < len(text) < 200


@dataclass(frozen=True)
class FieldRules:
    """Per-site locator tables for the text and image fields."""

    brand: Sequence[FieldLocator] = ()
    name: Sequence[FieldLocator] = ()
    image: Sequence[str] = ()
    # Image URLs must contain this fragment (the site's own CDN).
    image_domain: str = ""
    title_separator: str = "|"


async def _first_text_match(doc: RawDocument, locators: Sequence[FieldLocator]) -> str:
    for locator in locators:
        element = await doc.query(locator.selector)
        if element is None:
            continue
        text = first_line(await element.text())
        if text and locator.accept(text):
            logger.debug("Matched %r -> %r", locator.selector, text)
            return text
    return ""


async def _name_from_title(doc: RawDocument, separator: str) -> str:
    title = await doc.title()
    if not title or separator not in title:
        return ""
    return first_line(title.split(separator)[0])


async def _image(doc: RawDocument, rules: FieldRules) -> str:
    for selector in rules.image:
        element = await doc.query(selector)
        if element is None:
            continue
        src = await element.attr("src")
        if not src:
            continue
        url = urljoin(doc.url, src) if doc.url else src
        if rules.image_domain in url:
            return url
    return ""


async def extract_field(doc: RawDocument, kind: str, rules: FieldRules) -> str:
    if kind == BRAND:
        return await _first_text_match(doc, rules.brand)
    if kind == NAME:
        name = await _first_text_match(doc, rules.name)
        if not name:
            name = await _name_from_title(doc, rules.title_separator)
        return name
    if kind == IMAGE:
        return await _image(doc, rules)
    raise ValueError(f"Unknown field kind: {kind!r}")
