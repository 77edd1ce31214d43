from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from .normalize import normalize, restore_digit_commas

# ASCII and full-width commas
_DELIMITER_RE = re.compile(r"[,，]")
_NUMERIC_NOISE_RE = re.compile(r"^[0-9.\s,]+$")

MIN_LENGTH = 1  # exclusive
MAX_LENGTH = 80  # exclusive

# Labelling boilerplate that leaks into the ingredient cell.
DISCLOSURE_MARKERS: Sequence[str] = ("화장품법",)
MUST_LIST_MARKERS: Sequence[str] = ("기재해야",)
NOT_APPLICABLE_MARKERS: Sequence[str] = ("해당없음",)


def is_numeric_noise(piece: str) -> bool:
    return bool(_NUMERIC_NOISE_RE.match(piece))


def is_valid_ingredient(
    piece: str,
    *,
    disclosure_markers: Iterable[str] = DISCLOSURE_MARKERS,
    must_list_markers: Iterable[str] = MUST_LIST_MARKERS,
    not_applicable_markers: Iterable[str] = NOT_APPLICABLE_MARKERS,
) -> bool:
    if not MIN_LENGTH < len(piece) < MAX_LENGTH:
        return False
    if is_numeric_noise(piece):
        return False
    if any(marker in piece for marker in disclosure_markers):
        return False
    if any(marker in piece for marker in must_list_markers):
        return False
    if piece in not_applicable_markers:
        return False
    return True


def split_pieces(raw_text: str) -> List[str]:
    """Split on commas without breaking digit-grouped numbers. No filtering."""
    return [restore_digit_commas(p.strip()) for p in _DELIMITER_RE.split(normalize(raw_text))]


def parse_ingredients(
    raw_text: str,
    *,
    disclosure_markers: Iterable[str] = DISCLOSURE_MARKERS,
    must_list_markers: Iterable[str] = MUST_LIST_MARKERS,
    not_applicable_markers: Iterable[str] = NOT_APPLICABLE_MARKERS,
) -> List[str]:
    """
    Turn a free-text ingredient cell into ordered ingredient tokens.

    Pieces are dropped when they are too short or too long, purely numeric,
    or legal boilerplate. Order is preserved and duplicates are kept.
    """
    disclosure = tuple(disclosure_markers)
    must_list = tuple(must_list_markers)
    not_applicable = tuple(not_applicable_markers)
    return [
        piece
        for piece in split_pieces(raw_text)
        if is_valid_ingredient(
            piece,
            disclosure_markers=disclosure,
            must_list_markers=must_list,
            not_applicable_markers=not_applicable,
        )
    ]
