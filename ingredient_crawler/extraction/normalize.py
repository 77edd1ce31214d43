"""
Text normalization applied before an ingredient cell is split into items.

Thousands separators ("1,000ppm") look exactly like list delimiters, so they are
swapped for a sentinel before any splitting and swapped back afterwards.
"""
from __future__ import annotations

import re

# Private-use code point; never appears in page text.
DIGIT_COMMA_SENTINEL = "\ue000"

_DIGIT_COMMA_RE = re.compile(r"(?<=\d),(?=\d)")
_WHITESPACE_RUN_RE = re.compile(r"\s{2,}")


def protect_digit_commas(text: str) -> str:
    return _DIGIT_COMMA_RE.sub(DIGIT_COMMA_SENTINEL, text)


def restore_digit_commas(text: str) -> str:
    return text.replace(DIGIT_COMMA_SENTINEL, ",")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN_RE.sub(" ", text.replace("\n", " "))


def normalize(raw_text: str) -> str:
    """
    Protect digit-grouping commas, then fold newlines and whitespace runs to single spaces.
    The result still carries sentinels; call restore_digit_commas on each split piece.
    """
    return collapse_whitespace(protect_digit_commas(raw_text))
