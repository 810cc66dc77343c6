"""
Text normalization helpers shared by every extractor.

Government pages mix English and Telugu, pad values with non-breaking
spaces and sprinkle zero-width joiners through Telugu words. Everything an
extractor reads goes through clean_text() before any regex is applied.
"""

from __future__ import annotations

import re
from typing import Any, Optional

# ZWSP, ZWNJ, ZWJ, word joiner, BOM
ZERO_WIDTH_RE = re.compile(r"[\u200b\u200c\u200d\u2060\ufeff]")
# Literal entity spellings that survive when markup is double-escaped
ZWNJ_ENTITY_RE = re.compile(r"&zwnj;|&#8204;|&ZeroWidthNonJoiner;")
WHITESPACE_RE = re.compile(r"\s+")
LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")
DIGITS_RE = re.compile(r"[0-9]+")
LEADING_LABEL_RE = re.compile(r"^:?\s*")


def clean_text(value: Any) -> str:
    """
    Normalize a text fragment.

    Removes zero-width characters, collapses whitespace runs to a single
    space and trims. None becomes an empty string.
    """
    if value is None:
        return ""
    text = ZWNJ_ENTITY_RE.sub("", str(value))
    text = ZERO_WIDTH_RE.sub("", text)
    return WHITESPACE_RE.sub(" ", text).strip()


def parse_int_safe(value: Any) -> Optional[int]:
    """
    Parse the leading base-10 integer of a value.

    "42" -> 42, " 7 wards" -> 7, "abc" -> None, None -> None.
    Never raises.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = LEADING_INT_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def first_int(text: Any) -> Optional[int]:
    """Return the first run of digits anywhere in the text, or None."""
    match = DIGITS_RE.search(clean_text(text))
    return int(match.group(0)) if match else None


def all_digit_runs(text: Any) -> list[str]:
    """Every run of digits in the text, in order."""
    return DIGITS_RE.findall(clean_text(text))


def strip_label(text: Any) -> str:
    """Drop the ':' separator pages render in front of values (': 24' -> '24')."""
    return LEADING_LABEL_RE.sub("", clean_text(text), count=1).strip()
