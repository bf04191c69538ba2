"""Common text-processing helpers shared across parser modules."""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from voicelog.models import Side

_WHITESPACE = re.compile(r"\s+")


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Return True when any keyword is present in ``text``."""

    return any(keyword in text for keyword in keywords)


def contains_word(text: str, words: Iterable[str]) -> bool:
    """Like :func:`contains_keyword` but only on whole-word boundaries."""

    return any(re.search(rf"\b{re.escape(word)}\b", text) for word in words)


def matching_categories(text: str, table: Mapping[str, Iterable[str]]) -> set[str]:
    """Return the keyword-table categories that fire for ``text``."""

    return {category for category, keywords in table.items() if contains_keyword(text, keywords)}


def extract_side(text: str) -> Side:
    """Resolve left/right/both, defaulting to both when unclear."""
    has_left = "left" in text
    has_right = "right" in text
    if has_left and has_right:
        return Side.BOTH
    if "both" in text:
        return Side.BOTH
    if has_left:
        return Side.LEFT
    if has_right:
        return Side.RIGHT
    return Side.BOTH


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


__all__ = [
    "collapse_whitespace",
    "contains_keyword",
    "contains_word",
    "extract_side",
    "matching_categories",
]
