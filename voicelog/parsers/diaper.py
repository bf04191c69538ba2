"""Diaper intent parsing."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Tuple

from voicelog.models import DiaperRecord, DiaperType
from voicelog.parser_utils import contains_keyword

DIAPER_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "generic": ("diaper", "diapers", "nappy", "nappies", "changed", "change", "changing"),
    "wet": ("wet", "pee", "peed", "pees", "peeing", "urine", "urinated", "wee", "weed"),
    "dirty": (
        "poop",
        "poopy",
        "pooped",
        "poops",
        "pooping",
        "dirty",
        "messy",
        "soiled",
        "bowel",
        "stool",
        "stools",
        "number two",
        "number 2",
    ),
    "mixed": ("both", "mixed", "combo", "pee and poop", "poop and pee"),
}


def matches(text: str) -> bool:
    return any(contains_keyword(text, keywords) for keywords in DIAPER_KEYWORDS.values())


def classify(text: str) -> Optional[DiaperType]:
    """Return the diaper type implied by ``text`` or None without any diaper cue."""
    has_wet = contains_keyword(text, DIAPER_KEYWORDS["wet"])
    has_dirty = contains_keyword(text, DIAPER_KEYWORDS["dirty"])
    if contains_keyword(text, DIAPER_KEYWORDS["mixed"]) and (has_wet or has_dirty or _is_generic(text)):
        return DiaperType.MIXED
    if has_wet and has_dirty:
        return DiaperType.MIXED
    if has_dirty:
        return DiaperType.DIRTY
    if has_wet or _is_generic(text):
        return DiaperType.WET
    return None


def parse(text: str, timestamp: datetime) -> Optional[DiaperRecord]:
    diaper_type = classify(text)
    if diaper_type is None:
        return None
    return DiaperRecord(diaper_type=diaper_type, timestamp=timestamp)


def _is_generic(text: str) -> bool:
    return contains_keyword(text, DIAPER_KEYWORDS["generic"])


__all__ = ["DIAPER_KEYWORDS", "classify", "matches", "parse"]
