"""Pumping intent parsing."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, Optional, Tuple

from voicelog.models import ML_PER_OZ, PumpingRecord
from voicelog.parser_utils import contains_keyword, contains_word, extract_side, first_int, first_number

PUMPING_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "verbs": ("pumped", "pump", "pumping", "pumps", "expressed", "express", "expressing"),
    "phrases": ("i pumped", "just pumped", "finished pumping", "pumped out", "pumped from"),
}
# "pumped milk" next to a feeding word describes what was in the bottle.
MILK_CONTENT_PHRASES: Tuple[str, ...] = (
    "pumped breast milk",
    "pumped breastmilk",
    "pumped milk",
    "expressed breast milk",
    "expressed breastmilk",
    "expressed milk",
)
_FEEDING_CUES: Tuple[str, ...] = ("fed", "feed", "gave", "drank", "ate", "bottle", "took")

_OZ_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:oz|ounces?)\b")
_ML_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:ml|milliliters?)\b")
_VERB_AMOUNT_PATTERN = re.compile(
    r"\b(?:pumped|expressed|got|collected|produced)\s+(\d+(?:\.\d+)?)(?![\d.])"
    r"(?!\s*(?:ml\b|milliliters?|m\b|mins?\b|minutes?|hours?|hrs?))"
)
_DURATION_PATTERN = re.compile(r"(\d+)\s*(?:minutes?|mins?|min)\b")


def matches(text: str) -> bool:
    working = text
    if contains_word(text, _FEEDING_CUES):
        for phrase in MILK_CONTENT_PHRASES:
            working = working.replace(phrase, " ")
    return any(contains_keyword(working, keywords) for keywords in PUMPING_KEYWORDS.values())


def extract_amount_oz(text: str) -> Optional[float]:
    oz = first_number(text, _OZ_PATTERN)
    if oz is not None:
        return oz
    ml = first_number(text, _ML_PATTERN)
    if ml is not None:
        return round(ml / ML_PER_OZ, 2)
    return first_number(text, _VERB_AMOUNT_PATTERN)


def parse(text: str, timestamp: datetime) -> Optional[PumpingRecord]:
    """Build a ``PumpingRecord``; a bare "I pumped" still logs 0 oz."""
    if not matches(text):
        return None
    amount = extract_amount_oz(text)
    duration = first_int(text, _DURATION_PATTERN) or None
    return PumpingRecord(
        amount_oz=amount if amount is not None else 0.0,
        timestamp=timestamp,
        duration_minutes=duration,
        side=extract_side(text),
    )


__all__ = ["MILK_CONTENT_PHRASES", "PUMPING_KEYWORDS", "extract_amount_oz", "matches", "parse"]
