"""Feeding intent parsing (bottle and nursing)."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, Optional, Tuple

from voicelog.models import DEFAULT_NURSING_MINUTES, ML_PER_OZ, BottleContent, FeedingRecord
from voicelog.parser_utils import (
    contains_keyword,
    contains_word,
    extract_side,
    find_clock_range,
    first_int,
    first_number,
)

FEEDING_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "direct": ("fed", "feed", "feeding", "ate", "eaten", "eating", "drank", "drinking", "drink", "gave", "give", "giving"),
    "container": ("bottle", "bottles"),
    "amount": ("oz", "ounce", "ounces", "ml", "milliliter", "milliliters"),
    "nursing": (
        "nursed",
        "nursing",
        "nurse",
        "breastfed",
        "breastfeeding",
        "breastfeed",
        "breast-fed",
        "breast-feeding",
        "breast fed",
        "breast feeding",
        "latched",
        "latching",
        "suckled",
        "on the breast",
        "at the breast",
    ),
    "content": ("formula", "breastmilk", "breast milk", "pumped milk", "expressed milk"),
    "phrases": ("took a bottle", "took the bottle", "finished bottle", "finished her bottle", "finished his bottle"),
}
NURSING_KEYWORDS: Tuple[str, ...] = FEEDING_KEYWORDS["nursing"] + ("breastmilk", "breast milk")
FORMULA_KEYWORDS: Tuple[str, ...] = ("formula", "similac", "enfamil", "gerber")
BREASTMILK_KEYWORDS: Tuple[str, ...] = (
    "breastmilk",
    "breast milk",
    "pumped milk",
    "expressed milk",
    "pumped",
    "expressed",
    "my milk",
)
# Words that make a unit-less number plausible as a bottle amount ("fed 4").
_AMOUNT_VERBS: Tuple[str, ...] = ("fed", "feed", "gave", "drank", "ate", "had", "took", "finished", "bottle")

HEURISTIC_CONFIDENCE = 0.5
MAX_NURSING_RANGE_MINUTES = 180

_EXPLICIT_AMOUNT_PATTERN = re.compile(r"\d+(?:\.\d+)?\s*(?:oz|ounces?|ml|milliliters?)\b")
_OZ_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:oz|ounces?)\b")
_ML_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:ml|milliliters?)\b")
_BARE_NUMBER_PATTERN = re.compile(
    r"(?<![\d.:])(\d+(?:\.\d+)?)(?![\d.:])(?!\s*(?:m\b|min|hour|hr|h\b|lb|pound|kg|am\b|pm\b|%))"
)
_DURATION_PATTERNS = (
    re.compile(r"(\d+)\s*(?:minutes?|mins?|min|m)\b"),
    re.compile(r"\bfor\s+(\d+)\b(?!\s*(?:hours?|hrs?|h)\b)"),
)
_HOURS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)\b")


    # WHAT: detect whether a lowered utterance mentions feeding at all.
    # WHY: the orchestrator gates the (more expensive) amount/duration extraction on it.
    # HOW: keyword containment over every category of ``FEEDING_KEYWORDS``.
def matches(text: str) -> bool:
    return any(contains_keyword(text, keywords) for keywords in FEEDING_KEYWORDS.values())


def is_nursing(text: str) -> bool:
    """Nursing needs a nursing word and no oz/ml amount ("4oz breastmilk" is a bottle)."""
    if not contains_keyword(text, NURSING_KEYWORDS):
        return False
    if _EXPLICIT_AMOUNT_PATTERN.search(text):
        return False
    if "bottle" in text and not contains_keyword(text, FEEDING_KEYWORDS["nursing"]):
        return False
    return True


    # WHAT: build a bottle or nursing ``FeedingRecord`` from normalized text.
    # WHY: both feeding styles share vocabulary ("breastmilk") so one entry point decides which applies.
    # HOW: nursing first when ``is_nursing`` holds, otherwise a bottle amount must be found or we return None.
def parse(text: str, timestamp: datetime, now: datetime) -> Optional[FeedingRecord]:
    if is_nursing(text):
        return _parse_nursing(text, timestamp, now)
    return _parse_bottle(text, timestamp)


def uses_unitless_amount(text: str) -> bool:
    """True when a bottle amount can only come from the bare-number guess."""
    if is_nursing(text):
        return False
    return _explicit_amount(text) is None and _unitless_amount(text) is not None


def _parse_nursing(text: str, timestamp: datetime, now: datetime) -> FeedingRecord:
    side = extract_side(text)
    clock_range = find_clock_range(text, now)
    if clock_range and 0 < clock_range.minutes < MAX_NURSING_RANGE_MINUTES:
        # The session is logged when it finished.
        return FeedingRecord.nursing(clock_range.end, clock_range.minutes, side)
    duration = _extract_duration(text) or DEFAULT_NURSING_MINUTES
    return FeedingRecord.nursing(timestamp, duration, side)


def _extract_duration(text: str) -> Optional[int]:
    minutes = first_int(text, *_DURATION_PATTERNS)
    if minutes:
        return minutes
    hours = first_number(text, _HOURS_PATTERN)
    if hours:
        return int(round(hours * 60)) or None
    return None


def _parse_bottle(text: str, timestamp: datetime) -> Optional[FeedingRecord]:
    amount = _explicit_amount(text)
    if amount is None:
        amount = _unitless_amount(text)
    if amount is None or amount <= 0:
        return None
    return FeedingRecord.bottle(round(amount, 2), timestamp, _detect_content(text))


def _explicit_amount(text: str) -> Optional[float]:
    oz = first_number(text, _OZ_PATTERN)
    if oz is not None:
        return oz
    ml = first_number(text, _ML_PATTERN)
    if ml is not None:
        return ml / ML_PER_OZ
    return None


def _unitless_amount(text: str) -> Optional[float]:
    # Low-confidence guess: small numbers are ounces, larger ones millilitres.
    if not contains_word(text, _AMOUNT_VERBS):
        return None
    for match in _BARE_NUMBER_PATTERN.finditer(text):
        try:
            value = float(match.group(1))
        except ValueError:
            continue
        if 0 < value < 20:
            return value if value <= 10 else value / ML_PER_OZ
    return None


def _detect_content(text: str) -> Optional[BottleContent]:
    if contains_keyword(text, FORMULA_KEYWORDS):
        return BottleContent.FORMULA
    if contains_keyword(text, BREASTMILK_KEYWORDS):
        return BottleContent.BREASTMILK
    return None


__all__ = [
    "BREASTMILK_KEYWORDS",
    "FEEDING_KEYWORDS",
    "FORMULA_KEYWORDS",
    "HEURISTIC_CONFIDENCE",
    "NURSING_KEYWORDS",
    "is_nursing",
    "matches",
    "parse",
    "uses_unitless_amount",
]
