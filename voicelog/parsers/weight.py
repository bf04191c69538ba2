"""Weight intent parsing."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Dict, Optional, Pattern, Tuple

from voicelog.models import LBS_PER_KG, OZ_PER_LB, WeightRecord
from voicelog.parser_utils import contains_keyword

WEIGHT_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "verbs": (
        "weigh",
        "weighs",
        "weighed",
        "weighing",
        "weight",
        "weighted",
        "measured",
        "measuring",
        "came in at",
        "weighs in at",
        "weight check",
        "weight is",
    ),
    # Units that only ever describe body weight; "oz" is shared with bottles and never counts.
    "units": ("lb", "lbs", "pound", "pounds", "kg", "kgs", "kilo", "kilos", "kilogram", "kilograms"),
}

_UNIT_PATTERN = re.compile(r"(?:\d\s*|\b)(?:lbs?|pounds?|kgs?|kilos?|kilograms?)\b")
_LBS_OZ_PATTERN = re.compile(r"(\d+)\s*(?:lbs?|pounds?)\s*(?:and\s*)?(\d+(?:\.\d+)?)\s*(?:oz|ounces?)\b")
_LBS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lbs?|pounds?)\b")
_OZ_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:oz|ounces?)\b")
_KG_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:kgs?|kilos?|kilograms?)\b")
_GRAMS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:grams?|g)\b")


def matches(text: str) -> bool:
    """A weight verb or a pounds/kilos unit; an ounce amount alone is a bottle."""
    return contains_keyword(text, WEIGHT_KEYWORDS["verbs"]) or bool(_UNIT_PATTERN.search(text))


def _lbs_and_oz(match: re.Match[str]) -> float:
    return float(match.group(1)) + float(match.group(2)) / OZ_PER_LB


def _lbs(match: re.Match[str]) -> float:
    return float(match.group(1))


def _oz(match: re.Match[str]) -> float:
    return float(match.group(1)) / OZ_PER_LB


def _kg(match: re.Match[str]) -> float:
    return float(match.group(1)) * LBS_PER_KG


def _grams(match: re.Match[str]) -> float:
    return float(match.group(1)) * LBS_PER_KG / 1000


_WEIGHT_RULES: Tuple[Tuple[Pattern[str], Callable[[re.Match[str]], float]], ...] = (
    (_LBS_OZ_PATTERN, _lbs_and_oz),
    (_LBS_PATTERN, _lbs),
    (_OZ_PATTERN, _oz),
    (_KG_PATTERN, _kg),
    (_GRAMS_PATTERN, _grams),
)


def extract_pounds(text: str) -> Optional[float]:
    """Return the weight in pounds from the first unit form found, or None."""
    for pattern, convert in _WEIGHT_RULES:
        match = pattern.search(text)
        if not match:
            continue
        try:
            return convert(match)
        except ValueError:
            continue
    return None


def parse(text: str, timestamp: datetime) -> Optional[WeightRecord]:
    pounds = extract_pounds(text)
    if pounds is None or pounds <= 0:
        return None
    return WeightRecord(weight_lbs=round(pounds, 3), timestamp=timestamp)


__all__ = ["WEIGHT_KEYWORDS", "extract_pounds", "matches", "parse"]
