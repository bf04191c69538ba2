"""Rewrite spoken numbers and duration idioms into digit form.

Every domain parser works on digits ("4 oz", "90 minutes"), so utterances are
normalized once before any pattern matching. The rewrite is idempotent: running
it over already-normalized text changes nothing.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple, Union

PatternLike = Union[str, Pattern[str]]

_WORD_NUMBERS = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
}
_TENS = ("twenty", "thirty", "forty", "fifty")
_UNITS = ("one", "two", "three", "four", "five", "six", "seven", "eight", "nine")

# Longest phrases first so "an hour and a half" is not read as "an hour".
_HOUR_PHRASES: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"\b(?:an|one|1) hour and a half\b"), "90 minutes"),
    (re.compile(r"\bhalf an hour\b"), "30 minutes"),
    (re.compile(r"\bhalf hour\b"), "30 minutes"),
    (re.compile(r"\b1\.5 hours?\b"), "90 minutes"),
    (re.compile(r"\b(?:an|one|1) hour\b"), "60 minutes"),
)
_FRACTIONS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"\s+and a half\b"), ".5"),
    (re.compile(r"\s+and half\b"), ".5"),
    (re.compile(r"\ba half\b"), "0.5"),
    (re.compile(r"\bhalf an\b"), "0.5"),
)
_COMPOUND_PATTERN = re.compile(rf"\b({'|'.join(_TENS)})[\s-]({'|'.join(_UNITS)})\b")
_SINGLE_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(_WORD_NUMBERS, key=len, reverse=True)) + r")\b"
)
_WEIGHT_COMPOUND_PATTERN = re.compile(r"(\d+)\s*(lbs?|pounds?)\s+and\s+(\d+)\s*(oz|ounces?)\b")
_PROTECTED_AND = "PLUS"
# "a" and "an" are articles ("a nap", "an apple"); "an" counts only in front of a unit.
_ARTICLE_BEFORE_UNIT_PATTERN = re.compile(
    r"\ban(?=\s+(?:oz|ounces?|ml|milliliters?|minutes?|mins?|hours?|hrs?|lbs?|pounds?|kgs?|kilos?)\b)"
)


def _replace_hour_phrases(text: str) -> str:
    for pattern, replacement in _HOUR_PHRASES:
        text = pattern.sub(replacement, text)
    return text


def _replace_word_numbers(text: str) -> str:
    text = _COMPOUND_PATTERN.sub(
        lambda match: str(_WORD_NUMBERS[match.group(1)] + _WORD_NUMBERS[match.group(2)]),
        text,
    )
    text = _ARTICLE_BEFORE_UNIT_PATTERN.sub("1", text)
    return _SINGLE_PATTERN.sub(lambda match: str(_WORD_NUMBERS[match.group(1)]), text)


def normalize_numbers(text: str) -> str:
    """Return ``text`` lowercased with word numbers and duration idioms as digits.

    >>> normalize_numbers("Fed for an hour")
    'fed for 60 minutes'
    >>> normalize_numbers("nursed twenty five minutes")
    'nursed 25 minutes'
    """
    if not text:
        return ""
    working = " ".join(text.lower().split())
    working = _replace_hour_phrases(working)
    for pattern, replacement in _FRACTIONS:
        working = pattern.sub(replacement, working)
    working = _WEIGHT_COMPOUND_PATTERN.sub(rf"\1 \2 {_PROTECTED_AND} \3 \4", working)
    working = _replace_word_numbers(working)
    working = working.replace(f" {_PROTECTED_AND} ", " and ")
    # Word numbers can surface new hour phrases ("one and a half hours" -> "1.5 hours").
    return _replace_hour_phrases(working)


def first_number(text: str, *patterns: PatternLike) -> Optional[float]:
    """Return group 1 of the first matching pattern as a float.

    A literal that does not parse counts as no match, so the next pattern is
    tried instead of raising.
    """
    for pattern in patterns:
        match = re.compile(pattern).search(text)
        if not match:
            continue
        try:
            return float(match.group(1))
        except ValueError:
            continue
    return None


def first_int(text: str, *patterns: PatternLike) -> Optional[int]:
    """Integer flavour of :func:`first_number`."""
    for pattern in patterns:
        match = re.compile(pattern).search(text)
        if not match:
            continue
        try:
            return int(match.group(1))
        except ValueError:
            continue
    return None


__all__ = ["first_int", "first_number", "normalize_numbers"]
