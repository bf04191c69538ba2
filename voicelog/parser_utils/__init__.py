"""Shared helper utilities for activity parsing."""

from .text import collapse_whitespace, contains_keyword, contains_word, extract_side, matching_categories
from .numbers import first_int, first_number, normalize_numbers
from .datetime import ClockRange, apply_meridiem, at_clock, extract_time, find_clock_range, smart_hour_default

__all__ = [
    "ClockRange",
    "apply_meridiem",
    "at_clock",
    "collapse_whitespace",
    "contains_keyword",
    "contains_word",
    "extract_side",
    "extract_time",
    "find_clock_range",
    "first_int",
    "first_number",
    "matching_categories",
    "normalize_numbers",
    "smart_hour_default",
]
