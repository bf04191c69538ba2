"""Reusable datetime helpers for parsers.

Nothing here reads the wall clock: every helper takes ``now`` so callers (and
tests) decide which instant "2 hours ago" or "at 3" is relative to.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Match, Optional, Pattern, Tuple

from voicelog.parser_utils.text import collapse_whitespace

_UNIT_AFTER_NUMBER = (
    r"(?:\.\d|oz\b|ounces?\b|ml\b|lbs?\b|pounds?\b|kgs?\b|kilos?\b|kilograms?\b|g\b|grams?\b"
    r"|m\b|mins?\b|minutes?\b|h\b|hours?\b|hrs?\b)"
)
_HOURS_AGO_PATTERN = re.compile(r"(?<![\d.])(\d+(?:\.\d+)?)\s*hours?\s*ago\b")
_MINUTES_AGO_PATTERN = re.compile(r"(?<![\d.])(\d+(?:\.\d+)?)\s*(?:minutes?|mins?)\s*ago\b")
_AT_TIME_PATTERN = re.compile(
    rf"\bat\s+(\d{{1,2}})(?!\d)(?::(\d{{2}})(?!\d))?(?:\s*(am|pm)\b)?(?!\s*{_UNIT_AFTER_NUMBER})"
)
_DIRECT_TIME_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b")
_RANGE_PATTERN = re.compile(
    r"\bfrom\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*(?:to|until|till|-)\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\b"
)


@dataclass(frozen=True)
class ClockRange:
    """A "from X to Y" clock range resolved onto the day of ``now``."""

    start: datetime
    end: datetime
    span: Tuple[int, int]

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


def apply_meridiem(hour: int, meridiem: Optional[str]) -> int:
    """Convert a 12-hour clock value to 24-hour form ("12am" is midnight)."""
    if not meridiem:
        return hour
    if hour > 12:
        raise ValueError(f"{hour}{meridiem} is not a valid clock time.")
    if meridiem == "pm" and hour < 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


def smart_hour_default(hour: int, now: datetime) -> int:
    """Assume PM for morning-looking hours once it is already afternoon."""
    if hour < 12 and now.hour >= 12:
        return hour + 12
    return hour


def at_clock(now: datetime, hour: int, minute: int = 0) -> datetime:
    """Return ``now``'s date at ``hour:minute``; raises ValueError when out of range."""
    return now.replace(hour=hour, minute=minute, second=0, microsecond=0)


    # WHAT: locate and resolve a "from X to Y" clock range.
    # WHY: nursing and sleep both log finished sessions this way and must agree on AM/PM handling.
    # HOW: the start borrows a trailing "pm" when it has no meridiem of its own and is not later than
    #      the end (a bare 12 before an "am" end is midnight); sleep additionally reads "from 10 to 2"
    #      as ending in the afternoon.
def find_clock_range(text: str, now: datetime, *, infer_afternoon_end: bool = False) -> Optional[ClockRange]:
    match = _RANGE_PATTERN.search(text)
    if not match:
        return None
    try:
        start_hour = int(match.group(1))
        start_minute = int(match.group(2) or 0)
        end_hour = int(match.group(4))
        end_minute = int(match.group(5) or 0)
        start_meridiem = match.group(3)
        end_meridiem = match.group(6)

        raw_end_hour = end_hour
        if start_meridiem:
            start_hour = apply_meridiem(start_hour, start_meridiem)
        elif end_meridiem == "pm" and start_hour < 12 and start_hour <= raw_end_hour:
            start_hour += 12
        elif end_meridiem == "am" and start_hour == 12:
            # "from 12 to 12:30am" starts at midnight.
            start_hour = 0

        if end_meridiem:
            end_hour = apply_meridiem(end_hour, end_meridiem)
        elif infer_afternoon_end and end_hour < start_hour and end_hour < 12:
            end_hour += 12

        start = at_clock(now, start_hour, start_minute)
        end = at_clock(now, end_hour, end_minute)
    except ValueError:
        return None
    return ClockRange(start=start, end=end, span=match.span())


def _resolve_hours_ago(match: Match[str], now: datetime) -> Optional[datetime]:
    return now - timedelta(hours=float(match.group(1)))


def _resolve_minutes_ago(match: Match[str], now: datetime) -> Optional[datetime]:
    return now - timedelta(minutes=float(match.group(1)))


def _resolve_clock(match: Match[str], now: datetime) -> Optional[datetime]:
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3)
    if meridiem:
        hour = apply_meridiem(hour, meridiem)
    else:
        hour = smart_hour_default(hour, now)
    return at_clock(now, hour, minute)


# First rule with a usable match wins; order is significant.
_TIME_RULES: Tuple[Tuple[Pattern[str], Callable[[Match[str], datetime], Optional[datetime]]], ...] = (
    (_HOURS_AGO_PATTERN, _resolve_hours_ago),
    (_MINUTES_AGO_PATTERN, _resolve_minutes_ago),
    (_AT_TIME_PATTERN, _resolve_clock),
    (_DIRECT_TIME_PATTERN, _resolve_clock),
)


def _overlaps(span: Tuple[int, int], others: List[Tuple[int, int]]) -> bool:
    start, end = span
    return any(start < other_end and other_start < end for other_start, other_end in others)


def extract_time(text: str, now: datetime) -> Tuple[datetime, str]:
    """Find the first time reference in ``text``.

    Returns the resolved timestamp and ``text`` with the reference removed.
    Clock times inside a "from X to Y" range are left for the domain parsers.
    When nothing usable is found the result is ``(now, text)``.
    """
    if not text:
        return now, text
    range_spans = [match.span() for match in _RANGE_PATTERN.finditer(text)]
    for pattern, resolve in _TIME_RULES:
        for match in pattern.finditer(text):
            if _overlaps(match.span(), range_spans):
                continue
            try:
                timestamp = resolve(match, now)
            except (ValueError, OverflowError):
                timestamp = None
            if timestamp is None:
                continue
            remaining = collapse_whitespace(text[: match.start()] + " " + text[match.end() :])
            return timestamp, remaining
    return now, text


__all__ = [
    "ClockRange",
    "apply_meridiem",
    "at_clock",
    "extract_time",
    "find_clock_range",
    "smart_hour_default",
]
