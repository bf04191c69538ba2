"""Sleep intent parsing.

Three shapes of sleep utterance are recognised:

* completed sleep with a clock range ("slept from 10 to 2") or a duration
  ("napped 1.5 hours"),
* a sleep start ("she's asleep", "put him down"),
* a sleep end ("woke up", "baby's awake").

Wake words always win over start words so "woke up from her nap" is an end,
never a start.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from voicelog.models import SleepRecord
from voicelog.parser_utils import contains_keyword, find_clock_range, first_int, first_number

SLEEP_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "start": (
        "asleep",
        "down",
        "sleeping",
        "napping",
        "dozing",
        "went to sleep",
        "fell asleep",
        "put her down",
        "put him down",
        "put baby down",
        "went to bed",
        "in bed",
        "in crib",
        "in the crib",
        "started sleeping",
        "started napping",
        "taking a nap",
        "nap time",
        "bedtime",
    ),
    "end": (
        "woke",
        "wake",
        "waking",
        "awake",
        "woken",
        "is up",
        "got up",
        "getting up",
        "she's up",
        "he's up",
        "baby's up",
        "baby up",
        "up from",
        "stirring",
        "done sleeping",
        "finished sleeping",
        "done napping",
    ),
    "completed": (
        "slept",
        "napped",
        "took a nap",
        "had a nap",
        "sleep was",
        "nap was",
        "nap from",
        "sleep from",
    ),
}

_HOURS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)\b(?!\s*ago)")
_MINUTES_PATTERN = re.compile(r"(\d+)\s*(?:minutes?|mins?|m)\b(?!\s*ago)")


def matches_completed(text: str) -> bool:
    return contains_keyword(text, SLEEP_KEYWORDS["completed"])


def matches_start(text: str) -> bool:
    return contains_keyword(text, SLEEP_KEYWORDS["start"]) and not matches_end(text)


def matches_end(text: str) -> bool:
    return contains_keyword(text, SLEEP_KEYWORDS["end"])


    # WHAT: turn "slept from X to Y" / "napped N hours" into a finished ``SleepRecord``.
    # WHY: completed sleep is the most specific sleep phrasing and must not be mistaken for a start.
    # HOW: clock range first (afternoon end inference, overnight roll-back), then a duration ending at ``end``.
def parse_completed(text: str, now: datetime, end: Optional[datetime] = None) -> Optional[SleepRecord]:
    if not matches_completed(text):
        return None
    record = _parse_range(text, now)
    if record:
        return record
    return _parse_duration(text, end or now)


def _parse_range(text: str, now: datetime) -> Optional[SleepRecord]:
    clock_range = find_clock_range(text, now, infer_afternoon_end=True)
    if clock_range is None:
        return None
    start, end = clock_range.start, clock_range.end
    if end == start:
        return None
    if end < start:
        # "from 10pm to 6am" started the previous evening.
        start -= timedelta(days=1)
    if end > now:
        # A finished sleep cannot end in the future; it was yesterday's.
        start -= timedelta(days=1)
        end -= timedelta(days=1)
    return SleepRecord(start_time=start, end_time=end)


def _parse_duration(text: str, end: datetime) -> Optional[SleepRecord]:
    hours = first_number(text, _HOURS_PATTERN)
    minutes = first_int(text, _MINUTES_PATTERN)
    if hours is None and minutes is None:
        return None
    total = int(round((hours or 0) * 60)) + (minutes or 0)
    if total <= 0:
        return None
    return SleepRecord(start_time=end - timedelta(minutes=total), end_time=end)


__all__ = [
    "SLEEP_KEYWORDS",
    "matches_completed",
    "matches_end",
    "matches_start",
    "parse_completed",
]
