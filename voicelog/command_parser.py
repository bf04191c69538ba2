"""Command parser that turns one free-form utterance into a typed activity."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Tuple

from voicelog.models import FeedingKind
from voicelog.parser_utils import extract_time, normalize_numbers
from voicelog.parsers import diaper, feeding, pumping, sleep, weight
from voicelog.parsers.types import ParseOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Segment:
    original: str
    text: str
    cleaned: str
    timestamp: datetime
    now: datetime


def _parse_completed_sleep(segment: _Segment) -> Optional[ParseOutcome]:
    record = sleep.parse_completed(segment.text, segment.now, end=segment.timestamp)
    return ParseOutcome.from_record(record, segment.original) if record else None


def _parse_weight(segment: _Segment) -> Optional[ParseOutcome]:
    record = weight.parse(segment.cleaned, segment.timestamp)
    return ParseOutcome.from_record(record, segment.original) if record else None


def _parse_pumping(segment: _Segment) -> Optional[ParseOutcome]:
    record = pumping.parse(segment.cleaned, segment.timestamp)
    return ParseOutcome.from_record(record, segment.original) if record else None


def _parse_feeding(segment: _Segment) -> Optional[ParseOutcome]:
    record = feeding.parse(segment.cleaned, segment.timestamp, segment.now)
    if record is None:
        return None
    confidence = 0.95
    if record.kind is FeedingKind.BOTTLE and feeding.uses_unitless_amount(segment.cleaned):
        confidence = feeding.HEURISTIC_CONFIDENCE
    return ParseOutcome.from_record(record, segment.original, confidence=confidence)


def _parse_sleep_control(segment: _Segment) -> Optional[ParseOutcome]:
    if sleep.matches_end(segment.cleaned):
        return ParseOutcome.sleep_end(segment.original, segment.timestamp)
    return ParseOutcome.sleep_start(segment.original, segment.timestamp)


def _parse_diaper(segment: _Segment) -> Optional[ParseOutcome]:
    record = diaper.parse(segment.cleaned, segment.timestamp)
    return ParseOutcome.from_record(record, segment.original) if record else None


Matcher = Callable[[_Segment], bool]
Handler = Callable[[_Segment], Optional[ParseOutcome]]

# Vocabularies overlap on purpose ("oz" is both a bottle and a weight, "breast"
# shows up in pumping and nursing), so the most specific domain is asked first:
#   sleep_completed - ranges and durations would otherwise look like a start
#   weight          - "8 lbs 6 oz" contains a bottle unit
#   pumping         - "pumped ... breast ... 2oz" contains nursing words
#   feeding         - bottle amounts and nursing sessions
#   sleep_control   - plain start/wake phrases
#   diaper          - broadest vocabulary ("changed", "both")
# Reordering this table changes results; tests in test_command_parser pin it.
PRECEDENCE: Tuple[Tuple[str, Matcher, Handler], ...] = (
    ("sleep_completed", lambda segment: sleep.matches_completed(segment.text), _parse_completed_sleep),
    ("weight", lambda segment: weight.matches(segment.cleaned), _parse_weight),
    ("pumping", lambda segment: pumping.matches(segment.cleaned), _parse_pumping),
    ("feeding", lambda segment: feeding.matches(segment.cleaned), _parse_feeding),
    (
        "sleep_control",
        lambda segment: sleep.matches_start(segment.cleaned) or sleep.matches_end(segment.cleaned),
        _parse_sleep_control,
    ),
    ("diaper", lambda segment: diaper.matches(segment.cleaned), _parse_diaper),
)


def parse_activity(message: str, now: datetime) -> ParseOutcome:
    """Parse a single-activity utterance relative to ``now``.

    WHAT: normalize numbers, pull out the time reference, then walk
    ``PRECEDENCE`` until a domain produces a record.
    WHY: unparseable speech is routine, so the result is always a
    ``ParseOutcome`` (an ``error`` outcome when nothing matched) and never an
    exception.
    HOW: a domain whose matcher fires but whose handler finds no usable value
    (a weight verb without a number, say) yields None and the next domain is
    tried.
    """
    original = message or ""
    if not original.strip():
        return ParseOutcome.error(original, "Nothing to parse.")

    text = normalize_numbers(original)
    timestamp, cleaned = extract_time(text, now)
    segment = _Segment(original=original, text=text, cleaned=cleaned, timestamp=timestamp, now=now)

    for name, matcher, handler in PRECEDENCE:
        if not matcher(segment):
            continue
        try:
            outcome = handler(segment)
        except (ValueError, OverflowError) as exc:
            logger.debug("%s rejected %r: %s", name, original, exc)
            continue
        if outcome is not None:
            logger.debug("Parsed %r as %s via %s", original, outcome.kind.value, name)
            return outcome
        logger.debug("%s matched %r without usable values", name, original)

    return ParseOutcome.error(original)


__all__ = ["PRECEDENCE", "ParseOutcome", "parse_activity"]
