"""Split multi-activity utterances and parse each clause independently.

"4oz bottle and a wet diaper" names two domains, so it is cut into
"4oz bottle" and "a wet diaper" and each clause goes through
:func:`voicelog.command_parser.parse_activity` on its own. Utterances that
name a single domain are never split, which keeps idioms such as
"nursed left and right" intact.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, List, Tuple

from voicelog.command_parser import parse_activity
from voicelog.parser_utils import matching_categories, normalize_numbers
from voicelog.parsers.types import ParseOutcome

logger = logging.getLogger(__name__)

DOMAIN_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "feeding": ("fed", "feed", "ate", "bottle", "nursed", "nursing", "breastfed", "formula", "oz", "ounce", "ml"),
    "diaper": ("diaper", "wet", "poop", "poopy", "dirty", "changed"),
    "sleep": ("sleep", "slept", "nap", "napped", "asleep", "woke", "wake"),
    "pumping": ("pumped", "pump", "pumping", "expressed"),
    "weight": ("weigh", "weighs", "weight", "pounds", "lbs", "kg"),
}

# Longest separators first; every pass splits all pieces produced so far.
SEPARATORS: Tuple[str, ...] = (" and also ", ", and ", " and then ", " also ", " then ", " and ", ",")

_PLACEHOLDER = "KEEPTOGETHER"
_PROTECTED_PHRASES: Tuple[str, ...] = ("and a half", "and half", "left and right", "right and left")
_WEIGHT_COMPOUND_PATTERN = re.compile(r"(\d+\s*(?:lbs?|pounds?))\s+and\s+(\d+\s*(?:oz|ounces?))\b")


def detected_domains(text: str) -> set[str]:
    """Return the activity domains whose keywords appear in ``text``."""

    return matching_categories(text.lower(), DOMAIN_KEYWORDS)


def _protect(text: str) -> str:
    for phrase in _PROTECTED_PHRASES:
        text = text.replace(phrase, phrase.replace(" ", _PLACEHOLDER))
    return _WEIGHT_COMPOUND_PATTERN.sub(rf"\1{_PLACEHOLDER}and{_PLACEHOLDER}\2", text)


def _restore(text: str) -> str:
    return text.replace(_PLACEHOLDER, " ")


def split_segments(text: str) -> List[str]:
    """Cut ``text`` on the separator list, keeping protected idioms whole."""
    pieces = [_protect(text.lower())]
    for separator in SEPARATORS:
        pieces = [part for piece in pieces for part in piece.split(separator)]
    segments = [_restore(piece).strip() for piece in pieces]
    return [segment for segment in segments if segment]


def parse_multiple(message: str, now: datetime) -> List[ParseOutcome]:
    """Parse every activity named in ``message``.

    Returns an empty list when fewer than two domains are mentioned; callers
    fall back to :func:`parse_activity` in that case. Clauses that do not parse
    are dropped so the remaining activities are still logged.
    """
    if not message or not message.strip():
        return []
    text = normalize_numbers(message)
    if len(detected_domains(text)) < 2:
        return []

    outcomes: List[ParseOutcome] = []
    for segment in split_segments(text) or [text]:
        outcome = parse_activity(segment, now)
        if outcome.is_error:
            logger.debug("Dropping unparsed segment %r from %r", segment, message)
            continue
        outcomes.append(outcome)
    return outcomes


__all__ = ["DOMAIN_KEYWORDS", "SEPARATORS", "detected_domains", "parse_multiple", "split_segments"]
