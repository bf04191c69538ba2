"""Rule-based parsing of spoken baby-care log entries into typed activities."""

from voicelog.command_parser import parse_activity
from voicelog.models import (
    BottleContent,
    DiaperRecord,
    DiaperType,
    FeedingKind,
    FeedingRecord,
    PumpingRecord,
    Side,
    SleepRecord,
    WeightRecord,
)
from voicelog.parsers.types import OutcomeKind, ParseOutcome
from voicelog.segmenter import parse_multiple
from voicelog.voice_parser import VoiceParser

__all__ = [
    "BottleContent",
    "DiaperRecord",
    "DiaperType",
    "FeedingKind",
    "FeedingRecord",
    "OutcomeKind",
    "ParseOutcome",
    "PumpingRecord",
    "Side",
    "SleepRecord",
    "VoiceParser",
    "WeightRecord",
    "parse_activity",
    "parse_multiple",
]
