"""Shared dataclasses for parser outputs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from voicelog.models import DiaperRecord, FeedingRecord, PumpingRecord, SleepRecord, WeightRecord

ActivityRecord = Union[FeedingRecord, DiaperRecord, SleepRecord, WeightRecord, PumpingRecord]


class OutcomeKind(str, Enum):
    FEEDING = "feeding"
    DIAPER = "diaper"
    SLEEP = "sleep"
    WEIGHT = "weight"
    PUMPING = "pumping"
    SLEEP_START = "sleep_start"
    SLEEP_END = "sleep_end"
    ERROR = "error"


_RECORD_KINDS = {
    FeedingRecord: OutcomeKind.FEEDING,
    DiaperRecord: OutcomeKind.DIAPER,
    SleepRecord: OutcomeKind.SLEEP,
    WeightRecord: OutcomeKind.WEIGHT,
    PumpingRecord: OutcomeKind.PUMPING,
}


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged result for one parsed segment.

    Record kinds carry ``record``; ``sleep_start``/``sleep_end`` only carry the
    intent and the moment it applies to; ``error`` carries the original input
    in ``text`` and a human-readable ``message``.
    """

    kind: OutcomeKind
    text: str
    record: Optional[ActivityRecord] = None
    timestamp: Optional[datetime] = None
    message: Optional[str] = None
    confidence: float = 0.95
    source: str = "local"

    @classmethod
    def from_record(
        cls,
        record: ActivityRecord,
        text: str,
        *,
        confidence: float = 0.95,
        source: str = "local",
    ) -> "ParseOutcome":
        kind = _RECORD_KINDS[type(record)]
        return cls(
            kind=kind,
            text=text,
            record=record,
            timestamp=record.timestamp,
            confidence=confidence,
            source=source,
        )

    @classmethod
    def sleep_start(cls, text: str, timestamp: datetime, *, source: str = "local") -> "ParseOutcome":
        return cls(kind=OutcomeKind.SLEEP_START, text=text, timestamp=timestamp, source=source)

    @classmethod
    def sleep_end(cls, text: str, timestamp: datetime, *, source: str = "local") -> "ParseOutcome":
        return cls(kind=OutcomeKind.SLEEP_END, text=text, timestamp=timestamp, source=source)

    @classmethod
    def error(cls, text: str, message: Optional[str] = None) -> "ParseOutcome":
        return cls(
            kind=OutcomeKind.ERROR,
            text=text,
            message=message or f'Couldn\'t understand: "{text}"',
            confidence=0.0,
        )

    @property
    def is_error(self) -> bool:
        return self.kind is OutcomeKind.ERROR

    def describe(self, now: Optional[datetime] = None) -> str:
        if self.record is not None:
            return self.record.describe(now)
        if self.kind is OutcomeKind.SLEEP_START:
            return "Sleep started"
        if self.kind is OutcomeKind.SLEEP_END:
            return "Sleep ended"
        return self.message or ""

    def to_payload(self) -> Dict[str, Any]:
        """Render a JSON-safe dict (enums as values, datetimes as ISO strings)."""
        payload: Dict[str, Any] = {
            "kind": self.kind.value,
            "text": self.text,
            "confidence": self.confidence,
            "source": self.source,
        }
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp.isoformat()
        if self.message:
            payload["message"] = self.message
        if self.record is not None:
            payload["record"] = _record_payload(self.record)
        return payload


def _record_payload(record: ActivityRecord) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name in record.__dataclass_fields__:
        value = getattr(record, name)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        data[name] = value
    return data


__all__ = ["ActivityRecord", "OutcomeKind", "ParseOutcome"]
