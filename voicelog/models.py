"""Typed activity records produced by the parsers.

Records are immutable value objects: the parser builds them from one utterance
and a resolved timestamp, and anything downstream (storage, sync, UI) owns
identity and mutation. Each record validates its own invariants so a parser
bug surfaces as a ``ValueError`` instead of a silently bad log entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

ML_PER_OZ: float = 30.0
OZ_PER_LB: float = 16.0
LBS_PER_KG: float = 2.20462
DEFAULT_NURSING_MINUTES: int = 10


class FeedingKind(str, Enum):
    BOTTLE = "bottle"
    NURSING = "nursing"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


class BottleContent(str, Enum):
    FORMULA = "formula"
    BREASTMILK = "breastmilk"


class DiaperType(str, Enum):
    WET = "wet"
    DIRTY = "dirty"
    MIXED = "mixed"


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


@dataclass(frozen=True)
class FeedingRecord:
    """A bottle or nursing feed.

    Bottle feeds carry ``amount_oz`` (and optionally ``content``) but never a
    duration; nursing feeds carry ``duration_minutes`` and ``side`` but never
    an amount. Use :meth:`bottle` / :meth:`nursing` rather than the raw
    constructor.
    """

    kind: FeedingKind
    timestamp: datetime
    amount_oz: Optional[float] = None
    content: Optional[BottleContent] = None
    duration_minutes: Optional[int] = None
    side: Optional[Side] = None

    def __post_init__(self) -> None:
        if self.kind is FeedingKind.BOTTLE:
            if self.amount_oz is None or self.amount_oz <= 0:
                raise ValueError("Bottle feedings need a positive amount_oz.")
            if self.duration_minutes is not None or self.side is not None:
                raise ValueError("Bottle feedings carry no duration or side.")
        else:
            if self.duration_minutes is None or self.duration_minutes <= 0:
                raise ValueError("Nursing feedings need a positive duration_minutes.")
            if not isinstance(self.side, Side):
                raise ValueError("Nursing feedings need a Side.")
            if self.amount_oz is not None or self.content is not None:
                raise ValueError("Nursing feedings carry no amount or content.")

    @classmethod
    def bottle(
        cls,
        amount_oz: float,
        timestamp: datetime,
        content: Optional[BottleContent] = None,
    ) -> "FeedingRecord":
        return cls(kind=FeedingKind.BOTTLE, timestamp=timestamp, amount_oz=amount_oz, content=content)

    @classmethod
    def nursing(
        cls,
        timestamp: datetime,
        duration_minutes: int = DEFAULT_NURSING_MINUTES,
        side: Side = Side.BOTH,
    ) -> "FeedingRecord":
        return cls(kind=FeedingKind.NURSING, timestamp=timestamp, duration_minutes=duration_minutes, side=side)

    @property
    def amount_ml(self) -> Optional[int]:
        if self.amount_oz is None:
            return None
        return int(round(self.amount_oz * ML_PER_OZ))

    def describe(self, now: Optional[datetime] = None) -> str:
        if self.kind is FeedingKind.BOTTLE:
            content = self.content.value if self.content else "bottle"
            return f"{self.amount_oz:g}oz ({self.amount_ml}ml) {content}"
        side = "" if self.side is Side.BOTH else f" ({self.side.value})"
        return f"{self.duration_minutes}min nursing{side}"


@dataclass(frozen=True)
class DiaperRecord:
    diaper_type: DiaperType
    timestamp: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.diaper_type, DiaperType):
            raise ValueError("diaper_type must be a DiaperType.")

    def describe(self, now: Optional[datetime] = None) -> str:
        if self.diaper_type is DiaperType.MIXED:
            return "Wet & dirty diaper"
        return f"{self.diaper_type.value.capitalize()} diaper"


@dataclass(frozen=True)
class SleepRecord:
    """A sleep session; ``end_time`` is ``None`` while the baby is still asleep."""

    start_time: datetime
    end_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("Sleep must end after it starts.")

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @property
    def timestamp(self) -> datetime:
        return self.start_time

    def duration_minutes(self, now: datetime) -> int:
        return _minutes_between(self.start_time, self.end_time or now)

    def describe(self, now: Optional[datetime] = None) -> str:
        reference = now or self.end_time or self.start_time
        minutes = self.duration_minutes(reference)
        if self.is_active:
            return f"Sleeping ({minutes}min)"
        hours, mins = divmod(minutes, 60)
        if hours:
            return f"Slept {hours}h {mins}m"
        return f"Slept {mins}min"


@dataclass(frozen=True)
class WeightRecord:
    weight_lbs: float
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.weight_lbs <= 0:
            raise ValueError("weight_lbs must be positive.")

    def describe(self, now: Optional[datetime] = None) -> str:
        lbs = int(self.weight_lbs)
        oz = int(round((self.weight_lbs - lbs) * OZ_PER_LB))
        if oz == OZ_PER_LB:
            lbs, oz = lbs + 1, 0
        if oz:
            return f"{lbs}lb {oz}oz"
        return f"{lbs}lb"


@dataclass(frozen=True)
class PumpingRecord:
    """A pumping session; ``amount_oz`` of 0 means only the act was mentioned."""

    amount_oz: float
    timestamp: datetime
    duration_minutes: Optional[int] = None
    side: Side = Side.BOTH

    def __post_init__(self) -> None:
        if self.amount_oz < 0:
            raise ValueError("amount_oz cannot be negative.")
        if self.duration_minutes is not None and self.duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive when given.")
        if not isinstance(self.side, Side):
            raise ValueError("side must be a Side.")

    def describe(self, now: Optional[datetime] = None) -> str:
        text = f"{self.amount_oz:.1f}oz pumped"
        if self.duration_minutes is not None:
            text += f" ({self.duration_minutes} min)"
        return text


__all__ = [
    "BottleContent",
    "DEFAULT_NURSING_MINUTES",
    "DiaperRecord",
    "DiaperType",
    "FeedingKind",
    "FeedingRecord",
    "LBS_PER_KG",
    "ML_PER_OZ",
    "OZ_PER_LB",
    "PumpingRecord",
    "Side",
    "SleepRecord",
    "WeightRecord",
]
