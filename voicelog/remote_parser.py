"""Adapters for the optional model-backed activity parser.

A remote parser returns a flat JSON object (``type``, ``amount_oz``,
``start_hour`` ...). This module validates that object with pydantic and maps
it onto the same :class:`ParseOutcome` contract the local rules produce, using
the same conversions (ml / 30, default side both, default nursing length).
Two clients are provided: one for a hosted HTTP function and one that talks to
the OpenAI chat API directly.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Protocol

import requests
from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field

from voicelog.models import (
    DEFAULT_NURSING_MINUTES,
    ML_PER_OZ,
    BottleContent,
    DiaperRecord,
    DiaperType,
    FeedingRecord,
    PumpingRecord,
    Side,
    SleepRecord,
    WeightRecord,
)
from voicelog.parser_utils import at_clock
from voicelog.parsers.types import ParseOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_SLEEP_MINUTES = 60
REMOTE_SOURCE = "remote"


class RemoteParserError(RuntimeError):
    """Raised when a remote parser cannot produce a usable activity object."""


class RemoteActivity(BaseModel):
    """Structured fields a remote parser may return; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    amount_oz: Optional[float] = Field(default=None, ge=0)
    amount_ml: Optional[float] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    side: Optional[str] = None
    content: Optional[str] = None
    diaper_type: Optional[str] = None
    weight_lbs: Optional[float] = Field(default=None, gt=0)
    start_hour: Optional[int] = Field(default=None, ge=0, le=23)
    start_minute: Optional[int] = Field(default=None, ge=0, le=59)
    end_hour: Optional[int] = Field(default=None, ge=0, le=23)
    end_minute: Optional[int] = Field(default=None, ge=0, le=59)
    hours_ago: Optional[int] = Field(default=None, ge=0)
    minutes_ago: Optional[int] = Field(default=None, ge=0)
    at_hour: Optional[int] = Field(default=None, ge=0, le=23)
    at_minute: Optional[int] = Field(default=None, ge=0, le=59)
    is_pm: Optional[bool] = None


class ActivityFetcher(Protocol):
    def fetch(self, text: str) -> Dict[str, Any]:
        ...


def _timestamp(activity: RemoteActivity, now: datetime) -> datetime:
    # Priority mirrors the local extractor: relative offsets, then clock times.
    if activity.hours_ago is not None:
        return now - timedelta(hours=activity.hours_ago)
    if activity.minutes_ago is not None:
        return now - timedelta(minutes=activity.minutes_ago)
    if activity.at_hour is not None:
        return at_clock(now, activity.at_hour, activity.at_minute or 0)
    if activity.end_hour is not None:
        return at_clock(now, activity.end_hour, activity.end_minute or 0)
    return now


def _range(activity: RemoteActivity, now: datetime) -> Optional[tuple[datetime, datetime]]:
    if activity.start_hour is None or activity.end_hour is None:
        return None
    start = at_clock(now, activity.start_hour, activity.start_minute or 0)
    end = at_clock(now, activity.end_hour, activity.end_minute or 0)
    return start, end


def _amount_oz(activity: RemoteActivity) -> Optional[float]:
    if activity.amount_ml is not None:
        return round(activity.amount_ml / ML_PER_OZ, 2)
    return activity.amount_oz


def _side(activity: RemoteActivity) -> Side:
    try:
        return Side((activity.side or "").lower())
    except ValueError:
        return Side.BOTH


def _content(activity: RemoteActivity) -> Optional[BottleContent]:
    try:
        return BottleContent((activity.content or "").lower())
    except ValueError:
        return None


def _diaper_type(activity: RemoteActivity) -> DiaperType:
    try:
        return DiaperType((activity.diaper_type or "").lower())
    except ValueError:
        return DiaperType.WET


def to_outcome(activity: RemoteActivity, now: datetime, text: str) -> Optional[ParseOutcome]:
    """Map a validated remote object to a ``ParseOutcome``.

    Returns None for a missing or unknown ``type`` and for objects that lack a
    value the record cannot exist without (a bottle without an amount, a
    weight without pounds); callers then fall back to the local parser.
    """
    kind = (activity.type or "").strip().lower()
    timestamp = _timestamp(activity, now)

    if kind == "feeding":
        amount = _amount_oz(activity)
        if not amount:
            return None
        record = FeedingRecord.bottle(amount, timestamp, _content(activity))
        return ParseOutcome.from_record(record, text, source=REMOTE_SOURCE)

    if kind == "nursing":
        duration = None
        clock_range = _range(activity, now)
        if clock_range:
            minutes = int((clock_range[1] - clock_range[0]).total_seconds() // 60)
            duration = minutes if minutes > 0 else None
        duration = duration or activity.duration_minutes or DEFAULT_NURSING_MINUTES
        record = FeedingRecord.nursing(timestamp, duration, _side(activity))
        return ParseOutcome.from_record(record, text, source=REMOTE_SOURCE)

    if kind == "diaper":
        record = DiaperRecord(diaper_type=_diaper_type(activity), timestamp=timestamp)
        return ParseOutcome.from_record(record, text, source=REMOTE_SOURCE)

    if kind == "sleep_start":
        return ParseOutcome.sleep_start(text, timestamp, source=REMOTE_SOURCE)

    if kind == "sleep_end":
        return ParseOutcome.sleep_end(text, timestamp, source=REMOTE_SOURCE)

    if kind == "sleep_completed":
        clock_range = _range(activity, now)
        if clock_range and clock_range[0] != clock_range[1]:
            start, end = clock_range
            if end < start:
                start -= timedelta(days=1)
        else:
            minutes = activity.duration_minutes or DEFAULT_SLEEP_MINUTES
            start, end = now - timedelta(minutes=minutes), now
        return ParseOutcome.from_record(SleepRecord(start_time=start, end_time=end), text, source=REMOTE_SOURCE)

    if kind == "weight":
        if activity.weight_lbs is None:
            return None
        record = WeightRecord(weight_lbs=activity.weight_lbs, timestamp=timestamp)
        return ParseOutcome.from_record(record, text, source=REMOTE_SOURCE)

    if kind == "pumping":
        record = PumpingRecord(
            amount_oz=_amount_oz(activity) or 0.0,
            timestamp=timestamp,
            duration_minutes=activity.duration_minutes or None,
            side=_side(activity),
        )
        return ParseOutcome.from_record(record, text, source=REMOTE_SOURCE)

    logger.debug("Remote parser returned unsupported type %r", activity.type)
    return None


class EdgeFunctionParser:
    """POST the utterance to a hosted parse function.

    The function answers ``{"success": true, "parsed": {...}}``; anything else
    is reported as :class:`RemoteParserError`.
    """

    def __init__(self, url: str, *, timeout: float = DEFAULT_TIMEOUT_SECONDS, api_key: Optional[str] = None) -> None:
        if not url:
            raise ValueError("EdgeFunctionParser requires a URL.")
        self._url = url
        self._timeout = timeout
        self._api_key = api_key

    def fetch(self, text: str) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        try:
            response = requests.post(self._url, json={"voice_input": text}, headers=headers, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RemoteParserError(f"Remote parse request failed: {exc}") from exc
        if not isinstance(data, dict) or not data.get("success"):
            raise RemoteParserError("Remote parser reported failure.")
        parsed = data.get("parsed")
        if not isinstance(parsed, dict):
            raise RemoteParserError("Remote parser response did not include an activity.")
        return parsed


_SYSTEM_PROMPT = (
    "You turn short baby-care log phrases from tired parents into JSON. "
    "Return ONLY a JSON object and omit fields that do not apply.\n"
    "type: feeding (bottle with an amount), nursing (breastfeeding), diaper, sleep_start "
    "(falling asleep now), sleep_end (woke up), sleep_completed (a past sleep with a time range "
    "or duration), weight, pumping.\n"
    "Fields: amount_oz, amount_ml (raw ml when the user said ml), duration_minutes, "
    'side ("left"|"right"|"both"), content ("formula"|"breastmilk"), '
    'diaper_type ("wet"|"dirty"|"mixed"), weight_lbs, start_hour, start_minute, end_hour, '
    "end_minute, at_hour, at_minute (hours are 0-23), hours_ago, minutes_ago, is_pm.\n"
    "Examples:\n"
    '"4 oz" -> {"type":"feeding","amount_oz":4}\n'
    '"300 ml formula" -> {"type":"feeding","amount_ml":300,"content":"formula"}\n'
    '"breastfed left side 15 min" -> {"type":"nursing","duration_minutes":15,"side":"left"}\n'
    '"poopy diaper" -> {"type":"diaper","diaper_type":"dirty"}\n'
    '"slept from 10am to 2pm" -> {"type":"sleep_completed","start_hour":10,"end_hour":14}\n'
    '"8 lbs 6 oz" -> {"type":"weight","weight_lbs":8.375}\n'
    '"pumped 4oz left" -> {"type":"pumping","amount_oz":4,"side":"left"}'
)


class OpenAIActivityParser:
    """Ask an OpenAI chat model for the activity JSON."""

    def __init__(
        self,
        *,
        model: str,
        api_key: Optional[str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Any = None,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise RemoteParserError("OpenAI parser is not configured (missing OPENAI_API_KEY).")
            self._client = OpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def fetch(self, text: str) -> Dict[str, Any]:
        client = self._get_client()
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ]
        try:
            response = client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=0.0,
                response_format={"type": "json_object"},
            )
        except Exception as exc:  # pragma: no cover - network/credentials issues
            raise RemoteParserError(f"OpenAI parse failed: {exc}") from exc

        try:
            content = response.choices[0].message.content
            data = json.loads(content)
        except (AttributeError, IndexError, TypeError, json.JSONDecodeError) as exc:
            raise RemoteParserError("OpenAI parse returned invalid JSON.") from exc
        if not isinstance(data, dict):
            raise RemoteParserError("OpenAI parse returned a non-object payload.")
        return data


__all__ = [
    "ActivityFetcher",
    "EdgeFunctionParser",
    "OpenAIActivityParser",
    "RemoteActivity",
    "RemoteParserError",
    "to_outcome",
]
