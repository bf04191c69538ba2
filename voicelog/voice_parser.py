"""Service facade over the rule-based activity parser.

``VoiceParser`` is what an application holds on to: it owns the clock, the
optional remote parser and the optional parse log, and exposes the single,
multi and remote-first entry points over the pure functions in
:mod:`voicelog.command_parser` and :mod:`voicelog.segmenter`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from voicelog.command_parser import parse_activity
from voicelog.parse_log import ParseLogger, ParseRecord, ReviewItem
from voicelog.parsers.types import ParseOutcome
from voicelog.remote_parser import ActivityFetcher, RemoteActivity, RemoteParserError, to_outcome
from voicelog.segmenter import parse_multiple

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _minute_now() -> datetime:
    return datetime.now().replace(second=0, microsecond=0)


class VoiceParser:
    """Parse utterances into ``ParseOutcome`` values relative to ``clock()``."""

    def __init__(
        self,
        *,
        clock: Optional[Clock] = None,
        remote: Optional[ActivityFetcher] = None,
        parse_logger: Optional[ParseLogger] = None,
    ) -> None:
        self._clock = clock or _minute_now
        self._remote = remote
        self._parse_logger = parse_logger

    @property
    def has_remote(self) -> bool:
        return self._remote is not None

    # WHAT: single-activity parse.
    # WHY: most utterances name one thing; this never raises on text input.
    # HOW: delegate to `parse_activity` with the injected clock and log the result.
    def parse(self, message: str) -> ParseOutcome:
        outcome = parse_activity(message, self._clock())
        self._record(message, [outcome])
        return outcome

    def parse_multiple(self, message: str) -> List[ParseOutcome]:
        """Return one outcome per activity, or [] when fewer than two domains appear."""
        outcomes = parse_multiple(message, self._clock())
        if outcomes:
            self._record(message, outcomes)
        return outcomes

    def parse_all(self, message: str) -> List[ParseOutcome]:
        """Multi-activity parse with the single parse as fallback; never empty."""
        return self._parse_locally(message, self._clock())

    # WHAT: try the remote parser once, then fall back to the local rules.
    # WHY: the remote model understands looser phrasing but may be slow, offline or wrong.
    # HOW: any transport/validation failure or unmapped type logs a warning and runs `parse_all` locally.
    def parse_with_remote(self, message: str) -> List[ParseOutcome]:
        if self._remote is None or not (message or "").strip():
            return self.parse_all(message)

        now = self._clock()
        try:
            payload = self._remote.fetch(message)
            activity = RemoteActivity.model_validate(payload)
            outcome = to_outcome(activity, now, message)
        except (RemoteParserError, ValidationError) as exc:
            logger.warning("Remote parser failed for %r, using local rules: %s", message, exc)
            return self._parse_locally(message, now, fallback_triggered=True)
        except Exception as exc:  # any other remote failure still falls back once
            logger.warning("Unexpected remote parser error for %r, using local rules: %r", message, exc)
            return self._parse_locally(message, now, fallback_triggered=True)
        if outcome is None:
            logger.warning("Remote parser returned no usable activity for %r, using local rules", message)
            return self._parse_locally(message, now, fallback_triggered=True)

        self._record(message, [outcome])
        return [outcome]

    def _parse_locally(
        self, message: str, now: datetime, *, fallback_triggered: bool = False
    ) -> List[ParseOutcome]:
        # One clock reading serves both the multi and the single attempt.
        outcomes = parse_multiple(message, now) or [parse_activity(message, now)]
        self._record(message, outcomes, fallback_triggered=fallback_triggered)
        return outcomes

    def _record(self, message: str, outcomes: List[ParseOutcome], *, fallback_triggered: bool = False) -> None:
        if not self._parse_logger or not self._parse_logger.enabled:
            return
        self._parse_logger.log_parse(
            ParseRecord.new(user_text=message, outcomes=outcomes, fallback_triggered=fallback_triggered)
        )
        failed = [outcome for outcome in outcomes if outcome.is_error]
        if failed:
            self._parse_logger.log_review_item(
                ReviewItem.new(user_text=message, reason="no_match", message=failed[0].message)
            )


__all__ = ["Clock", "VoiceParser"]
