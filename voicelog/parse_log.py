"""JSONL logging of parse results.

Every utterance handled by :class:`voicelog.voice_parser.VoiceParser` can be
appended to ``parses.jsonl`` as a ``ParseRecord``; utterances nothing could
understand are additionally queued in ``review.jsonl`` as ``ReviewItem`` rows
so the keyword tables can be extended from real phrasing. Both files rotate by
size so a long-running CLI session cannot fill the disk.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, IO, Iterable, List

from voicelog.parsers.types import ParseOutcome


def _utc_now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


@dataclass
class ParseRecord:
    """WHAT: schema for one parsed utterance.

    WHY: replaying which domain claimed which phrase (and whether the remote
    parser was bypassed) is how precedence regressions get spotted.
    HOW: dataclass with a ``new`` factory that stamps the time and flattens
    outcomes through ``ParseOutcome.to_payload``.
    """

    timestamp: str
    user_text: str
    kinds: List[str]
    source: str
    fallback_triggered: bool = False
    outcomes: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        *,
        user_text: str,
        outcomes: Iterable[ParseOutcome],
        fallback_triggered: bool = False,
    ) -> "ParseRecord":
        items = list(outcomes)
        sources = {outcome.source for outcome in items}
        return cls(
            timestamp=_utc_now(),
            user_text=user_text,
            kinds=[outcome.kind.value for outcome in items],
            source=sources.pop() if len(sources) == 1 else "mixed",
            fallback_triggered=fallback_triggered,
            outcomes=[outcome.to_payload() for outcome in items],
        )


@dataclass
class ReviewItem:
    timestamp: str
    user_text: str
    reason: str
    message: str | None = None

    @classmethod
    def new(cls, *, user_text: str, reason: str, message: str | None = None) -> "ReviewItem":
        return cls(timestamp=_utc_now(), user_text=user_text, reason=reason, message=message)


class ParseLogger:
    """Append-only JSONL writer for parse records and review items."""

    def __init__(
        self,
        *,
        parse_log_path: Path,
        review_log_path: Path,
        enabled: bool = True,
        max_bytes: int = 0,
        backup_count: int = 0,
    ) -> None:
        self._parse_log_path = parse_log_path
        self._review_log_path = review_log_path
        self._enabled = enabled
        self._max_bytes = max_bytes
        self._backup_count = backup_count

    @property
    def enabled(self) -> bool:
        return self._enabled

    def log_parse(self, record: ParseRecord) -> None:
        if not self._enabled:
            return
        self._append_json_line(self._parse_log_path, asdict(record))

    def log_review_item(self, review: ReviewItem) -> None:
        if not self._enabled:
            return
        self._append_json_line(self._review_log_path, asdict(review))

    def _append_json_line(self, path: Path, payload: Dict[str, Any]) -> None:
        """WHAT: write one payload as a JSON line, rotating first when needed.

        WHY: every writer goes through here so rotation applies uniformly.
        HOW: ensure the directory exists, encode, rotate on size, then append.
        """

        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(payload, ensure_ascii=False)
        self._rotate_if_needed(path, len(line.encode("utf-8")) + 1)
        with self._open_file(path) as handle:
            handle.write(line)
            handle.write("\n")

    @staticmethod
    def _open_file(path: Path) -> IO[str]:
        return path.open("a", encoding="utf-8")

    def _rotate_if_needed(self, path: Path, incoming_bytes: int) -> None:
        """Shift ``path`` to ``path.1`` (and older backups up by one) past ``max_bytes``."""
        if self._max_bytes <= 0:
            return
        if not path.exists():
            return

        current_size = path.stat().st_size
        if current_size + incoming_bytes <= self._max_bytes:
            return

        if self._backup_count <= 0:
            path.unlink()
            return

        for index in range(self._backup_count - 1, 0, -1):
            src = Path(f"{path}.{index}")
            dst = Path(f"{path}.{index + 1}")
            if src.exists():
                src.replace(dst)

        path.replace(Path(f"{path}.1"))


__all__ = ["ParseLogger", "ParseRecord", "ReviewItem"]
