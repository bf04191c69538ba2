import json
from datetime import datetime

import pytest

from voicelog.parse_log import ParseLogger
from voicelog.parsers.types import OutcomeKind
from voicelog.remote_parser import RemoteParserError
from voicelog.voice_parser import VoiceParser

NOW = datetime(2025, 1, 15, 16, 0)


class StubRemote:
    """Remote parser stub that returns a canned payload or raises."""

    def __init__(self, payload=None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.messages: list[str] = []

    def fetch(self, text: str):
        self.messages.append(text)
        if self.error is not None:
            raise self.error
        return self.payload


def _parser(remote=None, parse_logger=None) -> VoiceParser:
    return VoiceParser(clock=lambda: NOW, remote=remote, parse_logger=parse_logger)


def _logger(tmp_path) -> ParseLogger:
    return ParseLogger(
        parse_log_path=tmp_path / "parses.jsonl",
        review_log_path=tmp_path / "review.jsonl",
        enabled=True,
    )


def _lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").strip().splitlines()]


def test_parse_uses_the_injected_clock():
    outcome = _parser().parse("wet diaper 2 hours ago")
    assert outcome.kind is OutcomeKind.DIAPER
    assert outcome.timestamp == datetime(2025, 1, 15, 14, 0)


def test_parse_all_prefers_multiple_then_single():
    parser = _parser()
    assert [o.kind for o in parser.parse_all("4oz bottle and wet diaper")] == [
        OutcomeKind.FEEDING,
        OutcomeKind.DIAPER,
    ]
    assert [o.kind for o in parser.parse_all("4oz bottle")] == [OutcomeKind.FEEDING]
    assert [o.kind for o in parser.parse_all("xyz123")] == [OutcomeKind.ERROR]


def test_remote_result_is_used_when_valid():
    remote = StubRemote({"type": "feeding", "amount_ml": 120, "content": "formula", "minutes_ago": 30})
    outcomes = _parser(remote=remote).parse_with_remote("four ounces of formula half an hour ago")

    assert remote.messages == ["four ounces of formula half an hour ago"]
    assert len(outcomes) == 1
    assert outcomes[0].source == "remote"
    assert outcomes[0].record.amount_oz == pytest.approx(4.0)
    assert outcomes[0].timestamp == datetime(2025, 1, 15, 15, 30)


@pytest.mark.parametrize(
    "remote",
    [
        StubRemote(error=RemoteParserError("offline")),
        StubRemote(error=TimeoutError("slow")),
        StubRemote({"type": "feeding", "amount_oz": -3}),
        StubRemote({"type": "bath_time"}),
        StubRemote({"type": "feeding"}),
    ],
)
def test_remote_failures_fall_back_to_local_rules(remote, tmp_path):
    parse_logger = _logger(tmp_path)
    outcomes = _parser(remote=remote, parse_logger=parse_logger).parse_with_remote("4oz bottle")

    assert [o.kind for o in outcomes] == [OutcomeKind.FEEDING]
    assert outcomes[0].source == "local"
    records = _lines(tmp_path / "parses.jsonl")
    assert records[-1]["fallback_triggered"] is True


def test_without_remote_parse_with_remote_is_local():
    outcomes = _parser().parse_with_remote("pumped 3oz")
    assert [o.kind for o in outcomes] == [OutcomeKind.PUMPING]


def test_unparsed_input_is_queued_for_review(tmp_path):
    parse_logger = _logger(tmp_path)
    outcome = _parser(parse_logger=parse_logger).parse("xyz123")

    assert outcome.is_error
    review = _lines(tmp_path / "review.jsonl")
    assert review[0]["reason"] == "no_match"
    assert review[0]["user_text"] == "xyz123"
    parses = _lines(tmp_path / "parses.jsonl")
    assert parses[0]["kinds"] == ["error"]


def test_fallback_uses_the_clock_reading_of_the_remote_attempt():
    readings = iter([NOW, datetime(2025, 1, 15, 16, 5), datetime(2025, 1, 15, 16, 10)])
    parser = VoiceParser(clock=lambda: next(readings), remote=StubRemote(error=RemoteParserError("offline")))

    outcomes = parser.parse_with_remote("wet diaper")

    assert [o.timestamp for o in outcomes] == [NOW]
