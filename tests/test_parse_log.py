import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from voicelog.command_parser import parse_activity
from voicelog.parse_log import ParseLogger, ParseRecord, ReviewItem

NOW = datetime(2025, 1, 15, 16, 0)


def test_parse_logger_writes_jsonl_records(tmp_path):
    parse_path = tmp_path / "parses.jsonl"
    review_path = tmp_path / "review.jsonl"
    logger = ParseLogger(parse_log_path=parse_path, review_log_path=review_path, enabled=True)

    record = ParseRecord.new(user_text="4oz bottle", outcomes=[parse_activity("4oz bottle", NOW)])
    logger.log_parse(record)
    logger.log_review_item(ReviewItem.new(user_text="xyz", reason="no_match", message="Couldn't understand"))

    parse_lines = parse_path.read_text(encoding="utf-8").strip().splitlines()
    review_lines = review_path.read_text(encoding="utf-8").strip().splitlines()

    assert len(parse_lines) == 1
    parsed = json.loads(parse_lines[0])
    assert parsed["user_text"] == "4oz bottle"
    assert parsed["kinds"] == ["feeding"]
    assert parsed["source"] == "local"
    assert parsed["fallback_triggered"] is False
    assert parsed["outcomes"][0]["record"]["amount_oz"] == 4

    assert len(review_lines) == 1
    assert json.loads(review_lines[0])["reason"] == "no_match"


def test_mixed_sources_are_labelled():
    local = parse_activity("wet diaper", NOW)
    remote = parse_activity("4oz bottle", NOW)
    remote = replace(remote, source="remote")
    record = ParseRecord.new(user_text="x", outcomes=[local, remote])
    assert record.source == "mixed"


def test_disabled_logger_writes_nothing(tmp_path):
    parse_path = tmp_path / "parses.jsonl"
    logger = ParseLogger(parse_log_path=parse_path, review_log_path=tmp_path / "review.jsonl", enabled=False)
    logger.log_parse(ParseRecord.new(user_text="wet diaper", outcomes=[parse_activity("wet diaper", NOW)]))
    assert not parse_path.exists()
    assert not logger.enabled


def test_log_rotation_respects_max_bytes(tmp_path):
    parse_path = tmp_path / "parses.jsonl"
    logger = ParseLogger(
        parse_log_path=parse_path,
        review_log_path=tmp_path / "review.jsonl",
        enabled=True,
        max_bytes=600,
        backup_count=1,
    )

    for idx in range(5):
        message = f"{idx + 1}oz bottle"
        logger.log_parse(ParseRecord.new(user_text=message, outcomes=[parse_activity(message, NOW)]))

    rotated = Path(f"{parse_path}.1")
    assert parse_path.exists()
    assert rotated.exists()
    active_text = parse_path.read_text(encoding="utf-8")
    assert "5oz bottle" in active_text
    assert "1oz bottle" not in active_text
    assert "4oz bottle" in rotated.read_text(encoding="utf-8")
