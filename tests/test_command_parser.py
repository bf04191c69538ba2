from datetime import datetime, timedelta

import pytest

from voicelog.command_parser import PRECEDENCE, parse_activity
from voicelog.models import BottleContent, DiaperType, FeedingKind, Side
from voicelog.parsers.types import OutcomeKind

NOW = datetime(2025, 1, 15, 16, 0)


def test_bottle_feeding_keeps_original_text():
    outcome = parse_activity("4oz bottle", NOW)
    assert outcome.kind is OutcomeKind.FEEDING
    assert outcome.text == "4oz bottle"
    assert outcome.record.amount_oz == 4
    assert outcome.timestamp == NOW
    assert outcome.confidence == pytest.approx(0.95)
    assert outcome.source == "local"


def test_pounds_and_ounces_is_weight_not_feeding():
    outcome = parse_activity("8 lbs 6 oz", NOW)
    assert outcome.kind is OutcomeKind.WEIGHT
    assert outcome.record.weight_lbs == pytest.approx(8.375)


def test_pumping_wins_over_nursing_vocabulary():
    outcome = parse_activity("pumped 2oz from left breast", NOW)
    assert outcome.kind is OutcomeKind.PUMPING
    assert outcome.record.amount_oz == 2
    assert outcome.record.side is Side.LEFT


def test_relative_time_is_stripped_before_parsing():
    outcome = parse_activity("2 hours ago fed 3oz", NOW)
    assert outcome.kind is OutcomeKind.FEEDING
    assert outcome.record.amount_oz == 3
    assert outcome.timestamp == NOW - timedelta(hours=2)


def test_clock_time_on_nursing():
    outcome = parse_activity("nurse at 2:20pm", NOW)
    assert outcome.kind is OutcomeKind.FEEDING
    assert outcome.record.kind is FeedingKind.NURSING
    assert outcome.record.duration_minutes == 10
    assert outcome.timestamp == datetime(2025, 1, 15, 14, 20)


def test_breastmilk_with_ounces_is_a_bottle():
    outcome = parse_activity("4oz breastmilk", NOW)
    assert outcome.record.kind is FeedingKind.BOTTLE
    assert outcome.record.content is BottleContent.BREASTMILK


def test_unitless_amount_lowers_confidence():
    outcome = parse_activity("fed her 4", NOW)
    assert outcome.kind is OutcomeKind.FEEDING
    assert outcome.record.amount_oz == 4
    assert outcome.confidence == pytest.approx(0.5)


def test_sleep_start_and_end_intents():
    start = parse_activity("baby asleep", NOW)
    end = parse_activity("woke up", NOW)
    assert start.kind is OutcomeKind.SLEEP_START
    assert start.record is None
    assert start.timestamp == NOW
    assert end.kind is OutcomeKind.SLEEP_END


def test_wake_word_beats_start_word():
    assert parse_activity("woke up from sleeping", NOW).kind is OutcomeKind.SLEEP_END


def test_completed_sleep_range():
    outcome = parse_activity("slept from 10am to 2pm", NOW)
    assert outcome.kind is OutcomeKind.SLEEP
    assert outcome.record.start_time == datetime(2025, 1, 15, 10, 0)
    assert outcome.record.end_time == datetime(2025, 1, 15, 14, 0)
    assert outcome.timestamp == outcome.record.start_time


def test_completed_sleep_duration_ends_at_the_mentioned_time():
    outcome = parse_activity("napped 45 minutes 30 minutes ago", NOW)
    assert outcome.kind is OutcomeKind.SLEEP
    assert outcome.record.end_time == datetime(2025, 1, 15, 15, 30)
    assert outcome.record.start_time == datetime(2025, 1, 15, 14, 45)


def test_diaper_with_afternoon_default():
    outcome = parse_activity("wet diaper at 3", NOW)
    assert outcome.kind is OutcomeKind.DIAPER
    assert outcome.record.diaper_type is DiaperType.WET
    assert outcome.timestamp == datetime(2025, 1, 15, 15, 0)


def test_dirty_diaper():
    outcome = parse_activity("changed a poopy diaper", NOW)
    assert outcome.record.diaper_type is DiaperType.DIRTY


def test_matched_domain_without_values_falls_through_to_error():
    outcome = parse_activity("weighed her", NOW)
    assert outcome.is_error


def test_gibberish_is_an_error_outcome():
    outcome = parse_activity("xyz123", NOW)
    assert outcome.kind is OutcomeKind.ERROR
    assert outcome.text == "xyz123"
    assert outcome.message == 'Couldn\'t understand: "xyz123"'
    assert outcome.confidence == 0.0


@pytest.mark.parametrize("message", ["", "   "])
def test_blank_input_is_an_error(message):
    outcome = parse_activity(message, NOW)
    assert outcome.is_error
    assert outcome.message == "Nothing to parse."


def test_precedence_order_is_pinned():
    names = [name for name, _, _ in PRECEDENCE]
    assert names == ["sleep_completed", "weight", "pumping", "feeding", "sleep_control", "diaper"]


@pytest.mark.parametrize(
    "message",
    ["4oz bottle", "pumped 3oz", "wet diaper 2 hours ago", "napped 2 hours", "weighs 9 lbs", "baby asleep"],
)
def test_timestamps_never_run_ahead_of_now(message):
    outcome = parse_activity(message, NOW)
    assert not outcome.is_error
    assert outcome.timestamp <= NOW


def test_payload_is_json_ready():
    payload = parse_activity("4oz formula", NOW).to_payload()
    assert payload["kind"] == "feeding"
    assert payload["timestamp"] == "2025-01-15T16:00:00"
    assert payload["record"] == {
        "kind": "bottle",
        "timestamp": "2025-01-15T16:00:00",
        "amount_oz": 4.0,
        "content": "formula",
    }


def test_spoken_fraction_of_hours_ago():
    outcome = parse_activity("fed 3oz two and a half hours ago", NOW)
    assert outcome.kind is OutcomeKind.FEEDING
    assert outcome.record.amount_oz == 3
    assert outcome.timestamp == datetime(2025, 1, 15, 13, 30)


def test_article_an_does_not_invent_a_bottle():
    assert parse_activity("she ate an apple", NOW).is_error
