from datetime import datetime

import pytest

import voicelog.parsers.weight as weight_parser
from voicelog.parser_utils import normalize_numbers

NOW = datetime(2025, 1, 15, 16, 0)


@pytest.mark.parametrize(
    "text, pounds",
    [
        ("8 lbs 6 oz", 8.375),
        ("8 pounds and 6 ounces", 8.375),
        ("came in at 9 lbs", 9.0),
        ("weighs 4 kg", 8.818),
        ("weighs 140 oz", 8.75),
        ("weighed 3500 grams", 7.716),
        ("weighs eight pounds", 8.0),
    ],
)
def test_weight_units_convert_to_pounds(text, pounds):
    record = weight_parser.parse(normalize_numbers(text), NOW)
    assert record is not None
    assert record.weight_lbs == pytest.approx(pounds, abs=0.001)


def test_ounces_alone_do_not_trigger_weight():
    assert not weight_parser.matches("2 oz bottle")
    assert weight_parser.matches("8 lbs")
    assert weight_parser.matches("weight check")


def test_weight_verb_without_number_is_no_match():
    assert weight_parser.parse("weighed her", NOW) is None


def test_describe_uses_pounds_and_ounces():
    record = weight_parser.parse("8 lbs 6 oz", NOW)
    assert record is not None
    assert record.describe() == "8lb 6oz"
