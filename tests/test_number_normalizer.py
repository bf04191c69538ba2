import pytest

from voicelog.parser_utils import first_int, first_number, normalize_numbers


def test_hour_phrase_becomes_minutes():
    assert normalize_numbers("fed for an hour") == "fed for 60 minutes"


def test_hour_and_a_half_is_consumed_before_plain_hour():
    assert normalize_numbers("slept an hour and a half") == "slept 90 minutes"


def test_half_an_hour_is_not_read_as_fraction():
    assert normalize_numbers("nursed half an hour") == "nursed 30 minutes"
    assert normalize_numbers("nursed half hour") == "nursed 30 minutes"


def test_hyphenated_and_spaced_compounds():
    assert normalize_numbers("nursed twenty five minutes") == "nursed 25 minutes"
    assert normalize_numbers("nursed twenty-five minutes") == "nursed 25 minutes"


def test_fractions_attach_to_the_number():
    assert normalize_numbers("four and a half oz") == "4.5 oz"
    assert normalize_numbers("3 and half ounces") == "3.5 ounces"
    assert normalize_numbers("a half ounce") == "0.5 ounce"


def test_article_a_is_left_alone():
    assert normalize_numbers("took a nap") == "took a nap"


def test_weight_compound_keeps_its_and():
    assert normalize_numbers("8 lbs and 6 oz") == "8 lbs and 6 oz"


def test_word_numbers_only_match_whole_words():
    assert normalize_numbers("someone often") == "someone often"


def test_one_and_a_half_hours_reaches_minutes():
    assert normalize_numbers("napped one and a half hours") == "napped 90 minutes"


@pytest.mark.parametrize(
    "text",
    [
        "4oz bottle",
        "nursed 15 minutes left side",
        "slept from 10am to 2pm",
        "8 lbs and 6 oz",
        "pumped 4.5 oz 2 hours ago",
        "weighs 3.2 kg",
    ],
)
def test_normalize_is_idempotent_on_digit_text(text):
    once = normalize_numbers(text)
    assert normalize_numbers(once) == once


def test_first_number_skips_to_next_pattern():
    assert first_number("4.5 oz", r"(\d+)\s*ml", r"(\d+(?:\.\d+)?)\s*oz") == 4.5
    assert first_number("nothing here", r"(\d+)") is None


def test_first_int_fails_closed_on_bad_literal():
    assert first_int("for 1.5", r"for\s+([\d.]+)") is None
    assert first_int("for 15", r"for\s+(\d+)") == 15


def test_article_an_counts_only_before_a_unit():
    assert normalize_numbers("she ate an apple") == "she ate an apple"
    assert normalize_numbers("gave an ounce") == "gave 1 ounce"
