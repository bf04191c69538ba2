from datetime import datetime

from app.main import EXAMPLE_PHRASES, build_remote_parser, build_voice_parser, format_outcomes
from voicelog.command_parser import parse_activity
from voicelog.remote_parser import EdgeFunctionParser, OpenAIActivityParser

NOW = datetime(2025, 1, 15, 16, 0)


def test_format_outcomes_renders_time_and_description():
    lines = format_outcomes([parse_activity("4oz formula 2 hours ago", NOW)])
    assert lines == ["[14:00] feeding: 4oz (120ml) formula"]


def test_format_outcomes_shows_examples_on_failure():
    lines = format_outcomes([parse_activity("xyz123", NOW)])
    assert lines[0] == 'Couldn\'t understand: "xyz123"'
    assert EXAMPLE_PHRASES[0] in lines[1]


def test_build_remote_parser_choices():
    assert build_remote_parser({}) is None
    assert build_remote_parser({"REMOTE_PARSER": "edge"}) is None
    assert isinstance(
        build_remote_parser({"REMOTE_PARSER": "edge", "REMOTE_PARSER_URL": "https://example.test/parse"}),
        EdgeFunctionParser,
    )
    assert build_remote_parser({"REMOTE_PARSER": "openai"}) is None
    assert isinstance(
        build_remote_parser({"REMOTE_PARSER": "openai", "OPENAI_API_KEY": "sk-test"}),
        OpenAIActivityParser,
    )


def test_build_voice_parser_honours_disabled_log(tmp_path):
    parser = build_voice_parser({"PARSE_LOG_ENABLED": "false", "LOG_DIR": str(tmp_path)})
    assert not parser.has_remote
    parser.parse("wet diaper")
    assert not (tmp_path / "parses.jsonl").exists()
