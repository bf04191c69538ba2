from pathlib import Path

from app import config


def test_defaults_without_environment():
    env: dict[str, str] = {}
    assert config.get_log_level(env) == "INFO"
    assert config.is_parse_log_enabled(env) is True
    assert config.get_parse_log_path(env) == Path("logs") / "parses.jsonl"
    assert config.get_review_log_path(env) == Path("logs") / "review.jsonl"
    assert config.get_log_max_bytes(env) == 1_000_000
    assert config.get_log_backup_count(env) == 5
    assert config.get_remote_parser(env) == "none"
    assert config.get_remote_parser_url(env) is None
    assert config.get_remote_parser_timeout(env) == 15.0
    assert config.get_llm_model(env) == "gpt-4o-mini"
    assert config.get_eval_phrases_path(env) == Path("config/eval_phrases.yml")


def test_overrides_are_read_from_the_mapping():
    env = {
        "LOG_LEVEL": "debug",
        "PARSE_LOG_ENABLED": "off",
        "LOG_DIR": "/tmp/voicelog",
        "LOG_MAX_BYTES": "2048",
        "REMOTE_PARSER": "Edge",
        "REMOTE_PARSER_URL": " https://example.test/parse ",
        "REMOTE_PARSER_TIMEOUT": "3.5",
        "LLM_MODEL": "gpt-4.1-mini",
    }
    assert config.get_log_level(env) == "DEBUG"
    assert config.is_parse_log_enabled(env) is False
    assert config.get_parse_log_path(env) == Path("/tmp/voicelog/parses.jsonl")
    assert config.get_log_max_bytes(env) == 2048
    assert config.get_remote_parser(env) == "edge"
    assert config.get_remote_parser_url(env) == "https://example.test/parse"
    assert config.get_remote_parser_timeout(env) == 3.5
    assert config.get_llm_model(env) == "gpt-4.1-mini"


def test_invalid_values_fall_back_to_defaults():
    env = {
        "LOG_LEVEL": "chatty",
        "PARSE_LOG_ENABLED": "maybe",
        "LOG_BACKUP_COUNT": "many",
        "LOG_MAX_BYTES": "-10",
        "REMOTE_PARSER": "carrier-pigeon",
        "REMOTE_PARSER_TIMEOUT": "0",
    }
    assert config.get_log_level(env) == "INFO"
    assert config.is_parse_log_enabled(env) is True
    assert config.get_log_backup_count(env) == 5
    assert config.get_log_max_bytes(env) == 0
    assert config.get_remote_parser(env) == "none"
    assert config.get_remote_parser_timeout(env) == 15.0
