"""Centralize defaults and environment lookups for the voice log CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Default configuration values
# ---------------------------------------------------------------------------
_DEFAULT_LOG_LEVEL = "INFO"
_DEFAULT_PARSE_LOG_ENABLED: bool = True
_DEFAULT_LOG_DIR = "logs"
_PARSE_LOG_FILENAME = "parses.jsonl"
_REVIEW_LOG_FILENAME = "review.jsonl"
_DEFAULT_LOG_MAX_BYTES = 1_000_000
_DEFAULT_LOG_BACKUP_COUNT = 5
_DEFAULT_REMOTE_PARSER = "none"
_REMOTE_PARSER_CHOICES = ("none", "edge", "openai")
_DEFAULT_REMOTE_PARSER_TIMEOUT = 15.0
_DEFAULT_LLM_MODEL: str = "gpt-4o-mini"
_DEFAULT_EVAL_PHRASES_PATH = "config/eval_phrases.yml"
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _source(env: Dict[str, str] | None) -> Mapping[str, str]:
    return env if env is not None else os.environ


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(value, 0)


# ---------------------------------------------------------------------------
# Environment-derived settings
# ---------------------------------------------------------------------------
def get_log_level(env: Dict[str, str] | None = None) -> str:
    """Return the stdlib logging level name used by the CLI."""

    raw = (_source(env).get("LOG_LEVEL") or "").strip().upper()
    return raw if raw in _VALID_LOG_LEVELS else _DEFAULT_LOG_LEVEL


def is_parse_log_enabled(env: Dict[str, str] | None = None) -> bool:
    """Determine whether parse results are written to JSONL."""

    return _parse_bool(_source(env).get("PARSE_LOG_ENABLED"), _DEFAULT_PARSE_LOG_ENABLED)


def get_log_dir(env: Dict[str, str] | None = None) -> Path:
    """Return the base directory for the parse and review logs."""

    override = _source(env).get("LOG_DIR")
    return Path(override) if override else Path(_DEFAULT_LOG_DIR)


def get_parse_log_path(env: Dict[str, str] | None = None) -> Path:
    return get_log_dir(env) / _PARSE_LOG_FILENAME


def get_review_log_path(env: Dict[str, str] | None = None) -> Path:
    return get_log_dir(env) / _REVIEW_LOG_FILENAME


def get_log_max_bytes(env: Dict[str, str] | None = None) -> int:
    """Return the maximum size in bytes before rotating log files."""

    return _parse_int(_source(env).get("LOG_MAX_BYTES"), _DEFAULT_LOG_MAX_BYTES)


def get_log_backup_count(env: Dict[str, str] | None = None) -> int:
    """Return the number of rotated log files to retain."""

    return _parse_int(_source(env).get("LOG_BACKUP_COUNT"), _DEFAULT_LOG_BACKUP_COUNT)


def get_remote_parser(env: Dict[str, str] | None = None) -> str:
    """Return which remote parser to use: ``none``, ``edge`` or ``openai``.

    Args:
        env: Optional mapping used instead of ``os.environ`` to simplify testing.

    Returns:
        One of the supported names; unknown values fall back to ``none``.
    """

    raw = (_source(env).get("REMOTE_PARSER") or "").strip().lower()
    return raw if raw in _REMOTE_PARSER_CHOICES else _DEFAULT_REMOTE_PARSER


def get_remote_parser_url(env: Dict[str, str] | None = None) -> str | None:
    value = (_source(env).get("REMOTE_PARSER_URL") or "").strip()
    return value or None


def get_remote_parser_api_key(env: Dict[str, str] | None = None) -> str | None:
    value = (_source(env).get("REMOTE_PARSER_API_KEY") or "").strip()
    return value or None


def get_remote_parser_timeout(env: Dict[str, str] | None = None) -> float:
    """Return the remote parser timeout in seconds."""

    raw = _source(env).get("REMOTE_PARSER_TIMEOUT")
    if raw is None:
        return _DEFAULT_REMOTE_PARSER_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_REMOTE_PARSER_TIMEOUT
    return value if value > 0 else _DEFAULT_REMOTE_PARSER_TIMEOUT


def get_llm_api_key(env: Dict[str, str] | None = None) -> str | None:
    """Return the API key for the OpenAI-backed parser, if any."""

    return _source(env).get("OPENAI_API_KEY")


def get_llm_model(env: Dict[str, str] | None = None) -> str:
    """Return the model identifier used by the OpenAI-backed parser."""

    value = (_source(env).get("LLM_MODEL") or "").strip()
    return value or _DEFAULT_LLM_MODEL


def get_eval_phrases_path(env: Dict[str, str] | None = None) -> Path:
    override = _source(env).get("EVAL_PHRASES_PATH")
    return Path(override) if override else Path(_DEFAULT_EVAL_PHRASES_PATH)
