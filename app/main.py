"""Assemble the voice parser and run the interactive CLI loop."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from app.config import (
    get_llm_api_key,
    get_llm_model,
    get_log_backup_count,
    get_log_level,
    get_log_max_bytes,
    get_parse_log_path,
    get_remote_parser,
    get_remote_parser_api_key,
    get_remote_parser_timeout,
    get_remote_parser_url,
    get_review_log_path,
    is_parse_log_enabled,
)
from voicelog.parse_log import ParseLogger
from voicelog.parsers.types import ParseOutcome
from voicelog.remote_parser import ActivityFetcher, EdgeFunctionParser, OpenAIActivityParser
from voicelog.voice_parser import VoiceParser

logger = logging.getLogger(__name__)

EXAMPLE_PHRASES = (
    "4oz bottle",
    "fed 150ml formula",
    "nursed 10 mins left",
    "wet diaper",
    "poopy diaper",
    "baby asleep",
    "slept from 2pm to 4pm",
    "weighs 9 lbs 4 oz",
    "pumped 4oz",
)


# -- Parser construction -------------------------------------------------------
def build_remote_parser(env: Dict[str, str] | None = None) -> Optional[ActivityFetcher]:
    """Return the configured remote parser client, or None when disabled/misconfigured."""
    choice = get_remote_parser(env)
    if choice == "edge":
        url = get_remote_parser_url(env)
        if not url:
            logger.warning("REMOTE_PARSER=edge but REMOTE_PARSER_URL is not set; using local rules only.")
            return None
        return EdgeFunctionParser(url, timeout=get_remote_parser_timeout(env), api_key=get_remote_parser_api_key(env))
    if choice == "openai":
        api_key = get_llm_api_key(env)
        if not api_key:
            logger.warning("REMOTE_PARSER=openai but OPENAI_API_KEY is not set; using local rules only.")
            return None
        return OpenAIActivityParser(model=get_llm_model(env), api_key=api_key, timeout=get_remote_parser_timeout(env))
    return None


def build_voice_parser(env: Dict[str, str] | None = None) -> VoiceParser:
    """Wire the parse log and optional remote parser from ``app.config``.

    WHAT: instantiate the JSONL parse logger and the remote client.
    WHY: the CLI and the eval harness must share identical wiring.
    HOW: read each setting through the ``app.config`` accessors.
    """
    parse_logger = ParseLogger(
        parse_log_path=get_parse_log_path(env),
        review_log_path=get_review_log_path(env),
        enabled=is_parse_log_enabled(env),
        max_bytes=get_log_max_bytes(env),
        backup_count=get_log_backup_count(env),
    )
    return VoiceParser(remote=build_remote_parser(env), parse_logger=parse_logger)


def format_outcomes(outcomes: List[ParseOutcome]) -> List[str]:
    """Render one confirmation line per outcome, or a hint block on failure."""
    if all(outcome.is_error for outcome in outcomes):
        message = outcomes[0].message if outcomes else "Nothing to parse."
        return [message or "Couldn't understand that.", "Try something like: " + ", ".join(EXAMPLE_PHRASES)]
    lines = []
    for outcome in outcomes:
        if outcome.is_error:
            continue
        when = outcome.timestamp.strftime("%H:%M") if outcome.timestamp else "--:--"
        lines.append(f"[{when}] {outcome.kind.value}: {outcome.describe(outcome.timestamp)}")
    return lines


# -- Interactive CLI loop ------------------------------------------------------
def main() -> None:
    """Read phrases from stdin and print what would be logged.

    Exits on EOF/KeyboardInterrupt or "quit"/"exit".
    """
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")
    parser = build_voice_parser()
    print("Voice log ready. Type 'quit' or 'exit' to stop.")

    while True:
        try:
            message = input("Log: ")
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if message.strip().lower() in {"quit", "exit"}:
            print("Goodbye!")
            break
        if not message.strip():
            continue

        outcomes = parser.parse_with_remote(message)
        for line in format_outcomes(outcomes):
            print(line)
        print()


if __name__ == "__main__":
    main()
