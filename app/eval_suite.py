"""Evaluation harness for phrase-to-activity accuracy."""

from __future__ import annotations

import argparse
import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from app.config import get_eval_phrases_path
from voicelog.parsers.types import ParseOutcome
from voicelog.voice_parser import VoiceParser

REPORT_PATH = Path("reports/eval_results.json")
DEFAULT_NOW = datetime(2025, 1, 15, 16, 0)


@dataclass
class EvalCase:
    prompt: str
    expected_kinds: List[str]
    expected: Dict[str, Any] = field(default_factory=dict)


def load_cases(path: Optional[Path]) -> tuple[List[EvalCase], Optional[datetime]]:
    """Read ``phrases`` (and an optional fixed ``now``) from a YAML file."""
    if not path or not path.exists():
        return [], None
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Eval config must be a mapping.")
    phrases = data.get("phrases")
    if not isinstance(phrases, list):
        raise ValueError("Eval config requires a 'phrases' list.")

    now = data.get("now")
    if isinstance(now, str):
        now = datetime.fromisoformat(now)
    if not isinstance(now, datetime):
        now = None

    cases: List[EvalCase] = []
    for entry in phrases:
        if not isinstance(entry, dict):
            continue
        prompt = entry.get("prompt")
        kinds = entry.get("expected_kinds") or ([entry["expected_kind"]] if entry.get("expected_kind") else [])
        if not prompt or not kinds:
            continue
        expected = entry.get("expected") if isinstance(entry.get("expected"), dict) else {}
        cases.append(EvalCase(prompt=str(prompt), expected_kinds=[str(kind) for kind in kinds], expected=expected))
    return cases, now


def _values_match(expected: Any, actual: Any) -> bool:
    if isinstance(expected, (int, float)) and isinstance(actual, (int, float)):
        return math.isclose(float(expected), float(actual), abs_tol=0.01)
    return expected == actual


def _field_mismatches(case: EvalCase, outcomes: List[ParseOutcome]) -> Dict[str, Any]:
    if not case.expected or not outcomes:
        return {}
    record = outcomes[0].to_payload().get("record", {})
    return {
        key: record.get(key)
        for key, value in case.expected.items()
        if not _values_match(value, record.get(key))
    }


def evaluate_cases(parser: VoiceParser, cases: Iterable[EvalCase]) -> dict:
    total = 0
    kind_hits = 0
    field_hits = 0
    mismatches: List[dict] = []
    for case in cases:
        total += 1
        outcomes = parser.parse_all(case.prompt)
        predicted = [outcome.kind.value for outcome in outcomes]
        kind_ok = predicted == case.expected_kinds
        wrong_fields = _field_mismatches(case, outcomes) if kind_ok else {}
        field_ok = kind_ok and not wrong_fields
        if kind_ok:
            kind_hits += 1
        if field_ok:
            field_hits += 1
        if not field_ok:
            mismatches.append(
                {
                    "prompt": case.prompt,
                    "expected_kinds": case.expected_kinds,
                    "predicted_kinds": predicted,
                    "wrong_fields": wrong_fields,
                }
            )
    return {
        "total": total,
        "kind_accuracy": kind_hits / total if total else 0.0,
        "field_accuracy": field_hits / total if total else 0.0,
        "mismatches": mismatches,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the phrase evaluation suite")
    parser.add_argument("--config", type=Path, default=get_eval_phrases_path())
    parser.add_argument("--report", type=Path, default=REPORT_PATH)
    args = parser.parse_args()

    cases, now = load_cases(args.config)
    if not cases:
        raise SystemExit(f"No evaluation phrases found in {args.config}.")

    fixed_now = now or DEFAULT_NOW
    results = evaluate_cases(VoiceParser(clock=lambda: fixed_now), cases)

    args.report.parent.mkdir(parents=True, exist_ok=True)
    args.report.write_text(json.dumps(results, indent=2), encoding="utf-8")

    kind_pct = results["kind_accuracy"] * 100
    field_pct = results["field_accuracy"] * 100
    print(f"Evaluated {results['total']} phrases · kind accuracy {kind_pct:.1f}% · field accuracy {field_pct:.1f}%")
    if results["mismatches"]:
        print("Mismatches:")
        for entry in results["mismatches"][:10]:
            print(
                f"- {entry['prompt']} (expected {entry['expected_kinds']}, got {entry['predicted_kinds']}"
                f"{', fields ' + json.dumps(entry['wrong_fields']) if entry['wrong_fields'] else ''})"
            )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
