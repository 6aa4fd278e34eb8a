"""skyhop/scenarios/output — Console report lines and JSON results files."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skyhop.scenarios.runner import ScenarioOutcome

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"

# Metrics echoed on the one-line report, in order, with their labels.
_HEADLINE_METRICS = (
    ("final_score", "score"),
    ("peak_height", "peak"),
    ("invariant_violations", "violations"),
)


def _paint(text: str, color: str) -> str:
    if sys.stdout.isatty():
        return f"{color}{text}{_RESET}"
    return text


def _fmt(value) -> str:
    return f"{value:.0f}" if isinstance(value, float) else str(value)


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------

def format_outcome(outcome: ScenarioOutcome) -> str:
    """One report line: status, name, frames, wall time, reason, headline metrics."""
    status = _paint("PASS", _GREEN) if outcome.success else _paint("FAIL", _RED)
    line = (
        f"{status}  {outcome.name:<28s} {outcome.frames_elapsed:>6d}f "
        f"{outcome.wall_time_ms:>8.1f}ms  ({outcome.reason})"
    )
    extras = [
        f"{label}={_fmt(outcome.metrics[key])}"
        for key, label in _HEADLINE_METRICS
        if outcome.metrics.get(key)
    ]
    if extras:
        line += "  " + " ".join(extras)
    return line


def print_outcome(outcome: ScenarioOutcome) -> None:
    print(format_outcome(outcome))


def print_summary(results: list[ScenarioOutcome]) -> None:
    """Print pass/fail counts for a batch of outcomes."""
    passed = sum(r.success for r in results)
    failed = len(results) - passed
    passed_text = f"{passed} passed"
    failed_text = f"{failed} failed"
    print(
        f"\n{len(results)} scenarios: "
        f"{_paint(passed_text, _GREEN) if passed else passed_text}, "
        f"{_paint(failed_text, _RED) if failed else failed_text}"
    )


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def save_results(
    results: list[ScenarioOutcome],
    path: Path | str,
    include_trajectory: bool = False,
) -> None:
    """Write outcomes to *path* as a JSON list; per-frame records only with
    *include_trajectory*.
    """
    records = []
    for outcome in results:
        record = asdict(outcome)
        if not include_trajectory:
            del record["trajectory"]
        records.append(record)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(records, f, indent=2)
        f.write("\n")
