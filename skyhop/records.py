"""skyhop/records.py — Score records: validation, leaderboard, best score, ranks.

The game core only hands over a final integer score; everything here is the
collaborator side. Storage is plain JSON files. Submission runs on a worker
thread and never reports back into gameplay: failures are logged and dropped.
"""

from __future__ import annotations

import json
import logging
import math
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from skyhop.constants import LEADERBOARD_SIZE, MAX_SCORE

logger = logging.getLogger(__name__)


class InvalidScoreError(ValueError):
    """Submitted score is not a number in (0, MAX_SCORE]."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_score(value: Any) -> int:
    """Check a submitted score and truncate it to an integer.

    Raises:
        InvalidScoreError: If the value is not numeric or out of range.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScoreError(f"Score must be a number, got {type(value).__name__}")
    if not math.isfinite(value) or value <= 0 or value > MAX_SCORE:
        raise InvalidScoreError(f"Invalid score value {value!r} (must be > 0 and <= {MAX_SCORE:g})")
    return int(value)


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------

def _read_json(path: Path | None, default: Any) -> Any:
    if path is None or not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("ignoring unreadable record file %s", path)
        return default


def _write_json(path: Path | None, data: Any) -> None:
    if path is None:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreEntry:
    score: int
    created_at: str


@dataclass(frozen=True)
class SubmitResult:
    score: int
    position: int
    is_top10: bool


class Leaderboard:
    """All submitted scores, optionally persisted to a JSON file."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self.entries: list[ScoreEntry] = []
        for raw in _read_json(self.path, []):
            try:
                self.entries.append(ScoreEntry(int(raw["score"]), str(raw["created_at"])))
            except (KeyError, TypeError, ValueError):
                continue

    def submit(self, score: Any) -> SubmitResult:
        """Validate and store a score; report its rank among all scores."""
        valid = validate_score(score)
        self.entries.append(ScoreEntry(valid, now_iso()))
        _write_json(self.path, [asdict(e) for e in self.entries])
        better = sum(1 for e in self.entries if e.score > valid)
        return SubmitResult(
            score=valid,
            position=better + 1,
            is_top10=better < LEADERBOARD_SIZE,
        )

    def top(self, limit: int = LEADERBOARD_SIZE) -> list[ScoreEntry]:
        return sorted(self.entries, key=lambda e: e.score, reverse=True)[:limit]

    def stats(self) -> dict[str, int]:
        total = len(self.entries)
        if not total:
            return {"total_games": 0, "average_score": 0, "best_score": 0}
        scores = [e.score for e in self.entries]
        return {
            "total_games": total,
            "average_score": round(sum(scores) / total),
            "best_score": max(scores),
        }


# ---------------------------------------------------------------------------
# Local best score and cumulative XP
# ---------------------------------------------------------------------------

class PlayerRecord:
    """Best single-game score and cumulative XP for the local player."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        raw = _read_json(self.path, {})
        self.best = int(raw.get("best", 0)) if isinstance(raw, dict) else 0
        self.total_xp = int(raw.get("total_xp", 0)) if isinstance(raw, dict) else 0
        self.games = int(raw.get("games", 0)) if isinstance(raw, dict) else 0

    def record_game(self, score: int, *, save: bool = True) -> bool:
        """Fold a finished game in. Returns True on a new best score.

        With ``save=False`` only the in-memory totals change; call save()
        later, e.g. from a worker thread.
        """
        self.games += 1
        new_best = score > self.best
        if new_best:
            self.best = score
        if score > 0:
            self.total_xp += score
        if save:
            self.save()
        return new_best

    def save(self) -> None:
        _write_json(self.path, {"best": self.best, "total_xp": self.total_xp, "games": self.games})


# ---------------------------------------------------------------------------
# Ranks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rank:
    name: str
    min_xp: int


RANKS: tuple[Rank, ...] = (
    Rank("Hatchling", 0),
    Rank("Hopper", 1000),
    Rank("Skyrunner", 5000),
    Rank("Sky Master", 40000),
)


def rank_for(xp: int) -> Rank:
    current = RANKS[0]
    for rank in RANKS:
        if xp >= rank.min_xp:
            current = rank
    return current


def next_rank(xp: int) -> Rank | None:
    for rank in RANKS:
        if xp < rank.min_xp:
            return rank
    return None


def rank_progress(xp: int) -> tuple[int, int, int]:
    """(percent towards the next rank, current xp, target xp)."""
    current = rank_for(xp)
    nxt = next_rank(xp)
    if nxt is None:
        return 100, xp, xp
    span = nxt.min_xp - current.min_xp
    percent = min(100, math.floor((xp - current.min_xp) / span * 100))
    return percent, xp, nxt.min_xp


# ---------------------------------------------------------------------------
# Fire-and-forget submission
# ---------------------------------------------------------------------------

class ScoreSubmitter:
    """Sends final scores off the frame loop. Results never reach gameplay."""

    def __init__(self, send: Callable[[int], Any]) -> None:
        self.send = send
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="skyhop-submit")

    def submit(self, score: int) -> Future | None:
        """Queue a positive score for sending; zero scores are not sent."""
        if score <= 0:
            return None
        return self.defer(self.send, score)

    def defer(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Run any blocking job (file writes) on the same worker, in order."""
        future = self._pool.submit(fn, *args)
        future.add_done_callback(self._log_result)
        return future

    def __call__(self, score: int) -> None:
        self.submit(score)

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    @staticmethod
    def _log_result(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.warning("background job failed: %s", exc)
        else:
            logger.debug("background job done: %s", future.result())
