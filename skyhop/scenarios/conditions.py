"""skyhop/scenarios/conditions — Condition dataclasses and runtime checker.

Success is checked before failure each frame, so a run that reaches its
score on the same frame it falls out still counts as a pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from skyhop.simulation import Session

VALID_SUCCESS_TYPES: frozenset[str] = frozenset({"score_gte", "alive_at_end"})
VALID_FAILURE_TYPES: frozenset[str] = frozenset({"session_over", "stalled", "any"})

DEFAULT_STALL_WINDOW = 600  # frames without a score change


@dataclass
class SuccessCondition:
    type: str
    value: float | None = None


@dataclass
class FailureCondition:
    type: str
    window: int | None = None
    conditions: list[FailureCondition] | None = None


# ---------------------------------------------------------------------------
# Success checks
# ---------------------------------------------------------------------------

def _score_reached(cond: SuccessCondition, session: Session, frame: int, max_frames: int) -> bool:
    return session.score >= (cond.value or 0)


def _survived(cond: SuccessCondition, session: Session, frame: int, max_frames: int) -> bool:
    return session.running and frame >= max_frames - 1


_SUCCESS_CHECKS: dict[str, Callable[..., bool]] = {
    "score_gte": _score_reached,
    "alive_at_end": _survived,
}


# ---------------------------------------------------------------------------
# Failure checks
# ---------------------------------------------------------------------------

def _stalled(cond: FailureCondition, trajectory: list) -> bool:
    """True when the score has not moved across the last *window* frames."""
    window = cond.window or DEFAULT_STALL_WINDOW
    if len(trajectory) < window:
        return False
    return trajectory[-window].score == trajectory[-1].score


def _failure_reason(cond: FailureCondition, session: Session, trajectory: list) -> str | None:
    if cond.type == "session_over":
        return None if session.running else "session_over"
    if cond.type == "stalled":
        return "stalled" if _stalled(cond, trajectory) else None
    for sub in cond.conditions or []:
        reason = _failure_reason(sub, session, trajectory)
        if reason is not None:
            return reason
    return None


def check_conditions(
    success: SuccessCondition,
    failure: FailureCondition,
    session: Session,
    trajectory: list,
    frame: int,
    max_frames: int,
) -> tuple[bool | None, str | None]:
    """Check success and failure conditions for the current frame.

    Returns ``(True, reason)`` for success, ``(False, reason)`` for failure,
    or ``(None, None)`` if neither condition has triggered yet.
    """
    if _SUCCESS_CHECKS[success.type](success, session, frame, max_frames):
        return True, success.type

    reason = _failure_reason(failure, session, trajectory)
    if reason is not None:
        return False, reason
    return None, None
