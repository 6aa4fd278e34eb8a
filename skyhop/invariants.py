"""skyhop/invariants.py — Invariant checker for ladders and session trajectories.

Scans generated placements, the live platform set, and a recorded trajectory
(list of snapshots) and flags anything that breaks the fairness guarantees:
unreachable gaps, unprotected breaking platforms, a shrinking score, or an
unbounded platform set. This is a library module — tests import it and assert
on results. No Pyxel imports.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from skyhop.constants import (
    FALLBACK_EXTRA_GAP,
    PRUNE_MARGIN,
    REACH_FACTOR,
    SPRING_MULTIPLIER,
)
from skyhop.generator import Placement, PlatformGenerator
from skyhop.physics import effective_jump
from skyhop.platforms import Platform, PlatformKind
from skyhop.simulation import Session

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EPSILON = 1e-6
"""Float slack for boundary comparisons."""

SAFETY_HORIZONTAL_FACTOR = 0.25
"""Max horizontal distance (fraction of width) from a breaker to its fallback."""

# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class SnapshotLike(Protocol):
    """Minimal interface for frame snapshots accepted by the checker."""

    frame: int
    y: float
    vy: float
    score: int
    platform_count: int


# ---------------------------------------------------------------------------
# Violation
# ---------------------------------------------------------------------------


@dataclass
class Violation:
    """A single invariant violation."""

    frame: int
    invariant: str
    details: str
    severity: str  # "error" or "warning"


# ---------------------------------------------------------------------------
# Ladder checks
# ---------------------------------------------------------------------------


def check_placements(
    generator: PlatformGenerator,
    placements: Sequence[Placement],
    frame: int = 0,
) -> list[Violation]:
    """Every placed platform must be reachable from its anchor."""
    violations: list[Violation] = []
    min_gap = generator.min_gap
    max_gap = generator.max_gap
    reach = generator.viewport.width * REACH_FACTOR + generator.platform_width
    for pl in placements:
        serial = pl.platform.serial
        if pl.rise < min_gap - EPSILON:
            violations.append(Violation(
                frame=frame,
                invariant="gap_below_minimum",
                details=f"Platform #{serial} rises {pl.rise:.1f} < min gap {min_gap:.1f}",
                severity="error",
            ))
        if pl.rise > max_gap + EPSILON:
            violations.append(Violation(
                frame=frame,
                invariant="gap_unreachable",
                details=f"Platform #{serial} rises {pl.rise:.1f} > max gap {max_gap:.1f}",
                severity="error",
            ))
        if abs(pl.drift) > reach + EPSILON:
            violations.append(Violation(
                frame=frame,
                invariant="drift_unreachable",
                details=f"Platform #{serial} drifts {pl.drift:.1f}, reach is {reach:.1f}",
                severity="error",
            ))
    return violations


def check_breaking_safety(
    generator: PlatformGenerator,
    platforms: Sequence[Platform],
    frame: int = 0,
) -> list[Violation]:
    """Every breaking platform needs a Normal platform close by."""
    violations: list[Violation] = []
    v_limit = generator.min_gap + FALLBACK_EXTRA_GAP * generator.scale
    h_limit = generator.viewport.width * SAFETY_HORIZONTAL_FACTOR
    normals = [p for p in platforms if p.kind == PlatformKind.NORMAL]
    for p in platforms:
        if p.kind != PlatformKind.BREAKING:
            continue
        covered = any(
            n is not p
            and abs(n.y - p.y) <= v_limit + EPSILON
            and abs(n.x - p.x) <= h_limit + EPSILON
            for n in normals
        )
        if not covered:
            violations.append(Violation(
                frame=frame,
                invariant="breaking_without_fallback",
                details=f"Breaking platform #{p.serial} at ({p.x:.1f}, {p.y:.1f}) has no Normal nearby",
                severity="error",
            ))
    return violations


def platform_bound(generator: PlatformGenerator) -> int:
    """Upper bound on live platforms for the generator's current geometry.

    Live platforms span from a screen above the camera (plus one gap) down to
    the prune line; each chain step climbs at least ``min_gap`` and adds at
    most two platforms. The last step may overshoot by a gap plus a fallback.
    """
    vp = generator.viewport
    scale = generator.scale
    overshoot = generator.max_gap + generator.min_gap + FALLBACK_EXTRA_GAP * scale
    span = 2 * vp.height + PRUNE_MARGIN * scale + overshoot
    steps = math.ceil(span / generator.min_gap) if generator.min_gap > 0 else 0
    # Start platform plus the partial step at each end.
    return 2 * steps + 4


# ---------------------------------------------------------------------------
# Trajectory checks
# ---------------------------------------------------------------------------


def _check_score_monotonic(snapshots: Sequence[SnapshotLike]) -> list[Violation]:
    violations: list[Violation] = []
    for i in range(1, len(snapshots)):
        prev, curr = snapshots[i - 1], snapshots[i]
        if curr.score < prev.score:
            violations.append(Violation(
                frame=curr.frame,
                invariant="score_decreased",
                details=f"Score fell from {prev.score} to {curr.score}",
                severity="error",
            ))
    return violations


def _check_platform_count(
    snapshots: Sequence[SnapshotLike],
    bound: int,
) -> list[Violation]:
    violations: list[Violation] = []
    for snap in snapshots:
        if snap.platform_count > bound:
            violations.append(Violation(
                frame=snap.frame,
                invariant="platform_count_unbounded",
                details=f"{snap.platform_count} live platforms exceeds bound {bound}",
                severity="error",
            ))
    return violations


def _check_upward_speed(
    session: Session,
    snapshots: Sequence[SnapshotLike],
) -> list[Violation]:
    limit = abs(effective_jump(session.params, session.viewport.scale)) * SPRING_MULTIPLIER
    violations: list[Violation] = []
    for snap in snapshots:
        if -snap.vy > limit + EPSILON:
            violations.append(Violation(
                frame=snap.frame,
                invariant="upward_speed_exceeds_spring",
                details=f"vy={snap.vy:.2f} is faster than a spring launch ({-limit:.2f})",
                severity="warning",
            ))
    return violations


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_invariants(
    session: Session,
    snapshots: Sequence[SnapshotLike],
    placements: Sequence[Placement] = (),
) -> list[Violation]:
    """Scan a session, its trajectory, and its placements for violations.

    Args:
        session: The session the trajectory was recorded from.
        snapshots: Per-frame snapshot list.
        placements: Generation records to check for reachability.

    Returns:
        List of Violation objects, sorted by frame number.
    """
    gen = session.generator
    violations: list[Violation] = []
    violations.extend(check_placements(gen, placements, session.frame))
    violations.extend(check_breaking_safety(gen, session.platforms, session.frame))
    violations.extend(_check_score_monotonic(snapshots))
    violations.extend(_check_platform_count(snapshots, platform_bound(gen)))
    violations.extend(_check_upward_speed(session, snapshots))
    violations.sort(key=lambda v: v.frame)
    return violations
