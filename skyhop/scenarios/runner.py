"""skyhop/scenarios/runner — Scenario execution engine.

Plays one agent on one seeded ladder, recording a FrameRecord per frame,
until a condition fires or the frame limit runs out.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from skyhop.agents.actions import action_to_input
from skyhop.agents.registry import resolve_agent
from skyhop.env import step_reward
from skyhop.generator import Placement
from skyhop.invariants import check_invariants
from skyhop.observation import extract_observation
from skyhop.physics import Viewport
from skyhop.scenarios.conditions import check_conditions
from skyhop.scenarios.loader import ScenarioDef
from skyhop.simulation import Session, create_session, session_step


@dataclass
class FrameRecord:
    """Per-frame snapshot of session state."""

    frame: int
    x: float
    y: float
    vx: float
    vy: float
    camera_y: float
    score: int
    platform_count: int
    action: int
    reward: float
    events: list[str]


@dataclass
class ScenarioOutcome:
    name: str
    success: bool
    reason: str
    frames_elapsed: int
    metrics: dict[str, Any]
    trajectory: list[FrameRecord]
    wall_time_ms: float


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

MetricFn = Callable[[list[FrameRecord], Session, Sequence[Placement]], Any]

METRICS: dict[str, MetricFn] = {
    "final_score": lambda traj, s, placed: s.score,
    "peak_height": lambda traj, s, placed: s.peak_height,
    "frames_alive": lambda traj, s, placed: s.frame,
    "landings": lambda traj, s, placed: s.landings,
    "springs_used": lambda traj, s, placed: s.springs_used,
    "platforms_broken": lambda traj, s, placed: s.platforms_broken,
    "max_platforms": lambda traj, s, placed: s.max_platforms,
    "total_reward": lambda traj, s, placed: sum(r.reward for r in traj),
    "invariant_violations": lambda traj, s, placed: len(check_invariants(s, traj, placed)),
}


def compute_metrics(
    requested: list[str],
    trajectory: list[FrameRecord],
    session: Session,
    placements: Sequence[Placement] = (),
) -> dict[str, Any]:
    """Evaluate each requested metric against the finished run.

    *placements* are the generation records made during the run; the
    invariant metric checks each one for reachability.
    """
    unknown = [name for name in requested if name not in METRICS]
    if unknown:
        raise ValueError(f"Unknown metric: {unknown[0]!r}. Valid metrics: {sorted(METRICS)}")
    return {name: METRICS[name](trajectory, session, placements) for name in requested}


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def _record(frame: int, session: Session, action: int, reward: float, events: list) -> FrameRecord:
    p = session.player.physics
    return FrameRecord(
        frame=frame,
        x=p.x,
        y=p.y,
        vx=p.vx,
        vy=p.vy,
        camera_y=session.camera.y,
        score=session.score,
        platform_count=len(session.platforms),
        action=action,
        reward=reward,
        events=[type(e).__name__ for e in events],
    )


def run_scenario(scenario_def: ScenarioDef) -> ScenarioOutcome:
    """Run *scenario_def* to its first firing condition or its frame limit.

    A run that exhausts ``max_frames`` without any condition firing fails
    with reason ``timed_out``.
    """
    sd = scenario_def
    session = create_session(Viewport(sd.viewport.width, sd.viewport.height), seed=sd.seed)
    agent = resolve_agent(sd.agent, sd.agent_params)
    agent.reset()

    trajectory: list[FrameRecord] = []
    placements: list[Placement] = list(session.last_placements)
    verdict: tuple[bool | None, str | None] = (None, None)
    started = time.perf_counter()

    for frame in range(sd.max_frames):
        action = int(agent.act(extract_observation(session)))
        prev_score = session.score
        events = session_step(session, action_to_input(action), sd.dt_ms)
        placements.extend(session.last_placements)
        reward = step_reward(session.score - prev_score, events)
        trajectory.append(_record(frame, session, action, reward, events))

        verdict = check_conditions(sd.success, sd.failure, session, trajectory, frame, sd.max_frames)
        if verdict[0] is not None:
            break

    elapsed_ms = (time.perf_counter() - started) * 1000
    success, reason = verdict
    return ScenarioOutcome(
        name=sd.name,
        success=bool(success),
        reason=reason or "timed_out",
        frames_elapsed=len(trajectory),
        metrics=compute_metrics(sd.metrics, trajectory, session, placements),
        trajectory=trajectory,
        wall_time_ms=elapsed_ms,
    )
