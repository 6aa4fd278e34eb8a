"""skyhop/scenarios/loader — ScenarioDef and YAML loading functions.

A scenario file names the ladder seed, the agent that plays it, how many
frames to run, and the conditions that end the run early. Optional keys
tune the frame delta and the viewport so the same ladder can be replayed
at other frame rates and screen shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from skyhop.constants import SCREEN_HEIGHT, SCREEN_WIDTH, TARGET_FRAME_MS
from skyhop.scenarios.conditions import (
    VALID_FAILURE_TYPES,
    VALID_SUCCESS_TYPES,
    FailureCondition,
    SuccessCondition,
)

REQUIRED_KEYS = ("name", "agent", "max_frames", "success", "failure")


@dataclass
class ViewportDef:
    width: float = SCREEN_WIDTH
    height: float = SCREEN_HEIGHT


@dataclass
class ScenarioDef:
    name: str
    description: str
    seed: int | None
    agent: str
    agent_params: dict | None
    max_frames: int
    success: SuccessCondition
    failure: FailureCondition
    metrics: list[str]
    dt_ms: float = TARGET_FRAME_MS
    viewport: ViewportDef = field(default_factory=ViewportDef)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _condition_type(data: dict, valid: frozenset[str], role: str) -> str:
    ctype = data.get("type")
    if ctype not in valid:
        raise ValueError(f"Unknown {role} condition type: {ctype!r}")
    return ctype


def _parse_success(data: dict) -> SuccessCondition:
    ctype = _condition_type(data, VALID_SUCCESS_TYPES, "success")
    if ctype == "score_gte" and data.get("value") is None:
        raise ValueError("score_gte needs a value")
    return SuccessCondition(type=ctype, value=data.get("value"))


def _parse_failure(data: dict) -> FailureCondition:
    """Parse a failure block; ``any`` nests further failure blocks."""
    ctype = _condition_type(data, VALID_FAILURE_TYPES, "failure")
    if ctype != "any":
        return FailureCondition(type=ctype, window=data.get("window"))
    return FailureCondition(
        type=ctype,
        conditions=[_parse_failure(c) for c in data.get("conditions", [])],
    )


def _parse_viewport(data: dict | None) -> ViewportDef:
    """Parse an optional viewport dict; missing keys use the screen defaults."""
    data = data or {}
    unknown = set(data) - {"width", "height"}
    if unknown:
        raise ValueError(f"Unknown viewport keys: {sorted(unknown)}")
    vp = ViewportDef(**{k: float(v) for k, v in data.items()})
    if vp.width <= 0 or vp.height <= 0:
        raise ValueError(f"Viewport must be positive, got {vp.width}x{vp.height}")
    return vp


def _parse_scenario(data: dict) -> ScenarioDef:
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise ValueError(f"Scenario is missing required keys: {', '.join(missing)}")

    seed = data.get("seed")
    max_frames = int(data["max_frames"])
    dt_ms = float(data.get("dt_ms", TARGET_FRAME_MS))
    if max_frames <= 0:
        raise ValueError(f"max_frames must be positive, got {max_frames}")
    if dt_ms < 0:
        raise ValueError(f"dt_ms must not be negative, got {dt_ms}")

    return ScenarioDef(
        name=data["name"],
        description=data.get("description", ""),
        seed=None if seed is None else int(seed),
        agent=data["agent"],
        agent_params=data.get("agent_params"),
        max_frames=max_frames,
        success=_parse_success(data["success"]),
        failure=_parse_failure(data["failure"]),
        metrics=list(data.get("metrics", [])),
        dt_ms=dt_ms,
        viewport=_parse_viewport(data.get("viewport")),
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_scenario(path: Path) -> ScenarioDef:
    """Read one scenario YAML file."""
    text = Path(path).read_text()
    return _parse_scenario(yaml.safe_load(text) or {})


def load_scenarios(
    paths: list[Path] | None = None,
    run_all: bool = False,
    base: Path = Path("scenarios"),
) -> list[ScenarioDef]:
    """Load scenarios from explicit paths, or every ``*.yaml`` under *base*
    when *run_all* is set.
    """
    if run_all:
        paths = sorted(base.glob("*.yaml"))
    return [load_scenario(p) for p in paths or []]
