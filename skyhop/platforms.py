"""skyhop/platforms.py — Platform entities and their per-tick behaviour.

A platform's kind is fixed at creation; only its kind-specific state changes.
Each kind carries exactly one state variant, so invalid field combinations
(a "broken" spring, a moving breaker) cannot be expressed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from skyhop.constants import (
    BREAK_THRESHOLD,
    MOVING_SPEED,
    PLATFORM_HEIGHT,
    PLATFORM_WIDTH,
)


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

class PlatformKind(Enum):
    NORMAL = 0
    MOVING = 1
    BREAKING = 2
    SPRING = 3


# ---------------------------------------------------------------------------
# Per-kind state variants
# ---------------------------------------------------------------------------

@dataclass
class NormalState:
    kind: ClassVar[PlatformKind] = PlatformKind.NORMAL


@dataclass
class MovingState:
    kind: ClassVar[PlatformKind] = PlatformKind.MOVING
    direction: int = 1
    base_speed: float = MOVING_SPEED


@dataclass
class BreakingState:
    """Crumbling platform: triggered on first contact, broken after a delay."""
    kind: ClassVar[PlatformKind] = PlatformKind.BREAKING
    triggered: bool = False
    timer: float = 0.0
    broken: bool = False


@dataclass
class SpringState:
    kind: ClassVar[PlatformKind] = PlatformKind.SPRING
    compressed: bool = False  # display only


PlatformState = Union[NormalState, MovingState, BreakingState, SpringState]


# ---------------------------------------------------------------------------
# Platform entity
# ---------------------------------------------------------------------------

@dataclass
class Platform:
    """A platform placed by the generator. Geometry is scaled on read."""
    x: float
    y: float
    state: PlatformState = field(default_factory=NormalState)
    base_width: float = PLATFORM_WIDTH
    base_height: float = PLATFORM_HEIGHT
    scale: float = 1.0
    serial: int = 0
    fallback: bool = False

    @property
    def kind(self) -> PlatformKind:
        return self.state.kind

    @property
    def width(self) -> float:
        return self.base_width * self.scale

    @property
    def height(self) -> float:
        return self.base_height * self.scale

    @property
    def broken(self) -> bool:
        return isinstance(self.state, BreakingState) and self.state.broken

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


def new_state(kind: PlatformKind, direction: int = 1) -> PlatformState:
    """Fresh state variant for a kind."""
    if kind == PlatformKind.MOVING:
        return MovingState(direction=direction)
    if kind == PlatformKind.BREAKING:
        return BreakingState()
    if kind == PlatformKind.SPRING:
        return SpringState()
    return NormalState()


def create_platform(
    x: float,
    y: float,
    kind: PlatformKind = PlatformKind.NORMAL,
    *,
    scale: float = 1.0,
    direction: int = 1,
    base_width: float = PLATFORM_WIDTH,
    serial: int = 0,
    fallback: bool = False,
) -> Platform:
    """Create a platform of the given kind at (x, y), top-left corner."""
    return Platform(
        x=x,
        y=y,
        state=new_state(kind, direction),
        base_width=base_width,
        scale=scale,
        serial=serial,
        fallback=fallback,
    )


def is_solid(platform: Platform) -> bool:
    """True if the platform can currently be landed on."""
    if platform.broken:
        return False
    return math.isfinite(platform.x) and math.isfinite(platform.y)


# ---------------------------------------------------------------------------
# Per-tick update
# ---------------------------------------------------------------------------

def update_platform(platform: Platform, screen_width: float, ts: float) -> bool:
    """Advance a platform's own behaviour by one frame.

    Returns True on the tick a breaking platform becomes broken.
    """
    state = platform.state
    if isinstance(state, MovingState):
        platform.x += state.base_speed * platform.scale * state.direction * ts
        if platform.x <= 0:
            platform.x = 0.0
            state.direction = 1
        elif platform.x + platform.width >= screen_width:
            platform.x = max(0.0, screen_width - platform.width)
            state.direction = -1
        return False
    if isinstance(state, BreakingState):
        if state.triggered and not state.broken:
            state.timer += ts
            if state.timer > BREAK_THRESHOLD:
                state.broken = True
                return True
        return False
    # NormalState and SpringState have no per-tick behaviour.
    return False


def update_platforms(platforms: list[Platform], screen_width: float, ts: float) -> list[Platform]:
    """Update every platform; return the ones that broke this tick."""
    return [p for p in platforms if update_platform(p, screen_width, ts)]
