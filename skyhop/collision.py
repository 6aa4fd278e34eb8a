"""skyhop/collision.py — Landing detection and per-kind landing effects.

Landings are only checked while the player falls. The test sweeps the
player's bottom edge from its previous position to its current one, so a fast
fall cannot tunnel through a thin platform in a single frame.

Spring compression is a display flag released by ``EffectTimers`` on real
time, independent of the frame clock; it never feeds back into physics.
"""

from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from skyhop.constants import LANDING_BAND, SPRING_BAND, SPRING_COMPRESS_MS, SPRING_MULTIPLIER
from skyhop.physics import PhysicsParams, effective_jump
from skyhop.platforms import (
    BreakingState,
    MovingState,
    NormalState,
    Platform,
    SpringState,
    is_solid,
)
from skyhop.player import Player


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class LandingResult(Enum):
    BOUNCED = "bounced"
    SPRUNG = "sprung"
    TRIGGERED = "triggered"


@dataclass
class Landing:
    platform: Platform
    result: LandingResult


# ---------------------------------------------------------------------------
# Real-time effect timers
# ---------------------------------------------------------------------------

class EffectTimers:
    """Callbacks due after a real-time delay, polled from the host loop."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self.clock = clock
        self._pending: list[tuple[float, Callable[[], None]]] = []

    def __len__(self) -> int:
        return len(self._pending)

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        self._pending.append((self.clock() + delay_ms / 1000.0, callback))

    def poll(self) -> int:
        """Run every callback whose deadline has passed. Returns how many ran."""
        now = self.clock()
        due = [cb for deadline, cb in self._pending if deadline <= now]
        self._pending = [(d, cb) for d, cb in self._pending if d > now]
        for cb in due:
            cb()
        return len(due)

    def clear(self) -> None:
        self._pending.clear()


def _release_spring(state: SpringState) -> None:
    state.compressed = False


# ---------------------------------------------------------------------------
# Landing test
# ---------------------------------------------------------------------------

def landed_on(player: Player, platform: Platform) -> bool:
    """True if the player's swept bottom edge crossed the platform's top band."""
    if not is_solid(platform):
        return False
    p = player.physics
    bottom = player.bottom
    prev_bottom = bottom - p.last_dy
    band = LANDING_BAND * player.scale
    return (
        bottom >= platform.y
        and prev_bottom <= platform.y + band
        and p.x + player.width > platform.x
        and p.x < platform.x + platform.width
    )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def resolve_landings(
    player: Player,
    platforms: list[Platform],
    params: PhysicsParams,
    timers: EffectTimers | None = None,
) -> list[Landing]:
    """Apply landing effects for this frame. Safe to call twice per frame."""
    landings: list[Landing] = []
    for platform in platforms:
        if not player.falling:
            break
        if not landed_on(player, platform):
            continue
        result = _land(player, platform, params, timers)
        if result is not None:
            landings.append(Landing(platform=platform, result=result))
    return landings


def _land(
    player: Player,
    platform: Platform,
    params: PhysicsParams,
    timers: EffectTimers | None,
) -> LandingResult | None:
    p = player.physics
    jump = effective_jump(params, player.scale)
    state = platform.state

    if isinstance(state, (NormalState, MovingState)):
        p.vy = jump
        return LandingResult.BOUNCED

    if isinstance(state, BreakingState):
        if not state.triggered:
            state.triggered = True
            return LandingResult.TRIGGERED
        # Still crumbling: holds weight once its countdown has started ticking.
        if state.timer > 0 and not state.broken:
            p.vy = jump
            return LandingResult.BOUNCED
        return None

    if isinstance(state, SpringState):
        if player.bottom <= platform.y + SPRING_BAND * player.scale:
            p.vy = jump * SPRING_MULTIPLIER
            state.compressed = True
            if timers is not None:
                timers.schedule(SPRING_COMPRESS_MS, functools.partial(_release_spring, state))
            return LandingResult.SPRUNG
        p.vy = jump
        return LandingResult.BOUNCED

    return None
