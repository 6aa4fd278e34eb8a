"""skyhop/generator.py — Procedural platform ladder.

Builds and extends a vertically continuous chain of platforms above the start
platform. Vertical gaps are bounded by the player's maximum jump height and
horizontal drift by a fraction of the screen width, so every platform is
reachable from the one it was placed from. Breaking platforms always come with
a Normal fallback placed just above them.

Randomness comes from an injected ``random.Random`` so ladders are
reproducible from a seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from skyhop.constants import (
    BREAKING_CEILING,
    BREAKING_MIN_HEIGHT,
    DIFFICULTY_HEIGHT,
    FALLBACK_EXTRA_GAP,
    FALLBACK_REACH_FACTOR,
    MAX_DIFFICULTY,
    MAX_GAP_FACTOR,
    MIN_GAP,
    MOVING_CEILING,
    NORMAL_BASE_CHANCE,
    NORMAL_DIFFICULTY_DROP,
    PLATFORM_WIDTH,
    PRUNE_MARGIN,
    REACH_FACTOR,
    SAFE_START_HEIGHT,
    START_PLATFORM_OFFSET,
    START_PLATFORM_WIDTH,
)
from skyhop.physics import PhysicsParams, Viewport, max_jump_height
from skyhop.platforms import Platform, PlatformKind, create_platform


# ---------------------------------------------------------------------------
# Placement record
# ---------------------------------------------------------------------------

@dataclass
class Placement:
    """One generation step: the platform placed and the anchor it was placed from.

    ``rise`` and ``drift`` are measured at placement time; moving platforms
    wander afterwards.
    """
    anchor: Platform
    platform: Platform
    fallback: Platform | None = None
    rise: float = 0.0
    drift: float = 0.0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def highest_platform(platforms: list[Platform]) -> Platform | None:
    """Platform with the smallest y (up is negative). First one wins ties."""
    top: Platform | None = None
    for p in platforms:
        if top is None or p.y < top.y:
            top = p
    return top


def _clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class PlatformGenerator:
    """Places platforms above the current camera, guaranteed reachable.

    Geometry is read from the viewport on every call, so a resize takes effect
    on the next placement without rebuilding the ladder.
    """

    def __init__(
        self,
        viewport: Viewport,
        params: PhysicsParams | None = None,
        rng: random.Random | None = None,
        *,
        max_jump: float | None = None,
    ) -> None:
        self.viewport = viewport
        self.params = params or PhysicsParams()
        self.rng = rng or random.Random()
        self._max_jump = max_jump
        self.start_top = 0.0
        self._serial = 0

    # -- geometry ----------------------------------------------------------

    @property
    def scale(self) -> float:
        return self.viewport.scale

    @property
    def max_jump(self) -> float:
        if self._max_jump is not None:
            return self._max_jump
        return max_jump_height(self.params, self.scale)

    @property
    def min_gap(self) -> float:
        return MIN_GAP * self.scale

    @property
    def max_gap(self) -> float:
        return self.max_jump * MAX_GAP_FACTOR

    @property
    def reach(self) -> float:
        return self.viewport.width * REACH_FACTOR

    @property
    def platform_width(self) -> float:
        return PLATFORM_WIDTH * self.scale

    # -- public API --------------------------------------------------------

    def build_initial(self, camera_y: float = 0.0) -> tuple[list[Platform], list[Placement]]:
        """Seed the start platform and fill one screen height above the camera."""
        self._serial = 0
        start = self._start_platform()
        self.start_top = start.y
        platforms = [start]
        placements = self.extend(platforms, camera_y)
        return platforms, placements

    def extend(self, platforms: list[Platform], camera_y: float) -> list[Placement]:
        """Append platforms until the highest one sits a screen above the camera.

        Mutates ``platforms`` in place and returns the placements made.
        """
        placements: list[Placement] = []
        if self.min_gap <= 0 or not platforms:
            return placements
        target = camera_y - self.viewport.height
        top = highest_platform(platforms)
        while top.y > target:
            placement = self.place_next(top)
            if placement.fallback is not None:
                platforms.append(placement.fallback)
            platforms.append(placement.platform)
            placements.append(placement)
            # A fallback always sits above its breaking platform.
            top = placement.fallback or placement.platform
        return placements

    def prune(self, platforms: list[Platform], camera_y: float) -> list[Platform]:
        """Drop platforms that fell out of reach below the screen."""
        limit = camera_y + self.viewport.height + PRUNE_MARGIN * self.scale
        return [p for p in platforms if p.y < limit]

    def place_next(self, anchor: Platform) -> Placement:
        """Place one platform above ``anchor`` (plus a fallback if breaking)."""
        rng = self.rng
        min_gap = self.min_gap
        gap = rng.uniform(min_gap, max(min_gap, self.max_gap))
        y = anchor.y - gap
        x = self._pick_x(anchor.x)
        kind = self.choose_kind(self.start_top - y)
        direction = 1
        if kind == PlatformKind.MOVING:
            direction = rng.choice((-1, 1))

        fallback = None
        if kind == PlatformKind.BREAKING:
            fallback = self._fallback_for(x, y)

        platform = create_platform(
            x, y, kind,
            scale=self.scale,
            direction=direction,
            serial=self._next_serial(),
        )
        return Placement(
            anchor=anchor,
            platform=platform,
            fallback=fallback,
            rise=anchor.y - y,
            drift=x - anchor.x,
        )

    def choose_kind(self, height: float) -> PlatformKind:
        """Pick a platform kind from the height climbed so far."""
        scale = self.scale
        if height < SAFE_START_HEIGHT * scale:
            return PlatformKind.NORMAL
        difficulty = min(height / (DIFFICULTY_HEIGHT * scale), MAX_DIFFICULTY)
        r = self.rng.random()
        if r < NORMAL_BASE_CHANCE - difficulty * NORMAL_DIFFICULTY_DROP:
            return PlatformKind.NORMAL
        if r < MOVING_CEILING:
            return PlatformKind.MOVING
        if r < BREAKING_CEILING and height > BREAKING_MIN_HEIGHT * scale:
            return PlatformKind.BREAKING
        return PlatformKind.SPRING

    # -- internals ---------------------------------------------------------

    def _start_platform(self) -> Platform:
        scale = self.scale
        width = START_PLATFORM_WIDTH * scale
        return create_platform(
            self.viewport.width / 2 - width / 2,
            self.viewport.height - START_PLATFORM_OFFSET * scale,
            PlatformKind.NORMAL,
            scale=scale,
            base_width=START_PLATFORM_WIDTH,
            serial=self._next_serial(),
        )

    def _x_bounds(self, x: float, reach: float) -> tuple[float, float]:
        """Reachable x range around ``x``; collapses to a single clamped value."""
        right_edge = self.viewport.width - self.platform_width
        lo = max(0.0, x - reach)
        hi = min(right_edge, x + reach)
        if lo > hi:
            pinned = max(0.0, min(x, right_edge))
            return pinned, pinned
        return lo, hi

    def _pick_x(self, anchor_x: float) -> float:
        lo, hi = self._x_bounds(anchor_x, self.reach)
        return lo + self.rng.random() * (hi - lo)

    def _fallback_for(self, x: float, y: float) -> Platform:
        scale = self.scale
        safe_y = y - (self.min_gap + self.rng.random() * FALLBACK_EXTRA_GAP * scale)
        jitter = (self.rng.random() - 0.5) * self.reach * FALLBACK_REACH_FACTOR
        right_edge = max(0.0, self.viewport.width - self.platform_width)
        safe_x = _clamp(x + jitter, 0.0, right_edge)
        return create_platform(
            safe_x, safe_y, PlatformKind.NORMAL,
            scale=scale,
            serial=self._next_serial(),
            fallback=True,
        )

    def _next_serial(self) -> int:
        serial = self._serial
        self._serial += 1
        return serial
