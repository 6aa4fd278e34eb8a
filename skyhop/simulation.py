"""skyhop/simulation.py — Headless session state, game state machine, frame loop.

Provides Session (everything one run needs, minus rendering), session_step()
for advancing it by one frame, the Game state machine that owns sessions and
reports final scores, and FrameLoop, an explicit scheduler driven by an
injectable time source. No Pyxel imports.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from skyhop.camera import Camera, camera_update, fell_out, score_for
from skyhop.collision import EffectTimers, LandingResult, resolve_landings
from skyhop.constants import TARGET_FRAME_MS
from skyhop.generator import Placement, PlatformGenerator
from skyhop.physics import InputState, PhysicsParams, Viewport, time_scale
from skyhop.platforms import Platform, PlatformKind, update_platforms
from skyhop.player import Player, clamp_to_viewport, player_update, spawn_player

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

@dataclass
class LandedEvent:
    kind: PlatformKind


@dataclass
class SpringEvent:
    pass


@dataclass
class TriggerEvent:
    pass


@dataclass
class BreakEvent:
    pass


@dataclass
class ScoreEvent:
    score: int


@dataclass
class SessionOverEvent:
    score: int


Event = (
    LandedEvent
    | SpringEvent
    | TriggerEvent
    | BreakEvent
    | ScoreEvent
    | SessionOverEvent
)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

@dataclass
class Session:
    """Complete state of one run. Mutated only by session_step."""

    viewport: Viewport
    params: PhysicsParams
    player: Player
    platforms: list[Platform]
    camera: Camera
    generator: PlatformGenerator
    timers: EffectTimers
    score: int = 0
    running: bool = True
    frame: int = 0
    elapsed_ms: float = 0.0
    landings: int = 0
    springs_used: int = 0
    platforms_broken: int = 0
    max_platforms: int = 0
    placements: int = 0
    last_placements: list[Placement] = field(default_factory=list)  # made by the latest step

    @property
    def peak_height(self) -> float:
        """Camera travel above the start, in pixels."""
        return max(0.0, -self.camera.y)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_session(
    viewport: Viewport,
    params: PhysicsParams | None = None,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] = time.perf_counter,
    max_jump: float | None = None,
) -> Session:
    """Build a fresh session: player on the start platform, first screen of ladder.

    Args:
        viewport: Screen dimensions (scale is derived from the height).
        params: Base physics constants; defaults to the tuned values.
        seed: Seed for the platform generator when ``rng`` is not given.
        rng: Explicit random source, overrides ``seed``.
        clock: Monotonic time source for display timers.
        max_jump: Override for the generator's jump-height bound.
    """
    params = params or PhysicsParams()
    if rng is None:
        rng = random.Random(seed)
    camera = Camera()
    generator = PlatformGenerator(viewport, params, rng, max_jump=max_jump)
    platforms, placements = generator.build_initial(camera.y)
    return Session(
        viewport=viewport,
        params=params,
        player=spawn_player(viewport),
        platforms=platforms,
        camera=camera,
        generator=generator,
        timers=EffectTimers(clock),
        max_platforms=len(platforms),
        placements=len(placements),
        last_placements=placements,
    )


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------

def session_step(session: Session, inp: InputState, dt_ms: float) -> list[Event]:
    """Advance the session by one frame.

    Returns the events that occurred during this frame. Does nothing once the
    session has ended.
    """
    events: list[Event] = []
    if not session.running:
        session.last_placements = []
        return events

    ts = time_scale(dt_ms)
    vp = session.viewport

    # Display effects due on real time (spring release)
    session.timers.poll()

    # Player (input, gravity, movement, wrap)
    player_update(session.player, inp, session.params, vp, ts)

    # Landings
    for landing in resolve_landings(
        session.player, session.platforms, session.params, session.timers
    ):
        if landing.result == LandingResult.TRIGGERED:
            events.append(TriggerEvent())
            continue
        session.landings += 1
        if landing.result == LandingResult.SPRUNG:
            session.springs_used += 1
            events.append(SpringEvent())
        events.append(LandedEvent(kind=landing.platform.kind))

    # Platform behaviour
    for _ in update_platforms(session.platforms, vp.width, ts):
        session.platforms_broken += 1
        events.append(BreakEvent())

    # Ladder upkeep
    placed = session.generator.extend(session.platforms, session.camera.y)
    session.placements += len(placed)
    session.last_placements = placed
    session.platforms = session.generator.prune(session.platforms, session.camera.y)
    session.max_platforms = max(session.max_platforms, len(session.platforms))

    # Camera and score
    camera_update(session.camera, session.player, vp)
    score = max(session.score, score_for(session.camera, vp))
    if score != session.score:
        session.score = score
        events.append(ScoreEvent(score=score))

    # Termination
    if fell_out(session.camera, session.player, vp):
        session.running = False
        events.append(SessionOverEvent(score=session.score))

    session.frame += 1
    session.elapsed_ms += ts * TARGET_FRAME_MS
    return events


# ---------------------------------------------------------------------------
# Game state machine
# ---------------------------------------------------------------------------

class GameState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    OVER = "over"


class Game:
    """Owns the active session and reports each final score exactly once.

    ``on_session_end`` is called with the final score when a session reaches
    OVER. A failing handler is logged and never interrupts the frame loop.
    """

    def __init__(
        self,
        viewport: Viewport,
        params: PhysicsParams | None = None,
        on_session_end: Callable[[int], None] | None = None,
        *,
        seed: int | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.viewport = viewport
        self.params = params or PhysicsParams()
        self.on_session_end = on_session_end
        self.clock = clock
        self.state = GameState.IDLE
        self.session: Session | None = None
        self.sessions_played = 0
        self._seeds = random.Random(seed)
        self._reported = False

    @property
    def score(self) -> int:
        return self.session.score if self.session is not None else 0

    def start(self, seed: int | None = None) -> Session:
        """Begin a new session. A session still running is reported first."""
        if self.state == GameState.RUNNING:
            self._finish()
        if seed is None:
            seed = self._seeds.getrandbits(32)
        if self.session is not None:
            self.session.timers.clear()
        self.session = create_session(
            self.viewport, self.params, seed=seed, clock=self.clock,
        )
        self.state = GameState.RUNNING
        self._reported = False
        logger.debug("session started (seed=%s)", seed)
        return self.session

    def step(self, inp: InputState, dt_ms: float) -> list[Event]:
        """Advance the running session by one frame; no-op in other states."""
        if self.state != GameState.RUNNING or self.session is None:
            return []
        events = session_step(self.session, inp, dt_ms)
        if not self.session.running:
            self._finish()
        return events

    def poll_effects(self) -> int:
        """Release display effects whose real-time delay has passed."""
        if self.session is None:
            return 0
        return self.session.timers.poll()

    def resize(self, width: float, height: float) -> None:
        """Apply new viewport dimensions without resetting the session."""
        self.viewport.resize(width, height)
        if self.session is None:
            return
        scale = self.viewport.scale
        for platform in self.session.platforms:
            platform.scale = scale
        clamp_to_viewport(self.session.player, self.viewport)

    def to_menu(self) -> None:
        """Leave the finished (or running) session and return to IDLE."""
        if self.state == GameState.RUNNING:
            self._finish()
        self.state = GameState.IDLE

    def _finish(self) -> None:
        self.state = GameState.OVER
        if self._reported:
            return
        self._reported = True
        self.sessions_played += 1
        final = self.session.score
        logger.info("session over: score=%d frames=%d", final, self.session.frame)
        if self.on_session_end is None:
            return
        try:
            self.on_session_end(final)
        except Exception:
            logger.exception("session end handler failed")


# ---------------------------------------------------------------------------
# Frame loop
# ---------------------------------------------------------------------------

class FrameLoop:
    """Explicit scheduler: reads the clock, steps the game, one frame per tick."""

    def __init__(
        self,
        game: Game,
        clock: Callable[[], float] | None = None,
        input_source: Callable[[], InputState] | None = None,
    ) -> None:
        self.game = game
        self.clock = clock or game.clock
        self.input_source = input_source or InputState
        self._last: float | None = None

    def tick(self) -> list[Event]:
        """Step once using the wall-clock delta since the previous tick."""
        now = self.clock()
        dt_ms = 0.0 if self._last is None else (now - self._last) * 1000.0
        self._last = now
        self.game.poll_effects()
        return self.game.step(self.input_source(), dt_ms)

    def run_fixed(
        self,
        dts: list[float],
        inp: InputState | None = None,
    ) -> list[list[Event]]:
        """Drive the game synchronously with a fixed sequence of deltas (ms)."""
        inp = inp or InputState()
        frames: list[list[Event]] = []
        for dt in dts:
            self.game.poll_effects()
            frames.append(self.game.step(inp, dt))
        return frames
