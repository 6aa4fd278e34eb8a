"""skyhop/physics.py — Jump physics model.

Pure functions over a small parameter set (speed, jump force, gravity) and a
viewport scale factor. Every per-frame step is multiplied by a time scale so
movement is frame-rate independent. Does not include platform collision
(see collision.py).
"""

from __future__ import annotations

from dataclasses import dataclass

from skyhop.constants import (
    FRICTION,
    GRAVITY,
    JUMP_FORCE,
    JUMP_SAFETY,
    MAX_FRAME_MS,
    PLAYER_SPEED,
    REFERENCE_HEIGHT,
    TARGET_FRAME_MS,
)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class Viewport:
    """Screen dimensions and the derived scale factor."""
    width: float
    height: float

    @property
    def scale(self) -> float:
        return self.height / REFERENCE_HEIGHT

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)


@dataclass(frozen=True)
class PhysicsParams:
    """Base (unscaled) movement constants."""
    speed: float = PLAYER_SPEED
    jump_force: float = JUMP_FORCE
    gravity: float = GRAVITY
    friction: float = FRICTION
    jump_safety: float = JUMP_SAFETY


@dataclass
class InputState:
    """Input flags decoupled from Pyxel for testability."""
    left: bool = False
    right: bool = False


@dataclass
class PhysicsState:
    """Mutable kinematic state for the player body."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    facing: int = 1
    last_dy: float = 0.0  # vertical displacement of the last movement step


# ---------------------------------------------------------------------------
# Derived constants
# ---------------------------------------------------------------------------

def time_scale(dt_ms: float) -> float:
    """Ratio of elapsed time to the reference frame, clamped for stalls."""
    dt = max(0.0, min(dt_ms, MAX_FRAME_MS))
    return dt / TARGET_FRAME_MS


def effective_speed(params: PhysicsParams, scale: float) -> float:
    return params.speed * scale


def effective_jump(params: PhysicsParams, scale: float) -> float:
    return params.jump_force * scale


def effective_gravity(params: PhysicsParams, scale: float) -> float:
    return params.gravity * scale


def max_jump_height(params: PhysicsParams, scale: float) -> float:
    """Peak height of a single jump (h = v² / 2g), shrunk by the safety factor."""
    peak = params.jump_force * params.jump_force / (2.0 * params.gravity)
    return peak * scale * params.jump_safety


# ---------------------------------------------------------------------------
# Input mapping
# ---------------------------------------------------------------------------

def touch_to_input(touch_x: float, width: float) -> InputState:
    """Touch on the left half steers left, right half steers right."""
    if touch_x < width / 2:
        return InputState(left=True)
    return InputState(right=True)


# ---------------------------------------------------------------------------
# Step 1: Input
# ---------------------------------------------------------------------------

def apply_input(
    state: PhysicsState,
    inp: InputState,
    params: PhysicsParams,
    scale: float,
    ts: float,
) -> None:
    """Set horizontal velocity from input, or decay it when idle."""
    speed = effective_speed(params, scale)
    if inp.left:
        state.vx = -speed
        state.facing = -1
    elif inp.right:
        state.vx = speed
        state.facing = 1
    else:
        state.vx *= params.friction ** ts


# ---------------------------------------------------------------------------
# Step 2: Gravity
# ---------------------------------------------------------------------------

def apply_gravity(state: PhysicsState, params: PhysicsParams, scale: float, ts: float) -> None:
    state.vy += effective_gravity(params, scale) * ts


# ---------------------------------------------------------------------------
# Step 3: Movement
# ---------------------------------------------------------------------------

def apply_movement(state: PhysicsState, ts: float) -> None:
    """Integrate velocity into position and remember the vertical step."""
    dy = state.vy * ts
    state.x += state.vx * ts
    state.y += dy
    state.last_dy = dy


# ---------------------------------------------------------------------------
# Step 4: Screen wrap
# ---------------------------------------------------------------------------

def wrap_horizontal(state: PhysicsState, body_width: float, screen_width: float) -> None:
    """Leaving one side of the screen re-enters from the other."""
    if state.x + body_width < 0:
        state.x = screen_width
    elif state.x > screen_width:
        state.x = -body_width
