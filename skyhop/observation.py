"""skyhop/observation.py — Observation extraction from a Session.

Produces a flat numpy vector for agent consumption: player kinematics
followed by the nearest platforms, sorted by vertical distance from the
player's feet.
"""

from __future__ import annotations

import numpy as np

from skyhop.constants import DIFFICULTY_HEIGHT
from skyhop.physics import effective_jump, effective_speed
from skyhop.platforms import BreakingState, Platform, is_solid
from skyhop.simulation import Session

NEAREST_PLATFORMS = 5
PLATFORM_FEATURES = 4
OBS_DIM_BASE = 6
OBS_DIM = OBS_DIM_BASE + PLATFORM_FEATURES * NEAREST_PLATFORMS


def _usable(platform: Platform) -> bool:
    """A platform the player can still bounce off (not broken or crumbling)."""
    state = platform.state
    if isinstance(state, BreakingState):
        return not (state.broken or state.triggered)
    return True


def nearest_platforms(session: Session, count: int = NEAREST_PLATFORMS) -> list[Platform]:
    """Solid platforms closest to the player's feet, nearest first."""
    feet = session.player.bottom
    solid = [p for p in session.platforms if is_solid(p)]
    solid.sort(key=lambda p: abs(p.y - feet))
    return solid[:count]


def extract_observation(session: Session) -> np.ndarray:
    """Extract an observation vector from the current session state.

    Layout:
        [0]  x position (player centre, normalized by viewport width)
        [1]  y position relative to the camera (normalized by height)
        [2]  x velocity (normalized by effective speed)
        [3]  y velocity (normalized by effective jump force)
        [4]  facing_right flag (0.0 or 1.0)
        [5]  score progress (peak height / difficulty ramp height)
        [6-25] nearest platforms (5 × dx, dy, kind/3, usable)
    """
    vp = session.viewport
    scale = vp.scale
    player = session.player
    p = player.physics
    obs = np.zeros(OBS_DIM, dtype=np.float32)

    speed = effective_speed(session.params, scale) or 1.0
    jump = abs(effective_jump(session.params, scale)) or 1.0
    centre = p.x + player.width / 2

    # Player kinematics (6)
    obs[0] = centre / vp.width
    obs[1] = (p.y - session.camera.y) / vp.height
    obs[2] = p.vx / speed
    obs[3] = p.vy / jump
    obs[4] = float(p.facing > 0)
    obs[5] = session.peak_height / (DIFFICULTY_HEIGHT * scale)

    # Nearest platforms (5 × 4 = 20 values), zero-padded
    for i, platform in enumerate(nearest_platforms(session)):
        base = OBS_DIM_BASE + i * PLATFORM_FEATURES
        obs[base] = (platform.center_x - centre) / vp.width
        obs[base + 1] = (platform.y - player.bottom) / vp.height
        obs[base + 2] = platform.kind.value / 3.0
        obs[base + 3] = float(_usable(platform))

    return obs
