"""skyhop/camera.py — One-way vertical camera and height-based score.

The camera follows the player upward once the player rises above a fixed
fraction of the screen and never scrolls back down. Score is the camera's
peak upward travel in score units, so it can only grow.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from skyhop.constants import CAMERA_THRESHOLD, DEATH_MARGIN, SCORE_UNIT
from skyhop.physics import Viewport
from skyhop.player import Player


# ---------------------------------------------------------------------------
# Data class
# ---------------------------------------------------------------------------

@dataclass
class Camera:
    """World-to-screen vertical offset. Up is negative."""
    y: float = 0.0

    def to_screen(self, world_y: float) -> float:
        return world_y - self.y


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def camera_update(camera: Camera, player: Player, viewport: Viewport) -> float:
    """Scroll up to keep the player below the threshold line.

    Returns the distance scrolled this frame (0.0 when the camera holds).
    """
    line = camera.y + viewport.height * CAMERA_THRESHOLD
    y = player.physics.y
    if y < line:
        diff = line - y
        camera.y -= diff
        return diff
    return 0.0


def score_for(camera: Camera, viewport: Viewport) -> int:
    """Score earned by the camera's travel so far (never negative)."""
    unit = SCORE_UNIT * viewport.scale
    if unit <= 0:
        return 0
    return max(0, math.floor(-camera.y / unit))


def fell_out(camera: Camera, player: Player, viewport: Viewport) -> bool:
    """True once the player is past the bottom of the visible window."""
    return player.physics.y - camera.y > viewport.height + DEATH_MARGIN * viewport.scale
