"""skyhop/player.py — Player entity and per-frame movement.

Orchestrates the physics steps (input → gravity → movement → wrap). Landing
on platforms is handled separately by collision.py so the resolver can be
exercised on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from skyhop.constants import PLAYER_HEIGHT, PLAYER_WIDTH, START_PLATFORM_OFFSET
from skyhop.physics import (
    InputState,
    PhysicsParams,
    PhysicsState,
    Viewport,
    apply_gravity,
    apply_input,
    apply_movement,
    wrap_horizontal,
)


# ---------------------------------------------------------------------------
# Data class
# ---------------------------------------------------------------------------

@dataclass
class Player:
    """Player body plus the scale it is currently drawn and collided at."""
    physics: PhysicsState = field(default_factory=PhysicsState)
    base_width: float = PLAYER_WIDTH
    base_height: float = PLAYER_HEIGHT
    scale: float = 1.0

    @property
    def width(self) -> float:
        return self.base_width * self.scale

    @property
    def height(self) -> float:
        return self.base_height * self.scale

    @property
    def bottom(self) -> float:
        return self.physics.y + self.height

    @property
    def falling(self) -> bool:
        return self.physics.vy > 0


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_player(x: float, y: float, scale: float = 1.0) -> Player:
    """Create a player with its top-left corner at the given position."""
    return Player(physics=PhysicsState(x=x, y=y), scale=scale)


def spawn_player(viewport: Viewport) -> Player:
    """Create a player standing centred on the start platform."""
    scale = viewport.scale
    player = Player(scale=scale)
    player.physics.x = viewport.width / 2 - player.width / 2
    # A few pixels of air so the first fall lands cleanly.
    player.physics.y = viewport.height - START_PLATFORM_OFFSET * scale - player.height - 5
    return player


# ---------------------------------------------------------------------------
# Main update
# ---------------------------------------------------------------------------

def player_update(
    player: Player,
    inp: InputState,
    params: PhysicsParams,
    viewport: Viewport,
    ts: float,
) -> None:
    """Advance the player by one frame: input, gravity, movement, wrap."""
    player.scale = viewport.scale
    p = player.physics
    apply_input(p, inp, params, player.scale, ts)
    apply_gravity(p, params, player.scale, ts)
    apply_movement(p, ts)
    wrap_horizontal(p, player.width, viewport.width)


def clamp_to_viewport(player: Player, viewport: Viewport) -> None:
    """Pull a player that ended up past the right edge back on screen (resize)."""
    player.scale = viewport.scale
    if player.physics.x > viewport.width:
        player.physics.x = viewport.width - player.width
