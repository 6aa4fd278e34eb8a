"""skyhop/renderer.py — Code-generated geometric art renderer.

All visuals drawn with Pyxel primitives, no .pyxres sprite sheets. Draws
platforms by kind, the player, and the HUD. World-space functions expect
pyxel.camera() to already hold the camera offset.
"""

from __future__ import annotations

import pyxel

from skyhop.platforms import (
    BreakingState,
    MovingState,
    Platform,
    PlatformKind,
    SpringState,
    is_solid,
)
from skyhop.player import Player

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

_BASE_PALETTE = {
    0: 0x9AD8F0,   # Sky (background / cls color)
    1: 0x2E8B2E,   # Normal platform
    2: 0x56C456,   # Normal platform highlight
    3: 0x2F6FD0,   # Moving platform
    4: 0x7FA8F0,   # Moving platform highlight
    5: 0xC07830,   # Breaking platform
    6: 0x6B4420,   # Breaking platform, crumbling
    7: 0xE03030,   # Spring
    8: 0xB0B0B0,   # Spring coil
    9: 0xF0C020,   # Player body
    10: 0x202020,  # Player eye
    11: 0xFFFFFF,  # UI white
    12: 0x202040,  # UI dark
}

PLATFORM_COLORS: dict[PlatformKind, tuple[int, int]] = {
    PlatformKind.NORMAL: (1, 2),
    PlatformKind.MOVING: (3, 4),
    PlatformKind.BREAKING: (5, 6),
    PlatformKind.SPRING: (1, 2),
}


def init_palette() -> None:
    """Set the palette colors. Call after pyxel.init()."""
    for slot, color in _BASE_PALETTE.items():
        pyxel.colors[slot] = color


# ---------------------------------------------------------------------------
# Platforms
# ---------------------------------------------------------------------------

def _visible(platform: Platform, camera_y: float, screen_height: float) -> bool:
    return platform.y + platform.height >= camera_y and platform.y <= camera_y + screen_height


def draw_platform(platform: Platform, frame_count: int) -> None:
    """Draw one platform in world space."""
    if not is_solid(platform):
        return
    x = int(platform.x)
    y = int(platform.y)
    w = max(1, int(platform.width))
    h = max(1, int(platform.height))
    body, highlight = PLATFORM_COLORS[platform.kind]
    state = platform.state

    if isinstance(state, BreakingState) and state.triggered:
        # Shake and darken while crumbling
        x += 1 if frame_count % 4 < 2 else -1
        pyxel.rect(x, y, w, h, highlight)
        for cx in range(x + 3, x + w - 2, 6):
            pyxel.line(cx, y, cx + 2, y + h - 1, 12)
        return

    pyxel.rect(x, y, w, h, body)
    pyxel.line(x, y, x + w - 1, y, highlight)

    if isinstance(state, MovingState):
        # Direction arrow
        mid = x + w // 2
        d = 1 if state.direction > 0 else -1
        pyxel.tri(mid + 3 * d, y + h // 2, mid - 2 * d, y + 1, mid - 2 * d, y + h - 2, 11)
    elif isinstance(state, SpringState):
        _draw_spring(x + w // 2, y, state.compressed)


def _draw_spring(cx: int, top: int, compressed: bool) -> None:
    coil = 3 if compressed else 8
    pyxel.rect(cx - 2, top - coil, 4, coil, 8)
    pyxel.rect(cx - 6, top - coil - 2, 12, 2, 7)


def draw_platforms(platforms: list[Platform], camera_y: float, screen_height: float,
                   frame_count: int) -> int:
    """Draw visible platforms; returns how many were drawn."""
    drawn = 0
    for platform in platforms:
        if _visible(platform, camera_y, screen_height):
            draw_platform(platform, frame_count)
            drawn += 1
    return drawn


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------

def draw_player(player: Player, frame_count: int) -> None:
    """Draw the player: a squashed body while rising, eyes toward facing."""
    p = player.physics
    x = int(p.x)
    y = int(p.y)
    w = max(2, int(player.width))
    h = max(2, int(player.height))

    pyxel.rect(x, y, w, h, 9)
    pyxel.rectb(x, y, w, h, 12)

    # Eyes shift toward the facing direction
    eye_y = y + h // 4
    offset = w // 6 if p.facing > 0 else -(w // 6)
    cx = x + w // 2 + offset
    r = max(1, w // 12)
    pyxel.circ(cx - w // 6, eye_y, r, 10)
    pyxel.circ(cx + w // 6, eye_y, r, 10)

    # Feet tucked while rising
    if p.vy < 0:
        pyxel.line(x + 2, y + h, x + w // 3, y + h, 12)
        pyxel.line(x + w - 3, y + h, x + 2 * w // 3, y + h, 12)


# ---------------------------------------------------------------------------
# HUD
# ---------------------------------------------------------------------------

def draw_hud(score: int, best: int) -> None:
    """Draw HUD overlay in screen space. Call after pyxel.camera() reset."""
    pyxel.rect(0, 0, pyxel.width, 11, 12)
    pyxel.text(4, 3, f"SCORE: {score}", 11)
    label = f"BEST: {max(best, score)}"
    pyxel.text(pyxel.width - 4 - len(label) * 4, 3, label, 11)


def draw_debug_hud(session) -> None:
    """Draw a debug overlay with physics and ladder state."""
    p = session.player.physics
    lines = [
        f"X:{p.x:7.1f} Y:{p.y:8.1f}",
        f"VX:{p.vx:6.2f} VY:{p.vy:6.2f}",
        f"CAM:{session.camera.y:8.1f}",
        f"PLAT:{len(session.platforms)} MAX:{session.max_platforms}",
        f"LAND:{session.landings} SPR:{session.springs_used} BRK:{session.platforms_broken}",
        f"FRAME:{session.frame}",
    ]
    top = pyxel.height - 4 - len(lines) * 8
    for i, line in enumerate(lines):
        pyxel.text(4, top + i * 8, line, 12)
