"""skyhop/agents/climber.py — ClimberAgent: steer onto the next platform.

While falling, steers toward the closest usable platform below its feet.
While rising, lines up under the closest usable platform above. Reads only
the observation vector, so it works the same from the env or a scenario.
"""

from __future__ import annotations

import numpy as np

from skyhop.agents.actions import ACTION_LEFT, ACTION_NOOP, ACTION_RIGHT
from skyhop.observation import NEAREST_PLATFORMS, OBS_DIM_BASE, PLATFORM_FEATURES


class ClimberAgent:
    """Greedy platform-to-platform climber.

    Args:
        deadzone: Horizontal offset (fraction of screen width) treated as
            already lined up.
    """

    def __init__(self, deadzone: float = 0.03) -> None:
        self.deadzone = deadzone

    def act(self, obs: np.ndarray) -> int:
        falling = obs[3] > 0
        target_dx = None
        best = None
        for i in range(NEAREST_PLATFORMS):
            base = OBS_DIM_BASE + i * PLATFORM_FEATURES
            dx, dy, _kind, usable = obs[base:base + PLATFORM_FEATURES]
            if usable < 0.5:
                continue
            # Below the feet is dy >= 0; above is dy < 0.
            if (dy >= 0) != falling:
                continue
            if best is None or abs(dy) < best:
                best = abs(dy)
                target_dx = dx
        if target_dx is None or abs(target_dx) <= self.deadzone:
            return ACTION_NOOP
        return ACTION_RIGHT if target_dx > 0 else ACTION_LEFT

    def reset(self) -> None:
        pass
