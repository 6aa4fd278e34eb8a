"""skyhop/agents/hold_right.py — HoldRightAgent: always returns ACTION_RIGHT."""

from __future__ import annotations

import numpy as np

from skyhop.agents.actions import ACTION_RIGHT


class HoldRightAgent:
    """Agent that steers right every frame, wrapping around the screen."""

    def act(self, obs: np.ndarray) -> int:
        return ACTION_RIGHT

    def reset(self) -> None:
        pass
