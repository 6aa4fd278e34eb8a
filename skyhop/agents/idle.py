"""skyhop/agents/idle.py — IdleAgent: always returns ACTION_NOOP.

Bounces in place on the start platform; the null baseline.
"""

from __future__ import annotations

import numpy as np

from skyhop.agents.actions import ACTION_NOOP


class IdleAgent:
    """Agent that does nothing every frame."""

    def act(self, obs: np.ndarray) -> int:
        return ACTION_NOOP

    def reset(self) -> None:
        pass
