"""skyhop/agents/base.py — Agent protocol.

All agents (programmed, scripted, or learned) conform to this interface.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Agent(Protocol):
    """Anything that maps observations to actions."""

    def act(self, obs: np.ndarray) -> int:
        """Given an observation vector, return a discrete action index."""
        ...

    def reset(self) -> None:
        """Called at episode start. Reset internal state if any."""
        ...
