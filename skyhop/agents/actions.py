"""skyhop/agents/actions.py — Action space and input mapping.

3 discrete actions: do nothing, steer left, steer right. Jumping is
automatic on every landing, so there is no jump button.
"""

from __future__ import annotations

from skyhop.physics import InputState

# Action constants
ACTION_NOOP = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2

NUM_ACTIONS = 3

ACTION_MAP: dict[int, InputState] = {
    ACTION_NOOP: InputState(),
    ACTION_LEFT: InputState(left=True),
    ACTION_RIGHT: InputState(right=True),
}


def action_to_input(action: int) -> InputState:
    """Convert an action int to a fresh InputState.

    Raises:
        KeyError: If the action is outside the action space.
    """
    base = ACTION_MAP[int(action)]
    return InputState(left=base.left, right=base.right)
