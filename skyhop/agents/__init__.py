"""skyhop/agents — Agent interface, action space, and programmed agents."""

from skyhop.agents.actions import (
    ACTION_LEFT,
    ACTION_MAP,
    ACTION_NOOP,
    ACTION_RIGHT,
    NUM_ACTIONS,
    action_to_input,
)
from skyhop.agents.base import Agent
from skyhop.agents.climber import ClimberAgent
from skyhop.agents.hold_right import HoldRightAgent
from skyhop.agents.idle import IdleAgent
from skyhop.agents.registry import AGENT_REGISTRY, resolve_agent
from skyhop.agents.scripted import ScriptedAgent

__all__ = [
    "Agent",
    "ACTION_NOOP",
    "ACTION_LEFT",
    "ACTION_RIGHT",
    "NUM_ACTIONS",
    "ACTION_MAP",
    "action_to_input",
    "IdleAgent",
    "HoldRightAgent",
    "ClimberAgent",
    "ScriptedAgent",
    "AGENT_REGISTRY",
    "resolve_agent",
]
