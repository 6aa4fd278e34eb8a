"""skyhop/agents/registry.py — Agent name → class mapping.

Used by scenario YAML resolution to instantiate agents by string name.
"""

from __future__ import annotations

from skyhop.agents.climber import ClimberAgent
from skyhop.agents.hold_right import HoldRightAgent
from skyhop.agents.idle import IdleAgent
from skyhop.agents.scripted import ScriptedAgent

AGENT_REGISTRY: dict[str, type] = {
    "idle": IdleAgent,
    "hold_right": HoldRightAgent,
    "climber": ClimberAgent,
    "scripted": ScriptedAgent,
}


def resolve_agent(name: str, params: dict | None = None):
    """Look up an agent class by name and instantiate with optional kwargs.

    Args:
        name: Agent name (key in AGENT_REGISTRY).
        params: Optional kwargs passed to the agent constructor.

    Returns:
        An instantiated agent conforming to the Agent protocol.

    Raises:
        KeyError: If name is not in the registry.
    """
    if name not in AGENT_REGISTRY:
        raise KeyError(f"Unknown agent: {name!r}. Available: {sorted(AGENT_REGISTRY)}")
    cls = AGENT_REGISTRY[name]
    return cls(**(params or {}))
