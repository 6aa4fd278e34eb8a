"""skyhop/env_registration.py — Register Skyhop envs with Gymnasium.

Import this module to register all environments::

    import skyhop.env_registration
    env = gymnasium.make("skyhop/Climb-v0")
"""

import gymnasium as gym

gym.register(
    id="skyhop/Climb-v0",
    entry_point="skyhop.env:SkyhopEnv",
    kwargs={"max_steps": 3600},
    max_episode_steps=3600,
)

# Long-run variant for endurance training
gym.register(
    id="skyhop/Climb-Long-v0",
    entry_point="skyhop.env:SkyhopEnv",
    kwargs={"max_steps": 18000},
    max_episode_steps=18000,
)
