"""skyhop/env.py — Gymnasium environment wrapper.

Bridges the headless session with RL training. Thin adapter that delegates
to simulation, observation, and action modules. Every step advances exactly
one nominal 60 fps frame.
"""

from __future__ import annotations

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from skyhop.agents.actions import NUM_ACTIONS, action_to_input
from skyhop.constants import SCREEN_HEIGHT, SCREEN_WIDTH, TARGET_FRAME_MS
from skyhop.observation import OBS_DIM, extract_observation
from skyhop.physics import Viewport
from skyhop.simulation import SessionOverEvent, Session, create_session, session_step

GAME_OVER_PENALTY = -5.0


def step_reward(score_delta: int, events: list) -> float:
    """Reward for one frame: points gained, minus a penalty on falling out."""
    reward = float(score_delta)
    if any(isinstance(e, SessionOverEvent) for e in events):
        reward += GAME_OVER_PENALTY
    return reward


class SkyhopEnv(gym.Env):
    """Gymnasium environment for Skyhop, an endless vertical jumper."""

    metadata = {"render_modes": [], "render_fps": 60}

    def __init__(
        self,
        width: float = SCREEN_WIDTH,
        height: float = SCREEN_HEIGHT,
        render_mode: str | None = None,
        max_steps: int = 3600,
    ) -> None:
        super().__init__()
        self.width = width
        self.height = height
        self.render_mode = render_mode
        self.max_steps = max_steps

        self.observation_space = spaces.Box(
            low=-np.inf,
            high=np.inf,
            shape=(OBS_DIM,),
            dtype=np.float32,
        )
        self.action_space = spaces.Discrete(NUM_ACTIONS)

        self.session: Session | None = None
        self._step_count = 0

    def reset(
        self,
        *,
        seed: int | None = None,
        options: dict | None = None,
    ) -> tuple[np.ndarray, dict]:
        super().reset(seed=seed)
        # Ladder randomness comes from the env's seeded generator.
        ladder_seed = int(self.np_random.integers(0, 2**32))
        self.session = create_session(Viewport(self.width, self.height), seed=ladder_seed)
        self._step_count = 0
        return self._get_obs(), self._get_info()

    def step(
        self, action: int
    ) -> tuple[np.ndarray, float, bool, bool, dict]:
        prev_score = self.session.score
        events = session_step(self.session, action_to_input(action), TARGET_FRAME_MS)
        self._step_count += 1

        obs = self._get_obs()
        reward = self._compute_reward(prev_score, events)
        terminated = not self.session.running
        truncated = self._step_count >= self.max_steps
        info = self._get_info()

        return obs, reward, terminated, truncated, info

    def _get_obs(self) -> np.ndarray:
        return extract_observation(self.session)

    def _compute_reward(self, prev_score: int, events: list) -> float:
        return step_reward(self.session.score - prev_score, events)

    def _get_info(self) -> dict:
        s = self.session
        return {
            "frame": s.frame,
            "score": s.score,
            "x": s.player.physics.x,
            "y": s.player.physics.y,
            "camera_y": s.camera.y,
            "landings": s.landings,
            "platforms": len(s.platforms),
            "game_over": not s.running,
        }
