from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_engine.game import PIECE_COLORS, Action, GameConfig, TetrisEngine, TetrominoType


def _rgb(value: int) -> Tuple[int, int, int]:
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


class TetrisEnv(gym.Env):
    """Falling-block environment over a TetrisEngine.

    Each step applies one Action; every ``gravity_interval`` steps the engine
    also receives a gravity tick. The episode terminates on game over.

    Observation:
      board: (height, width) int8, settled kinds 1..7, active piece as -kind
      next_piece: kind of the queued piece (0 when none)
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        gravity_interval: int = 4,
        reward_weights: Optional[Dict[str, float]] = None,
        terminal_penalty: float = -10.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        if gravity_interval <= 0:
            raise ValueError("gravity_interval must be positive")
        self.config = config or GameConfig()
        self.engine = TetrisEngine(self.config)
        self.render_mode = render_mode
        self.gravity_interval = int(gravity_interval)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            "lines": 10.0,           # reward per line cleared
            "lines_sq": 5.0,         # extra for multiple lines (quadratic)
            "holes": 0.1,            # penalize holes created
            "height": 0.02,          # penalize max height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        n_kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(
                    low=-n_kinds, high=n_kinds, shape=(self.config.height, self.config.width), dtype=np.int8
                ),
                "next_piece": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0
        self._last_obs: Optional[Dict[str, Any]] = None

    def _get_obs(self) -> Dict[str, Any]:
        nxt = self.engine.next_piece()
        return {
            "board": self.engine.get_state().astype(np.int8),
            "next_piece": int(nxt.kind) if nxt is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "lines_cleared_total": self.engine.cleared_line_count(),
            "steps": self._steps,
        }

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[dict] = None,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self.engine.reset()
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        holes_before = self.engine.count_holes()
        height_before = self.engine.get_max_height()

        result = self.engine.step(Action(int(action)))
        lines = result.lines_cleared
        self._steps += 1
        if self._steps % self.gravity_interval == 0 and not self.engine.is_game_over():
            lines += self.engine.tick().lines_cleared

        reward_components: Dict[str, float] = {
            "lines": self.reward_weights["lines"] * float(lines),
            "lines_sq": self.reward_weights["lines_sq"] * float(lines * lines),
            "holes": -self.reward_weights["holes"] * float(max(0, self.engine.count_holes() - holes_before)),
            "height": -self.reward_weights["height"] * float(max(0, self.engine.get_max_height() - height_before)),
        }

        terminated = self.engine.is_game_over()
        truncated = not terminated and self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        obs = self._get_obs()
        info = self._get_info()
        info["accepted"] = result.accepted
        info["lines_cleared"] = lines
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            board = self._last_obs["board"] if self._last_obs is not None else self.engine.get_state()
            cell = 12
            h, w = board.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            img[:, :, :] = (30, 30, 36)
            for y in range(h):
                for x in range(w):
                    v = int(board[y, x])
                    if v:
                        color = _rgb(PIECE_COLORS[TetrominoType(abs(v))])
                        img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
