from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, EMPTY, FallingBlockGame, GameConfig, NUM_COLORS
from falling_blocks.visualization.palette import color_for_value


# Discrete action index -> game command; the last index does nothing.
ACTION_TABLE: Tuple[Optional[Action], ...] = (
    Action.MOVE_LEFT,
    Action.MOVE_RIGHT,
    Action.ROTATE_LEFT,
    Action.ROTATE_RIGHT,
    Action.SOFT_DROP,
    None,
)
NOOP = len(ACTION_TABLE) - 1


def _overlay_current(game: FallingBlockGame) -> np.ndarray:
    grid = game.grid.clone_state()
    current = game.current_piece
    if current is not None:
        for pos in current.points():
            if game.grid.is_inside(pos):
                grid[pos.y, pos.x] = current.piece.color
    return grid


class FallingBlockEnv(gym.Env):
    """
    Agent-facing wrapper around FallingBlockGame.

    Each step applies one command (or nothing) and then advances the game by
    `ticks_per_step` ticks. The reward is the score gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 24}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        ticks_per_step: int = 1,
        max_episode_steps: int = 20_000,
    ) -> None:
        super().__init__()
        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"unsupported render_mode: {render_mode}")
        self.game = FallingBlockGame(config)
        self.render_mode = render_mode
        self.ticks_per_step = int(ticks_per_step)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.config.height, self.game.config.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=EMPTY, high=NUM_COLORS - 1, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(NUM_COLORS),
                "score": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int64),
            }
        )
        self.action_space = spaces.Discrete(len(ACTION_TABLE))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": _overlay_current(self.game),
            "next_piece": int(self.game.next_piece.color),
            "score": np.array([self.game.score], dtype=np.int64),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "ticks": self.game.tick_count,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        # Spawn the first piece so the agent has something to move.
        self.game.tick()
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        command = ACTION_TABLE[int(action)]
        score_before = self.game.score
        accepted = False
        if command is not None:
            accepted = self.game.apply(command)
        for _ in range(self.ticks_per_step):
            self.game.tick()
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        info = self._get_info()
        info["accepted"] = accepted
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = _overlay_current(self.game)
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
        return img

    def close(self) -> None:
        pass
