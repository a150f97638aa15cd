from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from sum_drop_rl.game import Difficulty, Evaluation, GameConfig, GameMode, SumDropGame


def _compute_action_mask(game: SumDropGame) -> np.ndarray:
    cfg = game.config
    mask = np.zeros((cfg.rows * cfg.cols,), dtype=np.bool_)
    if game.is_active:
        for block in game.grid:
            mask[block.row * cfg.cols + block.col] = True
    return mask


class SumDropEnv(gym.Env):
    """Toggle-one-block-per-step environment over the sum-matching engine.

    Action ``row * cols + col`` toggles the block in that cell. Pending match
    and overshoot delays are settled inside ``step``; in TIME mode every step
    also counts as one countdown tick.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 mode: GameMode | str = GameMode.CLASSIC,
                 difficulty: Difficulty | int = Difficulty.MEDIUM,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 overshoot_penalty: float = -0.5,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = -10.0,
                 max_episode_steps: int = 5000) -> None:
        super().__init__()
        self.game = SumDropGame(config)
        self.render_mode = render_mode
        self.mode = GameMode(mode)
        self.difficulty = Difficulty(difficulty)
        self.max_episode_steps = int(max_episode_steps)

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.overshoot_penalty = float(overshoot_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "score": 0.01,      # per engine point
            "blocks": 0.0,      # per block removed
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        cfg = self.game.config
        rules = self.game.rules
        max_sum = cfg.rows * cfg.cols * cfg.max_value
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=cfg.max_value, shape=(cfg.rows, cfg.cols), dtype=np.int8),
                "selected": spaces.Box(low=0, high=1, shape=(cfg.rows, cfg.cols), dtype=np.int8),
                "target": spaces.Box(low=0, high=rules.target_max, shape=(1,), dtype=np.int32),
                "current_sum": spaces.Box(low=0, high=max_sum, shape=(1,), dtype=np.int32),
                "combo": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
                "time_left": spaces.Box(low=0, high=int(Difficulty.SLOW), shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(cfg.rows * cfg.cols)

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        cfg = self.game.config
        selected = np.zeros((cfg.rows, cfg.cols), dtype=np.int8)
        for block_id in self.game.selection:
            block = self.game.grid.block(block_id)
            if block is not None:
                selected[block.row, block.col] = 1
        return {
            "grid": self.game.grid.to_array(),
            "selected": selected,
            "target": np.array([self.game.target], dtype=np.int32),
            "current_sum": np.array([self.game.current_sum], dtype=np.int32),
            "combo": np.array([self.game.combo], dtype=np.int32),
            "time_left": np.array([self.game.time_left], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "combo": self.game.combo,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        options = options or {}
        mode = GameMode(options.get("mode", self.mode))
        difficulty = Difficulty(options.get("difficulty", self.difficulty))
        self.game.start(mode, difficulty)
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int | np.integer):
        cfg = self.game.config
        index = int(action)
        row, col = divmod(index, cfg.cols)

        score_before = self.game.score
        cleared_before = self.game.state.blocks_cleared

        evaluation: Optional[Evaluation] = None
        block = self.game.grid.block_at(row, col) if 0 <= index < cfg.rows * cfg.cols else None
        if block is not None:
            evaluation = self.game.toggle(block.id)
        self.game.settle()
        if self.game.mode is GameMode.TIME:
            self.game.tick()

        reward_components: Dict[str, float] = {}
        if evaluation is None:
            reward_components["invalid"] = self.invalid_action_penalty
        else:
            reward_components["score"] = self.reward_weights["score"] * float(self.game.score - score_before)
            reward_components["blocks"] = self.reward_weights["blocks"] * float(
                self.game.state.blocks_cleared - cleared_before)
            if evaluation is Evaluation.OVER:
                reward_components["overshoot"] = self.overshoot_penalty
        reward_components["step"] = self.step_penalty

        self._steps += 1
        terminated = bool(self.game.is_game_over)
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["evaluation"] = evaluation
        info["engine_score_delta"] = float(self.game.score - score_before)
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self._last_obs["grid"] if self._last_obs is not None else self.game.grid.to_array()
            selected = self._last_obs["selected"] if self._last_obs is not None else np.zeros_like(grid)
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    if selected[y, x]:
                        color = (240, 220, 90)
                    elif grid[y, x]:
                        shade = 90 + int(grid[y, x]) * 15
                        color = (shade, 110, 60)
                    else:
                        color = (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to visualization.human_play; noop
        return None

    def close(self) -> None:
        pass
