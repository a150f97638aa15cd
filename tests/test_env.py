from dataclasses import replace

import gymnasium as gym
import numpy as np

import sum_drop_rl.env  # noqa: F401
from sum_drop_rl.env.sum_drop_env import SumDropEnv
from sum_drop_rl.env.wrappers import ResampleInvalidActionWrapper
from sum_drop_rl.game import Evaluation, GameMode
from tests.helpers import grid_from_rows, load


def test_reset_observation_matches_space():
    env = SumDropEnv()
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs["grid"].shape == (10, 6)
    assert int(np.count_nonzero(obs["grid"])) == 24
    assert int(obs["selected"].sum()) == 0
    assert info["action_mask"].sum() == 24
    assert env.action_space.n == 60


def test_empty_cell_is_invalid_action():
    env = SumDropEnv()
    env.reset(seed=0)
    obs, reward, terminated, truncated, info = env.step(0)
    assert info["evaluation"] is None
    assert reward == env.invalid_action_penalty
    assert not terminated and not truncated


def test_single_block_toggle_selects_it():
    env = SumDropEnv()
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(9 * 6 + 2)
    assert info["evaluation"] is Evaluation.UNDER
    assert obs["selected"][9, 2] == 1
    assert obs["current_sum"][0] == obs["grid"][9, 2]
    assert reward == 0.0


def test_exact_match_rewards_score_delta():
    env = SumDropEnv()
    env.reset(seed=0)
    load(env.game, grid_from_rows(["55...."]), 10)
    env.step(9 * 6 + 0)
    obs, reward, terminated, truncated, info = env.step(9 * 6 + 1)
    assert info["evaluation"] is Evaluation.EXACT
    assert info["engine_score_delta"] == 20.0
    assert reward == 20 * env.reward_weights["score"]
    # classic mode: a fresh row arrives after the match
    assert int(np.count_nonzero(obs["grid"][9])) == 6


def test_game_over_terminates_episode():
    env = SumDropEnv(mode="TIME")
    env.reset(seed=0)
    assert env.game.mode is GameMode.TIME
    game = env.game
    game.state = replace(game.state, grid=grid_from_rows(["1....."] * 10), target=20, time_left=1)
    obs, reward, terminated, truncated, info = env.step(5)
    assert terminated
    assert reward == env.invalid_action_penalty + env.terminal_penalty


def test_registered_envs_and_resample_wrapper():
    env = ResampleInvalidActionWrapper(gym.make("SumDropTime-6x10-v0"))
    env.reset(seed=3)
    assert env.unwrapped.game.mode is GameMode.TIME
    obs, reward, terminated, truncated, info = env.step(0)
    assert info["evaluation"] is not None
    assert env.get_action_mask().shape == (60,)
    env.close()


def test_rgb_render():
    env = SumDropEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (120, 72, 3)
    assert img.dtype == np.uint8
