"""Gymnasium environments for Sum Drop RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Classic mode: a new row after every match
register(
    id="SumDrop-6x10-v0",
    entry_point="sum_drop_rl.env.sum_drop_env:SumDropEnv",
    kwargs={"mode": "CLASSIC"},
)

# Time mode: every step is one countdown tick
register(
    id="SumDropTime-6x10-v0",
    entry_point="sum_drop_rl.env.sum_drop_env:SumDropEnv",
    kwargs={"mode": "TIME"},
)

__all__ = ["SumDrop-6x10-v0", "SumDropTime-6x10-v0"]
