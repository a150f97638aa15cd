from __future__ import annotations

import argparse
import logging

import gymnasium as gym
import numpy as np

import sum_drop_rl.env  # noqa: F401  (registers the environments)


logger = logging.getLogger(__name__)


def run_random(steps: int = 200, env_id: str = "SumDrop-6x10-v0", seed: int | None = None) -> float:
    env = gym.make(env_id)
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer occupied cells if any
        valid = np.flatnonzero(info.get("action_mask", []))
        if valid.size > 0:
            action = int(rng.choice(valid))
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("episode %d finished with score %d", episodes, info["score"])
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f} over {episodes} finished episodes")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--env", choices=["classic", "time"], default="classic")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="INFO")
    args = p.parse_args()
    logging.basicConfig(level=args.log_level.upper())
    env_id = "SumDropTime-6x10-v0" if args.env == "time" else "SumDrop-6x10-v0"
    run_random(args.steps, env_id, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
