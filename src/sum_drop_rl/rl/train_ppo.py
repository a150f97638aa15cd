from __future__ import annotations

import argparse
import logging
import os

import gymnasium as gym

# Ensure envs are registered
import sum_drop_rl.env  # noqa: F401
from sum_drop_rl.env.wrappers import ResampleInvalidActionWrapper


logger = logging.getLogger(__name__)


def make_env(env_id: str, seed: int | None = None, resample: bool = True) -> gym.Env:
    env = gym.make(env_id)
    # Resample toggles on empty cells for vanilla PPO
    if resample:
        env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="ppo")
    p.add_argument("--env", choices=["classic", "time"], default="classic",
                   help="Which mode to train: classic (row per match) or time (row per countdown)")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_sumdrop.zip")
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=0, help="Base seed; subprocess env i is seeded with seed + i")
    p.add_argument("--log-level", default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper())

    env_id = "SumDropTime-6x10-v0" if args.env == "time" else "SumDrop-6x10-v0"

    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    if args.algo == "maskable":
        # sb3-contrib MaskablePPO
        from sb3_contrib import MaskablePPO
        from sb3_contrib.common.wrappers import ActionMasker

        def mask_fn(env):
            return env.unwrapped.get_action_mask()

        def make_env_idx(i: int):
            def thunk():
                return ActionMasker(make_env(env_id, seed=args.seed + i, resample=False), mask_fn)
            return thunk

        vec_env = VecMonitor(SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)]))
        model = MaskablePPO(policy="MultiInputPolicy", env=vec_env, verbose=1, tensorboard_log=args.logdir)
    else:
        # Vanilla PPO with resampling wrapper
        from stable_baselines3 import PPO

        def make_env_idx(i: int):
            def thunk():
                return make_env(env_id, seed=args.seed + i)
            return thunk

        vec_env = VecMonitor(SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)]))
        model = PPO(policy="MultiInputPolicy", env=vec_env, verbose=1, tensorboard_log=args.logdir)

    logger.info("training %s on %s for %d timesteps", args.algo, env_id, args.timesteps)
    os.makedirs(os.path.dirname(args.save_path) or ".", exist_ok=True)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)
    print(f"Saved model to {args.save_path}")


if __name__ == "__main__":  # pragma: no cover
    main()
