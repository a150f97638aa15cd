from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_block: int = 10
    target_min: int = 10
    target_max: int = 24

    def __post_init__(self) -> None:
        if self.target_min < 1 or self.target_min > self.target_max:
            raise ValueError(f"invalid target range [{self.target_min}, {self.target_max}]")

    def score_for_match(self, size: int, combo: int) -> int:
        if size <= 0 or combo <= 0:
            return 0
        return size * self.points_per_block * combo

    def new_target(self, rng: random.Random) -> int:
        return rng.randint(self.target_min, self.target_max)
