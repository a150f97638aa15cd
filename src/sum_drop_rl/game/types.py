from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Callable, Hashable, Optional


BlockId = Hashable
IdSource = Callable[[], BlockId]


class GameMode(Enum):
    CLASSIC = "CLASSIC"
    TIME = "TIME"


class Difficulty(IntEnum):
    """Row cadence in seconds per injected row."""

    SLOW = 12
    MEDIUM = 8
    FAST = 5

    @property
    def seconds(self) -> int:
        return int(self)


class Evaluation(Enum):
    UNDER = "under"
    EXACT = "exact"
    OVER = "over"


@dataclass(frozen=True)
class Block:
    id: BlockId
    value: int
    row: int
    col: int

    def moved(self, row: int) -> "Block":
        return replace(self, row=row)


@dataclass
class GameConfig:
    rows: int = 10
    cols: int = 6
    initial_rows: int = 4
    min_value: int = 1
    max_value: int = 9
    match_delay_ms: int = 250
    overshoot_delay_ms: int = 150
    match_feedback_ms: int = 500
    tick_interval_ms: int = 1000
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rows < 2:
            raise ValueError(f"rows must be at least 2, got {self.rows}")
        if self.cols < 1:
            raise ValueError(f"cols must be at least 1, got {self.cols}")
        if not 0 <= self.initial_rows < self.rows:
            raise ValueError(f"initial_rows must be in [0, {self.rows - 1}], got {self.initial_rows}")
        if self.min_value < 1 or self.min_value > self.max_value:
            raise ValueError(f"invalid value range [{self.min_value}, {self.max_value}]")
        for name in ("match_delay_ms", "overshoot_delay_ms", "match_feedback_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive")


class SequentialIdSource:
    """Monotonic block ids: 0, 1, 2, ..."""

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)

    def __call__(self) -> int:
        return next(self._counter)
