"""Game module for Sum Drop RL.

Exports the falling-block sum-matching engine and its supporting pieces:
- GameGrid: immutable board with row injection and column gravity
- toggle / evaluate: selection handling and the UNDER/EXACT/OVER decision
- ScoringRules: combo-scaled scoring and target generation
- Scheduler: deterministic clock for the engine's short delays
- SumDropGame: lifecycle, progression and the public command surface
"""

from .types import Block, Difficulty, Evaluation, GameConfig, GameMode, SequentialIdSource
from .grid import GameGrid, InjectionResult
from .selection import centroid, evaluate, prune, selection_sum, toggle
from .rules import ScoringRules
from .scheduler import Scheduler
from .core import GameState, SumDropGame

__all__ = [
    "Block",
    "Difficulty",
    "Evaluation",
    "GameConfig",
    "GameMode",
    "SequentialIdSource",
    "GameGrid",
    "InjectionResult",
    "centroid",
    "evaluate",
    "prune",
    "selection_sum",
    "toggle",
    "ScoringRules",
    "Scheduler",
    "GameState",
    "SumDropGame",
]
