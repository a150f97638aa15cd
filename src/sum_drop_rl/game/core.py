from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .grid import GameGrid
from .rules import ScoringRules
from .scheduler import Scheduler
from .selection import Selection, centroid, evaluate, prune, selection_sum, toggle
from .types import BlockId, Difficulty, Evaluation, GameConfig, GameMode, IdSource, SequentialIdSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameState:
    """One immutable snapshot of the whole game; commands replace it whole."""

    grid: GameGrid
    score: int = 0
    target: int = 0
    selection: Selection = ()
    is_game_over: bool = False
    mode: Optional[GameMode] = None
    time_left: int = Difficulty.MEDIUM.seconds
    combo: int = 0
    difficulty: Difficulty = Difficulty.MEDIUM
    processing: bool = False
    last_match_pos: Optional[Tuple[float, float]] = None
    # Bookkeeping for get_game_stats()
    matches: int = 0
    blocks_cleared: int = 0
    rows_injected: int = 0
    best_combo: int = 0


class SumDropGame:
    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 rng: Optional[random.Random] = None, id_source: Optional[IdSource] = None,
                 scheduler: Optional[Scheduler] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.id_source = id_source or SequentialIdSource()
        self.scheduler = scheduler or Scheduler()
        self._epoch = 0
        self._match_seq = 0
        self._overshoot_seq = 0
        self._tick_elapsed = 0.0
        self.state = self._menu_state()

    def _menu_state(self) -> GameState:
        return GameState(grid=GameGrid(self.config.rows, self.config.cols))

    def _new_value(self) -> int:
        return self.rng.randint(self.config.min_value, self.config.max_value)

    # ---------- Queries ----------
    @property
    def grid(self) -> GameGrid:
        return self.state.grid

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def target(self) -> int:
        return self.state.target

    @property
    def selection(self) -> Selection:
        return self.state.selection

    @property
    def is_game_over(self) -> bool:
        return self.state.is_game_over

    @property
    def mode(self) -> Optional[GameMode]:
        return self.state.mode

    @property
    def time_left(self) -> int:
        return self.state.time_left

    @property
    def combo(self) -> int:
        return self.state.combo

    @property
    def difficulty(self) -> Difficulty:
        return self.state.difficulty

    @property
    def processing(self) -> bool:
        return self.state.processing

    @property
    def last_match_pos(self) -> Optional[Tuple[float, float]]:
        return self.state.last_match_pos

    @property
    def current_sum(self) -> int:
        return selection_sum(self.state.grid, self.state.selection)

    @property
    def is_active(self) -> bool:
        return self.state.mode is not None and not self.state.is_game_over

    def is_danger(self) -> bool:
        return self.state.grid.is_danger()

    # ---------- Lifecycle ----------
    def start(self, mode: GameMode, difficulty: Difficulty = Difficulty.MEDIUM) -> GameState:
        self._epoch += 1
        self._tick_elapsed = 0.0
        self.scheduler.clear()
        cfg = self.config
        grid = GameGrid.initialize(cfg.rows, cfg.cols, cfg.initial_rows, self._new_value, self.id_source)
        self.state = GameState(
            grid=grid,
            target=self.rules.new_target(self.rng),
            mode=mode,
            difficulty=difficulty,
            time_left=difficulty.seconds,
        )
        logger.debug("started %s game at %s difficulty, target=%d", mode.name, difficulty.name, self.state.target)
        return self.state

    def reset(self) -> None:
        """Back to the menu; everything from the previous game is discarded."""
        self._epoch += 1
        self._tick_elapsed = 0.0
        self.scheduler.clear()
        self.state = self._menu_state()

    # ---------- Player intents ----------
    def toggle(self, block_id: BlockId) -> Optional[Evaluation]:
        """Flip `block_id` in the selection and classify the new selection.

        Returns None when the intent is ignored (no active game, a match is
        resolving, or the id is not on the board).
        """
        state = self.state
        if not self.is_active or state.processing or block_id not in state.grid:
            return None
        selection = toggle(state.selection, block_id)
        result = evaluate(state.grid, selection, state.target)
        # Any accepted toggle supersedes a pending overshoot clear
        self._overshoot_seq += 1
        if result is Evaluation.EXACT:
            self.state = replace(state, selection=selection, processing=True,
                                 last_match_pos=centroid(state.grid, selection))
            self._match_seq += 1
            match_seq = self._match_seq

            def resolve_if_current() -> None:
                if self._match_seq == match_seq:
                    self.resolve_match()

            self._schedule(self.config.match_delay_ms, resolve_if_current)
        else:
            self.state = replace(state, selection=selection)
            if result is Evaluation.OVER:
                overshoot_seq = self._overshoot_seq

                def clear_if_current() -> None:
                    if self._overshoot_seq == overshoot_seq:
                        self.clear_overshoot()

                self._schedule(self.config.overshoot_delay_ms, clear_if_current)
        return result

    def _schedule(self, delay_ms: float, callback) -> None:
        epoch = self._epoch

        def run() -> None:
            if epoch == self._epoch:
                callback()

        self.scheduler.call_later(delay_ms, run)

    def clear_overshoot(self) -> bool:
        state = self.state
        if not self.is_active or state.processing:
            return False
        if evaluate(state.grid, state.selection, state.target) is not Evaluation.OVER:
            return False
        self.state = replace(state, selection=(), combo=0)
        logger.debug("overshoot: selection cleared, combo reset")
        return True

    # ---------- Progression ----------
    def _inject(self, state: GameState) -> GameState:
        result = state.grid.inject_row(self._new_value, self.id_source)
        if result.game_over:
            logger.debug("row injection refused: row 0 occupied, game over (score=%d)", state.score)
            return replace(state, is_game_over=True, processing=False)
        return replace(state, grid=result.grid, combo=0, rows_injected=state.rows_injected + 1)

    def resolve_match(self) -> bool:
        """Apply a pending EXACT match; no-op unless one is being processed."""
        state = self.state
        if not self.is_active or not state.processing:
            return False
        # A direct call consumes the match; its scheduled completion goes stale
        self._match_seq += 1
        selection = prune(state.grid, state.selection)
        combo = state.combo + 1
        gained = self.rules.score_for_match(len(selection), combo)
        state = replace(
            state,
            combo=combo,
            score=state.score + gained,
            grid=state.grid.remove_and_compact(selection),
            matches=state.matches + 1,
            blocks_cleared=state.blocks_cleared + len(selection),
            best_combo=max(state.best_combo, combo),
        )
        logger.debug("match of %d blocks, combo=%d, +%d points", len(selection), combo, gained)

        if state.mode is GameMode.CLASSIC:
            state = self._inject(state)

        if state.is_game_over:
            self.state = replace(state, selection=(), processing=False)
        else:
            state = replace(state, target=self.rules.new_target(self.rng), selection=(), processing=False)
            if state.mode is GameMode.TIME:
                state = replace(state, time_left=state.difficulty.seconds)
            self.state = state

        matches = state.matches

        def clear_feedback() -> None:
            if self.state.matches == matches:
                self.state = replace(self.state, last_match_pos=None)

        self._schedule(self.config.match_feedback_ms, clear_feedback)
        return True

    def tick(self) -> bool:
        """Advance the TIME-mode countdown by one step.

        Returns True when the tick injected a row (or tried to and ended the
        game).
        """
        state = self.state
        if state.mode is not GameMode.TIME or state.is_game_over or state.processing:
            return False
        if state.time_left > 1:
            self.state = replace(state, time_left=state.time_left - 1)
            return False
        state = self._inject(state)
        if not state.is_game_over:
            state = replace(state, time_left=state.difficulty.seconds)
        self.state = state
        return True

    def update(self, dt_ms: float) -> None:
        """Host hook: advance pending delays and drive the TIME-mode countdown."""
        self.scheduler.advance(dt_ms)
        if self.state.mode is not GameMode.TIME or not self.is_active or self.state.processing:
            self._tick_elapsed = 0.0
            return
        self._tick_elapsed += dt_ms
        interval = self.config.tick_interval_ms
        while self._tick_elapsed >= interval and self.is_active:
            self._tick_elapsed -= interval
            self.tick()

    def settle(self) -> None:
        """Run every pending delay immediately, for hosts without a clock."""
        self.scheduler.flush()

    # ---------- Snapshots ----------
    def get_state(self) -> Dict[str, Any]:
        state = self.state
        return {
            "grid": state.grid.to_array(),
            "score": state.score,
            "target": state.target,
            "selection": list(state.selection),
            "current_sum": self.current_sum,
            "is_game_over": state.is_game_over,
            "mode": state.mode,
            "time_left": state.time_left,
            "combo": state.combo,
            "difficulty": state.difficulty,
            "processing": state.processing,
            "last_match_pos": state.last_match_pos,
            "danger": state.grid.is_danger(),
        }

    def get_game_stats(self) -> Dict[str, Any]:
        state = self.state
        return {
            "final_score": state.score,
            "matches": state.matches,
            "blocks_cleared": state.blocks_cleared,
            "rows_injected": state.rows_injected,
            "best_combo": state.best_combo,
            "avg_blocks_per_match": state.blocks_cleared / max(1, state.matches),
        }
