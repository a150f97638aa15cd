from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .types import Block, BlockId, IdSource


ValueSource = Callable[[], int]


@dataclass(frozen=True)
class InjectionResult:
    grid: "GameGrid"
    game_over: bool


class GameGrid:
    """Immutable board of numbered blocks.

    Row 0 is the top (danger) row and rows grow downward. Every operation
    returns a new grid; the receiver is never mutated, so a snapshot handed to
    a renderer stays valid while the engine moves on.
    """

    def __init__(self, rows: int, cols: int, blocks: Iterable[Block] = ()) -> None:
        self.rows = int(rows)
        self.cols = int(cols)
        self._blocks: Dict[BlockId, Block] = {b.id: b for b in blocks}

    @classmethod
    def initialize(cls, rows: int, cols: int, initial_rows: int,
                   new_value: ValueSource, new_id: IdSource) -> "GameGrid":
        """Fill the bottom `initial_rows` rows, one block per column per row."""
        blocks: List[Block] = []
        for r in range(initial_rows):
            for c in range(cols):
                blocks.append(Block(id=new_id(), value=new_value(), row=rows - 1 - r, col=c))
        return cls(rows, cols, blocks)

    # ---------- Queries ----------
    @property
    def blocks(self) -> Tuple[Block, ...]:
        return tuple(self._blocks.values())

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks.values())

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def block(self, block_id: BlockId) -> Optional[Block]:
        return self._blocks.get(block_id)

    def block_at(self, row: int, col: int) -> Optional[Block]:
        for b in self._blocks.values():
            if b.row == row and b.col == col:
                return b
        return None

    def column(self, col: int) -> List[Block]:
        """Blocks of one column ordered bottom to top."""
        return sorted((b for b in self._blocks.values() if b.col == col), key=lambda b: b.row, reverse=True)

    def is_danger(self) -> bool:
        return any(b.row == 0 for b in self._blocks.values())

    def is_compact(self) -> bool:
        for c in range(self.cols):
            rows = [b.row for b in self.column(c)]
            if rows != [self.rows - 1 - i for i in range(len(rows))]:
                return False
        return True

    def height_map(self) -> List[int]:
        return [len(self.column(c)) for c in range(self.cols)]

    def to_array(self) -> np.ndarray:
        state = np.zeros((self.rows, self.cols), dtype=np.int8)
        for b in self._blocks.values():
            state[b.row, b.col] = b.value
        return state

    # ---------- Transitions ----------
    def inject_row(self, new_value: ValueSource, new_id: IdSource) -> InjectionResult:
        """Shift every block up one row and append a fresh bottom row.

        Refused with ``game_over=True`` when row 0 is occupied; the grid is
        returned unchanged in that case.
        """
        if self.is_danger():
            return InjectionResult(grid=self, game_over=True)
        shifted = [b.moved(b.row - 1) for b in self._blocks.values()]
        new_row = [Block(id=new_id(), value=new_value(), row=self.rows - 1, col=c) for c in range(self.cols)]
        return InjectionResult(grid=GameGrid(self.rows, self.cols, shifted + new_row), game_over=False)

    def remove_and_compact(self, ids: Iterable[BlockId]) -> "GameGrid":
        """Remove `ids` and let each column settle to the bottom in order."""
        doomed = set(ids)
        settled: List[Block] = []
        for c in range(self.cols):
            survivors = [b for b in self.column(c) if b.id not in doomed]
            for index, b in enumerate(survivors):
                settled.append(b.moved(self.rows - 1 - index))
        return GameGrid(self.rows, self.cols, settled)

    def __repr__(self) -> str:
        return f"GameGrid(rows={self.rows}, cols={self.cols}, blocks={len(self._blocks)})"
