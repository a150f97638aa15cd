from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .grid import GameGrid
from .types import BlockId, Evaluation


Selection = Tuple[BlockId, ...]


def toggle(selection: Sequence[BlockId], block_id: BlockId) -> Selection:
    """Flip membership of `block_id`, keeping insertion order of the rest."""
    if block_id in selection:
        return tuple(i for i in selection if i != block_id)
    return tuple(selection) + (block_id,)


def prune(grid: GameGrid, selection: Sequence[BlockId]) -> Selection:
    return tuple(i for i in selection if i in grid)


def selection_sum(grid: GameGrid, selection: Sequence[BlockId]) -> int:
    total = 0
    for block_id in selection:
        block = grid.block(block_id)
        if block is not None:
            total += block.value
    return total


def evaluate(grid: GameGrid, selection: Sequence[BlockId], target: int) -> Evaluation:
    total = selection_sum(grid, selection)
    if total == target:
        return Evaluation.EXACT
    if total > target:
        return Evaluation.OVER
    return Evaluation.UNDER


def centroid(grid: GameGrid, selection: Sequence[BlockId]) -> Optional[Tuple[float, float]]:
    """Average (col, row) of the selected blocks, or None if none are present."""
    blocks = [b for b in (grid.block(i) for i in selection) if b is not None]
    if not blocks:
        return None
    avg_col = sum(b.col for b in blocks) / len(blocks)
    avg_row = sum(b.row for b in blocks) / len(blocks)
    return avg_col, avg_row
