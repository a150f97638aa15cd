from dataclasses import replace

from sum_drop_rl.game import Block, GameConfig, GameGrid, SumDropGame


def grid_from_rows(bottom_rows, rows=10):
    """Build a grid from strings listed top to bottom, anchored at the bottom.

    '.' is an empty cell, a digit is a block value. Block ids are 'r{row}c{col}'.
    """
    cols = len(bottom_rows[0])
    offset = rows - len(bottom_rows)
    blocks = []
    for i, line in enumerate(bottom_rows):
        row = offset + i
        for col, ch in enumerate(line):
            if ch != '.':
                blocks.append(Block(id=f"r{row}c{col}", value=int(ch), row=row, col=col))
    return GameGrid(rows, cols, blocks)


def make_game(seed=0, **config):
    return SumDropGame(GameConfig(random_seed=seed, **config))


def load(game, grid, target, **fields):
    """Swap a controlled board and target into a started game."""
    game.state = replace(game.state, grid=grid, target=target, **fields)
    return game
