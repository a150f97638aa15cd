import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from sum_drop_rl.game import GameMode
from sum_drop_rl.rl.random_agent import run_random
from sum_drop_rl.visualization.renderer import Renderer
from tests.helpers import make_game


def test_renderer_cell_lookup():
    r = Renderer(cell_size=40, margin=20)
    assert r.window_size(10, 6) == (20 * 3 + 6 * 40 + r.panel_width, 20 * 2 + 10 * 40)
    assert r.cell_at((21, 20 + 9 * 40 + 1)) == (9, 0)
    assert r.cell_at((20 + 5 * 40 + 39, 25)) == (0, 5)


def test_renderer_draws_headless():
    pygame.init()
    try:
        game = make_game()
        game.start(GameMode.TIME)
        r = Renderer()
        screen = pygame.display.set_mode(r.window_size(game.config.rows, game.config.cols))
        r.draw_menu(screen, GameMode.TIME, "FAST")
        r.draw(screen, game)
        block = game.grid.block_at(9, 0)
        game.toggle(block.id)
        r.draw(screen, game)
    finally:
        pygame.quit()


def test_random_agent_runs(capsys):
    total = run_random(steps=50, seed=0)
    assert isinstance(total, float)
    assert "Random agent total reward" in capsys.readouterr().out


def test_training_envs_are_seeded_per_index():
    from sum_drop_rl.rl.train_ppo import make_env

    a = make_env("SumDrop-6x10-v0", seed=5)
    b = make_env("SumDrop-6x10-v0", seed=5)
    c = make_env("SumDrop-6x10-v0", seed=6)
    grid_a = a.unwrapped.game.grid.to_array()
    assert (grid_a == b.unwrapped.game.grid.to_array()).all()
    assert a.unwrapped.game.target == b.unwrapped.game.target
    assert not ((grid_a == c.unwrapped.game.grid.to_array()).all()
                and a.unwrapped.game.target == c.unwrapped.game.target)
    for env in (a, b, c):
        env.close()
