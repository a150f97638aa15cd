from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from sum_drop_rl.game import Difficulty, GameConfig, GameMode, SumDropGame
from .renderer import Renderer


KEY_TO_DIFFICULTY: Dict[int, Difficulty] = {
    pygame.K_1: Difficulty.SLOW,
    pygame.K_2: Difficulty.MEDIUM,
    pygame.K_3: Difficulty.FAST,
}

KEY_TO_MODE: Dict[int, GameMode] = {
    pygame.K_c: GameMode.CLASSIC,
    pygame.K_t: GameMode.TIME,
}


def run(mode: GameMode = GameMode.CLASSIC, difficulty: Difficulty = Difficulty.MEDIUM,
        seed: Optional[int] = None) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = SumDropGame(GameConfig(random_seed=seed))
        renderer = Renderer()
        screen = pygame.display.set_mode(renderer.window_size(game.config.rows, game.config.cols))
        pygame.display.set_caption("Sum Drop - Human Play")

        running = True
        while running:
            dt_ms = clock.tick(60)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif game.mode is None:
                        # Menu
                        if event.key in KEY_TO_MODE:
                            mode = KEY_TO_MODE[event.key]
                        elif event.key in KEY_TO_DIFFICULTY:
                            difficulty = KEY_TO_DIFFICULTY[event.key]
                        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                            game.start(mode, difficulty)
                    elif event.key == pygame.K_r:
                        game.reset()
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and game.is_active:
                    row, col = renderer.cell_at(event.pos)
                    block = game.grid.block_at(row, col)
                    if block is not None:
                        game.toggle(block.id)

            game.update(dt_ms)

            if game.mode is None:
                renderer.draw_menu(screen, mode, difficulty.name)
            else:
                renderer.draw(screen, game)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--mode", choices=[m.name for m in GameMode], default=GameMode.CLASSIC.name)
    p.add_argument("--difficulty", choices=[d.name for d in Difficulty], default=Difficulty.MEDIUM.name)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(GameMode[args.mode], Difficulty[args.difficulty], args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
