from __future__ import annotations

from typing import Optional, Tuple

import pygame

from sum_drop_rl.game import GameMode, SumDropGame


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (255, 77, 77),
        2: (255, 215, 0),
        3: (255, 140, 0),
        4: (184, 134, 11),
        5: (255, 69, 0),
        6: (218, 165, 32),
        7: (178, 34, 34),
        8: (255, 218, 185),
        9: (205, 133, 63),
    }
    return palette.get(v, (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 48, margin: int = 20, panel_width: int = 220) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, rows: int, cols: int) -> Tuple[int, int]:
        width = self.margin * 3 + cols * self.cell_size + self.panel_width
        height = self.margin * 2 + rows * self.cell_size
        return width, height

    def cell_at(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        """Screen position -> (row, col); may be out of the board."""
        x, y = pos
        return (y - self.margin) // self.cell_size, (x - self.margin) // self.cell_size

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None or self._big_font is None:
            self._font = pygame.font.SysFont(None, 26)
            self._big_font = pygame.font.SysFont(None, 40)
        return self._font, self._big_font

    def _draw_board(self, screen: pygame.Surface, game: SumDropGame) -> None:
        _, big = self._fonts()
        cfg = game.config
        selected = set(game.selection)
        board = pygame.Rect(self.margin, self.margin, cfg.cols * self.cell_size, cfg.rows * self.cell_size)
        pygame.draw.rect(screen, (30, 30, 36), board)
        if game.is_danger():
            danger = pygame.Rect(self.margin, self.margin, cfg.cols * self.cell_size, self.cell_size)
            pygame.draw.rect(screen, (90, 20, 20), danger)
        for block in game.grid:
            rect = pygame.Rect(
                self.margin + block.col * self.cell_size,
                self.margin + block.row * self.cell_size,
                self.cell_size - 2,
                self.cell_size - 2,
            )
            pygame.draw.rect(screen, _color_for_value(block.value), rect)
            if block.id in selected:
                pygame.draw.rect(screen, (255, 255, 255), rect, 3)
            label = big.render(str(block.value), True, (15, 15, 20))
            screen.blit(label, label.get_rect(center=rect.center))
        if game.last_match_pos is not None:
            col, row = game.last_match_pos
            center = (
                int(self.margin + (col + 0.5) * self.cell_size),
                int(self.margin + (row + 0.5) * self.cell_size),
            )
            pygame.draw.circle(screen, (255, 255, 255), center, self.cell_size // 3, 2)

    def _draw_panel(self, screen: pygame.Surface, game: SumDropGame) -> None:
        font, big = self._fonts()
        x = self.margin * 2 + game.config.cols * self.cell_size
        y = self.margin
        target = big.render(f"Target {game.target}", True, (255, 215, 0))
        screen.blit(target, (x, y))
        lines = [
            f"Sum: {game.current_sum}",
            f"Score: {game.score}",
            f"Combo: x{game.combo}",
            f"Mode: {game.mode.name if game.mode else '-'}",
            f"Speed: {game.difficulty.name}",
        ]
        if game.mode is GameMode.TIME:
            lines.append(f"Next row in {game.time_left}s")
        lines += ["", "Click blocks to select", "R: back to menu", "ESC: quit"]
        for i, txt in enumerate(lines):
            img = font.render(txt, True, (230, 230, 230))
            screen.blit(img, (x, y + 50 + i * 24))

    def draw(self, screen: pygame.Surface, game: SumDropGame) -> None:
        screen.fill((10, 10, 14))
        self._draw_board(screen, game)
        self._draw_panel(screen, game)
        if game.is_game_over:
            _, big = self._fonts()
            over = big.render("Game Over - R for menu", True, (255, 100, 100))
            screen.blit(over, over.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2)))
        pygame.display.flip()

    def draw_menu(self, screen: pygame.Surface, mode: GameMode, difficulty_name: str) -> None:
        font, big = self._fonts()
        screen.fill((10, 10, 14))
        lines = [
            ("Sum Drop", big, (255, 215, 0)),
            (f"Mode: {mode.name}  (C classic / T time)", font, (230, 230, 230)),
            (f"Speed: {difficulty_name}  (1 slow / 2 medium / 3 fast)", font, (230, 230, 230)),
            ("Enter: start   ESC: quit", font, (230, 230, 230)),
        ]
        for i, (txt, f, color) in enumerate(lines):
            img = f.render(txt, True, color)
            screen.blit(img, img.get_rect(center=(screen.get_width() // 2, 80 + i * 50)))
        pygame.display.flip()
