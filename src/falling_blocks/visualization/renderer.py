from __future__ import annotations

from typing import Iterable, Tuple

import pygame

from falling_blocks.game import GameSnapshot, Position
from .palette import Color, color_for_value as _color_for_value


class Renderer:
    def __init__(self, cell_size: int = 32, margin: int = 20, preview_cells: int = 5) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.preview_cells = preview_cells

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        board_w = width * self.cell_size
        board_h = height * self.cell_size
        side_w = self.preview_cells * self.cell_size
        return self.margin * 3 + board_w + side_w, self.margin * 2 + board_h

    def _cell_rect(self, x0: int, y0: int, pos: Position) -> pygame.Rect:
        return pygame.Rect(
            x0 + pos.x * self.cell_size,
            y0 + pos.y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_cells(self, screen: pygame.Surface, x0: int, y0: int, cells: Iterable[Position], color: Color) -> None:
        for pos in cells:
            pygame.draw.rect(screen, color, self._cell_rect(x0, y0, pos))

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        screen.fill((10, 10, 14))
        h, w = snapshot.grid.shape
        for y in range(h):
            for x in range(w):
                color = _color_for_value(int(snapshot.grid[y, x]))
                pygame.draw.rect(screen, color, self._cell_rect(self.margin, self.margin, Position(x, y)))

        if snapshot.current is not None:
            # Cells still above the board are not drawn.
            visible = [p for p in snapshot.current.points() if p.y >= 0]
            self._draw_cells(screen, self.margin, self.margin, visible,
                             _color_for_value(snapshot.current.piece.color))

        preview_x = self.margin * 2 + w * self.cell_size
        preview_origin = Position(self.preview_cells // 2 - 1, 2)
        self._draw_cells(screen, preview_x, self.margin,
                         snapshot.next_piece.points(preview_origin),
                         _color_for_value(snapshot.next_piece.color))
        pygame.display.flip()
