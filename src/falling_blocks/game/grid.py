from __future__ import annotations

from typing import Optional

import numpy as np

from .pieces import NUM_COLORS, Position


EMPTY = -1


class GameGrid:
    """Fixed-size board of locked cells.

    Cells hold EMPTY or the color index of the piece that locked there.
    Row 0 is the top of the visible board; negative rows lie above it and
    are never stored.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.full((self.height, self.width), EMPTY, dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def cell(self, pos: Position) -> Optional[int]:
        """Color at pos, or None when empty or outside the board."""
        if not self.is_inside(pos):
            return None
        value = int(self.grid[pos.y, pos.x])
        return None if value == EMPTY else value

    def is_free_or_above(self, pos: Position) -> bool:
        if self.is_inside(pos):
            return self.grid[pos.y, pos.x] == EMPTY
        # Pieces spawn partly above the board and may live there until locked.
        return pos.y < 0 and 0 <= pos.x < self.width

    def set(self, pos: Position, color: int) -> bool:
        if not self.is_inside(pos):
            return False
        if not 0 <= color < NUM_COLORS:
            raise ValueError(f"color index out of range: {color}")
        self.grid[pos.y, pos.x] = color
        return True

    def check_for_line(self, y: int) -> bool:
        """Collapse row y if it is full; rows below y are left alone."""
        if not 0 <= y < self.height:
            return False
        done = bool(np.all(self.grid[y] != EMPTY))
        if done:
            self.grid[1 : y + 1] = self.grid[0:y].copy()
            self.grid[0].fill(EMPTY)
        return done

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid != EMPTY))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
