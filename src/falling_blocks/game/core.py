from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Iterable, Iterator, Optional

import numpy as np

from .grid import GameGrid
from .pieces import BASE_OFFSETS, Piece, Position
from .rules import ScoringRules


logger = logging.getLogger(__name__)


def spawn_fits(width: int) -> bool:
    """True when every base shape spawned at column width // 2 lies on the board."""
    return all(0 <= width // 2 + p.x < width for offsets in BASE_OFFSETS.values() for p in offsets)


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_LEFT = 2
    ROTATE_RIGHT = 3
    SOFT_DROP = 4
    REQUEST_QUIT = 5


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    frames_per_move: int = 18
    spawn_y: int = -2
    ticks_per_second: int = 24
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not spawn_fits(self.width):
            raise ValueError(f"width {self.width} is too narrow to spawn every piece")
        if self.height < 1:
            raise ValueError("height must be positive")
        if self.frames_per_move < 2:
            raise ValueError("frames_per_move must be at least 2")
        if self.ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be positive")


@dataclass(frozen=True)
class MovingPiece:
    pos: Position
    piece: Piece

    @classmethod
    def spawn(cls, piece: Piece, width: int, spawn_y: int = -2) -> "MovingPiece":
        return cls(Position(width // 2, spawn_y), piece)

    def points(self) -> Iterator[Position]:
        return self.piece.points(self.pos)

    def moved(self, dx: int, dy: int) -> "MovingPiece":
        return replace(self, pos=Position(self.pos.x + dx, self.pos.y + dy))

    def with_piece(self, piece: Piece) -> "MovingPiece":
        return replace(self, piece=piece)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view handed to the renderer once per frame."""

    grid: np.ndarray
    current: Optional[MovingPiece]
    next_piece: Piece
    score: int
    game_over: bool
    lines_cleared: int


class FallingBlockGame:
    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.tick_count = 0
        self.move_frames = 0
        self.game_over = False
        self.current_piece: Optional[MovingPiece] = None
        self.next_piece = Piece.get_random(self.rng)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.tick_count = 0
        self.move_frames = 0
        self.game_over = False
        self.current_piece = None
        self.next_piece = Piece.get_random(self.rng)

    def _fits(self, candidate: MovingPiece) -> bool:
        return all(self.grid.is_free_or_above(p) for p in candidate.points())

    def _spawn_piece(self) -> None:
        piece = self.next_piece
        self.next_piece = Piece.get_random(self.rng)
        self.current_piece = MovingPiece.spawn(piece, self.grid.width, self.config.spawn_y)
        logger.debug("spawned %s, next %s", piece.kind.name, self.next_piece.kind.name)

    def _lock_piece(self, moving: MovingPiece) -> int:
        rows = set()
        for pos in moving.points():
            rows.add(pos.y)
            if not self.grid.set(pos, moving.piece.color):
                self.game_over = True
                logger.info("game over: locked above the board, score %d", self.score)
                return 0
        self.current_piece = None
        self.pieces_locked += 1
        # Top to bottom: a collapse only moves rows above the cleared one.
        cleared = sum(1 for y in sorted(rows) if self.grid.check_for_line(y))
        gained = self.rules.score_for_lines(cleared)
        self.score += gained
        self.lines_cleared_total += cleared
        if cleared:
            logger.info("cleared %d row(s) for %d points", cleared, gained)
        else:
            logger.debug("locked %s at %s", moving.piece.kind.name, tuple(moving.pos))
        return cleared

    def tick(self) -> None:
        """Advance the simulation by one logical update."""
        if self.game_over:
            return
        self.tick_count += 1
        if self.current_piece is None:
            self._spawn_piece()
            return
        self.move_frames += 1
        if self.move_frames < self.config.frames_per_move:
            return
        self.move_frames -= self.config.frames_per_move
        candidate = self.current_piece.moved(0, 1)
        if self._fits(candidate):
            self.current_piece = candidate
        else:
            self._lock_piece(self.current_piece)

    def apply(self, action: Action) -> bool:
        """Apply a player command; returns False when it was ignored or blocked."""
        action = Action(action)
        if action == Action.REQUEST_QUIT or self.game_over or self.current_piece is None:
            return False
        if action == Action.SOFT_DROP:
            self.move_frames += self.config.frames_per_move // 2
            return True
        if action == Action.MOVE_LEFT:
            candidate = self.current_piece.moved(-1, 0)
        elif action == Action.MOVE_RIGHT:
            candidate = self.current_piece.moved(1, 0)
        elif action == Action.ROTATE_LEFT:
            candidate = self.current_piece.with_piece(self.current_piece.piece.rotate_left())
        else:
            candidate = self.current_piece.with_piece(self.current_piece.piece.rotate_right())
        if not self._fits(candidate):
            return False
        self.current_piece = candidate
        return True

    def step_frame(self, actions: Iterable[Action], ticks: int) -> None:
        """Run one display frame: queued input first, then the due ticks."""
        for action in actions:
            self.apply(action)
        for _ in range(ticks):
            self.tick()

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            grid=self.grid.clone_state(),
            current=self.current_piece,
            next_piece=self.next_piece,
            score=self.score,
            game_over=self.game_over,
            lines_cleared=self.lines_cleared_total,
        )

    def status_text(self) -> str:
        text = f"Tetris - Score: {self.score}"
        if self.game_over:
            text += " - Game Over"
        return text
