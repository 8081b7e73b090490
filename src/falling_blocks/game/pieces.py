from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, NamedTuple, Tuple


class Position(NamedTuple):
    x: int
    y: int


class TetrominoType(IntEnum):
    L = 0
    I = 1
    T = 2
    S = 3
    Z = 4
    O = 5
    J = 6


Offsets = Tuple[Position, Position, Position, Position]


# Offsets are relative to the pivot at (0, 0); y grows downward.
BASE_OFFSETS: Dict[TetrominoType, Offsets] = {
    TetrominoType.L: (Position(-1, -1), Position(0, -1), Position(1, -1), Position(-1, 0)),
    TetrominoType.I: (Position(-1, 0), Position(0, 0), Position(1, 0), Position(2, 0)),
    TetrominoType.T: (Position(-1, -1), Position(0, -1), Position(1, -1), Position(0, 0)),
    TetrominoType.S: (Position(0, -1), Position(1, -1), Position(-1, 0), Position(0, 0)),
    TetrominoType.Z: (Position(-1, -1), Position(0, -1), Position(0, 0), Position(1, 0)),
    TetrominoType.O: (Position(-1, -1), Position(0, -1), Position(-1, 0), Position(0, 0)),
    TetrominoType.J: (Position(-1, -1), Position(0, -1), Position(1, -1), Position(1, 0)),
}

NUM_COLORS = len(TetrominoType)


@dataclass(frozen=True)
class Piece:
    """A tetromino: a color index and four offsets around the pivot.

    Rotations are plain pivot transforms with no wall kicks, so a rotation
    that collides is simply rejected by the game loop.
    """

    color: int
    offsets: Offsets

    @classmethod
    def from_type(cls, kind: TetrominoType) -> "Piece":
        kind = TetrominoType(kind)
        return cls(color=int(kind), offsets=BASE_OFFSETS[kind])

    @classmethod
    def get_random(cls, rng: random.Random) -> "Piece":
        return cls.from_type(TetrominoType(rng.randrange(NUM_COLORS)))

    @property
    def kind(self) -> TetrominoType:
        return TetrominoType(self.color)

    def rotate_left(self) -> "Piece":
        offsets = tuple(Position(p.y, -p.x) for p in self.offsets)
        return Piece(self.color, offsets)  # type: ignore[arg-type]

    def rotate_right(self) -> "Piece":
        offsets = tuple(Position(-p.y, p.x) for p in self.offsets)
        return Piece(self.color, offsets)  # type: ignore[arg-type]

    def points(self, origin: Position) -> Iterator[Position]:
        for p in self.offsets:
            yield Position(origin.x + p.x, origin.y + p.y)
