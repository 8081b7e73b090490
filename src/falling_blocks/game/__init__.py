"""Game module for Falling Blocks.

Exports the core simulation and supporting classes:
- GameGrid: Board of locked cells and row collapse
- Piece: Tetromino offsets with naive pivot rotation
- ScoringRules: Line clear scoring table
- FallingBlockGame: Tick-driven game loop and player commands
- FixedStepClock: Fixed-rate tick source for the platform shell
"""

from .grid import EMPTY, GameGrid
from .pieces import NUM_COLORS, Piece, Position, TetrominoType
from .rules import LineClearInvariantError, ScoringRules
from .core import Action, FallingBlockGame, GameConfig, GameSnapshot, MovingPiece
from .clock import FixedStepClock

__all__ = [
    "EMPTY",
    "GameGrid",
    "NUM_COLORS",
    "Piece",
    "Position",
    "TetrominoType",
    "LineClearInvariantError",
    "ScoringRules",
    "Action",
    "FallingBlockGame",
    "GameConfig",
    "GameSnapshot",
    "MovingPiece",
    "FixedStepClock",
]
