"""Game module for the tetromino engine.

Exports the core engine and supporting classes:
- Piece: Tetromino piece with in-place rotation
- TetrominoType: Enum of available piece types
- GameGrid: Settled cells, collision and line clearing
- Field: Spawning, movement, locking and game over
- TetrisEngine: Command/tick controller that notifies listeners
"""

from .pieces import Piece, TetrominoType, PIECE_COLORS
from .grid import GameGrid, EMPTY, cell_kind
from .events import (
    DropOutcome,
    DropResult,
    EngineListener,
    GameOverEvent,
    LineClearEvent,
    PieceLockedEvent,
)
from .field import Field
from .core import TetrisEngine, GameConfig, Action, StepResult

__all__ = [
    "Piece",
    "TetrominoType",
    "PIECE_COLORS",
    "GameGrid",
    "EMPTY",
    "cell_kind",
    "DropOutcome",
    "DropResult",
    "EngineListener",
    "GameOverEvent",
    "LineClearEvent",
    "PieceLockedEvent",
    "Field",
    "TetrisEngine",
    "GameConfig",
    "Action",
    "StepResult",
]
