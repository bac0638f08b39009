"""Outcomes and notifications raised by the field.

The field never calls out to collaborators directly. It queues events while
a command runs; the engine drains the queue afterwards and hands each event
to the registered listeners in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .pieces import TetrominoType


Coordinate = Tuple[int, int]


class DropOutcome(Enum):
    MOVED = "moved"
    LOCKED = "locked"
    GAME_OVER = "game_over"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DropResult:
    """Result of a downward move.

    Only ``MOVED`` is truthy, so ``while field.move_down(): ...`` stops as
    soon as the piece locks or the field refuses the move.
    """

    outcome: DropOutcome
    cleared_rows: Tuple[int, ...] = ()

    @property
    def lines_cleared(self) -> int:
        return len(self.cleared_rows)

    @property
    def locked(self) -> bool:
        return self.outcome in (DropOutcome.LOCKED, DropOutcome.GAME_OVER)

    def __bool__(self) -> bool:
        return self.outcome is DropOutcome.MOVED


MOVED = DropResult(DropOutcome.MOVED)
REJECTED = DropResult(DropOutcome.REJECTED)


class EngineListener:
    """Observer for field notifications. Override what you need."""

    def on_piece_locked(self, kind: TetrominoType, cells: Tuple[Coordinate, ...]) -> None:
        pass

    def on_line_clear(self, count: int, rows: Tuple[int, ...]) -> None:
        pass

    def on_game_over(self) -> None:
        pass


class FieldEvent:
    def dispatch(self, listener: EngineListener) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class PieceLockedEvent(FieldEvent):
    kind: TetrominoType
    cells: Tuple[Coordinate, ...]

    def dispatch(self, listener: EngineListener) -> None:
        listener.on_piece_locked(self.kind, self.cells)


@dataclass(frozen=True)
class LineClearEvent(FieldEvent):
    count: int
    rows: Tuple[int, ...]

    def dispatch(self, listener: EngineListener) -> None:
        listener.on_line_clear(self.count, self.rows)


@dataclass(frozen=True)
class GameOverEvent(FieldEvent):
    def dispatch(self, listener: EngineListener) -> None:
        listener.on_game_over()
