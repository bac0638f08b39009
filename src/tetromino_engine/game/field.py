from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from .events import (
    MOVED,
    REJECTED,
    DropOutcome,
    DropResult,
    FieldEvent,
    GameOverEvent,
    LineClearEvent,
    PieceLockedEvent,
)
from .grid import GameGrid
from .pieces import Piece, TetrominoType


logger = logging.getLogger(__name__)

KindSource = Callable[[], TetrominoType]


class Field:
    """Authoritative game state: settled grid, active and next piece.

    Blocked moves and rotations are ordinary results, not errors. Once
    ``is_over`` is set, every command is a no-op until ``reset``.
    """

    def __init__(
        self,
        width: int = 10,
        height: int = 20,
        rng: Optional[random.Random] = None,
        kind_source: Optional[KindSource] = None,
    ) -> None:
        self.grid = GameGrid(width, height)
        self.rng = rng or random.Random()
        # Injectable for deterministic sequences; defaults to a uniform draw.
        self._kind_source: Optional[KindSource] = kind_source
        self.active_piece: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None
        self.cleared_line_count = 0
        self.is_over = False
        self._events: List[FieldEvent] = []
        self.spawn_next()

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def _new_piece(self, anchor_x: int, anchor_y: int) -> Piece:
        if self._kind_source is None:
            return Piece.random(anchor_x, anchor_y, self.rng)
        return Piece(self._kind_source(), anchor_x, anchor_y)

    def spawn_x(self, piece: Piece) -> int:
        return self.width // 2 - piece.width // 2

    def spawn_next(self) -> None:
        if self.is_over:
            return
        if self.next_piece is not None:
            piece = self.next_piece
            piece.anchor_x = self.spawn_x(piece)
            piece.anchor_y = 0
        else:
            piece = self._new_piece(0, 0)
            piece.anchor_x = self.spawn_x(piece)
        self.active_piece = piece
        self.next_piece = self._new_piece(0, 0)
        logger.debug("Spawned %s, next %s", piece.kind.name, self.next_piece.kind.name)

        if self.collides(piece):
            self.is_over = True
            self._events.append(GameOverEvent())
            logger.info("Game over: %s blocked at spawn, %d lines cleared", piece.kind.name, self.cleared_line_count)

    def collides(self, piece: Piece) -> bool:
        return self.grid.collides(piece.cells())

    def _can_act(self) -> bool:
        return not self.is_over and self.active_piece is not None

    def _shift(self, dx: int) -> bool:
        if not self._can_act():
            return False
        piece = self.active_piece
        piece.anchor_x += dx
        if self.collides(piece):
            piece.anchor_x -= dx
            return False
        return True

    def move_left(self) -> bool:
        return self._shift(-1)

    def move_right(self) -> bool:
        return self._shift(1)

    def move_down(self) -> DropResult:
        if not self._can_act():
            return REJECTED
        piece = self.active_piece
        piece.anchor_y += 1
        if not self.collides(piece):
            return MOVED
        piece.anchor_y -= 1
        rows = self.lock()
        outcome = DropOutcome.GAME_OVER if self.is_over else DropOutcome.LOCKED
        return DropResult(outcome, tuple(rows))

    def rotate_left(self) -> bool:
        if not self._can_act():
            return False
        piece = self.active_piece
        piece.rotate_counterclockwise()
        if self.collides(piece):
            piece.rotate_clockwise()
            return False
        return True

    def rotate_right(self) -> bool:
        if not self._can_act():
            return False
        piece = self.active_piece
        piece.rotate_clockwise()
        if self.collides(piece):
            piece.rotate_counterclockwise()
            return False
        return True

    def hard_drop(self) -> DropResult:
        result = self.move_down()
        while result:
            result = self.move_down()
        return result

    def lock(self) -> List[int]:
        """Merge the active piece into the grid, clear rows and spawn the next piece.

        Cells above the top edge are dropped. Returns the cleared row indices.
        """
        if not self._can_act():
            return []
        piece = self.active_piece
        cells = tuple(piece.cells())
        self.grid.write(cells, piece.color)
        self.active_piece = None
        self._events.append(PieceLockedEvent(piece.kind, cells))
        logger.debug("Locked %s at (%d, %d)", piece.kind.name, piece.anchor_x, piece.anchor_y)

        rows = self.clear_lines()
        if rows:
            self.cleared_line_count += len(rows)
            self._events.append(LineClearEvent(len(rows), tuple(rows)))
            logger.info("Cleared %d line(s) at rows %s, total %d", len(rows), rows, self.cleared_line_count)

        self.spawn_next()
        return rows

    def clear_lines(self) -> List[int]:
        return self.grid.clear_full_rows()

    def reset(self) -> None:
        self.grid.reset()
        self.active_piece = None
        self.next_piece = None
        self.cleared_line_count = 0
        self.is_over = False
        self._events.clear()
        logger.info("Field reset (%dx%d)", self.width, self.height)
        self.spawn_next()

    def tick(self) -> DropResult:
        """Gravity step: one downward move when the game is still running."""
        if self.is_over:
            return REJECTED
        return self.move_down()

    update = tick

    def drain_events(self) -> List[FieldEvent]:
        events = self._events
        self._events = []
        return events
