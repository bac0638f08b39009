from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional

import numpy as np

from .events import REJECTED, DropOutcome, DropResult, EngineListener
from .field import Field, KindSource
from .pieces import Piece


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"field dimensions must be positive, got {self.width}x{self.height}")


@dataclass
class StepResult:
    accepted: bool
    drop: Optional[DropResult] = None

    @property
    def lines_cleared(self) -> int:
        return self.drop.lines_cleared if self.drop is not None else 0

    @property
    def game_over(self) -> bool:
        return self.drop is not None and self.drop.outcome is DropOutcome.GAME_OVER


class TetrisEngine:
    """Drives a single Field from discrete commands and gravity ticks.

    After every command the field's queued events are handed to the
    listeners. A failing listener is logged and skipped; it never changes
    the outcome of the command.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        listeners: Iterable[EngineListener] = (),
        kind_source: Optional[KindSource] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.random_seed)
        self.listeners: List[EngineListener] = list(listeners)
        self.paused = False
        self._field = Field(self.config.width, self.config.height, rng=self.rng, kind_source=kind_source)
        self._dispatch()

    # ---------- Listeners ----------
    def add_listener(self, listener: EngineListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: EngineListener) -> None:
        self.listeners.remove(listener)

    def _dispatch(self) -> None:
        for event in self._field.drain_events():
            for listener in list(self.listeners):
                try:
                    event.dispatch(listener)
                except Exception:
                    logger.exception("Listener %r failed on %s", listener, type(event).__name__)

    # ---------- Commands ----------
    def _accepts_input(self) -> bool:
        return not self.paused

    def move_left(self) -> bool:
        if not self._accepts_input():
            return False
        moved = self._field.move_left()
        self._dispatch()
        return moved

    def move_right(self) -> bool:
        if not self._accepts_input():
            return False
        moved = self._field.move_right()
        self._dispatch()
        return moved

    def rotate_left(self) -> bool:
        if not self._accepts_input():
            return False
        rotated = self._field.rotate_left()
        self._dispatch()
        return rotated

    def rotate_right(self) -> bool:
        if not self._accepts_input():
            return False
        rotated = self._field.rotate_right()
        self._dispatch()
        return rotated

    def move_down(self) -> DropResult:
        if not self._accepts_input():
            return REJECTED
        result = self._field.move_down()
        self._dispatch()
        return result

    def hard_drop(self) -> DropResult:
        if not self._accepts_input():
            return REJECTED
        result = self._field.hard_drop()
        self._dispatch()
        return result

    def tick(self) -> DropResult:
        if not self._accepts_input():
            return REJECTED
        result = self._field.tick()
        self._dispatch()
        return result

    def reset(self) -> None:
        self.paused = False
        self._field.reset()
        self._dispatch()

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def step(self, action: Action) -> StepResult:
        if action == Action.LEFT:
            return StepResult(self.move_left())
        if action == Action.RIGHT:
            return StepResult(self.move_right())
        if action == Action.ROTATE_CW:
            return StepResult(self.rotate_right())
        if action == Action.ROTATE_CCW:
            return StepResult(self.rotate_left())
        if action == Action.SOFT_DROP:
            drop = self.move_down()
            return StepResult(bool(drop) or drop.locked, drop)
        if action == Action.HARD_DROP:
            drop = self.hard_drop()
            return StepResult(drop.locked, drop)
        return StepResult(not self.is_game_over() and not self.paused)

    # ---------- Queries ----------
    @property
    def width(self) -> int:
        return self._field.width

    @property
    def height(self) -> int:
        return self._field.height

    def grid_snapshot(self) -> np.ndarray:
        return self._field.grid.snapshot()

    def active_piece(self) -> Optional[Piece]:
        piece = self._field.active_piece
        return piece.copy() if piece is not None else None

    def next_piece(self) -> Optional[Piece]:
        piece = self._field.next_piece
        return piece.copy() if piece is not None else None

    def cleared_line_count(self) -> int:
        return self._field.cleared_line_count

    def is_game_over(self) -> bool:
        return self._field.is_over

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self._field.grid.clone_state()
        piece = self._field.active_piece
        if piece is not None and not self._field.is_over:
            for x, y in piece.cells():
                if 0 <= y < self.height and 0 <= x < self.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(piece.kind)
        return state

    def count_holes(self) -> int:
        return self._field.grid.count_holes()

    def get_max_height(self) -> int:
        return self._field.grid.get_max_height()
