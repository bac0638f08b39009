from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np

from .pieces import TetrominoType


Coordinate = Tuple[int, int]

EMPTY = 0


def cell_kind(value: int) -> Optional[TetrominoType]:
    """Decode a cell: None for empty, otherwise the kind that settled there."""
    if value == EMPTY:
        return None
    return TetrominoType(int(value))


class GameGrid:
    """Discrete 2D grid of settled cells.

    The grid uses EMPTY (0) for empty cells and the non-zero tetromino
    value for filled cells. Row 0 is the top, row ``height - 1`` the floor.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {self.width}x{self.height}")
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, cells: Iterable[Coordinate]) -> bool:
        """True if any cell leaves the walls or floor or overlaps a settled block.

        Cells above the top edge (y < 0) only have to respect the walls.
        """
        for x, y in cells:
            if x < 0 or x >= self.width or y >= self.height:
                return True
            if y >= 0 and self.grid[y, x] != EMPTY:
                return True
        return False

    def write(self, cells: Iterable[Coordinate], value: int) -> int:
        """Write ``value`` into every in-bounds cell, returning how many landed."""
        written = 0
        for x, y in cells:
            if self.is_inside(x, y):
                self.grid[y, x] = value
                written += 1
        return written

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != EMPTY))

    def clear_full_rows(self) -> List[int]:
        """Clear full rows in one bottom-up sweep.

        A cleared row is zeroed, everything above it moves down one row and
        the same index is examined again. Returned indices are bottom-to-top
        and refer to the board as it was before the sweep.
        """
        cleared: List[int] = []
        y = self.height - 1
        while y >= 0:
            if self.is_row_full(y):
                cleared.append(y - len(cleared))
                self.grid[y].fill(EMPTY)
                if y > 0:
                    self.grid[1 : y + 1] = self.grid[0:y].copy()
                self.grid[0].fill(EMPTY)
                continue
            y -= 1
        return cleared

    def snapshot(self) -> np.ndarray:
        view = self.grid.view()
        view.flags.writeable = False
        return view

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != EMPTY, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != EMPTY:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
