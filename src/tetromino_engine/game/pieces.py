from __future__ import annotations

import random
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray
Coordinate = Tuple[int, int]


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape.copy()
    return np.rot90(shape, k, axes=(1, 0)).copy()  # rotate clockwise when k>0


# Square matrices: I is 4x4, O is 2x2, the rest 3x3.
BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
}

# Display colors (0xRRGGBB) for renderers; the core only stores the kind id.
PIECE_COLORS: Dict[TetrominoType, int] = {
    TetrominoType.I: 0x00FFFF,
    TetrominoType.O: 0xFFFF00,
    TetrominoType.T: 0x800080,
    TetrominoType.S: 0x00FF00,
    TetrominoType.Z: 0xFF0000,
    TetrominoType.J: 0x0000FF,
    TetrominoType.L: 0xFF7F00,
}


class Piece:
    """A tetromino: kind, occupancy matrix and anchor on the field.

    The matrix is square and keeps its size for the life of the piece;
    rotation only rearranges cells inside it. ``kind`` and ``color`` are
    fixed at construction.
    """

    def __init__(self, kind: TetrominoType, anchor_x: int = 0, anchor_y: int = 0) -> None:
        self._kind = TetrominoType(kind)
        self.cell_matrix: Shape = BASE_SHAPES[self._kind].copy()
        self.anchor_x = int(anchor_x)
        self.anchor_y = int(anchor_y)

    @classmethod
    def random(cls, anchor_x: int, anchor_y: int, rng: Optional[random.Random] = None) -> "Piece":
        # Uniform with replacement, no bag.
        chooser = rng or random
        return cls(chooser.choice(list(TetrominoType)), anchor_x, anchor_y)

    @property
    def kind(self) -> TetrominoType:
        return self._kind

    @property
    def color(self) -> int:
        """Cell token written into the grid when this piece locks."""
        return int(self._kind)

    @property
    def size(self) -> int:
        return int(self.cell_matrix.shape[0])

    @property
    def width(self) -> int:
        return int(self.cell_matrix.shape[1])

    def rotate_clockwise(self) -> None:
        if self._kind == TetrominoType.O:
            return
        self.cell_matrix = _rot90(self.cell_matrix, 1)

    def rotate_counterclockwise(self) -> None:
        if self._kind == TetrominoType.O:
            return
        self.cell_matrix = _rot90(self.cell_matrix, -1)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Coordinate]:
        s = self.cell_matrix
        h, w = s.shape
        cells: List[Coordinate] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Coordinate]:
        return self.cells_at(self.anchor_x, self.anchor_y)

    def copy(self) -> "Piece":
        clone = Piece(self._kind, self.anchor_x, self.anchor_y)
        clone.cell_matrix = self.cell_matrix.copy()
        return clone

    def __repr__(self) -> str:
        return f"Piece(kind={self._kind.name}, anchor=({self.anchor_x}, {self.anchor_y}))"
