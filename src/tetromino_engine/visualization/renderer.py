from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from tetromino_engine.game import PIECE_COLORS, Piece, TetrominoType


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return (20, 20, 26)
    hex_color = PIECE_COLORS.get(TetrominoType(abs(v)), 0xC8C8C8)
    return (hex_color >> 16) & 0xFF, (hex_color >> 8) & 0xFF, hex_color & 0xFF


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, preview_cells: int = 5) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.preview_cells = preview_cells

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            (width + self.preview_cells) * self.cell_size + self.margin * 3,
            height * self.cell_size + self.margin * 2,
        )

    def _grid_surface(self, state: np.ndarray, flash_rows: Sequence[int] = ()) -> pygame.Surface:
        h, w = state.shape
        width = w * self.cell_size
        height = h * self.cell_size
        surf = pygame.Surface((width, height))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                color = (255, 255, 255) if y in flash_rows else _color_for_value(v)
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color, rect)
        return surf

    def _preview_surface(self, piece: Optional[Piece]) -> pygame.Surface:
        size = self.preview_cells * self.cell_size
        surf = pygame.Surface((size, size))
        surf.fill((30, 30, 36))
        if piece is None:
            return surf
        color = _color_for_value(int(piece.kind))
        offset = (self.preview_cells - piece.size) * self.cell_size // 2
        for x, y in piece.cells_at(0, 0):
            rect = pygame.Rect(
                offset + x * self.cell_size,
                offset + y * self.cell_size,
                self.cell_size - 1,
                self.cell_size - 1,
            )
            pygame.draw.rect(surf, color, rect)
        return surf

    def draw(
        self,
        screen: pygame.Surface,
        state: np.ndarray,
        next_piece: Optional[Piece] = None,
        flash_rows: Sequence[int] = (),
    ) -> None:
        grid_surf = self._grid_surface(state, flash_rows)
        screen.fill((10, 10, 14))
        screen.blit(grid_surf, (self.margin, self.margin))
        preview_x = self.margin * 2 + grid_surf.get_width()
        screen.blit(self._preview_surface(next_piece), (preview_x, self.margin))
