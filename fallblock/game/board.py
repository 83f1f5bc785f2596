"""
Field logic for a 10x20 grid.

The field is a 2D numpy array (height x width) of int8 values, each one a
BlockKind:
  - 0 (BlockKind.NONE) = empty cell
  - 1-7 = kind of the piece that was locked there (used for coloring)

Row 0 is the top of the field. There is no hidden buffer zone; a piece
spawns directly into the top rows.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from fallblock.game.pieces import MIN_FIELD_HEIGHT, MIN_FIELD_WIDTH, BlockKind, Piece


class Field:
    """Grid of locked cells with legality checks and line clearing.

    Attributes:
        width: Number of columns (default 10).
        height: Number of rows (default 20).
        grid: 2D numpy array of shape (height, width), dtype int8.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        """Initialize an empty field.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        assert width >= MIN_FIELD_WIDTH and height >= MIN_FIELD_HEIGHT, f"invalid field size {width}x{height}"
        self.width = width
        self.height = height
        self.grid = np.full((self.height, self.width), BlockKind.NONE, dtype=np.int8)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_empty(self, x: int, y: int) -> bool:
        assert self.in_bounds(x, y), f"({x}, {y}) is outside the field"
        return bool(self.grid[y, x] == BlockKind.NONE)

    def cell(self, x: int, y: int) -> BlockKind:
        """Return the kind stored at (x, y)."""
        return BlockKind(int(self.grid[y, x]))

    def can_place(self, piece: Piece, dx: int = 0, dy: int = 0) -> bool:
        """Check whether a piece shifted by (dx, dy) fits on the field.

        A position is valid if every occupied cell of the piece, after the
        shift, is inside the field and not already filled. The piece's
        current rotation is used.

        Args:
            piece: The piece to test.
            dx: Column offset (positive = right).
            dy: Row offset (positive = down).

        Returns:
            True if the shifted position is valid, False otherwise.
        """
        return self._fits(
            (x + dx, y + dy) for x, y in piece.occupied_cells()
        )

    def can_place_rotated(self, piece: Piece) -> bool:
        """Check whether the piece's next rotation fits at its current base.

        No kicks are tried: the rotation fails outright if any target cell
        is out of bounds or occupied.
        """
        return self._fits(piece.occupied_cells(piece.next_rotation_index()))

    def _fits(self, cells: Iterable[tuple[int, int]]) -> bool:
        for x, y in cells:
            if not self.in_bounds(x, y):
                return False
            if not self.is_empty(x, y):
                return False
        return True

    def lock(self, piece: Piece) -> None:
        """Write the piece's kind into the field at its occupied cells.

        Does NOT check validity first - caller must ensure the cells are
        in bounds and empty.
        """
        for x, y in piece.occupied_cells():
            self.grid[y, x] = piece.kind

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != BlockKind.NONE))

    def full_rows(self) -> list[int]:
        """Return the indices of every full row, top to bottom."""
        return [y for y in range(self.height) if self.is_row_full(y)]

    def clear_full_lines(self) -> bool:
        """Remove full rows, shifting everything above them down.

        Rows are scanned from the bottom up. When a full row is found, every
        row above it moves down by one and the top row is emptied; the same
        row index is then examined again, since it now holds what used to be
        the row above.

        Returns:
            True if at least one row was cleared.
        """
        cleared = False
        y = self.height - 1
        while y >= 0:
            if not self.is_row_full(y):
                y -= 1
                continue
            cleared = True
            self.grid[1:y + 1] = self.grid[0:y].copy()
            self.grid[0] = BlockKind.NONE
        return cleared

    def get_grid(self) -> np.ndarray:
        """Return a copy of the field grid.

        Returns:
            A numpy array of shape (height, width), dtype int8.
        """
        return self.grid.copy()

    def reset(self) -> None:
        """Clear the entire field, setting all cells to BlockKind.NONE."""
        self.grid.fill(BlockKind.NONE)
