"""
Block kinds, the rotation table, and the Piece model.

Every tetromino is described inside a fixed 4x4 frame. A piece's occupied
cells are its base position (the frame's top-left corner on the field)
plus the offsets of the set cells in the frame for its rotation state.

Coordinate convention:
  - Offsets and field coordinates are (x, y) = (column, row).
  - Row 0 is the top of the field and y increases downward.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from fallblock.game.randomizer import KindPicker


class BlockKind(enum.IntEnum):
    """Content of a field cell. NONE is empty; the rest are tetromino kinds."""
    NONE = 0
    I = 1
    O = 2
    S = 3
    Z = 4
    J = 5
    L = 6
    T = 7


PIECE_KINDS: tuple[BlockKind, ...] = tuple(k for k in BlockKind if k != BlockKind.NONE)

FRAME_SIZE = 4
SPAWN_POSITION: tuple[int, int] = (3, 0)

# Smallest field that holds a freshly spawned frame
MIN_FIELD_WIDTH = SPAWN_POSITION[0] + FRAME_SIZE
MIN_FIELD_HEIGHT = SPAWN_POSITION[1] + FRAME_SIZE


def _frames(*frames: list[list[int]]) -> tuple[np.ndarray, ...]:
    arrays = []
    for frame in frames:
        array = np.array(frame, dtype=np.int8)
        assert array.shape == (FRAME_SIZE, FRAME_SIZE)
        array.setflags(write=False)
        arrays.append(array)
    return tuple(arrays)


# =============================================================================
# Rotation Table
# =============================================================================
# Rotation order: [0=spawn, 1=R, 2=180, 3=L]. O has a single state.

ROTATION_TABLE: dict[BlockKind, tuple[np.ndarray, ...]] = {
    BlockKind.I: _frames(
        [
            [0, 0, 0, 0],
            [1, 1, 1, 1],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 1, 0],
            [0, 0, 1, 0],
            [0, 0, 1, 0],
            [0, 0, 1, 0],
        ],
        [
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [1, 1, 1, 1],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 1, 0, 0],
        ],
    ),
    BlockKind.O: _frames(
        [
            [0, 1, 1, 0],
            [0, 1, 1, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
    ),
    BlockKind.S: _frames(
        [
            [0, 1, 1, 0],
            [1, 1, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [0, 1, 1, 0],
            [0, 0, 1, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 0, 0],
            [0, 1, 1, 0],
            [1, 1, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [1, 0, 0, 0],
            [1, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
    ),
    BlockKind.Z: _frames(
        [
            [1, 1, 0, 0],
            [0, 1, 1, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 1, 0],
            [0, 1, 1, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 0, 0],
            [1, 1, 0, 0],
            [0, 1, 1, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [1, 1, 0, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 0],
        ],
    ),
    BlockKind.J: _frames(
        [
            [1, 0, 0, 0],
            [1, 1, 1, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 1, 0],
            [0, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 0, 0],
            [1, 1, 1, 0],
            [0, 0, 1, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [0, 1, 0, 0],
            [1, 1, 0, 0],
            [0, 0, 0, 0],
        ],
    ),
    BlockKind.L: _frames(
        [
            [0, 0, 1, 0],
            [1, 1, 1, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 1, 1, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 0, 0],
            [1, 1, 1, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [1, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
    ),
    BlockKind.T: _frames(
        [
            [0, 1, 0, 0],
            [1, 1, 1, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [0, 1, 1, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 0, 0, 0],
            [1, 1, 1, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
        [
            [0, 1, 0, 0],
            [1, 1, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 0],
        ],
    ),
}

# (dx, dy) offsets per kind and rotation, row-major within the frame
_OFFSETS: dict[BlockKind, tuple[tuple[tuple[int, int], ...], ...]] = {
    kind: tuple(
        tuple((int(col), int(row)) for row, col in np.argwhere(frame != 0))
        for frame in frames
    )
    for kind, frames in ROTATION_TABLE.items()
}


def rotation_count(kind: BlockKind) -> int:
    """Return the number of rotation states for a kind (1 for O, 4 otherwise)."""
    return len(ROTATION_TABLE[kind])


def rotation_offsets(kind: BlockKind, rotation: int) -> tuple[tuple[int, int], ...]:
    """Return the 4 occupied (dx, dy) offsets of a kind's rotation frame.

    Args:
        kind: Any kind except BlockKind.NONE.
        rotation: Rotation index, 0 <= rotation < rotation_count(kind).

    Returns:
        Tuple of 4 (dx, dy) offsets with 0 <= dx, dy < 4.
    """
    assert 0 <= rotation < rotation_count(kind), f"invalid rotation {rotation} for {kind.name}"
    return _OFFSETS[kind][rotation]


class Piece:
    """A placed or previewed tetromino.

    Attributes:
        kind: The piece's BlockKind (never NONE once reset).
        x: Column of the frame's top-left corner on the field.
        y: Row of the frame's top-left corner on the field.
        rotation: Current rotation index.
    """

    def __init__(self, picker: KindPicker | None = None) -> None:
        """Create a piece and reset it with a randomly picked kind.

        Args:
            picker: Source of random kinds. A fresh unseeded picker if None.
        """
        if picker is None:
            from fallblock.game.randomizer import KindPicker
            picker = KindPicker()
        self._picker = picker
        self.kind: BlockKind = BlockKind.NONE
        self.x: int = 0
        self.y: int = 0
        self.rotation: int = 0
        self.reset()

    def reset(self, kind: BlockKind | None = None) -> None:
        """Move the piece back to the spawn position with rotation 0.

        Args:
            kind: Kind to take on. Picked uniformly from the 7 kinds if None.
        """
        if kind is None or kind == BlockKind.NONE:
            kind = self._picker.pick()
        self.kind = BlockKind(kind)
        self.x, self.y = SPAWN_POSITION
        self.rotation = 0

    def occupied_cells(self, rotation: int | None = None) -> list[tuple[int, int]]:
        """Return the absolute (x, y) cells covered by the piece.

        Purely geometric; nothing is checked against a field.

        Args:
            rotation: Rotation index to evaluate. Current rotation if None.
        """
        if rotation is None:
            rotation = self.rotation
        return [(self.x + dx, self.y + dy) for dx, dy in rotation_offsets(self.kind, rotation)]

    def preview_cells(self) -> list[tuple[int, int]]:
        """Return the occupied cells mapped into the 4x4 preview frame."""
        spawn_x, _ = SPAWN_POSITION
        return [(x - spawn_x, y + 1) for x, y in self.occupied_cells()]

    def translate(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy

    def next_rotation_index(self) -> int:
        return (self.rotation + 1) % rotation_count(self.kind)

    def apply_rotation(self) -> None:
        self.rotation = self.next_rotation_index()

    def __repr__(self) -> str:
        return f"Piece({self.kind.name}, x={self.x}, y={self.y}, rotation={self.rotation})"
