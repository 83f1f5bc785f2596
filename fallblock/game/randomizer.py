"""
Kind picker - uniform choice among the 7 tetromino kinds.

Pieces draw their kind through a picker so a seeded (or scripted) source
can fix the sequence for deterministic play and tests.
"""

from __future__ import annotations

import random

from fallblock.game.pieces import PIECE_KINDS, BlockKind


class KindPicker:
    """Uniform, seedable source of piece kinds.

    Each call to pick() returns one of the 7 kinds with equal probability,
    independent of previous picks (no bag, no repeat avoidance).
    """

    def __init__(self, seed: int | None = None) -> None:
        """
        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._rng = random.Random(seed)

    def pick(self) -> BlockKind:
        return self._rng.choice(PIECE_KINDS)
