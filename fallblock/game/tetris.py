"""
Round controller - spawn, gravity, player intents, locking and game over.

This module ties the Field and the Piece model together into one round of
play. It owns two independent timing gates:
  - the gravity clock, which moves the active piece down one row every
    fall interval;
  - the input-repeat clock, which accepts at most one player intent every
    input-repeat interval, so a held key registers at a steady rate.
"""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Any, Callable

from fallblock.game.board import Field
from fallblock.game.pieces import Piece
from fallblock.game.randomizer import KindPicker


DEFAULT_FALL_INTERVAL = 0.3
INPUT_REPEAT_INTERVAL = 0.1


class Intent(enum.IntEnum):
    """Discrete player intents fed in by the input collector."""
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    CONFIRM = 4


# Intent -> (dx, dy) for the translating intents
MOVE_DELTAS: dict[Intent, tuple[int, int]] = {
    Intent.MOVE_LEFT: (-1, 0),
    Intent.MOVE_RIGHT: (1, 0),
    Intent.SOFT_DROP: (0, 1),
}


class RoundState(enum.Enum):
    INITIALIZING = "initializing"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class TickEvents:
    """What happened during a single step() call."""
    moved: bool = False
    rotated: bool = False
    fell: bool = False
    locked: bool = False
    lines_cleared: bool = False
    game_over: bool = False

    @property
    def controlled(self) -> bool:
        """True if a player intent was accepted this tick."""
        return self.moved or self.rotated


class RoundController:
    """One round of play on a single field.

    Attributes:
        field: The field of locked cells.
        active_piece: The falling piece, checked against the field.
        next_piece: Preview of the piece that spawns after the next lock.
        state: Current RoundState.
        fall_interval: Seconds between automatic one-row drops.
        input_repeat_interval: Minimum seconds between accepted intents.
        pieces_locked: Pieces locked into the field this round.
    """

    def __init__(
        self,
        field_width: int = 10,
        field_height: int = 20,
        fall_interval: float = DEFAULT_FALL_INTERVAL,
        input_repeat_interval: float = INPUT_REPEAT_INTERVAL,
        picker: KindPicker | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize a round controller. Call start() to begin playing.

        Args:
            field_width: Field width in columns.
            field_height: Field height in rows.
            fall_interval: Seconds between gravity steps.
            input_repeat_interval: Seconds between accepted intents.
            picker: Source of random piece kinds. Unseeded if None.
            clock: Monotonic time source in seconds.
        """
        assert fall_interval > 0, f"invalid fall interval {fall_interval}"
        assert input_repeat_interval >= 0, f"invalid input repeat interval {input_repeat_interval}"
        self.field = Field(field_width, field_height)
        self.fall_interval = fall_interval
        self.input_repeat_interval = input_repeat_interval
        self._picker = picker if picker is not None else KindPicker()
        self._clock = clock

        self.active_piece = Piece(self._picker)
        self.next_piece = Piece(self._picker)
        self.state = RoundState.INITIALIZING
        self.pieces_locked: int = 0

        self._last_fall_time: float = 0.0
        self._last_control_time: float = 0.0

    def start(self) -> None:
        """Begin a fresh round.

        Clears the field, resets the active and next pieces with random
        kinds, and stamps both clocks to now.
        """
        self.field.reset()
        self.active_piece.reset()
        self.next_piece.reset()
        now = self._clock()
        self._last_fall_time = now
        self._last_control_time = now
        self.pieces_locked = 0
        self.state = RoundState.PLAYING

    @property
    def game_over(self) -> bool:
        return self.state is RoundState.GAME_OVER

    def step(self, intent: Intent | None = None) -> TickEvents:
        """Advance the round by one frame.

        Applies at most one player intent (if the input-repeat interval has
        elapsed), then applies gravity if the fall interval has elapsed.
        When the piece cannot move down it is locked, full lines are
        cleared, the next piece is promoted and a new next piece is picked.

        Args:
            intent: The player's intent this frame, or None.

        Returns:
            TickEvents describing what happened.
        """
        assert self.state is RoundState.PLAYING, f"step() called in state {self.state.name}"
        events = TickEvents()

        if intent is not None:
            self._control(intent, events)

        now = self._clock()
        if now - self._last_fall_time < self.fall_interval:
            # An accepted intent uses up the tick; otherwise nothing to do
            return events

        self._last_fall_time = now
        if self._try_move(0, 1):
            events.fell = True
            return events

        self._lock_and_spawn(events)
        return events

    def _control(self, intent: Intent, events: TickEvents) -> None:
        """Apply a player intent if the input-repeat gate is open."""
        now = self._clock()
        if now - self._last_control_time < self.input_repeat_interval:
            return

        if intent in MOVE_DELTAS:
            dx, dy = MOVE_DELTAS[intent]
            if self._try_move(dx, dy):
                events.moved = True
                self._last_control_time = now
        elif intent == Intent.ROTATE:
            if self._try_rotate():
                events.rotated = True
                self._last_control_time = now

    def _try_move(self, dx: int, dy: int) -> bool:
        """Try to move the active piece by (dx, dy).

        Returns:
            True if the move succeeded, False if blocked.
        """
        if self.field.can_place(self.active_piece, dx, dy):
            self.active_piece.translate(dx, dy)
            return True
        return False

    def _try_rotate(self) -> bool:
        if self.field.can_place_rotated(self.active_piece):
            self.active_piece.apply_rotation()
            return True
        return False

    def _lock_and_spawn(self, events: TickEvents) -> None:
        """Lock the active piece, clear lines and promote the next piece."""
        self.field.lock(self.active_piece)
        self.pieces_locked += 1
        events.locked = True
        events.lines_cleared = self.field.clear_full_lines()

        self.active_piece.reset(self.next_piece.kind)
        self.next_piece.reset()

        if not self.field.can_place(self.active_piece, 0, 0):
            self.state = RoundState.GAME_OVER
            events.game_over = True

    def get_state(self) -> dict[str, Any]:
        """Return a read-only snapshot of the round.

        Returns:
            Dict with keys:
              - field: np.ndarray (height x width, int8) copy of the field
              - active_kind: BlockKind of the falling piece
              - active_cells: list of 4 (x, y) field coordinates
              - next_kind: BlockKind of the preview piece
              - next_cells: list of 4 (x, y) coordinates in the preview frame
              - round_state: RoundState
              - pieces_locked: int
        """
        return {
            "field": self.field.get_grid(),
            "active_kind": self.active_piece.kind,
            "active_cells": self.active_piece.occupied_cells(),
            "next_kind": self.next_piece.kind,
            "next_cells": self.next_piece.preview_cells(),
            "round_state": self.state,
            "pieces_locked": self.pieces_locked,
        }
