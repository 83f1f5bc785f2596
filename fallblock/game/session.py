"""
Game session - Title -> Playing -> Result -> Title around a round controller.
"""

from __future__ import annotations

import enum
from typing import Any

from fallblock.game.tetris import Intent, RoundController


class SessionState(enum.Enum):
    NONE = "none"
    TITLE = "title"
    PLAYING = "playing"
    RESULT = "result"


class GameSession:
    """Top-level state machine gating which intents are meaningful.

    The session starts uninitialized and enters PLAYING on its first
    update. CONFIRM moves TITLE -> PLAYING and RESULT -> TITLE; PLAYING
    only ends when the round reports game over.

    Attributes:
        round: The wrapped RoundController.
        state: Current SessionState.
    """

    def __init__(self, round_controller: RoundController | None = None) -> None:
        self.round = round_controller if round_controller is not None else RoundController()
        self.state = SessionState.NONE

    def update(self, intent: Intent | None = None) -> SessionState:
        """Advance the session by one frame.

        Args:
            intent: The player's intent this frame, or None.

        Returns:
            The session state after the update.
        """
        if self.state is SessionState.NONE:
            self._begin_round()
        elif self.state is SessionState.PLAYING:
            self._update_playing(intent)
        elif self.state is SessionState.RESULT:
            if intent == Intent.CONFIRM:
                self.state = SessionState.TITLE
        elif self.state is SessionState.TITLE:
            if intent == Intent.CONFIRM:
                self._begin_round()
        return self.state

    def _begin_round(self) -> None:
        self.round.start()
        self.state = SessionState.PLAYING

    def _update_playing(self, intent: Intent | None) -> None:
        if intent == Intent.CONFIRM:
            intent = None
        self.round.step(intent)
        if self.round.game_over:
            self.state = SessionState.RESULT

    def get_state(self) -> dict[str, Any]:
        """Return the round snapshot plus the session state."""
        state = self.round.get_state()
        state["session_state"] = self.state
        return state
