"""Game logic: pieces, field, round controller, and session."""

from fallblock.game.pieces import BlockKind, Piece, PIECE_KINDS, ROTATION_TABLE
from fallblock.game.board import Field
from fallblock.game.randomizer import KindPicker
from fallblock.game.tetris import Intent, RoundController, RoundState, TickEvents
from fallblock.game.session import GameSession, SessionState

__all__ = [
    "BlockKind",
    "Piece",
    "PIECE_KINDS",
    "ROTATION_TABLE",
    "Field",
    "KindPicker",
    "Intent",
    "RoundController",
    "RoundState",
    "TickEvents",
    "GameSession",
    "SessionState",
]
