"""bitboard_ttt package.

Bit-mask board encoding, the immutable game state machine, and a small
terminal front end.

Convenience imports are exposed for common workflows.
"""

from .bitboard import BitMask
from .board import EMPTY_BOARD, FILLED_BOARD, WIN_LINES, Board
from .game import (
    GameOutcome,
    GameState,
    IllegalMoveError,
    MoveError,
    MoveResult,
    Player,
    apply_move,
    is_over,
    legal_moves,
)

__all__ = [
    "BitMask",
    "Board",
    "EMPTY_BOARD",
    "FILLED_BOARD",
    "WIN_LINES",
    "GameOutcome",
    "GameState",
    "IllegalMoveError",
    "MoveError",
    "MoveResult",
    "Player",
    "apply_move",
    "is_over",
    "legal_moves",
]
