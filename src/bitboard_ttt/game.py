"""
Game state machine for bit-board Tic-Tac-Toe.
Teaching notes:
- A GameState is a value: (board, player to move, outcome). Moves build new states.
- Placements are 1-based (1..9) as a human types them; the board works on 0-based cells.
- A rejected move is not an exception. apply_move reports why it was refused
  and the caller simply keeps the state it already has.
- The outcome is not a constructor argument: every GameState computes it from
  its board (X lines, then O lines, then a full board means a draw).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .board import MARK_O, MARK_X, Board, has_line

logger = logging.getLogger(__name__)

MIN_PLACEMENT = 1
MAX_PLACEMENT = 9
# What the shell feeds the engine when a line of input is not a number.
INVALID_PLACEMENT = 10


class Player(Enum):
    FIRST = MARK_X
    SECOND = MARK_O

    @property
    def mark(self) -> str:
        return self.value

    def opponent(self) -> "Player":
        return Player.SECOND if self is Player.FIRST else Player.FIRST


class GameOutcome(Enum):
    FIRST_WINS = "first_wins"
    SECOND_WINS = "second_wins"
    DRAW = "draw"
    IN_PROGRESS = "in_progress"


class MoveError(Enum):
    OUT_OF_RANGE_PLACEMENT = "placement out of range"
    CELL_OCCUPIED = "cell already occupied"
    GAME_ALREADY_OVER = "game already over"

    @property
    def message(self) -> str:
        return self.value


class IllegalMoveError(ValueError):
    """Raised by GameState.from_moves when a scripted move is refused."""

    def __init__(self, error: MoveError, placement: int, ply: int):
        super().__init__(f"move {ply} ({placement}): {error.message}")
        self.error = error
        self.placement = placement
        self.ply = ply


def outcome_of(board: Board) -> GameOutcome:
    marks_a, marks_b = board.bit_boards()
    if has_line(marks_a):
        return GameOutcome.FIRST_WINS
    if has_line(marks_b):
        return GameOutcome.SECOND_WINS
    if board.is_full():
        return GameOutcome.DRAW
    return GameOutcome.IN_PROGRESS


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=Board.empty)
    current_player: Player = Player.FIRST
    outcome: GameOutcome = field(init=False)

    def __post_init__(self) -> None:
        # derived from the board, never passed in
        object.__setattr__(self, "outcome", outcome_of(self.board))

    @classmethod
    def new(cls) -> "GameState":
        return cls()

    @classmethod
    def from_moves(cls, placements: Iterable[int]) -> "GameState":
        """Play ``placements`` in order from the initial state.

        Unlike apply_move, the first refused placement raises IllegalMoveError.
        """
        state = cls()
        for ply, placement in enumerate(placements, start=1):
            result = apply_move(state, placement)
            if result.error is not None:
                raise IllegalMoveError(result.error, placement, ply)
            state = result.state  # type: ignore[assignment]
        return state

    def is_over(self) -> bool:
        return self.outcome is not GameOutcome.IN_PROGRESS

    def winner(self) -> Optional[Player]:
        if self.outcome is GameOutcome.FIRST_WINS:
            return Player.FIRST
        if self.outcome is GameOutcome.SECOND_WINS:
            return Player.SECOND
        return None

    def check_move(self, placement: int) -> Optional[MoveError]:
        return apply_move(self, placement).error

    def play(self, placement: int) -> Optional["GameState"]:
        return apply_move(self, placement).state

    def legal_moves(self) -> List[int]:
        return legal_moves(self)


@dataclass(frozen=True)
class MoveResult:
    state: Optional[GameState] = None
    error: Optional[MoveError] = None

    @property
    def accepted(self) -> bool:
        return self.state is not None

    def state_or(self, previous: GameState) -> GameState:
        return self.state if self.state is not None else previous


def _reject(state: GameState, placement: int, error: MoveError) -> MoveResult:
    logger.debug("rejected %s at %s: %s", state.current_player.mark, placement, error.message)
    return MoveResult(error=error)


def apply_move(state: GameState, placement: int) -> MoveResult:
    if state.outcome is not GameOutcome.IN_PROGRESS:
        return _reject(state, placement, MoveError.GAME_ALREADY_OVER)
    if not MIN_PLACEMENT <= placement <= MAX_PLACEMENT:
        return _reject(state, placement, MoveError.OUT_OF_RANGE_PLACEMENT)
    cell = placement - 1
    if state.current_player is Player.FIRST:
        board = state.board.place_for_a(cell)
    else:
        board = state.board.place_for_b(cell)
    if board is None:
        return _reject(state, placement, MoveError.CELL_OCCUPIED)

    new_state = GameState(board, state.current_player.opponent())
    logger.debug("%s plays %d -> %s", state.current_player.mark, placement, new_state.outcome.value)
    return MoveResult(state=new_state)


def is_over(state: GameState) -> bool:
    return state.is_over()


def legal_moves(state: GameState) -> List[int]:
    """Ascending 1-based placements whose cells are still free."""
    return [cell + 1 for cell in state.board.free_cells()]
