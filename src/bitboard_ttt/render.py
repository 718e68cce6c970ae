"""
Text rendering for boards and game states.

Everything here is presentation: the engine never imports this module.
Colors come from colorama and are off unless asked for.
"""
from __future__ import annotations

from typing import List, Optional

from colorama import Fore, Style

from .bitboard import BitMask
from .board import MARK_X, Board, winning_line
from .game import GameOutcome, GameState, MoveError, Player

ROW_SEPARATOR = "\n---+---+---\n"
CLEAR_SCREEN = "\033[2J\033[H"

STATUS_TEXT = {
    GameOutcome.FIRST_WINS: "X Wins!!",
    GameOutcome.SECOND_WINS: "O Wins!!",
    GameOutcome.DRAW: "Draw!",
    GameOutcome.IN_PROGRESS: "Still playing.",
}


def _paint(text: str, color: str) -> str:
    return color + text + Style.RESET_ALL


def _highlight(board: Board) -> BitMask:
    marks_a, marks_b = board.bit_boards()
    line = winning_line(marks_a) or winning_line(marks_b)
    return line if line is not None else BitMask.empty()


def format_cell(board: Board, index: int, color: bool = False, highlight: Optional[BitMask] = None) -> str:
    mark = board.cell(index)
    if mark is None:
        text = f" {index + 1} "
        return _paint(text, Style.DIM) if color else text
    text = f" {mark} "
    if not color:
        return text
    if highlight is not None and highlight.test_bit(index):
        return _paint(text, Style.BRIGHT + Fore.GREEN)
    return _paint(text, Fore.RED if mark == MARK_X else Fore.BLUE)


def format_board(board: Board, color: bool = False) -> str:
    highlight = _highlight(board) if color else None
    rows: List[str] = []
    for start in (0, 3, 6):
        rows.append("|".join(format_cell(board, i, color, highlight) for i in range(start, start + 3)))
    return ROW_SEPARATOR.join(rows)


def format_status(outcome: GameOutcome) -> str:
    return STATUS_TEXT[outcome]


def format_state(state: GameState, color: bool = False) -> str:
    status = format_status(state.outcome)
    if color and state.is_over():
        status = _paint(status, Style.BRIGHT)
    return (
        f"{format_board(state.board, color)}\n"
        f"State: {status}\n"
        f"Current Player: {state.current_player.mark}"
    )


def prompt(player: Player) -> str:
    return f"Place {player.mark} >> "


def format_rejection(error: MoveError, placement: Optional[int] = None) -> str:
    if placement is None:
        return f"Move rejected: {error.message}"
    return f"Move {placement} rejected: {error.message}"
