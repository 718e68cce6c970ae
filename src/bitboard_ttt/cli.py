from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

import colorama

from .board import Board
from .game import INVALID_PLACEMENT, GameState, IllegalMoveError, apply_move, is_over, outcome_of
from .render import CLEAR_SCREEN, format_board, format_rejection, format_state, format_status, prompt


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Bit-board tic-tac-toe")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors (also via TTT_NO_COLOR or NO_COLOR; off when stdout is not a terminal)",
    )

    p_play = sub.add_parser("play", help="Play an interactive two-player game in the terminal")
    p_play.add_argument(
        "--no-clear",
        action="store_true",
        help="Do not clear the screen between turns (also via TTT_NO_CLEAR; off when stdout is not a terminal)",
    )

    p_rep = sub.add_parser("replay", help="Apply a sequence of placements and print the result")
    p_rep.add_argument("--moves", required=True, help='Comma-separated placements 1-9, e.g. "1,4,2,5,3"')
    p_rep.add_argument(
        "--strict", action="store_true", help="Fail on the first rejected move instead of skipping it"
    )

    p_show = sub.add_parser("show", help="Render a board (9 digits, 0=empty,1=X,2=O)")
    p_show.add_argument("--board", required=True, help="Board string, e.g., 120000000")

    return p


def _env_flag(name: str) -> bool:
    return bool(os.getenv(name))


def use_color(ns: argparse.Namespace) -> bool:
    if getattr(ns, "no_color", False) or not sys.stdout.isatty():
        return False
    return not (_env_flag("TTT_NO_COLOR") or _env_flag("NO_COLOR"))


def parse_placement(text: str) -> int:
    """Parse a typed placement; anything that is not an integer maps to INVALID_PLACEMENT."""
    try:
        return int(text.strip())
    except ValueError:
        return INVALID_PLACEMENT


def parse_moves(raw: str) -> List[int]:
    return [parse_placement(x) for x in raw.split(',') if x.strip()]


def play_loop(
    read_line: Callable[[str], str],
    write: Callable[[str], None],
    color: bool = False,
    clear: bool = False,
    state: Optional[GameState] = None,
) -> GameState:
    """Drive one game: show the state, read a placement, apply it, repeat until over."""
    if state is None:
        state = GameState.new()
    notice = ""
    while not is_over(state):
        if clear:
            write(CLEAR_SCREEN)
        write(f"\n{format_state(state, color)}\n\n")
        if notice:
            write(f"{notice}\n")
        placement = parse_placement(read_line(prompt(state.current_player)))
        result = apply_move(state, placement)
        notice = "" if result.error is None else format_rejection(result.error, placement)
        if notice:
            logging.debug(notice)
        state = result.state_or(state)
    if clear:
        write(CLEAR_SCREEN)
    write(f"\n{format_state(state, color)}\n")
    return state


def _write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("bitboard-ttt"))
        except Exception:
            print("unknown")
        return 0

    colorama.just_fix_windows_console()
    color = use_color(ns)

    if ns.cmd == "play":
        clear = sys.stdout.isatty() and not (ns.no_clear or _env_flag("TTT_NO_CLEAR"))
        try:
            state = play_loop(input, _write, color=color, clear=clear)
        except KeyboardInterrupt:
            logging.info("Interrupted.")
            return 130
        except EOFError:
            logging.error("Input closed before the game ended.")
            return 1
        logging.debug("final outcome=%s", state.outcome.value)
        return 0

    if ns.cmd == "replay":
        moves = parse_moves(ns.moves)
        if ns.strict:
            try:
                state = GameState.from_moves(moves)
            except IllegalMoveError as e:
                logging.error("%s", e)
                return 2
        else:
            state = GameState.new()
            for ply, placement in enumerate(moves, start=1):
                result = apply_move(state, placement)
                if result.error is not None:
                    logging.warning("move %d: %s", ply, format_rejection(result.error, placement))
                state = result.state_or(state)
        print(format_state(state, color))
        return 0

    if ns.cmd == "show":
        try:
            board = Board.from_string(ns.board)
        except ValueError as e:
            logging.error("%s", e)
            return 2
        print(format_board(board, color))
        print(f"State: {format_status(outcome_of(board))}")
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
