import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

from bitboard_ttt.cli import main, parse_moves, parse_placement, play_loop
from bitboard_ttt.game import INVALID_PLACEMENT, GameOutcome


def _feeder(lines: List[str]):
    it = iter(lines)

    def read_line(prompt: str) -> str:
        return next(it)

    return read_line


@pytest.mark.parametrize("text,expected", [
    ("5", 5), (" 7\n", 7), ("0", 0), ("abc", INVALID_PLACEMENT), ("", INVALID_PLACEMENT), ("3.5", INVALID_PLACEMENT),
])
def test_parse_placement(text: str, expected: int):
    assert parse_placement(text) == expected


def test_parse_moves():
    assert parse_moves("1, 4,x,,9") == [1, 4, INVALID_PLACEMENT, 9]


def test_play_loop_keeps_state_on_bad_input():
    out: List[str] = []
    state = play_loop(_feeder(["1", "1", "x", "4", "2", "5", "3"]), out.append)
    assert state.outcome is GameOutcome.FIRST_WINS
    text = "".join(out)
    assert "Move 1 rejected: cell already occupied" in text
    assert f"Move {INVALID_PLACEMENT} rejected: placement out of range" in text
    assert text.rstrip().endswith("Current Player: O")
    assert "\x1b[2J" not in text


def test_play_loop_clears_screen_when_asked():
    out: List[str] = []
    play_loop(_feeder(["1", "2", "3", "4", "5", "7", "6", "9", "8"]), out.append, clear=True)
    assert out[0] == "\033[2J\033[H"
    assert "State: Draw!" in out[-1]


def test_main_play_with_stdin(monkeypatch, capsys):
    feed = _feeder(["1", "4", "2", "5", "3"])
    monkeypatch.setattr("builtins.input", feed)
    assert main(["--no-color", "play", "--no-clear"]) == 0
    assert "X Wins!!" in capsys.readouterr().out


def test_main_play_eof(monkeypatch):
    def closed(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", closed)
    assert main(["--no-color", "play", "--no-clear"]) == 1


def test_main_replay(capsys):
    assert main(["--no-color", "replay", "--moves", "1,4,2,5,3"]) == 0
    assert "State: X Wins!!" in capsys.readouterr().out


def test_main_replay_skips_rejected_moves(capsys, caplog):
    assert main(["--no-color", "replay", "--moves", "1,1,10,2,3"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == " X | O | X "
    assert "cell already occupied" in caplog.text
    assert "placement out of range" in caplog.text


def test_main_replay_strict_fails(caplog):
    assert main(["replay", "--strict", "--moves", "1,1"]) == 2
    assert "move 2 (1): cell already occupied" in caplog.text


def test_main_show(capsys, monkeypatch):
    monkeypatch.setenv("TTT_NO_COLOR", "1")
    assert main(["show", "--board", "120120100"]) == 0
    out = capsys.readouterr().out
    assert "State: X Wins!!" in out
    assert "\x1b[" not in out


@pytest.mark.parametrize("bad", ["abc", "12", "1200000003"])
def test_main_show_invalid_board(bad: str):
    assert main(["show", "--board", bad]) == 2


def _run_cli(args: List[str], cwd: Path) -> subprocess.CompletedProcess:
    exe = [sys.executable, "-m", "bitboard_ttt.cli"]
    return subprocess.run(exe + args, cwd=cwd, capture_output=True, text=True)


def test_cli_subprocess_replay_and_help(tmp_path: Path):
    r = _run_cli(["--no-color", "replay", "--moves", "1,2,3,4,5,7,6,9,8"], cwd=tmp_path)
    assert r.returncode == 0
    assert "State: Draw!" in r.stdout
    for args in (["--help"], ["play", "--help"], ["replay", "--help"], ["show", "--help"]):
        r = _run_cli(args, cwd=tmp_path)
        assert r.returncode == 0
    r = _run_cli(["show", "--board", "xyz"], cwd=tmp_path)
    assert r.returncode == 2


def test_no_ansi_codes_when_stdout_is_not_a_terminal(monkeypatch, capsys):
    monkeypatch.delenv("TTT_NO_COLOR", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert main(["replay", "--moves", "1,4,2,5,3"]) == 0
    assert "\x1b[" not in capsys.readouterr().out


def test_play_does_not_clear_when_stdout_is_not_a_terminal(monkeypatch, capsys):
    monkeypatch.delenv("TTT_NO_CLEAR", raising=False)
    monkeypatch.setattr("builtins.input", _feeder(["1", "4", "2", "5", "3"]))
    assert main(["play"]) == 0
    out = capsys.readouterr().out
    assert "\x1b[2J" not in out
    assert "X Wins!!" in out


def test_windows_console_fixed_even_without_color(monkeypatch):
    import colorama

    calls: List[int] = []
    monkeypatch.setattr(colorama, "just_fix_windows_console", lambda: calls.append(1))
    assert main(["--no-color", "show", "--board", "000000000"]) == 0
    assert calls == [1]
