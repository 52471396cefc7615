from __future__ import annotations

import pytest

from scripts.play_console import _read_answer, main


def test_read_answer_retries_until_number(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    answers = iter(["abc", "inf", "nan", " 3,5 "])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))

    assert _read_answer("Q1: 7 ÷ 2 = ") == 3.5
    assert capsys.readouterr().out.count("Please enter a number.") == 3


def test_main_plays_games_and_prints_leaderboard(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    prompts: list[str] = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        return "10"

    monkeypatch.setattr("builtins.input", fake_input)

    exit_code = main(["--username", "Ann", "--difficulty", "Beginner", "--games", "2", "--seed", "7"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert len(prompts) == 10
    assert prompts[0].startswith("Q1: ")
    assert output.count("Total score:") == 2
    assert "Leaderboard: Beginner" in output
    assert "  1. Ann" in output
    assert "  2. Ann" in output


def test_main_exits_cleanly_on_eof(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def closed_input(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", closed_input)

    assert main(["--username", "Ann", "--difficulty", "Novice"]) == 130
    assert "bye" in capsys.readouterr().out
