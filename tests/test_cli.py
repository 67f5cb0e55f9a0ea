"""Tests for the command-line front end."""

from __future__ import annotations

import pytest

from shogi_engine import cli


def _feed(monkeypatch: pytest.MonkeyPatch, *answers: str) -> None:
    replies = iter(answers)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(replies)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


def test_resign_ends_game(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _feed(monkeypatch, "hello", "99", "r")
    cli.main(["--difficulty", "beginner", "--side", "first"])
    out = capsys.readouterr().out
    assert "Enter a number." in out
    assert "Invalid: choose 0-29" in out
    assert "AI wins!" in out


def test_eof_aborts(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _feed(monkeypatch)
    cli.main([])
    assert "Game aborted." in capsys.readouterr().out


def test_rejects_unknown_difficulty() -> None:
    with pytest.raises(SystemExit):
        cli.main(["--difficulty", "grandmaster"])


def test_no_legal_moves_resigns(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    _feed(monkeypatch)
    monkeypatch.setattr(cli.ShogiGame, "legal_moves", lambda self: [])
    cli.main(["--side", "first"])
    out = capsys.readouterr().out
    assert "No legal moves: you resign." in out
    assert "Game aborted." not in out
    assert "AI wins!" in out
