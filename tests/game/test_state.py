"""Tests for the 本将棋 game controller."""

from __future__ import annotations

import pytest

from shogi_engine.game.board import Board
from shogi_engine.game.moves import Move, generate_legal_moves
from shogi_engine.game.state import GameOverError, IllegalMoveError, ShogiGame
from shogi_engine.game.types import PieceType, Player


class TestInitialState:
    def test_first_starts(self) -> None:
        game = ShogiGame()
        assert game.current_turn == Player.FIRST

    def test_not_over(self) -> None:
        game = ShogiGame()
        assert not game.is_over
        assert game.winner is None

    def test_has_30_legal_moves(self) -> None:
        assert len(ShogiGame().legal_moves()) == 30


class TestApplyMove:
    def test_player_alternates(self) -> None:
        game = ShogiGame()
        game.apply_move(game.legal_moves()[0])
        assert game.current_turn == Player.SECOND
        assert len(game.history) == 1

    def test_illegal_move_rejected(self) -> None:
        game = ShogiGame()
        bogus = Move.board_move(6, 0, 4, 0, PieceType.PAWN, Player.FIRST)
        with pytest.raises(IllegalMoveError):
            game.apply_move(bogus)
        assert game.current_turn == Player.FIRST

    def test_opponent_move_rejected(self) -> None:
        game = ShogiGame()
        second_move = generate_legal_moves(game.board, Player.SECOND)[0]
        with pytest.raises(IllegalMoveError):
            game.apply_move(second_move)

    def test_king_capture_ends_game(self) -> None:
        board = Board.from_pieces(
            [
                (8, 4, PieceType.KING, Player.FIRST),
                (1, 4, PieceType.GOLD, Player.FIRST),
                (0, 4, PieceType.KING, Player.SECOND),
            ]
        )
        game = ShogiGame(board)
        game.apply_move(Move.board_move(1, 4, 0, 4, PieceType.GOLD, Player.FIRST))
        assert game.is_over
        assert game.winner == Player.FIRST
        assert not game.resigned
        assert game.board.get_hand(Player.FIRST) == {}
        assert game.legal_moves() == []

    def test_move_after_game_over(self) -> None:
        game = ShogiGame()
        move = game.legal_moves()[0]
        game.resign()
        with pytest.raises(GameOverError):
            game.apply_move(move)


class TestResign:
    def test_resign_loses(self) -> None:
        game = ShogiGame()
        game.resign()
        assert game.is_over
        assert game.resigned
        assert game.winner == Player.SECOND

    def test_resignation_move(self) -> None:
        game = ShogiGame()
        game.apply_move(game.legal_moves()[0])
        game.apply_move(Move.resignation())
        assert game.winner == Player.FIRST
        assert game.history[-1].resign

    def test_resign_out_of_turn(self) -> None:
        """The player waiting on the opponent can resign; the opponent wins."""
        game = ShogiGame()
        game.apply_move(game.legal_moves()[0])
        assert game.current_turn == Player.SECOND
        game.resign(Player.FIRST)
        assert game.winner == Player.SECOND
        assert game.history[-1].resign

    def test_resign_twice(self) -> None:
        game = ShogiGame()
        game.resign()
        with pytest.raises(GameOverError):
            game.resign()


class TestListenersAndQueries:
    def test_listener_called_on_turn_switch(self) -> None:
        game = ShogiGame()
        seen: list[Player] = []
        game.add_listener(lambda g: seen.append(g.current_turn))
        game.apply_move(game.legal_moves()[0])
        game.apply_move(game.legal_moves()[0])
        assert seen == [Player.SECOND, Player.FIRST]

    def test_movable_cells_only_for_side_to_move(self) -> None:
        game = ShogiGame()
        assert game.movable_cells(6, 2) == [(5, 2)]
        assert game.movable_cells(2, 2) == []  # 後手の歩
        assert game.movable_cells(4, 4) == []  # 空きマス

    def test_droppable_cells_needs_piece_in_hand(self) -> None:
        game = ShogiGame()
        assert game.droppable_cells(PieceType.GOLD) == []
        game.board.add_to_hand(Player.FIRST, PieceType.GOLD)
        assert len(game.droppable_cells(PieceType.GOLD)) == 81 - 40

    def test_reset(self) -> None:
        game = ShogiGame()
        game.apply_move(game.legal_moves()[0])
        game.resign()
        game.reset()
        assert not game.is_over
        assert game.history == []
        assert game.board == Board()
