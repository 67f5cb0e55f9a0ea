"""Tests for the static evaluation."""

from __future__ import annotations

import pytest

from shogi_engine.engine.evaluation import (
    PIECE_VALUES,
    evaluate,
    evaluate_hand,
    evaluate_king_safety,
    evaluate_material,
    evaluate_mobility,
    piece_value,
    position_value,
)
from shogi_engine.game.board import Board, Piece
from shogi_engine.game.types import COLS, ROWS, PieceType, Player


def _rotated(board: Board) -> Board:
    """Helper: rotate the board 180° and swap colours."""
    rotated = Board.empty(board.current_turn.opponent)
    for row in range(ROWS):
        for col in range(COLS):
            piece = board.piece_at(row, col)
            if piece is not None:
                rotated.set_piece(
                    ROWS - 1 - row,
                    COLS - 1 - col,
                    Piece(piece.piece_type, piece.owner.opponent, piece.promoted),
                )
    for player in Player:
        rotated.hands[player.opponent] = dict(board.hands[player])
    return rotated


def _unbalanced() -> Board:
    return Board.from_pieces(
        [
            (8, 4, PieceType.KING, Player.FIRST),
            (7, 4, PieceType.GOLD, Player.FIRST),
            (2, 3, PieceType.SILVER, Player.FIRST, True),
            (4, 1, PieceType.KNIGHT, Player.FIRST),
            (0, 4, PieceType.KING, Player.SECOND),
            (1, 5, PieceType.GOLD, Player.SECOND),
            (5, 5, PieceType.BISHOP, Player.SECOND),
            (3, 8, PieceType.PAWN, Player.SECOND),
        ],
        hands={Player.FIRST: {PieceType.PAWN: 2}, Player.SECOND: {PieceType.ROOK: 1}},
    )


class TestTerms:
    def test_piece_values(self) -> None:
        assert piece_value(Piece(PieceType.PAWN, Player.FIRST)) == 1
        assert piece_value(Piece(PieceType.PAWN, Player.FIRST, promoted=True)) == 8
        assert piece_value(Piece(PieceType.ROOK, Player.SECOND, promoted=True)) == 17
        assert PIECE_VALUES[PieceType.KING] == 10000

    def test_position_tables_mirror_for_second(self) -> None:
        first = Piece(PieceType.PAWN, Player.FIRST)
        second = Piece(PieceType.PAWN, Player.SECOND)
        assert position_value(first, 1, 0) == 20
        assert position_value(second, 7, 0) == 20
        assert position_value(second, 1, 0) == 0

    def test_initial_material_balanced(self) -> None:
        assert evaluate_material(Board(), Player.SECOND) == pytest.approx(0.0)

    def test_initial_mobility_balanced(self) -> None:
        assert evaluate_mobility(Board(), Player.FIRST) == pytest.approx(0.0)

    def test_hand_difference(self) -> None:
        board = _unbalanced()
        # 飛1枚(12) − 歩2枚(2) に 0.8 を掛ける
        assert evaluate_hand(board, Player.SECOND) == pytest.approx((12 - 2) * 0.8)

    def test_king_safety_counts_neighbours(self) -> None:
        board = _unbalanced()
        # 先手玉の隣に金1枚（守り 5）、後手玉の隣に先手の駒なし
        assert evaluate_king_safety(board, Player.FIRST) == pytest.approx(5.0)

    def test_king_safety_zero_without_king(self) -> None:
        board = Board.from_pieces([(8, 4, PieceType.KING, Player.FIRST)])
        assert evaluate_king_safety(board, Player.FIRST) == 0.0


class TestEvaluate:
    def test_initial_position_only_king_safety(self) -> None:
        # 玉の両隣の金2枚 × 5 × 1.2。他の項目は釣り合っている
        assert evaluate(Board(), Player.SECOND) == pytest.approx(12.0)
        assert evaluate(Board(), Player.FIRST) == pytest.approx(-12.0)

    def test_extra_rook_favours_owner(self) -> None:
        board = Board()
        board.add_to_hand(Player.SECOND, PieceType.ROOK)
        assert evaluate(board, Player.SECOND) > 12.0

    def test_score_is_second_relative(self) -> None:
        """The sign flips when the AI plays first: positive still means second is ahead."""
        board = Board()
        for pt in (PieceType.ROOK, PieceType.BISHOP, PieceType.GOLD):
            board.add_to_hand(Player.SECOND, pt)
        assert evaluate(board, Player.FIRST) > 0

    def test_urgency_widens_score(self) -> None:
        board = _unbalanced()
        base = evaluate(board, Player.SECOND, depth=3, max_depth=3)
        urgent = evaluate(board, Player.SECOND, depth=0, max_depth=3)
        assert abs(urgent) == pytest.approx(abs(base) + 0.3)

    @pytest.mark.parametrize("depth", [0, 1, 2])
    def test_colour_mirror_symmetry(self, depth: int) -> None:
        """Rotating the board and swapping colours negates the score."""
        board = _unbalanced()
        mirrored = _rotated(board)
        score = evaluate(board, Player.SECOND, depth, 2)
        assert evaluate(mirrored, Player.FIRST, depth, 2) == pytest.approx(-score)

    def test_row_mirror_symmetry(self) -> None:
        """Mirroring rows only (pieces are left-right symmetric) also negates the score."""
        board = _unbalanced()
        mirrored = Board.empty()
        for row, col, piece in [*board.pieces_of(Player.FIRST), *board.pieces_of(Player.SECOND)]:
            mirrored.set_piece(
                ROWS - 1 - row, col, Piece(piece.piece_type, piece.owner.opponent, piece.promoted)
            )
        for player in Player:
            mirrored.hands[player.opponent] = dict(board.hands[player])
        score = evaluate(board, Player.SECOND, 2, 2)
        assert evaluate(mirrored, Player.FIRST, 2, 2) == pytest.approx(-score)

    def test_initial_board_symmetric_under_rotation(self) -> None:
        board = Board()
        assert _rotated(board).grid == board.grid
