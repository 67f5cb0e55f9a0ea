"""本将棋 (Shogi, 9x9) — board state, move generation and game control."""

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.display import format_board, format_move
from shogi_engine.game.moves import Move, generate_legal_moves, make_move, undo_move
from shogi_engine.game.state import GameOverError, IllegalMoveError, ShogiGame
from shogi_engine.game.types import COLS, ROWS, PieceType, Player

__all__ = [
    "Board",
    "COLS",
    "GameOverError",
    "IllegalMoveError",
    "Move",
    "Piece",
    "PieceType",
    "Player",
    "ROWS",
    "ShogiGame",
    "format_board",
    "format_move",
    "generate_legal_moves",
    "make_move",
    "undo_move",
]
