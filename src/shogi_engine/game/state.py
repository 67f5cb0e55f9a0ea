"""Game controller for 本将棋.

対局の進行を管理する。盤面（Board）への指し手の確定・手番交代・終局判定を行う。

終局条件:
1. 玉を取った: 取った側の勝ち（王手・詰みの判定はしない簡略ルール）
2. 投了: 投了した側の負け
"""

from __future__ import annotations

from collections.abc import Callable

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import (
    Move,
    generate_legal_moves,
    get_droppable_cells,
    get_movable_cells,
    make_move,
)
from shogi_engine.game.types import PieceType, Player


class IllegalMoveError(ValueError):
    """The move is not legal in the current position."""


class GameOverError(RuntimeError):
    """A move was submitted after the game ended."""


TurnListener = Callable[["ShogiGame"], None]


class ShogiGame:
    """One game of 本将棋 between two sides.

    盤面は1局を通して同じ Board を書き換える。reset() で初期局面に戻る。
    手番交代のたびに登録されたリスナー（画面更新など）を呼び出す。
    """

    def __init__(self, board: Board | None = None) -> None:
        self.board = board if board is not None else Board()
        self.winner: Player | None = None
        self.resigned = False
        self.history: list[Move] = []
        self._listeners: list[TurnListener] = []

    @property
    def current_turn(self) -> Player:
        return self.board.current_turn

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def add_listener(self, listener: TurnListener) -> None:
        """手番交代・終局時に呼ばれるコールバックを登録する。"""
        self._listeners.append(listener)

    def legal_moves(self) -> list[Move]:
        """手番側の合法手。終局後は空リスト。"""
        if self.is_over:
            return []
        return generate_legal_moves(self.board, self.current_turn)

    def movable_cells(self, row: int, col: int) -> list[tuple[int, int]]:
        """手番側の駒 (row, col) が動けるマス。手番側の駒でなければ空リスト。"""
        piece = self.board.piece_at(row, col)
        if self.is_over or piece is None or piece.owner != self.current_turn:
            return []
        return get_movable_cells(self.board, row, col, piece)

    def droppable_cells(self, piece_type: PieceType) -> list[tuple[int, int]]:
        """手番側が持ち駒 piece_type を打てるマス。持っていなければ空リスト。"""
        if self.is_over or self.board.hands[self.current_turn].get(piece_type, 0) <= 0:
            return []
        return get_droppable_cells(self.board, piece_type, self.current_turn)

    def apply_move(self, move: Move) -> Piece | None:
        """Commit a move for the side to move and return the captured piece.

        玉を取ったら即座に終局し、手番は交代しない。
        """
        if self.is_over:
            msg = "The game is already over"
            raise GameOverError(msg)

        if move.resign:
            self.resign()
            return None

        if move not in self.legal_moves():
            msg = f"Illegal move: {move}"
            raise IllegalMoveError(msg)

        captured = make_move(self.board, move)
        self.history.append(move)

        if captured is not None and captured.piece_type == PieceType.KING:
            self.winner = self.current_turn
            self._notify()
            return captured

        self.switch_turn()
        return captured

    def resign(self, player: Player | None = None) -> None:
        """Resign on behalf of player (default: the side to move).

        思考中の相手に対しても投了できるよう、投了する側を指定できる。
        """
        if self.is_over:
            msg = "The game is already over"
            raise GameOverError(msg)
        loser = self.current_turn if player is None else Player(player)
        self.resigned = True
        self.history.append(Move.resignation())
        self.winner = loser.opponent
        self._notify()

    def switch_turn(self) -> None:
        """Flip the side to move and refresh listeners.

        探索はこのメソッドを使わず Board.turn_as() で手番を一時的に切り替える。
        """
        self.board.current_turn = self.current_turn.opponent
        self._notify()

    def reset(self) -> None:
        """初期局面から指し直す。"""
        self.board = Board()
        self.winner = None
        self.resigned = False
        self.history = []
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)
