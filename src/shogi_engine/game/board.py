"""Board representation for 本将棋 (9x9).

9×9盤の盤面データ構造。探索で make/undo を繰り返すため、
盤面はミュータブルで、変更メソッドはその場で書き換える。
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from shogi_engine.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    ROWS,
    PieceType,
    Player,
)

# 後段の並び（左から）: 香桂銀金王金銀桂香
_BACK_RANK = (
    PieceType.LANCE, PieceType.KNIGHT, PieceType.SILVER,
    PieceType.GOLD, PieceType.KING, PieceType.GOLD,
    PieceType.SILVER, PieceType.KNIGHT, PieceType.LANCE,
)


@dataclass
class Piece:
    """A piece on the board.

    盤面上の駒。成ると promoted がその場で True になる。
    """

    piece_type: PieceType
    owner: Player
    promoted: bool = False


Grid = list[list[Piece | None]]
Hands = dict[Player, dict[PieceType, int]]


def _initial_grid() -> Grid:
    """Return the standard starting position (平手).

    Row 0 = 後手の後段（上端）、Row 8 = 先手の後段（下端）。
    """
    grid: Grid = [[None] * COLS for _ in range(ROWS)]

    for c, pt in enumerate(_BACK_RANK):
        grid[0][c] = Piece(pt, Player.SECOND)
        grid[8][c] = Piece(pt, Player.FIRST)

    # 後手の飛角（飛車=左、角行=右）と先手の飛角（鏡像）
    grid[1][1] = Piece(PieceType.ROOK, Player.SECOND)
    grid[1][7] = Piece(PieceType.BISHOP, Player.SECOND)
    grid[7][1] = Piece(PieceType.BISHOP, Player.FIRST)
    grid[7][7] = Piece(PieceType.ROOK, Player.FIRST)

    for c in range(COLS):
        grid[2][c] = Piece(PieceType.PAWN, Player.SECOND)
        grid[6][c] = Piece(PieceType.PAWN, Player.FIRST)

    return grid


def _empty_hands() -> Hands:
    return {Player.FIRST: {}, Player.SECOND: {}}


@dataclass
class Board:
    """Mutable board state for 9x9 本将棋.

    grid:          9×9 の二次元リスト。grid[row][col] に駒または None。
    hands:         持ち駒。hands[player][piece_type] = 枚数（0枚の項目は持たない）。
    current_turn:  現在の手番。

    dataclass の等価比較は盤面・持ち駒・手番の深い比較になる。
    """

    grid: Grid = field(default_factory=_initial_grid)
    hands: Hands = field(default_factory=_empty_hands)
    current_turn: Player = Player.FIRST

    @classmethod
    def empty(cls, current_turn: Player = Player.FIRST) -> Board:
        """駒が1枚もない盤面を返す（テスト・局面作成用）。"""
        return cls(
            grid=[[None] * COLS for _ in range(ROWS)],
            hands=_empty_hands(),
            current_turn=current_turn,
        )

    @classmethod
    def from_pieces(
        cls,
        pieces: Iterable[tuple[Any, ...]],
        hands: Hands | None = None,
        current_turn: Player = Player.FIRST,
    ) -> Board:
        """Build a board from (row, col, piece_type, owner[, promoted]) tuples.

        盤面を明示的な駒リストから作る。指定のない玉は置かないので、
        玉のない局面も作れる。
        """
        board = cls.empty(current_turn)
        for row, col, pt, owner, *rest in pieces:
            promoted = bool(rest[0]) if rest else False
            board.set_piece(row, col, Piece(pt, owner, promoted))
        for player, hand in (hands or {}).items():
            for pt, count in hand.items():
                for _ in range(count):
                    board.add_to_hand(player, pt)
        return board

    def piece_at(self, row: int, col: int) -> Piece | None:
        """マス(row, col)の駒を返す。駒がなければ None。"""
        return self.grid[row][col]

    def set_piece(self, row: int, col: int, piece: Piece | None) -> None:
        """マス(row, col)に駒を置く（None で空にする）。"""
        self.grid[row][col] = piece

    def add_to_hand(self, player: Player, piece_type: PieceType) -> None:
        """持ち駒に1枚加える。"""
        if piece_type not in HAND_PIECE_TYPES:
            msg = f"{piece_type.name} cannot be held in hand"
            raise ValueError(msg)
        hand = self.hands[player]
        hand[piece_type] = hand.get(piece_type, 0) + 1

    def remove_from_hand(self, player: Player, piece_type: PieceType) -> None:
        """持ち駒から1枚取り除く。0枚になった項目は削除する。"""
        hand = self.hands[player]
        count = hand.get(piece_type, 0)
        if count <= 0:
            msg = f"{player.name} has no {piece_type.name} in hand"
            raise ValueError(msg)
        if count == 1:
            del hand[piece_type]
        else:
            hand[piece_type] = count - 1

    def get_hand(self, player: Player) -> dict[PieceType, int]:
        """持ち駒のコピーを返す。"""
        return dict(self.hands[player])

    def find_king(self, player: Player) -> tuple[int, int] | None:
        """プレイヤーの玉の位置 (row, col) を返す。玉がなければ None。"""
        for row in range(ROWS):
            for col in range(COLS):
                piece = self.grid[row][col]
                if (
                    piece is not None
                    and piece.piece_type == PieceType.KING
                    and piece.owner == player
                ):
                    return row, col
        return None

    def pieces_of(self, player: Player) -> Iterator[tuple[int, int, Piece]]:
        """プレイヤーの盤上の駒を (row, col, piece) で行優先に列挙する。"""
        for row in range(ROWS):
            for col in range(COLS):
                piece = self.grid[row][col]
                if piece is not None and piece.owner == player:
                    yield row, col, piece

    def has_unpromoted_pawn_in_column(self, player: Player, col: int) -> bool:
        """Check for an unpromoted pawn of player in a column (for 二歩).

        指定列にプレイヤーの未成の歩があれば True。と金は数えない。
        """
        for row in range(ROWS):
            piece = self.grid[row][col]
            if (
                piece is not None
                and piece.owner == player
                and piece.piece_type == PieceType.PAWN
                and not piece.promoted
            ):
                return True
        return False

    def count_pieces(self) -> int:
        """盤上の駒と持ち駒の合計枚数。"""
        on_board = sum(piece is not None for line in self.grid for piece in line)
        in_hands = sum(sum(hand.values()) for hand in self.hands.values())
        return on_board + in_hands

    def copy(self) -> Board:
        """盤面の深いコピーを返す（探索を別スレッドで走らせる際に使用）。"""
        return copy.deepcopy(self)

    @contextmanager
    def turn_as(self, player: Player) -> Iterator[Board]:
        """Temporarily hand the move to player.

        探索中だけ手番を書き換え、抜けるときは例外・枝刈りを含めて
        必ず元の手番に戻す。
        """
        saved = self.current_turn
        self.current_turn = player
        try:
            yield self
        finally:
            self.current_turn = saved
