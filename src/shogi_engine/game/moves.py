"""Legal move generation and make/undo for 本将棋.

Move shapes:
  Board move:  from (row, col) → to (row, col), optionally promoting
  Drop:        from_row = from_col = -1, piece_type from the owner's hand
  Resignation: resign=True (never applied to the board)

Capturing the King ends the game, so moves are not filtered for self-check:
every pseudo-legal move is legal here.
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    PROMOTABLE_TYPES,
    ROWS,
    PieceType,
    Player,
    in_bounds,
    in_enemy_zone,
    move_pattern,
    orient,
    ranks_from_far_edge,
)

DROP_SENTINEL = -1


@dataclass(frozen=True)
class Move:
    """A move: board move, drop, or resignation.

    指し手。盤上の移動・持ち駒打ち・投了の3種類を1つの型で表す。
    値オブジェクトなので、別の盤面（コピー）で見つけた手もそのまま適用できる。
    """

    from_row: int = DROP_SENTINEL
    from_col: int = DROP_SENTINEL
    to_row: int = DROP_SENTINEL
    to_col: int = DROP_SENTINEL
    piece_type: PieceType | None = None
    owner: Player | None = None
    promotion: bool = False
    resign: bool = False

    @classmethod
    def board_move(
        cls,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        piece_type: PieceType,
        owner: Player,
        promotion: bool = False,
    ) -> Move:
        return cls(from_row, from_col, to_row, to_col, piece_type, owner, promotion)

    @classmethod
    def drop(cls, piece_type: PieceType, to_row: int, to_col: int, owner: Player) -> Move:
        return cls(DROP_SENTINEL, DROP_SENTINEL, to_row, to_col, piece_type, owner)

    @classmethod
    def resignation(cls) -> Move:
        return cls(resign=True)

    @property
    def is_drop(self) -> bool:
        return not self.resign and self.from_row == DROP_SENTINEL


def get_movable_cells(board: Board, row: int, col: int, piece: Piece) -> list[tuple[int, int]]:
    """Return destination cells for the piece at (row, col).

    1マス移動はその先が盤内で味方の駒がなければ追加する。
    遠距離移動は最初に駒があるマスで止まり、それが相手の駒なら取る手として含める。
    """
    cells: list[tuple[int, int]] = []
    for geometry in move_pattern(piece.piece_type, piece.promoted):
        dr, dc = orient(geometry.dr, geometry.dc, piece.owner)
        nr, nc = row + dr, col + dc
        while in_bounds(nr, nc):
            target = board.grid[nr][nc]
            if target is not None and target.owner == piece.owner:
                break
            cells.append((nr, nc))
            if target is not None or not geometry.slide:
                break  # 取ったら止まる / 1マス移動
            nr, nc = nr + dr, nc + dc
    return cells


def can_promote(piece: Piece, from_row: int, to_row: int) -> bool:
    """成れるなら True。移動元か移動先が敵陣（奥3段）にあることが条件。"""
    if piece.promoted or piece.piece_type not in PROMOTABLE_TYPES:
        return False
    return in_enemy_zone(piece.owner, from_row) or in_enemy_zone(piece.owner, to_row)


def must_promote(piece_type: PieceType, owner: Player, to_row: int) -> bool:
    """Check if promotion is mandatory (piece would have no further moves).

    行き所のない駒: 歩・香は最奥の段、桂は奥2段で成らないと動けなくなる。
    """
    distance = ranks_from_far_edge(owner, to_row)
    if piece_type in (PieceType.PAWN, PieceType.LANCE):
        return distance == 0
    if piece_type == PieceType.KNIGHT:
        return distance <= 1
    return False


def can_drop_piece(board: Board, piece_type: PieceType, owner: Player, row: int, col: int) -> bool:
    """Check drop restrictions for one square (二歩・行き所のない駒).

    マスが空いていることは呼び出し側（get_droppable_cells）で確認する。
    """
    distance = ranks_from_far_edge(owner, row)
    if piece_type == PieceType.PAWN:
        # 二歩: 同じ列に自分の未成の歩があれば打てない
        if board.has_unpromoted_pawn_in_column(owner, col):
            return False
        return distance > 0
    if piece_type == PieceType.LANCE:
        return distance > 0
    if piece_type == PieceType.KNIGHT:
        return distance > 1
    return True


def get_droppable_cells(board: Board, piece_type: PieceType, owner: Player) -> list[tuple[int, int]]:
    """持ち駒を打てるマスを行優先で返す。"""
    return [
        (row, col)
        for row in range(ROWS)
        for col in range(COLS)
        if board.grid[row][col] is None and can_drop_piece(board, piece_type, owner, row, col)
    ]


def generate_legal_moves(board: Board, player: Player | None = None) -> list[Move]:
    """Generate all legal moves for player (default: the side to move).

    生成順: 盤上の駒（行優先・動きのカタログ順、成る手 → 成らない手）、
    次に打ち手（HAND_PIECE_TYPES 順・行優先）。探索の同点時はこの順で先の手が勝つ。
    """
    if player is None:
        player = board.current_turn
    moves: list[Move] = []
    _generate_board_moves(board, player, moves)
    _generate_drop_moves(board, player, moves)
    return moves


def _generate_board_moves(board: Board, player: Player, moves: list[Move]) -> None:
    for row, col, piece in board.pieces_of(player):
        pt = piece.piece_type
        for to_row, to_col in get_movable_cells(board, row, col, piece):
            if can_promote(piece, row, to_row):
                moves.append(Move.board_move(row, col, to_row, to_col, pt, player, promotion=True))
                if must_promote(pt, player, to_row):
                    continue
            moves.append(Move.board_move(row, col, to_row, to_col, pt, player))


def _generate_drop_moves(board: Board, player: Player, moves: list[Move]) -> None:
    hand = board.hands[player]
    for pt in HAND_PIECE_TYPES:
        if hand.get(pt, 0) <= 0:
            continue
        for to_row, to_col in get_droppable_cells(board, pt, player):
            moves.append(Move.drop(pt, to_row, to_col, player))


def is_capture(board: Board, move: Move) -> bool:
    """移動先に相手の駒がある手なら True（打ち手は取れない）。"""
    if move.resign or move.is_drop:
        return False
    target = board.grid[move.to_row][move.to_col]
    return target is not None and target.owner != move.owner


def make_move(board: Board, move: Move) -> Piece | None:
    """Apply move in place and return the captured piece (or None).

    取った駒は成りを戻して（基本の駒種で）自分の持ち駒に加える。
    玉は持ち駒にならない。戻り値の駒はそのまま undo_move に渡す。
    手番は変更しない（手番の交代は対局側・探索側の責任）。
    """
    if move.resign:
        msg = "A resignation cannot be applied to the board"
        raise ValueError(msg)

    if move.is_drop:
        assert move.piece_type is not None and move.owner is not None
        board.remove_from_hand(move.owner, move.piece_type)
        board.set_piece(move.to_row, move.to_col, Piece(move.piece_type, move.owner))
        return None

    piece = board.piece_at(move.from_row, move.from_col)
    if piece is None:
        msg = f"No piece at ({move.from_row}, {move.from_col})"
        raise ValueError(msg)

    captured = board.piece_at(move.to_row, move.to_col)
    if captured is not None and captured.piece_type != PieceType.KING:
        board.add_to_hand(piece.owner, captured.piece_type)

    board.set_piece(move.to_row, move.to_col, piece)
    board.set_piece(move.from_row, move.from_col, None)
    if move.promotion:
        piece.promoted = True
    return captured


def undo_move(board: Board, move: Move, captured: Piece | None) -> None:
    """Revert make_move exactly (board cells, promotion flag and hands)."""
    if move.is_drop:
        assert move.piece_type is not None and move.owner is not None
        board.set_piece(move.to_row, move.to_col, None)
        board.add_to_hand(move.owner, move.piece_type)
        return

    piece = board.piece_at(move.to_row, move.to_col)
    if piece is None:
        msg = f"No piece at ({move.to_row}, {move.to_col}) to take back"
        raise ValueError(msg)

    if move.promotion:
        piece.promoted = False
    board.set_piece(move.from_row, move.from_col, piece)
    board.set_piece(move.to_row, move.to_col, captured)
    if captured is not None and captured.piece_type != PieceType.KING:
        board.remove_from_hand(piece.owner, captured.piece_type)
