"""Types and constants for 本将棋 (9x9).

本将棋の基本型・定数定義（駒・手番・駒の動きのカタログ）。
盤面を持たない純粋なデータと関数だけを置く。
"""

from __future__ import annotations

from enum import IntEnum, unique
from typing import NamedTuple

ROWS = 9
COLS = 9

# 敵陣の段数（成れる範囲）
PROMOTION_ZONE_DEPTH = 3


@unique
class Player(IntEnum):
    """Player identifiers.

    先手（FIRST）は下側から上に向かって進む（row 8 → row 0）。
    後手（SECOND）は上側から下に向かって進む（row 0 → row 8）。
    """

    FIRST = 0   # 先手
    SECOND = 1  # 後手

    @property
    def opponent(self) -> Player:
        """相手プレイヤーを返す。"""
        return Player(1 - self.value)


@unique
class PieceType(IntEnum):
    """Piece types in 本将棋（8種類）.

    成りは駒種ではなく Piece.promoted フラグで表す。
    """

    KING = 0    # 玉/王
    ROOK = 1    # 飛
    BISHOP = 2  # 角
    GOLD = 3    # 金
    SILVER = 4  # 銀
    KNIGHT = 5  # 桂
    LANCE = 6   # 香
    PAWN = 7    # 歩


class Geometry(NamedTuple):
    """One move direction of a piece.

    dr, dc は先手視点の方向。slide=True なら同方向に何マスでも進める（飛・角・香）。
    """

    dr: int
    dc: int
    slide: bool = False


# 先手視点の方向（前 = 行インデックス減少方向）
UP = (-1, 0)
DOWN = (1, 0)
LEFT = (0, -1)
RIGHT = (0, 1)
UP_LEFT = (-1, -1)
UP_RIGHT = (-1, 1)
DOWN_LEFT = (1, -1)
DOWN_RIGHT = (1, 1)
KNIGHT_LEFT = (-2, -1)
KNIGHT_RIGHT = (-2, 1)

ORTHOGONALS = (UP, DOWN, LEFT, RIGHT)
DIAGONALS = (UP_LEFT, UP_RIGHT, DOWN_LEFT, DOWN_RIGHT)


def _steps(*directions: tuple[int, int]) -> tuple[Geometry, ...]:
    return tuple(Geometry(dr, dc) for dr, dc in directions)


def _slides(*directions: tuple[int, int]) -> tuple[Geometry, ...]:
    return tuple(Geometry(dr, dc, slide=True) for dr, dc in directions)


_GOLD_STEPS = _steps(UP, DOWN, LEFT, RIGHT, UP_LEFT, UP_RIGHT)

# 未成駒の動き
MOVE_PATTERNS: dict[PieceType, tuple[Geometry, ...]] = {
    PieceType.KING: _steps(*ORTHOGONALS, *DIAGONALS),             # 王: 全8方向1マス
    PieceType.ROOK: _slides(*ORTHOGONALS),                        # 飛: 縦横に何マスでも
    PieceType.BISHOP: _slides(*DIAGONALS),                        # 角: 斜めに何マスでも
    PieceType.GOLD: _GOLD_STEPS,                                  # 金: 6方向
    PieceType.SILVER: _steps(UP, UP_LEFT, UP_RIGHT, DOWN_LEFT, DOWN_RIGHT),  # 銀: 前3方向+斜め後
    PieceType.KNIGHT: _steps(KNIGHT_LEFT, KNIGHT_RIGHT),          # 桂: 2マス前+左右1マス
    PieceType.LANCE: _slides(UP),                                 # 香: 前方に何マスでも
    PieceType.PAWN: _steps(UP),                                   # 歩: 1マス前のみ
}

# 成り駒の動き: 小駒は金と同じ、馬・龍は元の動き + 1マス移動
PROMOTED_MOVE_PATTERNS: dict[PieceType, tuple[Geometry, ...]] = {
    PieceType.PAWN: _GOLD_STEPS,    # と金
    PieceType.LANCE: _GOLD_STEPS,   # 成香
    PieceType.KNIGHT: _GOLD_STEPS,  # 成桂
    PieceType.SILVER: _GOLD_STEPS,  # 成銀
    PieceType.BISHOP: MOVE_PATTERNS[PieceType.BISHOP] + _steps(*ORTHOGONALS),  # 馬
    PieceType.ROOK: MOVE_PATTERNS[PieceType.ROOK] + _steps(*DIAGONALS),        # 龍
}

# 成れる駒（王と金は成れない）
PROMOTABLE_TYPES = frozenset(PROMOTED_MOVE_PATTERNS)

# 持ち駒として使える駒種（玉以外の7種）。打ち手の生成順もこの順になる
HAND_PIECE_TYPES = (
    PieceType.ROOK, PieceType.BISHOP, PieceType.GOLD, PieceType.SILVER,
    PieceType.KNIGHT, PieceType.LANCE, PieceType.PAWN,
)


def move_pattern(piece_type: PieceType, promoted: bool = False) -> tuple[Geometry, ...]:
    """駒種と成りの有無から動きのパターンを返す。"""
    if promoted:
        return PROMOTED_MOVE_PATTERNS[piece_type]
    return MOVE_PATTERNS[piece_type]


def orient(dr: int, dc: int, owner: Player) -> tuple[int, int]:
    """Return the direction as seen on the board for owner.

    方向は先手視点で定義しているので、後手の駒は行・列とも反転させる。
    """
    if owner == Player.SECOND:
        return -dr, -dc
    return dr, dc


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < ROWS and 0 <= col < COLS


def mirror_row(row: int) -> int:
    """上下反転した行を返す（先手視点のテーブルを後手に使うため）。"""
    return ROWS - 1 - row


def farthest_rank(owner: Player) -> int:
    """owner から見て最も奥の段（先手は row 0、後手は row 8）。"""
    return 0 if owner == Player.FIRST else ROWS - 1


def ranks_from_far_edge(owner: Player, row: int) -> int:
    """最奥の段からの距離（最奥 = 0）。"""
    return abs(row - farthest_rank(owner))


def in_enemy_zone(owner: Player, row: int) -> bool:
    """Check if a row is in owner's promotion zone (enemy's 3 ranks)."""
    return ranks_from_far_edge(owner, row) < PROMOTION_ZONE_DEPTH
