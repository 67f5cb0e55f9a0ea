"""Static evaluation for 本将棋.

局面の静的評価関数。以下の項目の重み付き和で評価する。

  項目              重み
  駒得 + 駒の位置    1.0
  攻撃力            0.8
  機動力（合法手数）  0.5
  玉の安全度         1.2
  持ち駒            0.7

各項目は AI 側から見た値（AI に有利なら正）で計算し、最後に AI が先手なら符号を
反転する。つまり evaluate() の戻り値は常に「後手から見た評価値」になる。
"""

from __future__ import annotations

from shogi_engine.game.board import Board, Piece
from shogi_engine.game.moves import generate_legal_moves, get_movable_cells
from shogi_engine.game.types import COLS, ROWS, PieceType, Player, mirror_row

# 駒の価値（歩=1とした相対値）
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.LANCE: 5,
    PieceType.KNIGHT: 5,
    PieceType.SILVER: 7,
    PieceType.GOLD: 8,
    PieceType.BISHOP: 10,
    PieceType.ROOK: 12,
    PieceType.KING: 10000,  # 玉を取られたら負けなので圧倒的に高い値
}

# 成り駒の価値
PROMOTED_PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 8,     # と金
    PieceType.LANCE: 8,    # 成香
    PieceType.KNIGHT: 8,   # 成桂
    PieceType.SILVER: 8,   # 成銀
    PieceType.BISHOP: 14,  # 馬
    PieceType.ROOK: 17,    # 龍
}

# 位置評価テーブル（先手視点: row 0 が敵陣の最奥）。後手の駒は mirror_row() で引く
POSITION_VALUES: dict[PieceType, tuple[tuple[int, ...], ...]] = {
    PieceType.PAWN: (
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (20, 20, 20, 20, 20, 20, 20, 20, 20),
        (15, 15, 15, 15, 15, 15, 15, 15, 15),
        (10, 10, 10, 10, 10, 10, 10, 10, 10),
        (5, 5, 5, 5, 5, 5, 5, 5, 5),
        (2, 2, 2, 2, 2, 2, 2, 2, 2),
        (1, 1, 1, 1, 1, 1, 1, 1, 1),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    # 香: 前方への進出
    PieceType.LANCE: (
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (15, 15, 15, 15, 15, 15, 15, 15, 15),
        (10, 10, 10, 10, 10, 10, 10, 10, 10),
        (8, 8, 8, 8, 8, 8, 8, 8, 8),
        (5, 5, 5, 5, 5, 5, 5, 5, 5),
        (3, 3, 3, 3, 3, 3, 3, 3, 3),
        (2, 2, 2, 2, 2, 2, 2, 2, 2),
        (1, 1, 1, 1, 1, 1, 1, 1, 1),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    # 桂: 前方への進出
    PieceType.KNIGHT: (
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (15, 18, 20, 20, 20, 20, 20, 18, 15),
        (12, 15, 18, 18, 18, 18, 18, 15, 12),
        (8, 10, 12, 12, 15, 12, 12, 10, 8),
        (5, 8, 10, 10, 10, 10, 10, 8, 5),
        (3, 5, 8, 8, 8, 8, 8, 5, 3),
        (2, 2, 3, 3, 5, 3, 3, 2, 2),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    # 銀: 中央寄り
    PieceType.SILVER: (
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (10, 12, 15, 15, 15, 15, 15, 12, 10),
        (8, 10, 12, 12, 12, 12, 12, 10, 8),
        (5, 8, 10, 10, 10, 10, 10, 8, 5),
        (3, 5, 8, 8, 8, 8, 8, 5, 3),
        (2, 3, 5, 5, 5, 5, 5, 3, 2),
        (1, 2, 3, 3, 3, 3, 3, 2, 1),
        (0, 1, 2, 2, 2, 2, 2, 1, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    # 金: 敵陣での働き
    PieceType.GOLD: (
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (15, 18, 20, 20, 20, 20, 20, 18, 15),
        (12, 15, 18, 18, 18, 18, 18, 15, 12),
        (10, 12, 15, 15, 15, 15, 15, 12, 10),
        (5, 8, 10, 10, 10, 10, 10, 8, 5),
        (3, 5, 8, 8, 8, 8, 8, 5, 3),
        (2, 3, 5, 5, 5, 5, 5, 3, 2),
        (1, 2, 3, 3, 3, 3, 3, 2, 1),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    # 角: 中央からの働き
    PieceType.BISHOP: (
        (5, 5, 5, 5, 5, 5, 5, 5, 5),
        (5, 8, 8, 8, 8, 8, 8, 8, 5),
        (5, 8, 10, 10, 10, 10, 10, 8, 5),
        (5, 8, 10, 12, 12, 12, 10, 8, 5),
        (5, 8, 10, 12, 15, 12, 10, 8, 5),
        (5, 8, 10, 12, 12, 12, 10, 8, 5),
        (5, 8, 10, 10, 10, 10, 10, 8, 5),
        (5, 8, 8, 8, 8, 8, 8, 8, 5),
        (5, 5, 5, 5, 5, 5, 5, 5, 5),
    ),
    # 飛: 中央からの働き
    PieceType.ROOK: (
        (5, 5, 5, 8, 8, 8, 5, 5, 5),
        (5, 5, 5, 8, 10, 8, 5, 5, 5),
        (5, 5, 5, 8, 10, 8, 5, 5, 5),
        (8, 8, 8, 10, 12, 10, 8, 8, 8),
        (8, 10, 10, 12, 15, 12, 10, 10, 8),
        (8, 8, 8, 10, 12, 10, 8, 8, 8),
        (5, 5, 5, 8, 10, 8, 5, 5, 5),
        (5, 5, 5, 8, 10, 8, 5, 5, 5),
        (5, 5, 5, 8, 8, 8, 5, 5, 5),
    ),
    # 玉: 自陣の隅寄りを評価（安全性重視）
    PieceType.KING: (
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (0, 0, 0, 0, 0, 0, 0, 0, 0),
        (1, 1, 1, 0, 0, 0, 1, 1, 1),
        (3, 5, 5, 0, 0, 0, 5, 5, 3),
        (5, 10, 15, 0, 0, 0, 15, 10, 5),
    ),
}

MATERIAL_WEIGHT = 1.0
ATTACK_WEIGHT = 0.8
MOBILITY_WEIGHT = 0.5
KING_SAFETY_WEIGHT = 1.2
HAND_WEIGHT = 0.7

POSITION_SCALE = 0.1
ATTACK_SCALE = 0.1
MOBILITY_SCALE = 0.1
HAND_SCALE = 0.8  # 持ち駒は盤上の駒より価値を低く見る
DEFENDER_BONUS = 5
ATTACKER_BONUS = 3
DEPTH_BONUS = 0.1


def piece_value(piece: Piece) -> int:
    """駒の価値（成り駒なら成り駒の価値）。"""
    if piece.promoted:
        return PROMOTED_PIECE_VALUES[piece.piece_type]
    return PIECE_VALUES[piece.piece_type]


def position_value(piece: Piece, row: int, col: int) -> int:
    """位置評価テーブルの値。テーブルは先手視点なので後手の駒は上下反転して引く。"""
    table = POSITION_VALUES[piece.piece_type]
    if piece.owner == Player.SECOND:
        row = mirror_row(row)
    return table[row][col]


def evaluate_material(board: Board, ai_player: Player) -> float:
    """駒の価値 + 位置評価 × 0.1。AI の駒は加算、相手の駒は減算。"""
    score = 0.0
    for row in range(ROWS):
        for col in range(COLS):
            piece = board.grid[row][col]
            if piece is None:
                continue
            value = piece_value(piece) + position_value(piece, row, col) * POSITION_SCALE
            score += value if piece.owner == ai_player else -value
    return score


def evaluate_attack_potential(board: Board, ai_player: Player) -> float:
    """AI の駒が取れる位置にある相手の駒の価値 × 0.1 の合計。"""
    score = 0.0
    for row, col, piece in board.pieces_of(ai_player):
        for to_row, to_col in get_movable_cells(board, row, col, piece):
            target = board.grid[to_row][to_col]
            if target is not None and target.owner != ai_player:
                score += piece_value(target) * ATTACK_SCALE
    return score


def evaluate_mobility(board: Board, ai_player: Player) -> float:
    """(AI の合法手数 − 相手の合法手数) × 0.1。"""
    ai_moves = len(generate_legal_moves(board, ai_player))
    opponent_moves = len(generate_legal_moves(board, ai_player.opponent))
    return (ai_moves - opponent_moves) * MOBILITY_SCALE


def _neighbours_owned_by(board: Board, center: tuple[int, int], owner: Player) -> int:
    """center の周囲8マスにある owner の駒の数。"""
    king_row, king_col = center
    count = 0
    for row in range(max(0, king_row - 1), min(ROWS - 1, king_row + 1) + 1):
        for col in range(max(0, king_col - 1), min(COLS - 1, king_col + 1) + 1):
            if (row, col) == center:
                continue
            piece = board.grid[row][col]
            if piece is not None and piece.owner == owner:
                count += 1
    return count


def evaluate_king_safety(board: Board, ai_player: Player) -> float:
    """自玉の周りの守り駒 × 5 + 相手玉の周りの攻め駒 × 3。どちらかの玉がなければ 0。"""
    ai_king = board.find_king(ai_player)
    opponent_king = board.find_king(ai_player.opponent)
    if ai_king is None or opponent_king is None:
        return 0.0
    defenders = _neighbours_owned_by(board, ai_king, ai_player)
    attackers = _neighbours_owned_by(board, opponent_king, ai_player)
    return float(defenders * DEFENDER_BONUS + attackers * ATTACKER_BONUS)


def evaluate_hand(board: Board, ai_player: Player) -> float:
    """持ち駒の価値 × 0.8 の差（AI − 相手）。"""
    score = 0.0
    for pt, count in board.hands[ai_player].items():
        score += PIECE_VALUES[pt] * count * HAND_SCALE
    for pt, count in board.hands[ai_player.opponent].items():
        score -= PIECE_VALUES[pt] * count * HAND_SCALE
    return score


def evaluate(board: Board, ai_player: Player, depth: int = 0, max_depth: int = 0) -> float:
    """Evaluate a position (second-relative score).

    局面を評価する。AI 視点で各項目を合計し、深さボーナスを加えた後、
    AI が先手なら符号を反転する。

    深さボーナス: 有利なら (max_depth − depth) × 0.1 を加えて早い勝ちを、
    不利なら同じだけ引いて遅い負けを好む。depth == max_depth なら 0。
    """
    score = evaluate_material(board, ai_player) * MATERIAL_WEIGHT
    score += evaluate_attack_potential(board, ai_player) * ATTACK_WEIGHT
    score += evaluate_mobility(board, ai_player) * MOBILITY_WEIGHT
    score += evaluate_king_safety(board, ai_player) * KING_SAFETY_WEIGHT
    score += evaluate_hand(board, ai_player) * HAND_WEIGHT

    if score > 0:
        score += (max_depth - depth) * DEPTH_BONUS
    elif score < 0:
        score -= (max_depth - depth) * DEPTH_BONUS

    if ai_player == Player.FIRST:
        score = -score
    return score
