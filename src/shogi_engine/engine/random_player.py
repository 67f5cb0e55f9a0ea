"""Random player: selects a legal move uniformly at random.

ランダムプレイヤー: 合法手の中からランダムに手を選ぶ。

用途:
- 探索が制限時間を超えた・失敗したときの代わりの手
- ルール実装の動作確認（ランダム同士の対局が最後まで進むか）
"""

from __future__ import annotations

import random

from shogi_engine.game.board import Board
from shogi_engine.game.moves import Move, generate_legal_moves
from shogi_engine.game.types import Player


def random_move(board: Board, player: Player | None = None, rng: random.Random | None = None) -> Move:
    """Return a random legal move for player (default: the side to move).

    合法手がない場合は ValueError を送出する。
    """
    moves = generate_legal_moves(board, player)
    if not moves:
        raise ValueError("No legal moves available")
    return (rng or random).choice(moves)  # 一様ランダムサンプリング
