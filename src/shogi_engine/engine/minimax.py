"""Minimax search with alpha-beta pruning for 本将棋.

盤面を make_move / undo_move でその場で書き換えながら探索する（盤面のコピーを作らない）。
手番は Board.turn_as() で一時的に切り替え、枝刈り・例外を含むどの経路でも元に戻す。
"""

from __future__ import annotations

import logging
import math
import random

from shogi_engine.engine.config import DEFAULT_AI_CONFIG, AIConfig, Difficulty
from shogi_engine.engine.evaluation import evaluate
from shogi_engine.game.board import Board
from shogi_engine.game.moves import (
    Move,
    can_promote,
    generate_legal_moves,
    is_capture,
    make_move,
    undo_move,
)
from shogi_engine.game.types import Player

logger = logging.getLogger(__name__)

# 合法手がない局面（この簡略ルールでの詰み）の評価値
MATE_SCORE = 9999.0
# 末端の1手前でこの数を超える合法手があれば、駒を取る手・成れる手だけを読む
QUIESCENCE_MOVE_THRESHOLD = 5


class MinimaxSearch:
    """Fixed-depth alpha-beta minimax from the AI's point of view.

    ミニマックス法 + αβ枝刈り。AI の手番で最大化、相手の手番で最小化する。

    αβ枝刈りとは:
    alpha: 最大化側が保証できる最低スコア
    beta:  最小化側が保証できる最高スコア
    beta <= alpha になった枝は、もう一方が選ばないので読みを打ち切る。
    """

    def __init__(
        self,
        board: Board,
        ai_player: Player = Player.SECOND,
        max_depth: int = 3,
        random_move_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self.board = board
        self.ai_player = ai_player
        self.max_depth = max_depth
        self.random_move_rate = random_move_rate
        self.rng = rng if rng is not None else random.Random()
        self.nodes = 0
        self.last_score: float | None = None

    @classmethod
    def for_difficulty(
        cls,
        board: Board,
        difficulty: Difficulty,
        ai_player: Player,
        config: AIConfig = DEFAULT_AI_CONFIG,
        rng: random.Random | None = None,
    ) -> MinimaxSearch:
        """難易度から探索深さとランダム手の確率を決めて探索器を作る。"""
        return cls(
            board,
            ai_player=ai_player,
            max_depth=config.depth_for(difficulty),
            random_move_rate=config.random_move_rate_for(difficulty),
            rng=rng,
        )

    def find_best_move(self, force_move: bool = False) -> Move | None:
        """Return the best move for the AI side.

        - AI の玉が盤上にない → 投了
        - 合法手がない → force_move なら投了、そうでなければ None
        - それ以外 → 全合法手をミニマックスで評価し、最大スコアの手（同点は先の手）
        """
        if self.board.find_king(self.ai_player) is None:
            logger.info("%s king is gone, resigning", self.ai_player.name)
            return Move.resignation()

        self.nodes = 0
        with self.board.turn_as(self.ai_player):
            legal = generate_legal_moves(self.board, self.ai_player)
            if not legal:
                if force_move:
                    return Move.resignation()
                logger.error("%s has no legal moves", self.ai_player.name)
                return None

            best_move, best_score = self._search_root(legal)

        # 初級: 一定確率で最善手の代わりにランダムな手を指す
        if self.random_move_rate > 0 and self.rng.random() < self.random_move_rate:
            best_move = self.rng.choice(legal)
            logger.debug("random move override: %s", best_move)

        self.last_score = best_score
        logger.debug(
            "depth=%d nodes=%d score=%.2f move=%s",
            self.max_depth, self.nodes, best_score, best_move,
        )
        return best_move

    def _search_root(self, legal: list[Move]) -> tuple[Move, float]:
        best_move = legal[0]
        best_score = -math.inf
        for move in legal:
            captured = make_move(self.board, move)
            try:
                # 次は相手の手番なので最小化側から
                score = self.minimax(self.max_depth - 1, -math.inf, math.inf, False)
            finally:
                undo_move(self.board, move, captured)
            if score > best_score:
                best_score = score
                best_move = move
        return best_move, best_score

    def minimax(self, depth: int, alpha: float, beta: float, is_maximizing: bool) -> float:
        """Alpha-beta minimax value of the current position.

        depth == 1 で合法手が多いときは、駒を取る手と成れる手だけを静的評価して返す
        （末端での評価を安定させる簡易クイーサーチ）。
        """
        self.nodes += 1
        if depth == 0:
            return self.static_score(depth)

        side = self.ai_player if is_maximizing else self.ai_player.opponent
        with self.board.turn_as(side):
            legal = generate_legal_moves(self.board, side)

            if depth == 1 and len(legal) > QUIESCENCE_MOVE_THRESHOLD:
                noisy = [move for move in legal if self._is_noisy(move)]
                if noisy:
                    return self.evaluate_capture_moves(noisy, alpha, beta, is_maximizing)

            if not legal:
                # 合法手がない = 手番側の負け
                return -MATE_SCORE if is_maximizing else MATE_SCORE

            if is_maximizing:
                value = -math.inf
                for move in legal:
                    captured = make_move(self.board, move)
                    try:
                        score = self.minimax(depth - 1, alpha, beta, False)
                    finally:
                        undo_move(self.board, move, captured)
                    value = max(value, score)
                    alpha = max(alpha, score)
                    if beta <= alpha:
                        break  # βカット
                return value

            value = math.inf
            for move in legal:
                captured = make_move(self.board, move)
                try:
                    score = self.minimax(depth - 1, alpha, beta, True)
                finally:
                    undo_move(self.board, move, captured)
                value = min(value, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break  # αカット
            return value

    def evaluate_capture_moves(
        self,
        moves: list[Move],
        alpha: float,
        beta: float,
        is_maximizing: bool,
    ) -> float:
        """Score each noisy move by the static evaluation right after it."""
        if not moves:
            return self.static_score(0)

        value = -math.inf if is_maximizing else math.inf
        for move in moves:
            captured = make_move(self.board, move)
            try:
                score = self.static_score(0)
            finally:
                undo_move(self.board, move, captured)
            if is_maximizing:
                value = max(value, score)
                alpha = max(alpha, score)
            else:
                value = min(value, score)
                beta = min(beta, score)
            if beta <= alpha:
                break
        return value

    def static_score(self, depth: int = 0) -> float:
        """AI-relative static score.

        evaluate() は後手から見た値を返すので、AI が先手なら符号を戻して
        「AI に有利なら正」に揃える。
        """
        score = evaluate(self.board, self.ai_player, depth, self.max_depth)
        return score if self.ai_player == Player.SECOND else -score

    def _is_noisy(self, move: Move) -> bool:
        """駒を取る手、または成れる手。"""
        if is_capture(self.board, move):
            return True
        if move.is_drop:
            return False
        piece = self.board.piece_at(move.from_row, move.from_col)
        return piece is not None and can_promote(piece, move.from_row, move.to_row)
