"""FastAPI web application for playing 本将棋 against the minimax AI.

FastAPI を使った将棋AI Web API。
ブラウザ（または任意のクライアント）から AI と対戦できる REST API を提供する。

エンドポイント:
  POST /api/new-game          — 新規対局を開始（ゲームIDを返す）
  GET  /api/state/{id}        — 現在の局面情報を取得
  POST /api/move              — プレイヤーが手を指す（AIが応答して次局面を返す）
  GET  /api/movable/{id}      — 盤上の駒が動けるマス
  GET  /api/droppable/{id}    — 持ち駒を打てるマス
  POST /api/resign/{id}       — プレイヤーが投了する
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from shogi_engine.engine.ai_interface import AIInterface
from shogi_engine.engine.config import DEFAULT_AI_CONFIG, AIConfig, Difficulty
from shogi_engine.game.display import format_board, format_move
from shogi_engine.game.moves import DROP_SENTINEL, Move
from shogi_engine.game.state import GameOverError, IllegalMoveError, ShogiGame
from shogi_engine.game.types import COLS, HAND_PIECE_TYPES, ROWS, PieceType, Player

logger = logging.getLogger(__name__)

app = FastAPI(title="Shogi Engine")

# 新規対局で使う AI 設定（テストでは最低思考時間なしの設定に差し替える）
AI_CONFIG: AIConfig = DEFAULT_AI_CONFIG


@dataclass
class _Session:
    game: ShogiGame
    ai: AIInterface
    human: Player


# 対局情報のインメモリストレージ（サーバ再起動で消える簡易実装）
_games: dict[str, _Session] = {}


class NewGameRequest(BaseModel):
    """新規対局リクエストのスキーマ。"""

    difficulty: Difficulty = Difficulty.BEGINNER
    player_side: str = "first"  # 人間側の手番: "first"（先手）or "second"（後手）


class MovePayload(BaseModel):
    """指し手のスキーマ。持ち駒打ちは from_row = from_col = -1 と piece_type を指定する。"""

    from_row: int = DROP_SENTINEL
    from_col: int = DROP_SENTINEL
    to_row: int
    to_col: int
    piece_type: str | None = None  # 打つ駒（"pawn" など）。盤上の移動では省略可
    promotion: bool = False


class MoveRequest(BaseModel):
    """指し手リクエストのスキーマ。"""

    game_id: str  # 対局ID（/api/new-game で取得）
    move: MovePayload


def _parse_side(name: str) -> Player:
    try:
        return Player[name.upper()]
    except KeyError:
        raise HTTPException(400, f"Unknown side: {name}") from None


def _parse_piece_type(name: str) -> PieceType:
    try:
        return PieceType[name.upper()]
    except KeyError:
        raise HTTPException(400, f"Unknown piece type: {name}") from None


def _get_session(game_id: str) -> _Session:
    session = _games.get(game_id)
    if session is None:
        raise HTTPException(404, "Game not found")
    return session


def _move_to_dict(move: Move) -> dict[str, Any]:
    return {
        "from_row": move.from_row,
        "from_col": move.from_col,
        "to_row": move.to_row,
        "to_col": move.to_col,
        "piece_type": move.piece_type.name.lower() if move.piece_type is not None else None,
        "promotion": move.promotion,
        "resign": move.resign,
        "notation": format_move(move),
    }


def _state_to_dict(session: _Session) -> dict[str, Any]:
    """Convert the game to a JSON-serializable dict.

    局面情報を JSON 形式（辞書）に変換する。
    squares は 9x9（行0が後手側の一段目）、hands は駒名 → 枚数。
    """
    game = session.game
    board = game.board

    squares: list[list[dict[str, Any] | None]] = []
    for r in range(ROWS):
        row: list[dict[str, Any] | None] = []
        for c in range(COLS):
            piece = board.piece_at(r, c)
            if piece is None:
                row.append(None)
            else:
                row.append(
                    {
                        "type": piece.piece_type.name.lower(),
                        "owner": piece.owner.name.lower(),
                        "promoted": piece.promoted,
                    }
                )
        squares.append(row)

    hands = {
        player.name.lower(): {
            pt.name.lower(): board.hands[player][pt]
            for pt in HAND_PIECE_TYPES
            if board.hands[player].get(pt, 0) > 0
        }
        for player in Player
    }

    return {
        "current_turn": game.current_turn.name.lower(),
        "human_side": session.human.name.lower(),
        "difficulty": session.ai.difficulty.value,
        "is_over": game.is_over,
        "winner": game.winner.name.lower() if game.winner is not None else None,
        "resigned": game.resigned,
        "squares": squares,
        "hands": hands,
        "legal_moves": [_move_to_dict(m) for m in game.legal_moves()],
        "board_display": format_board(board),
    }


def _find_legal_move(game: ShogiGame, payload: MovePayload) -> Move:
    """Match the request against the legal moves of the side to move."""
    piece_type = _parse_piece_type(payload.piece_type) if payload.piece_type else None
    for move in game.legal_moves():
        if (
            move.from_row == payload.from_row
            and move.from_col == payload.from_col
            and move.to_row == payload.to_row
            and move.to_col == payload.to_col
            and move.promotion == payload.promotion
            and (piece_type is None or move.piece_type == piece_type)
        ):
            return move
    raise HTTPException(400, f"Illegal move: {payload.model_dump()}")


async def _play_ai_move(session: _Session) -> Move | None:
    """AI の手番なら1手指す。終局していれば何もしない。"""
    game = session.game
    if game.is_over or game.current_turn != session.ai.ai_player:
        return None
    move = await session.ai.choose_move()
    if game.is_over:  # 思考中に人間が投了した
        logger.warning("Dropping AI move %s: the game ended while it was thinking", move)
        return None
    game.apply_move(move)
    return move


@app.post("/api/new-game")
async def new_game(req: NewGameRequest) -> dict[str, Any]:
    """新規対局を開始する。

    人間が後手なら AI が先に1手指した局面を返す。
    対局IDはその後の手番送信（/api/move）で使用する。
    """
    human = _parse_side(req.player_side)
    game_id = str(uuid.uuid4())[:8]  # 短いIDを生成

    game = ShogiGame()
    ai = AIInterface(game.board, config=AI_CONFIG)
    ai.update_settings(req.difficulty, human)
    session = _Session(game=game, ai=ai, human=human)
    _games[game_id] = session
    logger.info("new game %s: human=%s difficulty=%s", game_id, human.name, req.difficulty.value)

    ai_move = await _play_ai_move(session)

    return {
        "game_id": game_id,
        "state": _state_to_dict(session),
        "ai_move": _move_to_dict(ai_move) if ai_move is not None else None,
    }


@app.get("/api/state/{game_id}")
async def get_state(game_id: str) -> dict[str, Any]:
    """現在の局面情報を取得する（ページ再読み込み時などに使用）。"""
    return _state_to_dict(_get_session(game_id))


@app.post("/api/move")
async def make_move(req: MoveRequest) -> dict[str, Any]:
    """プレイヤーの手を受け取り、AIが応答して次の局面を返す。

    処理フロー:
    1. プレイヤーの手を検証して適用
    2. 終局していなければ AI がミニマックスで応手を選ぶ
    3. AI の手を適用して新局面を返す
    """
    session = _get_session(req.game_id)
    game = session.game

    if game.is_over:
        raise HTTPException(400, "Game is already over")
    if game.current_turn != session.human:
        raise HTTPException(400, "Not your turn")

    player_move = _find_legal_move(game, req.move)
    try:
        game.apply_move(player_move)
    except (IllegalMoveError, GameOverError) as e:
        raise HTTPException(400, str(e)) from e

    ai_move = await _play_ai_move(session)

    return {
        "state": _state_to_dict(session),
        "player_move": _move_to_dict(player_move),
        "ai_move": _move_to_dict(ai_move) if ai_move is not None else None,
    }


@app.get("/api/movable/{game_id}")
async def movable(game_id: str, row: int, col: int) -> dict[str, Any]:
    """盤上の駒 (row, col) が動けるマス。手番側の駒でなければ空。"""
    session = _get_session(game_id)
    if not (0 <= row < ROWS and 0 <= col < COLS):
        raise HTTPException(400, f"Out of board: ({row}, {col})")
    cells = session.game.movable_cells(row, col)
    return {"cells": [list(cell) for cell in cells]}


@app.get("/api/droppable/{game_id}")
async def droppable(game_id: str, piece_type: str) -> dict[str, Any]:
    """手番側が持ち駒 piece_type を打てるマス。"""
    session = _get_session(game_id)
    pt = _parse_piece_type(piece_type)
    cells = session.game.droppable_cells(pt)
    return {"cells": [list(cell) for cell in cells]}


@app.post("/api/resign/{game_id}")
async def resign(game_id: str) -> dict[str, Any]:
    """プレイヤーが投了する。AI の思考中なら結果を捨てる。"""
    session = _get_session(game_id)
    session.ai.stop_thinking()
    try:
        session.game.resign(session.human)
    except GameOverError as e:
        raise HTTPException(400, str(e)) from e
    logger.info("game %s: human resigned", game_id)
    return {"state": _state_to_dict(session)}


def main() -> None:
    """Run the web server.

    `shogi-web` または `python -m shogi_engine.web.app` で起動する。
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
