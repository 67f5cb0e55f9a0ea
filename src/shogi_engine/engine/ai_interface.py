"""AI orchestrator: turns a minimax search into an async "pick a move" call.

AI対戦のインタフェース。画面側はここだけを使って AI に指し手を求める。

- 探索は盤面のコピーに対してデーモンスレッドで行う（実際の盤面・手番には触れない）
- 制限時間（既定30秒）を超えたら結果を捨て、ランダムな合法手で代用する
- 探索が速く終わっても、難易度ごとの最低思考時間までは指し手を返さない
- stop_thinking() 後に届いた結果は捨てる
"""

from __future__ import annotations

import asyncio
import logging
import random
import threading
from collections.abc import Callable

from shogi_engine.engine.config import DEFAULT_AI_CONFIG, AIConfig, Difficulty
from shogi_engine.engine.minimax import MinimaxSearch
from shogi_engine.engine.random_player import random_move
from shogi_engine.game.board import Board
from shogi_engine.game.moves import Move
from shogi_engine.game.types import Player

logger = logging.getLogger(__name__)

MoveCallback = Callable[[Move], None]


class AIInterface:
    """Asynchronous AI player bound to one board.

    player_side は人間側の手番。AI はその相手を受け持つ。
    """

    def __init__(
        self,
        board: Board,
        config: AIConfig = DEFAULT_AI_CONFIG,
        rng: random.Random | None = None,
    ) -> None:
        self.board = board
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.difficulty = Difficulty.BEGINNER
        self.player_side = Player.FIRST
        self.is_thinking = False
        self._task: asyncio.Task[None] | None = None

    @property
    def ai_player(self) -> Player:
        return self.player_side.opponent

    def update_settings(self, difficulty: Difficulty | str, player_side: Player | int) -> None:
        """難易度と人間側の手番を設定する。"""
        self.difficulty = Difficulty(difficulty)
        self.player_side = Player(player_side)
        logger.info(
            "AI settings: difficulty=%s depth=%d human=%s ai=%s",
            self.difficulty.value,
            self.config.depth_for(self.difficulty),
            self.player_side.name,
            self.ai_player.name,
        )

    def start_thinking(self, callback: MoveCallback) -> asyncio.Task[None] | None:
        """Start searching and deliver the move to callback when done.

        既に思考中なら何もせず None を返す。実行中のイベントループが必要。
        """
        if self.is_thinking:
            return None
        self.is_thinking = True
        self._task = asyncio.get_running_loop().create_task(self._think(callback))
        return self._task

    def stop_thinking(self) -> None:
        """思考を中止する。探索自体は止められないので、結果が届いても捨てる。"""
        if not self.is_thinking:
            return
        self.is_thinking = False
        logger.info("AI thinking stopped")

    async def choose_move(self) -> Move:
        """Search for the AI's move, honouring timeout and minimum thinking time.

        必ず何らかの指し手（または投了）を返す。
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        await asyncio.sleep(0)  # 思考中表示を先に描画させるため、次の周回まで待つ

        move = await self._search_with_fallback()

        remaining = self.config.min_thinking_time[self.difficulty] - (loop.time() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)
        return move

    async def _think(self, callback: MoveCallback) -> None:
        move = await self.choose_move()
        if not self.is_thinking:
            logger.warning("Discarding AI move %s: thinking was stopped", move)
            return
        self.is_thinking = False
        callback(move)

    async def _search_with_fallback(self) -> Move:
        search = MinimaxSearch.for_difficulty(
            self.board.copy(),
            self.difficulty,
            self.ai_player,
            config=self.config,
            rng=self.rng,
        )
        try:
            move = await asyncio.wait_for(
                self._run_search(search),
                timeout=self.config.search_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Search exceeded %.1fs, playing a random move instead",
                self.config.search_timeout,
            )
            return self._fallback_move()
        except Exception:
            logger.exception("Search failed, playing a random move instead")
            return self._fallback_move()

        if move is None:  # force_move=True なので通常は起きない
            return Move.resignation()
        logger.info("AI (%s) plays %s (score %s)", self.ai_player.name, move, search.last_score)
        return move

    def _run_search(self, search: MinimaxSearch) -> asyncio.Future[Move | None]:
        """Start the search on a daemon thread and return a future for its result.

        探索スレッドは join しない。時間切れになった探索は裏で走り続け、
        その結果は捨てられる（イベントループを待たせない）。
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Move | None] = loop.create_future()

        def deliver(setter: Callable[..., None], value: object) -> None:
            if not future.done():  # 時間切れでキャンセル済みなら捨てる
                setter(value)

        def worker() -> None:
            try:
                result = search.find_best_move(True)
            except Exception as e:
                post = (deliver, future.set_exception, e)
            else:
                post = (deliver, future.set_result, result)
            try:
                loop.call_soon_threadsafe(*post)
            except RuntimeError:
                logger.debug("Event loop closed, dropping late search result")

        threading.Thread(target=worker, name="shogi-search", daemon=True).start()
        return future

    def _fallback_move(self) -> Move:
        """ランダムな合法手。合法手がなければ投了。"""
        try:
            return random_move(self.board, self.ai_player, self.rng)
        except ValueError:
            return Move.resignation()
