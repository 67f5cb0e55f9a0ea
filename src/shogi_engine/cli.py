"""CLI entry point for shogi-engine — Human vs Minimax AI.

コマンドラインで動く本将棋対局プログラム。
プレイヤー対ミニマックスAIで対局できる（手番・難易度は引数で選ぶ）。

起動方法: `shogi-cli --difficulty intermediate --side second`
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from shogi_engine.engine.ai_interface import AIInterface
from shogi_engine.engine.config import Difficulty
from shogi_engine.game.display import format_board, format_move
from shogi_engine.game.state import ShogiGame
from shogi_engine.game.types import Player

logger = logging.getLogger(__name__)

_SIDES = {"first": Player.FIRST, "second": Player.SECOND}


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="shogi-cli", description="Play 本将棋 against the AI.")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.BEGINNER.value,
        help="AI strength (search depth 2/3/4)",
    )
    parser.add_argument(
        "--side",
        choices=sorted(_SIDES),
        default="first",
        help="your side; first (先手) moves first",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="show search logs")
    return parser.parse_args(argv)


RESIGN = -1


def _read_choice(num_moves: int) -> int | None:
    """Prompt until a valid move number (or RESIGN) is entered. None で中断。"""
    # 入力検証ループ（正しい番号が入力されるまで繰り返す）
    while True:
        try:
            choice = input("Your move (number, r = resign): ").strip()
        except (EOFError, KeyboardInterrupt):
            return None
        if choice.lower() == "r":
            return RESIGN
        try:
            idx = int(choice)
        except ValueError:
            print("Enter a number.")
            continue
        if 0 <= idx < num_moves:
            return idx
        print(f"Invalid: choose 0-{num_moves - 1}")


def main(argv: list[str] | None = None) -> None:
    """Run a Human vs AI game.

    ゲームの流れ:
    1. 盤面を表示
    2. 人間の番なら合法手一覧を表示して番号入力を求める（r で投了）
    3. AI の番なら AIInterface に手を選ばせる
    4. 玉を取るか投了するまで繰り返す
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    human = _SIDES[args.side]
    game = ShogiGame()
    ai = AIInterface(game.board)
    ai.update_settings(Difficulty(args.difficulty), human)

    print("=== 本将棋 ===")
    print(f"You are {human.name} ({'先手' if human == Player.FIRST else '後手'}). "
          f"AI difficulty: {args.difficulty}")
    print()

    while not game.is_over:
        print(format_board(game.board))
        print()

        if game.current_turn == human:
            moves = game.legal_moves()
            if not moves:
                print("No legal moves: you resign.")
                game.resign(human)
                continue
            print("Legal moves:")
            for i, m in enumerate(moves):
                print(f"  {i}: {format_move(m)}")
            print()

            idx = _read_choice(len(moves))
            if idx is None:
                print("\nGame aborted.")
                return
            if idx == RESIGN:
                game.resign()
            else:
                game.apply_move(moves[idx])
        else:
            print("AI is thinking...")
            move = asyncio.run(ai.choose_move())
            print(f"AI plays: {format_move(move)}")
            game.apply_move(move)

        print()

    # 終局: 結果を表示
    print(format_board(game.board))
    print()
    logger.info("game over after %d moves, winner=%s", len(game.history), game.winner)
    if game.resigned:
        print("投了")
    print("You win!" if game.winner == human else "AI wins!")


if __name__ == "__main__":
    main()
