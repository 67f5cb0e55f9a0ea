"""AI configuration: difficulty tiers, search depth and timing policy.

AIの設定定義。難易度ごとに探索深さ・最低思考時間が異なるため、設定クラスで管理する。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Difficulty(str, Enum):
    """AI difficulty tiers."""

    BEGINNER = "beginner"          # 初級
    INTERMEDIATE = "intermediate"  # 中級
    ADVANCED = "advanced"          # 上級


# 難易度 → 探索深さ（手数）。固定表でユーザーは段階の選択のみできる
SEARCH_DEPTHS: dict[Difficulty, int] = {
    Difficulty.BEGINNER: 2,
    Difficulty.INTERMEDIATE: 3,
    Difficulty.ADVANCED: 4,
}


def _default_thinking_times() -> dict[Difficulty, float]:
    return {
        Difficulty.BEGINNER: 1.0,
        Difficulty.INTERMEDIATE: 2.0,
        Difficulty.ADVANCED: 3.0,
    }


@dataclass(frozen=True)
class AIConfig:
    """Configuration for AIInterface and MinimaxSearch.

    Attributes:
        search_timeout:            探索の制限時間（秒）。超えたらランダムな合法手で代用する
        min_thinking_time:         難易度ごとの最低思考時間（秒）。探索が速くても指し手の返却を待つ
        beginner_random_move_rate: 初級で最善手の代わりにランダムな手を指す確率
    """

    search_timeout: float = 30.0
    min_thinking_time: dict[Difficulty, float] = field(default_factory=_default_thinking_times)
    beginner_random_move_rate: float = 0.1

    @classmethod
    def instant(cls) -> AIConfig:
        """最低思考時間なしのプリセット（テスト・CLI の自動対局用）。"""
        return cls(min_thinking_time={d: 0.0 for d in Difficulty})

    def depth_for(self, difficulty: Difficulty) -> int:
        return SEARCH_DEPTHS[difficulty]

    def random_move_rate_for(self, difficulty: Difficulty) -> float:
        """ランダム手を混ぜるのは最も低い難易度だけ。"""
        if difficulty == Difficulty.BEGINNER:
            return self.beginner_random_move_rate
        return 0.0


DEFAULT_AI_CONFIG = AIConfig()
