"""运行配置 - 从环境变量读取，命令行参数可覆盖"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("环境变量 %s=%r 不是数字，使用默认值 %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


@dataclass
class Settings:
    """全局配置"""
    history_file: str = "games.json"          # Flip 7 对局历史
    leaderboard_file: str = "leaderboard.json"  # 斗地主排行榜
    ai_delay_scale: float = 1.0               # AI 思考时间倍率，0 表示不等待
    win_score: int = 200                      # Flip 7 获胜分数
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """
        环境变量命名规则：
          CARDGAMES_HISTORY_FILE / CARDGAMES_LEADERBOARD_FILE
          CARDGAMES_AI_DELAY_SCALE / CARDGAMES_WIN_SCORE
          CARDGAMES_HOST / CARDGAMES_PORT
        """
        defaults = cls()
        return cls(
            history_file=os.getenv("CARDGAMES_HISTORY_FILE", defaults.history_file),
            leaderboard_file=os.getenv("CARDGAMES_LEADERBOARD_FILE", defaults.leaderboard_file),
            ai_delay_scale=max(0.0, _env_float("CARDGAMES_AI_DELAY_SCALE", defaults.ai_delay_scale)),
            win_score=_env_int("CARDGAMES_WIN_SCORE", defaults.win_score),
            host=os.getenv("CARDGAMES_HOST", defaults.host),
            port=_env_int("CARDGAMES_PORT", defaults.port),
        )
