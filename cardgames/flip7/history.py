"""对局历史 - 把每一局 Flip 7 的结果追加到 JSON 文件"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from cardgames.flip7.game import PlayerState

logger = logging.getLogger(__name__)


class RoundHistory:
    """JSON 历史文件，格式 {"games": [...]}"""

    def __init__(self, path: str = "games.json"):
        self.path = Path(path)
        self.data: dict = {"games": []}
        self.load()

    def load(self) -> None:
        """读取历史；文件缺失或内容非法时从空历史开始"""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.info("新建历史文件 %s", self.path)
            data = None
        except ValueError as e:
            logger.warning("历史文件 %s 无法解析: %s", self.path, e)
            data = None
        if not isinstance(data, dict) or not isinstance(data.get("games"), list):
            data = {"games": []}
        self.data = data

    def reset(self) -> None:
        """清空历史（新的一整场游戏开始时调用）"""
        self.data = {"games": []}
        self._write()

    @property
    def games(self) -> List[dict]:
        return self.data["games"]

    def save_round(self, players: List[PlayerState]) -> dict:
        """追加一局结果并写回文件，返回写入的记录"""
        record = {
            "id": len(self.games) + 1,
            "date": datetime.now(timezone.utc).isoformat(),
            "numPlayers": len(players),
            "players": [self._player_record(p) for p in players],
        }
        self.games.append(record)
        self._write()
        logger.info("第 %d 局已保存到 %s", record["id"], self.path)
        return record

    @staticmethod
    def _player_record(p: PlayerState) -> dict:
        round_score = p.last_round_score
        if round_score is None:
            round_score = p.compute_round_score()
        return {
            "name": p.name,
            "numberCards": [{"type": "number", "value": c.value} for c in p.number_cards],
            "modifiers": [{"type": "modifier", "kind": m.kind.value} for m in p.modifiers],
            "busted": p.busted,
            "frozen": p.frozen,
            "stopped": p.stopped,
            "roundScore": round_score,
            "totalScore": p.total_score,
        }

    def _write(self) -> None:
        self.path.write_text(
            json.dumps(self.data, ensure_ascii=False, indent=2), encoding="utf-8"
        )
