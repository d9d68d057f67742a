"""排行榜 - 人类玩家胜场数，保存在 JSON 文件中"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

YOU = "You"

# 文件不存在时的初始榜单
DEFAULT_ENTRIES = [
    (YOU, 0),
    ("Jean-Claude the Gambler", 7),
    ("Patrick Bruel", 5),
    ("Antoine Saout", 3),
    ("Bob the Innkeeper", 2),
    ("Noob_42", 0),
]


@dataclass
class LeaderboardEntry:
    name: str
    wins: int = 0


class Leaderboard:
    """胜场排行榜"""

    def __init__(self, path: str = "leaderboard.json"):
        self.path = Path(path)
        self.entries: List[LeaderboardEntry] = []
        self.load()

    def load(self) -> None:
        """读取榜单；文件缺失或内容非法时使用默认榜单"""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("排行榜文件必须是数组")
            self.entries = [
                LeaderboardEntry(name=str(e["name"]), wins=int(e.get("wins", 0)))
                for e in raw
            ]
        except FileNotFoundError:
            self.entries = []
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("排行榜文件 %s 无法解析: %s", self.path, e)
            self.entries = []
        if not self.entries:
            self.entries = [LeaderboardEntry(n, w) for n, w in DEFAULT_ENTRIES]

    def save(self) -> None:
        data = [asdict(e) for e in self.entries]
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def add_win(self, name: str = YOU) -> LeaderboardEntry:
        """给玩家加一场胜利并保存"""
        entry = next((e for e in self.entries if e.name == name), None)
        if entry is None:
            entry = LeaderboardEntry(name)
            self.entries.append(entry)
        entry.wins += 1
        self.save()
        return entry

    def top(self, n: int = 7) -> List[LeaderboardEntry]:
        """按胜场降序、名字升序取前 n 名"""
        return sorted(self.entries, key=lambda e: (-e.wins, e.name))[:n]
