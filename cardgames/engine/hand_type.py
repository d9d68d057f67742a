"""牌型定义 - 简化斗地主的 9 种牌型与识别结果"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class HandType(str, Enum):
    """牌型枚举"""
    PASS = "PASS"                         # 不出
    SINGLE = "SINGLE"                     # 单张
    PAIR = "PAIR"                         # 对子
    TRIPLE = "TRIPLE"                     # 三条
    TRIPLE_SINGLE = "TRIPLE_SINGLE"       # 三带一
    PLANE = "PLANE"                       # 飞机（不带翅膀）
    STRAIGHT = "STRAIGHT"                 # 顺子 (≥5张)
    DOUBLE_STRAIGHT = "DOUBLE_STRAIGHT"   # 连对 (≥3对)
    BOMB = "BOMB"                         # 炸弹（含王炸）


# 比较时需要长度一致的牌型
CHAIN_TYPES = frozenset({HandType.STRAIGHT, HandType.DOUBLE_STRAIGHT, HandType.PLANE})

# 王炸的主值，高于任何普通炸弹
ROCKET_MAIN = 999


@dataclass(frozen=True)
class Combination:
    """一组牌的识别结果（不持有牌本身，每次按需重新计算）"""
    type: HandType
    main: Optional[int] = None     # 比较用的主值
    length: Optional[int] = None   # 总张数，仅顺子/连对/飞机/三带一填写

    @property
    def is_pass(self) -> bool:
        return self.type == HandType.PASS

    @property
    def is_bomb(self) -> bool:
        return self.type == HandType.BOMB

    @property
    def is_rocket(self) -> bool:
        return self.is_bomb and self.main == ROCKET_MAIN

    def __repr__(self) -> str:
        if self.is_pass:
            return "[PASS]"
        if self.length is None:
            return f"[{self.type.value} {self.main}]"
        return f"[{self.type.value} {self.main} x{self.length}]"


PASS = Combination(HandType.PASS)
