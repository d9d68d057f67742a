"""Flip 7 牌堆 - 96 张牌的创建、洗牌与抽牌"""

import random
from enum import Enum
from dataclasses import dataclass
from typing import List, Optional


class CardType(str, Enum):
    """牌的大类"""
    NUMBER = "number"       # 数字牌 0-12
    MODIFIER = "modifier"   # 加分 / 翻倍牌
    ACTION = "action"       # 行动牌


class Modifier(str, Enum):
    PLUS2 = "plus2"
    PLUS4 = "plus4"
    PLUS6 = "plus6"
    PLUS8 = "plus8"
    PLUS10 = "plus10"
    X2 = "x2"


class Action(str, Enum):
    FREEZE = "freeze"                # 冻结：本局 0 分并出局
    FLIP_THREE = "flipThree"         # 连抽三张
    SECOND_CHANCE = "secondChance"   # 抵消一次重复


# 加分牌的分值（x2 单独处理）
MODIFIER_BONUS = {
    Modifier.PLUS2: 2, Modifier.PLUS4: 4, Modifier.PLUS6: 6,
    Modifier.PLUS8: 8, Modifier.PLUS10: 10,
}

# 牌堆构成
MODIFIER_COUNTS = {
    Modifier.PLUS2: 2, Modifier.PLUS4: 2, Modifier.PLUS6: 2,
    Modifier.PLUS8: 1, Modifier.PLUS10: 1, Modifier.X2: 2,
}
ACTION_COUNTS = {
    Action.FREEZE: 3, Action.FLIP_THREE: 2, Action.SECOND_CHANCE: 2,
}

_LABELS = {
    Modifier.PLUS2: "+2", Modifier.PLUS4: "+4", Modifier.PLUS6: "+6",
    Modifier.PLUS8: "+8", Modifier.PLUS10: "+10", Modifier.X2: "x2",
    Action.FREEZE: "FREEZE", Action.FLIP_THREE: "FLIP3!",
    Action.SECOND_CHANCE: "2ndCHANCE",
}


@dataclass(frozen=True, eq=False)
class FlipCard:
    """一张 Flip 7 牌。同值的牌各自独立，按对象身份区分"""
    type: CardType
    value: int = 0
    kind: Optional[Enum] = None   # Modifier 或 Action

    @classmethod
    def number(cls, value: int) -> "FlipCard":
        return cls(CardType.NUMBER, value=value)

    @classmethod
    def modifier(cls, kind: Modifier) -> "FlipCard":
        return cls(CardType.MODIFIER, kind=kind)

    @classmethod
    def action(cls, kind: Action) -> "FlipCard":
        return cls(CardType.ACTION, kind=kind)

    def __repr__(self) -> str:
        return card_to_str(self)


def create_deck() -> List[FlipCard]:
    """
    创建完整牌堆（未洗）：
    - 数字牌：0 一张，1..12 每个数值 N 有 N 张，共 79 张
    - 加分牌：+2/+4/+6 各两张，+8/+10 各一张，x2 两张，共 10 张
    - 行动牌：冻结三张，连抽三张两张，第二次机会两张，共 7 张
    """
    deck = [FlipCard.number(0)]
    for value in range(1, 13):
        deck.extend(FlipCard.number(value) for _ in range(value))
    for kind, count in MODIFIER_COUNTS.items():
        deck.extend(FlipCard.modifier(kind) for _ in range(count))
    for kind, count in ACTION_COUNTS.items():
        deck.extend(FlipCard.action(kind) for _ in range(count))
    assert len(deck) == 96, f"牌数错误: {len(deck)}"
    return deck


def shuffle_deck(deck: List[FlipCard], rng: Optional[random.Random] = None) -> List[FlipCard]:
    """原地洗牌并返回同一个列表"""
    (rng or random).shuffle(deck)
    return deck


def draw_card(deck: List[FlipCard]) -> Optional[FlipCard]:
    """从牌堆顶抽一张，牌堆为空返回 None"""
    return deck.pop(0) if deck else None


def card_to_str(card: FlipCard) -> str:
    if card.type == CardType.NUMBER:
        return str(card.value)
    return _LABELS.get(card.kind, "?")
