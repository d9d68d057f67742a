"""牌的定义 - 斗地主54张扑克牌的数据模型"""

from enum import IntEnum, Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import random


class Rank(IntEnum):
    """点数枚举（数值即牌力，2 大于 A，王最大）"""
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    TWO = 15
    SMALL_JOKER = 16
    BIG_JOKER = 17


class Suit(str, Enum):
    """花色枚举（王没有花色，suit 为 None）"""
    SPADE = "♠"
    HEART = "♥"
    CLUB = "♣"
    DIAMOND = "♦"


# 点数显示映射
RANK_DISPLAY = {
    Rank.THREE: "3", Rank.FOUR: "4", Rank.FIVE: "5",
    Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8",
    Rank.NINE: "9", Rank.TEN: "10", Rank.JACK: "J",
    Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A",
    Rank.TWO: "2", Rank.SMALL_JOKER: "SJ", Rank.BIG_JOKER: "BJ",
}

JOKERS = (Rank.SMALL_JOKER, Rank.BIG_JOKER)

# 每人 17 张，剩 3 张底牌留给地主
HAND_SIZE = 17
LORD_CARD_COUNT = 3


@dataclass(frozen=True)
class Card:
    """一张扑克牌"""
    rank: Rank
    suit: Optional[Suit] = None

    @property
    def is_joker(self) -> bool:
        return self.rank in JOKERS

    @property
    def display(self) -> str:
        if self.is_joker:
            return RANK_DISPLAY[self.rank]
        return f"{self.suit.value}{RANK_DISPLAY[self.rank]}"

    def __repr__(self) -> str:
        return self.display


def card_value(card: Card) -> int:
    """牌力数值：3..10,J,Q,K,A,2 → 3..15，小王 16，大王 17"""
    return int(card.rank)


def create_deck() -> List[Card]:
    """创建一副54张标准扑克牌"""
    deck: List[Card] = []
    ranks = [r for r in Rank if r not in JOKERS]

    for rank in ranks:
        for suit in Suit:
            deck.append(Card(rank=rank, suit=suit))

    deck.append(Card(rank=Rank.SMALL_JOKER))
    deck.append(Card(rank=Rank.BIG_JOKER))

    assert len(deck) == 54, f"牌数错误: {len(deck)}"
    return deck


def shuffle(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """洗牌，返回新列表，不修改原牌堆"""
    shuffled = deck.copy()
    (rng or random).shuffle(shuffled)
    return shuffled


def deal(deck: List[Card]) -> Tuple[List[List[Card]], List[Card]]:
    """
    轮流发牌: 前51张依次发给三位玩家，最后3张作为底牌。
    返回 ([玩家0手牌, 玩家1手牌, 玩家2手牌], 底牌)，手牌已按点数排序。
    """
    dealt = 3 * HAND_SIZE
    hands: List[List[Card]] = [[], [], []]
    for i, card in enumerate(deck[:dealt]):
        hands[i % 3].append(card)
    lord_cards = list(deck[dealt:dealt + LORD_CARD_COUNT])
    return [sort_cards(h) for h in hands], lord_cards


def sort_cards(cards: List[Card]) -> List[Card]:
    """按点数排序手牌（从小到大）"""
    return sorted(cards, key=card_value)
