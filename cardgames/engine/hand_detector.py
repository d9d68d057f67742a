"""牌型检测器 - 识别一组牌的牌型，并判断能否压过上一手"""

from typing import List, Optional, Sequence
from collections import Counter

from .card import Card, Rank, card_value
from .hand_type import HandType, Combination, CHAIN_TYPES, ROCKET_MAIN, PASS


# 顺子/连对/飞机的最大点数必须小于 2
_CHAIN_CEILING = int(Rank.TWO)


def classify(cards: Sequence[Card]) -> Optional[Combination]:
    """
    识别一组牌的牌型。
    空列表返回 PASS，非法牌型返回 None。
    """
    if not cards:
        return PASS

    n = len(cards)
    rank_counts = Counter(card_value(c) for c in cards)

    # 先判断固定张数的牌型，再依次尝试连对、飞机、顺子
    return (
        _detect_single(cards, n, rank_counts)
        or _detect_pair_or_rocket(cards, n, rank_counts)
        or _detect_triple(cards, n, rank_counts)
        or _detect_four(cards, n, rank_counts)
        or _detect_double_straight(cards, n, rank_counts)
        or _detect_plane(cards, n, rank_counts)
        or _detect_straight(cards, n, rank_counts)
    )


# ============================================================
#  辅助函数
# ============================================================

def _is_chain(values: List[int]) -> bool:
    """已排序的点数是否严格连续，且最大点数低于 2"""
    if values[-1] >= _CHAIN_CEILING:
        return False
    return all(values[i + 1] - values[i] == 1 for i in range(len(values) - 1))


def _detect_chain(n: int, rc: Counter, per_rank: int, min_size: int) -> Optional[List[int]]:
    """每个点数恰好 per_rank 张且点数连续时，返回排序后的点数"""
    if n < min_size or n % per_rank != 0:
        return None
    if any(c != per_rank for c in rc.values()):
        return None
    values = sorted(rc)
    return values if _is_chain(values) else None


# ============================================================
#  固定张数牌型
# ============================================================

def _detect_single(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """单张"""
    if n == 1:
        return Combination(HandType.SINGLE, card_value(cards[0]))
    return None


def _detect_pair_or_rocket(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """对子，或大小王组成的王炸"""
    if n != 2:
        return None
    if len(rc) == 1:
        return Combination(HandType.PAIR, card_value(cards[0]))
    if Rank.SMALL_JOKER in rc and Rank.BIG_JOKER in rc:
        return Combination(HandType.BOMB, ROCKET_MAIN)
    return None


def _detect_triple(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """三条"""
    if n == 3 and len(rc) == 1:
        return Combination(HandType.TRIPLE, card_value(cards[0]))
    return None


def _detect_four(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """四张：炸弹，或三带一（带的单牌不参与比较）"""
    if n != 4:
        return None
    if len(rc) == 1:
        return Combination(HandType.BOMB, card_value(cards[0]))
    if len(rc) == 2:
        for value, count in rc.items():
            if count == 3:
                return Combination(HandType.TRIPLE_SINGLE, value, length=4)
    return None


# ============================================================
#  连续牌型
# ============================================================

def _detect_double_straight(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """连对：≥3对连续对子，不含2和王"""
    values = _detect_chain(n, rc, per_rank=2, min_size=6)
    if values:
        return Combination(HandType.DOUBLE_STRAIGHT, values[0], length=n)
    return None


def _detect_plane(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """飞机：≥2组连续三条，不带翅膀，不含2和王"""
    values = _detect_chain(n, rc, per_rank=3, min_size=6)
    if values:
        return Combination(HandType.PLANE, values[0], length=n)
    return None


def _detect_straight(cards: Sequence[Card], n: int, rc: Counter) -> Optional[Combination]:
    """顺子：≥5张连续单牌，不含2和王"""
    values = _detect_chain(n, rc, per_rank=1, min_size=5)
    if values:
        return Combination(HandType.STRAIGHT, values[0], length=n)
    return None


# ============================================================
#  牌型比较
# ============================================================

def can_beat(prev: Optional[Combination], nxt: Optional[Combination]) -> bool:
    """
    判断 nxt 能否压过 prev。
    规则：
    1. 不出或非法牌型永远压不过
    2. 上一手为空时任何合法牌型都可以出
    3. 炸弹压一切非炸弹，炸弹之间比主值（王炸主值最大）
    4. 其余必须同类型，顺子/连对/飞机还须同长度，再比主值
    """
    if nxt is None or nxt.is_pass:
        return False
    if prev is None or prev.is_pass:
        return True

    if nxt.is_bomb and not prev.is_bomb:
        return True
    if prev.is_bomb and not nxt.is_bomb:
        return False

    if prev.type != nxt.type:
        return False
    if prev.type in CHAIN_TYPES and prev.length != nxt.length:
        return False
    return nxt.main > prev.main
