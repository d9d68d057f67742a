"""搜索式 AI - 在手牌中找能压过上家的最小牌型，不做任何前瞻"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from cardgames.engine.card import Card, Rank, card_value, sort_cards
from cardgames.engine.hand_detector import classify, can_beat

logger = logging.getLogger(__name__)

# 候选牌生成器：手牌 → 若干组可出的牌
PlayGenerator = Callable[[Sequence[Card]], Iterable[List[Card]]]

_TWO = int(Rank.TWO)
_MIN_STRAIGHT = 5

# (每个点数张数, 最少组数)：顺子 / 连对 / 飞机
_CHAIN_SHAPES = ((1, 5), (2, 3), (3, 2))


@dataclass(frozen=True)
class AIMove:
    """AI 的一次决策：出牌或不出"""
    cards: List[Card] = field(default_factory=list)
    is_pass: bool = False


# ============================================================
#  候选牌生成
# ============================================================

def all_subsets(hand: Sequence[Card]) -> Iterator[List[Card]]:
    """按位掩码枚举手牌的所有非空子集（2^n，仅适合小手牌）"""
    n = len(hand)
    for mask in range(1, 1 << n):
        yield [hand[i] for i in range(n) if mask & (1 << i)]


def _group_by_value(hand: Sequence[Card]) -> Dict[int, List[Card]]:
    groups: Dict[int, List[Card]] = defaultdict(list)
    for c in hand:
        groups[card_value(c)].append(c)
    return groups


def _consecutive_runs(values: List[int]) -> List[List[int]]:
    """把已排序的点数切成若干段连续序列"""
    runs: List[List[int]] = []
    for v in values:
        if runs and v == runs[-1][-1] + 1:
            runs[-1].append(v)
        else:
            runs.append([v])
    return runs


def candidate_plays(hand: Sequence[Card]) -> Iterator[List[Card]]:
    """
    按点数分组直接构造所有合法牌型，代替子集穷举。
    产生的 (牌型, 主值, 长度) 集合与 all_subsets 完全一致。
    """
    groups = _group_by_value(hand)
    values = sorted(groups)

    # 单张 / 对子 / 三条
    for v in values:
        for size in range(1, min(len(groups[v]), 3) + 1):
            yield groups[v][:size]

    # 三带一：带的单牌从小到大尝试
    for v in values:
        if len(groups[v]) < 3:
            continue
        for kicker in values:
            if kicker != v:
                yield groups[v][:3] + groups[kicker][:1]

    # 顺子 / 连对 / 飞机
    for per_rank, min_groups in _CHAIN_SHAPES:
        eligible = [v for v in values if v < _TWO and len(groups[v]) >= per_rank]
        for run in _consecutive_runs(eligible):
            for start in range(len(run)):
                for end in range(start + min_groups, len(run) + 1):
                    yield [c for v in run[start:end] for c in groups[v][:per_rank]]

    # 炸弹 / 王炸最后产生：与三带一同为 (主值, 4 张) 时先选中三带一
    for v in values:
        if len(groups[v]) == 4:
            yield groups[v]
    if Rank.SMALL_JOKER in groups and Rank.BIG_JOKER in groups:
        yield [groups[Rank.SMALL_JOKER][0], groups[Rank.BIG_JOKER][0]]


# ============================================================
#  跟牌搜索
# ============================================================

def choose_beat(
    previous_cards: Sequence[Card],
    hand: Sequence[Card],
    plays: PlayGenerator = candidate_plays,
) -> Optional[List[Card]]:
    """
    找能压过 previous_cards 的最弱出牌。
    排序依据 (主值, 张数)：先选主值最小的，同主值选张数最少的。
    上一手为空时不在这里处理，返回 None。
    """
    prev = classify(previous_cards)
    if prev is None or prev.is_pass:
        return None

    best: Optional[List[Card]] = None
    best_key = None
    for cards in plays(hand):
        combo = classify(cards)
        if combo is None or not can_beat(prev, combo):
            continue
        key = (combo.main, len(cards))
        if best_key is None or key < best_key:
            best, best_key = cards, key

    logger.debug("choose_beat: prev=%r best=%r", prev, best)
    return best


# ============================================================
#  首出与兜底
# ============================================================

def try_straight(hand: Sequence[Card]) -> Optional[List[Card]]:
    """
    首出时找一条顺子：按点数扫描极长连续段（重复点数跳过，遇到 2 截断），
    取长度 ≥5 的段中起点最小、其次最短的一段。只是贪心扫描，不穷举。
    """
    if len(hand) < _MIN_STRAIGHT:
        return None
    ordered = sort_cards(list(hand))
    run = [ordered[0]]
    runs: List[List[Card]] = []
    for prev, cur in zip(ordered, ordered[1:]):
        pv, cv = card_value(prev), card_value(cur)
        if cv == pv + 1 and cv < _TWO:
            run.append(cur)
        elif cv == pv:
            continue
        else:
            if len(run) >= _MIN_STRAIGHT:
                runs.append(run)
            run = [cur]
    if len(run) >= _MIN_STRAIGHT:
        runs.append(run)
    if not runs:
        return None
    return min(runs, key=lambda r: (card_value(r[0]), len(r)))


def min_single(hand: Sequence[Card]) -> Optional[List[Card]]:
    """手牌中最小的一张，空手牌返回 None"""
    if not hand:
        return None
    return [min(hand, key=card_value)]


def choose_play(
    previous_cards: Sequence[Card],
    hand: Sequence[Card],
    plays: PlayGenerator = candidate_plays,
) -> AIMove:
    """
    一回合的出牌决策：
    1. 搜索能压过上家的最弱出牌
    2. 首出时优先出顺子
    3. 仍无结果则出最小单张（跟牌时会被校验拒绝，等同不出）
    4. 手牌为空则不出
    """
    choice = choose_beat(previous_cards, hand, plays)
    if not previous_cards:
        straight = try_straight(hand)
        if straight:
            choice = straight
    if not choice:
        single = min_single(hand)
        if single is None:
            return AIMove(is_pass=True)
        return AIMove(single)
    return AIMove(choice)


# ============================================================
#  思考延迟
# ============================================================

def thinking_delay(turn_index: int, scale: float = 1.0) -> float:
    """AI 思考时间（秒）：0.5 秒起，随回合序号略有变化"""
    return (0.5 + (turn_index % 3) * 0.2) * scale


async def ai_choose_play(
    previous_cards: Sequence[Card],
    hand: Sequence[Card],
    turn_index: int,
    scale: float = 1.0,
) -> AIMove:
    """先等待思考时间（不可取消，不影响结果），再做出牌决策"""
    await asyncio.sleep(thinking_delay(turn_index, scale))
    return choose_play(previous_cards, hand)


# ============================================================
#  策略对象
# ============================================================

class SearchAI:
    """供 RoundController 使用的出牌策略"""

    def __init__(self, plays: PlayGenerator = candidate_plays):
        self.plays = plays

    def decide_play(self, player, state) -> Optional[List[Card]]:
        """返回要出的牌，None 表示不出"""
        move = choose_play(state.previous_for(player.id), player.hand, self.plays)
        if move.is_pass:
            return None
        return move.cards
