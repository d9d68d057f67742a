"""Flip 7 规则引擎 - 玩家状态、单局流程与计分"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple

from cardgames.flip7.deck import (
    Action, CardType, FlipCard, Modifier, MODIFIER_BONUS,
    card_to_str, create_deck, draw_card, shuffle_deck,
)

logger = logging.getLogger(__name__)

FLIP7_UNIQUE = 7      # 凑满 7 个不同数值立即结束本局
FLIP7_BONUS = 15
FLIP_THREE_DRAWS = 3

# 由调用方结算行动牌：(行动者, 行动牌)
ActionResolver = Callable[["PlayerState", FlipCard], object]


@dataclass(eq=False)
class PlayerState:
    """一名玩家在一局中的状态"""
    id: int
    total_score: int = 0
    number_cards: List[FlipCard] = field(default_factory=list)
    modifiers: List[FlipCard] = field(default_factory=list)
    actions_in_front: List[FlipCard] = field(default_factory=list)
    busted: bool = False            # 抽到重复数字，出局
    frozen: bool = False            # 被冻结，出局
    stopped: bool = False           # 主动停牌
    has_second_chance: bool = False
    last_round_score: Optional[int] = None

    @property
    def name(self) -> str:
        return f"Player {self.id}"

    def is_active(self) -> bool:
        return not (self.busted or self.frozen or self.stopped)

    def unique_values(self) -> Set[int]:
        return {c.value for c in self.number_cards}

    def has_duplicate_on_add(self, value: int) -> bool:
        """刚加入的数值是否已经出现过"""
        return sum(1 for c in self.number_cards if c.value == value) > 1

    def hand_str(self) -> str:
        """格式：'1 3 5 [+2 x2] {2ndCHANCE}'"""
        nums = " ".join(card_to_str(c) for c in self.number_cards)
        mods = " ".join(card_to_str(c) for c in self.modifiers)
        acts = " ".join(card_to_str(c) for c in self.actions_in_front)
        parts = []
        if nums:
            parts.append(nums)
        if mods:
            parts.append(f"[{mods}]")
        if acts:
            parts.append(f"{{{acts}}}")
        return " ".join(parts) or "(no cards)"

    def compute_round_score(self) -> int:
        """
        本局得分（不修改总分）：
        - 出局或被冻结为 0
        - 数字之和，每张 x2 翻倍一次（只翻倍数字，不翻倍加分牌）
        - 加上 +2/+4/+6/+8/+10
        - 7 个不同数值再加 15
        """
        if self.busted or self.frozen:
            return 0
        numbers = sum(c.value for c in self.number_cards)
        x2_count = sum(1 for m in self.modifiers if m.kind == Modifier.X2)
        bonus = sum(MODIFIER_BONUS.get(m.kind, 0) for m in self.modifiers)
        flip7 = FLIP7_BONUS if len(self.unique_values()) >= FLIP7_UNIQUE else 0
        return numbers * (2 ** x2_count) + bonus + flip7


class Flip7Round:
    """一局 Flip 7：直到有人凑满 7 个数值，或所有人都停牌/出局"""

    def __init__(
        self,
        num_players: int,
        player_scores: Optional[List[int]] = None,
        rng: Optional[random.Random] = None,
        deck: Optional[List[FlipCard]] = None,
    ):
        if num_players < 2:
            raise ValueError("Flip 7 至少需要两名玩家")
        scores = list(player_scores or [])
        self.players = [
            PlayerState(id=i + 1, total_score=scores[i] if i < len(scores) else 0)
            for i in range(num_players)
        ]
        self.deck = deck if deck is not None else shuffle_deck(create_deck(), rng)
        self.round_over = False

    # ============================================================
    #  发牌与抽牌
    # ============================================================

    def deal_initial_cards(
        self, resolve_action: Optional[ActionResolver] = None
    ) -> List[Tuple[PlayerState, FlipCard]]:
        """
        每人发一张明牌。抽到行动牌时中断发牌立即结算：
        交给 resolve_action 处理（选择目标），默认作用于自己。
        """
        dealt = []
        for player in self.players:
            card = self.draw_for_player(player)
            if card is None:
                logger.warning("初始发牌时牌堆已空")
                break
            if card.type == CardType.ACTION:
                if resolve_action is not None:
                    resolve_action(player, card)
                else:
                    self.play_action(card, player, player)
            dealt.append((player, card))
        return dealt

    def draw_for_player(self, player: PlayerState) -> Optional[FlipCard]:
        """
        玩家抽一张牌。数字牌和加分牌立即结算；
        行动牌原样返回，由调用方选择目标后调用 play_action。
        """
        card = draw_card(self.deck)
        if card is None:
            return None
        if card.type != CardType.ACTION:
            self.resolve_draw(player, card)
        return card

    def resolve_draw(
        self, player: PlayerState, card: FlipCard, target: Optional[PlayerState] = None
    ) -> None:
        """结算一张抽到的牌"""
        if card.type == CardType.NUMBER:
            player.number_cards.append(card)
            if player.has_duplicate_on_add(card.value):
                if player.has_second_chance:
                    # 第二次机会抵消重复，弃掉这张牌
                    player.has_second_chance = False
                    player.actions_in_front = [
                        a for a in player.actions_in_front if a.kind != Action.SECOND_CHANCE
                    ]
                    player.number_cards.pop()
                    logger.info("%s 使用第二次机会，避免重复 %d", player.name, card.value)
                else:
                    player.busted = True
                    player.number_cards = []
                    logger.info("%s 抽到重复 %d，本局 0 分出局", player.name, card.value)
            elif len(player.unique_values()) >= FLIP7_UNIQUE:
                # 连抽三张时也会触发
                logger.info("%s FLIP 7!", player.name)
                self.round_over = True

        elif card.type == CardType.MODIFIER:
            player.modifiers.append(card)
            logger.info("%s 获得 %s", player.name, card_to_str(card))

        elif card.type == CardType.ACTION:
            self.resolve_action(card, target or player)

    def resolve_action(self, card: FlipCard, target: PlayerState) -> None:
        """把行动牌作用到目标玩家"""
        if card.type != CardType.ACTION:
            return

        if card.kind == Action.FREEZE:
            target.frozen = True
            target.number_cards = []
            logger.info("%s 被冻结，本局 0 分出局", target.name)

        elif card.kind == Action.FLIP_THREE:
            logger.info("%s 连抽三张", target.name)
            for i in range(FLIP_THREE_DRAWS):
                if self.round_over or target.busted or target.frozen:
                    break
                extra = draw_card(self.deck)
                if extra is None:
                    break
                logger.info("  %d/%d: %s", i + 1, FLIP_THREE_DRAWS, card_to_str(extra))
                self.resolve_draw(target, extra)

        elif card.kind == Action.SECOND_CHANCE:
            if target.has_second_chance:
                logger.info("%s 已有第二次机会，这张被弃掉", target.name)
                return
            target.has_second_chance = True
            target.actions_in_front.append(card)
            logger.info("%s 获得第二次机会", target.name)
            # 拿到第二次机会后立刻再抽一张
            extra = draw_card(self.deck)
            if extra is not None:
                logger.info("  第二次机会奖励牌: %s", card_to_str(extra))
                self.resolve_draw(target, extra)

    # ============================================================
    #  行动牌目标
    # ============================================================

    def action_targets(self) -> List[PlayerState]:
        """行动牌可选的目标：所有仍在场的玩家（包括自己）"""
        return [p for p in self.players if p.is_active()]

    def second_chance_candidates(self, target: PlayerState) -> List[PlayerState]:
        """目标已有第二次机会时，可以改送的其他在场玩家"""
        return [
            p for p in self.players
            if p.is_active() and not p.has_second_chance and p is not target
        ]

    def play_action(
        self,
        card: FlipCard,
        acting: PlayerState,
        target: Optional[PlayerState],
        redirect: Optional[Callable[[List[PlayerState]], Optional[PlayerState]]] = None,
    ) -> Optional[PlayerState]:
        """
        打出行动牌，返回最终目标（None 表示牌被弃掉）。
        目标为空时作用于自己；第二次机会送给已有的玩家时，
        由 redirect 从其余候选中选择，没有候选或未选择则弃牌。
        """
        if target is None:
            target = acting
        if card.kind == Action.SECOND_CHANCE and target.has_second_chance:
            candidates = self.second_chance_candidates(target)
            chosen = redirect(candidates) if (redirect and candidates) else None
            if chosen is None:
                logger.info("%s 的第二次机会无人可送，弃掉", acting.name)
                return None
            target = chosen
        self.resolve_action(card, target)
        return target

    # ============================================================
    #  本局结束
    # ============================================================

    def is_round_over(self) -> bool:
        return self.round_over or all(
            p.busted or p.frozen or p.stopped for p in self.players
        )

    def reset_second_chances(self) -> None:
        """本局结束时弃掉所有第二次机会"""
        for p in self.players:
            p.has_second_chance = False
            p.actions_in_front = []

    def finish(self) -> Dict[int, int]:
        """结算本局：把本局得分加到总分，返回 {玩家id: 本局得分}"""
        self.reset_second_chances()
        scores = {}
        for p in self.players:
            p.last_round_score = p.compute_round_score()
            p.total_score += p.last_round_score
            scores[p.id] = p.last_round_score
        return scores


class Flip7Game:
    """多局 Flip 7：累计总分，有人达到目标分后结束"""

    def __init__(self, num_players: int, win_score: int = 200, rng: Optional[random.Random] = None):
        self.num_players = max(2, num_players)
        self.win_score = win_score
        self.rng = rng
        self.scores = [0] * self.num_players
        self.round_number = 0

    def new_round(self) -> Flip7Round:
        self.round_number += 1
        return Flip7Round(self.num_players, self.scores, rng=self.rng)

    def finish_round(self, round_: Flip7Round) -> Dict[int, int]:
        result = round_.finish()
        self.scores = [p.total_score for p in round_.players]
        return result

    def winners(self) -> List[int]:
        """达到目标分后返回最高分玩家（平分时多人），否则返回空列表"""
        if not any(s >= self.win_score for s in self.scores):
            return []
        best = max(self.scores)
        return [i + 1 for i, s in enumerate(self.scores) if s == best]

    @property
    def is_over(self) -> bool:
        return bool(self.winners())
