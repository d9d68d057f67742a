"""牌局控制器 - 驱动一局斗地主的发牌与出牌流程"""

import logging
import random
from typing import List, Optional, Protocol, Sequence

from cardgames.engine.card import Card, create_deck, shuffle, deal
from cardgames.engine.validator import PlayCheck, is_valid_play
from cardgames.game.player import Player, Role
from cardgames.game.game_state import RoundState, GamePhase, GameEvent

logger = logging.getLogger(__name__)

REASON_ROUND_OVER = "the round is over"
REASON_NOT_YOUR_TURN = "not your turn"
REASON_NOT_IN_HAND = "cards not in hand"


class AIStrategy(Protocol):
    """AI 决策接口（策略模式）"""

    def decide_play(self, player: Player, state: RoundState) -> Optional[List[Card]]:
        """决定出牌：返回要出的牌列表，None=不出(PASS)"""
        ...


class RoundController:
    """牌局控制器：驱动一局斗地主的完整流程。

    strategies 中为 None 的座位是人类玩家，通过 submit_play / submit_pass 出牌；
    其余座位由 play_ai_turn 驱动。所有出牌都经过 is_valid_play 校验。
    """

    def __init__(
        self,
        player_names: Sequence[str],
        strategies: Sequence[Optional[AIStrategy]],
        landlord_index: int = 0,
    ):
        if len(player_names) != 3 or len(strategies) != 3:
            raise ValueError("斗地主需要恰好三名玩家")
        if landlord_index not in (0, 1, 2):
            raise ValueError(f"地主座位号非法: {landlord_index}")
        self.players = [
            Player(id=i, name=name, is_human=strategies[i] is None)
            for i, name in enumerate(player_names)
        ]
        self.strategies = list(strategies)
        self.landlord_index = landlord_index
        self.state = RoundState(players=self.players, landlord_index=landlord_index)
        self._callbacks: List = []  # 事件回调（用于 UI 通知）

    def on_event(self, callback) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, event: GameEvent) -> None:
        """触发事件通知"""
        self.state.events.append(event)
        for cb in self._callbacks:
            cb(event)

    # ============================================================
    #  发牌阶段
    # ============================================================

    def deal(self, rng: Optional[random.Random] = None) -> None:
        """洗牌发牌，地主拿走底牌并首先出牌"""
        for p in self.players:
            p.reset_for_new_round()
        self.state = RoundState(players=self.players, landlord_index=self.landlord_index)
        s = self.state
        s.phase = GamePhase.DEALING

        hands, lord_cards = deal(shuffle(create_deck(), rng))
        for p, hand in zip(self.players, hands):
            p.hand = hand
        s.lord_cards = lord_cards

        landlord = self.players[self.landlord_index]
        landlord.hand.extend(lord_cards)
        landlord.sort_hand()
        for p in self.players:
            p.role = Role.LANDLORD if p is landlord else Role.FARMER

        s.current_player = self.landlord_index
        s.phase = GamePhase.PLAYING
        logger.info("发牌完成，地主为 %s", landlord.name)
        self._emit(GameEvent("deal", self.landlord_index, list(lord_cards)))

    # ============================================================
    #  出牌阶段
    # ============================================================

    def submit_play(self, pid: int, cards: Sequence[Card]) -> PlayCheck:
        """玩家出牌。校验失败时不修改任何状态"""
        s = self.state
        if s.phase != GamePhase.PLAYING:
            return PlayCheck(False, REASON_ROUND_OVER)
        if pid != s.current_player:
            return PlayCheck(False, REASON_NOT_YOUR_TURN)
        if not cards:
            return self.submit_pass(pid)

        player = self.players[pid]
        if not player.has_cards(cards):
            return PlayCheck(False, REASON_NOT_IN_HAND)

        check = is_valid_play(s.previous_for(pid), cards)
        if not check.ok:
            logger.info("%s 出牌被拒绝: %s", player.name, check.reason)
            return check

        played = list(cards)
        player.remove_cards(played)
        s.last_play_cards = played
        s.last_player = pid
        s.play_history.append((pid, played))
        self._emit(GameEvent("play", pid, played))

        if player.hand_size == 0:
            self._finish_round(pid)
        else:
            self._advance(pid)
        return check

    def submit_pass(self, pid: int) -> PlayCheck:
        """玩家不出。桌面上没有别人的牌时不能不出"""
        s = self.state
        if s.phase != GamePhase.PLAYING:
            return PlayCheck(False, REASON_ROUND_OVER)
        if pid != s.current_player:
            return PlayCheck(False, REASON_NOT_YOUR_TURN)

        check = is_valid_play(s.previous_for(pid), [])
        if check.ok:
            self._emit(GameEvent("pass", pid))
            self._advance(pid)
        return check

    def play_ai_turn(self) -> Optional[List[Card]]:
        """让当前座位的 AI 出一手，返回实际出的牌，None 表示不出"""
        pid = self.state.current_player
        strategy = self.strategies[pid]
        if strategy is None:
            raise RuntimeError(f"座位 {pid} 是人类玩家，不能由 AI 代打")
        cards = strategy.decide_play(self.players[pid], self.state)
        return self.apply_ai_move(pid, cards)

    def apply_ai_move(self, pid: int, cards: Optional[Sequence[Card]]) -> Optional[List[Card]]:
        """
        应用 AI 的决策。AI 的出牌同样经过校验，
        被拒绝的出牌一律视为不出。
        """
        if cards:
            check = self.submit_play(pid, cards)
            if check.ok:
                return list(cards)
            logger.info(
                "%s 的出牌 %s 不合法(%s)，视为不出",
                self.players[pid].name, list(cards), check.reason,
            )
        self._force_pass(pid)
        return None

    def _force_pass(self, pid: int) -> None:
        """AI 不出：若桌面上是自己的牌（自由出牌时），清空桌面"""
        s = self.state
        if s.phase != GamePhase.PLAYING:
            return
        if s.last_player is None or s.last_player == pid:
            s.last_play_cards = []
            s.last_player = None
        self._emit(GameEvent("pass", pid))
        self._advance(pid)

    def _advance(self, pid: int) -> None:
        s = self.state
        s.turn_index += 1
        s.current_player = (pid + 1) % 3

    def run_ai_turns(self) -> None:
        """连续驱动 AI 出牌，直到轮到人类玩家或牌局结束"""
        s = self.state
        while s.phase == GamePhase.PLAYING and self.strategies[s.current_player] is not None:
            self.play_ai_turn()

    # ============================================================
    #  结算阶段
    # ============================================================

    def _finish_round(self, winner_id: int) -> None:
        """有人出完牌，牌局结束"""
        s = self.state
        s.phase = GamePhase.FINISHED
        s.winner = winner_id
        side = "地主" if s.landlord_won else "农民"
        logger.info("%s 出完手牌，%s方获胜", self.players[winner_id].name, side)
        self._emit(GameEvent("finish", winner_id, s.landlord_won))

    def side_won(self, pid: int) -> bool:
        """pid 所在的一方是否获胜"""
        s = self.state
        if s.winner is None:
            return False
        return (pid == s.landlord_index) == s.landlord_won

    # ============================================================
    #  完整游戏入口
    # ============================================================

    def run_round(self, rng: Optional[random.Random] = None) -> RoundState:
        """发牌并让 AI 打完一局（所有座位都必须是 AI）"""
        if any(st is None for st in self.strategies):
            raise ValueError("run_round 只适用于三个 AI 座位")
        self.deal(rng)
        self.run_ai_turns()
        return self.state
