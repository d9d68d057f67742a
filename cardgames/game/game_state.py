"""牌局状态 - 一局斗地主的完整状态，显式传给控制器与渲染器"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Any

from cardgames.engine.card import Card
from cardgames.game.player import Player


class GamePhase(str, Enum):
    """游戏阶段"""
    WAITING = "WAITING"         # 等待开始
    DEALING = "DEALING"         # 发牌中
    PLAYING = "PLAYING"         # 出牌中
    FINISHED = "FINISHED"       # 已结束


@dataclass
class GameEvent:
    """游戏事件记录"""
    action: str                  # "deal", "play", "pass", "finish"
    player_id: Optional[int] = None
    data: Any = None             # 出的牌 / 胜者 / None


@dataclass
class RoundState:
    """一局游戏的完整状态"""
    players: List[Player]
    phase: GamePhase = GamePhase.WAITING
    landlord_index: int = 0
    lord_cards: List[Card] = field(default_factory=list)

    # 出牌相关
    current_player: int = 0
    last_play_cards: List[Card] = field(default_factory=list)
    last_player: Optional[int] = None
    turn_index: int = 0              # 已进行的回合数

    # 结算相关
    winner: Optional[int] = None

    # 事件日志
    events: List[GameEvent] = field(default_factory=list)
    play_history: List[tuple] = field(default_factory=list)  # (player_id, cards)

    @property
    def finished(self) -> bool:
        return self.phase == GamePhase.FINISHED

    def previous_for(self, player_id: int) -> List[Card]:
        """
        该玩家需要压的牌。
        还没人出过牌，或上一手就是自己出的（其余两家都不出）时为空，可自由出牌。
        """
        if self.last_player is None or self.last_player == player_id:
            return []
        return list(self.last_play_cards)

    @property
    def landlord_won(self) -> Optional[bool]:
        if self.winner is None:
            return None
        return self.winner == self.landlord_index
