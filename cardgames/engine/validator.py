"""出牌校验 - 人类与 AI 出牌的唯一合法性判定入口"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .card import Card
from .hand_type import Combination
from .hand_detector import classify, can_beat


REASON_UNSUPPORTED = "unsupported combination"
REASON_TOO_WEAK = "play must be stronger than the previous one"
REASON_NOTHING_TO_PASS = "nothing to pass on"


@dataclass(frozen=True)
class PlayCheck:
    """校验结果：ok=False 时调用方不得修改任何状态"""
    ok: bool
    reason: str = ""
    info: Optional[Combination] = None

    def __bool__(self) -> bool:
        return self.ok


def is_valid_play(previous_cards: Sequence[Card], proposed_cards: Sequence[Card]) -> PlayCheck:
    """
    校验 proposed_cards 能否接在 previous_cards 之后。
    - 非法牌型 → 失败
    - 不出：只有桌面上有上一手时才允许
    - 上一手为空：任何合法牌型都可以首出
    - 否则必须压过上一手
    """
    prev = classify(previous_cards)
    nxt = classify(proposed_cards)

    if nxt is None:
        return PlayCheck(False, REASON_UNSUPPORTED)
    if nxt.is_pass:
        if prev is not None and not prev.is_pass:
            return PlayCheck(True, info=nxt)
        return PlayCheck(False, REASON_NOTHING_TO_PASS)
    if prev is None or prev.is_pass:
        return PlayCheck(True, info=nxt)
    if not can_beat(prev, nxt):
        return PlayCheck(False, REASON_TOO_WEAK, info=nxt)
    return PlayCheck(True, info=nxt)
