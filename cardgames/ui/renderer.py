"""终端可视化渲染器 - 在终端中展示斗地主对局过程"""

import time
from typing import List, Optional, Sequence

from cardgames.engine.card import Card
from cardgames.engine.hand_detector import classify
from cardgames.engine.hand_type import HandType
from cardgames.game.player import Player, Role
from cardgames.game.game_state import RoundState, GameEvent
from cardgames.game.leaderboard import LeaderboardEntry, YOU


# 颜色常量 (ANSI)
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
GRAY = "\033[90m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

# 角色颜色映射
ROLE_COLOR = {
    Role.LANDLORD: RED,
    Role.FARMER: GREEN,
    Role.UNKNOWN: DIM,
}

# 牌型显示名
HAND_TYPE_NAME = {
    HandType.SINGLE: "single",
    HandType.PAIR: "pair",
    HandType.TRIPLE: "triple",
    HandType.TRIPLE_SINGLE: "triple + single",
    HandType.STRAIGHT: "straight",
    HandType.DOUBLE_STRAIGHT: "double straight",
    HandType.PLANE: "plane",
    HandType.BOMB: "BOMB 💣",
}

PASS_WORDS = {"p", "pass"}


def parse_selection(text: str, hand: Sequence[Card]) -> Optional[List[Card]]:
    """
    解析人类玩家的输入：空格分隔的手牌序号（从 0 开始）。
    返回空列表表示不出；输入非法返回 None。
    """
    text = text.strip().lower()
    if text in PASS_WORDS:
        return []
    if not text:
        return None
    indexes = []
    for token in text.replace(",", " ").split():
        if not token.isdigit():
            return None
        idx = int(token)
        if idx >= len(hand) or idx in indexes:
            return None
        indexes.append(idx)
    return [hand[i] for i in sorted(indexes)]


class TerminalRenderer:
    """终端可视化渲染器"""

    def __init__(self, delay: float = 0.8):
        self.delay = delay  # 每步之间的延迟（秒）

    def pause(self, seconds: float = 0) -> None:
        """暂停"""
        if self.delay:
            time.sleep(seconds or self.delay)

    # ============================================================
    #  牌面渲染
    # ============================================================

    @staticmethod
    def format_cards(cards: Sequence[Card]) -> str:
        """将牌列表格式化为彩色字符串"""
        parts = []
        for c in cards:
            display = c.display
            if c.is_joker:
                color = RED if display == "BJ" else CYAN
                parts.append(f"{color}{BOLD}{display}{RESET}")
            elif c.suit.value in ("♥", "♦"):
                parts.append(f"{RED}{display}{RESET}")
            else:
                parts.append(display)
        return " ".join(parts) or f"{DIM}-{RESET}"

    @staticmethod
    def format_hand_with_indexes(cards: Sequence[Card]) -> str:
        """带序号的手牌，供人类玩家选择"""
        return "  ".join(
            f"{GRAY}{i}:{RESET}{TerminalRenderer.format_cards([c])}"
            for i, c in enumerate(cards)
        )

    @staticmethod
    def format_player_name(player: Player) -> str:
        """格式化玩家名（带角色颜色）"""
        color = ROLE_COLOR.get(player.role, DIM)
        role_tag = ""
        if player.role == Role.LANDLORD:
            role_tag = " [landlord👑]"
        elif player.role == Role.FARMER:
            role_tag = " [farmer🌾]"
        return f"{color}{BOLD}{player.name}{role_tag}{RESET}"

    # ============================================================
    #  分隔线与标题
    # ============================================================

    @staticmethod
    def separator(char: str = "─", width: int = 60) -> str:
        return char * width

    def print_header(self, title: str) -> None:
        """打印带框的标题"""
        print(f"\n{YELLOW}{BOLD}{'═' * 60}{RESET}")
        print(f"{YELLOW}{BOLD}  {title}{RESET}")
        print(f"{YELLOW}{BOLD}{'═' * 60}{RESET}\n")

    # ============================================================
    #  发牌展示
    # ============================================================

    def show_deal(self, players: List[Player], lord_cards: List[Card], reveal: bool = False) -> None:
        """展示发牌结果；AI 手牌默认只显示张数"""
        self.print_header("🃏 Cards dealt")
        for p in players:
            name = self.format_player_name(p)
            if p.is_human or reveal:
                print(f"  {name} ({p.hand_size}): {self.format_cards(p.hand)}")
            else:
                print(f"  {name} ({p.hand_size} cards)")
        print(f"\n  {MAGENTA}Landlord cards: {self.format_cards(lord_cards)}{RESET}\n")

    # ============================================================
    #  出牌阶段展示
    # ============================================================

    def show_table(self, state: RoundState, player: Player) -> None:
        """轮到人类玩家时展示桌面与手牌"""
        previous = state.previous_for(player.id)
        if previous:
            who = state.players[state.last_player].name
            print(f"  {DIM}To beat ({who}):{RESET} {self.format_cards(previous)}")
        else:
            print(f"  {DIM}Free lead: play any combination.{RESET}")
        print(f"  {self.format_hand_with_indexes(player.hand)}")

    def show_play(self, player: Player, cards: Sequence[Card]) -> None:
        """展示一次出牌"""
        name = self.format_player_name(player)
        combo = classify(cards)
        type_name = HAND_TYPE_NAME.get(combo.type, combo.type.value) if combo else "?"
        print(f"  {name} plays [{type_name}]: {self.format_cards(cards)}  ({player.hand_size} left)")

    def show_pass(self, player: Player) -> None:
        """展示不出"""
        name = self.format_player_name(player)
        print(f"  {name}: {DIM}pass{RESET}")

    def show_error(self, message: str) -> None:
        print(f"  {RED}✗ {message}{RESET}")

    # ============================================================
    #  结算阶段展示
    # ============================================================

    def show_result(self, state: RoundState) -> None:
        """展示游戏结果"""
        self.print_header("🏆 Round over")
        winner = state.players[state.winner]
        side = "The landlord wins!" if state.landlord_won else "The farmers win!"
        print(f"  {self.format_player_name(winner)} played out first. {BOLD}{side}{RESET}")
        print(f"  Turns played: {state.turn_index}\n")

    def show_leaderboard(self, entries: List[LeaderboardEntry]) -> None:
        print(f"  {self.separator('─', 40)}")
        print(f"  {'#':<4}{'Player':<28}{'Wins':>6}")
        print(f"  {self.separator('─', 40)}")
        for i, e in enumerate(entries, 1):
            style = BOLD if e.name == YOU else ""
            print(f"  {style}{i:<4}{e.name:<28}{e.wins:>6}{RESET}")
        print()

    # ============================================================
    #  事件回调（注册到 RoundController）
    # ============================================================

    def make_event_callback(self, players: List[Player]):
        """创建事件回调函数，供 RoundController.on_event() 使用"""
        renderer = self

        def callback(event: GameEvent) -> None:
            if event.player_id is None:
                return
            player = players[event.player_id]
            if event.action == "play":
                renderer.show_play(player, event.data)
                if not player.is_human:
                    renderer.pause()
            elif event.action == "pass":
                renderer.show_pass(player)
                if not player.is_human:
                    renderer.pause(0.3)

        return callback
