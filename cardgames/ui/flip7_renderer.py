"""Flip 7 终端渲染"""

from typing import Dict, List

from cardgames.flip7.deck import FlipCard, card_to_str
from cardgames.flip7.game import PlayerState
from cardgames.ui.renderer import (
    BLUE, BOLD, CYAN, GRAY, GREEN, MAGENTA, RED, RESET, YELLOW,
)


def player_status(player: PlayerState) -> str:
    """带颜色的玩家状态"""
    if player.busted:
        return f"{RED}{BOLD}✗ {player.name}{RESET} (busted)"
    if player.frozen:
        return f"{BLUE}❄ {player.name}{RESET} (frozen)"
    if player.stopped:
        return f"{YELLOW}⏸ {player.name}{RESET} (stopped)"
    return f"{GREEN}{BOLD}→ {player.name}{RESET}"


def status_word(player: PlayerState) -> str:
    if player.busted:
        return "busted"
    if player.frozen:
        return "frozen"
    if player.stopped:
        return "stopped"
    return ""


class Flip7Renderer:
    """Flip 7 终端渲染器"""

    def show_title(self, num_players: int) -> None:
        print(f"\n{MAGENTA}{BOLD}{'═' * 28}{RESET}")
        print(f"{CYAN}{BOLD}🎮 FLIP 7 - {num_players} players{RESET}")
        print(f"{MAGENTA}{BOLD}{'═' * 28}{RESET}\n")

    def show_round_header(self, round_number: int, players: List[PlayerState]) -> None:
        bar = f"  {MAGENTA}║{RESET} "
        print(f"\n{MAGENTA}{BOLD}╔════════ ROUND {round_number} ════════╗{RESET}")
        print(f"{MAGENTA}{BOLD}║{RESET} " + bar.join(player_status(p) for p in players))
        print(f"{MAGENTA}{BOLD}╚════════════════════════════════╝{RESET}\n")

    def show_turn(self, player: PlayerState) -> None:
        print(f"{CYAN}{player.name}{RESET} {GRAY}({player.total_score} pts){RESET}")
        print(f"Cards: {player.hand_str()}\n")

    def show_draw(self, player: PlayerState, card: FlipCard) -> None:
        print(f"{BOLD}→ {player.name} draws: {card_to_str(card)}{RESET}")

    def show_hand(self, player: PlayerState) -> None:
        print(f"Cards: {player.hand_str()}\n")

    def show_inactive(self, player: PlayerState) -> None:
        print(f"{GRAY}{status_word(player)}{RESET}")

    def show_targets(self, title: str, candidates: List[PlayerState]) -> None:
        print(f"\n{CYAN}{BOLD}{title}{RESET}")
        for i, p in enumerate(candidates, 1):
            extra = " [2ndCHANCE]" if p.has_second_chance else ""
            print(f"  {GREEN}{i}{RESET}. {p.name} {GRAY}({p.total_score} pts){extra}{RESET}")

    def show_message(self, text: str, color: str = GRAY) -> None:
        print(f"{color}{text}{RESET}")

    def show_results(self, round_number: int, players: List[PlayerState], scores: Dict[int, int]) -> None:
        """本局结果，按本局得分降序"""
        print(f"\n{MAGENTA}{BOLD}╔════════════ ROUND {round_number} RESULTS ════════════╗{RESET}")
        ranked = sorted(players, key=lambda p: scores[p.id], reverse=True)
        for pos, p in enumerate(ranked, 1):
            score = scores[p.id]
            color = GREEN if score > 0 else RED
            print(
                f"{MAGENTA}{BOLD}║{RESET} {pos}. {p.name:<12} {color}{score:>3}{RESET} pts "
                f"(total: {CYAN}{p.total_score:>3}{RESET}) {GRAY}{status_word(p)}{RESET}"
            )
        print(f"{MAGENTA}{BOLD}╚{'═' * 45}╝{RESET}\n")

    def show_winners(self, winners: List[PlayerState]) -> None:
        print(f"{MAGENTA}{BOLD}╔{'═' * 44}╗{RESET}")
        if len(winners) == 1:
            w = winners[0]
            print(f"{GREEN}{BOLD} 🏆  {w.name.upper()} WINS! {w.total_score} pts{RESET}")
        else:
            print(f"{GREEN}{BOLD} 🏆  TIE!{RESET}")
            for w in winners:
                print(f"{GREEN}{BOLD} {w.name}: {w.total_score} pts{RESET}")
        print(f"{MAGENTA}{BOLD}╚{'═' * 44}╝{RESET}\n")
