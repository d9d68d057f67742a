"""终端交互 - 斗地主人机对局与 Flip 7 的回合循环"""

import logging
import random
from typing import Callable, List, Optional, Sequence

from cardgames.flip7.deck import CardType, FlipCard, card_to_str
from cardgames.flip7.game import Flip7Game, Flip7Round, PlayerState
from cardgames.flip7.history import RoundHistory
from cardgames.game.controller import RoundController
from cardgames.game.game_state import RoundState
from cardgames.game.leaderboard import Leaderboard, YOU
from cardgames.ui.flip7_renderer import Flip7Renderer
from cardgames.ui.renderer import TerminalRenderer, parse_selection, RED, YELLOW

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]

YES_WORDS = {"yes", "y"}
NO_WORDS = {"no", "n"}


# ============================================================
#  斗地主
# ============================================================

def run_ddz_round(
    controller: RoundController,
    renderer: TerminalRenderer,
    leaderboard: Optional[Leaderboard] = None,
    input_fn: Optional[InputFn] = None,
    rng: Optional[random.Random] = None,
) -> RoundState:
    """打一局斗地主：AI 座位自动出牌，人类座位从终端读取输入"""
    input_fn = input_fn or input
    controller.on_event(renderer.make_event_callback(controller.players))
    controller.deal(rng)
    s = controller.state
    renderer.show_deal(controller.players, s.lord_cards)

    while not s.finished:
        pid = s.current_player
        player = controller.players[pid]
        if not player.is_human:
            controller.play_ai_turn()
            continue

        renderer.show_table(s, player)
        cards = parse_selection(input_fn("Your play (card indexes, or 'p' to pass): "), player.hand)
        if cards is None:
            renderer.show_error("enter card indexes such as '0 1 2', or 'p' to pass")
            continue
        check = controller.submit_play(pid, cards) if cards else controller.submit_pass(pid)
        if not check.ok:
            renderer.show_error(check.reason)

    renderer.show_result(s)
    humans = [p for p in controller.players if p.is_human]
    if leaderboard is not None and humans:
        if controller.side_won(humans[0].id):
            leaderboard.add_win(YOU)
        renderer.show_leaderboard(leaderboard.top())
    return s


# ============================================================
#  Flip 7
# ============================================================

def ask_yes_no(input_fn: InputFn, prompt: str, renderer: Flip7Renderer) -> bool:
    """反复询问直到得到 yes/no"""
    while True:
        answer = input_fn(prompt).strip().lower()
        if answer in YES_WORDS:
            return True
        if answer in NO_WORDS:
            return False
        renderer.show_message('Invalid answer. Type "yes" or "no".', RED)


def ask_choice(input_fn: InputFn, candidates: Sequence[PlayerState]) -> Optional[PlayerState]:
    """按 1..n 选择一名玩家，输入非法返回 None"""
    answer = input_fn(f"Target (1-{len(candidates)}): ").strip()
    if not answer.isdigit():
        return None
    idx = int(answer) - 1
    if 0 <= idx < len(candidates):
        return candidates[idx]
    return None


def resolve_action_interactive(
    rnd: Flip7Round,
    acting: PlayerState,
    card: FlipCard,
    renderer: Flip7Renderer,
    input_fn: InputFn = input,
) -> Optional[PlayerState]:
    """行动牌可以作用于任意在场玩家（包括自己），由玩家选择目标"""
    targets = rnd.action_targets()
    if not targets:
        return rnd.play_action(card, acting, acting)

    renderer.show_targets(f"Action {card_to_str(card)}: choose a target", targets)
    target = ask_choice(input_fn, targets)
    if target is None:
        renderer.show_message("Invalid target, applied to yourself.", RED)
        target = acting

    def redirect(candidates: List[PlayerState]) -> Optional[PlayerState]:
        renderer.show_message(f"{target.name} already has a second chance.", YELLOW)
        renderer.show_targets("Give it to another active player:", candidates)
        return ask_choice(input_fn, candidates)

    final = rnd.play_action(card, acting, target, redirect)
    if final is None:
        renderer.show_message("Card discarded.")
    else:
        renderer.show_message(f"✓ Action on {final.name}")
    return final


def play_flip7_round(
    game: Flip7Game,
    renderer: Flip7Renderer,
    input_fn: InputFn = input,
) -> Flip7Round:
    """打一局：轮流询问每位在场玩家是否继续抽牌"""
    rnd = game.new_round()

    def resolve(acting: PlayerState, card: FlipCard) -> None:
        renderer.show_draw(acting, card)
        resolve_action_interactive(rnd, acting, card, renderer, input_fn)

    for player, card in rnd.deal_initial_cards(resolve):
        if card.type != CardType.ACTION:
            renderer.show_draw(player, card)
    renderer.show_round_header(game.round_number, rnd.players)

    idx = 0
    while not rnd.is_round_over():
        player = rnd.players[idx]
        if player.is_active():
            renderer.show_turn(player)
            if not ask_yes_no(input_fn, "Draw a card? (yes/no): ", renderer):
                player.stopped = True
                renderer.show_message(f"⏸ {player.name} stops", YELLOW)
            else:
                card = rnd.draw_for_player(player)
                if card is None:
                    renderer.show_message("No more cards - end of round", RED)
                    player.stopped = True
                else:
                    renderer.show_draw(player, card)
                    if card.type == CardType.ACTION:
                        resolve_action_interactive(rnd, player, card, renderer, input_fn)
                    renderer.show_hand(player)
        else:
            renderer.show_inactive(player)
        idx = (idx + 1) % len(rnd.players)
    return rnd


def run_flip7(
    game: Flip7Game,
    renderer: Flip7Renderer,
    history: RoundHistory,
    input_fn: Optional[InputFn] = None,
) -> List[int]:
    """完整的一场 Flip 7，直到有人达到目标分；返回获胜玩家 id"""
    input_fn = input_fn or input
    history.reset()
    renderer.show_title(game.num_players)
    while True:
        rnd = play_flip7_round(game, renderer, input_fn)
        scores = game.finish_round(rnd)
        renderer.show_results(game.round_number, rnd.players, scores)
        history.save_round(rnd.players)

        winners = game.winners()
        if winners:
            renderer.show_winners([p for p in rnd.players if p.id in winners])
            logger.info("Flip 7 结束，获胜者: %s", winners)
            return winners
        renderer.show_message("New round...")
