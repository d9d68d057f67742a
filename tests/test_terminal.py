"""终端交互测试 - 用脚本化的输入驱动对局"""

import itertools
import random

from cardgames.ai.search_ai import SearchAI, choose_play
from cardgames.engine.card import Card, Rank, Suit
from cardgames.engine.validator import is_valid_play
from cardgames.flip7.deck import Action, FlipCard
from cardgames.flip7.game import Flip7Game, Flip7Round
from cardgames.flip7.history import RoundHistory
from cardgames.game.controller import RoundController
from cardgames.game.leaderboard import Leaderboard, YOU
from cardgames.ui.flip7_renderer import Flip7Renderer
from cardgames.ui.renderer import TerminalRenderer, parse_selection
from cardgames.ui.terminal import (
    ask_choice, ask_yes_no, play_flip7_round, resolve_action_interactive,
    run_ddz_round, run_flip7,
)


def scripted(*answers):
    """按顺序返回预设答案的输入函数"""
    it = iter(answers)
    return lambda prompt: next(it)


# ============================================================
#  输入解析
# ============================================================

class TestParseSelection:

    HAND = [Card(Rank.THREE, Suit.SPADE), Card(Rank.FOUR, Suit.HEART), Card(Rank.FIVE, Suit.CLUB)]

    def test_indexes(self):
        assert parse_selection("2 0", self.HAND) == [self.HAND[0], self.HAND[2]]

    def test_commas(self):
        assert parse_selection("0,1", self.HAND) == self.HAND[:2]

    def test_pass(self):
        assert parse_selection("p", self.HAND) == []
        assert parse_selection(" PASS ", self.HAND) == []

    def test_invalid(self):
        assert parse_selection("", self.HAND) is None
        assert parse_selection("x", self.HAND) is None
        assert parse_selection("3", self.HAND) is None
        assert parse_selection("1 1", self.HAND) is None
        assert parse_selection("-1", self.HAND) is None


class TestPrompts:

    def test_yes_no_retries(self, capsys):
        assert ask_yes_no(scripted("maybe", "Y"), "? ", Flip7Renderer()) is True
        assert "Invalid answer" in capsys.readouterr().out
        assert ask_yes_no(scripted("no"), "? ", Flip7Renderer()) is False

    def test_choice(self):
        rnd = Flip7Round(3, deck=[])
        assert ask_choice(scripted("2"), rnd.players) is rnd.players[1]
        assert ask_choice(scripted("4"), rnd.players) is None
        assert ask_choice(scripted("two"), rnd.players) is None


# ============================================================
#  斗地主
# ============================================================

class TestDdzRound:

    def _autopilot(self, gc: RoundController):
        """人类座位按 AI 的选择出牌，第一次先输入一条非法指令"""
        answers = ["nonsense"]

        def input_fn(prompt):
            if answers:
                return answers.pop()
            me = gc.players[0]
            prev = gc.state.previous_for(0)
            move = choose_play(prev, me.hand)
            if move.is_pass or not is_valid_play(prev, move.cards).ok:
                return "p"
            return " ".join(str(me.hand.index(card)) for card in move.cards)

        return input_fn

    def test_human_round_finishes(self, tmp_path, capsys):
        gc = RoundController([YOU, "Top AI", "Bottom AI"], [None, SearchAI(), SearchAI()])
        board = Leaderboard(str(tmp_path / "board.json"))
        state = run_ddz_round(gc, TerminalRenderer(delay=0), board,
                              input_fn=self._autopilot(gc), rng=random.Random(4))

        assert state.finished
        you = next(e for e in board.entries if e.name == YOU)
        assert you.wins == (1 if gc.side_won(0) else 0)
        out = capsys.readouterr().out
        assert "Round over" in out
        assert "enter card indexes" in out

    def test_all_ai_round_never_asks(self):
        gc = RoundController(["A", "B", "C"], [SearchAI(), SearchAI(), SearchAI()])

        def no_input(prompt):
            raise AssertionError("unexpected prompt")

        state = run_ddz_round(gc, TerminalRenderer(delay=0), None, input_fn=no_input,
                              rng=random.Random(8))
        assert state.finished


# ============================================================
#  Flip 7
# ============================================================

def _flip7_answers(*draws: str):
    """Target 提示选第一个，其余提示轮流回答 draws"""
    cycle = itertools.cycle(draws)
    return lambda prompt: "1" if prompt.startswith("Target") else next(cycle)


class TestFlip7Terminal:

    def test_action_target_chosen(self):
        rnd = Flip7Round(3, deck=[])
        freeze = FlipCard.action(Action.FREEZE)
        final = resolve_action_interactive(rnd, rnd.players[0], freeze, Flip7Renderer(), scripted("3"))
        assert final is rnd.players[2]
        assert rnd.players[2].frozen

    def test_invalid_target_falls_back_to_self(self):
        rnd = Flip7Round(3, deck=[])
        freeze = FlipCard.action(Action.FREEZE)
        final = resolve_action_interactive(rnd, rnd.players[1], freeze, Flip7Renderer(), scripted("9"))
        assert final is rnd.players[1]

    def test_round_with_everyone_drawing_ends(self):
        game = Flip7Game(3, rng=random.Random(2))
        rnd = play_flip7_round(game, Flip7Renderer(), _flip7_answers("yes"))
        assert rnd.is_round_over()

    def test_round_with_everyone_stopping(self):
        game = Flip7Game(2, rng=random.Random(5))
        rnd = play_flip7_round(game, Flip7Renderer(), _flip7_answers("no"))
        assert all(p.stopped or p.busted or p.frozen for p in rnd.players)

    def test_full_game_writes_history(self, tmp_path):
        game = Flip7Game(2, win_score=40, rng=random.Random(9))
        history = RoundHistory(str(tmp_path / "games.json"))
        winners = run_flip7(game, Flip7Renderer(), history, _flip7_answers("yes", "yes", "no"))

        assert winners
        assert max(game.scores) >= 40
        assert all(game.scores[w - 1] == max(game.scores) for w in winners)
        assert len(history.games) == game.round_number
