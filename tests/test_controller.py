"""牌局控制器测试 - 全 AI 对局与人类出牌校验"""

import random

import pytest
from cardgames.ai.search_ai import SearchAI
from cardgames.engine.card import Card, Rank, Suit
from cardgames.engine.validator import REASON_NOTHING_TO_PASS, REASON_TOO_WEAK
from cardgames.game.controller import (
    RoundController, REASON_NOT_YOUR_TURN, REASON_NOT_IN_HAND, REASON_ROUND_OVER,
)
from cardgames.game.game_state import GamePhase
from cardgames.game.player import Role


def _c(rank: Rank, suit: Suit = Suit.SPADE) -> Card:
    return Card(rank=rank, suit=suit)


def _ai_controller(landlord_index: int = 0) -> RoundController:
    return RoundController(["A", "B", "C"], [SearchAI(), SearchAI(), SearchAI()], landlord_index)


def _human_controller() -> RoundController:
    gc = RoundController(["You", "B", "C"], [None, SearchAI(), SearchAI()])
    gc.deal(random.Random(7))
    return gc


def _set_hands(gc: RoundController, *hands) -> None:
    for p, hand in zip(gc.players, hands):
        p.hand = list(hand)


# ============================================================
#  构造与发牌
# ============================================================

class TestSetup:

    def test_needs_three_players(self):
        with pytest.raises(ValueError):
            RoundController(["A", "B"], [SearchAI(), SearchAI()])

    def test_bad_landlord_index(self):
        with pytest.raises(ValueError):
            RoundController(["A", "B", "C"], [None, None, None], landlord_index=3)

    def test_deal_gives_landlord_20_cards(self):
        gc = _ai_controller(landlord_index=1)
        gc.deal(random.Random(1))
        assert [p.hand_size for p in gc.players] == [17, 20, 17]
        assert gc.players[1].role == Role.LANDLORD
        assert gc.players[0].role == Role.FARMER
        assert gc.state.current_player == 1
        assert gc.state.phase == GamePhase.PLAYING
        assert all(card in gc.players[1].hand for card in gc.state.lord_cards)

    def test_redeal_resets_hands_and_roles(self):
        gc = _ai_controller(landlord_index=1)
        gc.deal(random.Random(1))
        _set_hands(gc, [_c(Rank.THREE)], [], [_c(Rank.FOUR)] * 30)
        gc.landlord_index = 2
        gc.deal(random.Random(2))
        assert [p.hand_size for p in gc.players] == [17, 17, 20]
        assert [p.role for p in gc.players] == [Role.FARMER, Role.FARMER, Role.LANDLORD]

    def test_human_seat_detection(self):
        gc = _human_controller()
        assert gc.players[0].is_human
        assert not gc.players[1].is_human


# ============================================================
#  全 AI 对局
# ============================================================

class TestAIRound:

    @pytest.mark.parametrize("seed", range(5))
    def test_round_terminates_with_winner(self, seed):
        gc = _ai_controller()
        s = gc.run_round(random.Random(seed))
        assert s.finished
        assert s.winner is not None
        assert gc.players[s.winner].hand_size == 0
        assert s.landlord_won == (s.winner == 0)

    def test_every_recorded_play_was_legal(self):
        from cardgames.engine.hand_detector import classify
        gc = _ai_controller()
        s = gc.run_round(random.Random(11))
        for _, cards in s.play_history:
            assert classify(cards) is not None

    def test_events_reported(self):
        gc = _ai_controller()
        seen = []
        gc.on_event(lambda e: seen.append(e.action))
        gc.run_round(random.Random(3))
        assert seen[0] == "deal"
        assert seen[-1] == "finish"
        assert "play" in seen

    def test_run_round_rejects_human_seat(self):
        gc = RoundController(["You", "B", "C"], [None, SearchAI(), SearchAI()])
        with pytest.raises(ValueError):
            gc.run_round()

    def test_rejected_ai_move_becomes_pass(self):
        gc = _ai_controller()
        gc.deal(random.Random(5))
        _set_hands(gc, [_c(Rank.TWO), _c(Rank.THREE)], [_c(Rank.FOUR), _c(Rank.FIVE)], [_c(Rank.SIX)])
        assert gc.submit_play(0, [_c(Rank.TWO)]).ok
        played = gc.apply_ai_move(1, [_c(Rank.FOUR)])
        assert played is None
        assert gc.players[1].hand_size == 2
        assert gc.state.current_player == 2
        assert gc.state.events[-1].action == "pass"


# ============================================================
#  人类出牌
# ============================================================

class TestHumanMoves:

    def test_not_your_turn(self):
        gc = _human_controller()
        check = gc.submit_play(1, gc.players[1].hand[:1])
        assert not check.ok
        assert check.reason == REASON_NOT_YOUR_TURN

    def test_cards_not_in_hand(self):
        gc = _human_controller()
        foreign = gc.players[1].hand[0]
        check = gc.submit_play(0, [foreign])
        assert not check.ok
        assert check.reason == REASON_NOT_IN_HAND
        assert gc.players[0].hand_size == 20

    def test_cannot_pass_on_free_lead(self):
        gc = _human_controller()
        check = gc.submit_pass(0)
        assert not check.ok
        assert check.reason == REASON_NOTHING_TO_PASS
        assert gc.state.current_player == 0

    def test_failed_play_changes_nothing(self):
        gc = _human_controller()
        _set_hands(gc, [_c(Rank.THREE), _c(Rank.FIVE)], [_c(Rank.NINE), _c(Rank.TEN)], [_c(Rank.SIX)])
        gc.state.last_player = 2
        gc.state.last_play_cards = [_c(Rank.EIGHT)]
        check = gc.submit_play(0, [_c(Rank.FIVE)])
        assert check.reason == REASON_TOO_WEAK
        assert gc.players[0].hand_size == 2
        assert gc.state.last_play_cards == [_c(Rank.EIGHT)]
        assert gc.state.current_player == 0

    def test_valid_play_then_ai_follows(self):
        gc = _human_controller()
        _set_hands(gc, [_c(Rank.THREE), _c(Rank.FIVE)], [_c(Rank.NINE), _c(Rank.TEN)], [_c(Rank.SIX), _c(Rank.ACE)])
        assert gc.submit_play(0, [_c(Rank.THREE)]).ok
        assert gc.state.current_player == 1
        gc.run_ai_turns()
        assert gc.state.current_player == 0
        assert gc.state.previous_for(0) == [_c(Rank.ACE)]

    def test_two_passes_give_free_lead(self):
        gc = _human_controller()
        _set_hands(gc, [_c(Rank.TWO), _c(Rank.FIVE)], [_c(Rank.NINE), _c(Rank.TEN)], [_c(Rank.SIX), _c(Rank.ACE)])
        assert gc.submit_play(0, [_c(Rank.TWO)]).ok
        gc.run_ai_turns()
        assert gc.state.current_player == 0
        assert gc.state.previous_for(0) == []
        assert gc.submit_play(0, [_c(Rank.FIVE)]).ok

    def test_playing_last_card_ends_round(self):
        gc = _human_controller()
        _set_hands(gc, [_c(Rank.FIVE)], [_c(Rank.NINE)], [_c(Rank.SIX)])
        assert gc.submit_play(0, [_c(Rank.FIVE)]).ok
        assert gc.state.finished
        assert gc.state.winner == 0
        assert gc.side_won(0)
        assert not gc.side_won(1)
        assert gc.submit_pass(1).reason == REASON_ROUND_OVER

    def test_farmers_win_together(self):
        gc = _human_controller()
        _set_hands(gc, [_c(Rank.THREE), _c(Rank.FOUR)], [_c(Rank.NINE)], [_c(Rank.SIX)])
        assert gc.submit_play(0, [_c(Rank.THREE)]).ok
        gc.run_ai_turns()
        assert gc.state.finished
        assert gc.state.winner == 1
        assert gc.side_won(2)
        assert not gc.side_won(0)
