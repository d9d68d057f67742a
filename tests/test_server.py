"""Tests for the local web UI server."""

import random

import pytest
from fastapi.testclient import TestClient

from cardgames.ai.search_ai import choose_play
from cardgames.config import Settings
from cardgames.engine.card import Card, Rank, Suit
from cardgames.engine.validator import is_valid_play
from cardgames.web.server import create_app, cards_from_indexes


@pytest.fixture
def client(tmp_path):
    """Create test client with no AI delay and a throwaway leaderboard."""
    settings = Settings(leaderboard_file=str(tmp_path / "board.json"), ai_delay_scale=0)
    return TestClient(create_app(settings, rng=random.Random(7)))


def _to_card(d: dict) -> Card:
    return Card(Rank(d["rank"]), Suit(d["suit"]) if d["suit"] else None)


def _until_my_turn(ws):
    """Read messages until it's the human's turn again or the round ends."""
    seen = []
    while True:
        msg = ws.receive_json()
        seen.append(msg)
        if msg["type"] == "result":
            return seen
        if msg["type"] == "state" and (msg["current_player"] == 0 and not msg["finished"]):
            return seen


def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Dou Dizhu" in response.text


def test_leaderboard_endpoint(client):
    response = client.get("/api/leaderboard")
    assert response.status_code == 200
    entries = response.json()["entries"]
    assert entries[0] == {"name": "Jean-Claude the Gambler", "wins": 7}


def test_play_before_start(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "play", "cards": [0]})
        assert ws.receive_json() == {"type": "error", "reason": "no round in progress"}


def test_unknown_action(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "dance"})
        assert ws.receive_json()["type"] == "error"


def test_start_deals_human_landlord(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "start"})
        state = ws.receive_json()
        assert state["type"] == "state"
        assert len(state["hand"]) == 20
        assert state["current_player"] == 0
        assert state["players"][0]["role"] == "LANDLORD"
        assert [p["hand_size"] for p in state["players"]] == [20, 17, 17]
        assert len(state["lord_cards"]) == 3


def test_invalid_moves_rejected(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "start"})
        ws.receive_json()

        ws.send_json({"action": "pass"})
        assert ws.receive_json() == {"type": "error", "reason": "nothing to pass on"}

        ws.send_json({"action": "play", "cards": [99]})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"action": "play", "cards": []})
        assert ws.receive_json()["type"] == "error"


def test_play_then_ai_turns(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "start"})
        ws.receive_json()

        ws.send_json({"action": "play", "cards": [0]})
        after = ws.receive_json()
        assert after["type"] == "state"
        assert len(after["hand"]) == 19
        assert after["current_player"] == 1

        messages = _until_my_turn(ws)
        types = [m["type"] for m in messages]
        assert types[0] == "thinking"
        assert types.count("thinking") == 2
        assert all(t in ("ai_play", "ai_pass") for t in (types[1], types[3]))
        assert types[-1] == "state"


def test_full_round_reaches_result(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "start"})
        state = ws.receive_json()
        result = None

        for _ in range(200):
            hand = [_to_card(d) for d in state["hand"]]
            prev = [] if state["last_player"] in (None, 0) else [_to_card(d) for d in state["last_play"]]
            move = choose_play(prev, hand)
            if move.is_pass or not is_valid_play(prev, move.cards).ok:
                ws.send_json({"action": "pass"})
            else:
                ws.send_json({"action": "play", "cards": [hand.index(c) for c in move.cards]})

            messages = _until_my_turn(ws)
            if messages[-1]["type"] == "result":
                result = messages[-1]
                break
            state = messages[-1]

        assert result is not None
        assert isinstance(result["you_won"], bool)
        assert result["landlord_won"] == result["you_won"]
        names = [e["name"] for e in result["leaderboard"]]
        assert "You" in names

    board = client.get("/api/leaderboard").json()["entries"]
    you = next(e for e in board if e["name"] == "You")
    assert you["wins"] == (1 if result["you_won"] else 0)


def test_cards_from_indexes():
    hand = [Card(Rank.THREE, Suit.SPADE), Card(Rank.FOUR, Suit.HEART)]
    assert cards_from_indexes(hand, [1, 0]) == hand
    assert cards_from_indexes(hand, [0, 0]) is None
    assert cards_from_indexes(hand, [2]) is None
    assert cards_from_indexes(hand, "0") is None
    assert cards_from_indexes(hand, [True]) is None
