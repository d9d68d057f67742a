"""Flip 7 对局历史测试"""

import json

from cardgames.flip7.deck import FlipCard, Modifier
from cardgames.flip7.game import PlayerState
from cardgames.flip7.history import RoundHistory


def _players():
    p1 = PlayerState(id=1, total_score=30, number_cards=[FlipCard.number(4), FlipCard.number(9)],
                     modifiers=[FlipCard.modifier(Modifier.X2)], stopped=True)
    p1.last_round_score = 26
    p2 = PlayerState(id=2, busted=True)
    return [p1, p2]


class TestRoundHistory:

    def test_missing_file_starts_empty(self, tmp_path):
        history = RoundHistory(str(tmp_path / "games.json"))
        assert history.games == []

    def test_save_round_record(self, tmp_path):
        path = tmp_path / "games.json"
        history = RoundHistory(str(path))
        record = history.save_round(_players())

        assert record["id"] == 1
        assert record["numPlayers"] == 2
        first, second = record["players"]
        assert first["name"] == "Player 1"
        assert first["numberCards"] == [
            {"type": "number", "value": 4}, {"type": "number", "value": 9},
        ]
        assert first["modifiers"] == [{"type": "modifier", "kind": "x2"}]
        assert first["stopped"] is True
        assert first["roundScore"] == 26
        assert first["totalScore"] == 30
        assert second["busted"] is True
        assert second["roundScore"] == 0

        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert on_disk["games"][0]["id"] == 1

    def test_ids_increase_and_reload(self, tmp_path):
        path = tmp_path / "games.json"
        history = RoundHistory(str(path))
        history.save_round(_players())
        history.save_round(_players())
        reloaded = RoundHistory(str(path))
        assert [g["id"] for g in reloaded.games] == [1, 2]

    def test_reset(self, tmp_path):
        path = tmp_path / "games.json"
        history = RoundHistory(str(path))
        history.save_round(_players())
        history.reset()
        assert RoundHistory(str(path)).games == []

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "games.json"
        path.write_text("[[[", encoding="utf-8")
        assert RoundHistory(str(path)).games == []

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "games.json"
        path.write_text(json.dumps({"games": "nope"}), encoding="utf-8")
        assert RoundHistory(str(path)).games == []
