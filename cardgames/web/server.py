"""WebSocket 后端服务 - 浏览器里和两个 AI 打斗地主"""

import logging
import random
from pathlib import Path
from typing import List, Optional, Sequence

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from cardgames.ai.search_ai import SearchAI, ai_choose_play
from cardgames.config import Settings
from cardgames.engine.card import Card
from cardgames.engine.hand_detector import classify
from cardgames.game.controller import RoundController
from cardgames.game.game_state import GamePhase
from cardgames.game.leaderboard import Leaderboard, YOU

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

HUMAN_SEAT = 0
PLAYER_NAMES = [YOU, "Top AI", "Bottom AI"]


# ============================================================
#  序列化工具
# ============================================================

def card_to_dict(c: Card) -> dict:
    """将 Card 序列化为前端可用的 dict"""
    return {
        "rank": int(c.rank),
        "suit": c.suit.value if c.suit else "",
        "display": c.display,
    }


def cards_to_list(cards: Sequence[Card]) -> List[dict]:
    return [card_to_dict(c) for c in cards]


def state_to_dict(gc: RoundController, viewer: int = HUMAN_SEAT) -> dict:
    """牌局快照：只暴露 viewer 自己的手牌，其余玩家只给张数"""
    s = gc.state
    combo = classify(s.last_play_cards) if s.last_play_cards else None
    return {
        "type": "state",
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "role": p.role.value,
                "hand_size": p.hand_size,
            }
            for p in gc.players
        ],
        "hand": cards_to_list(gc.players[viewer].hand),
        "lord_cards": cards_to_list(s.lord_cards),
        "current_player": s.current_player,
        "last_play": cards_to_list(s.last_play_cards),
        "last_play_type": combo.type.value if combo else None,
        "last_player": s.last_player,
        "finished": s.finished,
        "winner": s.winner,
    }


def cards_from_indexes(hand: Sequence[Card], indexes) -> Optional[List[Card]]:
    """把前端选中的手牌序号转换成牌；序号非法返回 None"""
    if not isinstance(indexes, list):
        return None
    if any(not isinstance(i, int) or isinstance(i, bool) for i in indexes):
        return None
    if len(set(indexes)) != len(indexes):
        return None
    if any(i < 0 or i >= len(hand) for i in indexes):
        return None
    return [hand[i] for i in sorted(indexes)]


# ============================================================
#  单连接对局
# ============================================================

class RoundSession:
    """一个 WebSocket 连接上的对局，连接之间不共享任何状态"""

    def __init__(
        self,
        ws: WebSocket,
        settings: Settings,
        leaderboard: Leaderboard,
        rng: Optional[random.Random] = None,
    ):
        self.ws = ws
        self.settings = settings
        self.leaderboard = leaderboard
        self.rng = rng
        self.gc: Optional[RoundController] = None

    async def send(self, msg: dict) -> None:
        await self.ws.send_json(msg)

    async def error(self, reason: str) -> None:
        await self.send({"type": "error", "reason": reason})

    async def handle(self, msg: dict) -> None:
        """处理一条客户端指令: start / play / pass"""
        action = msg.get("action") if isinstance(msg, dict) else None
        if action == "start":
            await self.start()
            return
        if action not in ("play", "pass"):
            await self.error(f"unknown action: {action}")
            return
        if self.gc is None or self.gc.state.phase != GamePhase.PLAYING:
            await self.error("no round in progress")
            return

        if action == "pass":
            check = self.gc.submit_pass(HUMAN_SEAT)
        else:
            cards = cards_from_indexes(self.gc.players[HUMAN_SEAT].hand, msg.get("cards"))
            if not cards:
                await self.error("select at least one card")
                return
            check = self.gc.submit_play(HUMAN_SEAT, cards)

        if not check.ok:
            await self.error(check.reason)
            return
        await self.send(state_to_dict(self.gc))
        await self.run_ai_turns()

    async def start(self) -> None:
        strategies = [None, SearchAI(), SearchAI()]
        self.gc = RoundController(PLAYER_NAMES, strategies, landlord_index=HUMAN_SEAT)
        self.gc.deal(self.rng)
        await self.send(state_to_dict(self.gc))
        await self.run_ai_turns()

    async def run_ai_turns(self) -> None:
        """依次让 AI 出牌，每步先推送思考状态，再推送结果"""
        gc = self.gc
        s = gc.state
        while s.phase == GamePhase.PLAYING and s.current_player != HUMAN_SEAT:
            pid = s.current_player
            player = gc.players[pid]
            await self.send({"type": "thinking", "player_id": pid})

            move = await ai_choose_play(
                s.previous_for(pid), player.hand, s.turn_index, self.settings.ai_delay_scale
            )
            played = gc.apply_ai_move(pid, None if move.is_pass else move.cards)
            if played is None:
                await self.send({"type": "ai_pass", "player_id": pid})
            else:
                await self.send({
                    "type": "ai_play",
                    "player_id": pid,
                    "cards": cards_to_list(played),
                    "hand_size": player.hand_size,
                })

        await self.send(state_to_dict(gc))
        if s.finished:
            await self.send_result()

    async def send_result(self) -> None:
        """推送结算信息，人类一方获胜时记入排行榜"""
        gc = self.gc
        you_won = gc.side_won(HUMAN_SEAT)
        if you_won:
            self.leaderboard.add_win(YOU)
        await self.send({
            "type": "result",
            "winner_id": gc.state.winner,
            "landlord_won": gc.state.landlord_won,
            "you_won": you_won,
            "leaderboard": [
                {"name": e.name, "wins": e.wins} for e in self.leaderboard.top()
            ],
        })


# ============================================================
#  FastAPI 应用
# ============================================================

def create_app(settings: Optional[Settings] = None, rng: Optional[random.Random] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="cardgames")
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.state.settings = settings
    app.state.leaderboard = Leaderboard(settings.leaderboard_file)

    @app.get("/")
    async def index():
        """返回前端页面"""
        return FileResponse(str(STATIC_DIR / "index.html"))

    @app.get("/api/leaderboard")
    async def leaderboard():
        return {
            "entries": [
                {"name": e.name, "wins": e.wins} for e in app.state.leaderboard.top()
            ]
        }

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        """WebSocket 端点：每个连接独立一局"""
        await ws.accept()
        session = RoundSession(ws, settings, app.state.leaderboard, rng)
        try:
            while True:
                msg = await ws.receive_json()
                await session.handle(msg)
        except WebSocketDisconnect:
            logger.info("客户端断开连接")

    return app
