# 游戏流程控制模块
from .player import Player, Role
from .game_state import RoundState, GamePhase, GameEvent
from .controller import RoundController, AIStrategy
from .leaderboard import Leaderboard, LeaderboardEntry
