# AI 出牌策略
from .search_ai import (
    AIMove, SearchAI, all_subsets, candidate_plays, choose_beat,
    choose_play, try_straight, min_single, thinking_delay, ai_choose_play,
)
