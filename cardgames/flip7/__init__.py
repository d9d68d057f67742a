# Flip 7 推运小游戏
from .deck import FlipCard, CardType, Modifier, Action, create_deck, shuffle_deck, draw_card, card_to_str
from .game import PlayerState, Flip7Round, Flip7Game
from .history import RoundHistory
