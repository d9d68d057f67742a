# 游戏引擎模块
from .card import Card, Rank, Suit, card_value, create_deck, shuffle, deal, sort_cards
from .hand_type import HandType, Combination, PASS, ROCKET_MAIN
from .hand_detector import classify, can_beat
from .validator import PlayCheck, is_valid_play
