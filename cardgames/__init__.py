# 斗地主与 Flip 7 卡牌游戏
__version__ = "0.1.0"
