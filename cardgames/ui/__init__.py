# 终端界面模块
from .renderer import TerminalRenderer, parse_selection
from .flip7_renderer import Flip7Renderer
from .terminal import run_ddz_round, run_flip7, play_flip7_round
