"""斗地主 / Flip 7 - 主入口"""

import sys
import argparse
import logging
import random

from cardgames.ai.search_ai import SearchAI
from cardgames.config import Settings
from cardgames.flip7.game import Flip7Game
from cardgames.flip7.history import RoundHistory
from cardgames.game.controller import RoundController
from cardgames.game.leaderboard import Leaderboard, YOU
from cardgames.ui.flip7_renderer import Flip7Renderer
from cardgames.ui.renderer import TerminalRenderer
from cardgames.ui.terminal import run_ddz_round, run_flip7

logger = logging.getLogger(__name__)


def create_players(auto: bool):
    """座位 0 是地主；auto 模式下三个座位都由 AI 出牌"""
    if auto:
        names = ["Landlord AI", "Top AI", "Bottom AI"]
        strategies = [SearchAI(), SearchAI(), SearchAI()]
    else:
        names = [YOU, "Top AI", "Bottom AI"]
        strategies = [None, SearchAI(), SearchAI()]
    return names, strategies


def run_ddz(args, settings: Settings) -> None:
    """运行若干局斗地主"""
    delay = 0.0 if args.fast else args.delay * settings.ai_delay_scale
    renderer = TerminalRenderer(delay=delay)
    leaderboard = None if args.auto else Leaderboard(settings.leaderboard_file)
    rng = random.Random(args.seed) if args.seed is not None else None

    for i in range(args.rounds):
        if args.rounds > 1:
            print(f"\n{'=' * 60}")
            print(f"  Round {i + 1}/{args.rounds}")
            print(f"{'=' * 60}")
        names, strategies = create_players(args.auto)
        gc = RoundController(player_names=names, strategies=strategies)
        renderer.print_header("🀄 Dou Dizhu")
        run_ddz_round(gc, renderer, leaderboard, rng=rng)


def run_flip7_cli(args, settings: Settings) -> None:
    rng = random.Random(args.seed) if args.seed is not None else None
    game = Flip7Game(args.players, win_score=settings.win_score, rng=rng)
    run_flip7(game, Flip7Renderer(), RoundHistory(settings.history_file))


def run_server(args, settings: Settings) -> None:
    import uvicorn
    from cardgames.web.server import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("本地网页界面: http://%s:%d", host, port)
    uvicorn.run(create_app(settings), host=host, port=port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dou Dizhu and Flip 7 card games")
    parser.add_argument("-v", "--verbose", action="store_true", help="打印调试日志")
    sub = parser.add_subparsers(dest="command")

    ddz = sub.add_parser("ddz", help="斗地主：你 vs 两个 AI")
    ddz.add_argument("--rounds", type=int, default=1, help="对局数 (默认1)")
    ddz.add_argument("--delay", type=float, default=0.8, help="出牌延迟秒数 (默认0.8)")
    ddz.add_argument("--fast", action="store_true", help="快速模式 (无延迟)")
    ddz.add_argument("--auto", action="store_true", help="三个 AI 自动对局")
    ddz.add_argument("--seed", type=int, default=None, help="随机种子")

    flip7 = sub.add_parser("flip7", help="Flip 7 推运游戏")
    flip7.add_argument("--players", type=int, default=3, help="玩家人数 (默认3)")
    flip7.add_argument("--seed", type=int, default=None, help="随机种子")

    serve = sub.add_parser("serve", help="启动本地网页界面")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def main(argv=None) -> int:
    """命令行入口"""
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        # 不带子命令时默认打一局斗地主
        args = parser.parse_args(argv + ["ddz"])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    settings = Settings.from_env()
    commands = {"ddz": run_ddz, "flip7": run_flip7_cli, "serve": run_server}
    command = commands[args.command]

    if args.command == "flip7" and args.players < 2:
        parser.error("Flip 7 needs at least 2 players")

    try:
        command(args, settings)
    except (KeyboardInterrupt, EOFError):
        print("\nBye!")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
