"""Command line entry point.

    reversi-agent referee [config.json]      play one game against the referee on stdin/stdout
    reversi-agent versus [config.json]       engine vs a random player, locally
    reversi-agent serve                      run the HTTP API
"""

import argparse
import logging
import sys

from reversi_agent.errors import ConfigurationError, ReversiError
from reversi_agent.models.enums import Color
from reversi_agent.engine.scoring import score, winner
from reversi_agent.agents.match import play_local, play_match
from reversi_agent.agents.mcts_agent import MctsAgent
from reversi_agent.agents.random_agent import RandomAgent
from reversi_agent.agents.referee import RefereeConnection
from reversi_agent.logging_setup import configure_logging
from reversi_agent.settings import load_agent_config

logger = logging.getLogger(__name__)


def run_referee(config_path: str | None, stdin=None, stdout=None) -> int:
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    conn = RefereeConnection(stdin, stdout)
    try:
        config = load_agent_config(config_path)
        configure_logging(config.log, referee=True, stream=stdout)
        color = conn.init()
        conn.ready(color)
        play_match(MctsAgent(color, config), conn)
    except ReversiError as e:
        conn.comment(f"Main: {type(e).__name__}: {e}")
        return 1
    return 0


def run_versus(config_path: str | None, games: int, seed: int | None,
               engine_color: Color) -> int:
    config = load_agent_config(config_path)
    configure_logging(config.log)
    wins = losses = draws = 0
    for g in range(games):
        engine = MctsAgent(engine_color, config)
        opponent = RandomAgent(engine_color.opponent, None if seed is None else seed + g)
        black, white = (engine, opponent) if engine_color is Color.BLACK else (opponent, engine)
        board = play_local(black, white)
        result = winner(board)
        if result is None:
            draws += 1
        elif result is engine_color:
            wins += 1
        else:
            losses += 1
        b, w = score(board)
        print(f"Game {g + 1}: {b}-{w} after {board.turn} turns "
              f"({engine.search_iterations} search iterations)")
        print(board.render())
    print(f"Engine ({engine_color.name}) vs random: {wins}W {losses}L {draws}D")
    return 0


def run_server(host: str, port: int) -> int:
    import uvicorn

    from reversi_agent.main import app

    uvicorn.run(app, host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Reversi agent: parallel Monte Carlo Tree Search")
    sub = parser.add_subparsers(dest="command", required=True)

    p_ref = sub.add_parser("referee", help="Play one game against the referee on stdin/stdout")
    p_ref.add_argument("config", nargs="?", default=None, help="JSON config file")

    p_vs = sub.add_parser("versus", help="Play the engine against a random player")
    p_vs.add_argument("config", nargs="?", default=None, help="JSON config file")
    p_vs.add_argument("--games", type=int, default=1)
    p_vs.add_argument("--seed", type=int, default=None)
    p_vs.add_argument("--color", default="B", choices=["B", "W"],
                      help="Colour the engine plays")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    if args.command == "referee":
        return run_referee(args.config)
    if args.command == "versus":
        try:
            return run_versus(args.config, args.games, args.seed, Color(args.color))
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 2
    return run_server(args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
