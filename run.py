"""Labyrinth CLI entry point.

Provides subcommands for running the maze HTTP service and for printing
generated mazes to the terminal. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from labyrinth import __version__

TILE_COLORS = {
    "#": Style.DIM + Fore.WHITE,
    ".": "",
    "S": Style.BRIGHT + Fore.GREEN,
    "E": Style.BRIGHT + Fore.RED,
    "C": Style.BRIGHT + Fore.YELLOW,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Labyrinth maze level generator

    Run the JSON level service or print generated mazes to the terminal.
    Generation settings come from MAZE_* environment variables; CLI flags
    take precedence where both exist.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                     Bind address for the web server (default: 0.0.0.0)
          PORT                     Port for the web server (default: 5000)
          MAZE_CELL_SIZE           World units per grid cell (default: 3)
          MAZE_COLLECTIBLE_MAX     Collectible cap per level (default: 5)
          MAZE_COLLECTIBLE_MIN_DISTANCE  Minimum spacing between collectibles (default: 5)
          MAZE_SEED                Fixed seed for reproducible output
          LABYRINTH_LOG_LEVEL      debug | info | warn | error (default: info)

        Examples:
          # Run the server on a custom port
          python run.py server --port 8080

          # Print a 31x21 backtracking maze with 5 collectibles
          python run.py render --mode backtrack --width 31 --height 21 --collectibles 5

          # Print level 12 as the game would load it
          python run.py level 11 --seed 42
        """
    )

    parser = argparse.ArgumentParser(
        prog="Labyrinth",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Labyrinth {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the maze JSON service",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    server_parser.add_argument("--host", default=None, help="Host interface (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    render_parser = subparsers.add_parser(
        "render",
        help="Generate a maze and print it",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    render_parser.add_argument("--mode", choices=("rooms", "backtrack"), default="rooms")
    render_parser.add_argument("--width", type=int, default=21)
    render_parser.add_argument("--height", type=int, default=21)
    render_parser.add_argument("--collectibles", type=int, default=0, help="Requested collectible count")
    _add_output_flags(render_parser)
    render_parser.set_defaults(command="render")

    level_parser = subparsers.add_parser(
        "level",
        help="Load a level by zero-based index and print it",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    level_parser.add_argument("index", type=int, help="Zero-based level index")
    _add_output_flags(level_parser)
    level_parser.set_defaults(command="level")

    if len(argv) == 0:
        argv = ["server"]
    return parser.parse_args(argv)


def _add_output_flags(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    sub.add_argument("--no-color", dest="color", action="store_false", help="Disable ANSI colours")
    sub.add_argument("--metrics", action="store_true", help="Print generation metrics after the grid")


def colorize(rows: list[str], enabled: bool) -> list[str]:
    if not enabled:
        return list(rows)
    out = []
    for row in rows:
        out.append("".join(f"{TILE_COLORS[ch]}{ch}{Style.RESET_ALL}" if TILE_COLORS[ch] else ch for ch in row))
    return out


def _print_grid(grid, color: bool, show_metrics: bool) -> None:
    print("\n".join(colorize(grid.to_rows(), color)))
    if show_metrics:
        for key, val in grid.metrics.items():
            print(f"{key}: {val}")


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    color = getattr(args, "color", False) and sys.stdout.isatty()
    if color:
        _color_init()

    # Imported after .env is loaded so MAZE_* defaults are visible
    from labyrinth.logging_utils import log
    from labyrinth.maze import (
        MazeConfig,
        find_exit_position,
        generate_backtrack_maze,
        generate_room_maze,
        load_level,
        place_collectibles,
    )

    if mode == "server":
        from labyrinth.server import start_server

        host = args.host or os.getenv("HOST", "0.0.0.0")
        port = int(args.port or os.getenv("PORT", "5000"))
        log.info(event="startup", mode=mode, host=host, port=port)
        start_server(host=host, port=port, debug=args.debug)
        return 0

    config = MazeConfig.from_env()
    if args.seed is not None:
        config = config.with_seed(args.seed)
    rng = config.make_rng()

    if mode == "render":
        generator = generate_backtrack_maze if args.mode == "backtrack" else generate_room_maze
        grid = generator(args.width, args.height, config, rng)
        exit_world = find_exit_position(grid, config)
        if args.collectibles:
            grid = place_collectibles(grid, args.collectibles, config, rng)
        _print_grid(grid, color, args.metrics)
        print(f"exit: {exit_world.x:g},{exit_world.z:g}")
        return 0

    if mode == "level":
        lvl = load_level(args.index, config, rng)
        plan = lvl.plan
        print(f"{plan.name} ({plan.width}x{plan.height}, collectibles={plan.collectibles}, time={plan.time_limit}s)")
        _print_grid(lvl.grid, color, args.metrics)
        print(f"exit: {lvl.exit_world.x:g},{lvl.exit_world.z:g}")
        return 0

    print(f"[ERROR] Unknown command: {mode}")
    return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
