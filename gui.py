# Command-line launcher for the Snake player window.
from __future__ import annotations

import argparse
import logging

from game_logic import SnakeConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    defaults = SnakeConfig()
    parser = argparse.ArgumentParser(description="Play Snake with obstacles")
    parser.add_argument("--width", type=int, default=defaults.grid_width, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=defaults.grid_height, help="Grid height in cells")
    parser.add_argument("--cell-size", type=int, default=defaults.cell_size, help="Cell edge in pixels")
    parser.add_argument("--obstacles", type=int, default=defaults.obstacle_count, help="Obstacles per game")
    parser.add_argument("--seed", type=int, default=None, help="Seed for food/obstacle placement")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging verbosity")
    return parser


def build_config(argv: list[str] | None = None) -> tuple[SnakeConfig, str]:
    """Parse arguments into a validated config and a log level name."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = SnakeConfig(
        grid_width=args.width,
        grid_height=args.height,
        cell_size=args.cell_size,
        obstacle_count=args.obstacles,
        seed=args.seed,
    )
    try:
        config.validate()
    except ValueError as exc:
        parser.error(str(exc))
    return config, args.log_level


def main(argv: list[str] | None = None) -> None:
    config, log_level = build_config(argv)
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Tk is only needed once the window opens.
    from snake_gui import run_player_gui

    run_player_gui(config)


if __name__ == "__main__":
    main()
