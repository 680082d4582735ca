#!/usr/bin/env python3
"""Board Station — Entry point.

Shows a rotating view of a Trello list in the terminal: one card at a
time (or the whole list), refreshed in the background.

Usage:
    python3 main.py                     # Boards from board.yaml
    python3 main.py --demo              # Simulated board, no credentials needed
    python3 main.py --log-level DEBUG   # Verbose logging

Ctrl-C quits.
"""

__version__ = "1.0.0"

import argparse
import logging
import sys
import threading

from cards.renderer import RenderResult
from cards.text_view import format_text
from config import BoardConfig, ConfigError, board_configs, load_config
from core.board_view import build_views
from core.event_bus import EventBus
from core.scheduler import Scheduler

# Import sources to trigger @register_source decorators
import sources  # noqa: F401

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Board Station — rotating Trello list display",
    )
    parser.add_argument(
        "--demo", action="store_true",
        help="Use simulated board data instead of the Trello API",
    )
    parser.add_argument(
        "--config", default="board.yaml",
        help="Path to board YAML config (default: board.yaml)",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"Board Station {__version__}",
    )
    return parser.parse_args(argv)


def setup_logging(level_name: str) -> None:
    """Configure root logger with a consistent format."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def printer(board_id: str, out=None):
    """BoardView listener that writes each render to the terminal."""
    def show(result: RenderResult):
        stream = out or sys.stdout
        print(f"── {board_id} " + "─" * max(0, 36 - len(board_id)), file=stream)
        print(format_text(result), file=stream, flush=True)
    return show


def resolve_boards(config_path: str, demo: bool):
    configs = board_configs(load_config(config_path))
    if not configs and demo:
        configs = [BoardConfig(board_id="demo", source="demo")]
    return configs


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger.info("Board Station v%s starting", __version__)

    try:
        configs = resolve_boards(args.config, args.demo)
    except ConfigError as exc:
        logger.error("Invalid config: %s", exc)
        return 1
    if not configs:
        logger.error("No boards configured in %s (try --demo)", args.config)
        return 1

    scheduler = Scheduler()
    bus = EventBus(scheduler)
    views = build_views(configs, bus, scheduler, demo=args.demo)
    if not views:
        logger.error("No usable boards")
        return 1

    for view in views:
        view.add_listener(printer(view.view_id))
        view.source.start()
        view.start()

    stop = threading.Event()
    try:
        scheduler.run_forever(stop)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        stop.set()
        for view in views:
            view.stop()
            view.source.close()
        bus.close()
        logger.info("Shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
