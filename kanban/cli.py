"""taskhero-board command line entry point."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import config

from .board_app import KanbanBoard, run_board
from .themes import DEFAULT_THEME, THEMES, set_active_theme
from .terminal import SHOW_CURSOR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskhero-board",
        description="Terminal Kanban board over a TaskHero tasks.json",
    )
    parser.add_argument("tasks_path", nargs="?", help="path to tasks.json (default: config tasks_path or tasks/tasks.json)")
    parser.add_argument("--theme", choices=sorted(THEMES.keys()), help="colour palette")
    parser.add_argument("--save-theme", action="store_true", help="remember --theme in the user config")
    parser.add_argument("--log-file", help="write logs to this file (the terminal belongs to the board)")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument(
        "--snapshot",
        metavar="WxH",
        help="print a single frame at the given size (e.g. 120x30) and exit",
    )
    return parser


def configure_logging(log_file: Optional[str], level: str) -> None:
    root = logging.getLogger("taskhero")
    root.setLevel(getattr(logging, level, logging.WARNING))
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        root.addHandler(handler)
    else:
        # Nothing may write to the terminal while the board owns it.
        root.addHandler(logging.NullHandler())


def parse_size(value: str) -> tuple:
    try:
        width, height = value.lower().split("x", 1)
        return int(width), int(height)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size {value!r}, expected WxH")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    theme = args.theme or config.get_user_theme() or DEFAULT_THEME
    if args.theme and args.save_theme:
        config.set_user_theme(args.theme)
    set_active_theme(theme)

    tasks_path = Path(args.tasks_path).expanduser() if args.tasks_path else config.get_tasks_path()

    if args.snapshot:
        try:
            width, height = parse_size(args.snapshot)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))
        board = KanbanBoard(tasks_path, width=width, height=height)
        board.load()
        sys.stdout.write(board.layout.render_screen(board.status_bar.render(board.snapshot(), width), list(board.overlays)))
        sys.stdout.write("\n" + SHOW_CURSOR)
        return 0

    return run_board(tasks_path, ttimeoutlen=config.get_ttimeoutlen())


if __name__ == "__main__":
    sys.exit(main())
