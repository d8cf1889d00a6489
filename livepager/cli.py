"""Command-line front door for livepager.

Parses options, merges them with the config file, sets up logging and then
dispatches into the pager runtime. Fatal errors are turned into a nonzero
exit with the message on stderr once the terminal has been restored.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .app import run_once, run_pager
from .config import load_settings
from .errors import LivePagerError
from .highlight import DEFAULT_STYLE, lexer_exists
from .keys import KeyBindings
from .render_invoker import RenderCommand
from .screen import ScreenRenderer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livepager",
        description=(
            "Re-run RENDER_COMMAND whenever FILE changes and page through its output. "
            "Options must come before FILE."
        ),
    )
    parser.add_argument("file", metavar="FILE", help="Source file to watch.")
    parser.add_argument("command", metavar="RENDER_COMMAND", help="Program that renders the file.")
    parser.add_argument(
        "args",
        metavar="RENDER_ARG",
        nargs=argparse.REMAINDER,
        help="Arguments passed to RENDER_COMMAND unchanged.",
    )
    parser.add_argument("--style", default=None, help="Pygments style name used with --lexer.")
    parser.add_argument("--lexer", default=None, help="Pygments lexer used to colorize the rendered output.")
    parser.add_argument("--no-color", action="store_true", help="Strip colors from the rendered output.")
    parser.add_argument("--once", action="store_true", help="Render once to stdout and exit without watching.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(log_file: Path | None) -> None:
    """Send package logs to ``log_file``; the terminal itself never gets logs."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("livepager")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def _interactive() -> bool:
    """Return whether both stdin and stdout are terminals."""
    try:
        return os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())
    except (OSError, ValueError):
        return False


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the pager; exits nonzero on fatal errors."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()

    path = Path(args.file)
    if not path.exists():
        parser.error(f"path not found: {path}")
    lexer = args.lexer if args.lexer is not None else settings.lexer
    if lexer is not None and not lexer_exists(lexer):
        parser.error(f"unknown lexer: {lexer}")

    configure_logging(args.log_file)
    screen = ScreenRenderer(
        lexer=lexer,
        style=args.style or settings.style or DEFAULT_STYLE,
        no_color=args.no_color or settings.no_color,
    )
    command = RenderCommand(args.command, tuple(args.args))
    bindings = KeyBindings.with_overrides(settings.key_overrides)

    try:
        if args.once or not _interactive():
            run_once(command, screen)
        else:
            run_pager(path, command, screen, bindings)
    except LivePagerError as exc:
        logger.error("fatal: %s", exc)
        raise SystemExit(f"livepager: {exc}") from exc


if __name__ == "__main__":
    main()
