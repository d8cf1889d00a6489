"""Prepare rendered lines for display, optionally colorized with Pygments.

Render output is shown as-is by default, keeping any SGR colors the render
command emitted. With a lexer the plain text is highlighted instead, which
helps when the render produces source-like output (HTML, roff, JSON).
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ansi import ANSI_ESCAPE_RE, sanitize_terminal_text

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"


def _strip_terminator(line: str) -> str:
    return line.rstrip("\r\n")


@functools.lru_cache(maxsize=None)
def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, else the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    return style


@functools.lru_cache(maxsize=None)
def _formatter_for_style(style: str) -> TerminalFormatter:
    return TerminalFormatter(style=style)


def lexer_exists(name: str) -> bool:
    try:
        get_lexer_by_name(name)
    except ClassNotFound:
        return False
    return True


def colorize_text(text: str, lexer_name: str, style: str = DEFAULT_STYLE) -> str:
    lexer = get_lexer_by_name(lexer_name, stripnl=False, ensurenl=False)
    return pygments_highlight(text, lexer, _formatter_for_style(normalize_style(style)))


def prepare_display_lines(
    lines: Sequence[str],
    *,
    lexer: str | None = None,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> list[str]:
    """Turn content lines into terminator-free, terminal-safe display rows.

    The result always has exactly one row per content line so scroll offsets
    address the same rows on screen and in the content store.
    """
    if no_color:
        return [sanitize_terminal_text(ANSI_ESCAPE_RE.sub("", _strip_terminator(line))) for line in lines]
    if lexer is None:
        return [sanitize_terminal_text(_strip_terminator(line)) for line in lines]

    plain = [sanitize_terminal_text(ANSI_ESCAPE_RE.sub("", _strip_terminator(line))) for line in lines]
    if not plain:
        return []
    rendered = colorize_text("\n".join(plain), lexer, style).split("\n")
    if len(rendered) != len(plain):
        logger.debug(
            "highlighting changed line count (%d -> %d); showing plain text",
            len(plain),
            len(rendered),
        )
        return plain
    return rendered
