"""ANSI-aware text measurement and sanitization for rendered output.

Render commands often emit colored text. Styling sequences pass through and
do not count toward width; every other control byte is made visible so the
render cannot move the cursor or ring the bell.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
SGR_RE = re.compile(r"\x1b\[[0-9;]*m")
TAB_STOP = 8

_UNSAFE_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f\udc80-\udcff]")


def char_display_width(ch: str, col: int) -> int:
    """Columns taken by ``ch`` when drawn starting at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _cells(text: str) -> Iterator[tuple[str, int]]:
    """Yield ``(chunk, width)`` pairs; escape sequences have width 0.

    Tabs come out already expanded to spaces.
    """
    col = 0
    pos = 0
    while pos < len(text):
        if text[pos] == "\x1b":
            escape = ANSI_ESCAPE_RE.match(text, pos)
            if escape is not None:
                yield escape.group(0), 0
                pos = escape.end()
                continue
        ch = text[pos]
        width = char_display_width(ch, col)
        yield (" " * width if ch == "\t" else ch), width
        col += width
        pos += 1


def display_width(text: str) -> int:
    return sum(width for _chunk, width in _cells(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` columns, keeping escapes before the cut.

    A wide character that would straddle the edge is dropped whole.
    """
    if max_cols <= 0:
        return ""
    kept: list[str] = []
    used = 0
    for chunk, width in _cells(text):
        if used >= max_cols or used + width > max_cols:
            break
        kept.append(chunk)
        used += width
    return "".join(kept)


def _escape_char(ch: str) -> str:
    code = ord(ch)
    # Undecodable input bytes arrive as lone surrogates.
    if 0xDC80 <= code <= 0xDCFF:
        code -= 0xDC00
    return f"\\x{code:02x}"


def sanitize_terminal_text(text: str) -> str:
    """Escape control bytes except tab, newline and SGR styling sequences."""
    if _UNSAFE_RE.search(text) is None:
        return text

    parts: list[str] = []
    pos = 0
    while pos < len(text):
        sgr = SGR_RE.match(text, pos) if text[pos] == "\x1b" else None
        if sgr is not None:
            parts.append(sgr.group(0))
            pos = sgr.end()
            continue
        ch = text[pos]
        parts.append(ch if ch in "\t\n" or not _UNSAFE_RE.match(ch) else _escape_char(ch))
        pos += 1
    return "".join(parts)
