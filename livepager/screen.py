"""Frame composition for the pager screen.

A frame is the visible window of display rows followed by a reverse-video
status line. Display rows are prepared once per accepted reload and reused
for every redraw until the content changes again.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .ansi import clip_ansi_line, display_width
from .highlight import DEFAULT_STYLE, prepare_display_lines
from .session import Session

STATUS_ROWS = 1


def content_rows(term_rows: int) -> int:
    """Rows left for content once the status line is reserved."""
    return max(1, term_rows - STATUS_ROWS)


def build_status_line(left_text: str, width: int, right_text: str = "│ q quit") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def scroll_percent(offset: int, total_lines: int, visible_rows: int) -> float:
    if total_lines <= 0:
        return 0.0
    max_start = max(0, total_lines - max(1, visible_rows))
    if max_start <= 0:
        return 100.0
    clamped = max(0, min(offset, max_start))
    return (clamped / max_start) * 100.0


@dataclass
class ScreenRenderer:
    """Build frames for a session using the configured display options."""

    lexer: str | None = None
    style: str = DEFAULT_STYLE
    no_color: bool = False
    _rows: list[str] = field(default_factory=list, repr=False)
    _rows_generation: int = field(default=-1, repr=False)

    def display_rows(self, session: Session) -> list[str]:
        content = session.content
        if content.generation != self._rows_generation:
            self._rows = prepare_display_lines(
                content.lines,
                lexer=self.lexer,
                style=self.style,
                no_color=self.no_color,
            )
            self._rows_generation = content.generation
        return self._rows

    def status_text(self, session: Session) -> str:
        viewport = session.viewport
        start, end = viewport.visible_range
        total = viewport.content_length
        percent = scroll_percent(viewport.offset, total, viewport.height)
        first = start + 1 if total else 0
        return f"{session.source_path.name} ({first}-{end}/{total} {percent:5.1f}%)  reload #{session.reload_count}"

    def build_frame(self, session: Session) -> str:
        viewport = session.viewport
        rows = self.display_rows(session)
        start, end = viewport.visible_range

        out: list[str] = ["\033[H\033[J"]
        for idx in range(start, start + viewport.height):
            if idx < end:
                row = clip_ansi_line(rows[idx], viewport.width)
                out.append(row)
                if "\033" in row:
                    out.append("\033[0m")
            out.append("\r\n")

        status = build_status_line(self.status_text(session), viewport.width)
        out.append("\033[7m")
        out.append(status)
        out.append(" " * max(0, viewport.width - 1 - display_width(status)))
        out.append("\033[0m")
        return "".join(out)
