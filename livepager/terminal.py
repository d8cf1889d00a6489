"""Terminal mode lifecycle for the pager session.

Owns raw-mode entry/exit and alternate-screen switching. ``raw_mode`` is the
only way the app enters full-screen mode, so the terminal is always restored
before any fatal error text reaches stderr.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

from .errors import SetupError

ENTER_TUI_SEQUENCE = b"\x1b[?1049h\x1b[?25l"
EXIT_TUI_SEQUENCE = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Capture tty state for ``stdin_fd`` and toggle full-screen mode."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise SetupError(f"cannot initialize terminal: {exc}") from exc
        self.active = False

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, ENTER_TUI_SEQUENCE)
        self.active = True

    def disable_tui_mode(self) -> None:
        # Show cursor and restore the main screen buffer.
        os.write(self.stdout_fd, EXIT_TUI_SEQUENCE)
        self.active = False
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def size(self) -> tuple[int, int]:
        """Return ``(rows, columns)`` of the controlling terminal."""
        term = shutil.get_terminal_size((80, 24))
        return term.lines, term.columns

    def write(self, payload: str) -> None:
        os.write(self.stdout_fd, payload.encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket the body with TUI enter/exit, restoring on every exit path."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()
