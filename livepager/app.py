"""Pager bootstrap: acquire resources in order and run the event loop.

The watch is set up before the terminal so setup failures are reported on a
normal screen. Terminal mode and the watch are scoped with ``with`` blocks,
so every exit path, including fatal render errors, restores the terminal
before the CLI prints anything.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from .errors import RenderError
from .events import KeyEventSource, ResizeEventSource
from .highlight import prepare_display_lines
from .input import KeyReader
from .keys import KeyBindings
from .loop import LoopCallbacks, apply_terminal_size, run_main_loop
from .reload import reload
from .render_invoker import RenderCommand, RenderSuccess, describe_outcome
from .screen import ScreenRenderer
from .session import Session
from .terminal import TerminalController
from .watch import FileWatch

logger = logging.getLogger(__name__)


def run_once(command: RenderCommand, screen: ScreenRenderer, stdout_fd: int | None = None) -> None:
    """Render a single time and write the result without paging."""
    outcome = command.invoke()
    if not isinstance(outcome, RenderSuccess):
        raise RenderError(describe_outcome(outcome), outcome)
    fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    if screen.lexer is not None and not screen.no_color and os.isatty(fd):
        rows = prepare_display_lines(outcome.lines, lexer=screen.lexer, style=screen.style)
        payload = "".join(f"{row}\033[0m\n" for row in rows)
    else:
        payload = "".join(outcome.lines)
    os.write(fd, payload.encode("utf-8", errors="surrogateescape"))


def run_pager(
    source_path: Path,
    command: RenderCommand,
    screen: ScreenRenderer,
    bindings: KeyBindings,
    *,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> Session:
    """Watch ``source_path`` and page through renders until told to stop."""
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd

    with FileWatch(source_path) as watch:
        terminal = TerminalController(stdin_fd, stdout_fd)
        session = Session(source_path=watch.path, command=command)
        with terminal.raw_mode(), ResizeEventSource() as resize:
            apply_terminal_size(session, terminal.size())
            reload(session)
            callbacks = LoopCallbacks(
                reload=reload,
                draw=lambda current: terminal.write(screen.build_frame(current)),
                terminal_size=terminal.size,
            )
            sources = [watch, KeyEventSource(KeyReader(stdin_fd)), resize]
            run_main_loop(session, sources, bindings, callbacks)
    logger.info("exiting cleanly after %d reloads", session.reload_count)
    return session
