"""Main interactive event loop.

Waits on the event sources, dispatches each event to the reload step or the
key bindings, and redraws when the session is dirty. Feature logic stays in
the injected callbacks so the loop itself is easy to drive from tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .events import Event, EventSource, FileChanged, FileDeleted, KeyPressed, Resized, wait_for_events
from .keys import KeyBindings, handle_key
from .screen import content_rows
from .session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    reload: Callable[[Session], int]
    draw: Callable[[Session], None]
    terminal_size: Callable[[], tuple[int, int]]


def apply_terminal_size(session: Session, size: tuple[int, int]) -> None:
    """Resize the viewport to ``(rows, columns)`` and reclamp the offset."""
    rows, columns = size
    viewport = session.viewport
    viewport.resize(content_rows(rows), columns)
    viewport.reclamp()
    session.dirty = True


def dispatch_event(
    session: Session,
    event: Event,
    bindings: KeyBindings,
    callbacks: LoopCallbacks,
) -> None:
    """Apply one event; a terminating session ignores everything."""
    if not session.running:
        return
    if isinstance(event, FileDeleted):
        logger.info("%s was deleted; exiting", session.source_path)
        session.terminate()
    elif isinstance(event, FileChanged):
        logger.debug("%s %s; reloading", session.source_path, event.kind)
        callbacks.reload(session)
    elif isinstance(event, KeyPressed):
        handle_key(session, event.key, bindings)
    elif isinstance(event, Resized):
        apply_terminal_size(session, callbacks.terminal_size())


def run_main_loop(
    session: Session,
    sources: Sequence[EventSource],
    bindings: KeyBindings,
    callbacks: LoopCallbacks,
    *,
    wait: Callable[[Sequence[EventSource]], list[Event]] = wait_for_events,
) -> None:
    """Run until a quit key or deletion of the watched file.

    Fatal errors from reloads or the readiness wait propagate to the caller.
    """
    while session.running:
        if session.dirty:
            callbacks.draw(session)
            session.dirty = False
        for event in wait(sources):
            dispatch_event(session, event, bindings, callbacks)
            if not session.running:
                break
    logger.debug("event loop finished after %d reloads", session.reload_count)
