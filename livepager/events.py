"""Tagged loop events and the readiness wait over heterogeneous sources.

Each source exposes ``fileno()`` for ``select`` and ``drain()`` to turn
whatever became readable into events. The loop itself never needs to know
whether an event came from the filesystem, the keyboard or a signal.
"""

from __future__ import annotations

import logging
import os
import select
import signal
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .errors import LoopIOError
from .input import KeyReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileChanged:
    kind: str = "modified"


@dataclass(frozen=True)
class FileDeleted:
    pass


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Resized:
    pass


Event = FileChanged | FileDeleted | KeyPressed | Resized


class EventSource(Protocol):
    def fileno(self) -> int: ...

    def drain(self) -> list[Event]: ...


class KeyEventSource:
    """Keys decoded from the terminal input stream on each wakeup."""

    def __init__(self, reader: KeyReader) -> None:
        self.reader = reader

    def fileno(self) -> int:
        return self.reader.fileno()

    def drain(self) -> list[Event]:
        try:
            key = self.reader.read_key()
            if key == "":
                raise LoopIOError("terminal input closed")
            events: list[Event] = [KeyPressed(key)]
            # Bytes replayed from an escape probe never make the fd readable again.
            while self.reader.has_pending:
                events.append(KeyPressed(self.reader.read_key()))
        except OSError as exc:
            raise LoopIOError(f"failed to read terminal input: {exc}") from exc
        return events


class ResizeEventSource:
    """Turn SIGWINCH into a readable pipe via ``signal.set_wakeup_fd``.

    Use as a context manager; the previous handler and wakeup fd are restored
    on exit. Must be entered from the main thread.
    """

    def __init__(self) -> None:
        self._read_fd: int | None = None
        self._write_fd: int | None = None
        self._previous_handler = None
        self._previous_wakeup_fd = -1

    def __enter__(self) -> ResizeEventSource:
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self._previous_handler = signal.signal(signal.SIGWINCH, lambda _signum, _frame: None)
        self._previous_wakeup_fd = signal.set_wakeup_fd(self._write_fd)
        return self

    def __exit__(self, *exc_info) -> None:
        signal.set_wakeup_fd(self._previous_wakeup_fd)
        if self._previous_handler is not None:
            signal.signal(signal.SIGWINCH, self._previous_handler)
        for fd in (self._read_fd, self._write_fd):
            if fd is not None:
                os.close(fd)
        self._read_fd = self._write_fd = None

    def fileno(self) -> int:
        if self._read_fd is None:
            raise ValueError("resize source is not active")
        return self._read_fd

    def drain(self) -> list[Event]:
        signals = b""
        while True:
            try:
                chunk = os.read(self.fileno(), 64)
            except BlockingIOError:
                break
            except OSError as exc:
                raise LoopIOError(f"failed to read resize notification: {exc}") from exc
            if not chunk:
                break
            signals += chunk
        if signal.SIGWINCH in signals:
            return [Resized()]
        return []


def wait_for_events(sources: Sequence[EventSource], timeout: float | None = None) -> list[Event]:
    """Block until a source is ready and drain the first ready one.

    ``sources`` are checked in order, so earlier sources win when several
    become ready at once. An empty list means the wait timed out or the ready
    source produced nothing worth dispatching.
    """
    try:
        ready, _, _ = select.select(list(sources), [], [], timeout)
    except (OSError, ValueError) as exc:
        raise LoopIOError(f"failed to wait for changes: {exc}") from exc
    for source in sources:
        if source in ready:
            events = source.drain()
            logger.debug("events from %s: %s", type(source).__name__, events)
            return events
    return []
