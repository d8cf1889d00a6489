"""Filesystem change notifications for the watched source file.

``watchdog`` observes the file's directory from its own thread. That thread
only forwards one-byte tokens into a pipe; the event loop selects on the pipe
like any other descriptor and does all the work on the main thread.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .errors import LoopIOError, SetupError
from .events import Event, FileChanged, FileDeleted

logger = logging.getLogger(__name__)

TOKEN_MODIFIED = b"m"
TOKEN_CLOSED = b"c"
TOKEN_DELETED = b"d"


def classify_event(event: FileSystemEvent, target: str) -> bytes | None:
    """Map a watchdog event to a watch token when it concerns ``target``."""
    if event.is_directory:
        return None
    src = os.fsdecode(event.src_path)
    if event.event_type == EVENT_TYPE_MOVED:
        # An editor saving through a temp file renames it over the target.
        dest = os.fsdecode(event.dest_path)
        return TOKEN_MODIFIED if dest == target else None
    if src != target:
        return None
    if event.event_type == EVENT_TYPE_MODIFIED:
        return TOKEN_MODIFIED
    if event.event_type == EVENT_TYPE_CLOSED:
        return TOKEN_CLOSED
    if event.event_type == EVENT_TYPE_DELETED:
        return TOKEN_DELETED
    return None


def tokens_to_events(tokens: bytes) -> list[Event]:
    """Translate drained tokens into loop events.

    Runs of change tokens collapse into one ``FileChanged``; a deletion ends
    the batch since nothing after it can be rendered.
    """
    events: list[Event] = []
    for token in tokens:
        token_bytes = bytes((token,))
        if token_bytes == TOKEN_DELETED:
            events.append(FileDeleted())
            break
        if token_bytes in {TOKEN_MODIFIED, TOKEN_CLOSED}:
            kind = "closed" if token_bytes == TOKEN_CLOSED else "modified"
            if events and isinstance(events[-1], FileChanged):
                continue
            events.append(FileChanged(kind))
    return events


class _ForwardingHandler(FileSystemEventHandler):
    def __init__(self, target: str, notify: Callable[[bytes], None]) -> None:
        super().__init__()
        self.target = target
        self.notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        token = classify_event(event, self.target)
        if token is not None:
            self.notify(token)


class FileWatch:
    """Watch handle for one file, usable as an event source and context manager."""

    def __init__(self, path: Path, observer_factory: Callable[[], Observer] = Observer) -> None:
        self.path = Path(path).resolve()
        if not self.path.is_file():
            raise SetupError(f"failed to watch {path}: not a regular file")
        self._observer_factory = observer_factory
        self._observer = None
        self._read_fd: int | None = None
        self._write_fd: int | None = None

    def start(self) -> FileWatch:
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        handler = _ForwardingHandler(str(self.path), self._notify)
        try:
            observer = self._observer_factory()
            observer.schedule(handler, str(self.path.parent), recursive=False)
            observer.start()
        except OSError as exc:
            self._close_pipe()
            raise SetupError(f"failed to watch {self.path}: {exc}") from exc
        self._observer = observer
        logger.info("watching %s", self.path)
        return self

    def _notify(self, token: bytes) -> None:
        write_fd = self._write_fd
        if write_fd is not None:
            os.write(write_fd, token)

    def fileno(self) -> int:
        if self._read_fd is None:
            raise ValueError("watch is not started")
        return self._read_fd

    def drain(self) -> list[Event]:
        tokens = b""
        while True:
            try:
                chunk = os.read(self.fileno(), 4096)
            except BlockingIOError:
                break
            except OSError as exc:
                raise LoopIOError(f"failed to read watch events: {exc}") from exc
            if not chunk:
                break
            tokens += chunk
        return tokens_to_events(tokens)

    def _close_pipe(self) -> None:
        for fd in (self._read_fd, self._write_fd):
            if fd is not None:
                os.close(fd)
        self._read_fd = self._write_fd = None

    def close(self) -> None:
        """Stop the observer thread first so no token lands on a closed pipe."""
        observer = self._observer
        self._observer = None
        if observer is not None:
            observer.stop()
            observer.join()
        self._close_pipe()
        logger.debug("stopped watching %s", self.path)

    def __enter__(self) -> FileWatch:
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.close()
