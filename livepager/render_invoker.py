"""Run the external render command and classify what happened.

All process plumbing lives here: the child's stdout and stderr share one pipe,
its stdin is the null device, and the pipe is read to EOF before the exit status
is collected. Callers only ever see a tagged ``RenderOutcome``.
"""

from __future__ import annotations

import logging
import signal
import subprocess
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import SpawnError

logger = logging.getLogger(__name__)

LINE_ENCODING = "utf-8"
# Round-trips arbitrary bytes, so comparing decoded lines compares raw bytes.
LINE_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class RenderSuccess:
    lines: tuple[str, ...]


@dataclass(frozen=True)
class RenderFailed:
    exit_code: int
    diagnostic: str


@dataclass(frozen=True)
class RenderTerminated:
    diagnostic: str
    signal: int | None = None


RenderOutcome = RenderSuccess | RenderFailed | RenderTerminated


@dataclass(frozen=True)
class RenderCommand:
    """Render program plus the argument vector configured at startup."""

    command: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]

    def invoke(self) -> RenderOutcome:
        return _run(self.argv)


def decode_line(raw: bytes) -> str:
    return raw.decode(LINE_ENCODING, errors=LINE_ERRORS)


def first_line_diagnostic(lines: Sequence[str]) -> str:
    """Return the first captured line without its terminator, or ``""``."""
    if not lines:
        return ""
    return lines[0].rstrip("\r\n")


def _read_lines(stream: Iterable[bytes]) -> tuple[str, ...]:
    # Binary iteration splits on b"\n" only and yields a trailing partial line.
    return tuple(decode_line(raw) for raw in stream)


def invoke(command: str, args: Sequence[str] = ()) -> RenderOutcome:
    """Run ``command`` with ``args`` and capture its combined output.

    Raises ``SpawnError`` when the process cannot be created. Otherwise the
    result is ``RenderSuccess`` for exit status 0, ``RenderFailed`` for any
    other exit status and ``RenderTerminated`` when a signal killed the child.
    """
    return _run([command, *args])


def _run(argv: list[str]) -> RenderOutcome:
    logger.debug("running render: %s", argv)
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as exc:
        raise SpawnError(f"failed to execute render: {exc}") from exc

    with proc:
        assert proc.stdout is not None
        lines = _read_lines(proc.stdout)
        returncode = proc.wait()

    if returncode == 0:
        logger.debug("render succeeded with %d lines", len(lines))
        return RenderSuccess(lines)

    diagnostic = first_line_diagnostic(lines)
    if returncode < 0:
        logger.info("render terminated by signal %d", -returncode)
        return RenderTerminated(diagnostic, signal=-returncode)
    logger.info("render exited with status %d", returncode)
    return RenderFailed(returncode, diagnostic)


def _signal_name(signum: int | None) -> str | None:
    if signum is None:
        return None
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


def describe_outcome(outcome: RenderOutcome) -> str:
    """Format a user-facing message for a render outcome."""
    if isinstance(outcome, RenderSuccess):
        return f"render succeeded ({len(outcome.lines)} lines)"
    if isinstance(outcome, RenderFailed):
        head = f"render failed (exit {outcome.exit_code})"
    else:
        name = _signal_name(outcome.signal)
        head = f"render terminated ({name})" if name else "render terminated"
    if outcome.diagnostic:
        return f"{head}: {outcome.diagnostic}"
    return head
