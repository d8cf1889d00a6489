"""Tests for the readiness wait and the keyboard/resize event sources."""

from __future__ import annotations

import os
import signal
import unittest
from unittest import mock

from livepager.errors import LoopIOError
from livepager.events import KeyEventSource, KeyPressed, Resized, ResizeEventSource, wait_for_events
from livepager.input import KeyReader


class _PipeSource:
    def __init__(self, label: str) -> None:
        self.label = label
        self.read_fd, self.write_fd = os.pipe()

    def fileno(self) -> int:
        return self.read_fd

    def drain(self):
        os.read(self.read_fd, 1024)
        return [KeyPressed(self.label)]

    def close(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)


class _BrokenSource:
    def fileno(self) -> int:
        return -1

    def drain(self):
        return []


class WaitForEventsTests(unittest.TestCase):
    def test_key_source_yields_one_key(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"jk")
            source = KeyEventSource(KeyReader(read_fd))
            self.assertEqual(wait_for_events([source], timeout=1.0), [KeyPressed("j")])
            self.assertEqual(wait_for_events([source], timeout=1.0), [KeyPressed("k")])
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_key_read_ahead_after_escape_is_delivered(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"\x1bq")
            source = KeyEventSource(KeyReader(read_fd))
            self.assertEqual(wait_for_events([source], timeout=1.0), [KeyPressed("ESC"), KeyPressed("q")])
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_read_error_while_replaying_buffered_keys_is_fatal(self) -> None:
        reader = mock.Mock(spec=KeyReader)
        reader.has_pending = True
        reader.read_key.side_effect = ["ESC", OSError("input/output error")]

        with self.assertRaises(LoopIOError) as ctx:
            KeyEventSource(reader).drain()
        self.assertIn("failed to read terminal input", str(ctx.exception))

    def test_closed_terminal_input_is_fatal(self) -> None:
        read_fd, write_fd = os.pipe()
        os.close(write_fd)
        try:
            source = KeyEventSource(KeyReader(read_fd))
            with self.assertRaises(LoopIOError):
                wait_for_events([source], timeout=1.0)
        finally:
            os.close(read_fd)

    def test_first_ready_source_wins(self) -> None:
        first, second = _PipeSource("first"), _PipeSource("second")
        try:
            os.write(first.write_fd, b"x")
            os.write(second.write_fd, b"x")
            self.assertEqual(wait_for_events([first, second], timeout=1.0), [KeyPressed("first")])
            self.assertEqual(wait_for_events([first, second], timeout=1.0), [KeyPressed("second")])
        finally:
            first.close()
            second.close()

    def test_timeout_returns_no_events(self) -> None:
        source = _PipeSource("idle")
        try:
            self.assertEqual(wait_for_events([source], timeout=0), [])
        finally:
            source.close()

    def test_select_failure_is_a_loop_error(self) -> None:
        with self.assertRaises(LoopIOError):
            wait_for_events([_BrokenSource()], timeout=0)


class ResizeEventSourceTests(unittest.TestCase):
    def test_sigwinch_becomes_resized_event(self) -> None:
        previous = signal.getsignal(signal.SIGWINCH)
        with ResizeEventSource() as source:
            os.kill(os.getpid(), signal.SIGWINCH)
            self.assertEqual(wait_for_events([source], timeout=2.0), [Resized()])
            self.assertEqual(source.drain(), [])
        self.assertEqual(signal.getsignal(signal.SIGWINCH), previous)

    def test_fileno_requires_active_context(self) -> None:
        with self.assertRaises(ValueError):
            ResizeEventSource().fileno()


if __name__ == "__main__":
    unittest.main()
