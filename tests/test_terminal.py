"""Tests for terminal mode control sequences and lifecycle safety."""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from livepager.errors import SetupError
from livepager.terminal import TerminalController


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("livepager.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "livepager.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("livepager.terminal.os.write") as write_mock, mock.patch(
            "livepager.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            self.assertTrue(controller.active)
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[?25l"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)
        self.assertFalse(controller.active)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        with mock.patch("livepager.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()

    def test_non_terminal_input_is_a_setup_error(self) -> None:
        with mock.patch(
            "livepager.terminal.termios.tcgetattr",
            side_effect=termios.error(25, "Inappropriate ioctl for device"),
        ):
            with self.assertRaises(SetupError) as ctx:
                TerminalController(stdin_fd=0, stdout_fd=1)
        self.assertIn("cannot initialize terminal", str(ctx.exception))

    def test_write_encodes_utf8_with_replacement(self) -> None:
        with mock.patch("livepager.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "livepager.terminal.os.write"
        ) as write_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.write("é\udcff")

        write_mock.assert_called_once_with(1, "é?".encode("utf-8"))

    def test_size_reads_terminal_size(self) -> None:
        with mock.patch("livepager.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "livepager.terminal.shutil.get_terminal_size",
            return_value=mock.Mock(columns=120, lines=40),
        ):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            self.assertEqual(controller.size(), (40, 120))


if __name__ == "__main__":
    unittest.main()
