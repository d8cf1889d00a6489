"""Tests for ANSI-aware clipping, sanitization and display preparation."""

from __future__ import annotations

import unittest

from livepager.ansi import clip_ansi_line, display_width, sanitize_terminal_text
from livepager.highlight import DEFAULT_STYLE, lexer_exists, normalize_style, prepare_display_lines


class SanitizeTests(unittest.TestCase):
    def test_plain_text_is_unchanged(self) -> None:
        self.assertEqual(sanitize_terminal_text("hello\tworld"), "hello\tworld")

    def test_sgr_sequences_survive(self) -> None:
        text = "\033[1;31mbold red\033[0m"
        self.assertEqual(sanitize_terminal_text(text), text)

    def test_cursor_control_and_bell_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x07b"), "a\\x07b")
        self.assertEqual(sanitize_terminal_text("\033[2Jx"), "\\x1b[2Jx")
        self.assertEqual(sanitize_terminal_text("over\rwrite"), "over\\x0dwrite")

    def test_undecodable_bytes_are_shown_as_hex(self) -> None:
        self.assertEqual(sanitize_terminal_text("\udcff"), "\\xff")


class ClipTests(unittest.TestCase):
    def test_clip_counts_display_columns(self) -> None:
        self.assertEqual(clip_ansi_line("abcdef", 3), "abc")
        self.assertEqual(clip_ansi_line("\033[32mabcdef\033[0m", 3), "\033[32mabc")
        self.assertEqual(clip_ansi_line("日本語", 4), "日本")
        self.assertEqual(clip_ansi_line("a\tb", 20), "a       b")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_display_width_ignores_escapes(self) -> None:
        self.assertEqual(display_width("\033[1mab\033[0m日"), 4)


class PrepareDisplayLinesTests(unittest.TestCase):
    def test_terminators_are_stripped(self) -> None:
        self.assertEqual(prepare_display_lines(["a\n", "b\r\n", "c"]), ["a", "b", "c"])

    def test_no_color_strips_styling(self) -> None:
        self.assertEqual(prepare_display_lines(["\033[31mred\033[0m\n"], no_color=True), ["red"])

    def test_lexer_colorizes_and_keeps_row_count(self) -> None:
        rows = prepare_display_lines(["def f():\n", "    return 1\n", "\n"], lexer="python")
        self.assertEqual(len(rows), 3)
        self.assertIn("\033[", rows[0])

    def test_lexer_with_no_lines(self) -> None:
        self.assertEqual(prepare_display_lines([], lexer="python"), [])

    def test_style_and_lexer_lookup(self) -> None:
        self.assertEqual(normalize_style("no-such-style"), DEFAULT_STYLE)
        self.assertEqual(normalize_style("native"), "native")
        self.assertTrue(lexer_exists("markdown"))
        self.assertFalse(lexer_exists("no-such-lexer"))


if __name__ == "__main__":
    unittest.main()
