"""Tests for the JSON config file loader."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from livepager import config


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "config.json"
        patcher = mock.patch.object(config, "CONFIG_PATH", self.path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.load_settings(), config.Settings())

    def test_malformed_or_non_object_json_gives_defaults(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(config.load_config(), {})
        self.path.write_text("[1, 2, 3]", encoding="utf-8")
        self.assertEqual(config.load_config(), {})

    def test_valid_settings_are_loaded(self) -> None:
        self.path.write_text(
            json.dumps({"style": " native ", "lexer": "markdown", "no_color": True}),
            encoding="utf-8",
        )
        settings = config.load_settings()
        self.assertEqual(settings.style, "native")
        self.assertEqual(settings.lexer, "markdown")
        self.assertTrue(settings.no_color)

    def test_wrong_types_are_ignored(self) -> None:
        self.path.write_text(json.dumps({"style": 3, "lexer": "  ", "no_color": "yes"}), encoding="utf-8")
        self.assertEqual(config.load_settings(), config.Settings())

    def test_key_overrides_keep_known_actions_only(self) -> None:
        self.path.write_text(
            json.dumps(
                {
                    "keys": {
                        "line_down": ["n", "", 4],
                        "line_up": "p",
                        "jump": ["x"],
                        "quit": [],
                    }
                }
            ),
            encoding="utf-8",
        )
        self.assertEqual(config.load_settings().key_overrides, {"line_down": ("n",)})


if __name__ == "__main__":
    unittest.main()
