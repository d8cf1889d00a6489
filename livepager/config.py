"""User settings read from ``config.json`` in the platform config dir.

The file holds display defaults and key binding overrides. Anything missing,
unreadable or of the wrong type is ignored and the built-in default applies.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .keys import Action

APP_NAME = "livepager"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class Settings:
    """Config values after validation; ``None`` means not configured."""

    style: str | None = None
    lexer: str | None = None
    no_color: bool = False
    key_overrides: dict[str, tuple[str, ...]] = field(default_factory=dict)


def load_config() -> dict[str, object]:
    """Return the top-level JSON object from the config file, or ``{}``."""
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _load_key_overrides(value: object) -> dict[str, tuple[str, ...]]:
    """Keep entries naming a known action with a list of non-empty key tokens."""
    if not isinstance(value, dict):
        return {}
    known = {action.value for action in Action}
    overrides: dict[str, tuple[str, ...]] = {}
    for name, keys in value.items():
        if name not in known or not isinstance(keys, list):
            continue
        tokens = tuple(key for key in keys if isinstance(key, str) and key)
        if tokens:
            overrides[name] = tokens
    return overrides


def load_settings() -> Settings:
    data = load_config()
    no_color = data.get("no_color")
    return Settings(
        style=_optional_str(data.get("style")),
        lexer=_optional_str(data.get("lexer")),
        no_color=no_color if isinstance(no_color, bool) else False,
        key_overrides=_load_key_overrides(data.get("keys")),
    )
