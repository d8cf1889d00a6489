"""Key binding table and navigation dispatch.

Bindings map key tokens from ``livepager.input`` to semantic actions. The
jump-to-top action is a two-key gesture: it fires when the same bound key is
pressed twice in a row, tracked through ``Session.last_key``.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .session import Session


class Action(enum.Enum):
    LINE_DOWN = "line_down"
    LINE_UP = "line_up"
    HALF_PAGE_DOWN = "half_page_down"
    HALF_PAGE_UP = "half_page_up"
    TOP = "top"
    BOTTOM = "bottom"
    QUIT = "quit"


DEFAULT_BINDINGS: dict[Action, tuple[str, ...]] = {
    Action.LINE_DOWN: ("j", "DOWN", "ENTER"),
    Action.LINE_UP: ("k", "UP"),
    Action.HALF_PAGE_DOWN: ("d", "CTRL_D", "PAGE_DOWN"),
    Action.HALF_PAGE_UP: ("u", "CTRL_U", "PAGE_UP"),
    Action.TOP: ("g",),
    Action.BOTTOM: ("G", "END"),
    Action.QUIT: ("q", "CTRL_C"),
}


@dataclass(frozen=True)
class KeyBinding:
    action: Action
    keys: tuple[str, ...]


class KeyBindings:
    """Lookup from key token to action; later bindings win on conflicts."""

    def __init__(self, bindings: Iterable[KeyBinding]) -> None:
        self._actions: dict[str, Action] = {}
        for binding in bindings:
            for key in binding.keys:
                self._actions[key] = binding.action

    @classmethod
    def defaults(cls) -> KeyBindings:
        return cls(KeyBinding(action, keys) for action, keys in DEFAULT_BINDINGS.items())

    @classmethod
    def with_overrides(cls, overrides: Mapping[str, Sequence[str]]) -> KeyBindings:
        """Build bindings where each overridden action replaces its default keys.

        Keys claimed by an override are removed from every other action so one
        token never maps to two actions.
        """
        table: dict[Action, tuple[str, ...]] = dict(DEFAULT_BINDINGS)
        claimed: set[str] = set()
        for name, keys in overrides.items():
            try:
                action = Action(name)
            except ValueError:
                continue
            table[action] = tuple(keys)
            claimed.update(keys)
        bindings = []
        for action, keys in table.items():
            if action.value not in overrides:
                keys = tuple(key for key in keys if key not in claimed)
            bindings.append(KeyBinding(action, keys))
        return cls(bindings)

    def action_for(self, key: str) -> Action | None:
        return self._actions.get(key)

    def keys_for(self, action: Action) -> tuple[str, ...]:
        return tuple(key for key, bound in self._actions.items() if bound is action)


def handle_key(session: Session, key: str, bindings: KeyBindings) -> Action | None:
    """Apply one key press to ``session`` and return the action it triggered.

    Unbound keys only update the last-key memory. Every key clears that memory
    except the first press of the jump-to-top gesture.
    """
    viewport = session.viewport
    previous_key = session.last_key
    session.last_key = None
    previous_offset = viewport.offset

    action = bindings.action_for(key)
    if action is None:
        session.last_key = key
        return None

    if action is Action.TOP:
        if previous_key != key:
            session.last_key = key
            return None
        viewport.scroll_to_top()
    elif action is Action.LINE_DOWN:
        viewport.scroll_by(1)
    elif action is Action.LINE_UP:
        viewport.scroll_by(-1)
    elif action is Action.HALF_PAGE_DOWN:
        viewport.scroll_by(viewport.half_page)
    elif action is Action.HALF_PAGE_UP:
        viewport.scroll_by(-viewport.half_page)
    elif action is Action.BOTTOM:
        viewport.scroll_to_bottom()
    elif action is Action.QUIT:
        session.terminate()

    if viewport.offset != previous_offset:
        session.dirty = True
    return action
