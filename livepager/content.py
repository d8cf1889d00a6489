"""Holder for the line sequence currently on screen."""

from __future__ import annotations

from collections.abc import Sequence


class ContentStore:
    """Currently displayed lines, replaced wholesale on every accepted reload.

    ``loaded`` stays ``False`` until the first successful render so the reload
    heuristic can tell a first load from a reload that produced no lines.
    """

    def __init__(self) -> None:
        self._lines: tuple[str, ...] = ()
        self._loaded = False
        self.generation = 0

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._lines)

    def replace(self, lines: Sequence[str]) -> tuple[str, ...]:
        """Adopt ``lines`` and return the previous sequence."""
        previous = self._lines
        self._lines = tuple(lines)
        self._loaded = True
        self.generation += 1
        return previous
