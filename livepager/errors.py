"""Fatal error taxonomy for the live-reload pager.

Every fatal condition unwinds to ``livepager.cli.main`` as one of these types.
The CLI prints the message only after terminal mode has been torn down.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .render_invoker import RenderOutcome


class LivePagerError(Exception):
    """Base class for errors that terminate the pager with a nonzero exit."""


class SetupError(LivePagerError):
    """Watching the file or preparing the terminal failed."""


class SpawnError(LivePagerError):
    """The render process could not be started at all."""


class RenderError(LivePagerError):
    """The render process ran but failed or was terminated."""

    def __init__(self, message: str, outcome: RenderOutcome) -> None:
        super().__init__(message)
        self.outcome = outcome


class LoopIOError(LivePagerError):
    """Waiting for events or reading notifications failed."""
