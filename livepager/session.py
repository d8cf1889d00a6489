"""Explicit session value shared by the reload step and the event loop."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path

from .content import ContentStore
from .render_invoker import RenderCommand
from .viewport import Viewport


class LoopState(enum.Enum):
    RUNNING = "running"
    TERMINATING = "terminating"


@dataclass
class Session:
    source_path: Path
    command: RenderCommand
    content: ContentStore = field(default_factory=ContentStore)
    viewport: Viewport = field(default_factory=Viewport)
    state: LoopState = LoopState.RUNNING
    last_key: str | None = None
    reload_count: int = 0
    dirty: bool = True

    @property
    def running(self) -> bool:
        return self.state is LoopState.RUNNING

    def terminate(self) -> None:
        self.state = LoopState.TERMINATING
