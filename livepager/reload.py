"""Reload cycle: diff-based re-anchoring and adoption of new content.

Editors usually rewrite one contiguous region, so after a reload the view
jumps to the first line that differs. When one render is a prefix of the
other the view jumps to where the shorter one ends, so the first appended
line comes into view. An identical render keeps the current position.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import RenderError
from .render_invoker import RenderOutcome, RenderSuccess, describe_outcome
from .session import Session

logger = logging.getLogger(__name__)


def first_difference(old_lines: Sequence[str], new_lines: Sequence[str]) -> int | None:
    """Return the first index where the shared prefix diverges, if any."""
    for idx, (old, new) in enumerate(zip(old_lines, new_lines)):
        if old != new:
            return idx
    return None


def compute_anchor(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    previous_offset: int,
    is_first_load: bool,
) -> int:
    """Return the unclamped offset hint to use after a reload."""
    if is_first_load:
        return 0
    diverged_at = first_difference(old_lines, new_lines)
    if diverged_at is not None:
        return diverged_at
    if len(old_lines) != len(new_lines):
        return min(len(old_lines), len(new_lines))
    return previous_offset


def apply_reload(session: Session, outcome: RenderOutcome) -> int:
    """Adopt a render outcome into ``session`` and return the new offset.

    Failed and terminated renders raise ``RenderError``; the session keeps its
    previous content in that case but the caller is expected to exit.
    """
    if not isinstance(outcome, RenderSuccess):
        message = describe_outcome(outcome)
        logger.error("%s", message)
        raise RenderError(message, outcome)

    is_first_load = not session.content.loaded
    viewport = session.viewport
    previous = session.content.replace(outcome.lines)
    hint = compute_anchor(previous, outcome.lines, viewport.offset, is_first_load)
    viewport.set_content_length(len(outcome.lines))
    offset = viewport.set_offset(hint)

    session.reload_count += 1
    session.dirty = True
    logger.info(
        "reload %d: %d lines, anchor hint %d, offset %d",
        session.reload_count,
        len(outcome.lines),
        hint,
        offset,
    )
    return offset


def reload(session: Session) -> int:
    """Run the session's render command and adopt the result."""
    return apply_reload(session, session.command.invoke())
