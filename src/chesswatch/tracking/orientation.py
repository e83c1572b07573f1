"""Board orientation resolution."""

from __future__ import annotations

from chesswatch.settings import SideOverride
from chesswatch.tracking.context import TrackerContext


def orientation_is_black(value: str) -> bool:
    """Normalize a structured orientation field ('black' / 'b' / 'white' ...)."""
    return value.strip().lower() in ("black", "b")


def is_flipped(context: TrackerContext) -> bool:
    """Whether the board is drawn from Black's side.

    Resolution order: explicit user override, a fresh structured
    orientation, the site's DOM hint, then ``False``. Reads only.
    """
    override = context.settings.orientation
    if override is SideOverride.WHITE:
        return False
    if override is SideOverride.BLACK:
        return True

    record = context.fresh_structured()
    if record is not None:
        return orientation_is_black(record.payload.orientation)

    if context.site is not None and context.document is not None:
        hint = context.site.extract_orientation_hint(context.document)
        if hint is not None:
            return hint
    return False
