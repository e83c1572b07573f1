"""Explicit tracker context shared by the tracking components.

Replaces ambient module-level state: the session owns one context and
passes it to every component entry point. Each component writes back only
its own fields (the probe intake the structured record, the turn tracker
the turn state).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from chesswatch.core.enums import Color
from chesswatch.core.snapshot import FusionRecord
from chesswatch.page.dom import PageDocument
from chesswatch.page.interfaces import SiteAdapter
from chesswatch.page.sites import detect_site
from chesswatch.settings import TrackerSettings


@dataclass(slots=True)
class TurnState:
    """Sticky side-to-move, mutated only by :class:`TurnTracker`."""

    current_turn: Color = Color.WHITE
    last_board_key: str | None = None

    def reset(self) -> None:
        self.current_turn = Color.WHITE
        self.last_board_key = None


@dataclass(eq=False)
class TrackerContext:
    """Configuration plus the most recent signals from every source."""

    settings: TrackerSettings = field(default_factory=TrackerSettings)
    document: PageDocument | None = None
    site: SiteAdapter | None = None
    structured: FusionRecord | None = None
    turn: TurnState = field(default_factory=TurnState)
    clock: Callable[[], float] = time.monotonic

    def now(self) -> float:
        return self.clock()

    @property
    def origin(self) -> str | None:
        return self.document.origin if self.document is not None else None

    def fresh_structured(self) -> FusionRecord | None:
        """The structured record if it is younger than the stale window."""
        record = self.structured
        if record is None:
            return None
        if not record.is_fresh(self.now(), self.settings.stale_window_ms):
            return None
        return record

    def attach_document(self, document: PageDocument) -> bool:
        """Store the latest page snapshot.

        Returns ``True`` when the snapshot belongs to a different host than
        the previous one; the site adapter is then re-selected and all
        per-page signal state is dropped.
        """
        previous = self.document
        self.document = document
        if previous is not None and previous.hostname == document.hostname:
            return False
        self.site = detect_site(document.hostname)
        self.structured = None
        self.turn.reset()
        return True
