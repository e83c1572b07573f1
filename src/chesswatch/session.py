"""Tracking session orchestration on the Qt event loop."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from PyQt6.QtCore import QObject, QTimer

from chesswatch.dispatch.controller import DispatchController
from chesswatch.dispatch.models import DispatchOutcome
from chesswatch.dispatch.transport import AnalysisTransport, QtAnalysisTransport
from chesswatch.page.dom import PageDocument
from chesswatch.settings import TrackerSettings
from chesswatch.tracking.context import TrackerContext
from chesswatch.tracking.probe import ProbeIntake, ProbeMessage
from chesswatch.tracking.resolver import PositionResolver

_LOGGER = logging.getLogger(__name__)


class MoveRenderer(ABC):
    """Draws the suggested move over the page. Both calls must be idempotent."""

    @abstractmethod
    def show_move(self, origin: str, destination: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


@dataclass(slots=True, frozen=True)
class TrackerStatus:
    board_detected: bool
    site: str | None
    fen: str | None
    enabled: bool


class TrackerSession:
    """Turns page and probe events into at most one backend request at a time.

    Every trigger (page mutation, probe message, viewport change) goes
    through a single-shot debounce timer, so a burst of triggers runs one
    cycle on the state present when the timer fires. A periodic poll is the
    backup trigger for changes no event reports.
    """

    __slots__ = (
        "__weakref__",
        "_context",
        "_renderer",
        "_resolver",
        "_probe_intake",
        "_dispatcher",
        "_debounce_timer",
        "_poll_timer",
        "_last_encoded",
        "_cycle_count",
        "_is_started",
        "_is_shutting_down",
    )

    def __init__(
        self,
        *,
        renderer: MoveRenderer,
        transport: AnalysisTransport | None = None,
        settings: TrackerSettings | None = None,
        clock: Callable[[], float] | None = None,
        on_outcome: Callable[[DispatchOutcome], None] | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._context = TrackerContext(settings=settings or TrackerSettings())
        if clock is not None:
            self._context.clock = clock
        settings = self._context.settings

        self._renderer = renderer
        self._resolver = PositionResolver()
        self._probe_intake = ProbeIntake()
        self._dispatcher = DispatchController(
            transport=transport or QtAnalysisTransport(parent),
            current_encoded=self.current_encoded,
            on_best_move=self._renderer.show_move,
            on_outcome=on_outcome,
            server_url=settings.server_url,
            timeout_ms=settings.request_timeout_ms,
            parent=parent,
        )

        self._debounce_timer = QTimer(parent)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.timeout.connect(self.run_cycle)

        self._poll_timer = QTimer(parent)
        self._poll_timer.timeout.connect(self._on_poll)

        self._last_encoded: str | None = None
        self._cycle_count = 0
        self._is_started = False
        self._is_shutting_down = False

    @property
    def context(self) -> TrackerContext:
        return self._context

    @property
    def settings(self) -> TrackerSettings:
        return self._context.settings

    @property
    def dispatcher(self) -> DispatchController:
        return self._dispatcher

    @property
    def cycle_count(self) -> int:
        """Number of tracking cycles run so far."""
        return self._cycle_count

    def setup(self) -> None:
        """Start the periodic poll."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._poll_timer.start(self._context.settings.poll_interval_ms)
        self._is_started = True

    def shutdown(self) -> None:
        """Stop timers, abort the outstanding request and clear the overlay."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self._debounce_timer.stop()
        self._poll_timer.stop()
        self._dispatcher.cancel()
        self._renderer.clear()
        self._is_started = False

    # ── Inbound events ──────────────────────────────────────────────────

    def on_page_mutation(self, document: PageDocument) -> None:
        """Receive a fresh page snapshot from the page bridge."""
        if self._is_shutting_down:
            return
        if self._context.attach_document(document):
            site = self._context.site
            _LOGGER.info(
                "Tracking %s (%s)",
                document.hostname,
                site.name if site is not None else "unsupported site",
            )
            self._probe_intake.reset()
            self._invalidate()
        self._schedule_cycle()

    def handle_probe_message(self, message: ProbeMessage) -> bool:
        """Feed one probe message; returns ``True`` if it was accepted."""
        if self._is_shutting_down:
            return False
        if not self._probe_intake.accept(self._context, message):
            return False
        self._schedule_cycle()
        return True

    def on_viewport_resized(self) -> None:
        """Drop the drawn move and redraw it once the layout settles."""
        if self._is_shutting_down:
            return
        self._invalidate()
        self._schedule_cycle()

    # ── Commands ────────────────────────────────────────────────────────

    def apply_settings(self, settings: TrackerSettings) -> None:
        """Replace the configuration and re-evaluate the current position."""
        self._context.settings = settings
        self._dispatcher.configure(
            server_url=settings.server_url,
            timeout_ms=settings.request_timeout_ms,
        )
        if self._poll_timer.isActive():
            self._poll_timer.setInterval(settings.poll_interval_ms)

        self._dispatcher.cancel()
        self._invalidate()
        if settings.enabled:
            self._schedule_cycle()

    def update_settings(self, mapping: Mapping[str, object]) -> None:
        """Apply a settings-panel payload such as ``{"depth": 18}``."""
        try:
            settings = self._context.settings.updated(mapping)
        except ValueError as exc:
            _LOGGER.info("Ignoring invalid settings %r: %s", dict(mapping), exc)
            return
        self.apply_settings(settings)

    def set_enabled(self, enabled: bool) -> None:
        self._context.settings = replace(self._context.settings, enabled=enabled)
        self._debounce_timer.stop()
        self._dispatcher.cancel()
        self._invalidate()
        if enabled:
            self.run_cycle()

    def analyze_now(self) -> None:
        """Forget the last dispatched position and run a cycle immediately."""
        self._debounce_timer.stop()
        self._last_encoded = None
        self.run_cycle()

    def status(self) -> TrackerStatus:
        site = self._context.site
        return TrackerStatus(
            board_detected=self._resolver.board_detected(self._context),
            site=site.name if site is not None else None,
            fen=self.current_encoded(),
            enabled=self._context.settings.enabled,
        )

    def current_encoded(self) -> str | None:
        """Exchange string of the position the page shows right now."""
        snapshot = self._resolver.resolve(self._context)
        return snapshot.encoded if snapshot is not None else None

    # ── Cycle ───────────────────────────────────────────────────────────

    def run_cycle(self) -> None:
        """Resolve the position and dispatch it if it changed."""
        if self._is_shutting_down:
            return
        self._cycle_count += 1
        settings = self._context.settings
        if not settings.enabled:
            return

        snapshot = self._resolver.resolve(self._context)
        if snapshot is None:
            _LOGGER.debug("No position available, skipping cycle")
            return

        encoded = snapshot.encoded
        if encoded == self._last_encoded:
            return
        self._last_encoded = encoded
        self._renderer.clear()

        player_color = settings.player_color.color
        if player_color is not None and snapshot.side_to_move != player_color:
            _LOGGER.debug("Waiting for %s to move, not dispatching", snapshot.side_to_move)
            self._dispatcher.cancel()
            return

        self._dispatcher.dispatch(encoded, settings.search_depth)

    def _schedule_cycle(self) -> None:
        self._debounce_timer.start(self._context.settings.debounce_ms)

    def _invalidate(self) -> None:
        self._last_encoded = None
        self._renderer.clear()

    def _on_poll(self) -> None:
        document = self._context.document
        if document is None or document.hidden:
            return
        self.run_cycle()
