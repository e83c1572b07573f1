"""Single-slot, cancellable dispatch of analysis requests."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer

from chesswatch.dispatch.models import (
    AnalysisRequest,
    BackendReply,
    BestMove,
    DispatchOutcome,
    DispatchState,
    parse_best_move,
)
from chesswatch.dispatch.transport import AnalysisTransport, PendingCall
from chesswatch.settings import DEFAULT_SERVER_URL

_LOGGER = logging.getLogger(__name__)


class DispatchController:
    """Owns the one outstanding backend request.

    ``dispatch`` cancels whatever is in flight before issuing a new request.
    Completions are matched against the request id so late replies of
    superseded requests are dropped, and a fulfilled reply is rendered only
    if the tracked position still encodes to the value it was requested for.
    """

    __slots__ = (
        "__weakref__",
        "_transport",
        "_current_encoded",
        "_on_best_move",
        "_on_outcome",
        "_server_url",
        "_timeout_ms",
        "_timeout_timer",
        "_request_id",
        "_pending_request_id",
        "_pending_call",
        "_target_encoded",
        "_last_outcome",
    )

    def __init__(
        self,
        *,
        transport: AnalysisTransport,
        current_encoded: Callable[[], str | None],
        on_best_move: Callable[[str, str], None],
        on_outcome: Callable[[DispatchOutcome], None] | None = None,
        server_url: str = DEFAULT_SERVER_URL,
        timeout_ms: int = 5000,
        parent: QObject | None = None,
    ) -> None:
        self._transport = transport
        self._current_encoded = current_encoded
        self._on_best_move = on_best_move
        self._on_outcome = on_outcome
        self._server_url = server_url
        self._timeout_ms = timeout_ms

        self._timeout_timer = QTimer(parent)
        self._timeout_timer.setSingleShot(True)
        self._timeout_timer.timeout.connect(self._on_timeout)

        self._request_id = 0
        self._pending_request_id: int | None = None
        self._pending_call: PendingCall | None = None
        self._target_encoded: str | None = None
        self._last_outcome: DispatchOutcome | None = None

    @property
    def state(self) -> DispatchState:
        if self._pending_request_id is None:
            return DispatchState.IDLE
        return DispatchState.PENDING

    @property
    def target_encoded(self) -> str | None:
        """Exchange string the outstanding request was issued for."""
        return self._target_encoded

    @property
    def last_outcome(self) -> DispatchOutcome | None:
        return self._last_outcome

    def configure(self, *, server_url: str, timeout_ms: int) -> None:
        """Update the endpoint and timeout used by subsequent requests."""
        self._server_url = server_url
        self._timeout_ms = timeout_ms

    def dispatch(self, encoded: str, depth: int) -> int:
        """Issue a request for *encoded*, superseding any pending one."""
        self.cancel()

        self._request_id += 1
        request_id = self._request_id
        self._pending_request_id = request_id
        self._target_encoded = encoded

        _LOGGER.debug("Dispatching request %d for %s (depth %d)", request_id, encoded, depth)
        call = self._transport.post(
            self._server_url,
            AnalysisRequest(fen=encoded, depth=depth),
            lambda reply: self._on_reply(request_id, reply),
        )
        if self._pending_request_id == request_id:
            self._pending_call = call
            self._timeout_timer.start(self._timeout_ms)
        return request_id

    def cancel(self) -> None:
        """Abort the outstanding request, if any."""
        if self._pending_request_id is None:
            return
        _LOGGER.debug("Cancelling request %d", self._pending_request_id)
        call = self._pending_call
        self._finish(DispatchOutcome.CANCELLED)
        if call is not None:
            call.abort()

    def _on_timeout(self) -> None:
        if self._pending_request_id is None:
            return
        _LOGGER.info(
            "Request %d timed out after %d ms", self._pending_request_id, self._timeout_ms
        )
        call = self._pending_call
        self._finish(DispatchOutcome.TIMED_OUT)
        if call is not None:
            call.abort()

    def _on_reply(self, request_id: int, reply: BackendReply) -> None:
        if request_id != self._pending_request_id:
            return
        target = self._target_encoded

        if reply.aborted:
            self._finish(DispatchOutcome.CANCELLED)
            return
        if not reply.ok:
            _LOGGER.info("Backend request %d failed: %s", request_id, reply.error)
            self._finish(DispatchOutcome.FAILED)
            return

        best_move = parse_best_move(reply.payload)
        if best_move is None:
            _LOGGER.info("Backend reply for request %d has no usable best move", request_id)
            self._finish(DispatchOutcome.FAILED)
            return

        if self._current_encoded() != target:
            _LOGGER.debug("Board changed during analysis, discarding %s", best_move.uci)
            self._finish(DispatchOutcome.STALE)
            return

        self._finish(DispatchOutcome.FULFILLED, best_move)

    def _finish(self, outcome: DispatchOutcome, best_move: BestMove | None = None) -> None:
        self._timeout_timer.stop()
        self._pending_request_id = None
        self._pending_call = None
        self._target_encoded = None
        self._last_outcome = outcome
        if best_move is not None:
            self._on_best_move(best_move.origin, best_move.destination)
        if self._on_outcome is not None:
            self._on_outcome(outcome)
