"""HTTP transport to the analysis backend.

The controller only sees :class:`AnalysisTransport`; the default
implementation runs on ``QNetworkAccessManager`` so replies arrive as
ordinary events on the Qt event loop.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from PyQt6.QtCore import QByteArray, QObject, QUrl, pyqtSignal
from PyQt6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from chesswatch.dispatch.models import AnalysisRequest, BackendReply

_LOGGER = logging.getLogger(__name__)

ReplyCallback = Callable[[BackendReply], None]


class PendingCall(ABC):
    """Handle to one in-flight backend call."""

    @abstractmethod
    def abort(self) -> None:
        """Cancel the call; a no-op once it has completed."""


class AnalysisTransport(ABC):
    """Asynchronous request channel to the backend."""

    @abstractmethod
    def post(
        self, url: str, request: AnalysisRequest, on_reply: ReplyCallback
    ) -> PendingCall:
        """POST *request* as JSON; *on_reply* fires exactly once."""

    @abstractmethod
    def get(self, url: str, timeout_ms: int, on_reply: ReplyCallback) -> PendingCall:
        """GET *url*, giving up after *timeout_ms*."""


class _QtPendingCall(PendingCall):
    __slots__ = ("_reply", "finished")

    def __init__(self, reply: QNetworkReply) -> None:
        self._reply = reply
        self.finished = False

    def abort(self) -> None:
        if self.finished:
            return
        self._reply.abort()


class QtAnalysisTransport(AnalysisTransport):
    """:class:`AnalysisTransport` backed by ``QNetworkAccessManager``."""

    __slots__ = ("_manager",)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        manager: QNetworkAccessManager | None = None,
    ) -> None:
        self._manager = manager or QNetworkAccessManager(parent)

    def post(
        self, url: str, request: AnalysisRequest, on_reply: ReplyCallback
    ) -> PendingCall:
        network_request = QNetworkRequest(QUrl(url))
        network_request.setHeader(
            QNetworkRequest.KnownHeaders.ContentTypeHeader, "application/json"
        )
        reply = self._manager.post(network_request, QByteArray(request.to_json()))
        return self._track(reply, on_reply)

    def get(self, url: str, timeout_ms: int, on_reply: ReplyCallback) -> PendingCall:
        network_request = QNetworkRequest(QUrl(url))
        network_request.setTransferTimeout(timeout_ms)
        reply = self._manager.get(network_request)
        return self._track(reply, on_reply)

    @staticmethod
    def _track(reply: QNetworkReply, on_reply: ReplyCallback) -> PendingCall:
        call = _QtPendingCall(reply)

        def _on_finished() -> None:
            call.finished = True
            try:
                result = _reply_from_network(reply)
            finally:
                reply.deleteLater()
            on_reply(result)

        reply.finished.connect(_on_finished)
        return call


def _reply_from_network(reply: QNetworkReply) -> BackendReply:
    status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
    status = status if isinstance(status, int) else None
    error = reply.error()

    if error == QNetworkReply.NetworkError.OperationCanceledError:
        return BackendReply(ok=False, status=status, error="aborted", aborted=True)
    if error != QNetworkReply.NetworkError.NoError:
        return BackendReply(ok=False, status=status, error=reply.errorString())

    body = reply.readAll().data()
    try:
        payload = json.loads(body.decode("utf-8")) if body else None
    except (UnicodeDecodeError, ValueError):
        _LOGGER.debug("Backend returned a non-JSON body (%d bytes)", len(body))
        payload = None
    if not isinstance(payload, dict):
        payload = None
    return BackendReply(ok=True, status=status, payload=payload)


class BackendHealthProbe(QObject):
    """Reports whether the backend answers ``GET /health``."""

    health_checked = pyqtSignal(bool)

    def __init__(
        self,
        transport: AnalysisTransport,
        *,
        health_url: str,
        timeout_ms: int = 3000,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._transport = transport
        self._health_url = health_url
        self._timeout_ms = timeout_ms
        self._checking = False
        self._online: bool | None = None

    @property
    def online(self) -> bool | None:
        """Result of the last completed check, ``None`` before the first one."""
        return self._online

    def set_target(self, health_url: str, timeout_ms: int) -> None:
        self._health_url = health_url
        self._timeout_ms = timeout_ms

    def check(self) -> None:
        if self._checking:
            return
        self._checking = True
        self._transport.get(self._health_url, self._timeout_ms, self._on_reply)

    def _on_reply(self, reply: BackendReply) -> None:
        self._checking = False
        self._online = reply.ok
        if not reply.ok:
            _LOGGER.info("Backend health check failed: %s", reply.error)
        self.health_checked.emit(reply.ok)
