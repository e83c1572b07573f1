"""Intake of structured state messages pushed by the in-page probe."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from chesswatch.core.enums import SignalSource
from chesswatch.core.snapshot import FusionRecord, ProbePayload
from chesswatch.tracking.context import TrackerContext

_LOGGER = logging.getLogger(__name__)

PROBE_MESSAGE_KIND = "CHESS_ANALYZER_STATE"


@dataclass(frozen=True, slots=True)
class ProbeMessage:
    """One message received on the in-page channel."""

    origin: str
    kind: str
    payload: Mapping[str, object]


class ProbeIntake:
    """Validates probe messages and refreshes the structured fusion record."""

    __slots__ = ("_last_payload",)

    def __init__(self) -> None:
        self._last_payload: ProbePayload | None = None

    def accept(self, context: TrackerContext, message: ProbeMessage) -> bool:
        """Consume *message*; returns ``True`` if the structured record changed."""
        if context.origin is None or message.origin != context.origin:
            _LOGGER.debug("Ignoring probe message from foreign origin %r", message.origin)
            return False
        if message.kind != PROBE_MESSAGE_KIND:
            return False

        payload = _parse_payload(message.payload)
        if payload is None:
            _LOGGER.debug("Ignoring malformed probe payload %r", message.payload)
            return False
        if payload == self._last_payload:
            return False

        self._last_payload = payload
        context.structured = FusionRecord(
            source=SignalSource.STRUCTURED,
            timestamp=context.now(),
            payload=payload,
        )
        return True

    def reset(self) -> None:
        self._last_payload = None


def _parse_payload(raw: Mapping[str, object]) -> ProbePayload | None:
    position = raw.get("fen", raw.get("position"))
    orientation = raw.get("orientation", "white")
    if not isinstance(position, str) or not position.strip():
        return None
    if not isinstance(orientation, str):
        return None
    return ProbePayload(position=position.strip(), orientation=orientation.strip().lower())
