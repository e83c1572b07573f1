"""Data models for backend analysis requests."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum


class DispatchState(StrEnum):
    """Lifecycle of the single dispatch slot."""

    IDLE = "idle"
    PENDING = "pending"


class DispatchOutcome(StrEnum):
    """How a pending request left the slot."""

    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    STALE = "stale"


@dataclass(slots=True, frozen=True)
class AnalysisRequest:
    """Body of one backend POST."""

    fen: str
    depth: int

    def to_json(self) -> bytes:
        return json.dumps({"fen": self.fen, "depth": self.depth}).encode("utf-8")


@dataclass(slots=True, frozen=True)
class BackendReply:
    """Transport-level result of one backend call.

    Transport failures are reported through this object rather than raised:
    ``aborted`` for cooperative cancellation, ``ok=False`` with ``error`` for
    network or HTTP errors, ``payload=None`` for a body that is not a JSON
    object.
    """

    ok: bool
    status: int | None = None
    payload: Mapping[str, object] | None = None
    error: str | None = None
    aborted: bool = False


@dataclass(slots=True, frozen=True)
class BestMove:
    origin: str
    destination: str
    promotion: str | None = None

    @property
    def uci(self) -> str:
        return f"{self.origin}{self.destination}{self.promotion or ''}"


_BEST_MOVE_RE = re.compile(r"^([a-h][1-8])([a-h][1-8])([qrbnQRBN])?$")


def parse_best_move(payload: Mapping[str, object] | None) -> BestMove | None:
    """Extract the ``best_move`` field of a backend response.

    Returns ``None`` for a missing, non-string or malformed move.
    """
    if payload is None:
        return None
    raw = payload.get("best_move", payload.get("bestMove"))
    if not isinstance(raw, str):
        return None
    match = _BEST_MOVE_RE.match(raw.strip())
    if match is None:
        return None
    origin, destination, promotion = match.groups()
    return BestMove(
        origin=origin,
        destination=destination,
        promotion=promotion.lower() if promotion else None,
    )
