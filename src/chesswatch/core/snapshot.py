"""Position snapshots and per-source fusion records."""

from __future__ import annotations

from dataclasses import dataclass

from chesswatch.core.board import Board
from chesswatch.core.enums import CastlingRights, Color, SignalSource
from chesswatch.core.exchange import encode_exchange, placement_from_board


@dataclass(frozen=True, slots=True, eq=False)
class PositionSnapshot:
    """One resolved, internally consistent position descriptor.

    Two snapshots describe the same position when their :attr:`encoded`
    values match; :attr:`source` is provenance only.
    """

    board: Board
    side_to_move: Color
    castling: CastlingRights
    source: SignalSource = SignalSource.VISUAL

    @property
    def placement_key(self) -> str:
        return placement_from_board(self.board)

    @property
    def encoded(self) -> str:
        return encode_exchange(self.board, self.side_to_move, self.castling)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PositionSnapshot):
            return NotImplemented
        return self.encoded == other.encoded

    def __hash__(self) -> int:
        return hash(self.encoded)


@dataclass(frozen=True, slots=True)
class ProbePayload:
    """Raw ``{position, orientation}`` pair pushed by the in-page probe."""

    position: str
    orientation: str


@dataclass(frozen=True, slots=True)
class FusionRecord:
    """Most recent signal from one source; *timestamp* is in seconds."""

    source: SignalSource
    timestamp: float
    payload: ProbePayload

    def age_ms(self, now: float) -> float:
        return (now - self.timestamp) * 1000.0

    def is_fresh(self, now: float, stale_window_ms: int) -> bool:
        return self.age_ms(now) < stale_window_ms
