"""Fusion of the structured probe feed and the visual page parser."""

from __future__ import annotations

import logging

from chesswatch.core.enums import CastlingRights, SignalSource
from chesswatch.core.exchange import decode_exchange, placement_from_board
from chesswatch.core.snapshot import FusionRecord, PositionSnapshot
from chesswatch.tracking.castling import infer_castling_rights
from chesswatch.tracking.context import TrackerContext
from chesswatch.tracking.orientation import is_flipped
from chesswatch.tracking.turn import TurnTracker

_LOGGER = logging.getLogger(__name__)


class PositionResolver:
    """Produces the canonical :class:`PositionSnapshot` for the current page.

    A fresh structured record wins; otherwise the board is reconstructed from
    the page by the site adapter. ``resolve`` never raises for missing or
    malformed page content, it returns ``None`` and the caller skips the
    cycle.
    """

    __slots__ = ("_turn_tracker",)

    def __init__(self, turn_tracker: TurnTracker | None = None) -> None:
        self._turn_tracker = turn_tracker or TurnTracker()

    @property
    def turn_tracker(self) -> TurnTracker:
        return self._turn_tracker

    def resolve(self, context: TrackerContext) -> PositionSnapshot | None:
        record = context.fresh_structured()
        if record is not None:
            snapshot = self._from_structured(context, record)
            if snapshot is not None:
                return snapshot
        return self._from_page(context)

    def board_detected(self, context: TrackerContext) -> bool:
        """Whether the page currently shows a recognizable board container."""
        if context.site is None or context.document is None:
            return False
        return context.site.find_board(context.document) is not None

    def _from_structured(
        self, context: TrackerContext, record: FusionRecord
    ) -> PositionSnapshot | None:
        try:
            fields = decode_exchange(record.payload.position)
        except ValueError as exc:
            _LOGGER.debug("Structured position rejected: %s", exc)
            return None

        placement_key = placement_from_board(fields.board)
        side_to_move = fields.side_to_move
        if side_to_move is None:
            side_to_move = self._turn_tracker.observe(context, placement_key)
        else:
            self._turn_tracker.sync(context, placement_key, side_to_move)

        castling = fields.castling
        if castling is None:
            castling = self._infer_castling(context)

        return PositionSnapshot(
            board=fields.board,
            side_to_move=side_to_move,
            castling=castling,
            source=SignalSource.STRUCTURED,
        )

    def _from_page(self, context: TrackerContext) -> PositionSnapshot | None:
        site = context.site
        document = context.document
        if site is None or document is None:
            return None

        board = site.extract_board(document, flipped=is_flipped(context))
        if board is None:
            _LOGGER.debug("No board container found on %s", document.hostname)
            return None
        if board.piece_count() == 0:
            _LOGGER.debug("Board container on %s holds no parseable pieces", document.hostname)
            return None

        side_to_move = self._turn_tracker.observe(context, placement_from_board(board))
        return PositionSnapshot(
            board=board,
            side_to_move=side_to_move,
            castling=self._infer_castling(context),
            source=SignalSource.VISUAL,
        )

    @staticmethod
    def _infer_castling(context: TrackerContext) -> CastlingRights:
        if context.site is None or context.document is None:
            return infer_castling_rights(())
        return infer_castling_rights(context.site.extract_move_list(context.document))
