"""Sticky side-to-move tracking.

Clock and highlight elements update asynchronously relative to piece
elements, so re-deriving the active color on every poll flickers. Instead
the turn is seeded once from the page and then toggled on every observed
change of the piece placement.
"""

from __future__ import annotations

import logging

from chesswatch.core.enums import Color
from chesswatch.core.exchange import STARTING_PLACEMENT
from chesswatch.tracking.context import TrackerContext
from chesswatch.tracking.orientation import is_flipped

_LOGGER = logging.getLogger(__name__)


class TurnTracker:
    """State machine over ``TrackerContext.turn``."""

    __slots__ = ()

    def observe(self, context: TrackerContext, placement_key: str) -> Color:
        """Record a placement observation and return the side to move."""
        state = context.turn
        if state.last_board_key is None:
            state.last_board_key = placement_key
            state.current_turn = self._seed_turn(context)
            _LOGGER.debug("Seeded turn state: %s", state.current_turn)
        elif placement_key != state.last_board_key:
            state.current_turn = state.current_turn.opposite
            state.last_board_key = placement_key
            _LOGGER.debug("Board changed, turn toggled to %s", state.current_turn)

        # A starting placement means a reset or a new game.
        if placement_key == STARTING_PLACEMENT:
            state.current_turn = Color.WHITE
        return state.current_turn

    def sync(self, context: TrackerContext, placement_key: str, side_to_move: Color) -> None:
        """Adopt an authoritative side to move reported by a structured source."""
        context.turn.last_board_key = placement_key
        context.turn.current_turn = side_to_move

    @staticmethod
    def _seed_turn(context: TrackerContext) -> Color:
        if context.site is None or context.document is None:
            return Color.WHITE
        hint = context.site.extract_active_color_hint(
            context.document,
            flipped=is_flipped(context),
            player_color=context.settings.player_color.color,
        )
        return hint if hint is not None else Color.WHITE
