"""lichess.org board extraction.

Pieces are ``<piece class="white knight">`` elements positioned with a
``translate(Xpx, Ypx)`` transform relative to ``cg-board``. Coordinates are
screen-relative, so a board drawn from Black's side is mirrored on both
axes.
"""

from __future__ import annotations

import logging
import re

from chesswatch.core.board import Board
from chesswatch.core.enums import Color
from chesswatch.core.piece import Piece, piece_type_names
from chesswatch.page.dom import DomElement, PageDocument
from chesswatch.page.interfaces import (
    AnnotatedMove,
    SiteAdapter,
    color_from_clock,
    color_from_move_count,
)

_LOGGER = logging.getLogger(__name__)

_TRANSLATE_RE = re.compile(r"translate\((\d+(?:\.\d+)?)px,\s*(\d+(?:\.\d+)?)px\)")
_PIECE_TYPES = piece_type_names()


class LichessAdapter(SiteAdapter):
    name = "lichess"

    def find_board(self, document: PageDocument) -> DomElement | None:
        return document.select_one("cg-board") or document.select_one(".cg-wrap")

    def extract_board(self, document: PageDocument, *, flipped: bool) -> Board | None:
        cg_board = document.select_one("cg-board")
        if cg_board is None:
            return None

        board = Board()
        square_size = cg_board.bounding_rect().width() / 8
        if square_size <= 0:
            _LOGGER.debug("cg-board has no measurable width; cannot map pieces")
            return board

        for element in cg_board.select("piece"):
            parsed = _parse_piece(element, square_size, flipped)
            if parsed is None:
                _LOGGER.debug("Skipping unparseable piece %s", element.attributes)
                continue
            row, col, piece = parsed
            board.place(row, col, piece)
        return board

    def extract_orientation_hint(self, document: PageDocument) -> bool | None:
        wrap = document.select_one(".cg-wrap")
        if wrap is None:
            return None
        return wrap.has_class("orientation-black")

    def extract_active_color_hint(
        self,
        document: PageDocument,
        *,
        flipped: bool,
        player_color: Color | None,
    ) -> Color | None:
        turn_clock = document.select_one(".rclock-turn")
        if turn_clock is not None:
            return color_from_clock(
                is_bottom_clock=(
                    turn_clock.has_class("rclock-bottom") or turn_clock.has_class("bottom")
                ),
                flipped=flipped,
                player_color=player_color,
            )

        wrap = document.select_one(".cg-wrap")
        if wrap is None:
            return None
        if player_color is Color.BLACK and wrap.has_class("turn-black"):
            return Color.BLACK
        if player_color is Color.WHITE and wrap.has_class("turn-white"):
            return Color.WHITE
        moves = document.select("kwdb")
        if moves:
            return color_from_move_count(len(moves))
        return None

    def extract_move_list(self, document: PageDocument) -> list[AnnotatedMove]:
        # The move list is strictly linear: White, Black, White, ...
        return [
            AnnotatedMove(node.text_content().strip(), color_from_move_count(index))
            for index, node in enumerate(document.select("kwdb"))
        ]


def _parse_piece(
    element: DomElement,
    square_size: float,
    flipped: bool,
) -> tuple[int, int, Piece] | None:
    classes = element.classes
    if "ghost" in classes:
        return None
    type_name = next((cls for cls in classes if cls in _PIECE_TYPES), None)
    if type_name is None:
        return None
    piece = Piece.from_names("white" if "white" in classes else "black", type_name)

    style = element.style_properties().get("transform") or element.get_attribute("style") or ""
    match = _TRANSLATE_RE.search(style)
    if match is None:
        return None

    # Half-up rounding of non-negative pixel offsets.
    col = int(float(match.group(1)) / square_size + 0.5)
    row = int(float(match.group(2)) / square_size + 0.5)
    if flipped:
        col = 7 - col
        row = 7 - row
    if not (0 <= col < 8 and 0 <= row < 8):
        return None
    return row, col, piece
