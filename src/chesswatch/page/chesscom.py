"""chess.com board extraction.

Pieces carry a compact identity class (``wp``, ``bK``) and an absolute
square class ``square-FR`` with 1-based file and rank, so the parsed
placement never depends on the board orientation.
"""

from __future__ import annotations

import logging
import re

from chesswatch.core.board import Board
from chesswatch.core.enums import Color
from chesswatch.core.piece import Piece
from chesswatch.page.dom import DomElement, PageDocument
from chesswatch.page.interfaces import (
    AnnotatedMove,
    SiteAdapter,
    color_from_clock,
    color_from_move_count,
)

_LOGGER = logging.getLogger(__name__)

_BOARD_SELECTORS = (
    "wc-chess-board",
    "chess-board",
    ".board",
    ".chess-board",
    "[class*=board]",
)
_PIECE_CODE_RE = re.compile(r"^[wb][pnbrqkPNBRQK]$")
_SQUARE_RE = re.compile(r"^square-(\d)(\d)$")
_ACTIVE_CLOCK_SELECTOR = ".clock-player-turn, .clock-active, .clock-component.clock-active"
_MOVE_SELECTOR = ".move-text-component, .node"
_SAN_START_RE = re.compile(r"^(?:[a-h]|[KQRBN]|O-O)")
_WHITE_MOVE_CLASSES = ("move-text-component--white", "white")
_BLACK_MOVE_CLASSES = ("move-text-component--black", "black")


class ChessComAdapter(SiteAdapter):
    name = "chesscom"

    def find_board(self, document: PageDocument) -> DomElement | None:
        for selector in _BOARD_SELECTORS:
            board = document.select_one(selector)
            if board is not None:
                return board
        return None

    def extract_board(self, document: PageDocument, *, flipped: bool) -> Board | None:
        del flipped  # square classes are absolute
        if self.find_board(document) is None:
            return None

        board = Board()
        for element in document.select(".piece"):
            parsed = _parse_piece(element)
            if parsed is None:
                _LOGGER.debug("Skipping unparseable piece classes %s", element.classes)
                continue
            row, col, piece = parsed
            board.place(row, col, piece)
        return board

    def extract_orientation_hint(self, document: PageDocument) -> bool | None:
        board = self.find_board(document)
        if board is None:
            return None
        return board.has_class("flipped") or board.get_attribute("data-flipped") == "true"

    def extract_active_color_hint(
        self,
        document: PageDocument,
        *,
        flipped: bool,
        player_color: Color | None,
    ) -> Color | None:
        clock = document.select_one(_ACTIVE_CLOCK_SELECTOR)
        board = self.find_board(document)
        if clock is not None and board is not None:
            board_rect = board.bounding_rect()
            board_center_y = board_rect.top() + board_rect.height() / 2
            is_bottom = clock.bounding_rect().top() > board_center_y
            return color_from_clock(
                is_bottom_clock=is_bottom,
                flipped=flipped,
                player_color=player_color,
            )

        moves = [
            node
            for node in document.select(_MOVE_SELECTOR)
            if _SAN_START_RE.match(node.text_content().strip())
        ]
        if moves:
            return color_from_move_count(len(moves))
        return None

    def extract_move_list(self, document: PageDocument) -> list[AnnotatedMove]:
        moves: list[AnnotatedMove] = []
        for node in document.select(_MOVE_SELECTOR):
            classes = node.classes
            if any(cls in classes for cls in _WHITE_MOVE_CLASSES):
                color = Color.WHITE
            elif any(cls in classes for cls in _BLACK_MOVE_CLASSES):
                color = Color.BLACK
            else:
                # Without a color class the mover cannot be told apart.
                continue
            moves.append(AnnotatedMove(node.text_content().strip(), color))
        return moves


def _parse_piece(element: DomElement) -> tuple[int, int, Piece] | None:
    piece: Piece | None = None
    square: tuple[int, int] | None = None
    for cls in element.classes:
        if piece is None and _PIECE_CODE_RE.match(cls):
            piece = Piece.from_code(cls)
        match = _SQUARE_RE.match(cls)
        if square is None and match:
            square = int(match.group(1)) - 1, int(match.group(2)) - 1
    if piece is None or square is None:
        return None

    file, rank = square
    if not (0 <= file < 8 and 0 <= rank < 8):
        return None
    return 7 - rank, file, piece
