"""Core domain layer: position model and exchange strings, no Qt.

Quick start::

    from chesswatch.core import STARTING_EXCHANGE, decode_exchange, encode_exchange

    fields = decode_exchange(STARTING_EXCHANGE)
    print(encode_exchange(fields.board, fields.side_to_move, fields.castling))
"""

from chesswatch.core.board import Board
from chesswatch.core.enums import CastlingRights, Color, PieceType, SignalSource
from chesswatch.core.exchange import (
    STARTING_EXCHANGE,
    STARTING_PLACEMENT,
    ExchangeFields,
    board_from_placement,
    castling_from_field,
    castling_to_field,
    decode_exchange,
    encode_exchange,
    placement_from_board,
)
from chesswatch.core.piece import Piece
from chesswatch.core.snapshot import FusionRecord, PositionSnapshot, ProbePayload
from chesswatch.core.types import Square, grid_to_square, make_square

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "PieceType",
    "SignalSource",
    # Types / helpers
    "Square",
    "grid_to_square",
    "make_square",
    # Domain objects
    "Board",
    "Piece",
    "PositionSnapshot",
    "FusionRecord",
    "ProbePayload",
    # Exchange strings
    "STARTING_EXCHANGE",
    "STARTING_PLACEMENT",
    "ExchangeFields",
    "board_from_placement",
    "castling_from_field",
    "castling_to_field",
    "decode_exchange",
    "encode_exchange",
    "placement_from_board",
]
