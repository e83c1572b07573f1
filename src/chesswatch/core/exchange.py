"""Exchange-string (FEN-style) encoding of tracked positions.

Only placement, side to move and castling rights are tracked; the
en-passant and clock fields are emitted as fixed placeholders so that two
snapshots of the same logical position always encode identically.
"""

from __future__ import annotations

from dataclasses import dataclass

from chesswatch.core.board import Board
from chesswatch.core.enums import CastlingRights, Color
from chesswatch.core.piece import Piece
from chesswatch.core.types import make_square

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
STARTING_EXCHANGE = f"{STARTING_PLACEMENT} w KQkq - 0 1"
PLACEHOLDER_FIELDS = "- 0 1"

# Shorthand some probes send instead of a full starting FEN.
_START_ALIASES = frozenset({"start", "startpos"})

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


@dataclass(frozen=True, slots=True)
class ExchangeFields:
    """Fields recovered from a (possibly partial) exchange string."""

    board: Board
    side_to_move: Color | None
    castling: CastlingRights | None


def board_from_placement(placement: str) -> Board:
    """Parse the piece-placement field into a :class:`Board`."""
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid placement (must contain 8 ranks): {placement!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid placement digit {ch!r}: {placement!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid placement rank width: {placement!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid placement rank width: {placement!r}")
        if file != 8:
            raise ValueError(f"Invalid placement rank width: {placement!r}")
    return board


def placement_from_board(board: Board) -> str:
    """Serialise the piece placement of *board* (rank 8 first)."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def castling_to_field(rights: CastlingRights) -> str:
    field = "".join(ch for ch, right in _CASTLING_CHARS if rights & right)
    return field or "-"


def castling_from_field(field: str) -> CastlingRights:
    if field == "-":
        return CastlingRights.NONE
    lookup = dict(_CASTLING_CHARS)
    rights = CastlingRights.NONE
    seen: set[str] = set()
    for ch in field:
        right = lookup.get(ch)
        if right is None or ch in seen:
            raise ValueError(f"Invalid castling field: {field!r}")
        seen.add(ch)
        rights |= right
    return rights


def encode_exchange(board: Board, side_to_move: Color, castling: CastlingRights) -> str:
    """Build the normalized exchange string for a snapshot."""
    return (
        f"{placement_from_board(board)} {side_to_move.fen_char} "
        f"{castling_to_field(castling)} {PLACEHOLDER_FIELDS}"
    )


def decode_exchange(text: str) -> ExchangeFields:
    """Parse an exchange string as sent by a structured source.

    Only the placement field is mandatory. Side to move and castling are
    returned as ``None`` when absent; en-passant and clocks are ignored.
    """
    stripped = text.strip()
    if stripped.lower() in _START_ALIASES:
        stripped = STARTING_EXCHANGE

    parts = stripped.split()
    if not parts:
        raise ValueError(f"Empty exchange string: {text!r}")

    board = board_from_placement(parts[0])
    side = Color.from_fen_char(parts[1]) if len(parts) > 1 else None
    castling = castling_from_field(parts[2]) if len(parts) > 2 else None
    return ExchangeFields(board=board, side_to_move=side, castling=castling)
