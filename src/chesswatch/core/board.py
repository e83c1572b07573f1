"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from chesswatch.core.enums import Color, PieceType
from chesswatch.core.piece import Piece
from chesswatch.core.types import Square, grid_to_square, make_square


class Board:
    """Mutable 64-square board.

    Indexed by :data:`Square` (a1 = 0). Page parsers fill it through
    :meth:`place`, which takes grid coordinates with row 0 on rank 8.
    """

    __slots__ = ("_squares",)

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq] = piece

    def place(self, row: int, col: int, piece: Piece | None) -> None:
        """Put *piece* on the grid cell (*row*, *col*); row 0 is rank 8."""
        self._squares[grid_to_square(row, col)] = piece

    # -- Query helpers ------------------------------------------------------

    def piece_count(self) -> int:
        return sum(1 for piece in self._squares if piece is not None)

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)

        back_rank = [
            PieceType.ROOK,
            PieceType.KNIGHT,
            PieceType.BISHOP,
            PieceType.QUEEN,
            PieceType.KING,
            PieceType.BISHOP,
            PieceType.KNIGHT,
            PieceType.ROOK,
        ]
        for f, pt in enumerate(back_rank):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]
