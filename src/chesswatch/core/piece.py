"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chesswatch.core.enums import Color, PieceType

# FEN character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_FEN_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}

# Piece names as they appear in page markup ("knight", "queen", ...).
_TYPE_NAMES: dict[str, PieceType] = {pt.name.lower(): pt for pt in PieceType}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype)

    @classmethod
    def from_code(cls, code: str) -> Piece:
        """Create piece from a two-letter code such as 'wp', 'bK' or 'wN'."""
        if len(code) != 2 or code[0] not in "wb":
            raise ValueError(f"Invalid piece code: {code!r}")
        letter = code[1].upper() if code[0] == "w" else code[1].lower()
        return cls.from_char(letter)

    @classmethod
    def from_names(cls, color_name: str, type_name: str) -> Piece:
        """Create piece from markup names, e.g. ('black', 'knight')."""
        if color_name not in ("white", "black"):
            raise ValueError(f"Invalid piece color: {color_name!r}")
        try:
            ptype = _TYPE_NAMES[type_name]
        except KeyError:
            raise ValueError(f"Invalid piece type: {type_name!r}") from None
        color = Color.WHITE if color_name == "white" else Color.BLACK
        return cls(color, ptype)


def piece_type_names() -> tuple[str, ...]:
    """Markup names of every piece type, pawn first."""
    return tuple(_TYPE_NAMES)
