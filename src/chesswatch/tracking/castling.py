"""Best-effort castling-rights inference from the visible move list.

A side loses both rights the first time its king moves or it castles.
Rook moves are not tracked, so rights can be retained incorrectly after a
rook move; rights that a king move visibly gave up are never reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from chesswatch.core.enums import CastlingRights, Color
from chesswatch.page.interfaces import AnnotatedMove

_DECORATION_RE = re.compile(r"[+#?!=]")
_CASTLE_NOTATIONS = frozenset({"O-O", "O-O-O", "0-0", "0-0-0"})

_SIDE_RIGHTS = {
    Color.WHITE: CastlingRights.WHITE_BOTH,
    Color.BLACK: CastlingRights.BLACK_BOTH,
}


def strip_decorations(san: str) -> str:
    """Remove check, mate, annotation and promotion marks from a SAN token."""
    return _DECORATION_RE.sub("", san.strip())


def is_king_move(san: str) -> bool:
    cleaned = strip_decorations(san)
    return cleaned.startswith("K") or cleaned in _CASTLE_NOTATIONS


def infer_castling_rights(moves: Iterable[AnnotatedMove]) -> CastlingRights:
    """Castling rights still plausible after *moves*."""
    rights = CastlingRights.ALL
    for move in moves:
        if is_king_move(move.san):
            rights &= ~_SIDE_RIGHTS[move.color]
    return rights
