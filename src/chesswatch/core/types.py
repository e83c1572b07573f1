"""Square type alias and coordinate helpers.

Board layout (Little-Endian Rank-File mapping):
    a1=0, b1=1, ..., h1=7
    ...
    a8=56, b8=57, ..., h8=63

Page parsers work in *grid* coordinates instead: row 0 is rank 8 (the top
of a board seen from White), column 0 is file a.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int  # 0–63


def make_square(file: int, rank: int) -> Square:
    """Create square from file (0–7) and rank (0–7)."""
    return rank * 8 + file


def grid_to_square(row: int, col: int) -> Square:
    """Map grid coordinates (row 0 = rank 8) to a square index."""
    if not (0 <= row < 8 and 0 <= col < 8):
        raise ValueError(f"Grid coordinates out of range: ({row}, {col})")
    return make_square(col, 7 - row)
