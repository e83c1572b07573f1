"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

import pytest

from chesswatch.core.board import Board
from chesswatch.core.enums import Color
from chesswatch.page.dom import PageDocument
from chesswatch.page.markup import parse_html

CHESSCOM_URL = "https://www.chess.com/game/live/123456"
LICHESS_URL = "https://lichess.org/AbCdEfGh"

_BOARD_PX = 400
_SQUARE_PX = _BOARD_PX // 8


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for timer and network tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


# ── Page builders ───────────────────────────────────────────────────────────


def build_chesscom_page(
    board: Board,
    *,
    flipped: bool = False,
    active_clock: str | None = None,
    moves: Iterable[str] = (),
    hidden: bool = False,
    url: str = CHESSCOM_URL,
) -> PageDocument:
    """Markup in the shape chess.com renders: square-FR piece classes."""
    pieces = []
    for sq in range(64):
        piece = board[sq]
        if piece is None:
            continue
        rank, file = divmod(sq, 8)
        color = "w" if piece.color == Color.WHITE else "b"
        code = f"{color}{str(piece).lower()}"
        pieces.append(
            f'<div class="piece {code} square-{file + 1}{rank + 1}"></div>'
        )

    board_attrs = 'class="board flipped" data-flipped="true"' if flipped else 'class="board"'
    clocks = []
    for position, top in (("top", 40), ("bottom", 520)):
        turn = " clock-player-turn" if active_clock == position else ""
        clocks.append(
            f'<div class="clock-component clock-{position}{turn}" '
            f'style="left: 420px; top: {top}px; width: 100px; height: 30px">5:00</div>'
        )

    move_nodes = []
    for index, san in enumerate(moves):
        side = "white" if index % 2 == 0 else "black"
        move_nodes.append(
            f'<span class="move-text-component move-text-component--{side}">{san}</span>'
        )

    markup = (
        "<html><body>"
        f'<wc-chess-board {board_attrs} style="left: 0px; top: 100px; '
        f'width: {_BOARD_PX}px; height: {_BOARD_PX}px">'
        + "".join(pieces)
        + "</wc-chess-board>"
        + "".join(clocks)
        + '<div class="move-list">'
        + "".join(move_nodes)
        + "</div></body></html>"
    )
    return parse_html(markup, url=url, hidden=hidden)


def build_lichess_page(
    board: Board,
    *,
    flipped: bool = False,
    turn_clock: str | None = None,
    moves: Iterable[str] = (),
    hidden: bool = False,
    url: str = LICHESS_URL,
) -> PageDocument:
    """Markup in the shape lichess renders: translated ``piece`` elements."""
    pieces = []
    for sq in range(64):
        piece = board[sq]
        if piece is None:
            continue
        rank, col = divmod(sq, 8)
        row = 7 - rank
        if flipped:
            col, row = 7 - col, 7 - row
        pieces.append(
            f'<piece class="{piece.color.name.lower()} {piece.piece_type.name.lower()}" '
            f'style="transform: translate({col * _SQUARE_PX}px, {row * _SQUARE_PX}px);">'
            "</piece>"
        )

    orientation = "orientation-black" if flipped else "orientation-white"
    clocks = []
    for position in ("top", "bottom"):
        turn = " rclock-turn" if turn_clock == position else ""
        clocks.append(f'<div class="rclock rclock-{position}{turn}">3:00</div>')

    markup = (
        "<html><body>"
        f'<div class="cg-wrap {orientation}"><cg-container>'
        f'<cg-board style="width: {_BOARD_PX}px; height: {_BOARD_PX}px">'
        + "".join(pieces)
        + "</cg-board></cg-container></div>"
        + "".join(clocks)
        + "<l4x>"
        + "".join(f"<kwdb>{san}</kwdb>" for san in moves)
        + "</l4x></body></html>"
    )
    return parse_html(markup, url=url, hidden=hidden)


@pytest.fixture
def chesscom_page() -> Callable[..., PageDocument]:
    return build_chesscom_page


@pytest.fixture
def lichess_page() -> Callable[..., PageDocument]:
    return build_lichess_page
