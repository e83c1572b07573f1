"""Tests for structured/visual position fusion."""

from __future__ import annotations

from collections.abc import Callable

from chesswatch.core.board import Board
from chesswatch.core.enums import CastlingRights, Color, SignalSource
from chesswatch.core.exchange import STARTING_EXCHANGE, board_from_placement
from chesswatch.core.snapshot import FusionRecord, ProbePayload
from chesswatch.page.dom import PageDocument
from chesswatch.page.markup import parse_html
from chesswatch.settings import TrackerSettings
from chesswatch.tracking.context import TrackerContext
from chesswatch.tracking.resolver import PositionResolver

PageFactory = Callable[..., PageDocument]

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"
AFTER_E4_E5 = "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR"


class _FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _context(page: PageDocument | None) -> TrackerContext:
    context = TrackerContext(settings=TrackerSettings(), clock=_FakeClock())
    if page is not None:
        context.attach_document(page)
    return context


def _push_structured(context: TrackerContext, position: str, orientation: str = "white") -> None:
    context.structured = FusionRecord(
        SignalSource.STRUCTURED, context.now(), ProbePayload(position, orientation)
    )


class TestStructuredPath:
    def test_full_payload_is_trusted(self, chesscom_page: PageFactory) -> None:
        context = _context(chesscom_page(Board.initial()))
        _push_structured(context, f"{AFTER_E4} b Kk - 0 1")
        snapshot = PositionResolver().resolve(context)
        assert snapshot is not None
        assert snapshot.source == SignalSource.STRUCTURED
        assert snapshot.encoded == f"{AFTER_E4} b Kk - 0 1"

    def test_start_alias(self) -> None:
        context = _context(parse_html("<p></p>", url="https://lichess.org/x"))
        _push_structured(context, "start")
        snapshot = PositionResolver().resolve(context)
        assert snapshot is not None
        assert snapshot.encoded == STARTING_EXCHANGE

    def test_placement_only_uses_turn_and_castling_inference(self, lichess_page: PageFactory) -> None:
        page = lichess_page(board_from_placement(AFTER_E4_E5), moves=["e4", "e5", "Ke2"])
        context = _context(page)
        _push_structured(context, AFTER_E4_E5)
        snapshot = PositionResolver().resolve(context)
        assert snapshot is not None
        assert snapshot.source == SignalSource.STRUCTURED
        # Seeded from kwdb parity (3 moves shown -> Black to move).
        assert snapshot.side_to_move == Color.BLACK
        assert snapshot.castling == CastlingRights.BLACK_BOTH

    def test_undecodable_payload_falls_back_to_page(self, chesscom_page: PageFactory) -> None:
        context = _context(chesscom_page(board_from_placement(AFTER_E4)))
        _push_structured(context, "not a position")
        snapshot = PositionResolver().resolve(context)
        assert snapshot is not None
        assert snapshot.source == SignalSource.VISUAL
        assert snapshot.placement_key == AFTER_E4

    def test_stale_record_falls_back_to_page(self, chesscom_page: PageFactory) -> None:
        context = _context(chesscom_page(board_from_placement(AFTER_E4)))
        _push_structured(context, "start")
        context.clock.now += 2.0  # type: ignore[attr-defined]
        snapshot = PositionResolver().resolve(context)
        assert snapshot is not None
        assert snapshot.source == SignalSource.VISUAL

    def test_structured_turn_carries_into_visual_fallback(self, chesscom_page: PageFactory) -> None:
        context = _context(chesscom_page(board_from_placement(AFTER_E4), active_clock="bottom"))
        resolver = PositionResolver()
        _push_structured(context, f"{AFTER_E4} b KQkq - 0 1")
        assert resolver.resolve(context).side_to_move == Color.BLACK  # type: ignore[union-attr]

        context.clock.now += 5.0  # type: ignore[attr-defined]
        snapshot = resolver.resolve(context)
        assert snapshot is not None
        assert snapshot.source == SignalSource.VISUAL
        assert snapshot.side_to_move == Color.BLACK


class TestVisualPath:
    def test_visual_snapshot(self, chesscom_page: PageFactory) -> None:
        page = chesscom_page(board_from_placement(AFTER_E4), active_clock="top", moves=["e4"])
        snapshot = PositionResolver().resolve(_context(page))
        assert snapshot is not None
        assert snapshot.encoded == f"{AFTER_E4} b KQkq - 0 1"

    def test_unsupported_site(self) -> None:
        page = parse_html('<div class="board"><div class="piece wp square-52"></div></div>', url="https://example.com/")
        assert PositionResolver().resolve(_context(page)) is None

    def test_no_page(self) -> None:
        assert PositionResolver().resolve(_context(None)) is None

    def test_no_board_container(self) -> None:
        page = parse_html("<main>lobby</main>", url="https://www.chess.com/home")
        assert PositionResolver().resolve(_context(page)) is None

    def test_board_without_pieces(self) -> None:
        page = parse_html('<wc-chess-board class="board"></wc-chess-board>', url="https://www.chess.com/play")
        context = _context(page)
        assert PositionResolver().resolve(context) is None
        assert context.turn.last_board_key is None

    def test_board_detected(self, lichess_page: PageFactory) -> None:
        resolver = PositionResolver()
        assert resolver.board_detected(_context(lichess_page(Board.initial())))
        assert not resolver.board_detected(_context(parse_html("<p></p>", url="https://lichess.org/")))
        assert not resolver.board_detected(_context(None))
