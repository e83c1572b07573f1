"""Site adapter interface.

Each supported front-end renders the board differently. The tracker picks
one concrete adapter per page (see :func:`chesswatch.page.sites.detect_site`)
and talks to it only through this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chesswatch.core.enums import Color

if TYPE_CHECKING:
    from chesswatch.core.board import Board
    from chesswatch.page.dom import DomElement, PageDocument


@dataclass(frozen=True, slots=True)
class AnnotatedMove:
    """A move-list entry as displayed by the site, tagged with its mover."""

    san: str
    color: Color


class SiteAdapter(ABC):
    """Visual/DOM extraction capability for one chess site."""

    name: str = ""

    @abstractmethod
    def find_board(self, document: PageDocument) -> DomElement | None:
        """Locate the board container, or ``None`` if not rendered."""

    @abstractmethod
    def extract_board(self, document: PageDocument, *, flipped: bool) -> Board | None:
        """Rebuild piece placement from rendered piece elements.

        Returns ``None`` when there is no board container. Pieces that
        cannot be parsed are skipped.
        """

    @abstractmethod
    def extract_orientation_hint(self, document: PageDocument) -> bool | None:
        """``True`` if the board is drawn from Black's side, ``None`` if unknown."""

    @abstractmethod
    def extract_active_color_hint(
        self,
        document: PageDocument,
        *,
        flipped: bool,
        player_color: Color | None,
    ) -> Color | None:
        """Best guess of the side to move from clocks or the move list."""

    @abstractmethod
    def extract_move_list(self, document: PageDocument) -> list[AnnotatedMove]:
        """Visible move annotations in game order."""


def color_from_clock(
    *,
    is_bottom_clock: bool,
    flipped: bool,
    player_color: Color | None,
) -> Color:
    """Side to move given which clock (top / bottom) is running.

    A declared player color means that side sits at the bottom of the
    screen, whatever the orientation detection says.
    """
    if player_color is not None:
        bottom = player_color
    else:
        bottom = Color.BLACK if flipped else Color.WHITE
    return bottom if is_bottom_clock else bottom.opposite


def color_from_move_count(count: int) -> Color:
    return Color.WHITE if count % 2 == 0 else Color.BLACK
