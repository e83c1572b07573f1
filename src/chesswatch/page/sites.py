"""Site detection: choose one adapter per page."""

from __future__ import annotations

from collections.abc import Callable

from chesswatch.page.chesscom import ChessComAdapter
from chesswatch.page.interfaces import SiteAdapter
from chesswatch.page.lichess import LichessAdapter

_SITE_FACTORIES: tuple[tuple[str, Callable[[], SiteAdapter]], ...] = (
    ("chess.com", ChessComAdapter),
    ("lichess.org", LichessAdapter),
)


def detect_site(hostname: str) -> SiteAdapter | None:
    """Return the adapter for *hostname*, or ``None`` for unsupported sites."""
    host = hostname.lower()
    for domain, factory in _SITE_FACTORIES:
        if host == domain or host.endswith("." + domain):
            return factory()
    return None


def supported_domains() -> tuple[str, ...]:
    return tuple(domain for domain, _ in _SITE_FACTORIES)
