"""Page snapshots and per-site board extraction."""

from chesswatch.page.chesscom import ChessComAdapter
from chesswatch.page.dom import DomElement, PageDocument
from chesswatch.page.interfaces import AnnotatedMove, SiteAdapter
from chesswatch.page.lichess import LichessAdapter
from chesswatch.page.markup import load_page, parse_html
from chesswatch.page.sites import detect_site, supported_domains

__all__ = [
    "AnnotatedMove",
    "ChessComAdapter",
    "DomElement",
    "LichessAdapter",
    "PageDocument",
    "SiteAdapter",
    "detect_site",
    "load_page",
    "parse_html",
    "supported_domains",
]
