"""Build :class:`PageDocument` snapshots from saved page markup."""

from __future__ import annotations

from html.parser import HTMLParser
from pathlib import Path

from chesswatch.page.dom import DomElement, PageDocument

_VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = DomElement("#document")
        self._stack: list[DomElement] = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = DomElement(tag, {name: value or "" for name, value in attrs})
        self._stack[-1].append(element)
        if tag not in _VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = DomElement(tag, {name: value or "" for name, value in attrs})
        self._stack[-1].append(element)

    def handle_endtag(self, tag: str) -> None:
        # Tolerate unbalanced markup: close up to the nearest matching tag.
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        self._stack[-1].append(data)


def parse_html(markup: str, *, url: str, hidden: bool = False) -> PageDocument:
    """Parse *markup* into a page snapshot attributed to *url*."""
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return PageDocument(url=url, root=builder.root, hidden=hidden)


def load_page(path: str | Path, *, url: str) -> PageDocument:
    """Read a saved page from disk."""
    return parse_html(Path(path).read_text(encoding="utf-8"), url=url)
