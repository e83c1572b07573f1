"""Minimal element tree for page snapshots pushed by the page bridge.

Site adapters only need class lists, a few attributes, inline styles, text
and element geometry, queried through a small subset of CSS selectors:
type and class selectors, attribute selectors (``[a]``, ``[a=v]``,
``[a*=v]``, ``[a^=v]``), the descendant combinator and selector lists.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from PyQt6.QtCore import QRectF

_CLASS_RE = re.compile(r"\.([\w-]+)")
_ATTR_RE = re.compile(r"""\[\s*([\w-]+)\s*(?:([*^$]?=)\s*["']?([^"'\]]*)["']?\s*)?\]""")
_TAG_RE = re.compile(r"^([a-zA-Z][\w-]*|\*)")
_PX_RE = re.compile(r"^(-?\d+(?:\.\d+)?)(?:px)?$")


@dataclass(eq=False)
class DomElement:
    """One element of a page snapshot."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    rect: QRectF | None = None
    parent: DomElement | None = field(default=None, repr=False)
    _contents: list[DomElement | str] = field(default_factory=list, repr=False)

    # ── Tree building ───────────────────────────────────────────────────

    def append(self, child: DomElement | str) -> None:
        if isinstance(child, DomElement):
            child.parent = self
        self._contents.append(child)

    @property
    def children(self) -> list[DomElement]:
        return [c for c in self._contents if isinstance(c, DomElement)]

    def iter_descendants(self) -> Iterator[DomElement]:
        """Depth-first, document-order walk (excluding *self*)."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    # ── Attributes ──────────────────────────────────────────────────────

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(self.attributes.get("class", "").split())

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def style_properties(self) -> dict[str, str]:
        """Inline ``style`` declarations, lower-cased property names."""
        props: dict[str, str] = {}
        for decl in self.attributes.get("style", "").split(";"):
            name, sep, value = decl.partition(":")
            if sep and name.strip():
                props[name.strip().lower()] = value.strip()
        return props

    def text_content(self) -> str:
        return "".join(
            c if isinstance(c, str) else c.text_content() for c in self._contents
        )

    def bounding_rect(self) -> QRectF:
        """Element geometry: explicit rect, else inline left/top/width/height."""
        if self.rect is not None:
            return QRectF(self.rect)
        props = self.style_properties()
        values = [_px(props.get(k)) for k in ("left", "top", "width", "height")]
        if all(v is None for v in values):
            return QRectF()
        left, top, width, height = (v or 0.0 for v in values)
        return QRectF(left, top, width, height)

    # ── Queries ─────────────────────────────────────────────────────────

    def select(self, selector: str) -> list[DomElement]:
        """All descendants matching *selector*, in document order."""
        chains = _parse_selector_list(selector)
        return [
            el
            for el in self.iter_descendants()
            if any(_matches_chain(el, chain, self) for chain in chains)
        ]

    def select_one(self, selector: str) -> DomElement | None:
        chains = _parse_selector_list(selector)
        for el in self.iter_descendants():
            if any(_matches_chain(el, chain, self) for chain in chains):
                return el
        return None


@dataclass(eq=False)
class PageDocument:
    """A snapshot of the host page: its URL, element tree and visibility."""

    url: str
    root: DomElement
    hidden: bool = False

    @property
    def hostname(self) -> str:
        return urlsplit(self.url).hostname or ""

    @property
    def origin(self) -> str:
        parts = urlsplit(self.url)
        return f"{parts.scheme}://{parts.netloc}"

    def select(self, selector: str) -> list[DomElement]:
        return self.root.select(selector)

    def select_one(self, selector: str) -> DomElement | None:
        return self.root.select_one(selector)


# ── Selector matching ───────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class _Compound:
    tag: str | None
    classes: tuple[str, ...]
    attrs: tuple[tuple[str, str | None, str], ...]

    def matches(self, el: DomElement) -> bool:
        if self.tag is not None and self.tag != "*" and el.tag != self.tag:
            return False
        el_classes = el.classes
        if any(cls not in el_classes for cls in self.classes):
            return False
        for name, op, value in self.attrs:
            actual = el.attributes.get(name)
            if actual is None:
                return False
            if op == "=" and actual != value:
                return False
            if op == "*=" and value not in actual:
                return False
            if op == "^=" and not actual.startswith(value):
                return False
            if op == "$=" and not actual.endswith(value):
                return False
        return True


def _parse_compound(text: str) -> _Compound:
    tag_match = _TAG_RE.match(text)
    tag = tag_match.group(1).lower() if tag_match else None
    rest = text[tag_match.end() :] if tag_match else text
    attrs = tuple((m.group(1), m.group(2), m.group(3) or "") for m in _ATTR_RE.finditer(rest))
    classes = tuple(_CLASS_RE.findall(_ATTR_RE.sub("", rest)))
    if tag is None and not classes and not attrs:
        raise ValueError(f"Unsupported selector: {text!r}")
    return _Compound(tag, classes, attrs)


def _parse_selector_list(selector: str) -> list[tuple[_Compound, ...]]:
    chains: list[tuple[_Compound, ...]] = []
    for group in selector.split(","):
        parts = group.split()
        if not parts:
            raise ValueError(f"Empty selector in {selector!r}")
        chains.append(tuple(_parse_compound(p) for p in parts))
    return chains


def _matches_chain(el: DomElement, chain: tuple[_Compound, ...], scope: DomElement) -> bool:
    if not chain[-1].matches(el):
        return False
    ancestor = el.parent
    for compound in reversed(chain[:-1]):
        while ancestor is not None and ancestor is not scope and not compound.matches(ancestor):
            ancestor = ancestor.parent
        if ancestor is None or ancestor is scope:
            return False
        ancestor = ancestor.parent
    return True


def _px(value: str | None) -> float | None:
    if not value:
        return None
    match = _PX_RE.match(value.strip())
    return float(match.group(1)) if match else None
