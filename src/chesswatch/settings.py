"""Tracker configuration.

The settings panel (an external collaborator) owns persistence; it pushes
plain mappings such as ``{"orientation": "black", "depth": 18}`` which are
folded into a :class:`TrackerSettings` via :meth:`TrackerSettings.updated`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import StrEnum
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from chesswatch.core.enums import Color

DEFAULT_SERVER_URL = "http://localhost:5000/analyze"


class SideOverride(StrEnum):
    """User override for a color-valued setting."""

    AUTO = "auto"
    WHITE = "white"
    BLACK = "black"

    @property
    def color(self) -> Color | None:
        if self is SideOverride.WHITE:
            return Color.WHITE
        if self is SideOverride.BLACK:
            return Color.BLACK
        return None


# ── Settings data class ──────────────────────────────────────────────────────


@dataclass
class TrackerSettings:
    """All user-configurable settings."""

    enabled: bool = True

    # Board
    orientation: SideOverride = SideOverride.AUTO
    player_color: SideOverride = SideOverride.AUTO

    # Backend
    search_depth: int = 15
    server_url: str = DEFAULT_SERVER_URL
    request_timeout_ms: int = 5000
    health_timeout_ms: int = 3000

    # Timing thresholds
    poll_interval_ms: int = 2000
    stale_window_ms: int = 2000
    debounce_ms: int = 150

    @property
    def health_url(self) -> str:
        """``/health`` endpoint on the same host as :attr:`server_url`."""
        parts = urlsplit(self.server_url)
        return urlunsplit((parts.scheme, parts.netloc, "/health", "", ""))

    def updated(self, changes: Mapping[str, object]) -> TrackerSettings:
        """Return a copy with *changes* applied.

        Accepts the settings-panel keys (``enabled``, ``orientation``,
        ``depth``, ``playerColor``, ``serverUrl``) as well as field names.
        Unknown keys are ignored; invalid values raise ``ValueError``.
        """
        values: dict[str, object] = {}
        for key, raw in changes.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in _FIELD_NAMES:
                continue
            values[name] = _coerce(name, raw)
        return replace(self, **values)


_FIELD_NAMES = frozenset(f.name for f in fields(TrackerSettings))
_KEY_ALIASES = {
    "depth": "search_depth",
    "playerColor": "player_color",
    "serverUrl": "server_url",
}
_INTERVAL_FIELDS = frozenset(
    {
        "request_timeout_ms",
        "health_timeout_ms",
        "poll_interval_ms",
        "stale_window_ms",
        "debounce_ms",
    }
)


def _coerce(name: str, raw: object) -> object:
    if name == "enabled":
        if not isinstance(raw, bool):
            raise ValueError(f"Invalid enabled flag: {raw!r}")
        return raw
    if name in ("orientation", "player_color"):
        try:
            return SideOverride(str(raw))
        except ValueError:
            raise ValueError(f"Invalid {name} override: {raw!r}") from None
    if name == "server_url":
        url = str(raw)
        if urlsplit(url).scheme not in ("http", "https"):
            raise ValueError(f"Invalid server URL: {raw!r}")
        return url
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValueError(f"Invalid {name}: {raw!r}")
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Invalid {name}: {raw!r}") from None
    if name == "search_depth" and not (1 <= value <= 99):
        raise ValueError(f"Search depth out of range: {value}")
    if name in _INTERVAL_FIELDS and value < 0:
        raise ValueError(f"Invalid {name}: {value}")
    return value


def load_settings(path: str | Path, base: TrackerSettings | None = None) -> TrackerSettings:
    """Read a JSON settings mapping from *path* on top of *base*."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object: {path}")
    return (base or TrackerSettings()).updated(data)
