"""Tests for tracker settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chesswatch.core.enums import Color
from chesswatch.settings import DEFAULT_SERVER_URL, SideOverride, TrackerSettings, load_settings


class TestDefaults:
    def test_timing_defaults(self) -> None:
        settings = TrackerSettings()
        assert settings.request_timeout_ms == 5000
        assert settings.stale_window_ms == 2000
        assert settings.debounce_ms == 150
        assert settings.poll_interval_ms == 2000
        assert settings.health_timeout_ms == 3000

    def test_backend_defaults(self) -> None:
        settings = TrackerSettings()
        assert settings.server_url == DEFAULT_SERVER_URL
        assert settings.search_depth == 15
        assert settings.health_url == "http://localhost:5000/health"

    def test_side_override_colors(self) -> None:
        assert SideOverride.AUTO.color is None
        assert SideOverride.WHITE.color == Color.WHITE
        assert SideOverride.BLACK.color == Color.BLACK


class TestUpdated:
    def test_panel_keys(self) -> None:
        settings = TrackerSettings().updated(
            {"enabled": False, "orientation": "black", "depth": 20, "playerColor": "white"}
        )
        assert settings.enabled is False
        assert settings.orientation is SideOverride.BLACK
        assert settings.search_depth == 20
        assert settings.player_color is SideOverride.WHITE

    def test_field_names_and_numeric_strings(self) -> None:
        settings = TrackerSettings().updated({"debounce_ms": "50", "stale_window_ms": 0})
        assert settings.debounce_ms == 50
        assert settings.stale_window_ms == 0

    def test_unknown_keys_are_ignored(self) -> None:
        assert TrackerSettings().updated({"theme": "dark"}) == TrackerSettings()

    def test_original_is_unchanged(self) -> None:
        original = TrackerSettings()
        original.updated({"depth": 3})
        assert original.search_depth == 15

    def test_server_url_moves_health_url(self) -> None:
        settings = TrackerSettings().updated({"serverUrl": "https://engine.example:8443/api/analyze"})
        assert settings.health_url == "https://engine.example:8443/health"

    @pytest.mark.parametrize(
        "changes",
        [
            {"depth": 0},
            {"depth": 100},
            {"depth": "deep"},
            {"depth": 2.5},
            {"depth": True},
            {"enabled": "yes"},
            {"orientation": "sideways"},
            {"playerColor": None},
            {"serverUrl": "ftp://engine.example/analyze"},
            {"debounce_ms": -1},
        ],
    )
    def test_invalid_values(self, changes: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            TrackerSettings().updated(changes)


class TestLoadSettings:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"depth": 12, "orientation": "white"}), encoding="utf-8")
        settings = load_settings(path)
        assert settings.search_depth == 12
        assert settings.orientation is SideOverride.WHITE

    def test_load_on_top_of_base(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"enabled": False}), encoding="utf-8")
        settings = load_settings(path, base=TrackerSettings(search_depth=7))
        assert settings.enabled is False
        assert settings.search_depth == 7

    def test_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(path)
