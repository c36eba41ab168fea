"""Tests for shared models."""

from __future__ import annotations

import dataclasses

import pytest

from logtint.models import (
    HEURISTIC_PRIORITY,
    HIGHLIGHT_PRIORITY,
    STRUCTURE_PRIORITY,
    Category,
    LineEvent,
    MatchRange,
    SourceErrorEvent,
    ViewerSettings,
)


class TestCategory:
    def test_values(self) -> None:
        assert Category.CUSTOM_FILTER_HIGHLIGHT == "custom-filter-highlight"
        assert Category("json-key") is Category.JSON_KEY

    def test_priority_order(self) -> None:
        assert HEURISTIC_PRIORITY < STRUCTURE_PRIORITY < HIGHLIGHT_PRIORITY


class TestMatchRange:
    def test_frozen(self) -> None:
        r = MatchRange(0, 3, Category.ERROR, HEURISTIC_PRIORITY)
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.start = 1  # type: ignore[misc]

    def test_equality(self) -> None:
        assert MatchRange(0, 3, Category.INFO, 10) == MatchRange(0, 3, Category.INFO, 10)


class TestViewerSettings:
    def test_defaults(self) -> None:
        settings = ViewerSettings()
        assert settings.hide_query == ""
        assert settings.filter_query == ""
        assert settings.highlight_query == ""
        assert settings.wrap_lines is True
        assert settings.heuristic_enabled is True
        assert settings.json_enabled is True

    def test_roundtrip_dump(self) -> None:
        settings = ViewerSettings(filter_query="error OR warn", json_enabled=False)
        assert ViewerSettings.model_validate(settings.model_dump()) == settings


class TestSourceEvents:
    def test_line_event(self) -> None:
        assert LineEvent(text="hello").text == "hello"

    def test_error_event(self) -> None:
        assert SourceErrorEvent(message="pipe closed").message == "pipe closed"
