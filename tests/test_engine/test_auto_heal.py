"""Tests for closing and auto-healing paths."""

from __future__ import annotations

import pytest

from vectoredit.engine.simplify import INTENSITY_PRESETS, auto_heal_path, close_path, is_path_closed
from vectoredit.models.svg_document import Close, Point
from tests.conftest import SQUARE_D, make_path


NEARLY_CLOSED_D = "M 0 0 L 100 0 L 100 100 L 0 100 L 0 0.1"
OPEN_D = "M 0 0 L 100 0 L 100 100 L 0 100 L 0 20"


class TestClosing:
    def test_is_path_closed(self):
        assert is_path_closed(make_path(SQUARE_D))
        assert is_path_closed(make_path("M 0 0 L 10 0 L 10 10 L 0.001 0"))
        assert not is_path_closed(make_path(NEARLY_CLOSED_D))
        assert not is_path_closed(make_path(""))

    def test_close_path_appends_close(self):
        closed = close_path(make_path(OPEN_D))
        last = closed.segments[-1]
        assert last == Close(Point(0, 20), Point(0, 0))

    def test_close_path_leaves_closed_paths(self):
        path = make_path(SQUARE_D)
        assert close_path(path) is path


class TestAutoHeal:
    def test_presets(self):
        assert list(INTENSITY_PRESETS) == ["light", "medium", "strong", "extreme"]
        assert INTENSITY_PRESETS["medium"].tolerance_pct == 0.15
        assert INTENSITY_PRESETS["extreme"].corner_angle == 60

    def test_small_gap_is_closed(self):
        healed = auto_heal_path(make_path(NEARLY_CLOSED_D), "medium")
        assert isinstance(healed.segments[-1], Close)
        assert is_path_closed(healed)
        assert len(healed.segments) == 6

    def test_large_gap_stays_open(self):
        healed = auto_heal_path(make_path(OPEN_D), "medium")
        assert not isinstance(healed.segments[-1], Close)

    def test_traced_circle_is_reduced(self, circle_polygon_path):
        healed = auto_heal_path(circle_polygon_path, "strong")
        assert len(healed.segments) < 20

    def test_unknown_intensity(self, square_path):
        with pytest.raises(ValueError):
            auto_heal_path(square_path, "nuclear")
