"""Tests for arc-length measurement."""

from __future__ import annotations

import math

import pytest

from vectoredit.errors import DegenerateGeometry, InsufficientInput
from vectoredit.models.svg_document import Path, Point
from vectoredit.svg.measure import (
    normal_at_length,
    path_length,
    point_at_length,
    sample_path,
    tangent_at_length,
)
from vectoredit.svg.parser import parse_svg
from tests.conftest import CIRCLE_SVG, make_path


ELBOW = make_path("M 0 0 L 30 0 L 30 40")


def test_polyline_length():
    assert path_length(ELBOW) == pytest.approx(70)


def test_circle_length():
    circle = parse_svg(CIRCLE_SVG).paths[0]
    assert path_length(circle) == pytest.approx(2 * math.pi * 10, rel=1e-3)


def test_point_at_length():
    p = point_at_length(ELBOW, 35)
    assert p.x == pytest.approx(30)
    assert p.y == pytest.approx(5, abs=1e-4)


def test_point_at_length_is_clamped():
    assert point_at_length(ELBOW, -5) == Point(0, 0)
    end = point_at_length(ELBOW, 500)
    assert (end.x, end.y) == pytest.approx((30, 40))


def test_tangent_and_normal():
    assert tangent_at_length(ELBOW, 10) == pytest.approx((1, 0))
    assert normal_at_length(ELBOW, 10) == pytest.approx((0, 1))
    assert tangent_at_length(ELBOW, 50) == pytest.approx((0, 1))


def test_sample_path():
    pts = sample_path(make_path("M 0 0 L 30 0"), 3)
    assert [c for p in pts for c in (p.x, p.y)] == pytest.approx([0, 0, 15, 0, 30, 0])


def test_sample_path_needs_two_points():
    with pytest.raises(ValueError):
        sample_path(ELBOW, 1)


def test_transform_is_measured_baked():
    assert path_length(make_path("M 0 0 L 10 0", transform="scale(3)")) == pytest.approx(30)


def test_empty_paths():
    with pytest.raises(InsufficientInput):
        point_at_length(Path(id="empty"), 1)
    lonely = make_path("M 4 5")
    assert path_length(lonely) == 0.0
    assert point_at_length(lonely, 3) == Point(4, 5)
    with pytest.raises(DegenerateGeometry):
        tangent_at_length(lonely, 0)
