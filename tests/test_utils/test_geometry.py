"""Tests for geometry and math helpers."""

import math

import numpy as np
import pytest

from vectoredit.errors import DegenerateGeometry
from vectoredit.models.svg_document import CubicBezier, LineTo, Point
from vectoredit.utils.geometry import (
    bbox,
    bbox_diagonal,
    cubic_point,
    distance,
    evaluate_segment,
    perpendicular_distance,
    segment_distances,
    split_cubic,
    triangle_areas,
    unit_vector,
)
from vectoredit.utils.math_helpers import (
    format_number,
    rotate_point,
    round_coord,
    signed_angle_deg,
    translate_point,
    turn_angle_deg,
)


def test_distance():
    assert distance(Point(0, 0), Point(3, 4)) == 5.0


def test_unit_vector():
    assert unit_vector(0, 2) == (0.0, 1.0)


def test_unit_vector_zero_raises():
    with pytest.raises(DegenerateGeometry):
        unit_vector(0.0, 0.0)


def test_split_cubic_reproduces_curve():
    p0, p1, p2, p3 = Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)
    left, right = split_cubic(p0, p1, p2, p3, 0.3)
    assert left[0] == p0
    assert right[3] == p3
    assert left[3] == right[0]
    for t in (0.1, 0.2, 0.3):
        a = cubic_point(*left, t / 0.3)
        b = cubic_point(p0, p1, p2, p3, t)
        assert distance(a, b) < 1e-9
    for t in (0.5, 0.8):
        a = cubic_point(*right, (t - 0.3) / 0.7)
        b = cubic_point(p0, p1, p2, p3, t)
        assert distance(a, b) < 1e-9


def test_perpendicular_distance_clamps_to_segment():
    a, b = Point(0, 0), Point(10, 0)
    assert perpendicular_distance(Point(5, 3), a, b) == pytest.approx(3.0)
    assert perpendicular_distance(Point(13, 4), a, b) == pytest.approx(5.0)


def test_segment_distances_vectorized():
    pts = np.array([[5.0, 3.0], [13.0, 4.0]])
    d = segment_distances(pts, np.array([0.0, 0.0]), np.array([10.0, 0.0]))
    assert d == pytest.approx([3.0, 5.0])


def test_bbox_and_diagonal():
    pts = np.array([[0.0, 0.0], [3.0, 1.0], [1.0, 4.0]])
    assert bbox(pts) == (0.0, 0.0, 3.0, 4.0)
    assert bbox_diagonal(pts) == pytest.approx(5.0)


def test_bbox_diagonal_fallback():
    assert bbox_diagonal(np.empty((0, 2))) == 1.0
    assert bbox_diagonal(np.array([[2.0, 2.0]])) == 1.0


def test_triangle_areas():
    pts = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0], [3.0, 0.0]])
    assert triangle_areas(pts) == pytest.approx([1.0, 0.5])


def test_evaluate_segment():
    line = LineTo(Point(0, 0), Point(10, 0))
    assert evaluate_segment(line, 0.25) == Point(2.5, 0)
    cubic = CubicBezier(Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0))
    assert evaluate_segment(cubic, 0.5) == Point(5, 7.5)


class TestMathHelpers:
    def test_turn_angle(self):
        assert turn_angle_deg((1, 0), (0, 1)) == pytest.approx(90.0)
        assert turn_angle_deg((1, 0), (1, 0)) == pytest.approx(0.0)
        # Rounding past |1| must not break acos
        assert turn_angle_deg((1, 0), (1.0000000001, 0)) == 0.0

    def test_signed_angle(self):
        assert signed_angle_deg((1, 0), (0, 1)) == pytest.approx(90.0)
        assert signed_angle_deg((1, 0), (0, -1)) == pytest.approx(-90.0)

    def test_round_coord(self):
        assert round_coord(0.12345) == 0.123
        assert round_coord(1.0006) == 1.001
        assert round_coord(float("nan")) == 0.0
        assert round_coord(float("inf")) == 0.0

    def test_format_number(self):
        assert format_number(2.0) == "2"
        assert format_number(0.5) == "0.5"
        assert format_number(-0.0) == "0"
        assert format_number(-1.25) == "-1.25"

    def test_rotate_point(self):
        p = rotate_point(Point(20, 10), 90, Point(10, 10))
        assert p.x == pytest.approx(10)
        assert p.y == pytest.approx(20)

    def test_translate_point(self):
        assert translate_point(Point(1, 2), 3, -4) == Point(4, -2)


def test_rotate_about_origin_by_default():
    p = rotate_point(Point(1, 0), 180)
    assert p.x == pytest.approx(-1)
    assert abs(p.y) < 1e-12
    assert math.isfinite(p.y)
