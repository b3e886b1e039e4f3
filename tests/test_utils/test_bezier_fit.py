"""Tests for error-bounded cubic fitting."""

import math

import numpy as np
import pytest

from vectoredit.errors import CurveFitFailure
from vectoredit.models.svg_document import Point
from vectoredit.utils.bezier_fit import fit_cubics
from vectoredit.utils.geometry import cubic_point


def _arc(n, r=10.0, start=0.0, sweep=math.pi / 2):
    return np.array(
        [[r * math.cos(start + sweep * i / (n - 1)), r * math.sin(start + sweep * i / (n - 1))] for i in range(n)]
    )


def _dense(curves, per_curve=400):
    pts = []
    for c in curves:
        for i in range(per_curve + 1):
            p = cubic_point(c.start, c.c1, c.c2, c.end, i / per_curve)
            pts.append((p.x, p.y))
    return np.array(pts)


def _max_deviation(points, curves):
    dense = _dense(curves)
    return max(float(np.min(np.hypot(*(dense - p).T))) for p in points)


def test_quarter_arc_fits_within_tolerance():
    pts = _arc(31)
    curves = fit_cubics(pts, 0.05)
    assert 1 <= len(curves) <= 2
    assert curves[0].start == Point(10.0, 0.0)
    assert curves[-1].end == Point(float(pts[-1][0]), float(pts[-1][1]))
    assert _max_deviation(pts, curves) <= 0.05 + 1e-3


def test_consecutive_curves_share_endpoints():
    pts = _arc(60, sweep=math.pi)
    curves = fit_cubics(pts, 0.01)
    for a, b in zip(curves, curves[1:]):
        assert a.end == b.start


def test_full_turn_is_split_into_quarters():
    pts = _arc(121, r=50.0, sweep=2 * math.pi)
    curves = fit_cubics(pts, 0.5)
    assert len(curves) >= 4
    assert _max_deviation(pts, curves) <= 0.5 + 1e-2


def test_collinear_points_give_flat_cubic():
    pts = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
    curves = fit_cubics(pts, 0.1)
    assert len(curves) == 1
    assert curves[0].c1.y == pytest.approx(0.0)
    assert curves[0].c2.y == pytest.approx(0.0)


def test_two_points_use_third_length_handles():
    curves = fit_cubics(np.array([[0.0, 0.0], [9.0, 0.0]]), 0.1)
    assert len(curves) == 1
    assert curves[0].c1 == Point(3.0, 0.0)
    assert curves[0].c2 == Point(6.0, 0.0)


def test_explicit_tangents_are_respected():
    pts = _arc(20)
    curves = fit_cubics(pts, 0.05, left_tangent=np.array([0.0, 1.0]), right_tangent=np.array([1.0, 0.0]))
    first = curves[0]
    assert first.c1.x == pytest.approx(first.start.x)
    assert first.c1.y > first.start.y


def test_degenerate_run_raises():
    with pytest.raises(CurveFitFailure):
        fit_cubics(np.array([[1.0, 1.0], [1.0, 1.0], [1.0, 1.0]]), 0.1)


def test_invalid_tolerance_raises():
    with pytest.raises(CurveFitFailure):
        fit_cubics(_arc(10), 0.0)
