"""Tests for Visvalingam-Whyatt reduction."""

import numpy as np

from vectoredit.utils.contour import visvalingam_whyatt


def test_collinear_points_collapse_to_endpoints():
    pts = np.array([[i, 2.0 * i] for i in range(50)], dtype=np.float64)
    out = visvalingam_whyatt(pts, 1e-6)
    assert out.tolist() == [[0.0, 0.0], [49.0, 98.0]]


def test_large_triangles_survive():
    pts = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=np.float64)
    out = visvalingam_whyatt(pts, 1.0)
    assert len(out) == 4


def test_micro_noise_removed_shape_kept():
    pts = np.array(
        [[0, 0], [5, 0.001], [10, 0], [10, 5], [10.001, 10], [0, 10]],
        dtype=np.float64,
    )
    out = visvalingam_whyatt(pts, 0.01)
    assert out.tolist() == [[0.0, 0.0], [10.0, 0.0], [10.001, 10.0], [0.0, 10.0]]


def test_closed_ring_stays_closed():
    ring = np.array([[0, 0], [10, 0], [20, 0], [20, 10], [0, 10], [0, 0]], dtype=np.float64)
    out = visvalingam_whyatt(ring, 0.5)
    assert out[0].tolist() == out[-1].tolist() == [0.0, 0.0]
    assert [10.0, 0.0] not in out.tolist()


def test_short_input_untouched():
    pts = np.array([[0, 0], [1, 1]], dtype=np.float64)
    out = visvalingam_whyatt(pts, 100.0)
    assert out.tolist() == pts.tolist()
    assert out is not pts
