"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from vectoredit.errors import DegenerateGeometry
from vectoredit.models.svg_document import Close, CubicBezier, LineTo, MoveTo, Point, QuadraticBezier, Segment

EPSILON = 1e-10


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def lerp(a: Point, b: Point, t: float) -> Point:
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def midpoint(a: Point, b: Point) -> Point:
    return lerp(a, b, 0.5)


def points_close(a: Point, b: Point, eps: float) -> bool:
    return distance(a, b) < eps


def unit_vector(dx: float, dy: float) -> tuple[float, float]:
    """Normalize (dx, dy). Raises DegenerateGeometry for a zero vector."""
    length = math.hypot(dx, dy)
    if length < EPSILON:
        raise DegenerateGeometry("zero-length vector")
    return dx / length, dy / length


def cubic_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate a cubic Bezier at parameter t."""
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def cubic_derivative(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    mt = 1.0 - t
    a = 3 * mt * mt
    b = 6 * mt * t
    c = 3 * t * t
    return Point(
        a * (p1.x - p0.x) + b * (p2.x - p1.x) + c * (p3.x - p2.x),
        a * (p1.y - p0.y) + b * (p2.y - p1.y) + c * (p3.y - p2.y),
    )


def quadratic_point(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    """Evaluate a quadratic Bezier at parameter t."""
    mt = 1.0 - t
    a = mt * mt
    b = 2 * mt * t
    c = t * t
    return Point(a * p0.x + b * p1.x + c * p2.x, a * p0.y + b * p1.y + c * p2.y)


def quadratic_derivative(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    mt = 1.0 - t
    return Point(
        2 * mt * (p1.x - p0.x) + 2 * t * (p2.x - p1.x),
        2 * mt * (p1.y - p0.y) + 2 * t * (p2.y - p1.y),
    )


def split_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, t: float
) -> tuple[tuple[Point, Point, Point, Point], tuple[Point, Point, Point, Point]]:
    """De Casteljau subdivision. Both halves reproduce the original curve."""
    p01 = lerp(p0, p1, t)
    p12 = lerp(p1, p2, t)
    p23 = lerp(p2, p3, t)
    p012 = lerp(p01, p12, t)
    p123 = lerp(p12, p23, t)
    mid = lerp(p012, p123, t)
    return (p0, p01, p012, mid), (mid, p123, p23, p3)


def perpendicular_distance(p: Point, a: Point, b: Point) -> float:
    """Distance from p to segment ab (projection clamped to the segment)."""
    dx = b.x - a.x
    dy = b.y - a.y
    len_sq = dx * dx + dy * dy
    if len_sq < EPSILON:
        return distance(p, a)
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / len_sq
    t = max(0.0, min(1.0, t))
    return distance(p, Point(a.x + t * dx, a.y + t * dy))


def segment_distances(points: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    """Vectorized clamped distance from each row of points to segment ab."""
    ab = b - a
    len_sq = float(np.dot(ab, ab))
    if len_sq < EPSILON:
        return np.linalg.norm(points - a, axis=1)
    t = np.clip((points - a) @ ab / len_sq, 0.0, 1.0)
    closest = a + np.outer(t, ab)
    return np.linalg.norm(points - closest, axis=1)


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def bbox_diagonal(points: NDArray[np.float64]) -> float:
    """Diagonal of the bounding box; 1.0 when there is nothing to measure."""
    if len(points) == 0:
        return 1.0
    xmin, ymin, xmax, ymax = bbox(points)
    diag = math.hypot(xmax - xmin, ymax - ymin)
    return diag if diag > 0 else 1.0


def triangle_areas(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Area of the triangle each interior point forms with its neighbours."""
    a = points[:-2]
    b = points[1:-1]
    c = points[2:]
    return 0.5 * np.abs(
        (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (c[:, 0] - a[:, 0]) * (b[:, 1] - a[:, 1])
    )


def to_array(points: list[Point]) -> NDArray[np.float64]:
    if not points:
        return np.empty((0, 2))
    return np.array([(p.x, p.y) for p in points], dtype=np.float64)


def to_points(arr: NDArray[np.float64]) -> list[Point]:
    return [Point(float(x), float(y)) for x, y in arr]


def evaluate_segment(seg: Segment, t: float) -> Point:
    """Point at parameter t on any arc-normalized segment."""
    if isinstance(seg, CubicBezier):
        return cubic_point(seg.start, seg.c1, seg.c2, seg.end, t)
    if isinstance(seg, QuadraticBezier):
        return quadratic_point(seg.start, seg.control, seg.end, t)
    if isinstance(seg, MoveTo):
        return seg.end
    if isinstance(seg, (LineTo, Close)):
        return lerp(seg.start, seg.end, t)
    raise TypeError(f"Cannot evaluate {type(seg).__name__}; normalize arcs first")


def segment_derivative(seg: Segment, t: float) -> Point:
    if isinstance(seg, CubicBezier):
        return cubic_derivative(seg.start, seg.c1, seg.c2, seg.end, t)
    if isinstance(seg, QuadraticBezier):
        return quadratic_derivative(seg.start, seg.control, seg.end, t)
    if isinstance(seg, (LineTo, Close)):
        return seg.end - seg.start
    if isinstance(seg, MoveTo):
        return Point(0.0, 0.0)
    raise TypeError(f"Cannot differentiate {type(seg).__name__}; normalize arcs first")


def split_subpaths(segments: Sequence[Segment]) -> list[list[Segment]]:
    """Group segments into subpaths, starting a new one at every MoveTo."""
    groups: list[list[Segment]] = []
    for seg in segments:
        if isinstance(seg, MoveTo) or not groups:
            groups.append([])
        groups[-1].append(seg)
    return groups


def quadratic_to_cubic(seg: QuadraticBezier) -> CubicBezier:
    """Exact degree elevation of a quadratic curve."""
    c1 = seg.start + (seg.control - seg.start) * (2 / 3)
    c2 = seg.end + (seg.control - seg.end) * (2 / 3)
    return CubicBezier(seg.start, c1, c2, seg.end)
