"""Tangent-based path smoothing and dense point sampling.

Handles are pulled toward "ideal" positions: along the chord-averaged tangent
at each anchor, 30% of the segment length out. Lines can optionally be turned
into cubics the same way. Anchors never move.
"""

from __future__ import annotations

import logging
import math
from typing import Collection, Literal

from vectoredit.errors import DegenerateGeometry
from vectoredit.models.svg_document import (
    Close,
    CubicBezier,
    LineTo,
    MoveTo,
    Path,
    Point,
    QuadraticBezier,
    Segment,
)
from vectoredit.utils.geometry import (
    cubic_point,
    distance,
    lerp,
    perpendicular_distance,
    quadratic_point,
    quadratic_to_cubic,
    unit_vector,
)

logger = logging.getLogger(__name__)

SampleMode = Literal["fixed", "adaptive"]

_HANDLE_REACH = 0.3
# Blending all the way to the ideal handles can flatten a curve into a line
_MAX_SMOOTHNESS = 0.85
_ALREADY_SMOOTH_FACTOR = 0.2
_DEDUPE_EPS = 0.01


# ---------------------------------------------------------------------------
# Tangents
# ---------------------------------------------------------------------------


def _unit_or_zero(v: Point) -> Point:
    try:
        return Point(*unit_vector(v.x, v.y))
    except DegenerateGeometry:
        return Point(0.0, 0.0)


def _start_tangent(seg: Segment, prev: Segment | None) -> Point:
    if prev is None:
        return _unit_or_zero(seg.end - seg.start)
    return _unit_or_zero((seg.end - prev.start) * 0.5)


def _end_tangent(seg: Segment, nxt: Segment | None) -> Point:
    if nxt is None:
        return _unit_or_zero(seg.end - seg.start)
    return _unit_or_zero((nxt.end - seg.start) * 0.5)


def _dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def is_segment_smooth(seg: CubicBezier, prev: Segment | None, nxt: Segment | None) -> bool:
    """Whether a cubic's handles already look like a smooth curve.

    Handles must reach 10-80% of the chord. Near-symmetric handles of 40-65%
    (elliptical arcs) count as smooth outright; otherwise both handles must
    point within 60 degrees of the neighbor-averaged tangents.
    """
    chord = distance(seg.start, seg.end)
    if chord < 0.1:
        return True
    d1 = distance(seg.start, seg.c1)
    d2 = distance(seg.end, seg.c2)
    if not (0.1 * chord <= d1 <= 0.8 * chord and 0.1 * chord <= d2 <= 0.8 * chord):
        return False
    if min(d1, d2) / max(d1, d2) > 0.7 and 0.4 * chord < d1 < 0.65 * chord:
        return True

    dir1 = _unit_or_zero(seg.c1 - seg.start)
    dir2 = _unit_or_zero(seg.end - seg.c2)
    return _dot(dir1, _start_tangent(seg, prev)) > 0.5 and _dot(dir2, _end_tangent(seg, nxt)) > 0.5


def smooth_cubic(
    seg: CubicBezier,
    prev: Segment | None,
    nxt: Segment | None,
    smoothness: float,
    preserve_smooth: bool = True,
) -> CubicBezier:
    if preserve_smooth and is_segment_smooth(seg, prev, nxt):
        smoothness *= _ALREADY_SMOOTH_FACTOR
    smoothness = min(_MAX_SMOOTHNESS, smoothness)

    reach = distance(seg.start, seg.end) * _HANDLE_REACH
    ideal1 = seg.start + _start_tangent(seg, prev) * reach
    ideal2 = seg.end - _end_tangent(seg, nxt) * reach
    return CubicBezier(seg.start, lerp(seg.c1, ideal1, smoothness), lerp(seg.c2, ideal2, smoothness), seg.end)


def line_to_cubic(seg: LineTo, prev: Segment | None, nxt: Segment | None, smoothness: float) -> CubicBezier:
    reach = distance(seg.start, seg.end) * _HANDLE_REACH * smoothness
    c1 = seg.start + _start_tangent(seg, prev) * reach
    c2 = seg.end - _end_tangent(seg, nxt) * reach
    return CubicBezier(seg.start, c1, c2, seg.end)


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------


def smooth_path(
    path: Path,
    smoothness: float = 0.3,
    convert_lines: bool = False,
    segment_indices: Collection[int] | None = None,
    preserve_smooth: bool = True,
) -> Path:
    """Smooth the curves of a path, optionally only the given segments.

    Quadratic curves become cubics. Lines stay lines unless ``convert_lines``
    is set. MoveTo and Close are kept as they are.
    """
    segs = path.segments
    if len(segs) < 2:
        return path

    out: list[Segment] = []
    for i, seg in enumerate(segs):
        selected = segment_indices is None or i in segment_indices
        prev = segs[i - 1] if i > 0 else None
        nxt = segs[i + 1] if i < len(segs) - 1 else None
        if not selected or isinstance(seg, (MoveTo, Close)):
            out.append(seg)
        elif isinstance(seg, LineTo):
            out.append(line_to_cubic(seg, prev, nxt, smoothness) if convert_lines else seg)
        elif isinstance(seg, CubicBezier):
            out.append(smooth_cubic(seg, prev, nxt, smoothness, preserve_smooth))
        elif isinstance(seg, QuadraticBezier):
            out.append(smooth_cubic(quadratic_to_cubic(seg), None, None, smoothness, preserve_smooth))
        else:
            out.append(seg)
    return path.with_segments(out)


def auto_smooth_paths(paths: list[Path], smoothness: float = 0.3) -> list[Path]:
    logger.debug("Smoothing %d paths at %.2f", len(paths), smoothness)
    return [smooth_path(p, smoothness) for p in paths]


# ---------------------------------------------------------------------------
# Dense sampling
# ---------------------------------------------------------------------------


def _cubic_complexity(seg: CubicBezier) -> float:
    """1 for a flat cubic up to 3 for handles far off the chord."""
    chord = distance(seg.start, seg.end)
    if chord < 0.01:
        return 1.0
    deviation = max(
        perpendicular_distance(seg.c1, seg.start, seg.end),
        perpendicular_distance(seg.c2, seg.start, seg.end),
    )
    return min(3.0, 1 + deviation / chord * 2)


def _sample_count(seg: Segment, mode: SampleMode, per_segment: int, step: float) -> int:
    if mode == "fixed":
        return per_segment
    if isinstance(seg, CubicBezier):
        return max(5, min(15, math.ceil(_cubic_complexity(seg) * per_segment)))
    if isinstance(seg, QuadraticBezier):
        # Mean of chord and control-polygon length
        approx = (distance(seg.start, seg.end) + distance(seg.start, seg.control) + distance(seg.control, seg.end)) / 2
        return max(5, math.ceil(approx / step))
    return max(2, math.ceil(distance(seg.start, seg.end) / step))


def sample_dense_cloud(
    path: Path,
    mode: SampleMode = "adaptive",
    samples_per_segment: int = 10,
    adaptive_step: float = 5.0,
) -> list[Point]:
    """Densely sample a path's outline, closing edges included.

    Adaptive mode spaces line samples ``adaptive_step`` apart and gives curves
    more samples the further their handles stray from the chord. Consecutive
    points closer than 0.01 are merged.
    """
    points: list[Point] = []
    for seg in path.segments:
        if isinstance(seg, MoveTo):
            points.append(seg.end)
            continue
        if isinstance(seg, Close) and seg.start == seg.end:
            continue
        n = _sample_count(seg, mode, samples_per_segment, adaptive_step)
        for i in range(1, n + 1):
            t = i / n
            if isinstance(seg, CubicBezier):
                points.append(cubic_point(seg.start, seg.c1, seg.c2, seg.end, t))
            elif isinstance(seg, QuadraticBezier):
                points.append(quadratic_point(seg.start, seg.control, seg.end, t))
            else:
                points.append(lerp(seg.start, seg.end, t))

    deduped: list[Point] = []
    for p in points:
        if not deduped or distance(deduped[-1], p) > _DEDUPE_EPS:
            deduped.append(p)
    return deduped
