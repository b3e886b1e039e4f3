"""S0.01: Point Sampling.

Split the path into subpaths at each MoveTo and sample every segment into a
polyline: lines keep their two endpoints, curves get evenly parametrized
samples. Each segment's first sample repeats the previous end and is skipped.
"""

from __future__ import annotations

import numpy as np

from vectoredit.engine.context import SimplifyContext, SubpathContext
from vectoredit.engine.registry import Phase, stage
from vectoredit.models.svg_document import Close, CubicBezier, Point, QuadraticBezier, Segment
from vectoredit.utils.geometry import cubic_point, quadratic_point, split_subpaths


def sample_segment(seg: Segment, samples_per_curve: int = 5) -> list[Point]:
    """Start, ``samples_per_curve - 1`` interior samples, end. Lines give two points."""
    if isinstance(seg, CubicBezier):
        inner = [
            cubic_point(seg.start, seg.c1, seg.c2, seg.end, i / samples_per_curve)
            for i in range(1, samples_per_curve)
        ]
        return [seg.start, *inner, seg.end]
    if isinstance(seg, QuadraticBezier):
        inner = [
            quadratic_point(seg.start, seg.control, seg.end, i / samples_per_curve)
            for i in range(1, samples_per_curve)
        ]
        return [seg.start, *inner, seg.end]
    return [seg.start, seg.end]


def _dedupe(points: np.ndarray, eps: float) -> np.ndarray:
    if len(points) < 2:
        return points
    step = np.hypot(*np.diff(points, axis=0).T)
    keep = np.concatenate([[True], step > eps])
    return points[keep]


@stage(
    id="S0.01",
    phase=Phase.SAMPLING,
    description="Sample every subpath into a dense polyline",
)
def point_sampling(ctx: SimplifyContext) -> None:
    cfg = ctx.config
    ctx.subpaths = []
    for index, group in enumerate(split_subpaths(ctx.path.segments)):
        coords: list[tuple[float, float]] = []
        explicit_close = False
        for seg in group:
            if isinstance(seg, Close):
                explicit_close = True
            pts = sample_segment(seg, cfg.samples_per_curve)
            if coords:
                pts = pts[1:]
            coords.extend(p.as_tuple() for p in pts)

        points = _dedupe(np.array(coords, dtype=np.float64).reshape(-1, 2), cfg.duplicate_epsilon)
        closed = explicit_close
        if len(points) >= 3:
            gap = np.abs(points[0] - points[-1])
            if bool(np.all(gap < cfg.closure_epsilon)):
                closed = True
        if closed and len(points) >= 3 and not np.array_equal(points[0], points[-1]):
            if bool(np.all(np.abs(points[0] - points[-1]) < cfg.closure_epsilon)):
                points[-1] = points[0]
            else:
                # Implicit closing edge of an explicit Close
                points = np.vstack([points, points[:1]])

        ctx.subpaths.append(SubpathContext(index=index, points=points, closed=closed and len(points) >= 3))
