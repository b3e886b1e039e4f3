"""Control-point editor: pure functions over the segments of a path.

Every function returns a new Path; the input is never modified.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterator

import numpy as np
from scipy.spatial.distance import cdist

from vectoredit.models.edit_ops import EditOp, EditPlan
from vectoredit.models.svg_document import (
    Close,
    ControlPoint,
    CubicBezier,
    LineTo,
    MoveTo,
    Path,
    Point,
    PointKind,
    QuadraticBezier,
    Segment,
    iter_control_points,
)
from vectoredit.utils.geometry import distance, evaluate_segment, lerp, split_cubic

logger = logging.getLogger(__name__)

_KEEP_COLORS = {"none", "transparent", "currentcolor"}


def extract_control_points(path: Path) -> Iterator[ControlPoint]:
    """Editable points of a path, derived from its segments on every call."""
    return iter_control_points(path)


def anchor_points(path: Path) -> list[Point]:
    return [cp.point for cp in iter_control_points(path) if cp.kind is PointKind.ANCHOR]


def find_nearest_point(path: Path, point: Point, threshold: float = 10.0) -> ControlPoint | None:
    """Closest control point within ``threshold`` of ``point``."""
    cps = list(iter_control_points(path))
    if not cps:
        return None
    coords = np.array([(cp.point.x, cp.point.y) for cp in cps])
    dists = cdist(np.array([[point.x, point.y]]), coords)[0]
    best = int(np.argmin(dists))
    return cps[best] if dists[best] < threshold else None


def _check_index(path: Path, segment_index: int) -> None:
    if not 0 <= segment_index < len(path.segments):
        raise IndexError(f"Segment {segment_index} out of range for path {path.id!r}")


def _move_subpath_start(segments: list[Segment], move_index: int, new_point: Point) -> None:
    """Keep Close segments of a subpath pointing at its (moved) MoveTo."""
    for j in range(move_index + 1, len(segments)):
        seg = segments[j]
        if isinstance(seg, MoveTo):
            break
        if isinstance(seg, Close):
            segments[j] = replace(seg, end=new_point)


def update_control_point(path: Path, segment_index: int, point_index: int, new_point: Point) -> Path:
    """Move one point. Moving an anchor also moves the neighbouring segment's copy of it."""
    _check_index(path, segment_index)
    segments = list(path.segments)
    seg = segments[segment_index]

    if isinstance(seg, MoveTo) and point_index in (0, -1):
        segments[segment_index] = MoveTo(new_point, new_point)
        if segment_index + 1 < len(segments):
            nxt = segments[segment_index + 1]
            if not isinstance(nxt, MoveTo):
                segments[segment_index + 1] = replace(nxt, start=new_point)
        _move_subpath_start(segments, segment_index, new_point)
    elif point_index == 0:
        segments[segment_index] = replace(seg, start=new_point)
        if segment_index > 0:
            prev = segments[segment_index - 1]
            segments[segment_index - 1] = (
                MoveTo(new_point, new_point) if isinstance(prev, MoveTo) else replace(prev, end=new_point)
            )
            if isinstance(prev, MoveTo):
                _move_subpath_start(segments, segment_index - 1, new_point)
    elif point_index == -1:
        if isinstance(seg, Close):
            raise ValueError("A Close segment's end is its subpath's MoveTo; move that instead")
        segments[segment_index] = replace(seg, end=new_point)
        if segment_index + 1 < len(segments):
            nxt = segments[segment_index + 1]
            if not isinstance(nxt, MoveTo):
                segments[segment_index + 1] = replace(nxt, start=new_point)
    else:
        controls = list(seg.controls)
        if not 1 <= point_index <= len(controls):
            raise IndexError(f"Point {point_index} out of range for {seg.command} segment")
        controls[point_index - 1] = new_point
        segments[segment_index] = seg.with_controls(tuple(controls))

    return path.with_segments(segments)


def add_point_to_segment(path: Path, segment_index: int, t: float = 0.5) -> Path:
    """Insert an anchor at parameter t, splitting the segment in two.

    Lines split linearly, curves by de Casteljau so the outline is unchanged.
    Move-to segments cannot be split and leave the path as it was.
    """
    _check_index(path, segment_index)
    if not 0.0 < t < 1.0:
        raise ValueError(f"Split parameter must be in (0, 1), got {t}")
    seg = path.segments[segment_index]

    if isinstance(seg, LineTo):
        mid = lerp(seg.start, seg.end, t)
        parts: list[Segment] = [LineTo(seg.start, mid), LineTo(mid, seg.end)]
    elif isinstance(seg, Close):
        mid = lerp(seg.start, seg.end, t)
        parts = [LineTo(seg.start, mid), Close(mid, seg.end)]
    elif isinstance(seg, CubicBezier):
        left, right = split_cubic(seg.start, seg.c1, seg.c2, seg.end, t)
        parts = [CubicBezier(*left), CubicBezier(*right)]
    elif isinstance(seg, QuadraticBezier):
        a = lerp(seg.start, seg.control, t)
        b = lerp(seg.control, seg.end, t)
        mid = lerp(a, b, t)
        parts = [QuadraticBezier(seg.start, a, mid), QuadraticBezier(mid, b, seg.end)]
    else:
        logger.debug("Segment %d (%s) cannot be split", segment_index, seg.command)
        return path

    segments = list(path.segments)
    segments[segment_index : segment_index + 1] = parts
    return path.with_segments(segments)


def remove_point(path: Path, segment_index: int) -> Path:
    """Remove the anchor at the end of a segment by reconnecting its neighbours.

    The following segment is stretched back to this segment's start, so the
    removed anchor's curve shape is not refit. Paths with two or fewer
    segments are returned unchanged.
    """
    _check_index(path, segment_index)
    if len(path.segments) <= 2:
        logger.debug("Refusing to remove point from %s: too few segments", path.id)
        return path

    segments = list(path.segments)
    seg = segments[segment_index]
    last = len(segments) - 1

    if segment_index == last:
        del segments[segment_index]
    elif isinstance(seg, MoveTo):
        # Subpath start moves to the next anchor
        nxt = segments[segment_index + 1]
        if isinstance(nxt, MoveTo):
            del segments[segment_index]
        else:
            segments[segment_index : segment_index + 2] = [MoveTo(nxt.end, nxt.end)]
            _move_subpath_start(segments, segment_index, nxt.end)
    else:
        nxt = segments[segment_index + 1]
        if not isinstance(nxt, MoveTo):
            segments[segment_index + 1] = replace(nxt, start=seg.start)
        del segments[segment_index]

    return path.with_segments(segments)


def join_points(path: Path, selected: list[int]) -> Path:
    """Replace everything between the first and last selected anchors with one line.

    ``selected`` indexes into ``list(extract_control_points(path))``; handles in
    the selection are ignored. Fewer than two anchors leaves the path unchanged.
    """
    cps = list(iter_control_points(path))
    anchors = sorted(i for i in selected if 0 <= i < len(cps) and cps[i].kind is PointKind.ANCHOR)
    if len(anchors) < 2:
        return path

    first = cps[anchors[0]]
    last = cps[anchors[-1]]
    if first.segment_index >= last.segment_index:
        return path

    segments = list(path.segments[: first.segment_index + 1])
    segments.append(LineTo(first.point, last.point))
    segments.extend(path.segments[last.segment_index + 1 :])
    return path.with_segments(segments)


def find_closest_point_on_segment(
    segment: Segment, point: Point, samples: int = 20
) -> tuple[float, Point, float]:
    """Sampled nearest point on a segment as (t, point, distance)."""
    best = (0.0, segment.start, distance(segment.start, point))
    for i in range(samples + 1):
        t = i / samples
        p = evaluate_segment(segment, t)
        d = distance(p, point)
        if d < best[2]:
            best = (t, p, d)
    return best


def auto_colorize(path: Path) -> Path:
    """Swap concrete fill and stroke colors for ``currentColor``."""

    def recolor(value: str | None) -> str | None:
        if value is None or value.strip().lower() in _KEEP_COLORS:
            return value
        return "currentColor"

    return replace(path, fill=recolor(path.fill), stroke=recolor(path.stroke))


def apply_edits(path: Path, plan: EditPlan) -> Path:
    """Apply a batch of edits in order."""
    result = path
    for op in plan.operations:
        result = _apply_op(result, op)
    return result


def _apply_op(path: Path, op: EditOp) -> Path:
    if op.action == "join":
        return join_points(path, op.selected)
    if op.segment_index is None:
        raise ValueError(f"{op.action} needs segment_index")
    if op.action == "move":
        if op.point_index is None or op.x is None or op.y is None:
            raise ValueError("move needs point_index, x and y")
        return update_control_point(path, op.segment_index, op.point_index, Point(op.x, op.y))
    if op.action == "insert":
        return add_point_to_segment(path, op.segment_index, op.t)
    return remove_point(path, op.segment_index)
