"""Smart heal: drop the least important anchor and bridge the gap with a cubic.

Importance mixes the turn angle at an anchor (weight 0.7) with the mean
length of its two edges (weight 0.3, saturating at 10 units), so short
nearly-straight steps go first and real corners stay.
"""

from __future__ import annotations

import logging
import math

from vectoredit.errors import DegenerateGeometry
from vectoredit.models.svg_document import Close, CubicBezier, MoveTo, Path, Point, Segment
from vectoredit.svg.measure import path_length
from vectoredit.utils.geometry import distance, unit_vector

logger = logging.getLogger(__name__)

_CURVATURE_WEIGHT = 0.7
_LENGTH_WEIGHT = 0.3
_FULL_LENGTH = 10.0
_BRIDGE_HANDLE = 0.33
# Target density for optimal_heal_count: anchors per 100 units of length
_TARGET_DENSITY = 1.5
_MAX_REMOVAL = 0.7


def _is_anchor(seg: Segment) -> bool:
    return not isinstance(seg, Close)


def _is_drawing(seg: Segment) -> bool:
    return not isinstance(seg, (MoveTo, Close))


def point_importance(prev: Point, current: Point, nxt: Point) -> float:
    """Score in [0, 1]; 0 for an anchor on a zero-length edge."""
    len1 = distance(prev, current)
    len2 = distance(current, nxt)
    if len1 == 0 or len2 == 0:
        return 0.0
    dot = ((current.x - prev.x) * (nxt.x - current.x) + (current.y - prev.y) * (nxt.y - current.y)) / (len1 * len2)
    angle = math.acos(max(-1.0, min(1.0, dot)))
    length_score = min(1.0, (len1 + len2) / 2 / _FULL_LENGTH)
    return angle / math.pi * _CURVATURE_WEIGHT + length_score * _LENGTH_WEIGHT


def least_important_anchor(segments: tuple[Segment, ...] | list[Segment]) -> int | None:
    """Segment index of the anchor whose removal matters least.

    Candidates are interior anchors of a subpath that are followed by another
    drawing segment, so a subpath's MoveTo, its last anchor and anchors right
    before a Close are never chosen.
    """
    best: int | None = None
    best_score = math.inf
    for i in range(1, len(segments) - 1):
        seg, prev, nxt = segments[i], segments[i - 1], segments[i + 1]
        if not _is_drawing(seg) or not _is_anchor(prev) or not _is_drawing(nxt):
            continue
        score = point_importance(prev.end, seg.end, nxt.end)
        if score < best_score:
            best, best_score = i, score
    return best


def _unit_or_zero(a: Point, b: Point) -> tuple[float, float]:
    try:
        return unit_vector(b.x - a.x, b.y - a.y)
    except DegenerateGeometry:
        return 0.0, 0.0


def bridge_curve(prev: Point, removed: Point, nxt: Point) -> CubicBezier:
    """Cubic from ``prev`` to ``nxt`` leaving and arriving along the removed anchor's edges."""
    t1 = _unit_or_zero(prev, removed)
    t2 = _unit_or_zero(removed, nxt)
    reach = distance(prev, nxt) * _BRIDGE_HANDLE
    c1 = Point(prev.x + t1[0] * reach, prev.y + t1[1] * reach)
    c2 = Point(nxt.x - t2[0] * reach, nxt.y - t2[1] * reach)
    return CubicBezier(prev, c1, c2, nxt)


def heal_path(path: Path) -> Path:
    """Remove one anchor; paths with fewer than four segments are returned as is."""
    if len(path.segments) < 4:
        return path
    target = least_important_anchor(path.segments)
    if target is None:
        return path

    segs = path.segments
    bridge = bridge_curve(segs[target - 1].end, segs[target].end, segs[target + 1].end)
    return path.with_segments([*segs[:target], bridge, *segs[target + 2 :]])


def heal_path_multiple(path: Path, count: int) -> Path:
    """Apply heal_path up to ``count`` times, stopping once nothing changes."""
    healed = path
    for _ in range(count):
        nxt = heal_path(healed)
        if len(nxt.segments) == len(healed.segments):
            break
        healed = nxt
    removed = len(path.segments) - len(healed.segments)
    if removed:
        logger.info("Smart heal %s: removed %d anchors", path.id, removed)
    return healed


def optimal_heal_count(path: Path) -> int:
    """How many anchors can go: down to 1.5 per 100 units, never more than 70%."""
    anchors = sum(1 for seg in path.segments if _is_anchor(seg))
    target = math.ceil(path_length(path) / 100 * _TARGET_DENSITY)
    return min(max(0, anchors - target), math.floor(anchors * _MAX_REMOVAL))
