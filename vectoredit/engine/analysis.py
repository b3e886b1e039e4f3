"""Path health analysis: anchor density, redundant points and precision waste.

Each subpath gets a health score from 0 (should be healed) to 100 (nothing
to gain). A path's complexity tier comes from its worst subpath; the document
score averages over subpaths so merging paths does not change it.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Literal, Sequence

import numpy as np

from vectoredit.models.svg_document import Close, Document, Path, Segment, segment_points
from vectoredit.svg.measure import path_length
from vectoredit.utils.geometry import split_subpaths, to_array

logger = logging.getLogger(__name__)

Complexity = Literal["optimal", "acceptable", "bloated", "disaster"]

_DECIMAL_RE = re.compile(r"-?[0-9]*\.[0-9]+")
# Turns under ~5 degrees make an anchor redundant
_COLLINEAR_ANGLE = 0.087
_MIN_EDGE = 0.1
# Subpaths about this many units across are scored at face density
_REFERENCE_DIAGONAL = 80.0
_LOSSLESS_SAVINGS = 0.12
_MAX_HEAL_SAVINGS = 0.40
_MAX_SAVINGS = 0.52


@dataclass
class PathAnalysis:
    point_count: int
    path_length: float
    # Anchors per 100 units of length
    point_density: float
    complexity: Complexity
    estimated_size: int
    recommendations: list[str] = field(default_factory=list)


@dataclass
class DocumentAnalysis:
    total_points: int
    total_paths: int
    estimated_file_size: int
    optimal_file_size: int
    savings_potential: int
    # 0 = perfect, 100 = disaster
    average_complexity: float
    path_analyses: dict[str, PathAnalysis] = field(default_factory=dict)

    @property
    def health_percentage(self) -> int:
        return round(100 - self.average_complexity)


def _anchors(segs: Sequence[Segment]) -> list[Segment]:
    return [s for s in segs if not isinstance(s, Close)]


def count_anchor_points(path: Path) -> int:
    return len(_anchors(path.segments))


def _length(segs: Sequence[Segment]) -> float:
    return path_length(Path(id="", segments=tuple(segs)))


def _diagonal(segs: Sequence[Segment]) -> float:
    pts = to_array([p for s in segs for p in segment_points(s)])
    if not len(pts):
        return 0.0
    return float(np.hypot(*np.ptp(pts, axis=0)))


def collinear_fraction(segs: Sequence[Segment]) -> float:
    """Share of interior anchors where the outline turns less than about 5 degrees."""
    anchors = _anchors(segs)
    if len(anchors) < 3:
        return 0.0
    ends = to_array([s.end for s in anchors])
    a = ends[1:-1] - ends[:-2]
    b = ends[2:] - ends[1:-1]
    len_a = np.hypot(a[:, 0], a[:, 1])
    len_b = np.hypot(b[:, 0], b[:, 1])
    usable = (len_a >= _MIN_EDGE) & (len_b >= _MIN_EDGE)
    cos = np.einsum("ij,ij->i", a[usable], b[usable]) / (len_a[usable] * len_b[usable])
    redundant = int(np.count_nonzero(np.arccos(np.clip(cos, -1.0, 1.0)) < _COLLINEAR_ANGLE))
    return redundant / (len(anchors) - 2)


def precision_waste(d: str) -> float:
    """Share of decimal numbers in ``d`` carrying more than two significant decimals."""
    values = _DECIMAL_RE.findall(d)
    if not values:
        return 0.0
    wasteful = sum(1 for v in values if len(v.split(".")[1].rstrip("0")) > 2)
    return wasteful / len(values)


def score_subpath(segs: Sequence[Segment]) -> float:
    length = _length(segs)
    if length < 0.001:
        return 100.0

    points = len(_anchors(segs))
    closed = isinstance(segs[-1], Close)
    # Small polygons are already minimal
    if (points <= 8 and closed) or points <= 3:
        return 100.0

    diagonal = _diagonal(segs)
    if diagonal < 25 and points <= 12:
        return 90.0

    # Larger outlines are held to a leaner density
    scale = max(1.0, math.sqrt(diagonal / _REFERENCE_DIAGONAL))
    density = points / length * 100 / scale
    density_penalty = min(100.0, max(0.0, (density - 2) / 6 * 100))
    collinear_penalty = collinear_fraction(segs) * 100

    health = 100 - density_penalty * 0.65 - collinear_penalty * 0.35
    return max(0.0, min(100.0, health))


def _tier(health: float) -> Complexity:
    if health >= 80:
        return "optimal"
    if health >= 55:
        return "acceptable"
    if health >= 30:
        return "bloated"
    return "disaster"


def _scored_subpaths(path: Path) -> list[list[Segment]]:
    return [sp for sp in split_subpaths(path.segments) if _length(sp) > 0]


def analyze_path(path: Path) -> PathAnalysis:
    point_count = count_anchor_points(path)
    length = path_length(path)
    worst = min((score_subpath(sp) for sp in _scored_subpaths(path)), default=100.0)
    d = path.d

    recommendations: list[str] = []
    if worst < 55:
        min_points = 4 if d.rstrip().upper().endswith("Z") else 2
        target = max(min_points, math.floor(point_count * 0.4))
        if point_count > target:
            recommendations.append(
                f"Path has {point_count} points, could be reduced to ~{target} with Smart Heal"
            )
    if precision_waste(d) > 0.3:
        recommendations.append("Coordinates have excessive decimal precision, rounding would save bytes")

    return PathAnalysis(
        point_count=point_count,
        path_length=length,
        point_density=point_count / length * 100 if length > 0 else 0.0,
        complexity=_tier(worst),
        estimated_size=len(d) + 50,
        recommendations=recommendations,
    )


def analyze_document(document: Document, actual_svg_bytes: int | None = None) -> DocumentAnalysis:
    """Per-path analyses plus document health and an estimate of achievable savings.

    Savings combine a fixed lossless share (rounding, whitespace) with a
    Smart Heal share proportional to the mean collinear fraction, capped at 40%.
    """
    analyses: dict[str, PathAnalysis] = {}
    health: list[float] = []
    collinear: list[float] = []

    for path in document.paths:
        analyses[path.id] = analyze_path(path)
        for sp in _scored_subpaths(path):
            health.append(score_subpath(sp))
            collinear.append(collinear_fraction(sp))

    avg_health = sum(health) / len(health) if health else 100.0
    avg_collinear = sum(collinear) / len(collinear) if collinear else 0.0
    savings = min(_MAX_SAVINGS, _LOSSLESS_SAVINGS + min(_MAX_HEAL_SAVINGS, avg_collinear * 0.5))

    size = actual_svg_bytes if actual_svg_bytes is not None else sum(a.estimated_size for a in analyses.values())
    optimal = round(size * (1 - savings))
    logger.debug("Analyzed %d paths: health %.1f, savings %.0f%%", len(analyses), avg_health, savings * 100)

    return DocumentAnalysis(
        total_points=sum(a.point_count for a in analyses.values()),
        total_paths=len(document.paths),
        estimated_file_size=size,
        optimal_file_size=optimal,
        savings_potential=size - optimal,
        average_complexity=100 - avg_health,
        path_analyses=analyses,
    )
