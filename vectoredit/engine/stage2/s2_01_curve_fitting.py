"""S2.01: Curve Refitting.

Each run of points between two consecutive boundaries becomes either one line
(when every point lies within collinear_factor × tolerance of the chord) or a
chain of cubics fitted within tolerance. A run the fitter cannot handle
degrades to a line between its endpoints.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from vectoredit.engine.context import SimplifyContext, SubpathContext
from vectoredit.engine.registry import Phase, stage
from vectoredit.errors import CurveFitFailure
from vectoredit.models.svg_document import LineTo, Point, Segment
from vectoredit.utils.bezier_fit import fit_cubics
from vectoredit.utils.geometry import segment_distances

logger = logging.getLogger(__name__)


def _pt(row: NDArray[np.float64]) -> Point:
    return Point(float(row[0]), float(row[1]))


def is_collinear(points: NDArray[np.float64], tolerance: float) -> bool:
    """Every interior point lies within ``tolerance`` of the first-to-last chord."""
    if len(points) < 3:
        return True
    d = segment_distances(points[1:-1], points[0], points[-1])
    return bool(np.all(d <= tolerance))


def _seam_tangent(sp: SubpathContext) -> NDArray[np.float64] | None:
    """Forward direction through the start of a smooth closed ring."""
    pts = sp.reduced
    v = pts[1] - pts[-2]
    n = float(np.hypot(*v))
    if n < 1e-12:
        return None
    return v / n


def fit_subpath(sp: SubpathContext, tolerance: float, ctx: SimplifyContext) -> list[Segment]:
    cfg = ctx.config
    pts = sp.reduced
    if len(pts) < 2:
        return []

    seam = _seam_tangent(sp) if sp.closed and not sp.seam_corner and len(pts) >= 3 else None
    bounds = sp.corner_indices
    last_run = len(bounds) - 2
    out: list[Segment] = []

    for k in range(len(bounds) - 1):
        run = pts[bounds[k] : bounds[k + 1] + 1]
        if len(run) < 2:
            continue
        start, end = _pt(run[0]), _pt(run[-1])

        if len(run) == 2 or is_collinear(run, cfg.collinear_factor * tolerance):
            out.append(LineTo(start, end))
            continue

        left = seam if k == 0 else None
        right = -seam if seam is not None and k == last_run else None
        try:
            out.extend(
                fit_cubics(
                    run,
                    tolerance,
                    left_tangent=left,
                    right_tangent=right,
                    max_turn_deg=cfg.max_fit_turn,
                    max_iterations=cfg.max_fit_iterations,
                )
            )
        except CurveFitFailure as e:
            logger.info("  subpath %d run %d: fit failed (%s), using a line", sp.index, k, e)
            out.append(LineTo(start, end))
    return out


@stage(
    id="S2.01",
    phase=Phase.FITTING,
    dependencies=["S1.02"],
    description="Refit each corner-to-corner run as a line or cubics",
)
def curve_fitting(ctx: SimplifyContext) -> None:
    for sp in ctx.subpaths:
        sp.fitted = fit_subpath(sp, ctx.tolerance, ctx)
