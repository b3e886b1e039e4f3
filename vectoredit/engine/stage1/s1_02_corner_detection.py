"""S1.02: Corner Detection.

A point is a hard corner when the turn between its incoming and outgoing unit
vectors, acos(u1 · u2), exceeds the corner angle. Corners become fitting
boundaries; the first and last points always are. Closed subpaths also check
the wrap-around join.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from vectoredit.engine.context import SimplifyContext
from vectoredit.engine.registry import Phase, stage
from vectoredit.errors import DegenerateGeometry
from vectoredit.utils.geometry import unit_vector
from vectoredit.utils.math_helpers import turn_angle_deg


def _turn_at(
    prev: NDArray[np.float64], curr: NDArray[np.float64], nxt: NDArray[np.float64], min_edge: float
) -> float | None:
    d1 = curr - prev
    d2 = nxt - curr
    if np.hypot(*d1) < min_edge or np.hypot(*d2) < min_edge:
        return None
    try:
        u1 = unit_vector(float(d1[0]), float(d1[1]))
        u2 = unit_vector(float(d2[0]), float(d2[1]))
    except DegenerateGeometry:
        return None
    return turn_angle_deg(u1, u2)


def detect_corners(
    points: NDArray[np.float64],
    angle: float = 30.0,
    closed: bool = False,
    min_edge: float = 0.01,
) -> tuple[list[int], bool]:
    """Return (boundary indices, seam is a corner)."""
    n = len(points)
    if n < 3:
        return list(range(n)), False

    corners = [0]
    for i in range(1, n - 1):
        turn = _turn_at(points[i - 1], points[i], points[i + 1], min_edge)
        if turn is not None and turn > angle:
            corners.append(i)
    corners.append(n - 1)

    seam = False
    if closed:
        # points[-1] repeats points[0]
        turn = _turn_at(points[-2], points[0], points[1], min_edge)
        seam = turn is None or turn > angle
    return corners, seam


@stage(
    id="S1.02",
    phase=Phase.REDUCTION,
    dependencies=["S1.01"],
    description="Mark hard corners as fitting boundaries",
)
def corner_detection(ctx: SimplifyContext) -> None:
    for sp in ctx.subpaths:
        sp.corner_indices, sp.seam_corner = detect_corners(
            sp.reduced,
            ctx.corner_angle,
            sp.closed,
            ctx.config.min_edge_length,
        )
