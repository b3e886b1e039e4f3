"""S3.02: G1 Continuity.

At each join between two cubics the handles either side of the shared anchor
are rotated onto the averaged tangent direction, each keeping its own length.
Joins on hard corners, joins sharper than g1_max_angle, and joins with a
near-zero handle are left alone. Closed subpaths include the seam join.
"""

from __future__ import annotations

import math

from vectoredit.engine.config import SimplifyConfig
from vectoredit.engine.context import SimplifyContext
from vectoredit.engine.registry import Phase, stage
from vectoredit.models.svg_document import Close, CubicBezier, Point, Segment
from vectoredit.utils.math_helpers import signed_angle_deg


def _smooth_join(
    segs: list[Segment], i: int, j: int, corners: set[tuple[float, float]], cfg: SimplifyConfig
) -> None:
    """Align the handles around the anchor where segs[i] ends and segs[j] starts."""
    prev, curr = segs[i], segs[j]
    if not isinstance(prev, CubicBezier) or not isinstance(curr, CubicBezier):
        return
    join = curr.start
    if join.as_tuple() in corners:
        return

    v1x, v1y = join.x - prev.c2.x, join.y - prev.c2.y
    v2x, v2y = curr.c1.x - join.x, curr.c1.y - join.y
    len1 = math.hypot(v1x, v1y)
    len2 = math.hypot(v2x, v2y)
    if len1 < cfg.handle_epsilon or len2 < cfg.handle_epsilon:
        return

    u1 = (v1x / len1, v1y / len1)
    u2 = (v2x / len2, v2y / len2)
    if abs(signed_angle_deg(u1, u2)) > cfg.g1_max_angle:
        return

    ax, ay = (u1[0] + u2[0]) / 2, (u1[1] + u2[1]) / 2
    avg_len = math.hypot(ax, ay)
    if avg_len < cfg.handle_epsilon:
        return
    fx, fy = ax / avg_len, ay / avg_len

    new_c2 = Point(join.x - fx * len1, join.y - fy * len1)
    new_c1 = Point(join.x + fx * len2, join.y + fy * len2)
    if not (new_c2.is_finite() and new_c1.is_finite()):
        return

    # Local list built by this stage; safe to update in place
    segs[i] = CubicBezier(prev.start, prev.c1, new_c2, prev.end)
    segs[j] = CubicBezier(curr.start, new_c1, curr.c2, curr.end)


def apply_g1(
    segments: list[Segment],
    closed: bool,
    corners: set[tuple[float, float]],
    cfg: SimplifyConfig,
) -> list[Segment]:
    """Return a copy of ``segments`` with smooth joins made G1."""
    segs = list(segments)
    drawn = [k for k, s in enumerate(segs) if not isinstance(s, Close)]
    for a, b in zip(drawn, drawn[1:]):
        _smooth_join(segs, a, b, corners, cfg)
    if closed and len(drawn) >= 2:
        _smooth_join(segs, drawn[-1], drawn[0], corners, cfg)
    return segs


@stage(
    id="S3.02",
    phase=Phase.REPAIR,
    dependencies=["S3.01"],
    description="Make handles collinear at smooth cubic joins",
)
def g1_continuity(ctx: SimplifyContext) -> None:
    for sp in ctx.subpaths:
        sp.fitted = apply_g1(sp.fitted, sp.closed, sp.corner_points, ctx.config)
