"""S3.01: Closure Repair.

Closed subpaths get their last fitted endpoint snapped exactly onto the first
start. When the first and last segments are lines running straight through
the seam they are merged into one, and an explicit Close ends the subpath.
"""

from __future__ import annotations

from dataclasses import replace

import numpy as np

from vectoredit.engine.context import SimplifyContext, SubpathContext
from vectoredit.engine.registry import Phase, stage
from vectoredit.engine.stage2.s2_01_curve_fitting import is_collinear
from vectoredit.models.svg_document import Close, LineTo, Segment


def close_subpath(sp: SubpathContext, collinear_tolerance: float) -> list[Segment]:
    segs = list(sp.fitted)
    if not sp.closed or not segs:
        return segs

    first = segs[0]
    segs[-1] = replace(segs[-1], end=first.start)
    last = segs[-1]

    if len(segs) > 2 and isinstance(first, LineTo) and isinstance(last, LineTo):
        triple = np.array([last.start.as_tuple(), last.end.as_tuple(), first.end.as_tuple()])
        if is_collinear(triple, collinear_tolerance):
            segs[0] = LineTo(last.start, first.end)
            segs.pop()

    segs.append(Close(segs[-1].end, segs[0].start))
    return segs


@stage(
    id="S3.01",
    phase=Phase.REPAIR,
    dependencies=["S2.01"],
    description="Snap closed subpaths shut and merge a straight seam",
)
def closure_repair(ctx: SimplifyContext) -> None:
    tol = ctx.config.collinear_factor * ctx.tolerance
    for sp in ctx.subpaths:
        sp.fitted = close_subpath(sp, tol)
