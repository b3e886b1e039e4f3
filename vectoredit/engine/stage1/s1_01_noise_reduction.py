"""S1.01: Noise Reduction.

Visvalingam-Whyatt with an area threshold derived from 0.1 × tolerance, tight
enough that only redundant micro-noise goes. Closed rings are reduced whole,
closing point included, so the ring stays closed.
"""

from __future__ import annotations

import logging

from vectoredit.engine.context import SimplifyContext
from vectoredit.engine.registry import Phase, stage
from vectoredit.utils.contour import visvalingam_whyatt

logger = logging.getLogger(__name__)


@stage(
    id="S1.01",
    phase=Phase.REDUCTION,
    dependencies=["S0.01"],
    description="Drop micro-noise points with Visvalingam-Whyatt",
)
def noise_reduction(ctx: SimplifyContext) -> None:
    epsilon = ctx.config.noise_factor * ctx.tolerance
    min_area = epsilon * epsilon
    for sp in ctx.subpaths:
        sp.reduced = visvalingam_whyatt(sp.points, min_area)
        if len(sp.reduced) <= 2:
            # Nothing left to close around
            sp.closed = False
        logger.debug("  subpath %d: %d → %d points", sp.index, len(sp.points), len(sp.reduced))
