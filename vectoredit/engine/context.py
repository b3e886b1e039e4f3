"""SimplifyContext: the single mutable state object flowing through all stages.

Per-subpath results → SubpathContext
Path-level inputs and bookkeeping → SimplifyContext
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from vectoredit.engine.config import SimplifyConfig
from vectoredit.models.svg_document import MoveTo, Path, Segment


@dataclass
class SubpathContext:
    """Working data for one subpath (one MoveTo and what follows it)."""

    index: int
    # Dense polyline sampled from the input segments: Nx2 array of (x, y)
    points: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    # Closed by an explicit Close or by first ≈ last
    closed: bool = False
    # Polyline after noise reduction
    reduced: NDArray[np.float64] = field(default_factory=lambda: np.empty((0, 2)))
    # Fitting boundaries into ``reduced``; always starts at 0 and ends at N-1
    corner_indices: list[int] = field(default_factory=list)
    # Closed subpaths only: is the wrap-around join a hard corner?
    seam_corner: bool = False
    # Fitted output segments, no leading MoveTo
    fitted: list[Segment] = field(default_factory=list)

    @property
    def corner_points(self) -> set[tuple[float, float]]:
        """Coordinates of interior hard corners (excluding the forced ends)."""
        interior = self.corner_indices[1:-1]
        pts = {(float(self.reduced[i, 0]), float(self.reduced[i, 1])) for i in interior}
        if self.closed and self.seam_corner and len(self.reduced):
            pts.add((float(self.reduced[0, 0]), float(self.reduced[0, 1])))
        return pts


@dataclass
class SimplifyContext:
    """Shared state for one path's trip through the pipeline."""

    # Baked input path
    path: Path
    # Absolute tolerance in path units
    tolerance: float
    corner_angle: float = 30.0
    config: SimplifyConfig = field(default_factory=SimplifyConfig)
    # Bounding-box diagonal the tolerance was derived from
    diagonal: float = 1.0

    subpaths: list[SubpathContext] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def num_subpaths(self) -> int:
        return len(self.subpaths)

    def output_segments(self) -> list[Segment]:
        """All fitted subpaths, each led by a MoveTo onto its first anchor."""
        out: list[Segment] = []
        for sp in self.subpaths:
            if not sp.fitted:
                continue
            start = sp.fitted[0].start
            out.append(MoveTo(start, start))
            out.extend(sp.fitted)
        return out
