"""Path simplification entry points.

simplify_path runs the staged pipeline on one baked path and applies the
safety nets: a run that records any stage error, collapses a path to fewer
than two segments, or grows the segment count returns the input unchanged.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, Literal

from vectoredit.engine.config import SimplifyConfig
from vectoredit.engine.context import SimplifyContext
from vectoredit.engine.pipeline import Pipeline
from vectoredit.models.svg_document import (
    Close,
    Document,
    MoveTo,
    Path,
    Segment,
    segment_is_finite,
    segment_points,
)
from vectoredit.svg.transform import bake_path
from vectoredit.utils.geometry import bbox_diagonal, distance, to_array

logger = logging.getLogger(__name__)

IntensityLevel = Literal["light", "medium", "strong", "extreme"]

# Closure repair pulls in every stage before it; G1 smoothing is left out
WITHOUT_G1_STAGES = frozenset({"S3.01"})


@dataclass(frozen=True)
class IntensityPreset:
    tolerance_pct: float
    corner_angle: float
    auto_close_multiplier: float
    label: str
    description: str


INTENSITY_PRESETS: dict[str, IntensityPreset] = {
    "light": IntensityPreset(0.05, 20.0, 1.0, "Light", "Subtle cleanup, keeps the most detail"),
    "medium": IntensityPreset(0.15, 30.0, 2.0, "Medium", "Balanced optimization"),
    "strong": IntensityPreset(0.5, 45.0, 3.0, "Strong", "Aggressive simplification for traced images"),
    "extreme": IntensityPreset(1.5, 60.0, 4.0, "Extreme", "Maximum simplification for heavily traced art"),
}


def path_diagonal(path: Path) -> float:
    """Bounding-box diagonal over anchors and handles; 1.0 for an empty or flat-point path."""
    pts = [p for seg in path.segments for p in segment_points(seg)]
    return bbox_diagonal(to_array(pts))


def validate_segments(segments: list[Segment]) -> list[Segment]:
    """Repair a segment list so it serializes to valid path data.

    Ensures a leading MoveTo, drops segments with non-finite coordinates and
    Close segments directly after a MoveTo, and reopens drawing after a Close
    with a MoveTo onto the next segment's start.
    """
    if not segments:
        return []

    out: list[Segment] = []
    if not isinstance(segments[0], MoveTo):
        out.append(MoveTo(segments[0].start, segments[0].start))

    for i, seg in enumerate(segments):
        if not segment_is_finite(seg):
            logger.warning("Dropping segment %d with non-finite coordinates", i)
            continue
        if isinstance(seg, Close) and i > 0 and isinstance(segments[i - 1], MoveTo):
            continue
        if i > 0 and isinstance(segments[i - 1], Close) and not isinstance(seg, MoveTo):
            out.append(MoveTo(seg.start, seg.start))
        out.append(seg)
    return out


def simplify_path(
    path: Path,
    tolerance_pct: float,
    corner_angle: float = 30.0,
    config: SimplifyConfig | None = None,
    pipeline: Pipeline | None = None,
    smooth_joins: bool = True,
) -> Path:
    """Simplify a path to within ``tolerance_pct`` percent of its bbox diagonal.

    The result is baked. Whenever the run fails or would make the path
    structurally worse, the input path is returned unchanged. With
    ``smooth_joins`` off the G1 pass is skipped and fitted joins keep the
    handles the fitter produced.
    """
    if tolerance_pct <= 0 or not path.segments:
        return path

    baked = bake_path(path)
    diagonal = path_diagonal(baked)
    tolerance = tolerance_pct / 100 * diagonal
    logger.debug(
        "Simplify %s: diagonal %.1f, tolerance %s%% = %.3f, %d segments",
        path.id,
        diagonal,
        tolerance_pct,
        tolerance,
        len(baked.segments),
    )

    ctx = SimplifyContext(
        path=baked,
        tolerance=tolerance,
        corner_angle=corner_angle,
        config=config or SimplifyConfig(corner_angle=corner_angle),
        diagonal=diagonal,
    )
    (pipeline or Pipeline()).run(ctx, None if smooth_joins else WITHOUT_G1_STAGES)
    if ctx.errors:
        logger.info("Simplify %s: stage errors %s, keeping original", path.id, sorted(ctx.errors))
        return path

    result = ctx.output_segments()
    n_in = len(path.segments)
    if len(result) < 2 and n_in >= 2:
        logger.info("Simplify %s: result collapsed to %d segments, keeping original", path.id, len(result))
        return path
    if len(result) > n_in:
        logger.info("Simplify %s: result grew (%d vs %d segments), keeping original", path.id, len(result), n_in)
        return path

    validated = validate_segments(result)
    logger.info(
        "Simplify %s: %d → %d segments (%.1f%% reduction)",
        path.id,
        n_in,
        len(validated),
        (1 - len(validated) / n_in) * 100,
    )
    return replace(baked, segments=tuple(validated))


def simplify_document(
    document: Document,
    tolerance_pct: float,
    corner_angle: float = 30.0,
    workers: int = 4,
    should_cancel: Callable[[], bool] | None = None,
    config: SimplifyConfig | None = None,
    smooth_joins: bool = True,
) -> Document:
    """Simplify every path concurrently.

    Each path is an independent unit of work. Once ``should_cancel()`` returns
    True, paths that have not started yet are kept as they were.
    """
    pipeline = Pipeline()

    def work(path: Path) -> Path:
        if should_cancel is not None and should_cancel():
            return path
        return simplify_path(path, tolerance_pct, corner_angle, config, pipeline, smooth_joins)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        paths = list(pool.map(work, document.paths))
    return document.with_paths(paths)


def is_path_closed(path: Path) -> bool:
    """True when the path ends with Close or its last end meets its first start."""
    if not path.segments:
        return False
    last = path.segments[-1]
    if isinstance(last, Close):
        return True
    first = path.segments[0]
    return abs(last.end.x - first.start.x) < 0.01 and abs(last.end.y - first.start.y) < 0.01


def close_path(path: Path) -> Path:
    """Append a Close unless the path is already closed."""
    if not path.segments or is_path_closed(path):
        return path
    first = path.segments[0]
    last = path.segments[-1]
    return path.with_segments([*path.segments, Close(last.end, first.start)])


def _should_auto_close(path: Path, preset: IntensityPreset) -> bool:
    if not path.segments or is_path_closed(path):
        return False
    gap = distance(path.segments[-1].end, path.segments[0].start)
    threshold = preset.tolerance_pct / 100 * path_diagonal(path) * preset.auto_close_multiplier
    return math.isfinite(gap) and gap < threshold


def auto_heal_path(path: Path, intensity: IntensityLevel = "medium") -> Path:
    """Bake, close a nearly-closed outline, then simplify with the preset."""
    if intensity not in INTENSITY_PRESETS:
        raise ValueError(f"Unknown intensity {intensity!r}; expected one of {sorted(INTENSITY_PRESETS)}")
    preset = INTENSITY_PRESETS[intensity]

    healed = bake_path(path)
    if _should_auto_close(healed, preset):
        healed = close_path(healed)
        logger.info(
            "Auto-heal %s: closed gap under %.2f%% of diagonal",
            path.id,
            preset.tolerance_pct * preset.auto_close_multiplier,
        )
    return simplify_path(healed, preset.tolerance_pct, preset.corner_angle)
