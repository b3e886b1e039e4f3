"""ViewBox and bounds utilities. All geometry is baked before it is measured."""

from __future__ import annotations

import logging
from dataclasses import replace

from shapely.geometry import MultiPoint

from vectoredit.models.svg_document import Document, Path, Point, ViewBox, map_segment, segment_points
from vectoredit.svg.transform import bake_path

logger = logging.getLogger(__name__)


def bake_transforms(document: Document) -> Document:
    """Bake every path's transform into its coordinates."""
    return document.with_paths([bake_path(p) for p in document.paths])


def _all_points(paths: tuple[Path, ...] | list[Path]) -> list[tuple[float, float]]:
    coords: list[tuple[float, float]] = []
    for path in paths:
        for seg in bake_path(path).segments:
            coords.extend(p.as_tuple() for p in segment_points(seg))
    return coords


def path_bounds(path: Path) -> tuple[float, float, float, float] | None:
    """(xmin, ymin, xmax, ymax) over anchors and handles, or None if empty."""
    return bounding_box_of([path])


def bounding_box_of(paths: tuple[Path, ...] | list[Path]) -> tuple[float, float, float, float] | None:
    coords = _all_points(paths)
    if not coords:
        return None
    return tuple(float(v) for v in MultiPoint(coords).bounds)


def bounding_box(document: Document) -> tuple[float, float, float, float] | None:
    """Bounds of all baked path points (anchors and control handles)."""
    return bounding_box_of(document.paths)


def fit_to_content(document: Document, padding: float = 0.0) -> Document:
    """Move the viewBox onto the content's bounds plus padding.

    Paths are baked; their coordinates do not move. Content with zero width or
    height is returned unchanged.
    """
    box = bounding_box(document)
    if box is None:
        return document
    xmin, ymin, xmax, ymax = box
    width, height = xmax - xmin, ymax - ymin
    if width == 0 or height == 0:
        logger.debug("fit_to_content: degenerate bounds %s, leaving document as is", box)
        return document

    vb = ViewBox(xmin - padding, ymin - padding, width + 2 * padding, height + 2 * padding)
    return replace(
        bake_transforms(document),
        view_box=vb,
        width=vb.width,
        height=vb.height,
    )


def square_normalize(
    document: Document,
    size: float = 24.0,
    padding: float = 2.0,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> Document:
    """Scale content uniformly into a size x size box, centred inside the padding.

    The offsets nudge the centred content afterwards. The result's viewBox is
    exactly (0, 0, size, size).
    """
    box = bounding_box(document)
    if box is None:
        return document
    xmin, ymin, xmax, ymax = box
    width, height = xmax - xmin, ymax - ymin
    content = size - 2 * padding

    if width > 0 and height > 0:
        scale = min(content / width, content / height)
    elif width > 0:
        scale = content / width
    elif height > 0:
        scale = content / height
    else:
        scale = 1.0

    dx = padding + (content - width * scale) / 2 - xmin * scale + offset_x
    dy = padding + (content - height * scale) / 2 - ymin * scale + offset_y

    def move(p: Point) -> Point:
        return Point(p.x * scale + dx, p.y * scale + dy)

    paths = []
    for path in document.paths:
        baked = bake_path(path)
        paths.append(baked.with_segments([map_segment(seg, move) for seg in baked.segments]))
    return replace(document, view_box=ViewBox(0.0, 0.0, size, size), width=size, height=size, paths=tuple(paths))
