"""Path merging.

Every input is baked before its segments are combined, so merged geometry is
always in world coordinates and the result carries no transform.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from vectoredit.engine.grouping import group_paths_by_color
from vectoredit.engine.simplify import close_path, is_path_closed, simplify_path
from vectoredit.errors import InsufficientInput
from vectoredit.models.svg_document import Document, Path
from vectoredit.svg.transform import bake_path

logger = logging.getLogger(__name__)

__all__ = [
    "close_path",
    "is_path_closed",
    "merge_paths",
    "merge_selected_paths",
    "merge_similar_paths",
]


def merge_paths(
    paths: list[Path],
    fill_color: str | None = None,
    close_open_paths: bool = False,
    simplify_tolerance: float = 0.0,
) -> Path:
    """Concatenate the baked segments of ``paths`` into one path.

    The merged path takes the first path's attributes and the id
    ``{first id}-merged``. A single path is only baked (and closed when asked).
    ``simplify_tolerance`` > 0 runs simplification on the merged result.
    """
    if not paths:
        raise InsufficientInput("Cannot merge an empty list of paths")

    baked = [bake_path(p) for p in paths]
    if close_open_paths:
        baked = [close_path(p) for p in baked]
    if len(baked) == 1:
        return baked[0]

    base = baked[0]
    segments = [seg for p in baked for seg in p.segments]
    merged = replace(
        base,
        id=f"{base.id}-merged",
        segments=tuple(segments),
        fill=fill_color or base.fill,
        transform=None,
    )
    logger.info("Merged %d paths into %s (%d segments)", len(paths), merged.id, len(segments))

    if simplify_tolerance > 0:
        merged = simplify_path(merged, simplify_tolerance)
    return merged


def merge_selected_paths(
    document: Document,
    path_ids: list[str],
    fill_color: str | None = None,
    close_open_paths: bool = False,
    simplify_tolerance: float = 0.0,
) -> Document:
    """Replace the selected paths with their merge, appended last in paint order."""
    if len(path_ids) < 2:
        raise InsufficientInput("Need at least 2 paths to merge")

    selected = set(path_ids)
    missing = selected - {p.id for p in document.paths}
    if missing:
        raise KeyError(", ".join(sorted(missing)))

    to_merge = [p for p in document.paths if p.id in selected]
    merged = merge_paths(to_merge, fill_color, close_open_paths, simplify_tolerance)
    remaining = [p for p in document.paths if p.id not in selected]
    return document.with_paths([*remaining, merged])


def merge_similar_paths(document: Document, threshold: float = 0.95) -> tuple[Document, int]:
    """Merge each group of similarly filled paths; return (document, paths removed)."""
    groups = group_paths_by_color(list(document.paths), threshold)
    if not groups:
        return document, 0

    merged_paths: list[Path] = []
    merged_ids: set[str] = set()
    merged_count = 0
    for group in groups:
        merged_paths.append(merge_paths(group))
        merged_ids.update(p.id for p in group)
        merged_count += len(group) - 1

    merged_paths.extend(p for p in document.paths if p.id not in merged_ids)
    logger.info("Merged %d similar paths into %d", merged_count + len(groups), len(groups))
    return document.with_paths(merged_paths), merged_count
