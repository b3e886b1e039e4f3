"""Path grouping by fill-color similarity or spatial proximity.

Both groupings are transitive: a path joins a group when it is within the
threshold of any member, so chains of similar or nearby paths end up together.
That is exactly DBSCAN with min_samples=1, i.e. connected components of the
threshold graph.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist
from shapely.geometry import MultiPoint
from sklearn.cluster import DBSCAN

from vectoredit.models.svg_document import Path
from vectoredit.svg.transform import bake_path
from vectoredit.utils.color import color_similarity

logger = logging.getLogger(__name__)

_MIN_EPS = 1e-12


def _components(distances: NDArray[np.float64], eps: float) -> list[list[int]]:
    """Connected components of ``distances <= eps``, ordered by first member."""
    labels = DBSCAN(eps=max(eps, _MIN_EPS), min_samples=1, metric="precomputed").fit(distances).labels_
    groups: dict[int, list[int]] = {}
    for i, label in enumerate(labels):
        groups.setdefault(int(label), []).append(i)
    return sorted(groups.values(), key=lambda g: g[0])


def path_center(path: Path) -> tuple[float, float] | None:
    """Center of the bounding box of a baked path's segment endpoints."""
    ends = [seg.end.as_tuple() for seg in bake_path(path).segments]
    if not ends:
        return None
    xmin, ymin, xmax, ymax = MultiPoint(ends).bounds
    return ((xmin + xmax) / 2, (ymin + ymax) / 2)


def group_paths_by_color(paths: list[Path], threshold: float = 0.95) -> list[list[Path]]:
    """Groups of two or more filled paths whose fills are at least ``threshold`` similar."""
    filled = [p for p in paths if p.fill]
    if len(filled) < 2:
        return []

    n = len(filled)
    dist = np.zeros((n, n))
    for i in range(n):
        for j in range(i + 1, n):
            d = 1.0 - color_similarity(filled[i].fill, filled[j].fill)
            dist[i, j] = dist[j, i] = d

    groups = [[filled[i] for i in g] for g in _components(dist, 1.0 - threshold) if len(g) > 1]
    logger.debug("Color grouping: %d filled paths → %d groups", n, len(groups))
    return groups


def group_paths_by_proximity(paths: list[Path], threshold: float) -> list[list[Path]]:
    """Partition paths into groups whose centers chain within ``threshold``.

    Every path lands in exactly one group; isolated paths form groups of one.
    """
    if not paths:
        return []

    centers = [path_center(p) for p in paths]
    located = [i for i, c in enumerate(centers) if c is not None]
    groups: list[list[int]] = [[i] for i, c in enumerate(centers) if c is None]

    if located:
        coords = np.array([centers[i] for i in located])
        dist = cdist(coords, coords)
        groups.extend([located[k] for k in g] for g in _components(dist, threshold))

    groups.sort(key=lambda g: g[0])
    logger.debug("Proximity grouping: %d paths → %d groups", len(paths), len(groups))
    return [[paths[i] for i in g] for g in groups]
