"""Polyline reduction: Visvalingam-Whyatt."""

from __future__ import annotations

import heapq

import numpy as np
from numpy.typing import NDArray

from vectoredit.utils.geometry import triangle_areas


def _area(a: NDArray[np.float64], b: NDArray[np.float64], c: NDArray[np.float64]) -> float:
    return 0.5 * abs((b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1]))


def visvalingam_whyatt(
    points: NDArray[np.float64],
    min_area: float,
) -> NDArray[np.float64]:
    """Visvalingam-Whyatt line simplification.

    Repeatedly drops the interior point whose triangle with its two live
    neighbours has the smallest area, until every remaining triangle is at
    least ``min_area``. The first and last points are never removed, so a
    closed ring passed with its closing point repeated stays closed.
    """
    n = len(points)
    if n <= 2:
        return points.copy()

    prev = list(range(-1, n - 1))
    nxt = list(range(1, n + 1))
    removed = np.zeros(n, dtype=bool)

    areas = np.full(n, np.inf)
    areas[1:-1] = triangle_areas(points)
    heap = [(float(areas[i]), i) for i in range(1, n - 1)]
    heapq.heapify(heap)

    while heap:
        area, i = heapq.heappop(heap)
        if removed[i] or area != areas[i]:
            # Stale entry
            continue
        if area >= min_area:
            break
        removed[i] = True
        p, q = prev[i], nxt[i]
        nxt[p] = q
        prev[q] = p
        for j in (p, q):
            if 0 < j < n - 1:
                # Never let a neighbour's area drop below the one just removed
                new_area = max(_area(points[prev[j]], points[j], points[nxt[j]]), area)
                areas[j] = new_area
                heapq.heappush(heap, (new_area, j))

    return points[~removed]
