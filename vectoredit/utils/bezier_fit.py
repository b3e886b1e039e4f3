"""Error-bounded cubic Bezier fitting (Schneider's method).

Fits a chain of cubics to an ordered polyline so that no input point lies
further than ``tolerance`` from the curve:

1. Chord-length parameterize the points.
2. Least-squares solve for the two handle lengths along fixed end tangents.
3. If the worst point is close, Newton-Raphson reparameterize and retry.
4. Otherwise split at the worst point and fit both halves recursively.

A run that turns through more than ``max_turn_deg`` is split at half its
turning first, so a full circle comes back as four quarter arcs.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from vectoredit.errors import CurveFitFailure
from vectoredit.models.svg_document import CubicBezier, Point

_EPS = 1e-12


def _unit(v: NDArray[np.float64]) -> NDArray[np.float64] | None:
    n = float(np.hypot(v[0], v[1]))
    if n < _EPS or not math.isfinite(n):
        return None
    return v / n


def _dedupe(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Drop consecutive duplicates, keeping both endpoints exactly."""
    if len(points) <= 2:
        return points
    step = np.hypot(*np.diff(points, axis=0).T)
    keep = np.concatenate([[True], step > _EPS])
    out = points[keep]
    if not np.array_equal(out[-1], points[-1]):
        out[-1] = points[-1]
    return out


def _chord_params(points: NDArray[np.float64]) -> NDArray[np.float64]:
    chords = np.hypot(*np.diff(points, axis=0).T)
    total = chords.sum()
    if total < _EPS:
        raise CurveFitFailure("run has zero length")
    u = np.zeros(len(points))
    u[1:] = np.cumsum(chords) / total
    u[-1] = 1.0
    return u


def _bezier_eval(bez: NDArray[np.float64], u: NDArray[np.float64]) -> NDArray[np.float64]:
    mt = 1 - u
    return (
        (mt**3)[:, None] * bez[0]
        + (3 * mt * mt * u)[:, None] * bez[1]
        + (3 * mt * u * u)[:, None] * bez[2]
        + (u**3)[:, None] * bez[3]
    )


def _generate_bezier(
    points: NDArray[np.float64],
    u: NDArray[np.float64],
    tan1: NDArray[np.float64],
    tan2: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Least-squares handle lengths along the given end tangents."""
    p0, p3 = points[0], points[-1]
    mt = 1 - u
    b0 = mt**3
    b1 = 3 * mt * mt * u
    b2 = 3 * mt * u * u
    b3 = u**3

    a1 = b1[:, None] * tan1
    a2 = b2[:, None] * tan2
    tmp = points - (b0 + b1)[:, None] * p0 - (b2 + b3)[:, None] * p3

    c00 = float(np.sum(a1 * a1))
    c01 = float(np.sum(a1 * a2))
    c11 = float(np.sum(a2 * a2))
    x0 = float(np.sum(a1 * tmp))
    x1 = float(np.sum(a2 * tmp))

    det = c00 * c11 - c01 * c01
    if abs(det) > _EPS:
        alpha1 = (x0 * c11 - x1 * c01) / det
        alpha2 = (c00 * x1 - c01 * x0) / det
    else:
        # Under-determined: assume equal handle lengths
        c0 = c00 + c01
        c1 = c01 + c11
        if abs(c0) > _EPS:
            alpha1 = alpha2 = x0 / c0
        elif abs(c1) > _EPS:
            alpha1 = alpha2 = x1 / c1
        else:
            alpha1 = alpha2 = 0.0

    seg_len = float(np.hypot(*(p3 - p0)))
    eps = 1e-6 * seg_len
    if alpha1 < eps or alpha2 < eps:
        # Wu/Barsky heuristic
        alpha1 = alpha2 = seg_len / 3

    return np.array([p0, p0 + tan1 * alpha1, p3 + tan2 * alpha2, p3])


def _max_error(
    points: NDArray[np.float64],
    bez: NDArray[np.float64],
    u: NDArray[np.float64],
) -> tuple[float, int]:
    dist = np.hypot(*(_bezier_eval(bez, u) - points).T)
    idx = int(np.argmax(dist))
    split = max(1, min(idx, len(points) - 2))
    return float(dist[idx]), split


def _reparameterize(
    points: NDArray[np.float64],
    bez: NDArray[np.float64],
    u: NDArray[np.float64],
) -> NDArray[np.float64]:
    """One Newton-Raphson step per point towards its closest curve parameter."""
    d1 = 3 * np.diff(bez, axis=0)
    d2 = 2 * np.diff(d1, axis=0)
    mt = 1 - u

    q = _bezier_eval(bez, u)
    q1 = (mt * mt)[:, None] * d1[0] + (2 * mt * u)[:, None] * d1[1] + (u * u)[:, None] * d1[2]
    q2 = mt[:, None] * d2[0] + u[:, None] * d2[1]

    diff = q - points
    num = np.sum(diff * q1, axis=1)
    den = np.sum(q1 * q1, axis=1) + np.sum(diff * q2, axis=1)
    step = np.divide(num, den, out=np.zeros_like(num), where=np.abs(den) > _EPS)
    return np.clip(u - step, 0.0, 1.0)


def _fit(
    points: NDArray[np.float64],
    tan1: NDArray[np.float64],
    tan2: NDArray[np.float64],
    tolerance: float,
    max_iterations: int,
) -> list[NDArray[np.float64]]:
    if len(points) == 2:
        dist = float(np.hypot(*(points[1] - points[0]))) / 3
        return [np.array([points[0], points[0] + tan1 * dist, points[1] + tan2 * dist, points[1]])]

    u = _chord_params(points)
    bez = _generate_bezier(points, u, tan1, tan2)
    err, split = _max_error(points, bez, u)
    if err <= tolerance:
        return [bez]

    # Close enough that reparameterization may converge
    if err < tolerance * 4:
        for _ in range(max_iterations):
            u_new = _reparameterize(points, bez, u)
            if not np.all(np.isfinite(u_new)):
                break
            u = u_new
            bez = _generate_bezier(points, u, tan1, tan2)
            err, split = _max_error(points, bez, u)
            if err <= tolerance:
                return [bez]

    center = _unit(points[split - 1] - points[split + 1])
    if center is None:
        center = _unit(points[split] - points[split + 1])
    if center is None:
        raise CurveFitFailure("cannot estimate tangent at split point")

    left = _fit(points[: split + 1], tan1, center, tolerance, max_iterations)
    right = _fit(points[split:], -center, tan2, tolerance, max_iterations)
    return left + right


def _turn_split(points: NDArray[np.float64], max_turn: float) -> int | None:
    """Index at half the run's total turning, or None when it turns little."""
    if len(points) < 4:
        return None
    d = np.diff(points, axis=0)
    heading = np.arctan2(d[:, 1], d[:, 0])
    turns = np.abs((np.diff(heading) + np.pi) % (2 * np.pi) - np.pi)
    total = float(turns.sum())
    if total <= max_turn:
        return None
    # turns[k] sits at vertex k + 1
    idx = int(np.searchsorted(np.cumsum(turns), total / 2)) + 1
    return max(1, min(idx, len(points) - 2))


def _tangent_at(points: NDArray[np.float64], i: int) -> NDArray[np.float64]:
    t = _unit(points[i + 1] - points[i - 1])
    if t is None:
        t = _unit(points[i + 1] - points[i])
    if t is None:
        raise CurveFitFailure("cannot estimate tangent at turning split")
    return t


def fit_cubics(
    points: NDArray[np.float64],
    tolerance: float,
    *,
    left_tangent: NDArray[np.float64] | None = None,
    right_tangent: NDArray[np.float64] | None = None,
    max_turn_deg: float = 100.0,
    max_iterations: int = 4,
) -> list[CubicBezier]:
    """Fit cubics to ``points`` within ``tolerance``.

    ``left_tangent`` points from the first point into the curve and
    ``right_tangent`` from the last point back into it; both default to the
    direction of the neighbouring point. The first cubic starts exactly on
    ``points[0]`` and the last ends exactly on ``points[-1]``.

    Raises CurveFitFailure when the run is degenerate or the fit produces
    non-finite coordinates.
    """
    pts = _dedupe(np.asarray(points, dtype=np.float64))
    if len(pts) < 2:
        raise CurveFitFailure("need at least two distinct points")
    if tolerance <= 0 or not math.isfinite(tolerance):
        raise CurveFitFailure(f"invalid tolerance {tolerance}")

    tan1 = left_tangent if left_tangent is not None else _unit(pts[1] - pts[0])
    tan2 = right_tangent if right_tangent is not None else _unit(pts[-2] - pts[-1])
    if tan1 is None or tan2 is None:
        raise CurveFitFailure("zero-length end tangent")

    max_turn = math.radians(max_turn_deg)
    pieces: list[tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]] = []
    stack = [(pts, tan1, tan2)]
    while stack:
        run, t1, t2 = stack.pop()
        split = _turn_split(run, max_turn)
        if split is None:
            pieces.append((run, t1, t2))
            continue
        center = _tangent_at(run, split)
        # Right half first so the left half is processed next
        stack.append((run[split:], center, t2))
        stack.append((run[: split + 1], t1, -center))

    beziers: list[NDArray[np.float64]] = []
    for run, t1, t2 in pieces:
        beziers.extend(_fit(run, t1, t2, tolerance, max_iterations))

    if not all(np.all(np.isfinite(b)) for b in beziers):
        raise CurveFitFailure("fit produced non-finite coordinates")

    result: list[CubicBezier] = []
    for b in beziers:
        p0, p1, p2, p3 = (Point(float(x), float(y)) for x, y in b)
        result.append(CubicBezier(p0, p1, p2, p3))
    return result
