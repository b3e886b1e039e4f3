"""Arc-length measurement over paths, backed by svgpathtools."""

from __future__ import annotations

import math

import svgpathtools as spt

from vectoredit.errors import DegenerateGeometry, InsufficientInput
from vectoredit.models.svg_document import Close, CubicBezier, LineTo, MoveTo, Path, Point, QuadraticBezier
from vectoredit.svg.transform import bake_path


def _c(p: Point) -> complex:
    return complex(p.x, p.y)


def _p(z: complex) -> Point:
    return Point(float(z.real), float(z.imag))


def to_svgpathtools(path: Path) -> spt.Path:
    """Baked path as an svgpathtools Path. Move-tos and zero-length pieces are dropped."""
    pieces = []
    for seg in bake_path(path).segments:
        if isinstance(seg, MoveTo) or (seg.start == seg.end and not seg.controls):
            continue
        if isinstance(seg, (LineTo, Close)):
            pieces.append(spt.Line(_c(seg.start), _c(seg.end)))
        elif isinstance(seg, CubicBezier):
            pieces.append(spt.CubicBezier(_c(seg.start), _c(seg.c1), _c(seg.c2), _c(seg.end)))
        elif isinstance(seg, QuadraticBezier):
            pieces.append(spt.QuadraticBezier(_c(seg.start), _c(seg.control), _c(seg.end)))
    return spt.Path(*pieces)


def path_length(path: Path) -> float:
    sp = to_svgpathtools(path)
    return float(sp.length()) if len(sp) else 0.0


def _param_at_length(sp: spt.Path, s: float) -> float:
    total = sp.length()
    if s <= 0:
        return 0.0
    if s >= total:
        return 1.0
    return float(sp.ilength(s))


def point_at_length(path: Path, s: float) -> Point:
    """Point at arc length ``s`` from the start, clamped to the path."""
    sp = to_svgpathtools(path)
    if not len(sp):
        if not path.segments:
            raise InsufficientInput(f"Path {path.id!r} has no segments")
        return bake_path(path).segments[0].start
    return _p(sp.point(_param_at_length(sp, s)))


def tangent_at_length(path: Path, s: float) -> tuple[float, float]:
    """Unit tangent at arc length ``s``."""
    sp = to_svgpathtools(path)
    if not len(sp):
        raise DegenerateGeometry(f"Path {path.id!r} has zero length")
    try:
        z = sp.unit_tangent(_param_at_length(sp, s))
    except (ValueError, ZeroDivisionError) as e:
        raise DegenerateGeometry(str(e)) from e
    if not (math.isfinite(z.real) and math.isfinite(z.imag)):
        raise DegenerateGeometry("non-finite tangent")
    return float(z.real), float(z.imag)


def normal_at_length(path: Path, s: float) -> tuple[float, float]:
    """Unit normal (tangent rotated +90 degrees) at arc length ``s``."""
    tx, ty = tangent_at_length(path, s)
    return -ty, tx


def sample_path(path: Path, count: int) -> list[Point]:
    """``count`` points evenly spaced by arc length, both ends included."""
    if count < 2:
        raise ValueError("count must be at least 2")
    sp = to_svgpathtools(path)
    if not len(sp):
        return []
    total = sp.length()
    return [_p(sp.point(_param_at_length(sp, total * i / (count - 1)))) for i in range(count)]
