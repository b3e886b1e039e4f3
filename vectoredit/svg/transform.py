"""Affine transform expressions: parse, compose, apply, invert and bake.

Matrices are 3x3 numpy arrays in SVG order::

    | a c e |
    | b d f |
    | 0 0 1 |

Composition is left to right: ``translate(10) scale(2)`` yields T @ S, so the
scale is applied to a point first and the translation second.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from vectoredit.models.svg_document import Path, Point, map_segment

logger = logging.getLogger(__name__)

_FUNC_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Below this determinant a matrix is treated as singular
_SINGULAR_DET = 1e-10

_ARITY = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewx": (1,),
    "skewy": (1,),
}


@dataclass(frozen=True)
class TransformOp:
    """One primitive transform function with its numeric arguments."""

    name: str
    args: tuple[float, ...]

    def matrix(self) -> NDArray[np.float64]:
        return _op_matrix(self)

    def __str__(self) -> str:
        return f"{self.name}({' '.join(_fmt(a) for a in self.args)})"


def _fmt(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_transform(text: str | None) -> list[TransformOp]:
    """Parse a transform attribute into its ordered list of operations.

    Functions with the wrong number of arguments are skipped with a warning.
    """
    if not text:
        return []
    ops: list[TransformOp] = []
    for m in _FUNC_RE.finditer(text):
        name = m.group(1)
        args = tuple(float(n) for n in _NUMBER_RE.findall(m.group(2)))
        if len(args) not in _ARITY[name.lower()]:
            logger.warning("Ignoring %s() with %d arguments", name, len(args))
            continue
        canonical = {"skewx": "skewX", "skewy": "skewY"}.get(name.lower(), name.lower())
        ops.append(TransformOp(canonical, args))
    return ops


def _op_matrix(op: TransformOp) -> NDArray[np.float64]:
    m = np.identity(3)
    args = op.args
    if op.name == "translate":
        m[0, 2] = args[0]
        m[1, 2] = args[1] if len(args) > 1 else 0.0
    elif op.name == "scale":
        m[0, 0] = args[0]
        m[1, 1] = args[1] if len(args) > 1 else args[0]
    elif op.name == "rotate":
        rad = math.radians(args[0])
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        m[0, 0], m[0, 1] = cos_a, -sin_a
        m[1, 0], m[1, 1] = sin_a, cos_a
        if len(args) == 3:
            cx, cy = args[1], args[2]
            pre = np.array([[1, 0, cx], [0, 1, cy], [0, 0, 1]], dtype=np.float64)
            post = np.array([[1, 0, -cx], [0, 1, -cy], [0, 0, 1]], dtype=np.float64)
            m = pre @ m @ post
    elif op.name == "skewX":
        m[0, 1] = math.tan(math.radians(args[0]))
    elif op.name == "skewY":
        m[1, 0] = math.tan(math.radians(args[0]))
    elif op.name == "matrix":
        a, b, c, d, e, f = args
        m = np.array([[a, c, e], [b, d, f], [0, 0, 1]], dtype=np.float64)
    return m


def to_matrix(transform: str | Sequence[TransformOp] | None) -> NDArray[np.float64]:
    """Compose a transform expression (or parsed ops) into one matrix."""
    ops = parse_transform(transform) if isinstance(transform, str) or transform is None else transform
    result = np.identity(3)
    for op in ops:
        result = result @ op.matrix()
    return result


def apply_matrix(point: Point, m: NDArray[np.float64]) -> Point:
    return Point(
        float(m[0, 0] * point.x + m[0, 1] * point.y + m[0, 2]),
        float(m[1, 0] * point.x + m[1, 1] * point.y + m[1, 2]),
    )


def invert_matrix(m: NDArray[np.float64]) -> NDArray[np.float64] | None:
    """Inverse of an affine matrix, or None when it is singular."""
    det = m[0, 0] * m[1, 1] - m[1, 0] * m[0, 1]
    if abs(det) < _SINGULAR_DET:
        return None
    return np.linalg.inv(m)


def apply_transform(point: Point, transform: str | None) -> Point:
    """Map a point from local to world coordinates."""
    if not transform:
        return point
    return apply_matrix(point, to_matrix(transform))


def apply_inverse_transform(point: Point, transform: str | None) -> Point:
    """Map a point from world to local coordinates.

    A singular transform cannot be inverted; the point is returned unchanged.
    """
    if not transform:
        return point
    inv = invert_matrix(to_matrix(transform))
    if inv is None:
        logger.warning("Singular transform, cannot invert: %s", transform)
        return point
    return apply_matrix(point, inv)


def serialize_transform(ops: Sequence[TransformOp]) -> str:
    return " ".join(str(op) for op in ops)


def compose_transforms(*transforms: str | None) -> str | None:
    """Join transform expressions, outermost first. None if all are empty."""
    parts = [t.strip() for t in transforms if t and t.strip()]
    return " ".join(parts) if parts else None


def matrix_to_transform(m: NDArray[np.float64]) -> str:
    return serialize_transform([TransformOp("matrix", (m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2]))])


def bake_path(path: Path) -> Path:
    """Move a path into world coordinates and clear its transform."""
    from vectoredit.svg.parser import normalize_arcs

    segments = normalize_arcs(path.segments)
    if not path.transform:
        if segments == list(path.segments):
            return path
        return path.with_segments(segments)

    m = to_matrix(path.transform)
    baked = [map_segment(seg, lambda p: apply_matrix(p, m)) for seg in segments]
    return replace(path, segments=tuple(baked), transform=None)
