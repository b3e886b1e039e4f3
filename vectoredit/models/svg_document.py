"""Core path model: points, segment variants, paths and documents.

Every type here is immutable. Operations that "change" a path build a new one
with ``dataclasses.replace``; a path's serialized ``d`` string is always derived
from its segments so the two can never disagree.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, replace
from typing import Callable, ClassVar, Iterator, Union


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    __rmul__ = __mul__

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class ArcParams:
    """Elliptical arc parameters kept for round-trip output."""

    rx: float
    ry: float
    rotation: float
    large_arc: bool
    sweep: bool


@dataclass(frozen=True)
class MoveTo:
    start: Point
    end: Point
    command: ClassVar[str] = "M"

    @property
    def controls(self) -> tuple[Point, ...]:
        return ()

    def with_controls(self, controls: tuple[Point, ...]) -> MoveTo:
        return self


@dataclass(frozen=True)
class LineTo:
    start: Point
    end: Point
    command: ClassVar[str] = "L"

    @property
    def controls(self) -> tuple[Point, ...]:
        return ()

    def with_controls(self, controls: tuple[Point, ...]) -> LineTo:
        return self


@dataclass(frozen=True)
class CubicBezier:
    start: Point
    c1: Point
    c2: Point
    end: Point
    command: ClassVar[str] = "C"

    @property
    def controls(self) -> tuple[Point, ...]:
        return (self.c1, self.c2)

    def with_controls(self, controls: tuple[Point, ...]) -> CubicBezier:
        return replace(self, c1=controls[0], c2=controls[1])


@dataclass(frozen=True)
class QuadraticBezier:
    start: Point
    control: Point
    end: Point
    command: ClassVar[str] = "Q"

    @property
    def controls(self) -> tuple[Point, ...]:
        return (self.control,)

    def with_controls(self, controls: tuple[Point, ...]) -> QuadraticBezier:
        return replace(self, control=controls[0])


@dataclass(frozen=True)
class ArcTo:
    """An elliptical arc that has not been normalized to cubics.

    Only produced by ``parse_path_data(..., keep_arcs=True)``; geometry
    operations call ``normalize_arcs`` first.
    """

    start: Point
    end: Point
    arc: ArcParams
    command: ClassVar[str] = "A"

    @property
    def controls(self) -> tuple[Point, ...]:
        return ()

    def with_controls(self, controls: tuple[Point, ...]) -> ArcTo:
        return self


@dataclass(frozen=True)
class Close:
    """Close the subpath; ``end`` is the subpath's MoveTo point."""

    start: Point
    end: Point
    command: ClassVar[str] = "Z"

    @property
    def controls(self) -> tuple[Point, ...]:
        return ()

    def with_controls(self, controls: tuple[Point, ...]) -> Close:
        return self


Segment = Union[MoveTo, LineTo, CubicBezier, QuadraticBezier, ArcTo, Close]


def segment_points(seg: Segment) -> list[Point]:
    """All points of a segment in order: start, controls, end."""
    return [seg.start, *seg.controls, seg.end]


def map_segment(seg: Segment, fn: Callable[[Point], Point]) -> Segment:
    """Apply ``fn`` to every point of a segment. Arcs must be normalized first."""
    if isinstance(seg, ArcTo):
        raise TypeError("map_segment needs arc-normalized segments")
    moved = replace(seg, start=fn(seg.start), end=fn(seg.end))
    if seg.controls:
        moved = moved.with_controls(tuple(fn(c) for c in seg.controls))
    return moved


def segment_is_finite(seg: Segment) -> bool:
    return all(p.is_finite() for p in segment_points(seg))


@dataclass(frozen=True)
class Path:
    id: str
    segments: tuple[Segment, ...] = ()
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None
    opacity: float | None = None
    fill_opacity: float | None = None
    stroke_opacity: float | None = None
    # Raw transform expression, e.g. "translate(10 5) rotate(45)"
    transform: str | None = None

    @property
    def d(self) -> str:
        from vectoredit.svg.serializer import segments_to_path_data

        return segments_to_path_data(self.segments)

    def with_segments(self, segments: list[Segment] | tuple[Segment, ...]) -> Path:
        return replace(self, segments=tuple(segments))


@dataclass(frozen=True)
class ViewBox:
    x: float
    y: float
    width: float
    height: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Document:
    width: float
    height: float
    view_box: ViewBox | None = None
    # Paint order: first path is drawn first
    paths: tuple[Path, ...] = field(default_factory=tuple)

    def get_path(self, path_id: str) -> Path:
        for p in self.paths:
            if p.id == path_id:
                return p
        raise KeyError(path_id)

    def with_paths(self, paths: list[Path] | tuple[Path, ...]) -> Document:
        return replace(self, paths=tuple(paths))

    def replace_path(self, path: Path) -> Document:
        return self.with_paths([path if p.id == path.id else p for p in self.paths])


class PointKind(str, enum.Enum):
    ANCHOR = "anchor"
    CONTROL = "control"


@dataclass(frozen=True)
class ControlPoint:
    """Read-through view of one editable point of a path.

    point_index: 0 = segment start anchor, -1 = segment end anchor,
    1..n = the segment's n control handles.
    """

    path_id: str
    segment_index: int
    point_index: int
    point: Point
    kind: PointKind


def iter_control_points(path: Path) -> Iterator[ControlPoint]:
    """Yield the editable points of a path, recomputed from its segments."""
    for i, seg in enumerate(path.segments):
        if i == 0:
            yield ControlPoint(path.id, 0, 0, seg.start, PointKind.ANCHOR)
        for j, c in enumerate(seg.controls, start=1):
            yield ControlPoint(path.id, i, j, c, PointKind.CONTROL)
        if not isinstance(seg, Close):
            yield ControlPoint(path.id, i, -1, seg.end, PointKind.ANCHOR)
