"""Write path data and standalone SVG documents from the path model."""

from __future__ import annotations

from typing import Sequence
from xml.sax.saxutils import quoteattr

from vectoredit.models.svg_document import (
    ArcTo,
    Close,
    CubicBezier,
    Document,
    LineTo,
    MoveTo,
    Path,
    QuadraticBezier,
    Segment,
)
from vectoredit.utils.math_helpers import format_number, round_coord


def _r(value: float) -> float:
    return round_coord(value, 3)


def _n(value: float) -> str:
    return format_number(_r(value))


def segments_to_path_data(segments: Sequence[Segment]) -> str:
    """Serialize segments as absolute commands rounded to 3 decimals.

    A MoveTo that would not change the current point is elided. After a Close
    the current point is the owning MoveTo's start.
    """
    commands: list[str] = []
    last: tuple[float, float] | None = None

    for i, seg in enumerate(segments):
        if isinstance(seg, MoveTo):
            here = (_r(seg.start.x), _r(seg.start.y))
            if i > 0 and last is not None and here == last:
                continue
            commands.append(f"M {_n(seg.start.x)} {_n(seg.start.y)}")
        elif isinstance(seg, LineTo):
            commands.append(f"L {_n(seg.end.x)} {_n(seg.end.y)}")
        elif isinstance(seg, CubicBezier):
            commands.append(
                f"C {_n(seg.c1.x)} {_n(seg.c1.y)} {_n(seg.c2.x)} {_n(seg.c2.y)} {_n(seg.end.x)} {_n(seg.end.y)}"
            )
        elif isinstance(seg, QuadraticBezier):
            commands.append(f"Q {_n(seg.control.x)} {_n(seg.control.y)} {_n(seg.end.x)} {_n(seg.end.y)}")
        elif isinstance(seg, ArcTo):
            a = seg.arc
            commands.append(
                f"A {_n(a.rx)} {_n(a.ry)} {_n(a.rotation)} {int(a.large_arc)} {int(a.sweep)} "
                f"{_n(seg.end.x)} {_n(seg.end.y)}"
            )
        elif isinstance(seg, Close):
            commands.append("Z")
            for j in range(i, -1, -1):
                if isinstance(segments[j], MoveTo):
                    m = segments[j].start
                    last = (_r(m.x), _r(m.y))
                    break
            continue
        else:
            raise TypeError(f"Unknown segment type: {type(seg).__name__}")
        last = (_r(seg.end.x), _r(seg.end.y))

    # A MoveTo with nothing drawn after it is a no-op
    while len(commands) > 1 and commands[-1].startswith("M "):
        commands.pop()
    return " ".join(commands)


def _path_attrs(path: Path) -> list[tuple[str, str]]:
    attrs: list[tuple[str, str]] = [("id", path.id), ("d", path.d)]
    optional = [
        ("fill", path.fill),
        ("stroke", path.stroke),
        ("stroke-width", path.stroke_width),
        ("opacity", path.opacity),
        ("fill-opacity", path.fill_opacity),
        ("stroke-opacity", path.stroke_opacity),
        ("transform", path.transform),
    ]
    for name, value in optional:
        if value is None:
            continue
        attrs.append((name, value if isinstance(value, str) else format_number(value)))
    return attrs


def export_svg(document: Document) -> str:
    """Standalone SVG markup containing one <path> per document path."""
    head = (
        '<svg version="1.1" xmlns="http://www.w3.org/2000/svg" '
        f'width="{format_number(document.width)}" height="{format_number(document.height)}"'
    )
    vb = document.view_box
    if vb is not None:
        head += f' viewBox="{" ".join(format_number(v) for v in vb.as_tuple())}"'
    lines = [head + ">"]
    for path in document.paths:
        attr_str = " ".join(f"{k}={quoteattr(v)}" for k, v in _path_attrs(path))
        lines.append(f"  <path {attr_str}/>")
    lines.append("</svg>")
    return "\n".join(lines)
