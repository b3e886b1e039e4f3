"""SVG parser: document container via ElementTree, path data via a tokenizer.

Converts raw SVG text into a Document whose paths are already baked into
world coordinates (group and element transforms applied).
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from typing import Iterable

from vectoredit.errors import InvalidCommand, MalformedDocument
from vectoredit.models.svg_document import (
    ArcParams,
    ArcTo,
    Close,
    CubicBezier,
    Document,
    LineTo,
    MoveTo,
    Path,
    Point,
    QuadraticBezier,
    Segment,
    ViewBox,
)
from vectoredit.svg import primitives
from vectoredit.svg.transform import bake_path, compose_transforms

logger = logging.getLogger(__name__)

# Sign, decimal point and exponent act as implicit separators: "1-2.4-3" -> 1, -2.4, -3
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
# Any letter except e/E starts a command
_COMMAND_RE = re.compile(r"([a-df-zA-DF-Z])([^a-df-zA-DF-Z]*)")
_ARC_FLAG_RE = re.compile(r"[\s,]*([01])")
_ARC_NUMBER_RE = re.compile(r"[\s,]*(" + _NUMBER_RE.pattern + ")")

# Coordinates consumed per repetition of each command
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

_SHAPE_TAGS = {"path", "circle", "ellipse", "rect", "line", "polygon", "polyline"}
# Subtrees that define reusable content rather than drawn shapes
_NON_RENDERED = {"defs", "clipPath", "mask", "symbol", "pattern", "marker", "linearGradient", "radialGradient"}

_PRESENTATION_ATTRS = ("fill", "stroke", "stroke-width", "opacity", "fill-opacity", "stroke-opacity")
_INHERITED_ATTRS = ("fill", "stroke", "stroke-width", "fill-opacity", "stroke-opacity")

_DEFAULT_SIZE = 400.0


# ---------------------------------------------------------------------------
# Path data
# ---------------------------------------------------------------------------


def _scan_arc_args(body: str) -> list[float]:
    """Arc arguments, allowing packed flags such as ``a1 1 0 011 1``."""
    values: list[float] = []
    pos = 0
    kinds = ("n", "n", "n", "f", "f", "n", "n")
    while True:
        group: list[float] = []
        for kind in kinds:
            m = (_ARC_FLAG_RE if kind == "f" else _ARC_NUMBER_RE).match(body, pos)
            if m is None:
                break
            group.append(float(m.group(1)))
            pos = m.end()
        if len(group) < len(kinds):
            values.extend(group)
            return values
        values.extend(group)


def _tokenize(body: str, command: str) -> list[float]:
    if command == "A":
        return _scan_arc_args(body)
    return [float(tok) for tok in _NUMBER_RE.findall(body)]


def _split_commands(d: str) -> Iterable[tuple[str, str]]:
    for m in _COMMAND_RE.finditer(d):
        yield m.group(1), m.group(2)


def parse_path_data(d: str, *, keep_arcs: bool = False, strict: bool = False) -> list[Segment]:
    """Convert path data into absolute segments.

    H/V become lines, S/T become full curves, and arcs become cubic curves
    unless ``keep_arcs`` is set. Malformed commands are logged and skipped; with
    ``strict`` they raise InvalidCommand instead.
    """
    segments: list[Segment] = []
    current = Point(0.0, 0.0)
    subpath_start = Point(0.0, 0.0)
    # Last second handle of a C/S and last handle of a Q/T, for reflection
    last_cubic: Point | None = None
    last_quad: Point | None = None

    for letter, body in _split_commands(d or ""):
        cmd = letter.upper()
        relative = letter != cmd
        try:
            if cmd not in _ARITY:
                raise InvalidCommand(letter)
            coords = _tokenize(body, cmd)
            arity = _ARITY[cmd]
            if arity and (not coords or len(coords) % arity):
                usable = len(coords) - len(coords) % arity
                problem = InvalidCommand(letter, f"Truncated {letter!r} command: {len(coords)} values")
                if strict or usable == 0:
                    raise problem
                logger.warning("%s; using first %d", problem, usable)
                coords = coords[:usable]
        except InvalidCommand as e:
            if strict:
                raise
            logger.warning("Skipping path command: %s", e)
            continue

        def pt(x: float, y: float, origin: Point) -> Point:
            return Point(origin.x + x, origin.y + y) if relative else Point(x, y)

        if cmd == "Z":
            segments.append(Close(current, subpath_start))
            current = subpath_start
            last_cubic = last_quad = None
            continue

        for i in range(0, len(coords), arity):
            args = coords[i : i + arity]
            if cmd == "M" and i == 0:
                current = pt(args[0], args[1], current)
                subpath_start = current
                segments.append(MoveTo(current, current))
                last_cubic = last_quad = None
            elif cmd in ("M", "L"):
                # Extra M pairs are implicit line-tos
                end = pt(args[0], args[1], current)
                segments.append(LineTo(current, end))
                current = end
                last_cubic = last_quad = None
            elif cmd == "H":
                end = Point(current.x + args[0] if relative else args[0], current.y)
                segments.append(LineTo(current, end))
                current = end
                last_cubic = last_quad = None
            elif cmd == "V":
                end = Point(current.x, current.y + args[0] if relative else args[0])
                segments.append(LineTo(current, end))
                current = end
                last_cubic = last_quad = None
            elif cmd in ("C", "S"):
                if cmd == "C":
                    c1 = pt(args[0], args[1], current)
                    rest = args[2:]
                elif last_cubic is not None:
                    c1 = Point(2 * current.x - last_cubic.x, 2 * current.y - last_cubic.y)
                    rest = args
                else:
                    c1 = current
                    rest = args
                c2 = pt(rest[0], rest[1], current)
                end = pt(rest[2], rest[3], current)
                segments.append(CubicBezier(current, c1, c2, end))
                current = end
                last_cubic, last_quad = c2, None
            elif cmd in ("Q", "T"):
                if cmd == "Q":
                    c = pt(args[0], args[1], current)
                    end = pt(args[2], args[3], current)
                else:
                    c = (
                        Point(2 * current.x - last_quad.x, 2 * current.y - last_quad.y)
                        if last_quad is not None
                        else current
                    )
                    end = pt(args[0], args[1], current)
                segments.append(QuadraticBezier(current, c, end))
                current = end
                last_cubic, last_quad = None, c
            elif cmd == "A":
                end = pt(args[5], args[6], current)
                params = ArcParams(abs(args[0]), abs(args[1]), args[2], bool(args[3]), bool(args[4]))
                arc = ArcTo(current, end, params)
                if keep_arcs:
                    segments.append(arc)
                else:
                    segments.extend(arc_to_cubics(arc))
                current = end
                last_cubic = last_quad = None

    # Data that does not open with a moveto starts drawing at the origin
    if segments and not isinstance(segments[0], MoveTo):
        origin = segments[0].start
        segments.insert(0, MoveTo(origin, origin))
    return segments


def arc_to_cubics(arc: ArcTo) -> list[CubicBezier]:
    """Endpoint-parametrized elliptical arc to at most 90-degree cubic pieces.

    A zero radius or coincident endpoints yield one straight cubic whose
    handles sit on its endpoints.
    """
    p1, p2 = arc.start, arc.end
    rx, ry = abs(arc.arc.rx), abs(arc.arc.ry)
    if rx == 0 or ry == 0 or (p1.x == p2.x and p1.y == p2.y):
        return [CubicBezier(p1, p1, p2, p2)]

    rad = math.radians(arc.arc.rotation)
    cos_r, sin_r = math.cos(rad), math.sin(rad)

    dx = (p1.x - p2.x) / 2
    dy = (p1.y - p2.y) / 2
    x1p = cos_r * dx + sin_r * dy
    y1p = -sin_r * dx + cos_r * dy

    # Scale radii up when the ellipse cannot reach both endpoints
    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        rx *= math.sqrt(lam)
        ry *= math.sqrt(lam)

    sign = 1.0 if arc.arc.large_arc != arc.arc.sweep else -1.0
    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = sign * math.sqrt(max(0.0, num / den))
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    cx = cos_r * cxp - sin_r * cyp + (p1.x + p2.x) / 2
    cy = sin_r * cxp + cos_r * cyp + (p1.y + p2.y) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    d_theta = theta2 - theta1
    if arc.arc.sweep and d_theta < 0:
        d_theta += 2 * math.pi
    elif not arc.arc.sweep and d_theta > 0:
        d_theta -= 2 * math.pi

    n = max(1, math.ceil(abs(d_theta) / (math.pi / 2) - 1e-9))
    delta = d_theta / n
    alpha = math.sin(delta) * (math.sqrt(4 + 3 * math.tan(delta / 2) ** 2) - 1) / 3

    def ellipse_point(ux: float, uy: float) -> Point:
        return Point(cos_r * rx * ux - sin_r * ry * uy + cx, sin_r * rx * ux + cos_r * ry * uy + cy)

    result: list[CubicBezier] = []
    start = p1
    for i in range(n):
        t0 = theta1 + delta * i
        t1 = t0 + delta
        cos0, sin0 = math.cos(t0), math.sin(t0)
        cos1, sin1 = math.cos(t1), math.sin(t1)
        c1 = ellipse_point(cos0 - sin0 * alpha, sin0 + cos0 * alpha)
        c2 = ellipse_point(cos1 + sin1 * alpha, sin1 - cos1 * alpha)
        end = p2 if i == n - 1 else ellipse_point(cos1, sin1)
        result.append(CubicBezier(start, c1, c2, end))
        start = end
    return result


def normalize_arcs(segments: Iterable[Segment]) -> list[Segment]:
    """Replace every ArcTo with its cubic approximation."""
    out: list[Segment] = []
    for seg in segments:
        if isinstance(seg, ArcTo):
            out.extend(arc_to_cubics(seg))
        else:
            out.append(seg)
    return out


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def _local(tag: str) -> str:
    """Strip the XML namespace: '{http://www.w3.org/2000/svg}path' -> 'path'."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _float(value: str | None, default: float = 0.0) -> float:
    if value is None:
        return default
    m = _NUMBER_RE.search(value)
    return float(m.group(0)) if m else default


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    m = _NUMBER_RE.search(value)
    return float(m.group(0)) if m else None


def _style_attrs(el: ET.Element) -> dict[str, str]:
    """Presentation attributes of an element; inline style wins over attributes."""
    attrs = {k: el.attrib[k] for k in _PRESENTATION_ATTRS if k in el.attrib}
    style = el.attrib.get("style", "")
    for decl in style.split(";"):
        if ":" not in decl:
            continue
        key, value = (part.strip() for part in decl.split(":", 1))
        if key in _PRESENTATION_ATTRS and value:
            attrs[key] = value
    return attrs


def parse_view_box(text: str | None) -> ViewBox | None:
    if not text:
        return None
    nums = [float(n) for n in _NUMBER_RE.findall(text)]
    if len(nums) < 4:
        logger.warning("Ignoring malformed viewBox %r", text)
        return None
    return ViewBox(*nums[:4])


def _shape_path_data(tag: str, el: ET.Element) -> str:
    a = el.attrib
    if tag == "path":
        return a.get("d", "")
    if tag == "circle":
        return primitives.circle_path_data(_float(a.get("cx")), _float(a.get("cy")), _float(a.get("r")))
    if tag == "ellipse":
        return primitives.ellipse_path_data(
            _float(a.get("cx")), _float(a.get("cy")), _float(a.get("rx")), _float(a.get("ry"))
        )
    if tag == "rect":
        return primitives.rect_path_data(
            _float(a.get("x")),
            _float(a.get("y")),
            _float(a.get("width")),
            _float(a.get("height")),
            _optional_float(a.get("rx")),
            _optional_float(a.get("ry")),
        )
    if tag == "line":
        return primitives.line_path_data(
            _float(a.get("x1")), _float(a.get("y1")), _float(a.get("x2")), _float(a.get("y2"))
        )
    coords = [float(n) for n in _NUMBER_RE.findall(a.get("points", ""))]
    return primitives.poly_path_data(coords, closed=(tag == "polygon"))


def _build_path(tag: str, el: ET.Element, index: int, inherited: dict[str, str], transform: str | None) -> Path:
    attrs = {**inherited, **_style_attrs(el)}
    d = _shape_path_data(tag, el)
    return Path(
        id=el.attrib.get("id") or f"{tag}-{index}",
        segments=tuple(parse_path_data(d)),
        fill=attrs.get("fill"),
        stroke=attrs.get("stroke"),
        stroke_width=_optional_float(attrs.get("stroke-width")),
        opacity=_optional_float(attrs.get("opacity")),
        fill_opacity=_optional_float(attrs.get("fill-opacity")),
        stroke_opacity=_optional_float(attrs.get("stroke-opacity")),
        transform=transform,
    )


def _find_svg_root(root: ET.Element) -> ET.Element | None:
    if _local(root.tag) == "svg":
        return root
    for el in root.iter():
        if _local(el.tag) == "svg":
            return el
    return None


def parse_svg(svg_text: str) -> Document:
    """Parse raw SVG text into a Document of baked paths.

    Raises MalformedDocument when the text is not XML or has no <svg> element.
    """
    try:
        root = ET.fromstring(svg_text.strip())
    except ET.ParseError as e:
        raise MalformedDocument(f"Unreadable SVG: {e}") from e

    svg = _find_svg_root(root)
    if svg is None:
        raise MalformedDocument("No <svg> element found")

    view_box = parse_view_box(svg.attrib.get("viewBox"))
    width = _optional_float(svg.attrib.get("width"))
    height = _optional_float(svg.attrib.get("height"))
    if width is None:
        width = view_box.width if view_box else _DEFAULT_SIZE
    if height is None:
        height = view_box.height if view_box else _DEFAULT_SIZE

    paths: list[Path] = []

    def walk(node: ET.Element, inherited: dict[str, str], group_transform: str | None) -> None:
        for child in node:
            tag = _local(child.tag)
            if tag in _NON_RENDERED:
                continue
            if tag in _SHAPE_TAGS:
                transform = compose_transforms(group_transform, child.attrib.get("transform"))
                path = _build_path(tag, child, len(paths), inherited, transform)
                paths.append(bake_path(path))
            elif tag in ("g", "a", "switch"):
                own = _style_attrs(child)
                passed = {**inherited, **{k: v for k, v in own.items() if k in _INHERITED_ATTRS}}
                walk(child, passed, compose_transforms(group_transform, child.attrib.get("transform")))

    root_attrs = {k: v for k, v in _style_attrs(svg).items() if k in _INHERITED_ATTRS}
    walk(svg, root_attrs, None)

    logger.info("Parsed SVG: %d paths, canvas %.0f×%.0f", len(paths), width, height)
    return Document(width=width, height=height, view_box=view_box, paths=tuple(paths))
