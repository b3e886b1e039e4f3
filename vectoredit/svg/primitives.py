"""Basic shape elements expressed as path data.

Each function returns the ``d`` string the shape is equivalent to; the parser
turns it into segments like any other path.
"""

from __future__ import annotations

from vectoredit.utils.math_helpers import format_number

# Cubic handle length for a quarter circle of radius 1
KAPPA = 0.5522847498


def _n(value: float) -> str:
    return format_number(float(value))


def ellipse_path_data(cx: float, cy: float, rx: float, ry: float) -> str:
    """Four cubics starting at the top, clockwise in screen space."""
    kx = KAPPA * rx
    ky = KAPPA * ry
    return " ".join([
        f"M {_n(cx)} {_n(cy - ry)}",
        f"C {_n(cx + kx)} {_n(cy - ry)} {_n(cx + rx)} {_n(cy - ky)} {_n(cx + rx)} {_n(cy)}",
        f"C {_n(cx + rx)} {_n(cy + ky)} {_n(cx + kx)} {_n(cy + ry)} {_n(cx)} {_n(cy + ry)}",
        f"C {_n(cx - kx)} {_n(cy + ry)} {_n(cx - rx)} {_n(cy + ky)} {_n(cx - rx)} {_n(cy)}",
        f"C {_n(cx - rx)} {_n(cy - ky)} {_n(cx - kx)} {_n(cy - ry)} {_n(cx)} {_n(cy - ry)}",
        "Z",
    ])


def circle_path_data(cx: float, cy: float, r: float) -> str:
    return ellipse_path_data(cx, cy, r, r)


def rect_path_data(
    x: float,
    y: float,
    w: float,
    h: float,
    rx: float | None = None,
    ry: float | None = None,
) -> str:
    """Rectangle, with elliptical corners when rx/ry are given.

    A missing radius defaults to the other one; both are clamped to half the
    side they round.
    """
    if rx is None and ry is None:
        rx = ry = 0.0
    elif rx is None:
        rx = ry
    elif ry is None:
        ry = rx
    rx = min(rx, w / 2)
    ry = min(ry, h / 2)

    if rx == 0 and ry == 0:
        return f"M {_n(x)} {_n(y)} H {_n(x + w)} V {_n(y + h)} H {_n(x)} Z"

    arc = f"A {_n(rx)} {_n(ry)} 0 0 1"
    return " ".join([
        f"M {_n(x + rx)} {_n(y)}",
        f"H {_n(x + w - rx)}",
        f"{arc} {_n(x + w)} {_n(y + ry)}",
        f"V {_n(y + h - ry)}",
        f"{arc} {_n(x + w - rx)} {_n(y + h)}",
        f"H {_n(x + rx)}",
        f"{arc} {_n(x)} {_n(y + h - ry)}",
        f"V {_n(y + ry)}",
        f"{arc} {_n(x + rx)} {_n(y)}",
        "Z",
    ])


def line_path_data(x1: float, y1: float, x2: float, y2: float) -> str:
    return f"M {_n(x1)} {_n(y1)} L {_n(x2)} {_n(y2)}"


def poly_path_data(coords: list[float], closed: bool) -> str:
    """Polygon (closed) or polyline (open) from a flat coordinate list.

    An odd trailing coordinate is ignored.
    """
    parts: list[str] = []
    for i in range(0, len(coords) - 1, 2):
        cmd = "M" if i == 0 else "L"
        parts.append(f"{cmd} {_n(coords[i])} {_n(coords[i + 1])}")
    if closed and parts:
        parts.append("Z")
    return " ".join(parts)
