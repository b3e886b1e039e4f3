"""Math helpers: angles, rounding, rotation. No engine imports."""

from __future__ import annotations

import math

from vectoredit.models.svg_document import Point


def turn_angle_deg(u: tuple[float, float], v: tuple[float, float]) -> float:
    """Angle between two unit vectors in degrees via acos(dot)."""
    dot = u[0] * v[0] + u[1] * v[1]
    dot = max(-1.0, min(1.0, dot))
    return math.degrees(math.acos(dot))


def signed_angle_deg(u: tuple[float, float], v: tuple[float, float]) -> float:
    """Signed angle from u to v in degrees via atan2(cross, dot)."""
    cross = u[0] * v[1] - u[1] * v[0]
    dot = u[0] * v[0] + u[1] * v[1]
    return math.degrees(math.atan2(cross, dot))


def round_coord(value: float, places: int = 3) -> float:
    """Round for output. NaN and infinities become 0."""
    if not math.isfinite(value):
        return 0.0
    factor = 10**places
    # Ties round toward +inf, not to even
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Shortest decimal text for an already rounded coordinate."""
    if value == 0:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def rotate_point(p: Point, angle_deg: float, center: Point | None = None) -> Point:
    center = center or Point(0.0, 0.0)
    rad = math.radians(angle_deg)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    dx = p.x - center.x
    dy = p.y - center.y
    return Point(center.x + dx * cos_a - dy * sin_a, center.y + dx * sin_a + dy * cos_a)


def translate_point(p: Point, dx: float, dy: float) -> Point:
    return Point(p.x + dx, p.y + dy)
