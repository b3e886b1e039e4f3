"""Color parsing and similarity for fill-based grouping."""

from __future__ import annotations

import math
import re

# Max Euclidean distance in RGB space: sqrt(3 * 255^2)
_MAX_RGB_DISTANCE = 441.67

_RGB_RE = re.compile(r"\d+")

# Named colors to hex
_NAMED_COLORS = {
    "black": "#000000", "white": "#ffffff", "red": "#ff0000",
    "green": "#008000", "blue": "#0000ff", "yellow": "#ffff00",
    "gray": "#808080", "grey": "#808080", "orange": "#ffa500",
    "purple": "#800080",
}


def normalize_color(color: str) -> str:
    """Lower-case hex for ``#rgb``, ``#rrggbb``, ``rgb(r, g, b)`` and a few names."""
    color = color.strip().lower()
    if color in _NAMED_COLORS:
        return _NAMED_COLORS[color]
    if color.startswith("rgb"):
        match = _RGB_RE.findall(color)
        if len(match) >= 3:
            r, g, b = (min(255, int(v)) for v in match[:3])
            return f"#{r:02x}{g:02x}{b:02x}"
    if color.startswith("#") and len(color) == 4:
        return "#" + "".join(c * 2 for c in color[1:])
    return color


def parse_rgb(color: str) -> tuple[int, int, int] | None:
    """(r, g, b) for a parseable color, else None."""
    hex_color = normalize_color(color)
    if not hex_color.startswith("#") or len(hex_color) != 7:
        return None
    try:
        return (int(hex_color[1:3], 16), int(hex_color[3:5], 16), int(hex_color[5:7], 16))
    except ValueError:
        return None


def color_similarity(color1: str, color2: str) -> float:
    """1.0 for identical colors down to 0.0 for black vs white.

    Unparseable colors are only similar to an identical string.
    """
    if normalize_color(color1) == normalize_color(color2):
        return 1.0
    a = parse_rgb(color1)
    b = parse_rgb(color2)
    if a is None or b is None:
        return 0.0
    return max(0.0, 1 - math.dist(a, b) / _MAX_RGB_DISTANCE)
