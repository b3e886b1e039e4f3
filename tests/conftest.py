"""Shared test fixtures."""

from __future__ import annotations

import math

import pytest

from vectoredit.models.svg_document import Path
from vectoredit.svg.parser import parse_path_data


def circle_polygon_d(n: int = 200, r: float = 50.0, cx: float = 100.0, cy: float = 100.0) -> str:
    """A circle traced as n straight edges, ending back on its start, then closed."""
    pts = [(cx + r * math.cos(2 * math.pi * i / n), cy + r * math.sin(2 * math.pi * i / n)) for i in range(n)]
    parts = [f"M {pts[0][0]:.6f} {pts[0][1]:.6f}"]
    parts.extend(f"L {x:.6f} {y:.6f}" for x, y in pts[1:])
    parts.append(f"L {pts[0][0]:.6f} {pts[0][1]:.6f}")
    parts.append("Z")
    return " ".join(parts)


def collinear_d(n: int = 50) -> str:
    """n exactly collinear points along y = 2x."""
    parts = ["M 0 0"]
    parts.extend(f"L {i} {2 * i}" for i in range(1, n))
    return " ".join(parts)


def make_path(d: str, path_id: str = "p", **attrs) -> Path:
    return Path(id=path_id, segments=tuple(parse_path_data(d)), **attrs)


SQUARE_D = "M 0 0 L 100 0 L 100 100 L 0 100 L 0 0 Z"
CURVE_D = "M0,0 C0,20 30,20 30,0"
SHALLOW_CURVE_D = "M0,0 C10,0.1 20,0.1 30,0"
DIAGONAL_D = "M0,0 L10,10 L20,20 L30,30"
SQUARE_WITH_HOLE_D = (
    "M 0 0 L 100 0 L 100 100 L 0 100 L 0 0 Z "
    "M 25 25 L 25 75 L 75 75 L 75 25 L 25 25 Z"
)


# Sample SVGs

CIRCLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle cx="12" cy="12" r="10"/>
</svg>'''

SMILEY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle cx="12" cy="12" r="10"/>
  <circle cx="8" cy="9" r="1"/>
  <circle cx="16" cy="9" r="1"/>
  <path d="M8 14s1.5 2 4 2 4-2 4-2"/>
</svg>'''

HOME_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <path d="M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8"/>
  <path d="M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"/>
</svg>'''

BAR_CHART_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <line x1="18" x2="18" y1="20" y2="10"/>
  <line x1="12" x2="12" y1="20" y2="4"/>
  <line x1="6" x2="6" y1="20" y2="14"/>
</svg>'''

FILLED_RECT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <rect x="10" y="10" width="80" height="80" fill="#4ECDC4"/>
  <circle cx="50" cy="50" r="20" fill="#FF6B6B"/>
</svg>'''

GROUPED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100" viewBox="0 0 200 100">
  <g transform="translate(100 0)" fill="#123456">
    <path id="shifted" d="M0 0 L10 0 L10 10 Z"/>
    <g transform="scale(2)">
      <rect id="scaled" x="1" y="1" width="4" height="4"/>
    </g>
  </g>
  <path id="plain" d="M0 0 L10 0" stroke="black" style="stroke-width: 3"/>
  <defs><path id="hidden" d="M0 0 L1 1"/></defs>
</svg>'''

PALETTE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">
  <rect id="red" x="0" y="0" width="10" height="10" fill="#ff0000"/>
  <rect id="blue" x="50" y="50" width="10" height="10" fill="#0000ff"/>
  <rect id="almost-red" x="20" y="0" width="10" height="10" fill="#fe0101"/>
  <rect id="red-ish" x="40" y="0" width="10" height="10" fill="rgb(253, 2, 2)"/>
</svg>'''

TRACED_SVG = f'''<svg xmlns="http://www.w3.org/2000/svg" width="200" height="200" viewBox="0 0 200 200">
  <path id="traced" d="{circle_polygon_d()}" fill="#333333"/>
  <path id="square" d="{SQUARE_D}" fill="#999999"/>
</svg>'''


@pytest.fixture
def circle_svg() -> str:
    return CIRCLE_SVG


@pytest.fixture
def smiley_svg() -> str:
    return SMILEY_SVG


@pytest.fixture
def grouped_svg() -> str:
    return GROUPED_SVG


@pytest.fixture
def palette_svg() -> str:
    return PALETTE_SVG


@pytest.fixture
def square_path() -> Path:
    return make_path(SQUARE_D, "square")


@pytest.fixture
def circle_polygon_path() -> Path:
    return make_path(circle_polygon_d(), "traced")
