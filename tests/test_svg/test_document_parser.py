"""Tests for SVG document parsing: shapes, inheritance and baked transforms."""

from __future__ import annotations

import pytest

from vectoredit.errors import MalformedDocument
from vectoredit.models.svg_document import Close, CubicBezier, LineTo, MoveTo, Point, ViewBox
from vectoredit.svg.parser import parse_svg, parse_view_box
from tests.conftest import BAR_CHART_SVG, CIRCLE_SVG, FILLED_RECT_SVG, HOME_SVG, SMILEY_SVG


class TestShapes:
    def test_circle_becomes_four_cubics(self, circle_svg):
        doc = parse_svg(circle_svg)
        assert len(doc.paths) == 1
        segs = doc.paths[0].segments
        assert segs[0] == MoveTo(Point(12, 2), Point(12, 2))
        assert [type(s) for s in segs[1:]] == [CubicBezier] * 4 + [Close]
        assert segs[4].end == Point(12, 2)

    def test_default_ids_follow_document_order(self, smiley_svg):
        doc = parse_svg(smiley_svg)
        assert [p.id for p in doc.paths] == ["circle-0", "circle-1", "circle-2", "path-3"]

    def test_lines(self):
        doc = parse_svg(BAR_CHART_SVG)
        assert len(doc.paths) == 3
        assert doc.paths[0].segments == (
            MoveTo(Point(18, 20), Point(18, 20)),
            LineTo(Point(18, 20), Point(18, 10)),
        )

    def test_rect_and_circle_fills(self):
        doc = parse_svg(FILLED_RECT_SVG)
        assert [p.fill for p in doc.paths] == ["#4ECDC4", "#FF6B6B"]
        rect = doc.paths[0]
        assert rect.segments[0].start == Point(10, 10)
        assert isinstance(rect.segments[-1], Close)

    def test_rounded_rect_uses_arcs(self):
        svg = '<svg xmlns="http://www.w3.org/2000/svg"><rect width="10" height="10" rx="2"/></svg>'
        segs = parse_svg(svg).paths[0].segments
        assert segs[0].start == Point(2, 0)
        assert sum(isinstance(s, CubicBezier) for s in segs) == 4

    def test_polygon_is_closed_polyline_is_open(self):
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<polygon points="0,0 10,0 10,10"/>'
            '<polyline points="0 0 5 5 10 0"/>'
            "</svg>"
        )
        polygon, polyline = parse_svg(svg).paths
        assert isinstance(polygon.segments[-1], Close)
        assert not isinstance(polyline.segments[-1], Close)
        assert len(polyline.segments) == 3

    def test_arcs_are_normalized(self):
        doc = parse_svg(HOME_SVG)
        for path in doc.paths:
            assert all(s.command != "A" for s in path.segments)


class TestInheritance:
    def test_group_transform_is_baked(self, grouped_svg):
        doc = parse_svg(grouped_svg)
        shifted = doc.get_path("shifted")
        assert shifted.transform is None
        assert shifted.segments[0].start == Point(100, 0)
        assert shifted.segments[1].end == Point(110, 0)

    def test_nested_transforms_compose_outermost_first(self, grouped_svg):
        scaled = parse_svg(grouped_svg).get_path("scaled")
        assert scaled.segments[0].start == Point(102, 2)
        assert scaled.segments[1].end == Point(110, 2)

    def test_fill_inherited_from_group(self, grouped_svg):
        doc = parse_svg(grouped_svg)
        assert doc.get_path("shifted").fill == "#123456"
        assert doc.get_path("scaled").fill == "#123456"
        assert doc.get_path("plain").fill is None

    def test_inline_style(self, grouped_svg):
        plain = parse_svg(grouped_svg).get_path("plain")
        assert plain.stroke == "black"
        assert plain.stroke_width == 3.0

    def test_defs_are_skipped(self, grouped_svg):
        ids = [p.id for p in parse_svg(grouped_svg).paths]
        assert ids == ["shifted", "scaled", "plain"]

    def test_root_presentation_attributes(self):
        path = parse_svg(CIRCLE_SVG).paths[0]
        assert path.fill == "none"
        assert path.stroke == "currentColor"
        assert path.stroke_width == 2.0


class TestCanvas:
    def test_size_and_viewbox(self, grouped_svg):
        doc = parse_svg(grouped_svg)
        assert (doc.width, doc.height) == (200, 100)
        assert doc.view_box == ViewBox(0, 0, 200, 100)

    def test_size_falls_back_to_viewbox(self):
        doc = parse_svg(FILLED_RECT_SVG)
        assert (doc.width, doc.height) == (100, 100)

    def test_size_falls_back_to_default(self):
        doc = parse_svg('<svg xmlns="http://www.w3.org/2000/svg"><path d="M0 0 L1 1"/></svg>')
        assert (doc.width, doc.height) == (400, 400)
        assert doc.view_box is None

    def test_malformed_viewbox_ignored(self):
        assert parse_view_box("0 0 24") is None
        assert parse_view_box("0,0,24,24") == ViewBox(0, 0, 24, 24)


class TestMalformed:
    def test_not_xml(self):
        with pytest.raises(MalformedDocument):
            parse_svg("this is < not xml")

    def test_no_svg_root(self):
        with pytest.raises(MalformedDocument):
            parse_svg("<html><body/></html>")

    def test_nested_svg_root_is_found(self):
        doc = parse_svg(f"<div>{SMILEY_SVG}</div>")
        assert len(doc.paths) == 4
