"""Tests for bounds, fit-to-content and square normalization."""

from __future__ import annotations

import pytest

from vectoredit.models.svg_document import Document, Path, Point, ViewBox
from vectoredit.svg.parser import parse_svg
from vectoredit.svg.viewbox import bake_transforms, bounding_box, fit_to_content, path_bounds, square_normalize
from tests.conftest import FILLED_RECT_SVG, SQUARE_D, make_path


def _doc(*paths: Path) -> Document:
    return Document(width=100, height=100, paths=tuple(paths))


class TestBounds:
    def test_bounding_box_includes_all_paths(self):
        assert bounding_box(parse_svg(FILLED_RECT_SVG)) == (10, 10, 90, 90)

    def test_bounds_include_handles(self):
        path = make_path("M 0 0 C 0 20 10 20 10 0")
        assert path_bounds(path) == (0, 0, 10, 20)

    def test_bounds_are_baked(self):
        path = make_path("M 0 0 L 10 10", transform="translate(5 5)")
        assert path_bounds(path) == (5, 5, 15, 15)

    def test_empty_document(self):
        assert bounding_box(_doc()) is None

    def test_bake_transforms(self):
        doc = _doc(make_path("M 0 0 L 10 10", transform="scale(2)"))
        baked = bake_transforms(doc)
        assert baked.paths[0].transform is None
        assert baked.paths[0].segments[1].end == Point(20, 20)


class TestFitToContent:
    def test_viewbox_moves_onto_content(self):
        doc = fit_to_content(parse_svg(FILLED_RECT_SVG), padding=5)
        assert doc.view_box == ViewBox(5, 5, 90, 90)
        assert (doc.width, doc.height) == (90, 90)

    def test_coordinates_do_not_move(self):
        original = parse_svg(FILLED_RECT_SVG)
        fitted = fit_to_content(original)
        assert [p.segments for p in fitted.paths] == [p.segments for p in original.paths]

    def test_degenerate_content_unchanged(self):
        doc = _doc(make_path("M 0 5 L 10 5"))
        assert fit_to_content(doc) is doc

    def test_empty_document_unchanged(self):
        doc = _doc()
        assert fit_to_content(doc, padding=3) is doc


class TestSquareNormalize:
    def test_square_content_fills_padded_box(self):
        doc = square_normalize(_doc(make_path(SQUARE_D)))
        assert doc.view_box == ViewBox(0, 0, 24, 24)
        assert (doc.width, doc.height) == (24, 24)
        assert bounding_box(doc) == pytest.approx((2, 2, 22, 22))

    def test_wide_content_is_centred_vertically(self):
        doc = square_normalize(_doc(make_path("M 0 0 L 100 0 L 100 50 L 0 50 Z")))
        assert bounding_box(doc) == pytest.approx((2, 7, 22, 17))

    def test_offsets_nudge_content(self):
        doc = square_normalize(_doc(make_path(SQUARE_D)), size=48, padding=4, offset_x=1, offset_y=-1)
        assert doc.view_box == ViewBox(0, 0, 48, 48)
        assert bounding_box(doc) == pytest.approx((5, 3, 45, 43))

    def test_horizontal_line_scales_by_width(self):
        doc = square_normalize(_doc(make_path("M 0 0 L 40 0")))
        xmin, ymin, xmax, ymax = bounding_box(doc)
        assert (xmin, xmax) == pytest.approx((2, 22))
        assert ymin == pytest.approx(12)
