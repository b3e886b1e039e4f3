"""Tests for the HTTP API."""

from __future__ import annotations

from fastapi.testclient import TestClient

from vectoredit.config import Settings
from vectoredit.dependencies import get_settings
from vectoredit.main import app
from tests.conftest import FILLED_RECT_SVG, GROUPED_SVG, PALETTE_SVG, SMILEY_SVG, TRACED_SVG


client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["stages_registered"] == 6


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def test_parse_document():
    response = client.post("/api/document/parse", json={"svg": FILLED_RECT_SVG})
    assert response.status_code == 200
    data = response.json()
    assert data["width"] == 100
    assert data["view_box"] == [0, 0, 100, 100]
    assert [p["id"] for p in data["paths"]] == ["rect-0", "circle-1"]
    assert data["paths"][0]["closed"] is True
    assert data["paths"][0]["fill"] == "#4ECDC4"
    assert data["paths"][0]["d"] == "M 10 10 L 90 10 L 90 90 L 10 90 Z"


def test_parse_malformed():
    response = client.post("/api/document/parse", json={"svg": "<not-svg"})
    assert response.status_code == 422


def test_export_document():
    response = client.post("/api/document/export", json={"svg": SMILEY_SVG})
    assert response.status_code == 200
    data = response.json()
    assert data["path_count"] == 4
    assert '<path id="circle-0"' in data["svg"]


def test_bake_document():
    response = client.post("/api/document/bake", json={"svg": GROUPED_SVG})
    assert response.status_code == 200
    svg = response.json()["svg"]
    assert "transform=" not in svg
    assert 'd="M 100 0 L 110 0 L 110 10 Z"' in svg


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------

def test_control_points():
    response = client.post("/api/path/control-points", json={"d": "M 0 0 L 10 0 C 10 5 5 10 0 10"})
    assert response.status_code == 200
    data = response.json()
    assert data["segment_count"] == 3
    assert len(data["points"]) == 6
    assert data["points"][3] == {
        "path_id": "path",
        "segment_index": 2,
        "point_index": 1,
        "x": 10,
        "y": 5,
        "kind": "control",
    }


def test_control_points_invalid_data():
    response = client.post("/api/path/control-points", json={"d": "M 0 0 L 10"})
    assert response.status_code == 422


def _edit(plan):
    return client.post("/api/path/edit", json={"svg": GROUPED_SVG, "plan": plan})


def test_edit_path():
    response = _edit(
        {"path_id": "plain", "operations": [{"action": "move", "segment_index": 1, "point_index": -1, "x": 5, "y": 5}]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["path"]["d"] == "M 0 0 L 5 5"
    assert 'd="M 0 0 L 5 5"' in data["svg"]


def test_edit_unknown_path():
    response = _edit({"path_id": "missing", "operations": []})
    assert response.status_code == 404


def test_edit_bad_index():
    response = _edit({"path_id": "plain", "operations": [{"action": "insert", "segment_index": 9}]})
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------

def test_simplify_document():
    response = client.post("/api/simplify", json={"svg": TRACED_SVG, "tolerance_pct": 0.25})
    assert response.status_code == 200
    data = response.json()
    assert data["segments_before"] == 208
    assert data["segments_after"] < 30
    assert data["paths_simplified"] == 1


def test_simplify_selected_paths():
    response = client.post("/api/simplify", json={"svg": TRACED_SVG, "path_ids": ["square"]})
    assert response.status_code == 200
    assert response.json()["segments_after"] == 208


def test_simplify_unknown_path():
    response = client.post("/api/simplify", json={"svg": TRACED_SVG, "path_ids": ["nope"]})
    assert response.status_code == 404


def test_simplify_rejects_zero_tolerance():
    response = client.post("/api/simplify", json={"svg": TRACED_SVG, "tolerance_pct": 0})
    assert response.status_code == 422


def test_simplify_explicit_values_override_settings():
    explicit = {"svg": TRACED_SVG, "tolerance_pct": 0.25, "corner_angle": 30}
    baseline = client.post("/api/simplify", json=explicit).json()

    app.dependency_overrides[get_settings] = lambda: Settings(default_tolerance_pct=5.0, default_corner_angle=80)
    try:
        overridden = client.post("/api/simplify", json=explicit).json()
    finally:
        app.dependency_overrides.clear()

    assert overridden == baseline


def test_simplify_omitted_values_use_settings():
    explicit = client.post("/api/simplify", json={"svg": TRACED_SVG, "tolerance_pct": 0.25}).json()

    app.dependency_overrides[get_settings] = lambda: Settings(default_tolerance_pct=0.25)
    try:
        defaulted = client.post("/api/simplify", json={"svg": TRACED_SVG}).json()
    finally:
        app.dependency_overrides.clear()

    assert defaulted == explicit


def test_simplify_without_smooth_joins():
    response = client.post("/api/simplify", json={"svg": TRACED_SVG, "tolerance_pct": 0.25, "smooth_joins": False})
    assert response.status_code == 200
    assert response.json()["segments_after"] < 208


def test_heal():
    response = client.post("/api/simplify/heal", json={"svg": TRACED_SVG, "intensity": "strong"})
    assert response.status_code == 200
    data = response.json()
    assert data["segments_after"] < data["segments_before"]


def test_heal_unknown_intensity():
    response = client.post("/api/simplify/heal", json={"svg": TRACED_SVG, "intensity": "nuclear"})
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Merging and grouping
# ---------------------------------------------------------------------------

def test_merge():
    response = client.post("/api/merge", json={"svg": PALETTE_SVG, "path_ids": ["red", "blue"]})
    assert response.status_code == 200
    data = response.json()
    assert data["merged_count"] == 1
    assert data["path_count"] == 3
    assert 'id="red-merged"' in data["svg"]


def test_merge_needs_two_paths():
    response = client.post("/api/merge", json={"svg": PALETTE_SVG, "path_ids": ["red"]})
    assert response.status_code == 400


def test_merge_unknown_path():
    response = client.post("/api/merge", json={"svg": PALETTE_SVG, "path_ids": ["red", "green"]})
    assert response.status_code == 404


def test_group_by_color_and_merge():
    response = client.post("/api/merge/group", json={"svg": PALETTE_SVG, "merge": True})
    assert response.status_code == 200
    data = response.json()
    assert data["groups"] == [["red", "almost-red", "red-ish"]]
    assert data["merged_count"] == 2
    assert 'id="red-merged"' in data["svg"]


def test_group_by_proximity():
    response = client.post("/api/merge/group", json={"svg": PALETTE_SVG, "mode": "proximity"})
    assert response.status_code == 200
    assert len(response.json()["groups"]) == 4

    response = client.post("/api/merge/group", json={"svg": PALETTE_SVG, "mode": "proximity", "threshold": 21})
    assert response.json()["groups"] == [["red", "almost-red", "red-ish"], ["blue"]]


# ---------------------------------------------------------------------------
# ViewBox
# ---------------------------------------------------------------------------

def test_fit_viewbox():
    response = client.post("/api/viewbox/fit", json={"svg": FILLED_RECT_SVG, "padding": 5})
    assert response.status_code == 200
    assert 'viewBox="5 5 90 90"' in response.json()["svg"]


def test_square_viewbox():
    response = client.post("/api/viewbox/square", json={"svg": FILLED_RECT_SVG, "size": 48})
    assert response.status_code == 200
    data = response.json()
    assert 'viewBox="0 0 48 48"' in data["svg"]
    assert data["path_count"] == 2


# ---------------------------------------------------------------------------
# Smart heal, smoothing and analysis
# ---------------------------------------------------------------------------

POLYLINE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 40 40">
  <path id="zigzag" d="M0 0 L10 0 L20 10"/>
</svg>'''


def test_smart_heal_optimal_count():
    response = client.post("/api/path/smart-heal", json={"svg": TRACED_SVG, "path_id": "traced"})
    assert response.status_code == 200
    assert response.json()["path"]["segment_count"] == 62


def test_smart_heal_explicit_count():
    response = client.post("/api/path/smart-heal", json={"svg": TRACED_SVG, "path_id": "square", "count": 1})
    assert response.status_code == 200
    path = response.json()["path"]
    assert path["segment_count"] == 5
    assert path["d"].startswith("M 0 0 C ")


def test_smart_heal_unknown_path():
    response = client.post("/api/path/smart-heal", json={"svg": TRACED_SVG, "path_id": "nope"})
    assert response.status_code == 404


def test_smart_heal_rejects_zero_count():
    response = client.post("/api/path/smart-heal", json={"svg": TRACED_SVG, "path_id": "square", "count": 0})
    assert response.status_code == 422


def test_smooth_converts_lines():
    response = client.post("/api/path/smooth", json={"svg": POLYLINE_SVG, "convert_lines": True})
    assert response.status_code == 200
    assert 'd="M 0 0 C 0.9 0 ' in response.json()["svg"]


def test_smooth_leaves_lines_by_default():
    response = client.post("/api/path/smooth", json={"svg": POLYLINE_SVG})
    assert response.status_code == 200
    assert 'd="M 0 0 L 10 0 L 20 10"' in response.json()["svg"]


def test_smooth_unknown_path():
    response = client.post("/api/path/smooth", json={"svg": POLYLINE_SVG, "path_ids": ["nope"]})
    assert response.status_code == 404


def test_smooth_rejects_out_of_range_smoothness():
    response = client.post("/api/path/smooth", json={"svg": POLYLINE_SVG, "smoothness": 2})
    assert response.status_code == 422


def test_analyze_document():
    response = client.post("/api/document/analyze", json={"svg": TRACED_SVG})
    assert response.status_code == 200
    data = response.json()
    assert data["total_paths"] == 2
    assert data["total_points"] == 206
    assert data["estimated_file_size"] == len(TRACED_SVG.encode("utf-8"))
    assert data["optimal_file_size"] < data["estimated_file_size"]
    by_id = {p["id"]: p for p in data["paths"]}
    assert by_id["square"]["complexity"] == "optimal"
    assert by_id["traced"]["complexity"] == "disaster"
    assert any("Smart Heal" in r for r in by_id["traced"]["recommendations"])
