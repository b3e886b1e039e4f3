"""POST /api/document/*: parse, analyze, export and bake whole documents."""

from __future__ import annotations

from fastapi import APIRouter

from vectoredit.dependencies import load_document
from vectoredit.engine.analysis import analyze_document
from vectoredit.engine.simplify import is_path_closed
from vectoredit.models.requests import DocumentRequest
from vectoredit.models.responses import (
    AnalysisResponse,
    DocumentResponse,
    PathAnalysisModel,
    PathSummary,
    SvgResponse,
)
from vectoredit.models.svg_document import Path
from vectoredit.svg.serializer import export_svg
from vectoredit.svg.viewbox import bake_transforms

router = APIRouter(prefix="/document")


def summarize(path: Path) -> PathSummary:
    return PathSummary(
        id=path.id,
        d=path.d,
        segment_count=len(path.segments),
        closed=is_path_closed(path),
        fill=path.fill,
        stroke=path.stroke,
    )


@router.post("/parse", response_model=DocumentResponse)
async def parse_document(req: DocumentRequest) -> DocumentResponse:
    doc = load_document(req.svg)
    return DocumentResponse(
        width=doc.width,
        height=doc.height,
        view_box=list(doc.view_box.as_tuple()) if doc.view_box else None,
        paths=[summarize(p) for p in doc.paths],
    )


@router.post("/export", response_model=SvgResponse)
async def export_document(req: DocumentRequest) -> SvgResponse:
    """Re-emit the document with every shape as a <path>."""
    doc = load_document(req.svg)
    return SvgResponse(svg=export_svg(doc), path_count=len(doc.paths))


@router.post("/bake", response_model=SvgResponse)
async def bake_document(req: DocumentRequest) -> SvgResponse:
    doc = bake_transforms(load_document(req.svg))
    return SvgResponse(svg=export_svg(doc), path_count=len(doc.paths))


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze(req: DocumentRequest) -> AnalysisResponse:
    """Path health report; savings are estimated against the submitted SVG's size."""
    result = analyze_document(load_document(req.svg), actual_svg_bytes=len(req.svg.encode("utf-8")))
    return AnalysisResponse(
        total_points=result.total_points,
        total_paths=result.total_paths,
        estimated_file_size=result.estimated_file_size,
        optimal_file_size=result.optimal_file_size,
        savings_potential=result.savings_potential,
        average_complexity=result.average_complexity,
        health_percentage=result.health_percentage,
        paths=[
            PathAnalysisModel(
                id=path_id,
                point_count=a.point_count,
                path_length=a.path_length,
                point_density=a.point_density,
                complexity=a.complexity,
                estimated_size=a.estimated_size,
                recommendations=a.recommendations,
            )
            for path_id, a in result.path_analyses.items()
        ],
    )
