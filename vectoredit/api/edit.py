"""POST /api/path/*: control-point listing, edits, smart heal and smoothing."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from vectoredit.api.document import summarize
from vectoredit.dependencies import check_path_ids, find_path, load_document
from vectoredit.engine.heal import heal_path_multiple, optimal_heal_count
from vectoredit.engine.smoothing import smooth_path
from vectoredit.errors import InvalidCommand
from vectoredit.models.requests import EditRequest, PathDataRequest, SmartHealRequest, SmoothRequest
from vectoredit.models.responses import ControlPointModel, ControlPointsResponse, EditResponse, SvgResponse
from vectoredit.models.svg_document import Path
from vectoredit.svg.editor import apply_edits, extract_control_points
from vectoredit.svg.parser import parse_path_data
from vectoredit.svg.serializer import export_svg

router = APIRouter(prefix="/path")
logger = logging.getLogger(__name__)


@router.post("/control-points", response_model=ControlPointsResponse)
async def control_points(req: PathDataRequest) -> ControlPointsResponse:
    try:
        segments = parse_path_data(req.d, strict=True)
    except InvalidCommand as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    path = Path(id=req.path_id, segments=tuple(segments))
    return ControlPointsResponse(
        points=[
            ControlPointModel(
                path_id=cp.path_id,
                segment_index=cp.segment_index,
                point_index=cp.point_index,
                x=cp.point.x,
                y=cp.point.y,
                kind=cp.kind.value,
            )
            for cp in extract_control_points(path)
        ],
        segment_count=len(segments),
    )


@router.post("/edit", response_model=EditResponse)
async def edit_path(req: EditRequest) -> EditResponse:
    doc = load_document(req.svg)
    path = find_path(doc, req.plan.path_id)
    try:
        edited = apply_edits(path, req.plan)
    except (IndexError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    logger.info("Applied %d edits to %s", len(req.plan.operations), path.id)
    return EditResponse(svg=export_svg(doc.replace_path(edited)), path=summarize(edited))


@router.post("/smart-heal", response_model=EditResponse)
async def smart_heal(req: SmartHealRequest) -> EditResponse:
    doc = load_document(req.svg)
    path = find_path(doc, req.path_id)
    count = optimal_heal_count(path) if req.count is None else req.count
    healed = heal_path_multiple(path, count)
    return EditResponse(svg=export_svg(doc.replace_path(healed)), path=summarize(healed))


@router.post("/smooth", response_model=SvgResponse)
async def smooth(req: SmoothRequest) -> SvgResponse:
    doc = load_document(req.svg)
    if req.path_ids is not None:
        check_path_ids(doc, req.path_ids)
    selected = set(req.path_ids) if req.path_ids is not None else None
    indices = set(req.segment_indices) if req.segment_indices is not None else None
    result = doc.with_paths(
        [
            smooth_path(p, req.smoothness, req.convert_lines, indices) if selected is None or p.id in selected else p
            for p in doc.paths
        ]
    )
    return SvgResponse(svg=export_svg(result), path_count=len(result.paths))
