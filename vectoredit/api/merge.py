"""POST /api/merge: merge selected paths, or group paths by color / proximity."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from vectoredit.dependencies import check_path_ids, load_document
from vectoredit.engine.grouping import group_paths_by_color, group_paths_by_proximity
from vectoredit.engine.merge import merge_selected_paths, merge_similar_paths
from vectoredit.errors import InsufficientInput
from vectoredit.models.requests import GroupRequest, MergeRequest
from vectoredit.models.responses import GroupResponse, MergeResponse
from vectoredit.svg.serializer import export_svg

router = APIRouter(prefix="/merge")

_DEFAULT_COLOR_THRESHOLD = 0.95
_DEFAULT_PROXIMITY_THRESHOLD = 10.0


@router.post("", response_model=MergeResponse)
async def merge(req: MergeRequest) -> MergeResponse:
    doc = load_document(req.svg)
    check_path_ids(doc, req.path_ids)
    try:
        merged = merge_selected_paths(
            doc,
            req.path_ids,
            fill_color=req.fill_color,
            close_open_paths=req.close_open_paths,
            simplify_tolerance=req.simplify_tolerance,
        )
    except InsufficientInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return MergeResponse(
        svg=export_svg(merged),
        merged_count=len(doc.paths) - len(merged.paths),
        path_count=len(merged.paths),
    )


@router.post("/group", response_model=GroupResponse)
async def group(req: GroupRequest) -> GroupResponse:
    doc = load_document(req.svg)
    paths = list(doc.paths)

    if req.mode == "proximity":
        threshold = req.threshold if req.threshold is not None else _DEFAULT_PROXIMITY_THRESHOLD
        groups = group_paths_by_proximity(paths, threshold)
        return GroupResponse(groups=[[p.id for p in g] for g in groups])

    threshold = req.threshold if req.threshold is not None else _DEFAULT_COLOR_THRESHOLD
    groups = group_paths_by_color(paths, threshold)
    response = GroupResponse(groups=[[p.id for p in g] for g in groups])
    if req.merge:
        merged, count = merge_similar_paths(doc, threshold)
        response.svg = export_svg(merged)
        response.merged_count = count
    return response
